"""Tests for marker import/export (JSON and CSV)."""

import json
import sys
from pathlib import Path

import pytest

# Add parent directory to path to import EquipmentMapViewer module
sys.path.insert(0, str(Path(__file__).parent.parent))

from EquipmentMapViewer.core.markers import EquipmentItem, Marker
from EquipmentMapViewer.core.marker_io import (
    MarkerFileError,
    is_marker_file,
    load_markers,
    markers_to_polars,
    save_markers,
)


def _markers():
    return [
        Marker(
            "m1",
            12.5,
            40.0,
            [
                EquipmentItem("P1", "Hydraulic pump", "29-11-01, 29-11-02", ["P1A", "P1B"], quantity=2),
                EquipmentItem("F3", "Filter", "29-11-05"),
            ],
            zone="Bay 1",
        ),
        Marker("m2", 80.0, 5.0),
    ]


def test_json_round_trip(tmp_path):
    path = tmp_path / "layout.json"
    save_markers(path, _markers(), image_name="hyd.png")
    markers, image_name = load_markers(path)
    assert image_name == "hyd.png"
    assert markers == _markers()


def test_json_bare_list_and_clamping(tmp_path):
    path = tmp_path / "bare.json"
    path.write_text(json.dumps([{"id": "a", "x": 120, "y": -5, "equipment": [{"partNumber": "q1"}]}]), encoding="utf-8")
    markers, image_name = load_markers(path)
    assert image_name is None
    assert markers[0].position == (100.0, 0.0)
    assert markers[0].payload[0].part_number == "Q1"


def test_json_errors(tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(MarkerFileError):
        load_markers(broken)

    missing_pos = tmp_path / "missing.json"
    missing_pos.write_text(json.dumps({"markers": [{"id": "a"}]}), encoding="utf-8")
    with pytest.raises(MarkerFileError):
        load_markers(missing_pos)

    with pytest.raises(MarkerFileError):
        load_markers(tmp_path / "does-not-exist.json")


def test_csv_round_trip(tmp_path):
    path = tmp_path / "layout.csv"
    save_markers(path, _markers())
    markers, image_name = load_markers(path)
    assert image_name is None
    assert markers == _markers()


def test_csv_flattens_one_row_per_item():
    df = markers_to_polars(_markers())
    assert df.height == 3
    assert df["marker_id"].to_list() == ["m1", "m1", "m2"]
    assert df["alternate_part_numbers"].to_list()[0] == "P1A;P1B"


def test_csv_without_ids_and_missing_columns(tmp_path):
    path = tmp_path / "plain.csv"
    path.write_text("x,y,part_number,function_location\n10,20,p9,21-51\n30,40,,\n", encoding="utf-8")
    markers, _ = load_markers(path)
    assert len(markers) == 2
    assert markers[0].payload[0].part_number == "P9"
    assert markers[1].payload == []

    bad = tmp_path / "bad.csv"
    bad.write_text("marker_id,x\na,1\n", encoding="utf-8")
    with pytest.raises(MarkerFileError):
        load_markers(bad)


def test_csv_invalid_position(tmp_path):
    path = tmp_path / "pos.csv"
    path.write_text("marker_id,x,y\na,left,3\n", encoding="utf-8")
    with pytest.raises(MarkerFileError):
        load_markers(path)


def test_unsupported_extension(tmp_path):
    with pytest.raises(MarkerFileError):
        load_markers(tmp_path / "layout.xml")
    with pytest.raises(MarkerFileError):
        save_markers(tmp_path / "layout.xml", _markers())
    assert is_marker_file("a/B.JSON")
    assert not is_marker_file("a/b.png")
