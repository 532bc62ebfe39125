"""Tests for markers, equipment payload and intent application."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path to import EquipmentMapViewer module
sys.path.insert(0, str(Path(__file__).parent.parent))

from EquipmentMapViewer.core.config import VIEWER_CONFIG
from EquipmentMapViewer.core.intents import MarkerAdded, MarkerDeleteRequested, MarkerMoved, MarkerSelected
from EquipmentMapViewer.core.markers import (
    EquipmentItem,
    Marker,
    apply_intents,
    build_equipment_item,
    find_known_item,
    find_marker_index,
    hit_test,
    known_part_numbers,
    split_function_locations,
)
from EquipmentMapViewer.core.viewport import ImageGeometry, ViewportState, ViewportTransform

GEOMETRY = ImageGeometry(1000.0, 800.0)


def test_equipment_item_normalizes_part_numbers():
    item = EquipmentItem(" abc-123 ", alternate_part_numbers=["x1", "ABC-123", "", "X1", "y2 "])
    assert item.part_number == "ABC-123"
    assert item.alternate_part_numbers == ["X1", "Y2"]
    assert item.all_part_numbers == ["ABC-123", "X1", "Y2"]


def test_function_locations_are_comma_separated():
    item = EquipmentItem("P1", function_location="21-51-01, 21-51-02,,  ")
    assert item.function_locations == ["21-51-01", "21-51-02"]
    assert split_function_locations(None) == []


def test_equipment_item_from_dict_accepts_both_key_styles():
    camel = EquipmentItem.from_dict(
        {"partNumber": "p1", "functionLocation": "33-10", "alternatePartNumbers": ["p2"], "quantity": "2"}
    )
    snake = EquipmentItem.from_dict(
        {"part_number": "P1", "function_location": "33-10", "alternate_part_numbers": "p2"}
    )
    assert camel.part_number == snake.part_number == "P1"
    assert camel.alternate_part_numbers == snake.alternate_part_numbers == ["P2"]
    assert camel.quantity == 2
    assert snake.quantity is None


def test_marker_dict_round_trip():
    marker = Marker("m1", 12.5, 40.0, [EquipmentItem("P1", "Pump", "29-10", ["P1A"], quantity=1)], zone="MLG")
    data = marker.to_dict()
    assert data["x"] == 12.5 and data["zone"] == "MLG"
    assert data["equipment"][0]["partNumber"] == "P1"
    assert Marker.from_dict(data) == marker


def test_marker_from_dict_clamps_and_generates_id():
    marker = Marker.from_dict({"x": -3, "y": 140})
    assert marker.position == (0.0, 100.0)
    assert marker.id
    with pytest.raises(KeyError):
        Marker.from_dict({"x": 1})


def test_moved_to_clamps_and_copies():
    m = Marker("a", 10.0, 10.0)
    moved = m.moved_to(150.0, -2.0)
    assert moved.position == (100.0, 0.0)
    assert m.position == (10.0, 10.0)


def test_hit_test_radius_and_nearest():
    t = ViewportTransform(VIEWER_CONFIG)
    markers = [Marker("a", 10.0, 10.0), Marker("b", 11.0, 10.0)]  # screen (100, 80) and (110, 80)
    assert hit_test(markers, (102.0, 80.0), t, GEOMETRY, 8.0) == 0
    assert hit_test(markers, (108.0, 81.0), t, GEOMETRY, 8.0) == 1
    assert hit_test(markers, (100.0, 100.0), t, GEOMETRY, 8.0) is None
    assert hit_test(markers, (100.0, 80.0), t, ImageGeometry(0.0, 0.0), 8.0) is None


def test_hit_test_topmost_wins_on_tie():
    t = ViewportTransform(VIEWER_CONFIG)
    markers = [Marker("a", 50.0, 50.0), Marker("b", 50.0, 50.0)]
    assert hit_test(markers, (500.0, 400.0), t, GEOMETRY, 8.0) == 1


def test_hit_test_radius_is_in_screen_pixels():
    t = ViewportTransform(VIEWER_CONFIG, ViewportState(4.0, 0.0, 0.0))
    markers = [Marker("a", 10.0, 10.0)]  # screen (400, 320) at scale 4
    assert hit_test(markers, (406.0, 320.0), t, GEOMETRY, 8.0) == 0
    assert hit_test(markers, (410.0, 320.0), t, GEOMETRY, 8.0) is None


def test_hit_test_per_marker_radius():
    t = ViewportTransform(VIEWER_CONFIG)
    markers = [Marker("small", 10.0, 10.0), Marker("big", 50.0, 50.0)]  # screen (100, 80) and (500, 400)
    radius = lambda m: 15.0 if m.id == "big" else 8.0
    assert hit_test(markers, (512.0, 400.0), t, GEOMETRY, radius) == 1
    assert hit_test(markers, (512.0, 400.0), t, GEOMETRY, 8.0) is None
    assert hit_test(markers, (112.0, 80.0), t, GEOMETRY, radius) is None


def test_apply_intents():
    markers = [Marker("a", 10.0, 10.0), Marker("b", 20.0, 20.0), Marker("c", 30.0, 30.0)]
    result = apply_intents(
        markers,
        [MarkerMoved(0, 55.0, 120.0), MarkerDeleteRequested(1), MarkerSelected(0), MarkerMoved(9, 1.0, 1.0)],
    )
    assert [m.id for m in result] == ["a", "c"]
    assert result[0].position == (55.0, 100.0)
    # input untouched
    assert [m.id for m in markers] == ["a", "b", "c"]
    assert markers[0].position == (10.0, 10.0)


def test_apply_intents_added_needs_factory():
    assert apply_intents([], [MarkerAdded(5.0, 6.0)]) == []
    result = apply_intents([], [MarkerAdded(5.0, 6.0)], lambda x, y: Marker("new", x, y))
    assert result == [Marker("new", 5.0, 6.0)]


def test_find_marker_index():
    markers = [Marker("a", 0.0, 0.0), Marker("b", 0.0, 0.0)]
    assert find_marker_index(markers, "b") == 1
    assert find_marker_index(markers, "z") is None


def test_build_equipment_item():
    item = build_equipment_item(["", " p1", "p2", "P1"], "  Hydraulic pump ", ["29-11", " ", "29-12 "])
    assert item.part_number == "P1"
    assert item.alternate_part_numbers == ["P2"]
    assert item.description == "Hydraulic pump"
    assert item.function_location == "29-11, 29-12"
    with pytest.raises(ValueError):
        build_equipment_item(["", "  "], "Pump", [])


def test_known_items_lookup():
    markers = [
        Marker("a", 1.0, 1.0, [EquipmentItem("P1", "Pump", alternate_part_numbers=["P1A"])]),
        Marker("b", 2.0, 2.0, [EquipmentItem("V7", "Valve")]),
    ]
    assert find_known_item(markers, "p1a").description == "Pump"
    assert find_known_item(markers, "nope") is None
    assert find_known_item(markers, "") is None
    assert known_part_numbers(markers) == ["P1", "P1A", "V7"]
