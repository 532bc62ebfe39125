"""Tests for function-location search and highlight resolution."""

import sys
from pathlib import Path

# Add parent directory to path to import EquipmentMapViewer module
sys.path.insert(0, str(Path(__file__).parent.parent))

from EquipmentMapViewer.core.markers import EquipmentItem, Marker
from EquipmentMapViewer.core.search import (
    EMPTY_HIGHLIGHT,
    FunctionLocationMatch,
    HighlightSet,
    find_function_locations,
    highlight_size,
    marker_pick_radius,
    resolve_highlights,
    search_highlights,
)


def _markers():
    return [
        Marker("m1", 10.0, 10.0, [EquipmentItem("P1", "Pump", "29-11-01")]),
        Marker("m2", 20.0, 20.0, [EquipmentItem("V1", "Valve", "29-12-01, 29-12-02")]),
        Marker("m3", 30.0, 30.0, [EquipmentItem("S1", "Sensor", "34-10-05"), EquipmentItem("S2", "Probe", "29-13")]),
        Marker("m4", 40.0, 40.0),
    ]


def _matches(n):
    return [FunctionLocationMatch(f"FL-{i}", f"m{i}", "") for i in range(n)]


def test_find_is_case_insensitive_substring():
    markers = [Marker("x", 0.0, 0.0, [EquipmentItem("P", "", "ab-12c")])]
    assert [m.marker_id for m in find_function_locations(markers, "B-12C")] == ["x"]


def test_find_orders_by_marker_then_item():
    matches = find_function_locations(_markers(), "29-1")
    assert [(m.marker_id, m.description) for m in matches] == [
        ("m1", "Pump"),
        ("m2", "Valve"),
        ("m3", "Probe"),
    ]


def test_blank_query_matches_nothing():
    assert find_function_locations(_markers(), "") == []
    assert find_function_locations(_markers(), "   ") == []


def test_single_match_is_primary_highlight():
    highlight = resolve_highlights(_matches(1))
    assert highlight == HighlightSet.single("m0")
    assert highlight.ids == ()
    assert highlight.contains("m0")


def test_up_to_limit_highlights_all():
    highlight = resolve_highlights(_matches(10), limit=10)
    assert highlight.primary == "m0"
    assert highlight.ids == tuple(f"m{i}" for i in range(10))


def test_above_limit_highlights_nothing():
    assert resolve_highlights(_matches(11), limit=10) == EMPTY_HIGHLIGHT
    assert resolve_highlights(_matches(4), limit=3).is_empty


def test_no_match_highlights_nothing():
    assert resolve_highlights([]).is_empty


def test_duplicate_marker_ids_are_collapsed():
    matches = [FunctionLocationMatch("A", "m1", ""), FunctionLocationMatch("B", "m1", ""), FunctionLocationMatch("C", "m2", "")]
    highlight = resolve_highlights(matches)
    assert highlight.primary == "m1"
    assert highlight.ids == ("m1", "m2")


def test_search_highlights():
    matches, highlight = search_highlights(_markers(), "34-10")
    assert len(matches) == 1
    assert highlight == HighlightSet.single("m3")


def test_picked_result_survives_marker_edits():
    picked = HighlightSet.single("m2")
    markers = _markers()
    markers[0] = markers[0].moved_to(15.0, 15.0)
    _, highlight = search_highlights(markers, "29-1", picked=picked)
    assert highlight is picked

    # dropped once the picked marker no longer matches
    markers[1] = Marker("m2", 20.0, 20.0, [EquipmentItem("V1", "Valve", "36-00")])
    _, highlight = search_highlights(markers, "29-1", picked=picked)
    assert highlight == HighlightSet(primary="m1", ids=("m1", "m3"))


def test_highlight_size():
    group = HighlightSet(primary="a", ids=("a", "b"))
    assert highlight_size("a", HighlightSet.single("a")) == 3.0
    assert highlight_size("a", group) == 2.5
    assert highlight_size("b", group) == 2.0
    assert highlight_size("c", group) == 1.0
    assert highlight_size("c", EMPTY_HIGHLIGHT) == 1.0


def test_pick_radius_follows_drawn_size():
    radius = marker_pick_radius(HighlightSet(primary="a", ids=("a", "b")), 8.0, 5.0)
    assert radius(Marker("a", 0.0, 0.0)) == 12.5
    assert radius(Marker("b", 0.0, 0.0)) == 10.0
    assert radius(Marker("c", 0.0, 0.0)) == 8.0
