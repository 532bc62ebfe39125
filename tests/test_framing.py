"""Tests for auto-framing of highlighted markers."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path to import EquipmentMapViewer module
sys.path.insert(0, str(Path(__file__).parent.parent))

from EquipmentMapViewer.core.config import EDITOR_CONFIG, VIEWER_CONFIG, ViewportConfig
from EquipmentMapViewer.core.framing import auto_frame, bounding_box, frame_highlights
from EquipmentMapViewer.core.markers import Marker
from EquipmentMapViewer.core.search import EMPTY_HIGHLIGHT, HighlightSet
from EquipmentMapViewer.core.viewport import ImageGeometry, ViewportTransform

VIEWPORT = (1000.0, 800.0)


def _screen_of(state, point):
    return (state.translate_x + point[0] * state.scale, state.translate_y + point[1] * state.scale)


def test_single_target_zooms_in_and_centers():
    state = auto_frame([(500.0, 500.0)], VIEWPORT, VIEWER_CONFIG)
    assert state.scale == 2.0
    assert _screen_of(state, (500.0, 500.0)) == pytest.approx((500.0, 400.0))


def test_single_target_scale_is_clamped():
    cfg = ViewportConfig(scale_min=0.5, scale_max=1.5)
    state = auto_frame([(10.0, 10.0)], VIEWPORT, cfg)
    assert state.scale == 1.5


def test_multi_target_fits_bounding_box():
    state = auto_frame([(100.0, 100.0), (900.0, 700.0)], VIEWPORT, VIEWER_CONFIG, padding=100.0)
    # min(1000 / (800 + 200), 800 / (600 + 200)) = 1.0
    assert state.scale == pytest.approx(1.0)
    assert _screen_of(state, (500.0, 400.0)) == pytest.approx((500.0, 400.0))


def test_multi_target_scale_clamped_to_frame_bounds():
    far = auto_frame([(0.0, 0.0), (20000.0, 20000.0)], VIEWPORT, VIEWER_CONFIG)
    assert far.scale == 0.5
    near = auto_frame([(500.0, 400.0), (510.0, 405.0)], VIEWPORT, VIEWER_CONFIG, padding=0.0)
    assert near.scale == 2.0
    assert _screen_of(near, (505.0, 402.5)) == pytest.approx((500.0, 400.0))


def test_degenerate_box_uses_single_target_policy():
    state = auto_frame([(300.0, 300.0), (300.0, 300.0)], VIEWPORT, EDITOR_CONFIG, padding=0.0)
    assert state.scale == 2.0
    assert _screen_of(state, (300.0, 300.0)) == pytest.approx((500.0, 400.0))


def test_no_targets():
    assert auto_frame([], VIEWPORT, VIEWER_CONFIG) is None


def test_bounding_box():
    assert bounding_box([(3.0, 9.0), (-1.0, 4.0), (7.0, 5.0)]) == (-1.0, 4.0, 7.0, 9.0)
    with pytest.raises(ValueError):
        bounding_box([])


def _markers():
    return [
        Marker("a", 50.0, 62.5),
        Marker("b", 10.0, 12.5),
        Marker("c", 90.0, 87.5),
    ]


def test_frame_single_highlight_uses_marker_position():
    geometry = ImageGeometry(1000.0, 800.0)
    state = frame_highlights(_markers(), HighlightSet.single("a"), geometry, VIEWPORT, VIEWER_CONFIG)
    t = ViewportTransform(VIEWER_CONFIG, state)
    assert state.scale == 2.0
    assert t.image_percent_to_screen((50.0, 62.5), geometry) == pytest.approx((500.0, 400.0))


def test_frame_multi_highlight_accounts_for_image_origin():
    geometry = ImageGeometry(1000.0, 800.0, left=50.0, top=20.0)
    highlight = HighlightSet(primary="b", ids=("b", "c"))
    state = frame_highlights(_markers(), highlight, geometry, VIEWPORT, VIEWER_CONFIG)
    t = ViewportTransform(VIEWER_CONFIG, state)
    b = t.image_percent_to_screen((10.0, 12.5), geometry)
    c = t.image_percent_to_screen((90.0, 87.5), geometry)
    # bbox center lands on the viewport center
    assert ((b[0] + c[0]) / 2.0, (b[1] + c[1]) / 2.0) == pytest.approx((500.0, 400.0))


def test_frame_highlights_skips_unknown_ids():
    geometry = ImageGeometry(1000.0, 800.0)
    state = frame_highlights(_markers(), HighlightSet(primary="zz", ids=("zz", "a")), geometry, VIEWPORT, VIEWER_CONFIG)
    assert state.scale == 2.0
    assert frame_highlights(_markers(), HighlightSet.single("zz"), geometry, VIEWPORT, VIEWER_CONFIG) is None


def test_frame_highlights_nothing_to_do():
    geometry = ImageGeometry(1000.0, 800.0)
    assert frame_highlights(_markers(), EMPTY_HIGHLIGHT, geometry, VIEWPORT, VIEWER_CONFIG) is None
    assert frame_highlights(_markers(), HighlightSet.single("a"), ImageGeometry(0.0, 0.0), VIEWPORT, VIEWER_CONFIG) is None


def test_framing_does_not_touch_markers():
    markers = _markers()
    snapshot = [Marker(m.id, m.x_percent, m.y_percent) for m in markers]
    geometry = ImageGeometry(1000.0, 800.0)
    first = frame_highlights(markers, HighlightSet(primary="a", ids=("a", "b")), geometry, VIEWPORT, VIEWER_CONFIG)
    second = frame_highlights(markers, HighlightSet(primary="a", ids=("a", "b")), geometry, VIEWPORT, VIEWER_CONFIG)
    assert markers == snapshot
    assert first == second
