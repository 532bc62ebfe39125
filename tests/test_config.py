"""Tests for ViewportConfig validation and presets."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path to import EquipmentMapViewer module
sys.path.insert(0, str(Path(__file__).parent.parent))

from EquipmentMapViewer.core.config import EDITOR_CONFIG, VIEWER_CONFIG, ViewportConfig


def test_presets():
    assert (EDITOR_CONFIG.scale_min, EDITOR_CONFIG.scale_max) == (0.5, 3.0)
    assert (VIEWER_CONFIG.scale_min, VIEWER_CONFIG.scale_max) == (0.5, 5.0)
    assert VIEWER_CONFIG.highlight_limit == 10


def test_clamp_scale():
    assert EDITOR_CONFIG.clamp_scale(0.1) == 0.5
    assert EDITOR_CONFIG.clamp_scale(9.0) == 3.0
    assert EDITOR_CONFIG.clamp_scale(1.7) == 1.7


def test_frame_scale_bounds_intersects_zoom_range():
    assert VIEWER_CONFIG.frame_scale_bounds() == (0.5, 2.0)
    narrow = ViewportConfig(scale_min=0.8, scale_max=1.5)
    assert narrow.frame_scale_bounds() == (0.8, 1.5)


def test_frame_scale_bounds_without_overlap_uses_zoom_range():
    cfg = ViewportConfig(scale_min=3.0, scale_max=5.0)
    assert cfg.frame_scale_bounds() == (3.0, 5.0)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"scale_min": 0.0},
        {"scale_min": 4.0, "scale_max": 2.0},
        {"wheel_step": 0.0},
        {"frame_padding": -1.0},
        {"highlight_limit": 0},
        {"frame_scale_min": 3.0, "frame_scale_max": 1.0},
    ],
)
def test_invalid_config_raises(kwargs):
    with pytest.raises(ValueError):
        ViewportConfig(**kwargs)


def test_with_overrides_validates():
    cfg = VIEWER_CONFIG.with_overrides(highlight_limit=3)
    assert cfg.highlight_limit == 3
    assert VIEWER_CONFIG.highlight_limit == 10
    with pytest.raises(ValueError):
        VIEWER_CONFIG.with_overrides(scale_max=0.1)
