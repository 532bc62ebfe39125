"""Viewport configuration.

``ViewportConfig`` bundles every tunable used by the transform engine, the
auto-framing logic and the interaction controller. Two presets mirror the
two screens of the application:

- ``EDITOR_CONFIG``: marker placement, zoom range 0.5x - 3x
- ``VIEWER_CONFIG``: equipment lookup, zoom range 0.5x - 5x
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .constants import (
    EDITOR_MIN_ZOOM_SCALE,
    EDITOR_MAX_ZOOM_SCALE,
    VIEWER_MIN_ZOOM_SCALE,
    VIEWER_MAX_ZOOM_SCALE,
    WHEEL_ZOOM_STEP,
    BUTTON_ZOOM_STEP,
    SINGLE_TARGET_SCALE,
    FRAME_PADDING,
    FRAME_MIN_SCALE,
    FRAME_MAX_SCALE,
    HIGHLIGHT_LIMIT,
    CLICK_SLOP,
    MARKER_HIT_RADIUS,
)


@dataclass(frozen=True)
class ViewportConfig:
    """Tunables for one diagram view.

    Attributes:
        scale_min: Lower zoom bound (must be > 0)
        scale_max: Upper zoom bound
        wheel_step: Scale added/removed per wheel notch
        button_step: Scale added/removed per zoom button press
        single_target_scale: Zoom used when framing a single marker
        frame_padding: Screen pixels kept around framed markers
        frame_scale_min: Lower bound of the multi-marker framing scale
        frame_scale_max: Upper bound of the multi-marker framing scale
        highlight_limit: Largest match count that is still highlighted
        click_slop: Max pointer travel (px) for a press/release to count as a click
        marker_hit_radius: Pick radius (px) around a marker center
    """

    scale_min: float = VIEWER_MIN_ZOOM_SCALE
    scale_max: float = VIEWER_MAX_ZOOM_SCALE
    wheel_step: float = WHEEL_ZOOM_STEP
    button_step: float = BUTTON_ZOOM_STEP
    single_target_scale: float = SINGLE_TARGET_SCALE
    frame_padding: float = FRAME_PADDING
    frame_scale_min: float = FRAME_MIN_SCALE
    frame_scale_max: float = FRAME_MAX_SCALE
    highlight_limit: int = HIGHLIGHT_LIMIT
    click_slop: float = CLICK_SLOP
    marker_hit_radius: float = MARKER_HIT_RADIUS

    def __post_init__(self):
        if self.scale_min <= 0:
            raise ValueError(f"scale_min must be positive, got {self.scale_min}")
        if self.scale_min > self.scale_max:
            raise ValueError(f"scale_min ({self.scale_min}) is larger than scale_max ({self.scale_max})")
        if self.frame_scale_min <= 0 or self.frame_scale_min > self.frame_scale_max:
            raise ValueError(
                f"invalid framing scale range [{self.frame_scale_min}, {self.frame_scale_max}]"
            )
        if self.wheel_step <= 0 or self.button_step <= 0:
            raise ValueError("zoom steps must be positive")
        if self.single_target_scale <= 0:
            raise ValueError("single_target_scale must be positive")
        if self.frame_padding < 0:
            raise ValueError("frame_padding cannot be negative")
        if self.highlight_limit < 1:
            raise ValueError("highlight_limit must be at least 1")
        if self.click_slop < 0 or self.marker_hit_radius < 0:
            raise ValueError("click_slop and marker_hit_radius cannot be negative")

    def clamp_scale(self, scale: float) -> float:
        """Clamp a scale into [scale_min, scale_max]."""
        return max(self.scale_min, min(self.scale_max, scale))

    def frame_scale_bounds(self) -> tuple[float, float]:
        """Return the framing scale range intersected with the zoom range.

        When the two ranges do not overlap, the zoom range wins.
        """
        lo = max(self.scale_min, self.frame_scale_min)
        hi = min(self.scale_max, self.frame_scale_max)
        if lo > hi:
            return (self.scale_min, self.scale_max)
        return (lo, hi)

    def with_overrides(self, **overrides) -> "ViewportConfig":
        """Return a validated copy with the given fields replaced."""
        return replace(self, **overrides)


EDITOR_CONFIG = ViewportConfig(scale_min=EDITOR_MIN_ZOOM_SCALE, scale_max=EDITOR_MAX_ZOOM_SCALE)
VIEWER_CONFIG = ViewportConfig(scale_min=VIEWER_MIN_ZOOM_SCALE, scale_max=VIEWER_MAX_ZOOM_SCALE)
