"""Viewport transform engine.

This module owns the scale/translate transform applied to a diagram image
and is the single place where coordinates change space:

- screen: container-relative pixels, as reported by pointer events
- image pixels: the image element's own layout pixels at scale 1
- image percent: marker storage coordinates, 0-100 on each axis

A screen point ``P`` and an image pixel ``I`` are related by::

    P = translate + scale * (I + origin)

where ``origin`` is the image element's offset inside the container at
scale 1 (``ImageGeometry.left/top``). The module has no UI dependency.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .config import ViewportConfig, VIEWER_CONFIG
from .constants import PERCENT_MIN, PERCENT_MAX

logger = logging.getLogger(__name__)

Point = tuple[float, float]
Size = tuple[float, float]


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def clamp_percent(value: float) -> float:
    return clamp(value, PERCENT_MIN, PERCENT_MAX)


def image_percent_to_pixel(percent: Point, size: Size) -> Point:
    """Convert percent-of-image coordinates to image pixels.

    Args:
        percent: (x_percent, y_percent)
        size: (width, height) of the image in layout pixels

    Returns:
        (x, y) in image pixels
    """
    return (percent[0] / 100.0 * size[0], percent[1] / 100.0 * size[1])


def pixel_to_image_percent(pixel: Point, size: Size) -> Point:
    """Convert image pixels to percent-of-image coordinates.

    A zero-sized axis (image not laid out yet) maps to 0.
    """
    w, h = size
    x = pixel[0] / w * 100.0 if w > 0 else 0.0
    y = pixel[1] / h * 100.0 if h > 0 else 0.0
    return (x, y)


@dataclass
class ViewportState:
    """Current transform: uniform scale followed by a translation."""

    scale: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0

    @property
    def translate(self) -> Point:
        return (self.translate_x, self.translate_y)

    def copy(self) -> "ViewportState":
        return ViewportState(self.scale, self.translate_x, self.translate_y)


@dataclass(frozen=True)
class ImageGeometry:
    """Layout of the image element inside the container at scale 1."""

    width: float
    height: float
    left: float = 0.0
    top: float = 0.0

    @property
    def size(self) -> Size:
        return (self.width, self.height)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


class ViewportTransform:
    """Scale/translate state plus coordinate conversions.

    All mutators clamp instead of rejecting: scale is kept inside the
    configured range and never reaches zero because ``scale_min > 0`` is
    enforced by ``ViewportConfig``.
    """

    def __init__(self, config: Optional[ViewportConfig] = None, state: Optional[ViewportState] = None):
        self.config = config or VIEWER_CONFIG
        self.state = ViewportState()
        if state is not None:
            self.set_state(state)

    @property
    def scale(self) -> float:
        return self.state.scale

    @property
    def translate(self) -> Point:
        return self.state.translate

    def set_state(self, state: ViewportState):
        """Replace the current state, clamping its scale into range."""
        self.state = ViewportState(self.config.clamp_scale(state.scale), state.translate_x, state.translate_y)

    def reset(self):
        """Restore scale 1 and zero translation."""
        self.state = ViewportState(self.config.clamp_scale(1.0), 0.0, 0.0)

    # ------------------------
    # Zoom / pan
    # ------------------------
    def zoom_at(self, screen_point: Point, delta: float) -> bool:
        """Change scale by ``delta`` keeping ``screen_point`` fixed.

        The image point under ``screen_point`` is the same before and after
        the call: ``translate' = P - (P - translate) * (s' / s)``.

        Args:
            screen_point: Anchor in screen coordinates (cursor or viewport center)
            delta: Amount added to the current scale (clamped)

        Returns:
            True if the scale changed
        """
        old_scale = self.state.scale
        new_scale = self.config.clamp_scale(old_scale + delta)
        if new_scale == old_scale:
            return False
        k = new_scale / old_scale
        px, py = screen_point
        self.state = ViewportState(
            new_scale,
            px - (px - self.state.translate_x) * k,
            py - (py - self.state.translate_y) * k,
        )
        logger.debug("zoom_at %s: scale %.3f -> %.3f", screen_point, old_scale, new_scale)
        return True

    def zoom_about_center(self, viewport_size: Size, delta: float) -> bool:
        """Zoom anchored on the viewport center (zoom buttons)."""
        return self.zoom_at((viewport_size[0] / 2.0, viewport_size[1] / 2.0), delta)

    def pan_by(self, screen_delta: Point):
        """Shift the view by a screen-space delta; panning is never clamped."""
        self.state = ViewportState(
            self.state.scale,
            self.state.translate_x + screen_delta[0],
            self.state.translate_y + screen_delta[1],
        )

    # ------------------------
    # Coordinate conversion
    # ------------------------
    def screen_to_image(self, screen_point: Point, geometry: ImageGeometry) -> Point:
        """Map a screen point to image pixels."""
        s = self.state.scale
        x = (screen_point[0] - self.state.translate_x) / s - geometry.left
        y = (screen_point[1] - self.state.translate_y) / s - geometry.top
        return (x, y)

    def image_to_screen(self, image_point: Point, geometry: ImageGeometry) -> Point:
        """Map image pixels to a screen point."""
        s = self.state.scale
        x = self.state.translate_x + (image_point[0] + geometry.left) * s
        y = self.state.translate_y + (image_point[1] + geometry.top) * s
        return (x, y)

    def screen_to_image_percent(self, screen_point: Point, geometry: ImageGeometry, clamp: bool = False) -> Point:
        """Map a screen point to percent-of-image coordinates.

        Args:
            screen_point: Pointer position in screen coordinates
            geometry: Image layout at scale 1
            clamp: Clamp both axes to [0, 100] (used while dragging markers)

        Returns:
            (x_percent, y_percent)
        """
        x, y = pixel_to_image_percent(self.screen_to_image(screen_point, geometry), geometry.size)
        if clamp:
            return (clamp_percent(x), clamp_percent(y))
        return (x, y)

    def image_percent_to_screen(self, percent: Point, geometry: ImageGeometry) -> Point:
        """Map percent-of-image coordinates to a screen point."""
        return self.image_to_screen(image_percent_to_pixel(percent, geometry.size), geometry)

    def contains(self, screen_point: Point, geometry: ImageGeometry) -> bool:
        """Return True when ``screen_point`` lies on the rendered image."""
        if geometry.is_empty:
            return False
        x, y = self.screen_to_image(screen_point, geometry)
        return 0.0 <= x <= geometry.width and 0.0 <= y <= geometry.height
