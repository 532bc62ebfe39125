"""Auto-framing of highlighted markers.

Two policies:

- a single target gets a fixed close-up zoom centered on it (a point has no
  extent, so there is nothing to fit)
- several targets are fitted: the bounding box of the targets plus padding
  is scaled to fill the viewport and centered in it

Framing only produces a new ``ViewportState``; marker data is never touched.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from .config import ViewportConfig
from .markers import Marker, find_marker_index
from .search import HighlightSet
from .viewport import ImageGeometry, Point, Size, ViewportState, clamp, image_percent_to_pixel

logger = logging.getLogger(__name__)


def bounding_box(points: Sequence[Point]) -> tuple[float, float, float, float]:
    """Return the axis-aligned bounding box ``(min_x, min_y, max_x, max_y)``.

    Raises:
        ValueError: If ``points`` is empty
    """
    if len(points) == 0:
        raise ValueError("bounding_box needs at least one point")
    arr = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    min_x, min_y = arr.min(axis=0)
    max_x, max_y = arr.max(axis=0)
    return (float(min_x), float(min_y), float(max_x), float(max_y))


def _centered_state(center: Point, scale: float, viewport_size: Size) -> ViewportState:
    """State that maps ``center`` (container pixels at scale 1) to the viewport center."""
    vw, vh = viewport_size
    return ViewportState(scale, vw / 2.0 - center[0] * scale, vh / 2.0 - center[1] * scale)


def auto_frame(
    targets: Sequence[Point],
    viewport_size: Size,
    config: ViewportConfig,
    padding: Optional[float] = None,
) -> Optional[ViewportState]:
    """Compute a viewport state that brings all targets into view.

    Args:
        targets: Target points in container pixels at scale 1
            (image pixels offset by the image origin)
        viewport_size: (width, height) of the visible area
        config: Scale limits and framing parameters
        padding: Screen pixels around the targets (defaults to config.frame_padding)

    Returns:
        The framing state, or None when there are no targets
    """
    if len(targets) == 0:
        return None
    pad = config.frame_padding if padding is None else max(0.0, padding)
    vw, vh = viewport_size

    min_x, min_y, max_x, max_y = bounding_box(targets)
    center = ((min_x + max_x) / 2.0, (min_y + max_y) / 2.0)
    box_w = (max_x - min_x) + 2.0 * pad
    box_h = (max_y - min_y) + 2.0 * pad

    if len(targets) == 1 or box_w <= 0 or box_h <= 0:
        scale = config.clamp_scale(config.single_target_scale)
        logger.debug("auto_frame single target at %s, scale %.3f", center, scale)
        return _centered_state(center, scale, viewport_size)

    lo, hi = config.frame_scale_bounds()
    scale = clamp(min(vw / box_w, vh / box_h), lo, hi)
    logger.debug("auto_frame %d targets, bbox %.1fx%.1f, scale %.3f", len(targets), box_w, box_h, scale)
    return _centered_state(center, scale, viewport_size)


def marker_frame_point(marker: Marker, geometry: ImageGeometry) -> Point:
    """Position of a marker in container pixels at scale 1."""
    x, y = image_percent_to_pixel(marker.position, geometry.size)
    return (x + geometry.left, y + geometry.top)


def frame_highlights(
    markers: Sequence[Marker],
    highlight: HighlightSet,
    geometry: ImageGeometry,
    viewport_size: Size,
    config: ViewportConfig,
) -> Optional[ViewportState]:
    """Frame the markers named by a highlight set.

    A set with only a primary id frames that marker as a single target; a
    set with ``ids`` frames all of them together. Unknown ids are skipped.

    Returns:
        The framing state, or None when nothing can be framed
        (empty set, unknown ids or image not laid out yet)
    """
    if highlight.is_empty or geometry.is_empty:
        return None
    wanted = list(highlight.ids) if highlight.ids else [highlight.primary]
    targets = []
    for marker_id in wanted:
        idx = find_marker_index(markers, marker_id)
        if idx is not None:
            targets.append(marker_frame_point(markers[idx], geometry))
    return auto_frame(targets, viewport_size, config)
