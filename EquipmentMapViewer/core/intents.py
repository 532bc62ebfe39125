"""Intents emitted by the interaction controller.

The controller never mutates markers. It reports what the user asked for
and the host decides how to apply it (see ``markers.apply_intents``).
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MarkerAdded:
    """A click on the image asked for a new marker at this position."""

    x_percent: float
    y_percent: float


@dataclass(frozen=True)
class MarkerMoved:
    index: int
    x_percent: float
    y_percent: float


@dataclass(frozen=True)
class MarkerSelected:
    index: int


@dataclass(frozen=True)
class MarkerEditRequested:
    index: int


@dataclass(frozen=True)
class MarkerDeleteRequested:
    index: int


@dataclass(frozen=True)
class ViewportChanged:
    scale: float
    translate_x: float
    translate_y: float
