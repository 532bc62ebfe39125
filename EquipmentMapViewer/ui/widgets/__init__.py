"""Widgets package."""

from .diagram_canvas import DiagramCanvas

__all__ = ["DiagramCanvas"]
