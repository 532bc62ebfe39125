"""Zoom and viewport management for DiagramViewer.

This module handles all zoom-related operations including:
- Button zoom in/out about the viewport center
- Resetting the view to its initial state
- Auto-framing the current search highlight
- Switching between the editor and viewer zoom limits
"""

import logging

from ...core.config import EDITOR_CONFIG, VIEWER_CONFIG
from ...core.gestures import InteractionMode

logger = logging.getLogger(__name__)


class ZoomManager:
    """Manages zoom and viewport operations for the diagram viewer.

    Wheel and pinch zoom are handled inside the canvas; this class covers
    the commands triggered from menus, toolbar buttons and shortcuts.
    """

    def __init__(self, viewer):
        """Initialize zoom manager.

        Args:
            viewer: DiagramViewer instance
        """
        self.viewer = viewer

    @property
    def canvas(self):
        return self.viewer.canvas

    def config_for_mode(self, mode: InteractionMode):
        """Return the viewport configuration for a mode.

        The editor allows a tighter zoom range than the read-only viewer.
        Overrides given on the command line are applied to both.
        """
        base = EDITOR_CONFIG if mode == InteractionMode.EDIT else VIEWER_CONFIG
        overrides = getattr(self.viewer, "config_overrides", None) or {}
        return base.with_overrides(**overrides) if overrides else base

    def apply_mode(self, mode: InteractionMode):
        """Switch zoom limits for the given mode, keeping the view when possible."""
        self.canvas.set_config(self.config_for_mode(mode))
        self.canvas.set_mode(mode)
        self.viewer.scale_changed.emit()

    def zoom_in(self):
        if self.canvas.pixmap is None:
            return
        self.canvas.zoom_in()

    def zoom_out(self):
        if self.canvas.pixmap is None:
            return
        self.canvas.zoom_out()

    def reset_zoom(self):
        """Return to scale 1 with no translation."""
        self.canvas.reset_view()

    def frame_highlight(self):
        """Re-frame the current highlight, or reset when nothing is highlighted."""
        if self.canvas.highlight.is_empty:
            logger.debug("Nothing highlighted; resetting view")
            self.reset_zoom()
            return
        self.canvas.frame_highlight()
