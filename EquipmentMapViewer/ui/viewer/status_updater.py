"""Status bar update logic for DiagramViewer.

This module handles all status bar update operations including:
- Cursor position display in percent-of-image coordinates
- Overall diagram/scale/mode status display
- Search result summary
"""

from pathlib import Path

from ...core.gestures import InteractionMode


class StatusUpdater:
    """Manages status bar updates for the diagram viewer.

    This class handles formatting and updating various status bar widgets
    with current viewer state information.
    """

    def __init__(self, viewer):
        """Initialize status updater.

        Args:
            viewer: DiagramViewer instance
        """
        self.viewer = viewer

    def update_cursor_status(self, percent):
        """Update status bar with the cursor position.

        Args:
            percent: (x%, y%) under the cursor, or None when off the image
        """
        if percent is None:
            self.viewer.status_cursor.setText("")
            return
        x, y = percent
        self.viewer.status_cursor.setText(f"x={x:.1f}% y={y:.1f}%")

    def update_status(self):
        """Update title bar and status bar with the current diagram state."""
        viewer = self.viewer
        mode = "Edit" if viewer.mode == InteractionMode.EDIT else "View"
        dirty = " *" if viewer.dirty else ""

        if viewer.image_path is None:
            viewer.setWindowTitle("EquipmentMapViewer")
        else:
            pixmap = viewer.canvas.pixmap
            size = f" — {pixmap.width()}×{pixmap.height()}" if pixmap is not None else ""
            viewer.setWindowTitle(f"{Path(viewer.image_path).name}{dirty}{size} [{mode}]")

        viewer.status_scale.setText(f"Scale: {viewer.canvas.controller.viewport.scale:.2f}x")
        viewer.status_mode.setText(f"Mode: {mode}")
        viewer.status_markers.setText(f"Markers: {len(viewer.markers)}")

    def update_search_status(self, matches, highlight, limit: int):
        """Summarize the last function-location search.

        Args:
            matches: List of FunctionLocationMatch
            highlight: HighlightSet resolved from the matches
            limit: Largest match count that is highlighted
        """
        n = len(matches)
        if not self.viewer.search_edit.text().strip():
            text = ""
        elif n == 0:
            text = "No matches"
        elif highlight.is_empty:
            text = f"{n} matches (refine search to highlight, max {limit})"
        elif n == 1:
            text = "1 match"
        else:
            text = f"{n} matches"
        self.viewer.status_search.setText(text)
