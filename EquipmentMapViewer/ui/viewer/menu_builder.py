"""Menu and keyboard shortcut configuration for DiagramViewer.

This module handles the creation of all menus and window-level
keyboard shortcuts for the diagram viewer.
"""

from PySide6.QtGui import QAction
from PySide6.QtCore import Qt


def _window_action(viewer, text, shortcut, slot, checkable=False):
    action = QAction(text, viewer, shortcut=shortcut)
    action.setShortcutContext(Qt.WindowShortcut)
    action.setCheckable(checkable)
    action.triggered.connect(slot)
    viewer.addAction(action)
    return action


def create_menus(viewer):
    """Create all menus and keyboard shortcuts for the viewer.

    Args:
        viewer: DiagramViewer instance
    """
    menubar = viewer.menuBar()

    # File menu
    file_menu = menubar.addMenu("File")
    file_menu.addAction(QAction("Open diagram...", viewer, shortcut="Ctrl+O", triggered=viewer.open_image))
    file_menu.addSeparator()
    file_menu.addAction(QAction("Import markers...", viewer, shortcut="Ctrl+I", triggered=viewer.import_markers))
    file_menu.addAction(QAction("Export markers...", viewer, shortcut="Ctrl+S", triggered=viewer.export_markers))
    file_menu.addSeparator()

    viewer.close_action = _window_action(viewer, "Close", "Ctrl+W", viewer.close)
    file_menu.addAction(viewer.close_action)

    # Edit menu
    viewer.edit_mode_action = _window_action(
        viewer, "Edit mode", "E", lambda checked=False: viewer.set_edit_mode(checked), checkable=True
    )
    viewer.delete_marker_action = _window_action(viewer, "Delete selected marker", "Del", viewer.delete_selected_marker)
    viewer.delete_marker_action.setEnabled(False)

    edit_menu = menubar.addMenu("Edit")
    edit_menu.addAction(viewer.edit_mode_action)
    edit_menu.addSeparator()
    edit_menu.addAction(viewer.delete_marker_action)
    edit_menu.addAction(QAction("Clear all markers", viewer, triggered=viewer.clear_markers))

    # Zoom actions
    viewer.zoom_in_action = _window_action(viewer, "Zoom in", "+", viewer.zoom_manager.zoom_in)
    viewer.zoom_out_action = _window_action(viewer, "Zoom out", "-", viewer.zoom_manager.zoom_out)
    viewer.reset_view_action = _window_action(viewer, "Reset view", "0", viewer.zoom_manager.reset_zoom)
    viewer.frame_action = _window_action(viewer, "Frame highlighted markers", "f", viewer.zoom_manager.frame_highlight)
    viewer.fullscreen_action = _window_action(
        viewer, "Full screen", "F11", lambda checked=False: viewer.set_fullscreen(checked), checkable=True
    )

    # Search actions
    viewer.focus_search_action = _window_action(viewer, "Find function location", "Ctrl+F", viewer.focus_search)
    viewer.clear_search_action = _window_action(viewer, "Clear search", "Ctrl+Shift+F", viewer.clear_search)

    # View menu
    view_menu = menubar.addMenu("View")
    view_menu.addAction(viewer.zoom_in_action)
    view_menu.addAction(viewer.zoom_out_action)
    view_menu.addAction(viewer.reset_view_action)
    view_menu.addSeparator()
    view_menu.addAction(viewer.frame_action)
    view_menu.addAction(viewer.fullscreen_action)
    view_menu.addSeparator()
    view_menu.addAction(viewer.focus_search_action)
    view_menu.addAction(viewer.clear_search_action)
    view_menu.addAction(viewer.results_dock.toggleViewAction())

    # Help menu
    help_menu = menubar.addMenu("Help")
    help_menu.addAction(QAction("Keyboard shortcuts", viewer, shortcut="F1", triggered=viewer.help_dialog.show))
