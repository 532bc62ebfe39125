"""Main diagram viewer application window.

This module provides the DiagramViewer class, which is the main window
for locating equipment on aircraft diagrams.

Features:
- Diagram loading (file dialog, command line, drag and drop)
- Zoom with mouse wheel, pinch, toolbar buttons and keyboard shortcuts
- Pan by dragging (Ctrl/middle drag in edit mode)
- Edit mode: place, drag, edit and delete equipment markers
- View mode: click a marker to see the installed equipment
- Function-location search with highlight and auto-framing
- Marker import/export (JSON, CSV)
- Status bar showing cursor position, scale, mode and search summary
- Full-screen diagram mode
"""

import logging
from pathlib import Path
from typing import List, Optional

from PySide6.QtWidgets import (
    QMainWindow,
    QWidget,
    QVBoxLayout,
    QStatusBar,
    QLabel,
    QFileDialog,
    QMessageBox,
    QDockWidget,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QToolBar,
)
from PySide6.QtCore import Qt, QTimer, Signal

from ...core.gestures import InteractionMode
from ...core.image_io import numpy_to_qimage, load_image, is_image_file, IMAGE_EXTENSIONS
from ...core.intents import MarkerDeleteRequested, MarkerMoved
from ...core.marker_io import MarkerFileError, is_marker_file, load_markers, save_markers
from ...core.markers import Marker, apply_intents, new_marker_id
from ...core.search import EMPTY_HIGHLIGHT, HighlightSet, search_highlights
from ..widgets import DiagramCanvas
from ..dialogs import HelpDialog, EquipmentDetailsDialog, MarkerFormDialog

from .menu_builder import create_menus
from .zoom_manager import ZoomManager
from .status_updater import StatusUpdater

logger = logging.getLogger(__name__)


class DiagramViewer(QMainWindow):
    """Main application window for the equipment diagram.

    Keyboard Shortcuts:
        - Ctrl+O: Open diagram
        - Ctrl+I / Ctrl+S: Import / export markers
        - E: Toggle edit mode
        - +/-: Zoom in/out about the view center
        - 0: Reset view
        - f: Frame highlighted markers
        - Ctrl+F: Focus the function-location search
        - F11: Toggle full screen (Esc leaves it)
        - Del: Delete the selected marker (edit mode)

    Mouse Controls:
        - Mouse wheel: Zoom at the cursor
        - Drag: Pan (view mode), Ctrl+drag or middle drag (edit mode)
        - Click marker: Show equipment (view mode) / select (edit mode)
        - Click diagram: Add marker (edit mode)
        - Double-click marker: Edit equipment (edit mode)

    Attributes:
        markers: Current marker list (owned here; the canvas gets copies)
        image_path: Path of the loaded diagram, or None
        mode: Current InteractionMode
        dirty: True when markers changed since the last import/export
    """

    scale_changed = Signal()
    markers_changed = Signal()

    def __init__(self, mode: InteractionMode = InteractionMode.VIEW, config_overrides: Optional[dict] = None):
        super().__init__()
        self.setWindowTitle("EquipmentMapViewer")
        self.resize(1100, 750)

        self.markers: List[Marker] = []
        self.image_path: Optional[str] = None
        self.marker_path: Optional[str] = None
        self.mode = mode
        self.dirty = False
        self.config_overrides = config_overrides or {}
        self.picked_highlight: Optional[HighlightSet] = None  # result chosen from the list
        self.fullscreen = False
        self._fullscreen_hidden: List[QWidget] = []

        # Managers first: menus and the canvas config depend on them
        self.zoom_manager = ZoomManager(self)
        self.status_updater = StatusUpdater(self)

        central = QWidget(self)
        self.setCentralWidget(central)
        v_layout = QVBoxLayout(central)
        v_layout.setContentsMargins(0, 0, 0, 0)
        self.canvas = DiagramCanvas(self, self.zoom_manager.config_for_mode(mode), mode)
        v_layout.addWidget(self.canvas)

        # Search toolbar
        self.toolbar = QToolBar("Search")
        self.toolbar.setMovable(False)
        self.addToolBar(Qt.TopToolBarArea, self.toolbar)
        self.toolbar.addWidget(QLabel(" Function location: "))
        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText("e.g. 21-51")
        self.search_edit.setClearButtonEnabled(True)
        self.search_edit.setMaximumWidth(260)
        self.search_edit.textChanged.connect(self.on_search_text_changed)
        self.toolbar.addWidget(self.search_edit)
        self.toolbar.addSeparator()
        self.toolbar.addAction("-", self.zoom_manager.zoom_out)
        self.toolbar.addAction("+", self.zoom_manager.zoom_in)
        self.toolbar.addAction("Reset", self.zoom_manager.reset_zoom)

        # Search results dock
        self.results_dock = QDockWidget("Search results")
        self.results_dock.setFeatures(QDockWidget.DockWidgetFloatable | QDockWidget.DockWidgetMovable | QDockWidget.DockWidgetClosable)
        self.results_list = QListWidget()
        self.results_list.itemActivated.connect(self.on_result_activated)
        self.results_list.itemClicked.connect(self.on_result_activated)
        self.results_dock.setWidget(self.results_list)
        self.addDockWidget(Qt.RightDockWidgetArea, self.results_dock)

        self.status = QStatusBar()
        self.setStatusBar(self.status)
        self.statusBar().setStyleSheet("font-size: 11pt;")
        self.status_cursor = QLabel()
        self.status_search = QLabel()
        self.status_markers = QLabel()
        self.status_mode = QLabel()
        self.status_scale = QLabel()
        self.status.addPermanentWidget(self.status_cursor, 2)
        self.status.addPermanentWidget(self.status_search, 3)
        self.status.addPermanentWidget(self.status_markers, 1)
        self.status.addPermanentWidget(self.status_mode, 1)
        self.status.addPermanentWidget(self.status_scale, 1)

        self.help_dialog = HelpDialog(self)

        create_menus(self)
        self.edit_mode_action.setChecked(mode == InteractionMode.EDIT)
        self.setAcceptDrops(True)

        # Canvas signals
        self.canvas.marker_added.connect(self._on_marker_added)
        self.canvas.marker_moved.connect(self._on_marker_moved)
        self.canvas.marker_selected.connect(self._on_marker_selected)
        self.canvas.marker_edit_requested.connect(self._on_marker_edit_requested)
        self.canvas.marker_delete_requested.connect(self._on_marker_delete_requested)
        self.canvas.viewport_changed.connect(lambda *_: self.scale_changed.emit())
        self.canvas.cursor_moved.connect(self.status_updater.update_cursor_status)

        self.scale_changed.connect(self.update_status)
        self.markers_changed.connect(self.update_status)
        self.update_status()

    def update_status(self):
        self.status_updater.update_status()

    # ------------------------
    # Loading / saving
    # ------------------------
    def open_image(self):
        """Open file dialog to load a diagram image."""
        patterns = " ".join(f"*{ext}" for ext in sorted(IMAGE_EXTENSIONS))
        path, _ = QFileDialog.getOpenFileName(self, "Open diagram", "", f"Images ({patterns})")
        if path:
            self.load_image_file(path)

    def load_image_file(self, path: str) -> bool:
        """Load a diagram image and reset the view.

        Returns:
            True on success
        """
        try:
            qimage = numpy_to_qimage(load_image(path))
        except (RuntimeError, ValueError) as e:
            logger.warning("%s", e)
            self._show_load_error(path, str(e))
            return False
        self.image_path = str(Path(path).resolve())
        self.canvas.set_image(qimage)
        self._refresh_search(frame=True)
        self.update_status()
        return True

    def import_markers(self):
        if not self._confirm_discard():
            return
        path, _ = QFileDialog.getOpenFileName(self, "Import markers", "", "Marker files (*.json *.csv)")
        if path:
            self.load_marker_file(path)

    def load_marker_file(self, path: str) -> bool:
        """Replace the current markers with those from a JSON/CSV file.

        If the file names its diagram and no diagram is open yet, the image
        next to the marker file is loaded as well.
        """
        try:
            markers, image_name = load_markers(path)
        except MarkerFileError as e:
            logger.warning("%s", e)
            self._show_load_error(path, str(e))
            return False
        self.marker_path = str(path)
        self._set_markers(markers, dirty=False)
        if image_name and self.image_path is None:
            candidate = Path(path).parent / image_name
            if candidate.is_file() and is_image_file(candidate):
                self.load_image_file(str(candidate))
        return True

    def export_markers(self):
        default = self.marker_path or ""
        if not default and self.image_path:
            default = str(Path(self.image_path).with_suffix(".json"))
        path, _ = QFileDialog.getSaveFileName(self, "Export markers", default, "JSON (*.json);;CSV (*.csv)")
        if not path:
            return
        if not is_marker_file(path):
            path += ".json"
        image_name = Path(self.image_path).name if self.image_path else None
        try:
            save_markers(path, self.markers, image_name)
        except MarkerFileError as e:
            logger.error("%s", e)
            QMessageBox.warning(self, "Export markers", str(e))
            return
        self.marker_path = path
        self.dirty = False
        self.status.showMessage(f"Saved {len(self.markers)} markers to {Path(path).name}", 5000)
        self.update_status()

    def _show_load_error(self, path: str, error_msg: str = ""):
        """Show error message with file details."""
        details = f"File: {Path(path).name}"
        if error_msg:
            details += f"\n\nError: {error_msg}"
        QMessageBox.warning(self, "Load error", details)

    def _confirm_discard(self) -> bool:
        """Ask before dropping unsaved marker changes."""
        if not self.dirty:
            return True
        answer = QMessageBox.question(
            self,
            "Unsaved markers",
            "Markers have unsaved changes. Discard them?",
            QMessageBox.Discard | QMessageBox.Cancel,
            QMessageBox.Cancel,
        )
        return answer == QMessageBox.Discard

    # ------------------------
    # Markers
    # ------------------------
    def _set_markers(self, markers: List[Marker], dirty: bool = True, frame: bool = False):
        self.markers = list(markers)
        if dirty:
            self.dirty = True
        self.canvas.set_markers(self.markers)
        self._refresh_search(frame=frame)
        self.delete_marker_action.setEnabled(self.canvas.controller.selected_index is not None)
        self.markers_changed.emit()

    def set_edit_mode(self, enabled: bool):
        mode = InteractionMode.EDIT if enabled else InteractionMode.VIEW
        if mode == self.mode:
            return
        self.mode = mode
        self.zoom_manager.apply_mode(mode)
        self.delete_marker_action.setEnabled(False)
        if self.edit_mode_action.isChecked() != enabled:
            self.edit_mode_action.setChecked(enabled)
        logger.info("Switched to %s mode", mode.value)
        self.update_status()

    def set_fullscreen(self, enabled: bool):
        """Give the whole screen to the diagram.

        Entering full screen resets the view and re-frames the highlighted
        markers for the larger canvas. The results dock and status bar are
        hidden meanwhile and restored on exit.
        """
        if enabled == self.fullscreen:
            return
        self.fullscreen = enabled
        if enabled:
            self._fullscreen_hidden = [w for w in (self.results_dock, self.status) if w.isVisible()]
            for w in self._fullscreen_hidden:
                w.hide()
            self.showFullScreen()
            self.canvas.reset_view()
            if not self.canvas.highlight.is_empty:
                self.canvas.frame_highlight()
        else:
            self.showNormal()
            for w in self._fullscreen_hidden:
                w.show()
            self._fullscreen_hidden = []
        if self.fullscreen_action.isChecked() != enabled:
            self.fullscreen_action.setChecked(enabled)
        logger.info("Full screen %s", "on" if enabled else "off")
        self.update_status()

    def delete_selected_marker(self):
        if self.mode != InteractionMode.EDIT:
            return
        self.canvas.request_delete()

    def clear_markers(self):
        if not self.markers:
            return
        answer = QMessageBox.question(self, "Clear markers", f"Delete all {len(self.markers)} markers?")
        if answer != QMessageBox.Yes:
            return
        self.canvas.controller.selected_index = None
        self._set_markers([])

    def _on_marker_added(self, x: float, y: float):
        # Open the form after the mouse event has been fully processed
        QTimer.singleShot(0, lambda: self._open_new_marker_form(x, y))

    def _open_new_marker_form(self, x: float, y: float):
        dialog = MarkerFormDialog(self, None, self.markers)
        try:
            if dialog.exec() == MarkerFormDialog.Accepted:
                marker = Marker(id=new_marker_id(), x_percent=x, y_percent=y, payload=dialog.payload(), zone=dialog.zone())
                logger.info("Added marker %s at (%.1f%%, %.1f%%)", marker.id, x, y)
                self._set_markers(self.markers + [marker])
        finally:
            self.canvas.close_form()

    def _on_marker_moved(self, index: int, x: float, y: float):
        self._set_markers(apply_intents(self.markers, [MarkerMoved(index, x, y)]))

    def _on_marker_selected(self, index: int):
        if not (0 <= index < len(self.markers)):
            return
        if self.mode == InteractionMode.EDIT:
            self.delete_marker_action.setEnabled(True)
            return
        marker = self.markers[index]
        query = self.search_edit.text()
        QTimer.singleShot(0, lambda: EquipmentDetailsDialog(marker, self, query).exec())

    def _on_marker_edit_requested(self, index: int):
        if 0 <= index < len(self.markers):
            QTimer.singleShot(0, lambda: self._open_edit_marker_form(index))

    def _open_edit_marker_form(self, index: int):
        if not (0 <= index < len(self.markers)):
            return
        marker = self.markers[index]
        dialog = MarkerFormDialog(self, marker, self.markers)
        if dialog.exec() == MarkerFormDialog.Accepted:
            updated = list(self.markers)
            updated[index] = Marker(marker.id, marker.x_percent, marker.y_percent, dialog.payload(), dialog.zone())
            self._set_markers(updated)

    def _on_marker_delete_requested(self, index: int):
        if not (0 <= index < len(self.markers)):
            return
        marker = self.markers[index]
        label = marker.payload[0].description if marker.payload else marker.id
        answer = QMessageBox.question(self, "Delete marker", f"Delete marker '{label}'?")
        if answer != QMessageBox.Yes:
            return
        logger.info("Deleted marker %s", marker.id)
        self.canvas.controller.marker_removed(index)
        self._set_markers(apply_intents(self.markers, [MarkerDeleteRequested(index)]))

    # ------------------------
    # Search
    # ------------------------
    def focus_search(self):
        self.search_edit.setFocus()
        self.search_edit.selectAll()

    def clear_search(self):
        self.search_edit.clear()

    def on_search_text_changed(self, text: str):
        self.picked_highlight = None
        self._refresh_search(frame=True)

    def _refresh_search(self, frame: bool):
        """Re-run the function-location search against the current markers."""
        limit = self.canvas.controller.config.highlight_limit
        matches, highlight = search_highlights(self.markers, self.search_edit.text(), limit, self.picked_highlight)
        if highlight is not self.picked_highlight:
            self.picked_highlight = None

        self.results_list.clear()
        for match in matches:
            item = QListWidgetItem(f"{match.function_location}  {match.description}")
            item.setData(Qt.UserRole, match.marker_id)
            self.results_list.addItem(item)

        self.canvas.set_highlight(highlight, frame=frame)
        self.status_updater.update_search_status(matches, highlight, limit)

    def on_result_activated(self, item: QListWidgetItem):
        """Highlight and frame the single marker picked from the results."""
        marker_id = item.data(Qt.UserRole)
        if marker_id:
            self.picked_highlight = HighlightSet.single(marker_id)
            self.canvas.set_highlight(self.picked_highlight)

    # Event handlers
    def dragEnterEvent(self, e):
        if e.mimeData().hasUrls():
            e.acceptProposedAction()

    def dropEvent(self, e):
        files = [u.toLocalFile() for u in e.mimeData().urls()]
        image_files = [f for f in files if is_image_file(f)]
        marker_files = [f for f in files if is_marker_file(f)]

        if image_files:
            self.load_image_file(image_files[0])
        if marker_files and self._confirm_discard():
            self.load_marker_file(marker_files[0])

    def keyPressEvent(self, e):
        """ESC leaves full screen, then clears the search highlight."""
        if e.key() == Qt.Key_Escape and self.fullscreen:
            self.set_fullscreen(False)
            return
        if e.key() == Qt.Key_Escape and not self.canvas.highlight.is_empty:
            self.picked_highlight = None
            self.canvas.set_highlight(EMPTY_HIGHLIGHT, frame=False)
            return
        super().keyPressEvent(e)

    def closeEvent(self, event):
        """Ask about unsaved markers and close child dialogs."""
        if not self._confirm_discard():
            event.ignore()
            return
        if self.help_dialog and self.help_dialog.isVisible():
            self.help_dialog.close()
        event.accept()
