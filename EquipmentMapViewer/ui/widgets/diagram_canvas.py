"""Diagram canvas widget.

``DiagramCanvas`` is the Qt host of ``InteractionController``: it paints the
diagram under the current viewport transform, draws equipment markers on
top, converts Qt mouse/wheel/touch events into ``InputEvent`` objects and
re-emits the controller's intents as Qt signals.

The canvas never edits markers itself. The owner (``DiagramViewer``)
listens to the signals, updates its marker list and calls ``set_markers``.
"""

import logging
from typing import List, Optional, Sequence

from PySide6.QtWidgets import QWidget, QToolTip
from PySide6.QtGui import QPainter, QPen, QBrush, QColor, QPixmap, QImage, QMouseEvent, QWheelEvent, QKeyEvent
from PySide6.QtCore import Qt, QEvent, QPointF, QRectF, Signal

from ...core.config import ViewportConfig, VIEWER_CONFIG
from ...core.constants import MARKER_DRAW_RADIUS
from ...core.gestures import Button, EventKind, InputEvent, InteractionMode, Modifiers
from ...core.intents import (
    MarkerAdded,
    MarkerDeleteRequested,
    MarkerEditRequested,
    MarkerMoved,
    MarkerSelected,
    ViewportChanged,
)
from ...core.interaction import InteractionController, InteractionState
from ...core.markers import Marker, hit_test
from ...core.search import EMPTY_HIGHLIGHT, HighlightSet, highlight_size, marker_pick_radius
from ...core.viewport import ImageGeometry

logger = logging.getLogger(__name__)

# Marker colors: (fill, border)
COLOR_PRIMARY = (QColor(250, 204, 21), QColor(202, 138, 4))  # yellow
COLOR_MULTI = (QColor(251, 146, 60), QColor(234, 88, 12))  # orange
COLOR_EDIT = (QColor(239, 68, 68), QColor(185, 28, 28))  # red
COLOR_VIEW = (QColor(59, 130, 246), QColor(29, 78, 216))  # blue
COLOR_PENDING = (QColor(34, 197, 94), QColor(21, 128, 61))  # green


def _qt_modifiers(mods) -> Modifiers:
    return Modifiers(
        ctrl=bool(mods & Qt.ControlModifier),
        shift=bool(mods & Qt.ShiftModifier),
        alt=bool(mods & Qt.AltModifier),
        meta=bool(mods & Qt.MetaModifier),
    )


def _qt_button(button) -> Button:
    if button == Qt.LeftButton:
        return Button.PRIMARY
    if button == Qt.MiddleButton:
        return Button.MIDDLE
    if button == Qt.RightButton:
        return Button.SECONDARY
    return Button.NONE


class DiagramCanvas(QWidget):
    """Zoomable, pannable diagram with equipment markers.

    Signals:
        marker_added(x_percent, y_percent): click on the image in edit mode
        marker_moved(index, x_percent, y_percent): marker dragged
        marker_selected(index): marker pressed
        marker_edit_requested(index): marker double-clicked in edit mode
        marker_delete_requested(index): Delete key on the selected marker
        viewport_changed(scale, translate_x, translate_y)
        cursor_moved(object): (x_percent, y_percent) under the cursor, or None
    """

    marker_added = Signal(float, float)
    marker_moved = Signal(int, float, float)
    marker_selected = Signal(int)
    marker_edit_requested = Signal(int)
    marker_delete_requested = Signal(int)
    viewport_changed = Signal(float, float, float)
    cursor_moved = Signal(object)

    def __init__(self, parent=None, config: Optional[ViewportConfig] = None, mode=InteractionMode.VIEW):
        super().__init__(parent)
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setAttribute(Qt.WA_AcceptTouchEvents, True)
        self.setMinimumSize(320, 240)

        self.controller = InteractionController(config or VIEWER_CONFIG, mode)
        self.pixmap: Optional[QPixmap] = None
        self.markers: List[Marker] = []
        self.highlight: HighlightSet = EMPTY_HIGHLIGHT
        self.pending_marker: Optional[tuple] = None  # (x%, y%) awaiting the marker form
        self._touch_count = 0

    # ------------------------
    # Content
    # ------------------------
    def set_image(self, qimage: Optional[QImage]):
        """Set the diagram image and reset the view."""
        self.pixmap = QPixmap.fromImage(qimage) if qimage is not None and not qimage.isNull() else None
        self.pending_marker = None
        self.controller.cancel()
        self.dispatch(self.controller.reset_view())

    def set_markers(self, markers: Sequence[Marker]):
        self.markers = list(markers)
        self.update()

    def set_highlight(self, highlight: Optional[HighlightSet], frame: bool = True):
        """Set the highlighted markers and optionally auto-frame them."""
        self.highlight = highlight or EMPTY_HIGHLIGHT
        if frame:
            self.frame_highlight()
        self.update()

    def set_mode(self, mode: InteractionMode):
        self.controller.set_mode(mode)
        self.pending_marker = None
        self._update_cursor()
        self.update()

    def set_config(self, config: ViewportConfig):
        """Swap the viewport configuration, keeping the current view when possible."""
        state = self.controller.viewport.copy()
        mode = self.controller.mode
        self.controller = InteractionController(config, mode)
        self.controller.transform.set_state(state)
        logger.debug("Canvas config: zoom %.2f-%.2f", config.scale_min, config.scale_max)
        self.dispatch([self._viewport_intent()])

    def close_form(self):
        """Marker form finished; leave the FormOpen state."""
        self.pending_marker = None
        self.controller.close_form()
        self.update()

    # ------------------------
    # Geometry
    # ------------------------
    def image_geometry(self) -> ImageGeometry:
        """Image layout at scale 1: fitted inside the widget and centered."""
        if self.pixmap is None or self.pixmap.isNull():
            return ImageGeometry(0.0, 0.0)
        iw, ih = self.pixmap.width(), self.pixmap.height()
        ww, wh = max(1, self.width()), max(1, self.height())
        fit = min(ww / iw, wh / ih)
        w, h = iw * fit, ih * fit
        return ImageGeometry(w, h, (ww - w) / 2.0, (wh - h) / 2.0)

    def viewport_size(self) -> tuple:
        return (float(self.width()), float(self.height()))

    # ------------------------
    # View commands
    # ------------------------
    def zoom_in(self):
        self.dispatch(self.controller.zoom_in(self.viewport_size()))

    def zoom_out(self):
        self.dispatch(self.controller.zoom_out(self.viewport_size()))

    def reset_view(self):
        self.dispatch(self.controller.reset_view())

    def frame_highlight(self):
        self.dispatch(
            self.controller.frame(self.highlight, self.markers, self.image_geometry(), self.viewport_size())
        )

    def request_delete(self):
        self.dispatch(self.controller.request_delete())

    # ------------------------
    # Intent dispatch
    # ------------------------
    def _viewport_intent(self) -> ViewportChanged:
        s = self.controller.viewport
        return ViewportChanged(s.scale, s.translate_x, s.translate_y)

    def dispatch(self, intents):
        """Re-emit controller intents as Qt signals and repaint."""
        for intent in intents:
            if isinstance(intent, ViewportChanged):
                self.viewport_changed.emit(intent.scale, intent.translate_x, intent.translate_y)
            elif isinstance(intent, MarkerMoved):
                self.marker_moved.emit(intent.index, intent.x_percent, intent.y_percent)
            elif isinstance(intent, MarkerSelected):
                self.marker_selected.emit(intent.index)
            elif isinstance(intent, MarkerAdded):
                self.pending_marker = (intent.x_percent, intent.y_percent)
                self.marker_added.emit(intent.x_percent, intent.y_percent)
            elif isinstance(intent, MarkerEditRequested):
                self.marker_edit_requested.emit(intent.index)
            elif isinstance(intent, MarkerDeleteRequested):
                self.marker_delete_requested.emit(intent.index)
        self._update_cursor()
        self.update()

    def _handle(self, kind: EventKind, pos: QPointF, button=Button.NONE, modifiers=None, wheel_delta=0.0, touches=()):
        point = (pos.x(), pos.y())
        geometry = self.image_geometry()
        target = hit_test(self.markers, point, self.controller.transform, geometry, self._pick_radius())
        event = InputEvent(
            kind=kind,
            point=point,
            button=button,
            modifiers=modifiers or Modifiers(),
            target_marker_index=target,
            wheel_delta=wheel_delta,
            touches=tuple(touches),
        )
        self.dispatch(self.controller.handle(event, geometry))
        return target

    # ------------------------
    # Qt events
    # ------------------------
    def mousePressEvent(self, event: QMouseEvent):
        self.setFocus()
        self._handle(EventKind.POINTER_DOWN, event.position(), _qt_button(event.button()), _qt_modifiers(event.modifiers()))
        event.accept()

    def mouseMoveEvent(self, event: QMouseEvent):
        target = self._handle(EventKind.POINTER_MOVE, event.position(), modifiers=_qt_modifiers(event.modifiers()))
        geometry = self.image_geometry()
        point = (event.position().x(), event.position().y())
        if self.controller.transform.contains(point, geometry):
            self.cursor_moved.emit(self.controller.transform.screen_to_image_percent(point, geometry))
        else:
            self.cursor_moved.emit(None)
        if self.controller.mode == InteractionMode.VIEW and not self.controller.is_busy:
            self._show_marker_tooltip(target, event)

    def mouseReleaseEvent(self, event: QMouseEvent):
        self._handle(EventKind.POINTER_UP, event.position(), _qt_button(event.button()), _qt_modifiers(event.modifiers()))
        event.accept()

    def mouseDoubleClickEvent(self, event: QMouseEvent):
        self._handle(EventKind.DOUBLE_CLICK, event.position(), _qt_button(event.button()), _qt_modifiers(event.modifiers()))
        event.accept()

    def leaveEvent(self, event):
        # Leaving the widget always ends the gesture
        self.dispatch(self.controller.handle(InputEvent(kind=EventKind.POINTER_LEAVE), self.image_geometry()))
        self.cursor_moved.emit(None)
        super().leaveEvent(event)

    def wheelEvent(self, event: QWheelEvent):
        dy = event.angleDelta().y()
        if dy == 0:
            event.accept()
            return
        self._handle(EventKind.WHEEL, event.position(), modifiers=_qt_modifiers(event.modifiers()), wheel_delta=dy)
        event.accept()

    def keyPressEvent(self, event: QKeyEvent):
        if event.key() in (Qt.Key_Delete, Qt.Key_Backspace) and self.controller.mode == InteractionMode.EDIT:
            self.request_delete()
            return
        if event.key() == Qt.Key_Escape:
            self.controller.cancel()
            self.update()
            # Let the window handle Escape too (full screen, highlight)
            event.ignore()
            return
        super().keyPressEvent(event)

    def event(self, event):
        etype = event.type()
        if etype in (QEvent.TouchBegin, QEvent.TouchUpdate, QEvent.TouchEnd, QEvent.TouchCancel):
            self._touch_event(event)
            event.accept()
            return True
        return super().event(event)

    def _touch_event(self, event):
        points = [p.position() for p in event.points()]
        touches = [(p.x(), p.y()) for p in points]
        etype = event.type()
        if etype in (QEvent.TouchEnd, QEvent.TouchCancel) or not points:
            self._touch_count = 0
            self.dispatch(self.controller.handle(InputEvent(kind=EventKind.TOUCH_END), self.image_geometry()))
            return
        # A change in finger count starts a new touch gesture
        kind = EventKind.TOUCH_START if len(points) != self._touch_count else EventKind.TOUCH_MOVE
        self._touch_count = len(points)
        self._handle(kind, points[0], touches=touches)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        if not self.highlight.is_empty:
            self.frame_highlight()

    # ------------------------
    # Painting
    # ------------------------
    def _pick_radius(self):
        # Highlighted markers are drawn larger and stay clickable over their whole disk
        return marker_pick_radius(self.highlight, self.controller.config.marker_hit_radius, MARKER_DRAW_RADIUS)

    def _marker_colors(self, marker: Marker):
        size = highlight_size(marker.id, self.highlight)
        if marker.id == self.highlight.primary:
            return COLOR_PRIMARY, size
        if marker.id in self.highlight.ids:
            return COLOR_MULTI, size
        if self.controller.mode == InteractionMode.EDIT:
            return COLOR_EDIT, size
        return COLOR_VIEW, size

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.setRenderHint(QPainter.SmoothPixmapTransform)
        painter.fillRect(self.rect(), QColor(245, 245, 245))

        if self.pixmap is None:
            painter.setPen(QColor(120, 120, 120))
            painter.drawText(self.rect(), Qt.AlignCenter, "Open a diagram image (Ctrl+O)")
            return

        geometry = self.image_geometry()
        state = self.controller.viewport
        painter.save()
        painter.translate(state.translate_x, state.translate_y)
        painter.scale(state.scale, state.scale)
        painter.drawPixmap(
            QRectF(geometry.left, geometry.top, geometry.width, geometry.height),
            self.pixmap,
            QRectF(self.pixmap.rect()),
        )
        painter.restore()

        transform = self.controller.transform
        for i, marker in enumerate(self.markers):
            (fill, border), size = self._marker_colors(marker)
            radius = MARKER_DRAW_RADIUS * size
            if i == self.controller.selected_index and self.controller.mode == InteractionMode.EDIT:
                radius += 2.0
            sx, sy = transform.image_percent_to_screen(marker.position, geometry)
            painter.setPen(QPen(border, 2))
            painter.setBrush(QBrush(fill))
            if self.controller.drag_index == i:
                painter.setOpacity(0.75)
            painter.drawEllipse(QPointF(sx, sy), radius, radius)
            painter.setOpacity(1.0)

        if self.pending_marker is not None:
            sx, sy = transform.image_percent_to_screen(self.pending_marker, geometry)
            fill, border = COLOR_PENDING
            painter.setPen(QPen(border, 2, Qt.DashLine))
            painter.setBrush(QBrush(fill))
            painter.drawEllipse(QPointF(sx, sy), MARKER_DRAW_RADIUS * 1.5, MARKER_DRAW_RADIUS * 1.5)

    def _update_cursor(self):
        state = self.controller.state
        if state in (InteractionState.PANNING, InteractionState.DRAGGING_MARKER):
            self.setCursor(Qt.ClosedHandCursor)
        elif self.controller.mode == InteractionMode.EDIT:
            self.setCursor(Qt.CrossCursor)
        else:
            self.setCursor(Qt.OpenHandCursor)

    def _show_marker_tooltip(self, index: Optional[int], event: QMouseEvent):
        """Show equipment descriptions when hovering a marker in view mode."""
        if index is None or not (0 <= index < len(self.markers)):
            QToolTip.hideText()
            return
        descriptions = [item.description for item in self.markers[index].payload if item.description]
        if descriptions:
            QToolTip.showText(event.globalPosition().toPoint(), "\n".join(descriptions), self)
