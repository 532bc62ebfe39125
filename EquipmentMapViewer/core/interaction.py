"""Interaction state machine for the diagram viewer/editor.

``InteractionController`` receives ``InputEvent`` objects, updates the
viewport it owns and returns intents describing marker changes. It is
framework-free; ``ui.widgets.DiagramCanvas`` is the Qt host.

States::

    Idle -> Panning -> Idle
    Idle -> DraggingMarker(i) -> Idle
    Idle -> PlacingMarker -> FormOpen -> Idle   (close_form)

Panning and DraggingMarker are mutually exclusive. Any release (button up,
pointer leaving the widget, touch end) ends the active gesture, so a stray
leave event can never leave the view stuck in a drag. Zooming is
independent of the gesture and works in every state.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import List, Optional, Sequence

from .config import ViewportConfig, VIEWER_CONFIG
from .framing import frame_highlights
from .gestures import EventKind, GestureKind, InputEvent, InteractionMode, classify_gesture
from .intents import (
    MarkerAdded,
    MarkerDeleteRequested,
    MarkerEditRequested,
    MarkerMoved,
    MarkerSelected,
    ViewportChanged,
)
from .markers import Marker
from .search import HighlightSet
from .viewport import ImageGeometry, Point, Size, ViewportState, ViewportTransform

logger = logging.getLogger(__name__)


class InteractionState(Enum):
    IDLE = "idle"
    PANNING = "panning"
    DRAGGING_MARKER = "dragging_marker"
    PLACING_MARKER = "placing_marker"
    FORM_OPEN = "form_open"


class InteractionController:
    """Turns input events into viewport updates and marker intents.

    Attributes:
        transform: Owned viewport transform
        mode: VIEW or EDIT
        state: Current InteractionState
        drag_index: Marker being dragged while in DRAGGING_MARKER
        selected_index: Last selected marker, or None
    """

    def __init__(self, config: Optional[ViewportConfig] = None, mode: InteractionMode = InteractionMode.VIEW):
        self.config = config or VIEWER_CONFIG
        self.transform = ViewportTransform(self.config)
        self.mode = mode
        self.state = InteractionState.IDLE
        self.drag_index: Optional[int] = None
        self.selected_index: Optional[int] = None
        self._anchor: Optional[Point] = None
        self._press_point: Optional[Point] = None
        self._press_moved = False
        self._press_target: Optional[int] = None
        self._form_pending = False
        self._pinch: Optional[tuple[Point, float]] = None

    @property
    def viewport(self) -> ViewportState:
        return self.transform.state

    @property
    def is_busy(self) -> bool:
        """True while a pointer gesture (pan, drag, placement) is active."""
        return self.state in (
            InteractionState.PANNING,
            InteractionState.DRAGGING_MARKER,
            InteractionState.PLACING_MARKER,
        )

    def _viewport_changed(self) -> ViewportChanged:
        s = self.transform.state
        return ViewportChanged(s.scale, s.translate_x, s.translate_y)

    def _set_state(self, state: InteractionState):
        if state != self.state:
            logger.debug("interaction %s -> %s", self.state.value, state.value)
        self.state = state

    def _resting_state(self) -> InteractionState:
        return InteractionState.FORM_OPEN if self._form_pending else InteractionState.IDLE

    # ------------------------
    # Event dispatch
    # ------------------------
    def handle(self, event: InputEvent, geometry: ImageGeometry) -> List[object]:
        """Process one input event.

        Args:
            event: Input event in screen coordinates
            geometry: Current image layout at scale 1

        Returns:
            List of intents (possibly empty)
        """
        gesture = classify_gesture(event, event.target_marker_index, self.mode)

        if gesture == GestureKind.ZOOM:
            return self._on_zoom(event)
        if gesture == GestureKind.RELEASE:
            return self._on_release(event, geometry)
        if gesture == GestureKind.MOVE:
            return self._on_move(event, geometry)
        if gesture == GestureKind.NONE:
            return []

        # A new press always supersedes whatever gesture was left open
        if self.is_busy:
            self._end_gesture()

        if gesture == GestureKind.PAN:
            self._anchor = event.point
            self._set_state(InteractionState.PANNING)
            return []
        if gesture == GestureKind.DRAG_MARKER:
            self.drag_index = event.target_marker_index
            self.selected_index = event.target_marker_index
            self._set_state(InteractionState.DRAGGING_MARKER)
            return [MarkerSelected(event.target_marker_index)]
        if gesture == GestureKind.SELECT_MARKER:
            # Pans like the empty canvas; selects on a release without travel
            self._anchor = event.point
            self._press_point = event.point
            self._press_moved = False
            self._press_target = event.target_marker_index
            self._set_state(InteractionState.PANNING)
            return []
        if gesture == GestureKind.EDIT_MARKER:
            self.selected_index = event.target_marker_index
            return [MarkerEditRequested(event.target_marker_index)]
        if gesture == GestureKind.PLACE_MARKER:
            self._press_point = event.point
            self._press_moved = False
            self._set_state(InteractionState.PLACING_MARKER)
            return []
        return []

    def _on_zoom(self, event: InputEvent) -> List[object]:
        if event.kind == EventKind.WHEEL:
            step = self.config.wheel_step if event.wheel_delta > 0 else -self.config.wheel_step
            changed = self.transform.zoom_at(event.point, step)
            return [self._viewport_changed()] if changed else []

        # Two-finger pinch: scale by the change in finger distance around the midpoint
        mid, dist = event.pinch_geometry()
        if self.state in (InteractionState.PANNING, InteractionState.PLACING_MARKER):
            self._end_gesture()
        if self._pinch is None or self._pinch[1] <= 0 or dist <= 0:
            self._pinch = (mid, dist)
            return []
        prev_mid, prev_dist = self._pinch
        self._pinch = (mid, dist)
        scale = self.transform.scale
        self.transform.zoom_at(mid, scale * (dist / prev_dist) - scale)
        self.transform.pan_by((mid[0] - prev_mid[0], mid[1] - prev_mid[1]))
        return [self._viewport_changed()]

    def _track_travel(self, point: Point):
        if self._press_point is None:
            return
        travel = math.hypot(point[0] - self._press_point[0], point[1] - self._press_point[1])
        if travel > self.config.click_slop:
            self._press_moved = True

    def _on_move(self, event: InputEvent, geometry: ImageGeometry) -> List[object]:
        if self.state == InteractionState.PANNING and self._anchor is not None:
            self._track_travel(event.point)
            dx = event.point[0] - self._anchor[0]
            dy = event.point[1] - self._anchor[1]
            self._anchor = event.point
            if dx == 0 and dy == 0:
                return []
            self.transform.pan_by((dx, dy))
            return [self._viewport_changed()]

        if self.state == InteractionState.DRAGGING_MARKER and self.drag_index is not None:
            if geometry.is_empty:
                return []
            x, y = self.transform.screen_to_image_percent(event.point, geometry, clamp=True)
            return [MarkerMoved(self.drag_index, x, y)]

        if self.state == InteractionState.PLACING_MARKER:
            self._track_travel(event.point)
            return []

        # Move with no active gesture
        return []

    def _on_release(self, event: InputEvent, geometry: ImageGeometry) -> List[object]:
        intents: List[object] = []
        if (
            self.state == InteractionState.PLACING_MARKER
            and event.kind == EventKind.POINTER_UP
            and not self._press_moved
            and self.transform.contains(event.point, geometry)
        ):
            # Placement is not clamped: the click is already on the image
            x, y = self.transform.screen_to_image_percent(event.point, geometry)
            intents.append(MarkerAdded(x, y))
            self._form_pending = True
            self.selected_index = None
        elif (
            self.state == InteractionState.PANNING
            and self._press_target is not None
            and event.kind in (EventKind.POINTER_UP, EventKind.TOUCH_END)
            and not self._press_moved
        ):
            self.selected_index = self._press_target
            intents.append(MarkerSelected(self._press_target))
        self._end_gesture()
        return intents

    def _end_gesture(self):
        self._anchor = None
        self._press_point = None
        self._press_moved = False
        self._press_target = None
        self._pinch = None
        self.drag_index = None
        self._set_state(self._resting_state())

    # ------------------------
    # Host commands
    # ------------------------
    def cancel(self):
        """Abort any active gesture (e.g. focus lost)."""
        self._end_gesture()

    def close_form(self):
        """The marker form was confirmed or cancelled."""
        self._form_pending = False
        if self.state == InteractionState.FORM_OPEN:
            self._set_state(InteractionState.IDLE)

    def set_mode(self, mode: InteractionMode):
        """Switch between viewing and editing; cancels gestures and pending forms."""
        self.mode = mode
        self._form_pending = False
        self.selected_index = None
        self._end_gesture()

    def request_delete(self, index: Optional[int] = None) -> List[object]:
        """Ask the host to delete a marker (defaults to the selected one).

        The selection is left alone until the host reports the deletion
        with ``marker_removed``, so a cancelled confirmation keeps it.
        """
        if index is None:
            index = self.selected_index
        if index is None:
            return []
        return [MarkerDeleteRequested(index)]

    def marker_removed(self, index: int):
        """The host deleted marker ``index``; keep the selection on the same marker."""
        if self.selected_index is None:
            return
        if self.selected_index == index:
            self.selected_index = None
        elif self.selected_index > index:
            self.selected_index -= 1

    def zoom_in(self, viewport_size: Size) -> List[object]:
        changed = self.transform.zoom_about_center(viewport_size, self.config.button_step)
        return [self._viewport_changed()] if changed else []

    def zoom_out(self, viewport_size: Size) -> List[object]:
        changed = self.transform.zoom_about_center(viewport_size, -self.config.button_step)
        return [self._viewport_changed()] if changed else []

    def reset_view(self) -> List[object]:
        self.transform.reset()
        return [self._viewport_changed()]

    def frame(
        self,
        highlight: HighlightSet,
        markers: Sequence[Marker],
        geometry: ImageGeometry,
        viewport_size: Size,
    ) -> List[object]:
        """Auto-frame the highlighted markers.

        Idempotent for a given input: only the viewport changes, markers are
        read-only here.
        """
        state = frame_highlights(markers, highlight, geometry, viewport_size, self.config)
        if state is None:
            return []
        self.transform.set_state(state)
        return [self._viewport_changed()]
