"""Input events and gesture classification.

Host widgets translate their native mouse/wheel/touch events into
``InputEvent`` objects. ``classify_gesture`` then decides, without touching
any state, what a given event means:

Mouse (edit mode):
    - Left-drag on a marker: move the marker
    - Left-click on the image: place a new marker
    - Ctrl + Left-drag on empty canvas, or Middle-drag: pan
    - Double-click on a marker: edit its equipment

Mouse (view mode):
    - Left-click on a marker: show its equipment
    - Left-drag (also starting on a marker) or Middle-drag: pan

Wheel and two-finger pinch zoom in both modes. Releasing the button,
lifting the finger or leaving the widget ends whatever gesture is active.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

Point = Tuple[float, float]


class EventKind(Enum):
    WHEEL = "wheel"
    POINTER_DOWN = "pointerdown"
    POINTER_MOVE = "pointermove"
    POINTER_UP = "pointerup"
    POINTER_LEAVE = "pointerleave"
    TOUCH_START = "touchstart"
    TOUCH_MOVE = "touchmove"
    TOUCH_END = "touchend"
    DOUBLE_CLICK = "dblclick"


class Button(Enum):
    NONE = 0
    PRIMARY = 1
    MIDDLE = 2
    SECONDARY = 3


class InteractionMode(Enum):
    VIEW = "view"
    EDIT = "edit"


class GestureKind(Enum):
    NONE = "none"
    ZOOM = "zoom"
    PAN = "pan"
    DRAG_MARKER = "drag_marker"
    SELECT_MARKER = "select_marker"
    PLACE_MARKER = "place_marker"
    EDIT_MARKER = "edit_marker"
    RELEASE = "release"
    MOVE = "move"


@dataclass(frozen=True)
class Modifiers:
    ctrl: bool = False
    shift: bool = False
    alt: bool = False
    meta: bool = False

    @property
    def pan_modifier(self) -> bool:
        """Ctrl (or Cmd on macOS) turns a left-drag into a pan."""
        return self.ctrl or self.meta


NO_MODIFIERS = Modifiers()

PRESS_KINDS = (EventKind.POINTER_DOWN, EventKind.TOUCH_START)
MOVE_KINDS = (EventKind.POINTER_MOVE, EventKind.TOUCH_MOVE)
RELEASE_KINDS = (EventKind.POINTER_UP, EventKind.POINTER_LEAVE, EventKind.TOUCH_END)
TOUCH_KINDS = (EventKind.TOUCH_START, EventKind.TOUCH_MOVE, EventKind.TOUCH_END)


@dataclass(frozen=True)
class InputEvent:
    """A host-independent input event.

    Attributes:
        kind: What happened
        point: Position in screen (container) coordinates
        button: Pressed button for pointer presses
        modifiers: Keyboard modifiers held during the event
        target_marker_index: Marker under the pointer, as hit-tested by the host
        wheel_delta: Vertical wheel delta; positive means scrolling up (zoom in)
        touches: All active touch points for touch events
    """

    kind: EventKind
    point: Point = (0.0, 0.0)
    button: Button = Button.NONE
    modifiers: Modifiers = NO_MODIFIERS
    target_marker_index: Optional[int] = None
    wheel_delta: float = 0.0
    touches: Tuple[Point, ...] = ()

    @property
    def is_touch(self) -> bool:
        return self.kind in TOUCH_KINDS

    @property
    def is_multi_touch(self) -> bool:
        return self.is_touch and len(self.touches) >= 2

    def pinch_geometry(self) -> Optional[Tuple[Point, float]]:
        """Return (midpoint, distance) of the first two touches, if any."""
        if len(self.touches) < 2:
            return None
        (x0, y0), (x1, y1) = self.touches[0], self.touches[1]
        return (((x0 + x1) / 2.0, (y0 + y1) / 2.0), math.hypot(x1 - x0, y1 - y0))


def classify_gesture(event: InputEvent, hit_index: Optional[int], mode: InteractionMode) -> GestureKind:
    """Decide which gesture an input event starts or continues.

    Press resolution order: the marker hit test for a primary press, then
    the pan triggers (middle button, modifier + left), then the empty-canvas
    action for the mode. A primary press on a marker never pans, even with
    the pan modifier held.

    Args:
        event: The input event
        hit_index: Marker under the pointer, or None
        mode: Current interaction mode

    Returns:
        GestureKind
    """
    kind = event.kind

    if kind == EventKind.WHEEL:
        return GestureKind.ZOOM if event.wheel_delta != 0 else GestureKind.NONE

    if event.is_multi_touch and kind in (EventKind.TOUCH_START, EventKind.TOUCH_MOVE):
        return GestureKind.ZOOM

    if kind in RELEASE_KINDS:
        return GestureKind.RELEASE

    if kind in MOVE_KINDS:
        return GestureKind.MOVE

    if kind == EventKind.DOUBLE_CLICK:
        if mode == InteractionMode.EDIT and hit_index is not None and event.button == Button.PRIMARY:
            return GestureKind.EDIT_MARKER
        return GestureKind.NONE

    if kind == EventKind.TOUCH_START:
        if hit_index is not None:
            return GestureKind.DRAG_MARKER if mode == InteractionMode.EDIT else GestureKind.SELECT_MARKER
        return GestureKind.PAN

    if kind == EventKind.POINTER_DOWN:
        if event.button == Button.MIDDLE:
            return GestureKind.PAN
        if event.button != Button.PRIMARY:
            return GestureKind.NONE
        if hit_index is not None:
            return GestureKind.DRAG_MARKER if mode == InteractionMode.EDIT else GestureKind.SELECT_MARKER
        if event.modifiers.pan_modifier:
            return GestureKind.PAN
        return GestureKind.PLACE_MARKER if mode == InteractionMode.EDIT else GestureKind.PAN

    return GestureKind.NONE
