"""Tests for gesture classification.

The classifier decides pan vs. marker drag vs. marker placement from the
event, the hit-test result and the current mode.
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path to import EquipmentMapViewer module
sys.path.insert(0, str(Path(__file__).parent.parent))

from EquipmentMapViewer.core.gestures import (
    Button,
    EventKind,
    GestureKind,
    InputEvent,
    InteractionMode,
    Modifiers,
    classify_gesture,
)

VIEW = InteractionMode.VIEW
EDIT = InteractionMode.EDIT


def press(button=Button.PRIMARY, **mods):
    return InputEvent(EventKind.POINTER_DOWN, (10.0, 10.0), button, Modifiers(**mods))


@pytest.mark.parametrize(
    "event, hit, mode, expected",
    [
        (press(), None, EDIT, GestureKind.PLACE_MARKER),
        (press(), None, VIEW, GestureKind.PAN),
        (press(), 2, EDIT, GestureKind.DRAG_MARKER),
        (press(), 2, VIEW, GestureKind.SELECT_MARKER),
        (press(ctrl=True), None, EDIT, GestureKind.PAN),
        (press(meta=True), None, EDIT, GestureKind.PAN),
        (press(meta=True), 0, EDIT, GestureKind.DRAG_MARKER),
        (press(ctrl=True), 0, VIEW, GestureKind.SELECT_MARKER),
        (press(Button.MIDDLE), 0, EDIT, GestureKind.PAN),
        (press(Button.SECONDARY), None, EDIT, GestureKind.NONE),
        (press(shift=True), None, EDIT, GestureKind.PLACE_MARKER),
    ],
)
def test_pointer_down(event, hit, mode, expected):
    assert classify_gesture(event, hit, mode) == expected


def test_wheel_is_zoom_in_every_mode():
    wheel = InputEvent(EventKind.WHEEL, wheel_delta=120.0)
    assert classify_gesture(wheel, None, VIEW) == GestureKind.ZOOM
    assert classify_gesture(wheel, 3, EDIT) == GestureKind.ZOOM
    assert classify_gesture(InputEvent(EventKind.WHEEL), None, VIEW) == GestureKind.NONE


@pytest.mark.parametrize("kind", [EventKind.POINTER_UP, EventKind.POINTER_LEAVE, EventKind.TOUCH_END])
def test_release_kinds(kind):
    assert classify_gesture(InputEvent(kind), None, EDIT) == GestureKind.RELEASE


def test_moves():
    assert classify_gesture(InputEvent(EventKind.POINTER_MOVE), None, VIEW) == GestureKind.MOVE
    assert classify_gesture(InputEvent(EventKind.TOUCH_MOVE, touches=((1.0, 1.0),)), None, VIEW) == GestureKind.MOVE


def test_touch():
    one = InputEvent(EventKind.TOUCH_START, (5.0, 5.0), touches=((5.0, 5.0),))
    assert classify_gesture(one, None, EDIT) == GestureKind.PAN
    assert classify_gesture(one, 1, EDIT) == GestureKind.DRAG_MARKER
    assert classify_gesture(one, 1, VIEW) == GestureKind.SELECT_MARKER

    two = InputEvent(EventKind.TOUCH_START, touches=((0.0, 0.0), (10.0, 0.0)))
    assert classify_gesture(two, 1, EDIT) == GestureKind.ZOOM
    two_move = InputEvent(EventKind.TOUCH_MOVE, touches=((0.0, 0.0), (20.0, 0.0)))
    assert classify_gesture(two_move, None, VIEW) == GestureKind.ZOOM


def test_double_click():
    dbl = InputEvent(EventKind.DOUBLE_CLICK, button=Button.PRIMARY)
    assert classify_gesture(dbl, 0, EDIT) == GestureKind.EDIT_MARKER
    assert classify_gesture(dbl, 0, VIEW) == GestureKind.NONE
    assert classify_gesture(dbl, None, EDIT) == GestureKind.NONE


def test_pinch_geometry():
    event = InputEvent(EventKind.TOUCH_MOVE, touches=((0.0, 0.0), (30.0, 40.0)))
    mid, dist = event.pinch_geometry()
    assert mid == (15.0, 20.0)
    assert dist == 50.0
    assert InputEvent(EventKind.TOUCH_MOVE, touches=((0.0, 0.0),)).pinch_geometry() is None
