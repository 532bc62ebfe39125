"""Core (UI-independent) components.

Everything here is plain Python/NumPy so it can be unit-tested without a
display. ``image_io`` is the exception: it needs Qt and OpenCV and is
imported directly by the UI.
"""

from .config import ViewportConfig, EDITOR_CONFIG, VIEWER_CONFIG
from .viewport import (
    ViewportState,
    ImageGeometry,
    ViewportTransform,
    image_percent_to_pixel,
    pixel_to_image_percent,
)
from .framing import auto_frame, bounding_box, frame_highlights
from .gestures import (
    EventKind,
    Button,
    Modifiers,
    InputEvent,
    InteractionMode,
    GestureKind,
    classify_gesture,
)
from .intents import (
    MarkerAdded,
    MarkerMoved,
    MarkerSelected,
    MarkerEditRequested,
    MarkerDeleteRequested,
    ViewportChanged,
)
from .interaction import InteractionController, InteractionState
from .markers import EquipmentItem, Marker, hit_test, apply_intents
from .search import HighlightSet, find_function_locations, resolve_highlights
from .marker_io import MarkerFileError, load_markers, save_markers

__all__ = [
    "ViewportConfig",
    "EDITOR_CONFIG",
    "VIEWER_CONFIG",
    "ViewportState",
    "ImageGeometry",
    "ViewportTransform",
    "image_percent_to_pixel",
    "pixel_to_image_percent",
    "auto_frame",
    "bounding_box",
    "frame_highlights",
    "EventKind",
    "Button",
    "Modifiers",
    "InputEvent",
    "InteractionMode",
    "GestureKind",
    "classify_gesture",
    "MarkerAdded",
    "MarkerMoved",
    "MarkerSelected",
    "MarkerEditRequested",
    "MarkerDeleteRequested",
    "ViewportChanged",
    "InteractionController",
    "InteractionState",
    "EquipmentItem",
    "Marker",
    "hit_test",
    "apply_intents",
    "HighlightSet",
    "find_function_locations",
    "resolve_highlights",
    "MarkerFileError",
    "load_markers",
    "save_markers",
]
