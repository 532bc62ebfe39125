"""Application-wide constants for EquipmentMapViewer.

This module contains shared constants used across the application.
"""

# Zoom scale limits
EDITOR_MIN_ZOOM_SCALE = 0.5
EDITOR_MAX_ZOOM_SCALE = 3.0
VIEWER_MIN_ZOOM_SCALE = 0.5
VIEWER_MAX_ZOOM_SCALE = 5.0

# Zoom steps (added to the current scale)
WHEEL_ZOOM_STEP = 0.1
BUTTON_ZOOM_STEP = 0.25

# Auto-framing
SINGLE_TARGET_SCALE = 2.0
FRAME_PADDING = 100.0  # screen pixels around the highlighted markers
FRAME_MIN_SCALE = 0.5
FRAME_MAX_SCALE = 2.0

# Function-location search: more matches than this are not highlighted
HIGHLIGHT_LIMIT = 10

# Pointer handling (screen pixels)
CLICK_SLOP = 4.0
MARKER_HIT_RADIUS = 8.0
MARKER_DRAW_RADIUS = 5.0

# Marker percent coordinates
PERCENT_MIN = 0.0
PERCENT_MAX = 100.0
