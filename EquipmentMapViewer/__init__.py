"""EquipmentMapViewer - locate aircraft equipment on zoomable diagrams.

This package provides a Qt-based diagram viewer where equipment markers
are placed on aircraft diagrams and looked up by function location:

Core Features:
    - Zoom at cursor (wheel, pinch) and about the view center (buttons)
    - Pan by drag, with clean gesture ending on release or pointer leave
    - Markers stored in percent-of-image coordinates
    - Auto-framing of one or several highlighted markers

Editing:
    - Place markers by clicking, drag them, edit or delete them
    - Equipment form with part numbers, name and function locations
    - Marker import/export as JSON or CSV

Package Structure:
    - core/: UI-independent logic (viewport math, gestures, interaction
      state machine, markers, search, file I/O)
    - ui/: UI components (viewer, canvas widget, dialogs)

Quick Start:
    from EquipmentMapViewer import main
    main()

Dependencies:
    - PySide6: Qt for Python
    - numpy: Array operations
    - opencv-python: Image loading
    - polars: CSV marker import/export
"""

__version__ = "0.1.0"
__all__ = ["main"]


def main(argv=None):
    """Run the application (imports Qt lazily so ``core`` stays Qt-free)."""
    from .app import main as _main

    return _main(argv)
