"""Diagram viewer package with modular components.

This package provides the main DiagramViewer window split into logical components:
- viewer.py: Main DiagramViewer class coordinating all components
- menu_builder.py: Menu and keyboard shortcut setup
- zoom_manager.py: Zoom, reset and auto-framing commands
- status_updater.py: Status bar update logic
"""

from .viewer import DiagramViewer

__all__ = ["DiagramViewer"]
