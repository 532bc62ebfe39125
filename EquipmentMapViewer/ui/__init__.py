"""UI components package."""

from .viewer import DiagramViewer
from .widgets import DiagramCanvas
from .dialogs import HelpDialog, EquipmentDetailsDialog, MarkerFormDialog

__all__ = [
    "DiagramViewer",
    "DiagramCanvas",
    "HelpDialog",
    "EquipmentDetailsDialog",
    "MarkerFormDialog",
]
