"""Dialogs package."""

from .help_dialog import HelpDialog
from .equipment_dialog import EquipmentDetailsDialog
from .marker_form_dialog import MarkerFormDialog

__all__ = ["HelpDialog", "EquipmentDetailsDialog", "MarkerFormDialog"]
