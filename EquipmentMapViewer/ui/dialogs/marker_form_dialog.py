"""Form dialog for registering the equipment at a marker.

Opened by the editor after a marker is placed (or when an existing marker
is double-clicked). Collects part numbers, an equipment name and the
function locations where it is installed.
"""

from typing import List, Optional, Sequence

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QCompleter,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QHBoxLayout,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from ...core.markers import EquipmentItem, Marker, build_equipment_item, find_known_item, known_part_numbers


class _LineListWidget(QWidget):
    """A growable list of single-line text fields."""

    def __init__(self, placeholder: str, add_text: str, parent=None, completions: Sequence[str] = ()):
        super().__init__(parent)
        self.placeholder = placeholder
        self.completions = list(completions)
        self.rows: List[QWidget] = []

        self.rows_layout = QVBoxLayout()
        self.rows_layout.setContentsMargins(0, 0, 0, 0)
        add_btn = QPushButton(add_text)
        add_btn.clicked.connect(lambda: self.add_row())

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addLayout(self.rows_layout)
        layout.addWidget(add_btn, alignment=Qt.AlignLeft)

    def add_row(self, text: str = "") -> QLineEdit:
        row = QWidget(self)
        h = QHBoxLayout(row)
        h.setContentsMargins(0, 0, 0, 0)
        edit = QLineEdit(text, row)
        edit.setPlaceholderText(self.placeholder)
        if self.completions:
            completer = QCompleter(self.completions, edit)
            completer.setCaseSensitivity(Qt.CaseInsensitive)
            edit.setCompleter(completer)
        remove_btn = QPushButton("Remove", row)
        remove_btn.clicked.connect(lambda: self._remove_row(row))
        h.addWidget(edit)
        h.addWidget(remove_btn)
        row.edit = edit
        self.rows.append(row)
        self.rows_layout.addWidget(row)
        return edit

    def _remove_row(self, row: QWidget):
        # Keep at least one field
        if len(self.rows) <= 1:
            row.edit.clear()
            return
        self.rows.remove(row)
        row.deleteLater()

    def values(self) -> List[str]:
        return [row.edit.text().strip() for row in self.rows if row.edit.text().strip()]

    def set_values(self, values: Sequence[str]):
        for row in list(self.rows):
            self.rows.remove(row)
            row.deleteLater()
        for v in values or [""]:
            self.add_row(v)


class MarkerFormDialog(QDialog):
    """Edit the first equipment item of a marker.

    Other items in the payload (e.g. from an imported CSV) are preserved.
    When a known part number is entered on a new marker, its description
    and alternate part numbers are filled in from the existing markers.
    """

    def __init__(self, parent=None, marker: Optional[Marker] = None, known_markers: Sequence[Marker] = ()):
        super().__init__(parent)
        self.setWindowTitle("Edit equipment" if marker is not None and marker.payload else "Register equipment")
        self.resize(520, 360)
        self.marker = marker
        self.known_markers = list(known_markers)
        self._item: Optional[EquipmentItem] = None

        self.part_numbers = _LineListWidget(
            "Part number", "Add part number", self, completions=known_part_numbers(self.known_markers)
        )
        self.name_edit = QLineEdit(self)
        self.name_edit.setPlaceholderText("Equipment name")
        self.locations = _LineListWidget("Function location (e.g. 21-51-01)", "Add function location", self)
        self.zone_edit = QLineEdit(self)
        self.zone_edit.setPlaceholderText("Optional")

        first = marker.payload[0] if marker is not None and marker.payload else None
        if first is not None:
            self.part_numbers.set_values(first.all_part_numbers)
            self.name_edit.setText(first.description)
            self.locations.set_values(first.function_locations)
        else:
            self.part_numbers.add_row()
            self.locations.add_row()
        if marker is not None and marker.zone:
            self.zone_edit.setText(marker.zone)

        # Autofill from known equipment when the primary part number is complete
        primary = self.part_numbers.rows[0].edit
        primary.editingFinished.connect(self._autofill_from_known)

        form = QFormLayout()
        form.addRow("Part numbers", self.part_numbers)
        form.addRow("Equipment name", self.name_edit)
        form.addRow("Function locations", self.locations)
        form.addRow("Zone", self.zone_edit)

        buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)

        layout = QVBoxLayout(self)
        layout.addLayout(form)
        layout.addStretch(1)
        layout.addWidget(buttons)

    def _autofill_from_known(self):
        if self.name_edit.text().strip():
            return
        values = self.part_numbers.values()
        if not values:
            return
        item = find_known_item(self.known_markers, values[0])
        if item is None:
            return
        self.name_edit.setText(item.description)
        alternates = [pn for pn in item.all_part_numbers if pn not in (v.upper() for v in values)]
        for pn in alternates:
            self.part_numbers.add_row(pn)

    def accept(self):
        """Validate the form before closing."""
        if not self.part_numbers.values():
            QMessageBox.warning(self, "Equipment", "Enter at least one part number.")
            return
        if not self.name_edit.text().strip():
            QMessageBox.warning(self, "Equipment", "Enter the equipment name.")
            return
        first = self.marker.payload[0] if self.marker is not None and self.marker.payload else None
        self._item = build_equipment_item(
            self.part_numbers.values(),
            self.name_edit.text(),
            self.locations.values(),
            quantity=first.quantity if first else None,
            status=first.status if first else None,
        )
        if first is not None:
            self._item.id = first.id
        super().accept()

    def payload(self) -> List[EquipmentItem]:
        """Return the marker payload with the edited item first."""
        rest = list(self.marker.payload[1:]) if self.marker is not None else []
        return ([self._item] if self._item is not None else []) + rest

    def zone(self) -> Optional[str]:
        return self.zone_edit.text().strip() or None
