"""Read-only dialog listing the equipment installed at a marker."""

from PySide6.QtWidgets import (
    QAbstractItemView,
    QDialog,
    QDialogButtonBox,
    QHeaderView,
    QLabel,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
)

from ...core.markers import Marker

COLUMNS = ["Part number", "Alternates", "Description", "Function location", "Qty", "Status"]


class EquipmentDetailsDialog(QDialog):
    """Shows the payload of one marker as a table.

    Highlighted function locations (from the current search) are shown in
    bold so users can see which item matched.
    """

    def __init__(self, marker: Marker, parent=None, query: str = ""):
        super().__init__(parent)
        self.setWindowTitle("Installed equipment")
        self.resize(720, 280)
        self.marker = marker

        header = f"Position: x={marker.x_percent:.1f}% y={marker.y_percent:.1f}%"
        if marker.zone:
            header += f"   Zone: {marker.zone}"
        self.header_label = QLabel(header)

        self.table = QTableWidget(len(marker.payload), len(COLUMNS), self)
        self.table.setHorizontalHeaderLabels(COLUMNS)
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table.verticalHeader().setVisible(False)
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeToContents)
        self.table.horizontalHeader().setStretchLastSection(True)

        needle = query.strip().upper()
        for row, item in enumerate(marker.payload):
            values = [
                item.part_number,
                ", ".join(item.alternate_part_numbers),
                item.description,
                item.function_location,
                "" if item.quantity is None else str(item.quantity),
                item.status or "",
            ]
            for col, value in enumerate(values):
                cell = QTableWidgetItem(value)
                if col == 3 and needle and needle in value.upper():
                    font = cell.font()
                    font.setBold(True)
                    cell.setFont(font)
                self.table.setItem(row, col, cell)

        empty = QLabel("No equipment registered at this location.")
        empty.setVisible(not marker.payload)

        buttons = QDialogButtonBox(QDialogButtonBox.Close)
        buttons.rejected.connect(self.reject)

        layout = QVBoxLayout(self)
        layout.addWidget(self.header_label)
        layout.addWidget(self.table)
        layout.addWidget(empty)
        layout.addWidget(buttons)
