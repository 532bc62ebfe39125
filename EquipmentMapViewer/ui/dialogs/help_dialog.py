"""Help dialog showing keyboard shortcuts."""

from PySide6.QtWidgets import QDialog, QTextEdit, QVBoxLayout


class HelpDialog(QDialog):
    """Dialog showing keyboard shortcuts and mouse/touch controls.

    Displays a read-only text widget with all available shortcuts for
    both the view and edit modes.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Help / Keyboard shortcuts")
        self.resize(640, 520)

        text = QTextEdit(self)
        text.setReadOnly(True)

        content = (
            "EquipmentMapViewer help\n"
            "================================\n\n"
            "[Basics]\n"
            "  Ctrl+O : Open diagram image\n"
            "  Ctrl+I / Ctrl+S : Import / export markers (JSON or CSV)\n"
            "  E      : Toggle edit mode\n"
            "  + / -  : Zoom in / out about the view center\n"
            "  0      : Reset view\n"
            "  f      : Frame highlighted markers\n"
            "  F11    : Full screen (Esc to leave)\n"
            "  Ctrl+F : Find function location / Ctrl+Shift+F : clear search\n"
            "  Ctrl+W : Close\n\n"
            "[View mode]\n"
            "  Mouse wheel : Zoom at the cursor\n"
            "  Drag        : Pan\n"
            "  Click marker: Show installed equipment\n\n"
            "[Edit mode]\n"
            "  Click on the diagram     : Add a marker\n"
            "  Drag a marker            : Move it\n"
            "  Double-click a marker    : Edit its equipment\n"
            "  Del                      : Delete the selected marker\n"
            "  Ctrl+drag / middle drag  : Pan\n"
            "  Esc                      : Cancel the current drag\n\n"
            "[Touch]\n"
            "  One finger : Pan (or drag a marker in edit mode)\n"
            "  Two fingers: Pinch to zoom\n\n"
            "[Search]\n"
            "  One match highlights that marker and zooms in.\n"
            "  Up to 10 matches are highlighted together and framed.\n"
            "  More matches are listed but not highlighted.\n"
        )
        text.setPlainText(content)

        layout = QVBoxLayout(self)
        layout.addWidget(text)
