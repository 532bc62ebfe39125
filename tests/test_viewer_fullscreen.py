"""Tests for the full-screen diagram mode of DiagramViewer.

Runs on Qt's offscreen platform; skipped when PySide6 cannot be loaded.
"""

import os
import sys
from pathlib import Path

import pytest

# Add parent directory to path to import EquipmentMapViewer module
sys.path.insert(0, str(Path(__file__).parent.parent))

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
QtWidgets = pytest.importorskip("PySide6.QtWidgets")

from EquipmentMapViewer.core.gestures import InteractionMode
from EquipmentMapViewer.core.viewport import ViewportState
from EquipmentMapViewer.ui.viewer import DiagramViewer


@pytest.fixture(scope="module")
def app():
    return QtWidgets.QApplication.instance() or QtWidgets.QApplication([])


@pytest.fixture
def viewer(app):
    v = DiagramViewer(InteractionMode.VIEW)
    v.show()
    yield v
    v.close()


def test_fullscreen_resets_view_and_hides_panels(viewer):
    viewer.canvas.controller.transform.set_state(ViewportState(2.0, -40.0, 25.0))

    viewer.set_fullscreen(True)
    assert viewer.fullscreen
    assert viewer.fullscreen_action.isChecked()
    assert viewer.canvas.controller.viewport == ViewportState(1.0, 0.0, 0.0)
    assert not viewer.results_dock.isVisible()
    assert not viewer.status.isVisible()

    viewer.set_fullscreen(False)
    assert not viewer.fullscreen
    assert not viewer.fullscreen_action.isChecked()
    assert viewer.results_dock.isVisible()
    assert viewer.status.isVisible()


def test_fullscreen_action_toggles(viewer):
    viewer.fullscreen_action.trigger()
    assert viewer.fullscreen
    viewer.fullscreen_action.trigger()
    assert not viewer.fullscreen
