"""Test configuration and fixtures."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtWidgets import QApplication

from floorplan import InteractionController, PlanScene


@pytest.fixture(scope="session")
def qapp():
    """One QApplication for every widget and painting test."""
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def scene():
    return PlanScene()


class Recorder:
    """Collects controller callbacks."""

    def __init__(self):
        self.selections = []
        self.measures = []
        self.redraws = 0

    def redraw(self):
        self.redraws += 1


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def controller(scene, recorder):
    return InteractionController(
        scene,
        on_selection_changed=recorder.selections.append,
        on_measure_changed=recorder.measures.append,
        on_redraw=recorder.redraw,
    )


@pytest.fixture
def square_room(scene):
    """A 200x200 polygon room at the origin, drawn clockwise on screen."""
    from PySide6.QtCore import QPointF
    room = scene.factory.poly_room([QPointF(0, 0), QPointF(200, 0), QPointF(200, 200), QPointF(0, 200)])
    scene.append(room)
    return room
