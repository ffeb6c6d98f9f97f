from __future__ import annotations
from typing import Optional

from PySide6.QtCore import Qt, QPointF, Signal
from PySide6.QtGui import QPainter, QWheelEvent
from PySide6.QtWidgets import QWidget, QSizePolicy

from .controller import InteractionController
from .hud import LayersHUD
from .renderer import render_plan
from .scene import PlanScene

KEY_NAMES = {
    Qt.Key_Left: "ArrowLeft",
    Qt.Key_Right: "ArrowRight",
    Qt.Key_Up: "ArrowUp",
    Qt.Key_Down: "ArrowDown",
    Qt.Key_Delete: "Delete",
    Qt.Key_Backspace: "Backspace",
    Qt.Key_Escape: "Escape",
    Qt.Key_Return: "Enter",
    Qt.Key_Enter: "Enter",
    Qt.Key_R: "r",
    Qt.Key_E: "e",
}

ZOOM_STEP = 1.15


class PlanCanvas(QWidget):
    """Host surface of one floor-plan editor instance.

    Owns its scene and controller; input reaches the controller only
    through this widget's own event handlers.
    """

    selectionChanged = Signal(object)  # summary JSON text or None
    measureChanged = Signal(str)

    def __init__(self, scene: Optional[PlanScene] = None, parent=None):
        super().__init__(parent)
        self.scene = scene or PlanScene()
        self.controller = InteractionController(
            self.scene,
            on_selection_changed=self.selectionChanged.emit,
            on_measure_changed=self.measureChanged.emit,
            on_redraw=self.update,
        )
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setMinimumSize(320, 240)
        self._space_down = False
        self._pan_last: Optional[QPointF] = None

        self.hud = LayersHUD(self)
        self.hud.layerChanged.connect(self.controller.set_layer)
        self.hud.reposition()

    def detach(self):
        """Stop forwarding controller callbacks (editor teardown)."""
        self.controller.on_selection_changed = None
        self.controller.on_measure_changed = None
        self.controller.on_redraw = None

    def closeEvent(self, event):
        self.detach()
        super().closeEvent(event)

    def _world(self, event) -> QPointF:
        return self.controller.view.screen_to_world(event.position())

    # ---- painting ----
    def paintEvent(self, event):
        painter = QPainter(self)
        try:
            # size is read on every paint so host resizes need no extra hook
            render_plan(painter, self.scene, self.controller, self.width(), self.height())
        finally:
            painter.end()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.hud.reposition()

    # ---- mouse ----
    def mousePressEvent(self, event):
        if event.button() == Qt.MiddleButton or (event.button() == Qt.LeftButton and self._space_down):
            self._pan_last = event.position()
            self.setCursor(Qt.ClosedHandCursor)
            event.accept()
            return
        if event.button() == Qt.LeftButton:
            self.setFocus()
            self.controller.pointer_down(self._world(event))
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        if self._pan_last is not None:
            delta = event.position() - self._pan_last
            self._pan_last = event.position()
            self.controller.view.pan_by(delta.x(), delta.y())
            self.update()
            return
        self.controller.pointer_move(self._world(event))

    def mouseReleaseEvent(self, event):
        if self._pan_last is not None:
            self._pan_last = None
            self.setCursor(Qt.OpenHandCursor if self._space_down else Qt.ArrowCursor)
            return
        if event.button() == Qt.LeftButton:
            pt = self._world(event)
            if not self.controller.pointer_up(pt):
                self.controller.click(pt)
            event.accept()
            return
        super().mouseReleaseEvent(event)

    def wheelEvent(self, event: QWheelEvent):
        if event.modifiers() & Qt.ControlModifier:
            factor = ZOOM_STEP if event.angleDelta().y() > 0 else 1.0 / ZOOM_STEP
            self.controller.view.zoom_at(event.position(), factor)
        else:
            if not event.pixelDelta().isNull():
                dx, dy = event.pixelDelta().x(), event.pixelDelta().y()
            else:
                dx, dy = event.angleDelta().x() / 4, event.angleDelta().y() / 4
            self.controller.view.pan_by(dx, dy)
        self.update()
        event.accept()

    # ---- keyboard ----
    def keyPressEvent(self, event):
        if event.key() == Qt.Key_Space and not event.isAutoRepeat():
            self._space_down = True
            self.setCursor(Qt.OpenHandCursor)
            event.accept()
            return
        name = KEY_NAMES.get(event.key())
        shift = bool(event.modifiers() & Qt.ShiftModifier)
        if name and self.controller.key_press(name, shift=shift):
            event.accept()
            return
        super().keyPressEvent(event)

    def keyReleaseEvent(self, event):
        if event.key() == Qt.Key_Space and not event.isAutoRepeat():
            self._space_down = False
            self.setCursor(Qt.ArrowCursor)
            event.accept()
            return
        super().keyReleaseEvent(event)

    def reset_view(self):
        self.controller.view.reset()
        self.update()
