from __future__ import annotations
from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QWidget, QHBoxLayout, QToolButton
from .models import Layer


class LayersHUD(QWidget):
    """Layer filter buttons floating in the canvas corner."""

    layerChanged = Signal(str)

    def __init__(self, host: QWidget):
        super().__init__(host)
        self.host = host
        self.setObjectName("LayersHUD")
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setStyleSheet("""
            QWidget#LayersHUD { background: rgba(255,255,255,0.95); border:1px solid #e7e8ee; border-radius:12px; }
            QToolButton { border:none; padding:4px 8px; border-radius:8px; }
            QToolButton:hover { background:#f2f4f7; }
            QToolButton:checked { background:#dbe7ff; }
        """)

        lay = QHBoxLayout(self)
        lay.setContentsMargins(6, 6, 6, 6)
        lay.setSpacing(4)

        self.buttons = {}
        for layer in Layer.CHOICES:
            btn = QToolButton(self)
            btn.setText(layer)
            btn.setToolTip(f"Show layer: {layer}")
            btn.setCheckable(True)
            btn.setAutoExclusive(True)
            btn.setFocusPolicy(Qt.NoFocus)
            btn.clicked.connect(lambda _=False, L=layer: self._set_layer(L))
            lay.addWidget(btn)
            self.buttons[layer] = btn

        self.buttons[Layer.ALL].setChecked(True)
        self.resize(self.sizeHint())
        self.show()
        self.raise_()

    def set_checked(self, layer: str):
        btn = self.buttons.get(layer)
        if btn:
            btn.setChecked(True)

    def _set_layer(self, layer: str):
        self.set_checked(layer)
        self.layerChanged.emit(layer)

    def reposition(self):
        margin = 12
        self.move(self.host.width() - self.width() - margin, self.host.height() - self.height() - margin)
