from __future__ import annotations
import json
from typing import Dict, Optional
from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QFormLayout, QLineEdit, QDoubleSpinBox, QComboBox, QLabel
)

from .controller import InteractionController
from .models import Layer
from .utils import MIN_SIZE

TITLES = {
    "room": "Room", "furniture": "Furniture", "custom": "Custom object",
    "door": "Door", "window": "Window", "marker": "Marker", "polyroom": "Polygon room",
}


class PropertyPanel(QWidget):
    """Editor for the selected object's name, position, size and layer."""

    def __init__(self, controller: InteractionController, parent=None):
        super().__init__(parent)
        self.controller = controller
        self._current: Optional[Dict] = None

        self.setMinimumWidth(240)
        root = QVBoxLayout(self)
        root.setContentsMargins(8, 8, 8, 8)
        root.setSpacing(10)

        self.lbl_title = QLabel("Nothing selected")
        self.lbl_title.setStyleSheet("font-weight: 600;")
        root.addWidget(self.lbl_title)

        self.frm = QWidget()
        form = QFormLayout(self.frm)
        form.setLabelAlignment(Qt.AlignRight)

        self.ed_name = QLineEdit()
        self.sp_x = QDoubleSpinBox(); self.sp_y = QDoubleSpinBox()
        self.sp_w = QDoubleSpinBox(); self.sp_h = QDoubleSpinBox()
        for s in (self.sp_x, self.sp_y):
            s.setRange(-99999, 99999); s.setDecimals(1); s.setSingleStep(1)
        for s in (self.sp_w, self.sp_h):
            s.setRange(MIN_SIZE, 99999); s.setDecimals(1); s.setSingleStep(5)
        self.cmb_layer = QComboBox()
        self.cmb_layer.setEditable(True)
        self.cmb_layer.addItems(list(Layer.CHOICES))

        form.addRow("Name:", self.ed_name)
        form.addRow("X:", self.sp_x)
        form.addRow("Y:", self.sp_y)
        form.addRow("Width:", self.sp_w)
        form.addRow("Height:", self.sp_h)
        form.addRow("Layer:", self.cmb_layer)
        root.addWidget(self.frm)
        root.addStretch(1)

        self.ed_name.textEdited.connect(lambda text: self._apply({"name": text.strip()}))
        self.sp_x.valueChanged.connect(lambda v: self._apply({"x": v}))
        self.sp_y.valueChanged.connect(lambda v: self._apply({"y": v}))
        self.sp_w.valueChanged.connect(lambda v: self._apply({"w": v}))
        self.sp_h.valueChanged.connect(lambda v: self._apply({"h": v}))
        self.cmb_layer.currentTextChanged.connect(lambda text: self._apply({"layer": text.strip()}))

        self.clear()

    # ---------- API ----------
    def clear(self):
        self._current = None
        self.lbl_title.setText("Nothing selected")
        self.frm.setVisible(False)

    def load_summary(self, summary: Optional[str]):
        if not summary:
            self.clear()
            return
        data = json.loads(summary)
        self._current = data
        kind = data.get("type", "")
        self.lbl_title.setText(f"Properties: {TITLES.get(kind, kind)}")
        self.frm.setVisible(True)

        widgets = (self.ed_name, self.sp_x, self.sp_y, self.sp_w, self.sp_h, self.cmb_layer)
        for wdg in widgets:
            wdg.blockSignals(True)
        self.ed_name.setText(data.get("name", ""))
        self.sp_x.setValue(float(data.get("x", 0)))
        self.sp_y.setValue(float(data.get("y", 0)))
        self.sp_w.setValue(max(MIN_SIZE, float(data.get("w", 0))))
        self.sp_h.setValue(max(MIN_SIZE, float(data.get("h", 0))))
        self.cmb_layer.setCurrentText(data.get("layer", Layer.ALL))
        for wdg in widgets:
            wdg.blockSignals(False)

        # markers have no size and polygon rooms are edited by dragging
        sized = kind not in ("marker", "polyroom")
        self.sp_w.setEnabled(sized); self.sp_h.setEnabled(sized)
        self.sp_x.setEnabled(kind != "polyroom"); self.sp_y.setEnabled(kind != "polyroom")

    # ---------- apply handlers ----------
    def _apply(self, patch: Dict):
        if self._current is None:
            return
        if "layer" in patch and not patch["layer"]:
            return
        self.controller.update_selected(patch)
