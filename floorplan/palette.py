from __future__ import annotations
from typing import Dict, Optional, Tuple
from PySide6.QtCore import Qt, QRect, QRectF, QSize, Signal
from PySide6.QtGui import QColor, QIcon, QPainter, QPen, QPixmap, QFont
from PySide6.QtWidgets import QWidget, QVBoxLayout, QGridLayout, QScrollArea, QLabel

from .factory import DEFAULTS
from .utils import MARKER_COLOR, parse_color

PREVIEW_MAX = 72.0

STRUCTURE = [
    {"name": "Room", "variant": "room"},
    {"name": "Door", "variant": "door"},
    {"name": "Window", "variant": "window"},
]
OBJECTS = [
    {"name": "Furniture", "variant": "furniture"},
    {"name": "Custom", "variant": "custom"},
]
MARKERS = [
    {"name": "Wi-Fi", "variant": "marker", "kind": "wifi"},
    {"name": "Sensor", "variant": "marker", "kind": "sensor"},
    {"name": "Outlet", "variant": "marker", "kind": "outlet"},
]


def make_icon(w: int, h: int, color: QColor, label: str = "") -> QIcon:
    pm = QPixmap(w, h); pm.fill(Qt.transparent)
    p = QPainter(pm); p.setRenderHint(QPainter.Antialiasing, True)
    p.setBrush(color); p.setPen(QPen(QColor(70, 70, 70), 1))
    r = QRectF(2, 2, w - 4, h - 4)
    p.drawRoundedRect(r, 4, 4)
    if label:
        p.setPen(Qt.black); p.setFont(QFont("", 8, QFont.Bold))
        p.drawText(r, Qt.AlignCenter, label)
    p.end()
    return QIcon(pm)


class PreviewTile(QWidget):
    """Clickable palette tile drawn at the variant's default proportions."""

    clicked = Signal(str, object)  # variant, marker kind

    def __init__(self, meta: Dict, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.meta = meta
        self.defaults = DEFAULTS[meta["variant"]]
        self.setCursor(Qt.PointingHandCursor)
        self.setToolTip(f"Add {meta['name']}")
        self.setObjectName("PreviewTile")

    def sizeHint(self) -> QSize:
        return QSize(110, int(PREVIEW_MAX) + 34)

    def _scaled_size(self) -> Tuple[float, float]:
        if self.meta["variant"] == "marker":
            return 24.0, 24.0
        w, h = float(self.defaults["w"]), float(self.defaults["h"])
        k = min(PREVIEW_MAX / w, PREVIEW_MAX / h)
        return max(6.0, w * k), max(6.0, h * k)

    def _icon_rect(self) -> QRect:
        iw, ih = self._scaled_size()
        x = (self.width() - int(iw)) // 2
        y = 8 + (int(PREVIEW_MAX) - int(ih)) // 2
        return QRect(x, y, int(iw), int(ih))

    def paintEvent(self, ev):
        p = QPainter(self); p.setRenderHint(QPainter.Antialiasing)
        r = self._icon_rect()
        if self.meta["variant"] == "marker":
            p.setPen(Qt.NoPen); p.setBrush(MARKER_COLOR)
            p.drawEllipse(r.center(), 7, 7)
        else:
            p.setBrush(parse_color(self.defaults.get("color"), "#dddddd"))
            p.setPen(QPen(QColor(70, 70, 70), 1))
            p.drawRect(r)
        p.setPen(QPen(QColor("#222"), 1))
        fm = p.fontMetrics()
        name = self.meta["name"]
        p.drawText(max(4, (self.width() - fm.horizontalAdvance(name)) // 2), 8 + int(PREVIEW_MAX) + 18, name)
        p.end()

    def mouseReleaseEvent(self, ev):
        if ev.button() == Qt.LeftButton and self.rect().contains(ev.position().toPoint()):
            self.clicked.emit(self.meta["variant"], self.meta.get("kind"))
        super().mouseReleaseEvent(ev)


class PalettePanel(QWidget):
    addRequested = Signal(str, object)  # variant, marker kind

    def __init__(self, parent=None):
        super().__init__(parent)
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        self.scroll = QScrollArea(self)
        self.scroll.setWidgetResizable(True)
        root.addWidget(self.scroll, 1)

        self.content = QWidget()
        self.content.setObjectName("PaletteContent")
        self.scroll.setWidget(self.content)
        self.content_layout = QVBoxLayout(self.content)
        self.content_layout.setContentsMargins(8, 8, 8, 8)
        self.content_layout.setSpacing(8)

        self.tiles = []
        self._section("Structure", STRUCTURE)
        self._section("Objects", OBJECTS)
        self._section("Markers", MARKERS)
        self.content_layout.addStretch(1)

    def _section(self, title: str, metas):
        cap = QLabel(title)
        cap.setStyleSheet("color:#667085; font-weight:600;")
        self.content_layout.addWidget(cap)
        grid_host = QWidget(); grid = QGridLayout(grid_host)
        grid.setContentsMargins(0, 0, 0, 0)
        grid.setHorizontalSpacing(8); grid.setVerticalSpacing(8)
        for i, meta in enumerate(metas):
            tile = PreviewTile(meta)
            tile.clicked.connect(self.addRequested.emit)
            grid.addWidget(tile, i // 2, i % 2)
            self.tiles.append(tile)
        self.content_layout.addWidget(grid_host)
