from __future__ import annotations
import os
from PySide6.QtCore import Qt, QRectF
from PySide6.QtGui import QColor, QPixmap, QPainter, QIcon
from PySide6.QtSvg import QSvgRenderer

# ===== Canvas / grid =====
GRID_SIZE = 24.0
GRID_COLOR = "#eeeeee"
BG_COLOR = QColor("#ffffff")

# ===== Interaction =====
MIN_SIZE = 10.0
HANDLE_HIT = 8.0
HANDLE_DRAW = 6.0
MARKER_HIT_SQ = 100.0
WALL_SNAP_THRESHOLD = 40.0
ROTATE_STEP = 5.0
ZOOM_MIN = 0.2
ZOOM_MAX = 8.0

# ===== Visuals =====
MARKER_RADIUS = 6.0
MARKER_SELECT_RADIUS = 10.0
HEAT_RADIUS = 120.0
HEAT_INNER = 10.0
HEAT_COLOR = QColor(14, 165, 233)
SELECT_COLOR = QColor("#2563eb")
OUTLINE_COLOR = QColor("#777777")
DOOR_BORDER = QColor("#64748b")
WINDOW_BORDER = QColor("#0ea5e9")
POLY_BORDER = QColor("#64748b")
MARKER_COLOR = QColor("#0ea5e9")
LABEL_COLOR = QColor("#333333")

# ===== Units =====
INCHES_PER_FOOT = 12.0
UNITS_PER_METER = 100.0

ICON_DIR = "assets/icons"


def snap(v: float, step: float) -> float:
    return round(v / step) * step


def parse_color(value, fallback: str) -> QColor:
    """Accepts #hex, named colours and css rgba(r,g,b,a) strings."""
    text = (value or fallback).strip()
    if text.startswith("rgba(") and text.endswith(")"):
        try:
            r, g, b, a = (p.strip() for p in text[5:-1].split(","))
            c = QColor(int(r), int(g), int(b))
            c.setAlphaF(float(a))
            return c
        except ValueError:
            return QColor(fallback)
    c = QColor(text)
    return c if c.isValid() else QColor(fallback)


def load_svg_icon(path: str, size: int):
    if not os.path.exists(path):
        return None
    renderer = QSvgRenderer(path)
    if not renderer.isValid():
        return None
    pm = QPixmap(size, size)
    pm.fill(Qt.transparent)
    p = QPainter(pm)
    renderer.render(p, QRectF(0, 0, size, size))
    p.end()
    return QIcon(pm)
