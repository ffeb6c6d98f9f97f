from __future__ import annotations
import math

from PySide6.QtCore import Qt, QPointF, QRectF
from PySide6.QtGui import (QBrush, QColor, QFont, QImage, QPainter, QPainterPath, QPen,
                           QPolygonF, QRadialGradient)

from .geometry import bounding_box, handle_points
from .models import (CustomObject, DoorObject, FurnitureObject, MarkerObject, PolyRoomObject,
                     RoomObject, WindowObject)
from .utils import (BG_COLOR, DOOR_BORDER, HANDLE_DRAW, HEAT_COLOR, HEAT_INNER, HEAT_RADIUS,
                    LABEL_COLOR, MARKER_COLOR, MARKER_RADIUS, MARKER_SELECT_RADIUS, OUTLINE_COLOR,
                    POLY_BORDER, SELECT_COLOR, WINDOW_BORDER, parse_color)


def _visible_world_rect(view, width: float, height: float) -> QRectF:
    tl = view.screen_to_world(QPointF(0, 0))
    br = view.screen_to_world(QPointF(width, height))
    return QRectF(tl, br)


def draw_grid(painter: QPainter, scene, area: QRectF):
    step = scene.grid_size
    painter.setPen(QPen(parse_color(scene.grid_color, "#eeeeee"), 0))
    x = math.floor(area.left() / step) * step
    while x <= area.right():
        painter.drawLine(QPointF(x, area.top()), QPointF(x, area.bottom()))
        x += step
    y = math.floor(area.top() / step) * step
    while y <= area.bottom():
        painter.drawLine(QPointF(area.left(), y), QPointF(area.right(), y))
        y += step


def _draw_rotated_rect(painter: QPainter, o, fill: QColor, border: QColor):
    painter.save()
    painter.translate(o.x + o.w / 2, o.y + o.h / 2)
    ang = o.angle % 360
    if ang:
        painter.rotate(ang)
    r = QRectF(-o.w / 2, -o.h / 2, o.w, o.h)
    painter.setPen(QPen(border, 1))
    painter.setBrush(QBrush(fill))
    painter.drawRect(r)
    painter.restore()


def draw_object(painter: QPainter, o):
    if isinstance(o, PolyRoomObject):
        if len(o.points) > 1:
            painter.setPen(QPen(POLY_BORDER, 1))
            painter.setBrush(QBrush(parse_color(o.color, "rgba(219,234,254,0.6)")))
            painter.drawPolygon(QPolygonF(o.points))
    elif isinstance(o, (RoomObject, FurnitureObject, CustomObject)):
        _draw_rotated_rect(painter, o, parse_color(o.color, "#dddddd"), OUTLINE_COLOR)
        if o.name:
            painter.setPen(LABEL_COLOR)
            painter.setFont(QFont("", 9))
            painter.drawText(QPointF(o.x + 6, o.y + 16), o.name)
    elif isinstance(o, (DoorObject, WindowObject)):
        border = DOOR_BORDER if isinstance(o, DoorObject) else WINDOW_BORDER
        _draw_rotated_rect(painter, o, parse_color(o.color, "#dddddd"), border)
        if o.name:
            painter.setPen(LABEL_COLOR)
            painter.setFont(QFont("", 8))
            painter.drawText(QPointF(o.x + 4, o.y - 4), o.name)
    elif isinstance(o, MarkerObject):
        painter.setPen(Qt.NoPen)
        painter.setBrush(QBrush(MARKER_COLOR))
        painter.drawEllipse(QPointF(o.x, o.y), MARKER_RADIUS, MARKER_RADIUS)
        painter.setPen(LABEL_COLOR)
        painter.setFont(QFont("", 7))
        painter.drawText(QPointF(o.x + 8, o.y + 4), o.kind or "marker")


def draw_selection(painter: QPainter, o):
    painter.save()
    pen = QPen(SELECT_COLOR, 1, Qt.DashLine)
    pen.setDashPattern([6, 4])
    painter.setPen(pen)
    painter.setBrush(Qt.NoBrush)
    if isinstance(o, MarkerObject):
        painter.drawEllipse(QPointF(o.x, o.y), MARKER_SELECT_RADIUS, MARKER_SELECT_RADIUS)
        painter.restore()
        return
    box = bounding_box(o)
    painter.drawRect(box.adjusted(-2, -2, 2, 2))
    if not isinstance(o, PolyRoomObject):
        painter.setPen(QPen(QColor("#ffffff"), 1))
        painter.setBrush(QBrush(SELECT_COLOR))
        hs = HANDLE_DRAW
        for h in handle_points(box):
            painter.drawRect(QRectF(h.x() - hs / 2, h.y() - hs / 2, hs, hs))
    painter.restore()


def draw_heatmap(painter: QPainter, scene):
    painter.setPen(Qt.NoPen)
    for o in scene.objects:
        if not (isinstance(o, MarkerObject) and o.kind == "wifi"):
            continue
        center = QPointF(o.x, o.y)
        grad = QRadialGradient(center, HEAT_RADIUS)
        inner = QColor(HEAT_COLOR)
        inner.setAlphaF(0.35)
        outer = QColor(HEAT_COLOR)
        outer.setAlphaF(0.0)
        grad.setColorAt(0.0, inner)
        grad.setColorAt(HEAT_INNER / HEAT_RADIUS, inner)
        grad.setColorAt(1.0, outer)
        painter.setBrush(QBrush(grad))
        painter.drawEllipse(center, HEAT_RADIUS, HEAT_RADIUS)


def draw_polygon_preview(painter: QPainter, controller):
    pts = controller.poly_points
    if not pts:
        return
    painter.save()
    pen = QPen(SELECT_COLOR, 1, Qt.DashLine)
    pen.setDashPattern([4, 3])
    painter.setPen(pen)
    painter.setBrush(Qt.NoBrush)
    path = QPainterPath(pts[0])
    for p in pts[1:]:
        path.lineTo(p)
    painter.drawPath(path)
    if controller.pointer is not None:
        pen.setDashPattern([4, 2])
        painter.setPen(pen)
        painter.drawLine(pts[-1], controller.snap_to_grid(controller.pointer))
    painter.restore()


def render_plan(painter: QPainter, scene, controller, width: float, height: float):
    """Full redraw of the plan onto a `width` x `height` surface."""
    painter.resetTransform()
    painter.fillRect(QRectF(0, 0, width, height), BG_COLOR)
    painter.setRenderHint(QPainter.Antialiasing, True)
    view = controller.view
    painter.setTransform(view.qtransform())

    draw_grid(painter, scene, _visible_world_rect(view, width, height))
    for _, o in scene.visible_objects(controller.active_layer):
        draw_object(painter, o)
    sel = scene.selected_object()
    if sel is not None:
        draw_selection(painter, sel)
    if controller.heatmap:
        draw_heatmap(painter, scene)
    if controller.polygon_active:
        draw_polygon_preview(painter, controller)


def render_image(scene, controller, width: int, height: int) -> QImage:
    img = QImage(width, height, QImage.Format_ARGB32)
    img.fill(BG_COLOR)
    p = QPainter(img)
    try:
        render_plan(p, scene, controller, width, height)
    finally:
        p.end()
    return img


