from __future__ import annotations
import math
from typing import List

from PySide6.QtCore import QPointF, QRectF

from .models import MarkerObject, PolyRoomObject, RectObject
from .utils import HANDLE_HIT


def rotate_point(pt: QPointF, center: QPointF, angle: float) -> QPointF:
    """Rotate `pt` about `center` by `angle` radians (y axis down, clockwise on screen)."""
    dx = pt.x() - center.x()
    dy = pt.y() - center.y()
    c, s = math.cos(angle), math.sin(angle)
    return QPointF(center.x() + dx * c - dy * s, center.y() + dx * s + dy * c)


def angle_radians(degrees: float) -> float:
    return math.radians(degrees % 360)


def distance(p: QPointF, q: QPointF) -> float:
    return math.hypot(q.x() - p.x(), q.y() - p.y())


def project_point_on_segment(p: QPointF, a: QPointF, b: QPointF) -> QPointF:
    abx, aby = b.x() - a.x(), b.y() - a.y()
    ab2 = abx * abx + aby * aby
    if ab2 == 0:
        return QPointF(a)
    t = ((p.x() - a.x()) * abx + (p.y() - a.y()) * aby) / ab2
    t = max(0.0, min(1.0, t))
    return QPointF(a.x() + abx * t, a.y() + aby * t)


def points_envelope(points) -> QRectF:
    if not points:
        return QRectF()
    xs = [p.x() for p in points]
    ys = [p.y() for p in points]
    return QRectF(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))


def rect_corners(obj: RectObject) -> List[QPointF]:
    return [QPointF(obj.x, obj.y), QPointF(obj.x + obj.w, obj.y),
            QPointF(obj.x, obj.y + obj.h), QPointF(obj.x + obj.w, obj.y + obj.h)]


def bounding_box(obj) -> QRectF:
    """Axis-aligned box around the object as drawn (rotation included)."""
    if isinstance(obj, MarkerObject):
        return QRectF(obj.x, obj.y, 0.0, 0.0)
    if isinstance(obj, PolyRoomObject):
        return points_envelope(obj.points)
    ang = angle_radians(obj.angle)
    if not ang:
        return QRectF(obj.x, obj.y, obj.w, obj.h)
    center = obj.center
    return points_envelope([rotate_point(p, center, ang) for p in rect_corners(obj)])


def object_rect(obj) -> QRectF:
    """The object's own unrotated rectangle, used for hit testing."""
    if isinstance(obj, PolyRoomObject):
        return points_envelope(obj.points)
    if isinstance(obj, MarkerObject):
        return QRectF(obj.x, obj.y, 0.0, 0.0)
    return QRectF(obj.x, obj.y, obj.w, obj.h)


def handle_points(box: QRectF) -> List[QPointF]:
    # 0 tl, 1 tm, 2 tr, 3 ml, 4 mr, 5 bl, 6 bm, 7 br
    x, y, w, h = box.x(), box.y(), box.width(), box.height()
    return [
        QPointF(x, y), QPointF(x + w / 2, y), QPointF(x + w, y),
        QPointF(x, y + h / 2), QPointF(x + w, y + h / 2),
        QPointF(x, y + h), QPointF(x + w / 2, y + h), QPointF(x + w, y + h),
    ]


def hit_handle(box: QRectF, pt: QPointF, tolerance: float = HANDLE_HIT) -> int:
    for i, h in enumerate(handle_points(box)):
        if abs(pt.x() - h.x()) <= tolerance and abs(pt.y() - h.y()) <= tolerance:
            return i
    return -1
