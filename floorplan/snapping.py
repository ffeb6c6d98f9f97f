from __future__ import annotations
import logging
import math
from typing import Iterable

from PySide6.QtCore import QPointF

from .geometry import distance, project_point_on_segment
from .models import PolyRoomObject, RectObject
from .utils import WALL_SNAP_THRESHOLD, snap

log = logging.getLogger(__name__)


def snap_point(pt: QPointF, grid_size: float, enabled: bool = True) -> QPointF:
    if not enabled:
        return QPointF(pt)
    return QPointF(snap(pt.x(), grid_size), snap(pt.y(), grid_size))


def snap_door_or_window(obj: RectObject, poly_rooms: Iterable[PolyRoomObject],
                        threshold: float = WALL_SNAP_THRESHOLD) -> bool:
    """Seat a door/window on the nearest polyroom wall.

    Returns False and leaves `obj` untouched when there is no wall or the
    nearest one is farther than `threshold`.
    """
    center = obj.center
    best = None
    for room in poly_rooms:
        for a, b in room.edges():
            proj = project_point_on_segment(center, a, b)
            d = distance(center, proj)
            if best is None or d < best[0]:
                best = (d, proj, a, b)
    if best is None:
        return False
    d, proj, a, b = best
    if d > threshold:
        return False

    ang = math.atan2(b.y() - a.y(), b.x() - a.x())
    # fixed +90 degree normal; the offset does not depend on the approach side
    nx, ny = -math.sin(ang), math.cos(ang)
    offset = obj.h / 2 or 0.0
    cx = proj.x() + nx * offset
    cy = proj.y() + ny * offset
    obj.x = cx - obj.w / 2
    obj.y = cy - obj.h / 2
    obj.angle = math.degrees(ang)
    log.debug("snapped %s to wall at (%.1f, %.1f), angle %.1f", obj.TYPE, cx, cy, obj.angle)
    return True
