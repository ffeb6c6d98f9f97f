from __future__ import annotations
import logging
from typing import Callable, Dict, List, Optional

from PySide6.QtCore import QPointF
from PySide6.QtGui import QTransform

from .geometry import bounding_box, hit_handle, points_envelope
from .models import (DragMode, DragState, Layer, MarkerObject, Mode, PolyRoomObject,
                     RectObject, Units, WALL_MOUNTED)
from .snapping import snap_door_or_window, snap_point
from .state import export_plan, load_plan, selection_summary
from .utils import (INCHES_PER_FOOT, MIN_SIZE, ROTATE_STEP, UNITS_PER_METER, ZOOM_MAX, ZOOM_MIN,
                    snap)

log = logging.getLogger(__name__)

ARROWS = {
    "ArrowLeft": (-1, 0),
    "ArrowRight": (1, 0),
    "ArrowUp": (0, -1),
    "ArrowDown": (0, 1),
}


def format_measure(pt: QPointF, units: str) -> str:
    if units == Units.IMPERIAL:
        return f"x: {pt.x() / INCHES_PER_FOOT:.1f} ft, y: {pt.y() / INCHES_PER_FOOT:.1f} ft"
    return f"x: {pt.x() / UNITS_PER_METER:.2f} m, y: {pt.y() / UNITS_PER_METER:.2f} m"


class ViewTransform:
    """Pan/zoom of the host surface: screen = world * scale + offset."""

    def __init__(self, scale: float = 1.0, ox: float = 0.0, oy: float = 0.0):
        self.scale = scale
        self.ox = ox
        self.oy = oy

    def screen_to_world(self, pt: QPointF) -> QPointF:
        return QPointF((pt.x() - self.ox) / self.scale, (pt.y() - self.oy) / self.scale)

    def world_to_screen(self, pt: QPointF) -> QPointF:
        return QPointF(pt.x() * self.scale + self.ox, pt.y() * self.scale + self.oy)

    def zoom_at(self, screen_pt: QPointF, factor: float):
        new_scale = max(ZOOM_MIN, min(self.scale * factor, ZOOM_MAX))
        ratio = new_scale / self.scale
        self.ox = screen_pt.x() - ratio * (screen_pt.x() - self.ox)
        self.oy = screen_pt.y() - ratio * (screen_pt.y() - self.oy)
        self.scale = new_scale

    def pan_by(self, dx: float, dy: float):
        self.ox += dx
        self.oy += dy

    def reset(self):
        self.scale, self.ox, self.oy = 1.0, 0.0, 0.0

    def qtransform(self) -> QTransform:
        return QTransform(self.scale, 0, 0, self.scale, self.ox, self.oy)


def _translate(obj, dx: float, dy: float):
    if isinstance(obj, PolyRoomObject):
        obj.points = [QPointF(p.x() + dx, p.y() + dy) for p in obj.points]
    else:
        obj.x += dx
        obj.y += dy


class InteractionController:
    """Turns pointer and keyboard input into scene edits.

    All coordinates are world units; the host converts screen positions
    through `view` first. Callbacks:
      on_selection_changed(summary_json_or_None)
      on_measure_changed(text)
      on_redraw()
    """

    def __init__(self, scene,
                 on_selection_changed: Optional[Callable[[Optional[str]], None]] = None,
                 on_measure_changed: Optional[Callable[[str], None]] = None,
                 on_redraw: Optional[Callable[[], None]] = None):
        self.scene = scene
        self.view = ViewTransform()
        self.mode = Mode.IDLE
        self.drag: Optional[DragState] = None
        self.poly_points: Optional[List[QPointF]] = None
        self.pointer: Optional[QPointF] = None
        self.snap_enabled = True
        self.heatmap = False
        self.measure = False
        self.active_layer = Layer.ALL
        self.on_selection_changed = on_selection_changed
        self.on_measure_changed = on_measure_changed
        self.on_redraw = on_redraw
        self._moved = False

    # ---- host notifications ----
    def _redraw(self):
        if self.on_redraw:
            self.on_redraw()

    def _notify_selection(self):
        if self.on_selection_changed:
            self.on_selection_changed(self.selection_summary())

    def selection_summary(self) -> Optional[str]:
        return selection_summary(self.scene.selected_object())

    @property
    def units(self) -> str:
        return self.scene.options.get("units", Units.IMPERIAL)

    def snap_to_grid(self, pt: QPointF) -> QPointF:
        return snap_point(pt, self.scene.grid_size, self.snap_enabled)

    # ---- editor toggles ----
    def toggle_snap(self) -> bool:
        self.snap_enabled = not self.snap_enabled
        return self.snap_enabled

    def toggle_heatmap(self) -> bool:
        self.heatmap = not self.heatmap
        self._redraw()
        return self.heatmap

    def toggle_measure(self) -> bool:
        self.measure = not self.measure
        return self.measure

    def set_units(self, units: str):
        if units not in (Units.IMPERIAL, Units.METRIC):
            raise ValueError(f"unknown unit system: {units!r}")
        self.scene.options["units"] = units
        self._redraw()

    def set_layer(self, layer: str):
        self.active_layer = layer or Layer.ALL
        self._redraw()

    # ---- scene operations ----
    def add(self, variant: str, kind: Optional[str] = None) -> int:
        if variant == MarkerObject.TYPE:
            index = self.scene.add_object(variant, kind=kind)
        else:
            index = self.scene.add_object(variant)
        self._redraw()
        return index

    def delete_selected(self) -> bool:
        if not self.scene.delete_selected():
            return False
        self._redraw()
        self._notify_selection()
        return True

    def update_selected(self, patch: Dict) -> bool:
        ok = self.scene.update_selected(self.scene.selected, patch)
        if ok:
            self._redraw()
        return ok

    def export_plan(self) -> str:
        return export_plan(self.scene)

    def load_plan(self, text: str) -> bool:
        if not load_plan(self.scene, text):
            return False
        self.reset()
        return True

    def reset(self):
        """Drop any drag or polygon session after the scene was replaced."""
        self.drag = None
        self.poly_points = None
        self.mode = Mode.IDLE
        self._moved = False
        self._redraw()
        self._notify_selection()

    # ---- pointer ----
    def click(self, pt: QPointF) -> Optional[int]:
        if self.mode == Mode.POLYGON_DRAWING:
            self.poly_points.append(self.snap_to_grid(pt))
            self.pointer = QPointF(pt)
            self._redraw()
            return None
        if self.mode == Mode.DRAGGING:
            return self.scene.selected
        index = self.scene.hit_test(pt)
        self.scene.select(index)
        self._redraw()
        self._notify_selection()
        return index

    def pointer_down(self, pt: QPointF) -> bool:
        if self.mode != Mode.IDLE:
            return False
        obj = self.scene.selected_object()
        if obj is None:
            return False
        self._moved = False
        if isinstance(obj, MarkerObject):
            self.drag = DragState(DragMode.MOVE)
        elif isinstance(obj, PolyRoomObject):
            box = points_envelope(obj.points)
            self.drag = DragState(DragMode.MOVE, dx=pt.x() - box.x(), dy=pt.y() - box.y())
        else:
            handle = hit_handle(bounding_box(obj), pt)
            if handle >= 0:
                self.drag = DragState(DragMode.RESIZE, handle=handle)
            else:
                self.drag = DragState(DragMode.MOVE, dx=pt.x() - obj.x, dy=pt.y() - obj.y)
        self.mode = Mode.DRAGGING
        return True

    def pointer_move(self, pt: QPointF):
        self.pointer = QPointF(pt)
        if self.mode == Mode.DRAGGING:
            obj = self.scene.selected_object()
            if obj is None:
                self.drag = None
                self.mode = Mode.IDLE
                return
            self._moved = True
            if self.drag.mode == DragMode.MOVE:
                self._move(obj, pt)
            else:
                self._resize(obj, self.drag.handle, pt)
            self._redraw()
            return
        if self.mode == Mode.POLYGON_DRAWING:
            self._redraw()
            return
        if self.measure and self.on_measure_changed:
            self.on_measure_changed(format_measure(pt, self.units))

    def pointer_up(self, pt: Optional[QPointF] = None) -> bool:
        """End a drag; returns True when the pointer actually dragged something."""
        if self.mode != Mode.DRAGGING:
            return False
        moved = self._moved
        self.drag = None
        self.mode = Mode.IDLE
        self._moved = False
        self._redraw()
        self._notify_selection()
        return moved

    def _move(self, obj, pt: QPointF):
        g = self.scene.grid_size
        if isinstance(obj, MarkerObject):
            obj.x, obj.y = pt.x(), pt.y()
            if self.snap_enabled:
                obj.x, obj.y = snap(obj.x, g), snap(obj.y, g)
            return
        nx, ny = pt.x() - self.drag.dx, pt.y() - self.drag.dy
        if isinstance(obj, PolyRoomObject):
            box = points_envelope(obj.points)
            if self.snap_enabled:
                nx, ny = snap(nx, g), snap(ny, g)
            _translate(obj, nx - box.x(), ny - box.y())
            return
        obj.x, obj.y = nx, ny
        if isinstance(obj, WALL_MOUNTED):
            if not snap_door_or_window(obj, self.scene.poly_rooms()) and self.snap_enabled:
                obj.x, obj.y = snap(obj.x, g), snap(obj.y, g)
        elif self.snap_enabled:
            obj.x, obj.y = snap(obj.x, g), snap(obj.y, g)

    def _resize(self, obj: RectObject, handle: int, pt: QPointF):
        p = self.snap_to_grid(pt)
        nx, ny = p.x(), p.y()
        b = bounding_box(obj)
        left, top = b.x(), b.y()
        right, bottom = b.x() + b.width(), b.y() + b.height()
        if handle in (0, 3, 5):
            left = nx
        if handle in (2, 4, 7):
            right = nx
        if handle in (0, 1, 2):
            top = ny
        if handle in (5, 6, 7):
            bottom = ny
        # rotation is kept as-is; the new box is applied unrotated
        obj.x = min(left, right)
        obj.y = min(top, bottom)
        obj.w = max(MIN_SIZE, abs(right - left))
        obj.h = max(MIN_SIZE, abs(bottom - top))

    # ---- keyboard ----
    def key_press(self, key: str, shift: bool = False) -> bool:
        if self.mode == Mode.POLYGON_DRAWING:
            if key == "Escape":
                self.cancel_polygon()
                return True
            if key in ("Enter", "Return"):
                self.finish_polygon()
                return True
        if self.mode == Mode.DRAGGING:
            return False
        obj = self.scene.selected_object()
        if obj is None:
            return False
        if key in ("Delete", "Backspace"):
            return self.delete_selected()

        changed = False
        if key in ARROWS:
            step = self.scene.grid_size if shift else 1.0
            ux, uy = ARROWS[key]
            _translate(obj, ux * step, uy * step)
            changed = True
        elif key in ("r", "R", "e", "E") and isinstance(obj, RectObject):
            obj.angle += ROTATE_STEP if key in ("r", "R") else -ROTATE_STEP
            changed = True
        if not changed:
            return False
        if isinstance(obj, WALL_MOUNTED):
            snap_door_or_window(obj, self.scene.poly_rooms())
        self._redraw()
        self._notify_selection()
        return True

    # ---- polygon rooms ----
    @property
    def polygon_active(self) -> bool:
        return self.mode == Mode.POLYGON_DRAWING

    def start_polygon(self):
        self.drag = None
        self.poly_points = []
        self.mode = Mode.POLYGON_DRAWING
        self._redraw()

    def finish_polygon(self) -> Optional[int]:
        if self.mode != Mode.POLYGON_DRAWING:
            return None
        points = self.poly_points or []
        index = None
        if len(points) >= 3:
            index = self.scene.append(self.scene.factory.poly_room(points))
            log.debug("polygon room committed with %d points", len(points))
        else:
            log.debug("polygon with %d points discarded", len(points))
        self.poly_points = None
        self.mode = Mode.IDLE
        self._redraw()
        return index

    def cancel_polygon(self):
        if self.mode != Mode.POLYGON_DRAWING:
            return
        self.poly_points = None
        self.mode = Mode.IDLE
        self._redraw()
