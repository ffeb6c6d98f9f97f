from __future__ import annotations
import copy
from typing import Dict, List, Optional

from PySide6.QtCore import QPointF

from .factory import ObjectFactory
from .geometry import object_rect
from .models import AnyObject, Layer, MarkerObject, PolyRoomObject, RectObject, Units
from .utils import GRID_COLOR, GRID_SIZE, MARKER_HIT_SQ, MIN_SIZE

DEFAULT_OPTIONS: Dict = {"grid": {"size": GRID_SIZE, "color": GRID_COLOR}, "units": Units.IMPERIAL}


def is_visible(obj, layer_filter: str) -> bool:
    # objects left on "All" are hidden under a specific filter; the web editor
    # kept unlayered objects visible instead
    return layer_filter == Layer.ALL or obj.layer == layer_filter


class PlanScene:
    """The editable object list of one floor plan.

    List order is z-order: later objects draw on top and win hit tests.
    """

    def __init__(self, options: Optional[Dict] = None):
        self.options: Dict = copy.deepcopy(DEFAULT_OPTIONS)
        if options:
            self.merge_options(options)
        self.objects: List[AnyObject] = []
        self.selected: Optional[int] = None
        self.factory = ObjectFactory()

    # ---- options ----
    def merge_options(self, options: Dict):
        for key, value in options.items():
            if isinstance(value, dict) and isinstance(self.options.get(key), dict):
                self.options[key].update(value)
            else:
                self.options[key] = value

    def _grid(self) -> Dict:
        grid = self.options.get("grid")
        return grid if isinstance(grid, dict) else {}

    @property
    def grid_size(self) -> float:
        try:
            size = float(self._grid().get("size") or GRID_SIZE)
        except (TypeError, ValueError):
            return GRID_SIZE
        return size if size > 0 else GRID_SIZE

    @property
    def grid_color(self) -> str:
        color = self._grid().get("color")
        return color if isinstance(color, str) and color else GRID_COLOR

    # ---- objects ----
    def add_object(self, variant: str, **overrides) -> int:
        self.objects.append(self.factory.create(variant, **overrides))
        return len(self.objects) - 1

    def append(self, obj) -> int:
        self.objects.append(obj)
        return len(self.objects) - 1

    def object_at(self, index: Optional[int]):
        if index is None or not 0 <= index < len(self.objects):
            return None
        return self.objects[index]

    def selected_object(self):
        obj = self.object_at(self.selected)
        if obj is None:
            self.selected = None
        return obj

    def select(self, index: Optional[int]):
        self.selected = index if self.object_at(index) is not None else None

    def update_selected(self, index: Optional[int], patch: Dict) -> bool:
        obj = self.object_at(index)
        if obj is None:
            return False
        if "name" in patch and patch["name"] is not None:
            obj.name = str(patch["name"])
        if "layer" in patch and patch["layer"]:
            obj.layer = str(patch["layer"])
        if isinstance(obj, PolyRoomObject):
            return True
        for key in ("x", "y"):
            if patch.get(key) is not None:
                setattr(obj, key, float(patch[key]))
        if isinstance(obj, RectObject):
            for key in ("w", "h"):
                if patch.get(key) is not None:
                    setattr(obj, key, max(MIN_SIZE, float(patch[key])))
        return True

    def delete_at(self, index: Optional[int]) -> bool:
        if self.object_at(index) is None:
            return False
        self.objects = self.objects[:index] + self.objects[index + 1:]
        if self.selected == index:
            self.selected = None
        elif self.selected is not None and self.selected > index:
            self.selected -= 1
        return True

    def delete_selected(self) -> bool:
        return self.delete_at(self.selected)

    def replace_objects(self, objects: List):
        self.objects = list(objects)
        self.selected = None

    def clear(self):
        self.replace_objects([])

    def hit_test(self, pt: QPointF) -> Optional[int]:
        # unrotated rect on purpose: rotated corners outside it are not hittable
        x, y = pt.x(), pt.y()
        for i in range(len(self.objects) - 1, -1, -1):
            o = self.objects[i]
            if isinstance(o, MarkerObject):
                dx, dy = x - o.x, y - o.y
                if dx * dx + dy * dy < MARKER_HIT_SQ:
                    return i
                continue
            if isinstance(o, PolyRoomObject) and not o.points:
                continue
            r = object_rect(o)
            if r.left() <= x <= r.left() + r.width() and r.top() <= y <= r.top() + r.height():
                return i
        return None

    # ---- queries ----
    def poly_rooms(self) -> List[PolyRoomObject]:
        return [o for o in self.objects if isinstance(o, PolyRoomObject)]

    def visible_objects(self, layer_filter: str = Layer.ALL):
        return [(i, o) for i, o in enumerate(self.objects) if is_visible(o, layer_filter)]

    def layers(self) -> List[str]:
        seen = list(Layer.CHOICES)
        for o in self.objects:
            if o.layer and o.layer not in seen:
                seen.append(o.layer)
        return seen

    def __len__(self):
        return len(self.objects)
