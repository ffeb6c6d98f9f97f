from __future__ import annotations
import json
import logging
from dataclasses import fields
from typing import Dict, Optional

from PySide6.QtCore import QPointF

from .models import MarkerObject, PolyRoomObject, RectObject, Units, VARIANTS
from .store import FloorPlanNotFound, FloorPlanRecord, FloorPlanStore

log = logging.getLogger(__name__)


class PlanFormatError(ValueError):
    pass


def object_to_dict(obj) -> Dict:
    data: Dict = {"type": obj.TYPE}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if f.name == "points":
            value = [{"x": p.x(), "y": p.y()} for p in value]
        data[f.name] = value
    return data


def _number(data: Dict, key: str, default: float = 0.0) -> float:
    value = data.get(key, default)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PlanFormatError(f"{key} must be a number, got {value!r}")
    return float(value)


def object_from_dict(data) -> object:
    if not isinstance(data, dict):
        raise PlanFormatError(f"object entry must be a mapping, got {type(data).__name__}")
    cls = VARIANTS.get(data.get("type"))
    if cls is None:
        raise PlanFormatError(f"unknown object type: {data.get('type')!r}")
    common = {
        "name": str(data.get("name") or ""),
        "color": str(data.get("color") or ""),
        "layer": str(data.get("layer") or "All"),
    }
    if issubclass(cls, RectObject):
        return cls(x=_number(data, "x"), y=_number(data, "y"), w=_number(data, "w"),
                   h=_number(data, "h"), angle=_number(data, "angle"), **common)
    if cls is MarkerObject:
        return cls(x=_number(data, "x"), y=_number(data, "y"),
                   kind="marker" if data.get("kind") is None else str(data["kind"]), **common)
    raw = data.get("points") or []
    if not isinstance(raw, list):
        raise PlanFormatError("points must be a list")
    points = []
    for p in raw:
        if not isinstance(p, dict):
            raise PlanFormatError(f"point must be a mapping, got {p!r}")
        points.append(QPointF(_number(p, "x"), _number(p, "y")))
    return PolyRoomObject(points=points, **common)


def _check_options(options) -> Dict:
    if not isinstance(options, dict):
        raise PlanFormatError(f"options must be a mapping, got {type(options).__name__}")
    if "grid" in options:
        grid = options["grid"]
        if not isinstance(grid, dict):
            raise PlanFormatError(f"grid must be a mapping, got {grid!r}")
        if grid.get("size") is not None:
            size = _number(grid, "size")
            if size <= 0:
                raise PlanFormatError(f"grid size must be positive, got {size}")
        if grid.get("color") is not None and not isinstance(grid["color"], str):
            raise PlanFormatError(f"grid color must be text, got {grid['color']!r}")
    if "units" in options and options["units"] not in (Units.IMPERIAL, Units.METRIC):
        raise PlanFormatError(f"unknown unit system: {options['units']!r}")
    return options


def export_plan(scene) -> str:
    return json.dumps({"options": scene.options,
                       "objects": [object_to_dict(o) for o in scene.objects]}, indent=2)


def load_plan(scene, text: str) -> bool:
    """Replace the scene's objects from an exported plan.

    Anything malformed leaves the scene exactly as it was.
    """
    try:
        data = json.loads(text)
        if not isinstance(data, dict) or not isinstance(data.get("objects"), list):
            log.warning("plan document has no object list; ignored")
            return False
        objects = [object_from_dict(o) for o in data["objects"]]
        options = _check_options(data.get("options") or {})
    except (ValueError, TypeError) as e:
        log.warning("could not load plan: %s", e)
        return False
    scene.merge_options(options)
    scene.replace_objects(objects)
    return True


def selection_summary(obj) -> Optional[str]:
    if obj is None:
        return None
    return json.dumps({
        "type": obj.TYPE,
        "name": obj.name or "",
        "x": getattr(obj, "x", 0) or 0,
        "y": getattr(obj, "y", 0) or 0,
        "w": getattr(obj, "w", 0) or 0,
        "h": getattr(obj, "h", 0) or 0,
        "layer": obj.layer or "All",
    })


# ---- store / disk ----
def save_to_store(store: FloorPlanStore, scene, plan_id: Optional[str] = None,
                  name: Optional[str] = None) -> Optional[FloorPlanRecord]:
    text = export_plan(scene)
    try:
        if plan_id:
            try:
                return store.update(plan_id, name=name, json=text)
            except FloorPlanNotFound:
                return store.create(id=plan_id, name=name, json=text)
        return store.create(name=name, json=text)
    except (OSError, ValueError, FloorPlanNotFound) as e:
        log.warning("saving plan %s failed: %s", plan_id or "(new)", e)
        return None


def open_from_store(store: FloorPlanStore, scene, plan_id: str) -> Optional[FloorPlanRecord]:
    try:
        record = store.get(plan_id)
    except (OSError, ValueError, FloorPlanNotFound) as e:
        log.warning("opening plan %s failed: %s", plan_id, e)
        return None
    if not load_plan(scene, record.json):
        # an empty document from a fresh record is a valid empty plan
        if record.json.strip() in ("", "{}"):
            scene.clear()
            return record
        return None
    return record


def write_plan_file(scene, path: str):
    with open(path, "w", encoding="utf-8") as f:
        f.write(export_plan(scene))


def read_plan_file(scene, path: str) -> bool:
    with open(path, "r", encoding="utf-8") as f:
        return load_plan(scene, f.read())
