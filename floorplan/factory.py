from __future__ import annotations
from typing import Dict, List, Optional

from PySide6.QtCore import QPointF

from .models import (CustomObject, DoorObject, FurnitureObject, MarkerObject, PolyRoomObject,
                     RoomObject, WindowObject, VARIANTS)

# per-variant starting geometry; openings are narrow strips, rooms the largest
DEFAULTS: Dict[str, Dict] = {
    RoomObject.TYPE:      {"x": 40.0,  "y": 40.0,  "w": 200.0, "h": 150.0, "name": "Room",   "color": "#dbeafe"},
    FurnitureObject.TYPE: {"x": 80.0,  "y": 80.0,  "w": 80.0,  "h": 40.0,  "name": "Sofa",   "color": "#fde68a"},
    CustomObject.TYPE:    {"x": 120.0, "y": 120.0, "w": 60.0,  "h": 60.0,  "name": "Custom", "color": "#e9d5ff"},
    DoorObject.TYPE:      {"x": 50.0,  "y": 50.0,  "w": 40.0,  "h": 10.0,  "name": "Door",   "color": "#cbd5e1"},
    WindowObject.TYPE:    {"x": 70.0,  "y": 70.0,  "w": 60.0,  "h": 8.0,   "name": "Window", "color": "#bae6fd"},
    MarkerObject.TYPE:    {"x": 160.0, "y": 160.0, "kind": "wifi"},
    PolyRoomObject.TYPE:  {"name": "Room", "color": "rgba(219,234,254,0.6)"},
}


class ObjectFactory:
    def create(self, variant: str, **overrides):
        cls = VARIANTS.get(variant)
        if cls is None:
            raise ValueError(f"unknown object type: {variant!r}")
        meta = dict(DEFAULTS[variant])
        meta.update({k: v for k, v in overrides.items() if v is not None})
        if cls is PolyRoomObject:
            meta["points"] = [QPointF(p) for p in meta.get("points", [])]
        return cls(**meta)

    def marker(self, kind: Optional[str] = None) -> MarkerObject:
        return self.create(MarkerObject.TYPE, kind=kind)

    def poly_room(self, points: List[QPointF]) -> PolyRoomObject:
        return self.create(PolyRoomObject.TYPE, points=points)
