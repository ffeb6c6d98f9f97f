from __future__ import annotations
from dataclasses import dataclass, field
from typing import ClassVar, List, Optional, Union

from PySide6.QtCore import QPointF


class Layer:
    ALL = "All"
    ROOMS = "Rooms"
    FURNITURE = "Furniture"
    OPENINGS = "Openings"
    UTILITIES = "Utilities"

    CHOICES = (ALL, ROOMS, FURNITURE, OPENINGS, UTILITIES)


class Units:
    IMPERIAL = "imperial"
    METRIC = "metric"


class Mode:
    IDLE = "idle"
    POLYGON_DRAWING = "polygon"
    DRAGGING = "dragging"


class DragMode:
    MOVE = "move"
    RESIZE = "resize"


@dataclass
class DragState:
    mode: str
    handle: Optional[int] = None
    dx: float = 0.0
    dy: float = 0.0


@dataclass
class SceneObject:
    TYPE: ClassVar[str] = ""
    name: str = ""
    color: str = ""
    layer: str = Layer.ALL


@dataclass
class RectObject(SceneObject):
    x: float = 0.0
    y: float = 0.0
    w: float = 0.0
    h: float = 0.0
    angle: float = 0.0

    @property
    def center(self) -> QPointF:
        return QPointF(self.x + self.w / 2, self.y + self.h / 2)


@dataclass
class RoomObject(RectObject):
    TYPE: ClassVar[str] = "room"


@dataclass
class FurnitureObject(RectObject):
    TYPE: ClassVar[str] = "furniture"


@dataclass
class CustomObject(RectObject):
    TYPE: ClassVar[str] = "custom"


@dataclass
class DoorObject(RectObject):
    TYPE: ClassVar[str] = "door"


@dataclass
class WindowObject(RectObject):
    TYPE: ClassVar[str] = "window"


@dataclass
class MarkerObject(SceneObject):
    TYPE: ClassVar[str] = "marker"
    x: float = 0.0
    y: float = 0.0
    kind: str = "wifi"


@dataclass
class PolyRoomObject(SceneObject):
    TYPE: ClassVar[str] = "polyroom"
    points: List[QPointF] = field(default_factory=list)

    def edges(self):
        """Consecutive vertex pairs, wrapping last -> first."""
        n = len(self.points)
        for i in range(n):
            yield self.points[i], self.points[(i + 1) % n]


AnyObject = Union[RoomObject, FurnitureObject, CustomObject, DoorObject,
                  WindowObject, MarkerObject, PolyRoomObject]

VARIANTS = {cls.TYPE: cls for cls in (RoomObject, FurnitureObject, CustomObject, DoorObject,
                                      WindowObject, MarkerObject, PolyRoomObject)}

WALL_MOUNTED = (DoorObject, WindowObject)
