from .models import (Layer, Mode, Units, DragMode, DragState, SceneObject, RectObject, RoomObject,
                     FurnitureObject, CustomObject, DoorObject, WindowObject, MarkerObject,
                     PolyRoomObject)
from .scene import PlanScene, is_visible
from .factory import ObjectFactory
from .snapping import snap_point, snap_door_or_window
from .controller import InteractionController, ViewTransform, format_measure
from .state import export_plan, load_plan, selection_summary, save_to_store, open_from_store
from .store import (FloorPlanStore, FloorPlanRecord, FloorPlanSummary, FloorPlanNotFound,
                    MemoryFloorPlanStore, FileFloorPlanStore, HttpFloorPlanStore)
from .renderer import render_plan, render_image
from .canvas import PlanCanvas
from .palette import PalettePanel
from .properties import PropertyPanel
from .hud import LayersHUD
from .settings import EditorSettings, make_store

__all__ = [
    "Layer", "Mode", "Units", "DragMode", "DragState", "SceneObject", "RectObject", "RoomObject",
    "FurnitureObject", "CustomObject", "DoorObject", "WindowObject", "MarkerObject", "PolyRoomObject",
    "PlanScene", "is_visible", "ObjectFactory", "snap_point", "snap_door_or_window",
    "InteractionController", "ViewTransform", "format_measure",
    "export_plan", "load_plan", "selection_summary", "save_to_store", "open_from_store",
    "FloorPlanStore", "FloorPlanRecord", "FloorPlanSummary", "FloorPlanNotFound",
    "MemoryFloorPlanStore", "FileFloorPlanStore", "HttpFloorPlanStore",
    "render_plan", "render_image", "PlanCanvas", "PalettePanel", "PropertyPanel", "LayersHUD",
    "EditorSettings", "make_store",
]
