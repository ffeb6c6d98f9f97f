from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Optional

from PySide6.QtCore import QSettings, QStandardPaths

from .models import Units
from .store import FileFloorPlanStore, FloorPlanStore, HttpFloorPlanStore
from .utils import GRID_SIZE

ORG = "HomeMaintenance"
APP = "FloorPlanner"


def default_store_dir() -> str:
    base = QStandardPaths.writableLocation(QStandardPaths.AppDataLocation) or os.path.expanduser("~")
    return os.path.join(base, "FloorPlans")


@dataclass
class EditorSettings:
    units: str = Units.IMPERIAL
    grid_size: float = GRID_SIZE
    snap: bool = True
    store_dir: str = ""
    store_url: str = ""
    last_plan_id: str = ""

    @classmethod
    def load(cls, qs: Optional[QSettings] = None) -> "EditorSettings":
        qs = qs or QSettings(ORG, APP)
        units = str(qs.value("units", Units.IMPERIAL))
        try:
            grid = float(qs.value("grid_size", GRID_SIZE))
        except (TypeError, ValueError):
            grid = GRID_SIZE
        return cls(
            units=units if units in (Units.IMPERIAL, Units.METRIC) else Units.IMPERIAL,
            grid_size=grid if grid > 0 else GRID_SIZE,
            snap=str(qs.value("snap", "true")).lower() in ("true", "1"),
            store_dir=str(qs.value("store_dir", "") or default_store_dir()),
            store_url=str(qs.value("store_url", "") or ""),
            last_plan_id=str(qs.value("last_plan_id", "") or ""),
        )

    def save(self, qs: Optional[QSettings] = None):
        qs = qs or QSettings(ORG, APP)
        qs.setValue("units", self.units)
        qs.setValue("grid_size", self.grid_size)
        qs.setValue("snap", "true" if self.snap else "false")
        qs.setValue("store_dir", self.store_dir)
        qs.setValue("store_url", self.store_url)
        qs.setValue("last_plan_id", self.last_plan_id)
        qs.sync()

    def plan_options(self) -> dict:
        return {"grid": {"size": self.grid_size}, "units": self.units}


def make_store(settings: EditorSettings) -> FloorPlanStore:
    if settings.store_url:
        return HttpFloorPlanStore(settings.store_url)
    return FileFloorPlanStore(settings.store_dir or default_store_dir())
