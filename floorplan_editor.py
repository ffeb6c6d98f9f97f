#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations
import logging
import os
import sys
from typing import Optional

from PySide6.QtCore import Qt, QSize
from PySide6.QtGui import QAction, QActionGroup, QColor, QKeySequence
from PySide6.QtWidgets import (
    QApplication, QMainWindow, QToolBar, QStatusBar, QFileDialog, QMessageBox,
    QDockWidget, QStyle, QInputDialog, QToolButton, QMenu, QWidgetAction
)

from floorplan import PlanCanvas, PalettePanel, PropertyPanel, PlanScene, Units
from floorplan.palette import make_icon
from floorplan.settings import EditorSettings, make_store
from floorplan.state import open_from_store, read_plan_file, save_to_store, write_plan_file
from floorplan.store import FloorPlanRecord, FloorPlanStore
from floorplan.utils import load_svg_icon, ICON_DIR

log = logging.getLogger("floorplan.editor")


def _ensure_ext(path: str, ext: str) -> str:
    return path if path.lower().endswith(ext.lower()) else path + ext


class MainWindow(QMainWindow):
    def __init__(self, store: FloorPlanStore, settings: Optional[EditorSettings] = None,
                 record: Optional[FloorPlanRecord] = None):
        super().__init__()
        self.store = store
        self.settings = settings or EditorSettings()
        self.plan_id: Optional[str] = None
        self.plan_name: str = "Untitled"
        self.resize(1280, 860)

        # 1) canvas
        self.scene = PlanScene(self.settings.plan_options())
        self.canvas = PlanCanvas(self.scene)
        self.controller = self.canvas.controller
        self.controller.snap_enabled = self.settings.snap
        self.setCentralWidget(self.canvas)

        # 2) properties
        self.props_panel = PropertyPanel(self.controller, self)
        self.props_dock = QDockWidget("Properties", self)
        self.props_dock.setWidget(self.props_panel)
        self.props_dock.setAllowedAreas(Qt.LeftDockWidgetArea | Qt.RightDockWidgetArea)
        self.props_dock.setMinimumWidth(260)
        self.addDockWidget(Qt.RightDockWidgetArea, self.props_dock)

        # 3) palette
        self.palette = PalettePanel()
        self.palette_dock = QDockWidget("Palette", self)
        self.palette_dock.setWidget(self.palette)
        self.palette_dock.setAllowedAreas(Qt.LeftDockWidgetArea | Qt.RightDockWidgetArea)
        self.palette_dock.setMinimumWidth(240)
        self.addDockWidget(Qt.LeftDockWidgetArea, self.palette_dock)
        self.palette.addRequested.connect(self._add)

        # 4) toolbar / status
        self._build_toolbar()
        self.setStatusBar(QStatusBar(self))

        # 5) host notifications
        self.canvas.selectionChanged.connect(self.props_panel.load_summary)
        self.canvas.selectionChanged.connect(self._show_props_if_hidden)
        self.canvas.measureChanged.connect(lambda text: self.statusBar().showMessage(text))

        if record is not None:
            self._apply_record(record)
        self._update_title()
        self._update_status()

    # ---------- toolbar ----------
    def _build_toolbar(self):
        tb = QToolBar("Main", self)
        tb.setMovable(False)
        tb.setIconSize(QSize(18, 18))
        tb.setToolButtonStyle(Qt.ToolButtonTextBesideIcon)
        self.addToolBar(Qt.TopToolBarArea, tb)

        style = self.style()
        def ico(name, fallback):
            return load_svg_icon(os.path.join(ICON_DIR, name), 18) or style.standardIcon(fallback)

        # plan
        self.act_new = QAction(ico("new.svg", QStyle.SP_FileIcon), "New plan", self)
        self.act_new.setShortcut(QKeySequence("Ctrl+N"))
        self.act_new.triggered.connect(self._new_plan)

        self.act_open = QAction(ico("open.svg", QStyle.SP_DirOpenIcon), "Open plan…", self)
        self.act_open.setShortcut(QKeySequence("Ctrl+O"))
        self.act_open.triggered.connect(self._open_plan_dialog)

        self.act_save = QAction(ico("save.svg", QStyle.SP_DialogSaveButton), "Save", self)
        self.act_save.setShortcut(QKeySequence("Ctrl+S"))
        self.act_save.triggered.connect(self._save)

        self.act_save_as = QAction("Save as…", self)
        self.act_save_as.triggered.connect(self._save_as)

        self.act_import = QAction(ico("import.svg", QStyle.SP_ArrowDown), "Import JSON…", self)
        self.act_import.triggered.connect(self._import_json_dialog)

        self.act_export = QAction(ico("export.svg", QStyle.SP_ArrowRight), "Export JSON…", self)
        self.act_export.setShortcut(QKeySequence("Ctrl+E"))
        self.act_export.triggered.connect(self._export_json_dialog)

        # add
        self.add_actions = []
        for label, variant, kind in (("Room", "room", None), ("Furniture", "furniture", None),
                                     ("Custom", "custom", None), ("Door", "door", None),
                                     ("Window", "window", None), ("Wi-Fi marker", "marker", "wifi")):
            act = QAction(make_icon(18, 18, QColor("#dbeafe")), label, self)
            act.triggered.connect(lambda _=False, v=variant, k=kind: self._add(v, k))
            self.add_actions.append(act)

        self.act_poly_start = QAction("Start polygon room", self)
        self.act_poly_start.setShortcut(QKeySequence("P"))
        self.act_poly_start.triggered.connect(self._start_polygon)
        self.act_poly_finish = QAction("Finish polygon", self)
        self.act_poly_finish.triggered.connect(self._finish_polygon)
        self.act_poly_cancel = QAction("Cancel polygon", self)
        self.act_poly_cancel.triggered.connect(self._cancel_polygon)

        # edit
        self.act_delete = QAction(ico("delete.svg", QStyle.SP_TrashIcon), "Delete selected", self)
        self.act_delete.triggered.connect(self.controller.delete_selected)

        self.act_snap = QAction("Snap to grid", self, checkable=True)
        self.act_snap.setChecked(self.controller.snap_enabled)
        self.act_snap.toggled.connect(self._set_snap)

        self.act_heat = QAction("Wi-Fi heatmap", self, checkable=True)
        self.act_heat.toggled.connect(self._set_heatmap)

        self.act_measure = QAction("Measure", self, checkable=True)
        self.act_measure.toggled.connect(self._set_measure)

        self.units_group = QActionGroup(self)
        self.act_imperial = QAction("Feet", self, checkable=True)
        self.act_metric = QAction("Meters", self, checkable=True)
        for act, units in ((self.act_imperial, Units.IMPERIAL), (self.act_metric, Units.METRIC)):
            self.units_group.addAction(act)
            act.setChecked(self.controller.units == units)
            act.triggered.connect(lambda _=False, u=units: self._set_units(u))

        self.act_reset_view = QAction("Reset view", self)
        self.act_reset_view.triggered.connect(self.canvas.reset_view)

        # docks
        self.act_toggle_props = QAction("Properties", self, checkable=True)
        self.act_toggle_palette = QAction("Palette", self, checkable=True)
        def _sync():
            self.act_toggle_props.setChecked(not self.props_dock.isHidden())
            self.act_toggle_palette.setChecked(not self.palette_dock.isHidden())
        _sync()
        self.act_toggle_props.toggled.connect(lambda on: self.props_dock.setVisible(on))
        self.act_toggle_palette.toggled.connect(lambda on: self.palette_dock.setVisible(on))
        self.props_dock.visibilityChanged.connect(lambda _: _sync())
        self.palette_dock.visibilityChanged.connect(lambda _: _sync())

        def add_menu_button(title: str, icon_name: str, fallback, menu_builder):
            btn = QToolButton(self)
            btn.setText(title)
            btn.setIcon(ico(icon_name, fallback))
            btn.setPopupMode(QToolButton.InstantPopup)
            btn.setToolButtonStyle(Qt.ToolButtonTextBesideIcon)
            m = QMenu(btn); menu_builder(m)
            btn.setMenu(m)
            wa = QWidgetAction(self); wa.setDefaultWidget(btn)
            tb.addAction(wa)

        def build_plan_menu(m: QMenu):
            m.addAction(self.act_new)
            m.addAction(self.act_open)
            m.addSeparator()
            m.addAction(self.act_save)
            m.addAction(self.act_save_as)
            m.addSeparator()
            m.addAction(self.act_import)
            m.addAction(self.act_export)
            m.addSeparator()
            act_start = QAction("Start screen", self)
            act_start.triggered.connect(self._back_to_start)
            m.addAction(act_start)
        add_menu_button("Plan", "open.svg", QStyle.SP_DirOpenIcon, build_plan_menu)

        def build_add_menu(m: QMenu):
            for act in self.add_actions:
                m.addAction(act)
            m.addSeparator()
            m.addAction(self.act_poly_start)
            m.addAction(self.act_poly_finish)
            m.addAction(self.act_poly_cancel)
        add_menu_button("Add", "add.svg", QStyle.SP_FileDialogNewFolder, build_add_menu)

        def build_view_menu(m: QMenu):
            m.addAction(self.act_snap)
            m.addAction(self.act_heat)
            m.addAction(self.act_measure)
            m.addSeparator()
            m.addAction(self.act_imperial)
            m.addAction(self.act_metric)
            m.addSeparator()
            m.addAction(self.act_reset_view)
            m.addSeparator()
            m.addAction(self.act_toggle_props)
            m.addAction(self.act_toggle_palette)
        add_menu_button("View", "view.svg", QStyle.SP_DesktopIcon, build_view_menu)

        tb.addSeparator()
        tb.addAction(self.act_poly_start)
        tb.addAction(self.act_poly_finish)
        tb.addAction(self.act_delete)

    # ---------- editing ----------
    def _add(self, variant: str, kind=None):
        self.controller.add(variant, kind)
        self._status(f"Added {variant}")

    def _start_polygon(self):
        self.controller.start_polygon()
        self.canvas.setFocus()
        self._status("Click to place corners; Enter finishes, Esc cancels")

    def _finish_polygon(self):
        if self.controller.finish_polygon() is None:
            self._status("Polygon needs at least 3 points; discarded")
        else:
            self._status("Polygon room added")

    def _cancel_polygon(self):
        self.controller.cancel_polygon()
        self._status("Polygon cancelled")

    def _set_snap(self, on: bool):
        if on != self.controller.snap_enabled:
            self.controller.toggle_snap()
        self.settings.snap = on
        self._update_status()

    def _set_heatmap(self, on: bool):
        if on != self.controller.heatmap:
            self.controller.toggle_heatmap()

    def _set_measure(self, on: bool):
        if on != self.controller.measure:
            self.controller.toggle_measure()
        self._update_status()

    def _set_units(self, units: str):
        self.controller.set_units(units)
        self.settings.units = units
        self._update_status()

    def _show_props_if_hidden(self, summary):
        if summary and self.props_dock.isHidden():
            self.props_dock.show()
            self.props_dock.raise_()

    # ---------- store ----------
    def _apply_record(self, record: FloorPlanRecord):
        self.plan_id = record.id
        self.plan_name = record.name
        self.settings.last_plan_id = record.id
        self.props_panel.clear()
        self._update_title()

    def _new_plan(self):
        self.scene.clear()
        self.plan_id = None
        self.plan_name = "Untitled"
        self.controller.reset()
        self._update_title()

    def _open_plan_dialog(self):
        try:
            plans = self.store.list()
        except (OSError, ValueError) as e:
            QMessageBox.critical(self, "Open failed", str(e))
            return
        if not plans:
            QMessageBox.information(self, "Open plan", "No saved plans yet.")
            return
        labels = [f"{p.name}  ({p.updated_at:%Y-%m-%d %H:%M})" for p in plans]
        choice, ok = QInputDialog.getItem(self, "Open plan", "Plan:", labels, 0, False)
        if not ok:
            return
        self.open_plan(plans[labels.index(choice)].id)

    def open_plan(self, plan_id: str) -> bool:
        record = open_from_store(self.store, self.scene, plan_id)
        if record is None:
            QMessageBox.critical(self, "Open failed", f"Could not open plan {plan_id}.")
            return False
        log.info("opened plan %s", plan_id)
        self._apply_record(record)
        self.controller.reset()
        self._status(f"Opened: {record.name}")
        return True

    def _save(self):
        record = save_to_store(self.store, self.scene, self.plan_id, self.plan_name)
        if record is None:
            log.error("save of plan %s failed", self.plan_id or "(new)")
            QMessageBox.critical(self, "Save failed", "The plan could not be saved.")
            return
        self._apply_record(record)
        self._status(f"Saved: {record.name}")

    def _save_as(self):
        name, ok = QInputDialog.getText(self, "Save as", "Plan name:", text=self.plan_name)
        if not ok:
            return
        record = save_to_store(self.store, self.scene, None, name.strip() or None)
        if record is None:
            QMessageBox.critical(self, "Save failed", "The plan could not be saved.")
            return
        self._apply_record(record)
        self._status(f"Saved: {record.name}")

    # ---------- files ----------
    def _import_json_dialog(self):
        path, _ = QFileDialog.getOpenFileName(self, "Import plan", "", "JSON (*.json)")
        if not path:
            return
        try:
            ok = read_plan_file(self.scene, path)
        except (OSError, UnicodeDecodeError) as e:
            QMessageBox.critical(self, "Import failed", str(e))
            return
        if not ok:
            QMessageBox.warning(self, "Import failed", "The file is not a floor plan.")
            return
        self.controller.reset()
        self._status(f"Imported: {os.path.basename(path)}")

    def _export_json_dialog(self):
        path, _ = QFileDialog.getSaveFileName(self, "Export plan", f"{self.plan_name}.json", "JSON (*.json)")
        if not path:
            return
        path = _ensure_ext(path, ".json")
        try:
            write_plan_file(self.scene, path)
        except OSError as e:
            QMessageBox.critical(self, "Export failed", str(e))
            return
        self._status(f"Exported: {os.path.basename(path)}")

    def _back_to_start(self):
        from start_window import StartWindow
        self.close()
        self._start = StartWindow(self.store, self.settings)
        self._start.show()

    # ---------- status ----------
    def closeEvent(self, event):
        self.settings.save()
        self.canvas.detach()
        super().closeEvent(event)

    def _update_title(self):
        self.setWindowTitle(f"Floor Planner - {self.plan_name}")

    def _status(self, text: str):
        self.statusBar().showMessage(text, 3000)

    def _update_status(self):
        self.statusBar().showMessage(
            f"Snap: {'ON' if self.controller.snap_enabled else 'OFF'} | "
            f"Units: {'ft' if self.controller.units == Units.IMPERIAL else 'm'} | "
            f"Measure: {'ON' if self.controller.measure else 'OFF'}"
        )


def main():
    logging.basicConfig(level=os.environ.get("FLOORPLAN_LOG_LEVEL", "WARNING").upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = QApplication(sys.argv)
    app.setOrganizationName("HomeMaintenance")
    app.setApplicationName("FloorPlanner")
    settings = EditorSettings.load()
    store = make_store(settings)
    from start_window import StartWindow
    win = StartWindow(store, settings)
    win.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
