# start_window.py
from __future__ import annotations
import logging
import os
from typing import Optional

from PySide6.QtCore import Qt, QSize
from PySide6.QtGui import QIcon
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QFrame, QPushButton, QListWidget,
    QListWidgetItem, QMessageBox, QToolButton, QLabel, QInputDialog, QStyle
)

from floorplan.settings import EditorSettings
from floorplan.store import FloorPlanNotFound, FloorPlanStore
from floorplan.utils import ICON_DIR, load_svg_icon
from floorplan_editor import MainWindow

log = logging.getLogger("floorplan.start")

# ========= THEME =========
ACCENT           = "#2563EB"
ACCENT_HOVER     = "#1D4ED8"
ACCENT_ACTIVE    = "#1E40AF"

PANEL_BG         = "rgba(255, 255, 255, 0.92)"
PANEL_STROKE     = "#E2E8F0"
PANEL_RADIUS     = 14
BTN_RADIUS       = 10

FONT_FAMILY      = "Segoe UI, Inter, Roboto, sans-serif"
TEXT_MAIN        = "#0F172A"
TEXT_DIM         = "#64748B"
# =========================


class StartWindow(QWidget):
    """Entry screen listing the plans held by the configured store."""

    def __init__(self, store: FloorPlanStore, settings: Optional[EditorSettings] = None):
        super().__init__()
        self.store = store
        self.settings = settings or EditorSettings()
        self.editor: Optional[MainWindow] = None
        self.setObjectName("StartRoot")
        self.setWindowTitle("Floor Planner")
        self.resize(1000, 680)

        root = QVBoxLayout(self); root.setContentsMargins(28, 28, 28, 28); root.setSpacing(0)

        top = QHBoxLayout(); top.setContentsMargins(0, 0, 0, 0); top.setSpacing(0)
        title = QLabel("Floor Planner")
        title.setObjectName("Brand")
        top.addWidget(title); top.addStretch(1)

        self.btn_refresh = QToolButton(self); self.btn_refresh.setObjectName("RefreshBtn")
        self.btn_refresh.setIcon(self._icon_or_fallback("refresh.svg", QStyle.SP_BrowserReload))
        self.btn_refresh.setIconSize(QSize(22, 22))
        self.btn_refresh.setToolTip("Reload plan list")
        self.btn_refresh.clicked.connect(self._load_plans)
        top.addWidget(self.btn_refresh)
        root.addLayout(top); root.addSpacing(16)

        mid = QHBoxLayout(); mid.setSpacing(24)

        actions = QFrame(self); actions.setObjectName("ActionsCard")
        vact = QVBoxLayout(actions); vact.setContentsMargins(28, 24, 28, 24); vact.setSpacing(12)
        cap = QLabel("Quick start"); cap.setObjectName("CardTitle"); vact.addWidget(cap)

        self.btn_new    = QPushButton("New plan");          self._style_action_btn(self.btn_new)
        self.btn_open   = QPushButton("Open selected");     self._style_action_btn(self.btn_open)
        self.btn_cont   = QPushButton("Continue last plan"); self._style_action_btn(self.btn_cont)
        self.btn_delete = QPushButton("Delete selected");   self._style_action_btn(self.btn_delete)

        for b in (self.btn_new, self.btn_open, self.btn_cont, self.btn_delete):
            vact.addWidget(b)
        vact.addStretch(1)
        mid.addWidget(actions, 0)

        plans = QFrame(self); plans.setObjectName("PlansCard")
        vrec = QVBoxLayout(plans); vrec.setContentsMargins(24, 20, 24, 20); vrec.setSpacing(10)
        rcap = QLabel("Saved plans"); rcap.setObjectName("CardTitle"); vrec.addWidget(rcap)
        self.list_plans = QListWidget(); self.list_plans.setObjectName("PlanList")
        vrec.addWidget(self.list_plans, 1)
        mid.addWidget(plans, 1)
        root.addLayout(mid, 1)

        self.btn_new.clicked.connect(self._new)
        self.btn_open.clicked.connect(self._open_selected)
        self.btn_cont.clicked.connect(self._continue)
        self.btn_delete.clicked.connect(self._delete_selected)
        self.list_plans.itemDoubleClicked.connect(lambda it: self._open(it.data(Qt.UserRole)))
        self.list_plans.currentItemChanged.connect(lambda *_: self._sync_buttons())

        self._load_plans()
        self._apply_qss()

    # ---------- STYLE ----------
    def _apply_qss(self):
        self.setStyleSheet(f"""
        QWidget#StartRoot {{
            background: qlineargradient(x1:0, y1:0, x2:1, y2:1, stop:0 #F8FAFC, stop:1 #E0E7FF);
            color: {TEXT_MAIN};
            font-family: {FONT_FAMILY};
        }}
        #Brand {{ font-size: 18px; font-weight: 700; color: {TEXT_MAIN}; }}
        #ActionsCard, #PlansCard {{
            background: {PANEL_BG};
            border: 1px solid {PANEL_STROKE};
            border-radius: {PANEL_RADIUS}px;
        }}
        #CardTitle {{ color: {TEXT_MAIN}; font-weight: 700; }}
        QPushButton[class="Action"] {{
            background: {ACCENT}; color: white;
            border: none; border-radius: {BTN_RADIUS}px;
            padding: 10px 14px; font-weight: 700;
        }}
        QPushButton[class="Action"]:hover   {{ background: {ACCENT_HOVER}; }}
        QPushButton[class="Action"]:pressed {{ background: {ACCENT_ACTIVE}; }}
        QPushButton[class="Action"]:disabled {{ background: #CBD5E1; color: {TEXT_DIM}; }}
        #RefreshBtn {{
            background: white; border: 1px solid {PANEL_STROKE};
            border-radius: 10px; padding: 6px 8px;
        }}
        #PlanList {{
            background: white; color: {TEXT_MAIN};
            border: 1px solid {PANEL_STROKE};
            border-radius: 10px; padding: 6px;
        }}
        #PlanList::item {{ padding: 7px 10px; }}
        #PlanList::item:selected {{ background: #DBEAFE; color: {TEXT_MAIN}; border-radius: 6px; }}
        """)

    def _style_action_btn(self, b: QPushButton):
        b.setProperty("class", "Action")
        b.setCursor(Qt.PointingHandCursor)
        b.setMinimumHeight(36)

    def _icon_or_fallback(self, name: str, fallback) -> QIcon:
        return load_svg_icon(os.path.join(ICON_DIR, name), 22) or self.style().standardIcon(fallback)

    # ---------- DATA ----------
    def _load_plans(self):
        self.list_plans.clear()
        try:
            plans = self.store.list()
        except (OSError, ValueError) as e:
            log.warning("listing plans failed: %s", e)
            QMessageBox.warning(self, "Plans unavailable", str(e))
            plans = []
        for p in plans:
            it = QListWidgetItem(f"{p.name}    {p.updated_at:%Y-%m-%d %H:%M}")
            it.setData(Qt.UserRole, p.id)
            self.list_plans.addItem(it)
        self._sync_buttons()

    def _sync_buttons(self):
        has_sel = self.list_plans.currentItem() is not None
        self.btn_open.setEnabled(has_sel)
        self.btn_delete.setEnabled(has_sel)
        ids = {self.list_plans.item(i).data(Qt.UserRole) for i in range(self.list_plans.count())}
        self.btn_cont.setEnabled(bool(self.settings.last_plan_id) and self.settings.last_plan_id in ids)

    def _launch_editor(self, plan_id: Optional[str] = None):
        self.editor = MainWindow(self.store, self.settings)
        if plan_id and not self.editor.open_plan(plan_id):
            self.editor.deleteLater()
            self.editor = None
            return
        self.editor.show()
        self.close()

    # ---------- ACTIONS ----------
    def _new(self):
        name, ok = QInputDialog.getText(self, "New plan", "Plan name:", text="Untitled")
        if not ok:
            return
        try:
            record = self.store.create(name=name.strip() or None)
        except OSError as e:
            QMessageBox.critical(self, "Create failed", str(e))
            return
        self.settings.last_plan_id = record.id
        self._launch_editor(record.id)

    def _open(self, plan_id: str):
        self._launch_editor(plan_id)

    def _open_selected(self):
        it = self.list_plans.currentItem()
        if it is not None:
            self._open(it.data(Qt.UserRole))

    def _continue(self):
        if self.settings.last_plan_id:
            self._open(self.settings.last_plan_id)

    def _delete_selected(self):
        it = self.list_plans.currentItem()
        if it is None:
            return
        if QMessageBox.question(self, "Delete plan", f"Delete \"{it.text().split('    ')[0]}\"?") != QMessageBox.Yes:
            return
        plan_id = it.data(Qt.UserRole)
        try:
            self.store.delete(plan_id)
        except (OSError, FloorPlanNotFound) as e:
            QMessageBox.critical(self, "Delete failed", str(e))
            return
        if self.settings.last_plan_id == plan_id:
            self.settings.last_plan_id = ""
        self._load_plans()
