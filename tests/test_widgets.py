import json

from PySide6.QtCore import QPoint, QPointF, Qt
from PySide6.QtTest import QTest

from floorplan import Layer, PalettePanel, PlanCanvas, PropertyPanel


def test_canvas_click_emits_selection(qapp):
    canvas = PlanCanvas()
    canvas.resize(400, 300)
    canvas.show()
    canvas.controller.add("room")
    seen = []
    canvas.selectionChanged.connect(seen.append)
    QTest.mouseClick(canvas, Qt.LeftButton, Qt.NoModifier, QPoint(140, 115))
    assert canvas.scene.selected == 0
    assert json.loads(seen[-1])["type"] == "room"
    canvas.close()


def test_canvas_delete_key(qapp):
    canvas = PlanCanvas()
    canvas.show()
    canvas.controller.add("room")
    canvas.controller.click(QPointF(140, 115))
    QTest.keyClick(canvas, Qt.Key_Delete)
    assert len(canvas.scene) == 0
    canvas.close()


def test_canvas_measure_signal(qapp):
    canvas = PlanCanvas()
    seen = []
    canvas.measureChanged.connect(seen.append)
    canvas.controller.toggle_measure()
    canvas.controller.pointer_move(QPointF(24, 36))
    assert seen == ["x: 2.0 ft, y: 3.0 ft"]


def test_detached_canvas_stops_emitting(qapp):
    canvas = PlanCanvas()
    seen = []
    canvas.selectionChanged.connect(seen.append)
    canvas.detach()
    canvas.controller.add("room")
    canvas.controller.click(QPointF(140, 115))
    assert seen == []


def test_hud_sets_layer_filter(qapp):
    canvas = PlanCanvas()
    canvas.hud.buttons[Layer.ROOMS].click()
    assert canvas.controller.active_layer == Layer.ROOMS


def test_property_panel_edits_selection(qapp):
    canvas = PlanCanvas()
    panel = PropertyPanel(canvas.controller)
    canvas.selectionChanged.connect(panel.load_summary)
    canvas.controller.add("room")
    canvas.controller.click(QPointF(140, 115))
    assert panel.ed_name.text() == "Room"
    panel.sp_w.setValue(300)
    assert canvas.scene.objects[0].w == 300
    canvas.controller.click(QPointF(900, 900))
    assert panel.frm.isHidden()


def test_property_panel_disables_size_for_markers(qapp):
    canvas = PlanCanvas()
    panel = PropertyPanel(canvas.controller)
    canvas.selectionChanged.connect(panel.load_summary)
    canvas.controller.add("marker")
    canvas.controller.click(QPointF(160, 160))
    assert not panel.sp_w.isEnabled()
    assert panel.sp_x.isEnabled()


def test_palette_relays_add_requests(qapp):
    palette = PalettePanel()
    seen = []
    palette.addRequested.connect(lambda variant, kind: seen.append((variant, kind)))
    wifi = [t for t in palette.tiles if t.meta.get("kind") == "wifi"][0]
    wifi.clicked.emit("marker", "wifi")
    assert seen == [("marker", "wifi")]
    assert len(palette.tiles) == 8
