import json

import pytest
from PySide6.QtCore import QPointF

from floorplan import DragMode, InteractionController, Mode, PlanScene, ViewTransform, format_measure


def test_click_selects_and_notifies(controller, scene, recorder):
    controller.add("room")
    assert controller.click(QPointF(140, 115)) == 0
    assert scene.selected == 0
    summary = json.loads(recorder.selections[-1])
    assert summary["type"] == "room"
    assert (summary["x"], summary["y"], summary["w"], summary["h"]) == (40, 40, 200, 150)


def test_click_on_empty_space_clears_selection(controller, scene, recorder):
    controller.add("room")
    controller.click(QPointF(140, 115))
    assert controller.click(QPointF(900, 900)) is None
    assert scene.selected is None
    assert recorder.selections[-1] is None


def test_drag_moves_with_grid_snap(controller, scene):
    controller.add("room")
    controller.click(QPointF(140, 115))
    assert controller.pointer_down(QPointF(140, 115))
    assert controller.mode == Mode.DRAGGING
    controller.pointer_move(QPointF(200, 200))
    room = scene.objects[0]
    # grab offset (100, 75) -> (100, 125) -> snapped to 24
    assert (room.x, room.y) == (96, 120)
    assert controller.pointer_up(QPointF(200, 200)) is True
    assert controller.mode == Mode.IDLE


def test_press_release_without_motion_is_not_a_drag(controller):
    controller.add("room")
    controller.click(QPointF(140, 115))
    controller.pointer_down(QPointF(140, 115))
    assert controller.pointer_up() is False


def test_pointer_down_without_selection_does_nothing(controller):
    controller.add("room")
    assert not controller.pointer_down(QPointF(140, 115))
    assert controller.mode == Mode.IDLE


def test_resize_floors_at_minimum(controller, scene):
    controller.snap_enabled = False
    controller.add("room")
    controller.click(QPointF(140, 115))
    controller.pointer_down(QPointF(240, 190))  # bottom-right handle
    controller.pointer_move(QPointF(41, 41))
    room = scene.objects[0]
    assert (room.x, room.y, room.w, room.h) == (40, 40, 10, 10)


def test_rotated_room_resizes_from_rotated_box_handle(controller, scene):
    controller.add("room")
    scene.objects[0].angle = 90.0
    controller.click(QPointF(140, 115))
    # rotated box is (65, 15, 150, 200); its top-left handle lies outside the raw rect
    assert controller.pointer_down(QPointF(65, 15))
    assert controller.mode == Mode.DRAGGING
    assert controller.drag.mode == DragMode.RESIZE
    assert controller.drag.handle == 0


def test_rotated_corner_outside_raw_rect_is_not_hit(controller, scene):
    controller.add("room")
    scene.objects[0].angle = 90.0
    # inside the rotated shape, above the unrotated rect
    assert controller.click(QPointF(140, 25)) is None
    assert scene.selected is None


def test_resize_past_opposite_edge_normalizes(controller, scene):
    controller.snap_enabled = False
    controller.add("room")
    controller.click(QPointF(140, 115))
    controller.pointer_down(QPointF(240, 115))  # middle-right handle
    controller.pointer_move(QPointF(0, 115))
    room = scene.objects[0]
    assert (room.x, room.w, room.h) == (0, 40, 150)


def test_door_drag_near_wall_seats_on_it(controller, scene, square_room):
    door_index = controller.add("door")
    controller.click(QPointF(60, 55))
    assert scene.selected == door_index
    controller.pointer_down(QPointF(60, 55))
    controller.pointer_move(QPointF(30, 20))
    door = scene.objects[door_index]
    assert door.x == pytest.approx(20)
    assert door.y == pytest.approx(0)
    assert door.angle == pytest.approx(0)


def test_polygon_needs_three_points(controller, scene):
    controller.start_polygon()
    controller.click(QPointF(0, 0))
    controller.click(QPointF(100, 0))
    assert controller.finish_polygon() is None
    assert len(scene) == 0
    assert controller.mode == Mode.IDLE


def test_polygon_commit_snaps_points(controller, scene):
    controller.start_polygon()
    for x, y in ((1, 2), (99, 1), (97, 95)):
        controller.click(QPointF(x, y))
    index = controller.finish_polygon()
    assert index == 0
    room = scene.objects[0]
    assert room.TYPE == "polyroom"
    assert [(p.x(), p.y()) for p in room.points] == [(0, 0), (96, 0), (96, 96)]
    # a second finish has nothing to commit
    assert controller.finish_polygon() is None
    assert len(scene) == 1


def test_polygon_keys(controller, scene):
    controller.start_polygon()
    controller.click(QPointF(0, 0))
    assert controller.key_press("Escape")
    assert controller.mode == Mode.IDLE
    controller.start_polygon()
    for x, y in ((0, 0), (48, 0), (48, 48)):
        controller.click(QPointF(x, y))
    assert controller.key_press("Enter")
    assert len(scene) == 1


def test_pointer_down_during_polygon_does_not_drag(controller):
    controller.add("room")
    controller.click(QPointF(140, 115))
    controller.start_polygon()
    assert not controller.pointer_down(QPointF(140, 115))
    assert controller.mode == Mode.POLYGON_DRAWING


def test_delete_key_removes_selection(controller, scene, recorder):
    controller.add("room")
    controller.add("marker")
    controller.click(QPointF(160, 160))
    assert controller.key_press("Delete")
    assert [o.TYPE for o in scene.objects] == ["room"]
    assert recorder.selections[-1] is None


def test_arrow_keys_nudge(controller, scene):
    controller.add("furniture")
    controller.click(QPointF(100, 100))
    controller.key_press("ArrowRight")
    controller.key_press("ArrowUp")
    sofa = scene.objects[0]
    assert (sofa.x, sofa.y) == (81, 79)
    controller.key_press("ArrowDown", shift=True)
    assert sofa.y == 79 + 24


def test_rotation_keys(controller, scene):
    controller.add("custom")
    controller.click(QPointF(150, 150))
    controller.key_press("r")
    controller.key_press("R")
    assert scene.objects[0].angle == 10
    controller.key_press("e")
    assert scene.objects[0].angle == 5


def test_rotation_ignored_for_markers(controller, scene):
    controller.add("marker")
    controller.click(QPointF(160, 160))
    assert not controller.key_press("r")


def test_keys_without_selection(controller):
    controller.add("room")
    assert not controller.key_press("ArrowLeft")
    assert not controller.key_press("Delete")


def test_measure_text(controller, recorder):
    controller.pointer_move(QPointF(120, 240))
    assert recorder.measures == []
    controller.toggle_measure()
    controller.pointer_move(QPointF(120, 240))
    assert recorder.measures[-1] == "x: 10.0 ft, y: 20.0 ft"
    controller.set_units("metric")
    controller.pointer_move(QPointF(150, 250))
    assert recorder.measures[-1] == "x: 1.50 m, y: 2.50 m"


def test_set_units_rejects_unknown(controller):
    with pytest.raises(ValueError):
        controller.set_units("cubits")


def test_format_measure():
    assert format_measure(QPointF(6, 0), "imperial") == "x: 0.5 ft, y: 0.0 ft"


def test_round_trip_through_export(controller):
    controller.add("room")
    controller.add("door")
    controller.add("marker", kind="outlet")
    controller.scene.append(controller.scene.factory.poly_room(
        [QPointF(0, 0), QPointF(50, 0), QPointF(50, 50)]))
    controller.scene.update_selected(0, {"name": "Kitchen", "layer": "Rooms"})
    text = controller.export_plan()

    other = InteractionController(PlanScene())
    assert other.load_plan(text)
    assert other.scene.objects == controller.scene.objects
    assert other.export_plan() == text


def test_load_plan_rejects_malformed(controller, scene, recorder):
    controller.add("room")
    assert not controller.load_plan("not json")
    assert not controller.load_plan('{"objects": [{"type": "staircase"}]}')
    assert not controller.load_plan('{"objects": [{"type": "room", "x": "wide"}]}')
    assert len(scene) == 1


def test_load_plan_rejects_bad_grid_options(controller, scene):
    controller.add("room")
    for options in ('{"grid": null}', '{"grid": 24}', '{"grid": {"size": "big"}}',
                    '{"grid": {"size": -4}}', '{"units": "cubits"}', '42'):
        assert not controller.load_plan('{"options": %s, "objects": []}' % options)
    assert len(scene) == 1
    assert scene.grid_size == 24
    # the scene still works after the rejected loads
    controller.start_polygon()
    controller.click(QPointF(25, 25))
    assert controller.poly_points == [QPointF(24, 24)]


def test_grid_accessors_tolerate_non_mapping_grid(scene):
    scene.options["grid"] = None
    assert scene.grid_size == 24
    assert scene.grid_color == "#eeeeee"
    scene.options["grid"] = 24
    assert scene.grid_size == 24


def test_load_plan_resets_session(controller, scene, recorder):
    controller.start_polygon()
    assert controller.load_plan('{"objects": []}')
    assert controller.mode == Mode.IDLE
    assert recorder.selections[-1] is None


def test_view_transform_zoom_keeps_anchor():
    view = ViewTransform()
    anchor = QPointF(200, 100)
    world = view.screen_to_world(anchor)
    view.zoom_at(anchor, 2.0)
    assert view.scale == 2.0
    back = view.world_to_screen(world)
    assert back.x() == pytest.approx(200)
    assert back.y() == pytest.approx(100)


def test_view_transform_zoom_is_clamped():
    view = ViewTransform()
    for _ in range(40):
        view.zoom_at(QPointF(0, 0), 2.0)
    assert view.scale == 8.0
    for _ in range(80):
        view.zoom_at(QPointF(0, 0), 0.5)
    assert view.scale == pytest.approx(0.2)
