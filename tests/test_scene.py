import pytest
from PySide6.QtCore import QPointF

from floorplan import Layer, ObjectFactory, PlanScene
from floorplan.utils import GRID_SIZE


def test_factory_defaults():
    f = ObjectFactory()
    room = f.create("room")
    assert (room.x, room.y, room.w, room.h, room.angle) == (40, 40, 200, 150, 0)
    assert room.name == "Room" and room.layer == Layer.ALL
    door = f.create("door")
    assert (door.w, door.h) == (40, 10)
    window = f.create("window")
    assert (window.w, window.h) == (60, 8)
    marker = f.marker("sensor")
    assert (marker.x, marker.y, marker.kind) == (160, 160, "sensor")
    assert f.marker().kind == "wifi"


def test_factory_rejects_unknown_variant():
    with pytest.raises(ValueError):
        ObjectFactory().create("staircase")


def test_options_merge_keeps_defaults():
    scene = PlanScene({"grid": {"size": 12}})
    assert scene.grid_size == 12
    assert scene.grid_color == "#eeeeee"
    assert scene.options["units"] == "imperial"
    assert PlanScene({"grid": {"size": 0}}).grid_size == GRID_SIZE


def test_hit_test_default_room_center(scene):
    scene.add_object("room")
    assert scene.hit_test(QPointF(140, 115)) == 0
    assert scene.hit_test(QPointF(240, 190)) == 0  # edges are inclusive
    assert scene.hit_test(QPointF(241, 115)) is None


def test_hit_test_topmost_wins(scene):
    scene.add_object("room")
    scene.add_object("furniture")
    assert scene.hit_test(QPointF(100, 100)) == 1


def test_hit_test_marker_radius(scene):
    scene.add_object("marker")
    assert scene.hit_test(QPointF(165, 165)) == 0
    assert scene.hit_test(QPointF(170, 160)) is None


def test_hit_test_polyroom_uses_envelope(scene, square_room):
    assert scene.hit_test(QPointF(100, 100)) == 0


def test_update_selected_floors_size(scene):
    scene.add_object("room")
    assert scene.update_selected(0, {"w": 3, "h": -5, "name": "Hall", "layer": "Rooms"})
    room = scene.objects[0]
    assert (room.w, room.h) == (10, 10)
    assert room.name == "Hall" and room.layer == "Rooms"


def test_update_selected_marker_ignores_size(scene):
    scene.add_object("marker")
    scene.update_selected(0, {"x": 5, "w": 99})
    marker = scene.objects[0]
    assert marker.x == 5
    assert not hasattr(marker, "w")


def test_update_selected_polyroom_only_name_and_layer(scene, square_room):
    scene.update_selected(0, {"name": "L", "x": 500, "layer": "Rooms"})
    assert square_room.name == "L" and square_room.layer == "Rooms"
    assert square_room.points[0] == QPointF(0, 0)


def test_update_selected_missing_index(scene):
    assert not scene.update_selected(None, {"name": "x"})
    assert not scene.update_selected(3, {"name": "x"})


def test_delete_at_adjusts_selection(scene):
    for v in ("room", "door", "window"):
        scene.add_object(v)
    scene.select(2)
    assert scene.delete_at(0)
    assert scene.selected == 1
    assert scene.selected_object().TYPE == "window"
    assert scene.delete_at(1)
    assert scene.selected is None
    assert len(scene) == 1


def test_visible_objects_filters_by_layer(scene):
    scene.add_object("room", layer="Rooms")
    scene.add_object("door", layer="Openings")
    scene.add_object("custom")
    assert [i for i, _ in scene.visible_objects(Layer.ALL)] == [0, 1, 2]
    assert [i for i, _ in scene.visible_objects("Openings")] == [1]


def test_layers_include_custom_names(scene):
    scene.add_object("room", layer="Basement")
    assert scene.layers()[-1] == "Basement"
    assert Layer.ALL in scene.layers()
