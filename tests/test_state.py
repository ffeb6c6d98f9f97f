import json

from PySide6.QtCore import QPointF

from floorplan import MemoryFloorPlanStore, PlanScene
from floorplan.state import (export_plan, load_plan, object_from_dict, object_to_dict,
                             open_from_store, read_plan_file, save_to_store, selection_summary,
                             write_plan_file, PlanFormatError)

import pytest


def _sample_scene():
    scene = PlanScene()
    scene.add_object("room", name="Bedroom", layer="Rooms")
    scene.add_object("window", angle=90.0)
    scene.add_object("marker", kind="wifi")
    scene.append(scene.factory.poly_room([QPointF(0, 0), QPointF(10, 0), QPointF(10, 10)]))
    return scene


def test_export_document_shape():
    data = json.loads(export_plan(_sample_scene()))
    assert set(data) == {"options", "objects"}
    assert data["options"]["grid"]["size"] == 24
    assert [o["type"] for o in data["objects"]] == ["room", "window", "marker", "polyroom"]
    assert data["objects"][3]["points"][1] == {"x": 10, "y": 0}


def test_object_dict_round_trip():
    scene = _sample_scene()
    for obj in scene.objects:
        assert object_from_dict(object_to_dict(obj)) == obj


def test_object_from_dict_defaults():
    marker = object_from_dict({"type": "marker", "x": 1, "y": 2})
    assert marker.kind == "marker"
    assert marker.layer == "All"


def test_marker_with_empty_kind_round_trips():
    marker = object_from_dict({"type": "marker", "x": 1, "y": 2, "kind": ""})
    assert marker.kind == ""
    assert object_from_dict(object_to_dict(marker)) == marker


def test_object_from_dict_rejects_bool_numbers():
    with pytest.raises(PlanFormatError):
        object_from_dict({"type": "room", "x": True})


def test_load_plan_keeps_scene_on_failure():
    scene = _sample_scene()
    before = list(scene.objects)
    assert not load_plan(scene, '{"objects": [{"type": "room"}, 5]}')
    assert not load_plan(scene, '[]')
    assert scene.objects == before


def test_load_plan_merges_options_and_clears_selection():
    scene = _sample_scene()
    scene.select(0)
    assert load_plan(scene, '{"options": {"units": "metric"}, "objects": []}')
    assert scene.options["units"] == "metric"
    assert scene.options["grid"]["size"] == 24
    assert scene.selected is None
    assert len(scene) == 0


def test_selection_summary():
    scene = _sample_scene()
    assert selection_summary(None) is None
    data = json.loads(selection_summary(scene.objects[2]))
    assert data == {"type": "marker", "name": "", "x": 160, "y": 160, "w": 0, "h": 0, "layer": "All"}


def test_save_and_open_through_store():
    store = MemoryFloorPlanStore()
    record = save_to_store(store, _sample_scene(), name="Ground floor")
    assert record.name == "Ground floor"

    scene = PlanScene()
    opened = open_from_store(store, scene, record.id)
    assert opened.id == record.id
    assert [o.TYPE for o in scene.objects] == ["room", "window", "marker", "polyroom"]


def test_save_with_unknown_id_creates_it():
    store = MemoryFloorPlanStore()
    record = save_to_store(store, PlanScene(), plan_id="basement")
    assert record.id == "basement"
    assert store.get("basement").json == export_plan(PlanScene())


def test_open_fresh_record_gives_empty_plan():
    store = MemoryFloorPlanStore()
    record = store.create(name="Empty")
    scene = _sample_scene()
    assert open_from_store(store, scene, record.id) is not None
    assert len(scene) == 0


def test_open_missing_plan():
    assert open_from_store(MemoryFloorPlanStore(), PlanScene(), "nope") is None


def test_plan_file_round_trip(tmp_path):
    path = tmp_path / "plan.json"
    write_plan_file(_sample_scene(), str(path))
    scene = PlanScene()
    assert read_plan_file(scene, str(path))
    assert scene.objects == _sample_scene().objects
