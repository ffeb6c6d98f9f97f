import math

import pytest
from PySide6.QtCore import QPointF

from floorplan import ObjectFactory, snap_door_or_window, snap_point


def test_snap_point_rounds_to_grid():
    assert snap_point(QPointF(13, 35), 24) == QPointF(24, 24)
    assert snap_point(QPointF(11, 37), 24) == QPointF(0, 48)
    assert snap_point(QPointF(13, 35), 24, enabled=False) == QPointF(13, 35)


def test_door_seats_on_nearest_wall(scene, square_room):
    # center (100, 20): 20 from the top wall
    door = ObjectFactory().create("door", x=80.0, y=15.0)
    assert snap_door_or_window(door, scene.poly_rooms())
    assert door.x == pytest.approx(80)
    assert door.y == pytest.approx(0)
    assert door.angle == pytest.approx(0)


def test_door_on_closing_edge_takes_its_angle(scene, square_room):
    # the left wall is the wrap-around edge (0,200) -> (0,0)
    door = ObjectFactory().create("door", x=-5.0, y=95.0)
    assert snap_door_or_window(door, scene.poly_rooms())
    assert door.angle == pytest.approx(-90)
    cx, cy = door.x + door.w / 2, door.y + door.h / 2
    assert cx == pytest.approx(5)
    assert cy == pytest.approx(100)


def test_window_too_far_is_untouched(scene, square_room):
    window = ObjectFactory().create("window", x=70.0, y=96.0)
    before = (window.x, window.y, window.angle)
    assert not snap_door_or_window(window, scene.poly_rooms())
    assert (window.x, window.y, window.angle) == before


def test_threshold_is_inclusive(scene, square_room):
    # center (100, 40): exactly 40 from the top wall
    door = ObjectFactory().create("door", x=80.0, y=35.0)
    assert snap_door_or_window(door, scene.poly_rooms())


def test_no_rooms_no_snap():
    door = ObjectFactory().create("door")
    assert not snap_door_or_window(door, [])
    assert door.angle == 0


def test_diagonal_wall_angle(scene):
    room = scene.factory.poly_room([QPointF(0, 0), QPointF(100, 100), QPointF(0, 100)])
    door = ObjectFactory().create("door", x=30.0, y=40.0)
    assert snap_door_or_window(door, [room])
    assert door.angle == pytest.approx(math.degrees(math.atan2(100, 100)))
