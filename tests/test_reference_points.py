import struct

import pytest

from lightscape.reference_points import ReferencePoint, ReferencePointSet
from lightscape.types import GridPosition


@pytest.fixture
def points():
    refs = ReferencePointSet()
    refs.add(GridPosition(1, 2, 0), True, "Keyboard", "kbd")
    refs.add(GridPosition(0, 0, 1), False, "Monitor", "mon")
    return refs


def test_add_creates_disabled_point(points):
    point = points.get("kbd")
    assert point == ReferencePoint(GridPosition(1, 2, 0), True, "Keyboard", False, "kbd")
    assert len(points) == 2
    assert "mon" in points


def test_add_duplicate_is_ignored(points):
    assert points.add(GridPosition(2, 2, 2), True, "Other", "kbd") is False
    assert points.get("kbd").name == "Keyboard"


def test_add_emits_change():
    refs = ReferencePointSet()
    calls = []
    refs.points_changed.connect(lambda: calls.append(True))
    refs.add(GridPosition(), True, "A", "a")
    refs.add(GridPosition(), True, "A", "a")
    assert len(calls) == 1


def test_remove(points):
    assert points.remove("kbd") is True
    assert "kbd" not in points
    assert points.remove("kbd") is False


def test_clear(points):
    points.clear()
    assert len(points) == 0
    assert points.enabled_points() == []


def test_enabled_points(points):
    assert not points.has_enabled()
    points.set_enabled("mon", True)
    assert points.has_enabled()
    assert [p.device_id for p in points.enabled_points()] == ["mon"]


def test_iteration_is_ordered_by_id():
    refs = ReferencePointSet()
    refs.add(GridPosition(), True, "Z", "z")
    refs.add(GridPosition(), True, "A", "a")
    assert [p.device_id for p in refs] == ["a", "z"]


def test_set_enabled_signals(points):
    enabled = []
    changed = []
    points.point_enabled.connect(lambda device_id, flag: enabled.append((device_id, flag)))
    points.points_changed.connect(lambda: changed.append(True))
    points.set_enabled("kbd", True)
    points.set_enabled("unknown", True)
    assert enabled == [("kbd", True)]
    assert len(changed) == 1


def test_update_position(points):
    points.update_position("kbd", GridPosition(2, 1, 1))
    assert points.get("kbd").position == GridPosition(2, 1, 1)
    points.update_position("missing", GridPosition(2, 1, 1))
    assert points.get("missing") is None


def test_empty_state_bytes():
    assert ReferencePointSet().save_state() == b"\x00\x00\x00\x01\x00\x00\x00\x00"


def test_state_starts_with_version_and_count(points):
    data = points.save_state()
    assert struct.unpack(">II", data[:8]) == (1, len(points))


def test_round_trip(points):
    points.set_enabled("kbd", True)
    restored = ReferencePointSet()
    restored.restore_state(points.save_state())
    assert list(restored) == list(points)


def test_round_trip_unicode_name():
    refs = ReferencePointSet()
    refs.add(GridPosition(-1, 0, 2), False, "Écran ✓", "ecran")
    restored = ReferencePointSet()
    restored.restore_state(refs.save_state())
    assert restored.get("ecran") == refs.get("ecran")


def test_restore_replaces_existing(points):
    other = ReferencePointSet()
    other.add(GridPosition(), True, "Lamp", "lamp")
    points.restore_state(other.save_state())
    assert [p.device_id for p in points] == ["lamp"]


def test_restore_wrong_version_raises(points):
    data = bytearray(points.save_state())
    data[3] = 2
    with pytest.raises(ValueError):
        points.restore_state(bytes(data))
    assert len(points) == 2


def test_restore_truncated_raises(points):
    data = points.save_state()
    target = ReferencePointSet()
    with pytest.raises(ValueError):
        target.restore_state(data[:-3])
    assert len(target) == 0


def test_restore_emits_change(points):
    calls = []
    target = ReferencePointSet()
    target.points_changed.connect(lambda: calls.append(True))
    target.restore_state(points.save_state())
    assert calls == [True]