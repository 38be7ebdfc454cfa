"""A set of reference points that spatial effects can be measured from."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field, replace
from typing import Dict, Iterator, List, Optional

from lightscape.events import Signal
from lightscape.types import GridPosition

STATE_VERSION = 1
_NULL_STRING = 0xFFFFFFFF


@dataclass(frozen=True)
class ReferencePoint:
    position: GridPosition = field(default_factory=GridPosition)
    is_rgb_device: bool = True
    name: str = ""
    enabled: bool = False
    device_id: str = ""


def _pack_string(text: str) -> bytes:
    data = text.encode("utf-16-be")
    return struct.pack(">I", len(data)) + data


def _pack_point(point: ReferencePoint) -> bytes:
    pos = point.position
    return b"".join(
        (
            struct.pack(">iii?", pos.x, pos.y, pos.z, point.is_rgb_device),
            _pack_string(point.name),
            struct.pack(">?", point.enabled),
            _pack_string(point.device_id),
        )
    )


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._offset = 0

    def _take(self, size: int) -> bytes:
        end = self._offset + size
        if end > len(self._data):
            raise ValueError("reference point state is truncated")
        chunk = self._data[self._offset:end]
        self._offset = end
        return chunk

    def uint32(self) -> int:
        return struct.unpack(">I", self._take(4))[0]

    def int32(self) -> int:
        return struct.unpack(">i", self._take(4))[0]

    def boolean(self) -> bool:
        return self._take(1) != b"\x00"

    def string(self) -> str:
        size = self.uint32()
        if size == _NULL_STRING:
            return ""
        if size % 2:
            raise ValueError("reference point state holds a malformed string")
        return self._take(size).decode("utf-16-be")

    def point(self) -> ReferencePoint:
        position = GridPosition(self.int32(), self.int32(), self.int32())
        is_rgb = self.boolean()
        name = self.string()
        enabled = self.boolean()
        device_id = self.string()
        return ReferencePoint(position, is_rgb, name, enabled, device_id)


class ReferencePointSet:
    """Reference points keyed by device id, kept in id order."""

    def __init__(self) -> None:
        self._points: Dict[str, ReferencePoint] = {}
        self.points_changed = Signal()
        self.point_enabled = Signal()

    def __len__(self) -> int:
        return len(self._points)

    def __contains__(self, device_id: object) -> bool:
        return device_id in self._points

    def __iter__(self) -> Iterator[ReferencePoint]:
        return iter([self._points[key] for key in sorted(self._points)])

    def get(self, device_id: str) -> Optional[ReferencePoint]:
        return self._points.get(device_id)

    def add(self, pos: GridPosition, is_rgb_device: bool, name: str, device_id: str) -> bool:
        """Add a disabled point; an existing id is left untouched."""
        if device_id in self._points:
            return False
        self._points[device_id] = ReferencePoint(pos, is_rgb_device, name, False, device_id)
        self.points_changed.emit()
        return True

    def remove(self, device_id: str) -> bool:
        if self._points.pop(device_id, None) is None:
            return False
        self.points_changed.emit()
        return True

    def clear(self) -> None:
        self._points.clear()
        self.points_changed.emit()

    def enabled_points(self) -> List[ReferencePoint]:
        return [point for point in self if point.enabled]

    def has_enabled(self) -> bool:
        return any(point.enabled for point in self._points.values())

    def update_position(self, device_id: str, pos: GridPosition) -> None:
        if device_id in self._points:
            self._points[device_id] = replace(self._points[device_id], position=pos)
            self.points_changed.emit()

    def set_enabled(self, device_id: str, enabled: bool) -> None:
        if device_id in self._points:
            self._points[device_id] = replace(self._points[device_id], enabled=enabled)
            self.point_enabled.emit(device_id, enabled)
            self.points_changed.emit()

    def save_state(self) -> bytes:
        """Serialise all points as big-endian binary, prefixed by a version."""
        parts = [struct.pack(">II", STATE_VERSION, len(self._points))]
        for key in sorted(self._points):
            parts.append(_pack_string(key))
            parts.append(_pack_point(self._points[key]))
        return b"".join(parts)

    def restore_state(self, data: bytes) -> None:
        """Replace all points with those in ``data``; raise ValueError if invalid."""
        reader = _Reader(data)
        version = reader.uint32()
        if version != STATE_VERSION:
            raise ValueError(f"unsupported reference point state version {version}")
        restored: Dict[str, ReferencePoint] = {}
        for _ in range(reader.uint32()):
            key = reader.string()
            restored[key] = reader.point()
        self._points = restored
        self.points_changed.emit()