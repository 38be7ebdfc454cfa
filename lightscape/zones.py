"""Controller zones that effects paint, including grid-placed spatial zones."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Mapping, Optional, Protocol

from lightscape.types import (
    DeviceInfo,
    GridPosition,
    rgb_blue,
    rgb_green,
    rgb_red,
    to_rgb_color,
)


class DeviceController(Protocol):
    """What zones and effects need from the object that drives the hardware."""

    def zone_count(self, device_index: int) -> int: ...

    def set_led_color(self, device_index: int, led_index: int, color: int) -> bool: ...

    def set_zone_color(self, device_index: int, zone_index: int, color: int) -> bool: ...

    def set_device_color(self, device_index: int, color: int) -> bool: ...


class ZoneType(Enum):
    SINGLE = auto()
    LINEAR = auto()
    MATRIX = auto()
    CUSTOM = auto()


class ControllerZone(ABC):
    """A set of LEDs an effect can colour."""

    @abstractmethod
    def led_count(self) -> int: ...

    @abstractmethod
    def set_led(self, led_index: int, color: int, brightness: int = 100) -> None: ...

    @abstractmethod
    def set_all_leds(self, color: int, brightness: int = 100) -> None: ...

    @abstractmethod
    def is_matrix(self) -> bool: ...

    @abstractmethod
    def matrix_width(self) -> int: ...

    @abstractmethod
    def matrix_height(self) -> int: ...

    @abstractmethod
    def zone_type(self) -> ZoneType: ...


def _scale(color: int, brightness: int) -> int:
    factor = brightness / 100.0
    return to_rgb_color(
        int(rgb_red(color) * factor),
        int(rgb_green(color) * factor),
        int(rgb_blue(color) * factor),
    )


@dataclass(eq=False)
class SpatialControllerZone(ControllerZone):
    """A device zone placed at a position on the spatial grid."""

    device_index: int
    zone_index: int
    position: GridPosition = field(default_factory=GridPosition)
    device_manager: Optional[DeviceController] = None

    def distance_from(self, reference: GridPosition) -> float:
        return math.sqrt(
            (self.position.x - reference.x) ** 2
            + (self.position.y - reference.y) ** 2
            + (self.position.z - reference.z) ** 2
        )

    def angle_from(self, reference: GridPosition, axis: int) -> float:
        """Angle in radians in the XY (0), XZ (1) or YZ (2) plane; 0 otherwise."""
        dx = self.position.x - reference.x
        dy = self.position.y - reference.y
        dz = self.position.z - reference.z
        if axis == 0:
            return math.atan2(dy, dx)
        if axis == 1:
            return math.atan2(dz, dx)
        if axis == 2:
            return math.atan2(dz, dy)
        return 0.0

    def led_count(self) -> int:
        if self.device_manager is None:
            return 0
        return int(self.device_manager.zone_count(self.device_index))

    def set_led(self, led_index: int, color: int, brightness: int = 100) -> None:
        if self.device_manager is None:
            return
        self.device_manager.set_led_color(self.device_index, led_index, _scale(color, brightness))

    def set_all_leds(self, color: int, brightness: int = 100) -> None:
        if self.device_manager is None:
            return
        self.device_manager.set_zone_color(
            self.device_index, self.zone_index, _scale(color, brightness)
        )

    def is_matrix(self) -> bool:
        return False

    def matrix_width(self) -> int:
        return 0

    def matrix_height(self) -> int:
        return 0

    def zone_type(self) -> ZoneType:
        return ZoneType.SINGLE

    def to_json(self) -> dict:
        return {
            "device_index": self.device_index,
            "zone_index": self.zone_index,
            "position": {"x": self.position.x, "y": self.position.y, "z": self.position.z},
        }

    @classmethod
    def from_json(
        cls, data: Mapping[str, Any], device_manager: Optional[DeviceController] = None
    ) -> "SpatialControllerZone":
        """Build a zone from ``to_json`` output; raise ValueError if keys are missing."""
        missing = [key for key in ("device_index", "zone_index", "position") if key not in data]
        if missing:
            raise ValueError(f"zone data lacks {', '.join(missing)}")
        pos = data["position"] or {}
        position = GridPosition(
            int(float(pos.get("x", 0))),
            int(float(pos.get("y", 0))),
            int(float(pos.get("z", 0))),
        )
        return cls(int(data["device_index"]), int(data["zone_index"]), position, device_manager)

    @classmethod
    def from_device_info(
        cls, info: DeviceInfo, device_manager: Optional[DeviceController] = None
    ) -> "SpatialControllerZone":
        """Build a zone for a device zone; raise ValueError if no zone is given."""
        if info.zone_index < 0:
            raise ValueError("device info does not name a zone")
        return cls(info.index, info.zone_index, info.position, device_manager)