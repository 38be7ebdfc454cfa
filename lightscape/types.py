"""Core value types shared across the package."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from functools import total_ordering


@total_ordering
@dataclass(frozen=True)
class GridPosition:
    """A cell in the three-dimensional grid; ordered by layer, row, column."""

    x: int = 0
    y: int = 0
    z: int = 0

    def sort_key(self) -> tuple[int, int, int]:
        return (self.z, self.y, self.x)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, GridPosition):
            return NotImplemented
        return self.sort_key() < other.sort_key()


class DeviceType(Enum):
    RGB = auto()
    NON_RGB = auto()


class NonRGBDeviceType(Enum):
    MONITOR = auto()
    PC_CASE = auto()
    SPEAKER = auto()
    DESK = auto()
    CUSTOM = auto()


@dataclass
class DeviceInfo:
    """A device (or one of its zones or LEDs) placed at a grid position."""

    index: int
    type: DeviceType = DeviceType.RGB
    zone_index: int = -1
    led_index: int = -1
    position: GridPosition = field(default_factory=GridPosition)


@dataclass(frozen=True)
class GridDimensions:
    width: int = 3
    height: int = 3
    depth: int = 3


def to_rgb_color(r: int, g: int, b: int) -> int:
    """Pack 8-bit components into a 0x00BBGGRR colour value."""
    return ((b & 0xFF) << 16) | ((g & 0xFF) << 8) | (r & 0xFF)


def rgb_red(color: int) -> int:
    return color & 0xFF


def rgb_green(color: int) -> int:
    return (color >> 8) & 0xFF


def rgb_blue(color: int) -> int:
    return (color >> 16) & 0xFF


@dataclass(frozen=True)
class DeviceAssignment:
    """A device, zone or LED assigned to a grid cell, with its colour."""

    device_index: int = 0
    device_type: DeviceType = DeviceType.RGB
    zone_index: int = -1
    led_index: int = -1
    color: int = 0