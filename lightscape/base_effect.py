"""The base class every lighting effect derives from."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from lightscape.effect_info import EffectInfo
from lightscape.events import Signal
from lightscape.spatial_grid import SpatialGrid
from lightscape.types import (
    DeviceInfo,
    DeviceType,
    GridPosition,
    rgb_blue,
    rgb_green,
    rgb_red,
    to_rgb_color,
)
from lightscape.zones import ControllerZone, DeviceController, SpatialControllerZone

DEFAULT_SPEED = 50
DEFAULT_BRIGHTNESS = 100
DEFAULT_FPS = 60
DEFAULT_COLOR = to_rgb_color(255, 0, 0)


def calculate_distance(a: GridPosition, b: GridPosition) -> float:
    """Euclidean distance between two grid positions."""
    return math.sqrt((a.x - b.x) ** 2 + (a.y - b.y) ** 2 + (a.z - b.z) ** 2)


def apply_brightness(color: int, factor: float) -> int:
    """Scale each colour component by ``factor``, clamped to [0, 1]."""
    clamped = max(0.0, min(1.0, factor))
    return to_rgb_color(
        int(rgb_red(color) * clamped),
        int(rgb_green(color) * clamped),
        int(rgb_blue(color) * clamped),
    )


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value)
    return 0


class BaseEffect(ABC):
    """An effect that computes a colour for every grid position over time."""

    def __init__(self) -> None:
        self.device_manager: Optional[DeviceController] = None
        self.grid: Optional[SpatialGrid] = None
        self.enabled = False
        self.time = 0.0
        self.speed = DEFAULT_SPEED
        self.brightness = DEFAULT_BRIGHTNESS
        self.reference_point = GridPosition(0, 0, 0)
        self.colors: List[int] = [DEFAULT_COLOR]
        self.random_colors = False
        self.fps = DEFAULT_FPS

        self.effect_updated = Signal()
        self.settings_changed = Signal()

    @classmethod
    def static_info(cls) -> EffectInfo:
        """Static description of the effect; subclasses override."""
        return EffectInfo()

    def initialize(
        self, device_manager: Optional[DeviceController], grid: Optional[SpatialGrid]
    ) -> None:
        """Attach to devices and grid and reset the effect clock."""
        self.device_manager = device_manager
        self.grid = grid
        self.time = 0.0
        if (
            grid is not None
            and grid.has_user_position
            and self.static_info().requires_reference_point
        ):
            user_position = grid.user_position
            if user_position is not None:
                self.reference_point = user_position

    def _speed_factor(self) -> float:
        return self.speed / 50.0

    def _brightness_factor(self) -> float:
        return self.brightness / 100.0

    def update(self, delta_time: float) -> None:
        """Advance the effect clock by ``delta_time`` seconds, scaled by speed."""
        if self.enabled:
            self.time += delta_time * self._speed_factor()

    def start(self) -> None:
        self.enabled = True

    def stop(self) -> None:
        self.enabled = False

    @abstractmethod
    def color_for_position(self, pos: GridPosition, time: float) -> int:
        """The colour of ``pos`` at ``time``."""

    def apply_to_devices(self, devices: Iterable[DeviceInfo]) -> None:
        """Colour each RGB device, zone or LED according to its grid position."""
        manager = self.device_manager
        if manager is None or not self.enabled:
            return
        for device in devices:
            color = apply_brightness(
                self.color_for_position(device.position, self.time),
                self._brightness_factor(),
            )
            if device.type != DeviceType.RGB:
                continue
            if device.led_index >= 0:
                manager.set_led_color(device.index, device.led_index, color)
            elif device.zone_index >= 0:
                manager.set_zone_color(device.index, device.zone_index, color)
            else:
                manager.set_device_color(device.index, color)

    def step_effect(self, zones: Sequence[ControllerZone]) -> None:
        """Advance one frame and paint every zone."""
        if not self.enabled:
            return
        self.time += 1.0 / self.fps * self._speed_factor()
        spatial = [zone for zone in zones if isinstance(zone, SpatialControllerZone)]
        others = [zone for zone in zones if not isinstance(zone, SpatialControllerZone)]
        self._paint_spatial_zones(spatial, self.time)
        self._paint_other_zones(others, self.time)

    def on_zones_changed(self, zones: Sequence[ControllerZone]) -> None:
        """Called when the set of zones changes; does nothing by default."""

    def _paint_spatial_zones(
        self, zones: Sequence[SpatialControllerZone], time: float
    ) -> None:
        for zone in zones:
            color = apply_brightness(
                self.color_for_position(zone.position, time), self._brightness_factor()
            )
            zone.set_all_leds(color)

    def _paint_other_zones(self, zones: Sequence[ControllerZone], time: float) -> None:
        # Zones without a grid position are laid out along the X axis by index.
        for index, zone in enumerate(zones):
            color = apply_brightness(
                self.color_for_position(GridPosition(index, 0, 0), time),
                self._brightness_factor(),
            )
            for led in range(zone.led_count()):
                zone.set_led(led, color)

    def load_settings(self, data: Mapping[str, Any]) -> None:
        """Apply settings produced by ``save_settings``; absent keys are kept."""
        if "speed" in data:
            self.speed = _as_int(data["speed"])
        if "brightness" in data:
            self.brightness = _as_int(data["brightness"])
        if "randomColors" in data:
            self.random_colors = data["randomColors"] is True
        if "referencePoint" in data:
            ref = data["referencePoint"]
            if isinstance(ref, Mapping) and all(key in ref for key in ("x", "y", "z")):
                self.reference_point = GridPosition(
                    _as_int(ref["x"]), _as_int(ref["y"]), _as_int(ref["z"])
                )
        if "colors" in data:
            entries = data["colors"] if isinstance(data["colors"], list) else []
            self.colors = [
                to_rgb_color(_as_int(entry["r"]), _as_int(entry["g"]), _as_int(entry["b"]))
                for entry in entries
                if isinstance(entry, Mapping) and all(key in entry for key in ("r", "g", "b"))
            ]
        self.settings_changed.emit()

    def save_settings(self) -> dict:
        """The effect's settings as a JSON-compatible dict."""
        ref = self.reference_point
        return {
            "speed": self.speed,
            "brightness": self.brightness,
            "randomColors": self.random_colors,
            "referencePoint": {"x": ref.x, "y": ref.y, "z": ref.z},
            "colors": [
                {"r": rgb_red(color), "g": rgb_green(color), "b": rgb_blue(color)}
                for color in self.colors
            ],
        }