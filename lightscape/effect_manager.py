"""Runs the active effect and drives its devices, zones and previews."""

from __future__ import annotations

import threading
import time
from typing import Callable, Dict, Iterable, List, Optional

from lightscape.base_effect import BaseEffect
from lightscape.effect_registry import EffectRegistry, default_registry
from lightscape.events import Signal
from lightscape.spatial_grid import SpatialGrid
from lightscape.types import DeviceInfo, DeviceType
from lightscape.zones import ControllerZone, DeviceController, SpatialControllerZone

NORMAL_INTERVAL_MS = 33
REDUCED_INTERVAL_MS = 100

Clock = Callable[[], float]


class EffectManager:
    """Owns the running effect and advances it frame by frame."""

    def __init__(
        self,
        registry: Optional[EffectRegistry] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.registry = registry if registry is not None else default_registry()
        self._clock: Clock = clock if clock is not None else time.monotonic
        self.device_manager: Optional[DeviceController] = None
        self.grid: Optional[SpatialGrid] = None

        self._active_effect: Optional[BaseEffect] = None
        self._current_effect_id = ""
        self._running = False
        self._active_devices: List[DeviceInfo] = []
        self._active_zones: List[ControllerZone] = []
        self._spatial_zones: List[SpatialControllerZone] = []
        self._previews: Dict[BaseEffect, ControllerZone] = {}
        self.preview_enabled = True
        self.update_interval = NORMAL_INTERVAL_MS
        self._last_frame = self._clock()
        self._lock = threading.RLock()

        self.effect_started = Signal()
        self.effect_stopped = Signal()
        self.preview_updated = Signal()

    def initialize(
        self, device_manager: Optional[DeviceController], grid: Optional[SpatialGrid]
    ) -> None:
        self.device_manager = device_manager
        self.grid = grid

    # Effect control

    @property
    def current_effect(self) -> Optional[BaseEffect]:
        return self._active_effect

    @property
    def current_effect_id(self) -> str:
        return self._current_effect_id

    def start_effect(self, effect_id: str) -> BaseEffect:
        """Stop any running effect and start ``effect_id``; KeyError if unknown."""
        with self._lock:
            self.stop_effect()
            effect = self.registry.create(effect_id)
            self._active_effect = effect
            self._current_effect_id = effect_id
            effect.initialize(self.device_manager, self.grid)
            effect.start()
            self._running = True
            self._last_frame = self._clock()
        self.effect_started.emit(effect_id)
        return effect

    def stop_effect(self) -> None:
        with self._lock:
            effect = self._active_effect
            if effect is None:
                return
            effect.stop()
            self._active_effect = None
            self._current_effect_id = ""
            self._running = False
        self.effect_stopped.emit()

    def is_effect_running(self) -> bool:
        return self._active_effect is not None and self._running

    # Devices and zones

    @property
    def active_devices(self) -> List[DeviceInfo]:
        return list(self._active_devices)

    @property
    def active_zones(self) -> List[ControllerZone]:
        return list(self._active_zones)

    @property
    def spatial_zones(self) -> List[SpatialControllerZone]:
        return list(self._spatial_zones)

    def set_active_devices(self, devices: Iterable[DeviceInfo]) -> None:
        with self._lock:
            self._active_devices = list(devices)
            self.update_zones_from_devices()

    def set_active_zones(self, zones: Iterable[ControllerZone]) -> None:
        with self._lock:
            self._active_zones = list(zones)

    def set_spatial_zones(self, zones: Iterable[SpatialControllerZone]) -> None:
        with self._lock:
            self._spatial_zones = list(zones)

    def update_zones_from_devices(self) -> None:
        """Rebuild spatial zones from the RGB device zones among the active devices."""
        with self._lock:
            self._spatial_zones = [
                SpatialControllerZone.from_device_info(device, self.device_manager)
                for device in self._active_devices
                if device.type == DeviceType.RGB and device.zone_index >= 0
            ]
            self._active_zones = list(self._spatial_zones)

    # Preview

    def set_preview_enabled(self, enabled: bool) -> None:
        self.preview_enabled = enabled

    def set_reduced_fps(self, reduced: bool) -> None:
        self.update_interval = REDUCED_INTERVAL_MS if reduced else NORMAL_INTERVAL_MS

    def add_preview(self, effect: Optional[BaseEffect], zone: Optional[ControllerZone]) -> None:
        if effect is not None and zone is not None:
            with self._lock:
                self._previews[effect] = zone

    def remove_preview(self, effect: BaseEffect) -> None:
        with self._lock:
            self._previews.pop(effect, None)

    @property
    def previews(self) -> Dict[BaseEffect, ControllerZone]:
        return dict(self._previews)

    # Frame processing

    def update_effect(self) -> None:
        """Advance the running effect by the time since the last frame and paint."""
        with self._lock:
            effect = self._active_effect
            if effect is None or not self._running:
                return
            now = self._clock()
            delta = now - self._last_frame
            self._last_frame = now

            effect.update(delta)
            if self._active_devices:
                effect.apply_to_devices(self._active_devices)
            if self._active_zones:
                effect.step_effect(self._active_zones)

            if not self.preview_enabled:
                return
            for preview_effect, zone in list(self._previews.items()):
                if preview_effect is effect:
                    continue
                preview_effect.update(delta)
                preview_effect.step_effect([zone])
        self.preview_updated.emit()

    def update_device_positions(self) -> None:
        """Move each spatial zone to where the grid currently places it."""
        grid = self.grid
        if grid is None:
            return
        with self._lock:
            for zone in self._spatial_zones:
                if zone.device_index < 0 or zone.zone_index < 0:
                    continue
                info = DeviceInfo(index=zone.device_index, zone_index=zone.zone_index)
                position = grid.device_position(info)
                if position is not None:
                    zone.position = position

    def run(self, stop_event: threading.Event) -> None:
        """Process frames at the update interval until ``stop_event`` is set."""
        while not stop_event.is_set():
            self.update_effect()
            stop_event.wait(self.update_interval / 1000.0)