"""Placement of non-RGB devices (monitors, cases, desks...) on the spatial grid."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from lightscape.events import Signal
from lightscape.spatial_grid import SpatialGrid
from lightscape.types import GridPosition, NonRGBDeviceType


class GridPlacementError(Exception):
    """Raised when a device cannot be placed on the grid."""


@dataclass
class GridDevice:
    """A physical device without LEDs that occupies a box of grid cells."""

    name: str = ""
    type: NonRGBDeviceType = NonRGBDeviceType.CUSTOM
    position: GridPosition = field(default_factory=GridPosition)
    width: int = 1
    height: int = 1
    depth: int = 1
    reference_points: Dict[str, GridPosition] = field(default_factory=dict)
    properties: Dict[str, str] = field(default_factory=dict)

    def footprint(self, origin: Optional[GridPosition] = None) -> Iterator[GridPosition]:
        """Yield every cell the device covers when its corner is at ``origin``."""
        base = self.position if origin is None else origin
        for z in range(base.z, base.z + self.depth):
            for y in range(base.y, base.y + self.height):
                for x in range(base.x, base.x + self.width):
                    yield GridPosition(x, y, z)


class NonRGBGridManager:
    """Tracks which grid cells each non-RGB device occupies."""

    def __init__(self, grid: Optional[SpatialGrid]) -> None:
        self._grid = grid
        self._positions: Dict[str, List[GridPosition]] = {}
        self._owners: Dict[GridPosition, str] = {}
        self._devices: Dict[str, GridDevice] = {}

        self.device_assigned = Signal()
        self.device_unassigned = Signal()
        self.device_updated = Signal()

    # Placement

    def assign_device(self, device: Optional[GridDevice]) -> None:
        """Place ``device`` on the grid, replacing its previous placement."""
        if device is None:
            raise GridPlacementError("Cannot assign null device to grid")
        name = device.name
        if not name:
            raise GridPlacementError("Device must have a name to be assigned to grid")

        positions = self._calculate_positions(device)
        if not positions:
            raise GridPlacementError("Device positions could not be calculated")
        if self._conflicts(positions, name):
            raise GridPlacementError(
                "One or more positions are already occupied by another device"
            )

        self._clear(name)
        self._place(device, positions)
        self.device_assigned.emit(device)

    def remove_device(self, name: str) -> bool:
        """Take a device off the grid; return False if it was not placed."""
        if name not in self._positions:
            return False
        self._clear(name)
        self.device_unassigned.emit(name)
        return True

    def update_device(self, device: Optional[GridDevice]) -> None:
        """Re-place a device after its position or size changed."""
        if device is None:
            raise GridPlacementError("Cannot update null device")
        name = device.name
        if name not in self._positions:
            self.assign_device(device)
            return

        positions = self._calculate_positions(device)
        if self._conflicts(positions, name):
            raise GridPlacementError("Cannot update device position: space is occupied")

        self._clear(name)
        self._place(device, positions)
        self.device_updated.emit(device)

    # Queries

    def device_positions(self, name: str) -> List[GridPosition]:
        return list(self._positions.get(name, []))

    def is_position_occupied(self, pos: GridPosition) -> bool:
        return pos in self._owners

    def device_at(self, pos: GridPosition) -> Optional[GridDevice]:
        name = self._owners.get(pos)
        if not name:
            return None
        return self._devices.get(name)

    def devices_in_grid(self) -> List[str]:
        return sorted(self._positions)

    # Validation

    def can_fit_device(self, device: Optional[GridDevice], pos: GridPosition) -> bool:
        """True if the whole device fits inside the grid at ``pos`` without overlap."""
        if device is None:
            return False
        for cell in device.footprint(pos):
            if not self._within_grid(cell):
                return False
            owner = self._owners.get(cell)
            if owner is not None and owner != device.name:
                return False
        return True

    def validate_device_position(self, device: Optional[GridDevice]) -> bool:
        if device is None:
            return False
        return self.can_fit_device(device, device.position)

    # Helpers

    def _calculate_positions(self, device: GridDevice) -> List[GridPosition]:
        return [cell for cell in device.footprint() if self._within_grid(cell)]

    def _within_grid(self, pos: GridPosition) -> bool:
        return self._grid is not None and self._grid.is_valid_position(pos)

    def _conflicts(self, positions: List[GridPosition], name: str) -> bool:
        return any(
            pos in self._owners and self._owners[pos] != name for pos in positions
        )

    def _place(self, device: GridDevice, positions: List[GridPosition]) -> None:
        self._positions[device.name] = positions
        self._devices[device.name] = device
        for pos in positions:
            self._owners[pos] = device.name

    def _clear(self, name: str) -> None:
        for pos in self._positions.pop(name, []):
            self._owners.pop(pos, None)
        self._devices.pop(name, None)