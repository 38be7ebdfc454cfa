"""The spatial grid: labels, selection, device assignments and user position."""

from __future__ import annotations

from dataclasses import replace
from enum import Enum
from typing import Dict, Iterator, List, Optional

from lightscape.events import Signal
from lightscape.types import DeviceAssignment, DeviceInfo, GridDimensions, GridPosition

USER_POSITION_WARNING = "Please select a reference position for spatial effects"
CLEARED_USER_POSITION = GridPosition(-1, -1, -1)


class CellStyle(Enum):
    """How a grid cell is highlighted, in order of precedence."""

    SELECTED = "selected"
    USER_POSITION = "user_position"
    ASSIGNMENT = "assignment"
    DEFAULT = "default"


class SpatialGrid:
    """A width x height x depth grid of cells with labels and device assignments."""

    def __init__(self) -> None:
        self._dimensions = GridDimensions()
        self._selected: Optional[GridPosition] = None
        self._position_labels: Dict[GridPosition, str] = {}
        self._layer_labels: Dict[int, str] = {}
        self._assignments: Dict[GridPosition, List[DeviceAssignment]] = {}
        self._user_position: Optional[GridPosition] = None
        self._requires_user_position = False
        self._user_position_warning = ""

        self.position_selected = Signal()
        self.selection_changed = Signal()
        self.grid_updated = Signal()
        self.assignments_changed = Signal()
        self.user_position_changed = Signal()
        self.user_position_required = Signal()
        self.layer_label_changed = Signal()

    # Dimensions

    @property
    def dimensions(self) -> GridDimensions:
        return self._dimensions

    def set_dimensions(self, dims: GridDimensions) -> None:
        self._dimensions = dims
        self.grid_updated.emit()

    def is_valid_position(self, pos: GridPosition) -> bool:
        dims = self._dimensions
        return (
            0 <= pos.x < dims.width
            and 0 <= pos.y < dims.height
            and 0 <= pos.z < dims.depth
        )

    def _positions(self) -> Iterator[GridPosition]:
        dims = self._dimensions
        for z in range(dims.depth):
            for y in range(dims.height):
                for x in range(dims.width):
                    yield GridPosition(x, y, z)

    # Position labels

    def set_position_label(self, pos: GridPosition, label: str) -> None:
        if self.is_valid_position(pos):
            self._position_labels[pos] = label

    def set_default_labels(self) -> None:
        for pos in self._positions():
            self.set_position_label(pos, self.default_position_label(pos))

    def position_label(self, pos: GridPosition) -> str:
        if not self.is_valid_position(pos):
            return ""
        return self._position_labels.get(pos, self.default_position_label(pos))

    def default_position_label(self, pos: GridPosition) -> str:
        if not self.is_valid_position(pos):
            return ""
        return f"P{pos.y * self._dimensions.width + pos.x + 1}"

    # Layer labels

    def set_layer_label(self, layer: int, label: str) -> None:
        if not 0 <= layer < self._dimensions.depth:
            return
        self._layer_labels[layer] = label
        self.layer_label_changed.emit(layer, label)

    def layer_label(self, layer: int) -> str:
        if not 0 <= layer < self._dimensions.depth:
            return ""
        return self._layer_labels.get(layer, f"Layer {layer + 1}")

    # Selection

    @property
    def selected_position(self) -> Optional[GridPosition]:
        return self._selected

    def select(self, pos: GridPosition) -> None:
        """Select a cell; selecting the selected cell again clears the selection."""
        if not self.is_valid_position(pos):
            raise ValueError(f"position {pos} is outside the grid")
        if self._selected == pos:
            self.clear_selection()
            return
        self._selected = pos
        self.position_selected.emit(pos)
        self.selection_changed.emit(pos)

    def clear_selection(self) -> None:
        if self._selected is not None:
            self._selected = None
            self.selection_changed.emit(None)

    # Assignments

    def has_assignments(self, pos: GridPosition) -> bool:
        return self.is_valid_position(pos) and bool(self._assignments.get(pos))

    def assignments_at(self, pos: GridPosition) -> List[DeviceAssignment]:
        if not self.is_valid_position(pos):
            return []
        return list(self._assignments.get(pos, []))

    def add_assignment(self, pos: GridPosition, assignment: DeviceAssignment) -> None:
        if not self.is_valid_position(pos):
            return
        self._assignments.setdefault(pos, []).append(assignment)
        self.assignments_changed.emit(pos)

    def remove_assignment(self, pos: GridPosition, index: int) -> None:
        if not self.is_valid_position(pos) or pos not in self._assignments:
            return
        entries = self._assignments[pos]
        if 0 <= index < len(entries):
            del entries[index]
            if not entries:
                del self._assignments[pos]
            self.assignments_changed.emit(pos)

    def clear_assignments(self, pos: GridPosition) -> None:
        if not self.is_valid_position(pos):
            return
        if pos in self._assignments:
            del self._assignments[pos]
            self.assignments_changed.emit(pos)

    def clear_all_assignments(self) -> None:
        positions = sorted(self._assignments)
        self._assignments.clear()
        for pos in positions:
            self.assignments_changed.emit(pos)

    def update_assignment_color(self, pos: GridPosition, index: int, color: int) -> bool:
        if not self.is_valid_position(pos) or pos not in self._assignments:
            return False
        entries = self._assignments[pos]
        if not 0 <= index < len(entries):
            return False
        entries[index] = replace(entries[index], color=color)
        self.assignments_changed.emit(pos)
        return True

    # User position

    @property
    def user_position(self) -> Optional[GridPosition]:
        return self._user_position

    @property
    def has_user_position(self) -> bool:
        return self._user_position is not None

    @property
    def requires_user_position(self) -> bool:
        return self._requires_user_position

    @property
    def user_position_warning(self) -> str:
        return self._user_position_warning

    def set_user_position(self, pos: GridPosition) -> bool:
        if not self.is_valid_position(pos):
            return False
        self._user_position = pos
        self.update_user_position_warning()
        self.user_position_changed.emit(pos)
        return True

    def clear_user_position(self) -> None:
        if self._user_position is not None:
            self._user_position = None
            self.update_user_position_warning()
            self.user_position_changed.emit(CLEARED_USER_POSITION)

    def is_user_position(self, pos: GridPosition) -> bool:
        return self._user_position is not None and self._user_position == pos

    def set_require_user_position(self, required: bool) -> None:
        if self._requires_user_position != required:
            self._requires_user_position = required
            self.update_user_position_warning()

    def update_user_position_warning(self) -> None:
        old = self._user_position_warning
        if self._requires_user_position and self._user_position is None:
            self._user_position_warning = USER_POSITION_WARNING
        else:
            self._user_position_warning = ""
        if old != self._user_position_warning:
            self.user_position_required.emit(self._user_position_warning)

    # Presentation and lookup

    def cell_style(self, pos: GridPosition) -> CellStyle:
        if self._selected is not None and self._selected == pos:
            return CellStyle.SELECTED
        if self.is_user_position(pos):
            return CellStyle.USER_POSITION
        if self.has_assignments(pos):
            return CellStyle.ASSIGNMENT
        return CellStyle.DEFAULT

    def device_position(self, device: DeviceInfo) -> Optional[GridPosition]:
        """Return the first position (in grid order) holding a matching assignment."""
        for pos in sorted(self._assignments):
            for entry in self._assignments[pos]:
                if (
                    entry.device_index == device.index
                    and entry.device_type == device.type
                    and entry.zone_index == device.zone_index
                    and entry.led_index == device.led_index
                ):
                    return pos
        return None