# lightscape

A library for laying out lighting devices on a three-dimensional grid and
driving lighting effects from each device's position. It has no dependencies
beyond the Python standard library and needs Python 3.10 or later.

## Modules

- `lightscape.types`: `GridPosition` (ordered by layer, row, column),
  `GridDimensions` (3 x 3 x 3 by default), `DeviceInfo`, `DeviceAssignment`,
  the `DeviceType` and `NonRGBDeviceType` enums, and helpers for colours packed
  as `0x00BBGGRR` integers: `to_rgb_color`, `rgb_red`, `rgb_green`, `rgb_blue`.
- `lightscape.events`: `Signal`, a synchronous list of callables with
  `connect`, `disconnect` and `emit`. The other classes expose their change
  notifications as `Signal` attributes.
- `lightscape.spatial_grid`: `SpatialGrid`, which holds position labels
  (`"P1"`, `"P2"`, ... by default), layer labels (`"Layer 1"`, ...), device
  assignments per cell, the selected cell, and an optional user (reference)
  position with a warning when one is required but missing. `cell_style`
  reports how a cell should be highlighted as a `CellStyle`, and
  `device_position` finds where a device, zone or LED is assigned.
- `lightscape.nonrgb_grid`: `GridDevice`, a sized device without LEDs
  (monitor, case, speaker, desk, ...), and `NonRGBGridManager`, which places
  such devices on a `SpatialGrid` without overlaps. Placement failures raise
  `GridPlacementError`.
- `lightscape.reference_points`: `ReferencePoint` and `ReferencePointSet`, a
  set of named points keyed by device id that can be enabled, moved, and saved
  to or restored from bytes with `save_state` / `restore_state`
  (`restore_state` raises `ValueError` on bad data).
- `lightscape.effect_info`: `EffectCategory`, `EffectInfo` and `EffectList`.
- `lightscape.effect_registry`: `EffectRegistry`, which maps effect ids to
  factories grouped by category (`"Uncategorized"` when none is given) and keeps
  an `EffectList` in step; `default_registry()` returns one shared registry.
  `create` raises `KeyError` for an unknown id.
- `lightscape.zones`: the `DeviceController` protocol, `ZoneType`, the abstract
  `ControllerZone`, and `SpatialControllerZone`, a device zone with a grid
  position that forwards brightness-scaled colours to a `DeviceController`
  and converts to and from a JSON-compatible dict.
- `lightscape.base_effect`: `BaseEffect`, the abstract base for effects, with
  speed, brightness, colours, reference point and FPS settings,
  `save_settings` / `load_settings`, and the helpers `calculate_distance` and
  `apply_brightness`.
- `lightscape.sample_effect`: `TestEffect`, an example effect whose red, green
  and blue follow the x, y and z axes over time, and `register_test_effect`,
  which registers it under the category `"Test"`.
- `lightscape.effect_manager`: `EffectManager`, which starts an effect by id,
  paints active devices, zones and previews on each `update_effect()` call,
  and can loop with `run(stop_event)` at 33 ms per frame, or 100 ms after
  `set_reduced_fps(True)`.

## Installing

    pip install .

To run the tests:

    pip install ".[test]"
    pytest

## Example

    from lightscape.types import GridPosition, GridDimensions, DeviceAssignment
    from lightscape.spatial_grid import SpatialGrid

    grid = SpatialGrid()
    grid.set_dimensions(GridDimensions(4, 4, 2))
    grid.add_assignment(GridPosition(1, 2, 0), DeviceAssignment(0))
    print(grid.position_label(GridPosition(1, 2, 0)))   # "P10"
    grid.set_user_position(GridPosition(0, 0, 0))

Running an effect:

    from lightscape.effect_registry import EffectRegistry
    from lightscape.effect_manager import EffectManager
    from lightscape.sample_effect import register_test_effect

    registry = EffectRegistry()
    register_test_effect(registry)

    manager = EffectManager(registry)
    manager.initialize(controller, grid)   # controller implements DeviceController
    manager.start_effect("test_effect")
    manager.update_effect()

## What it does not do

- It does not talk to lighting hardware. Colours go to whatever object you pass
  as the device controller, which must provide `zone_count`, `set_led_color`,
  `set_zone_color` and `set_device_color`.
- It has no user interface and no command-line program.
- It does not store the grid layout or effect settings on disk; `save_settings`
  returns a dict and `ReferencePointSet.save_state` returns bytes, and keeping
  them is up to the caller.