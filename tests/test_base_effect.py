import pytest

from lightscape.base_effect import BaseEffect, apply_brightness, calculate_distance
from lightscape.effect_info import EffectInfo
from lightscape.spatial_grid import SpatialGrid
from lightscape.types import (
    DeviceInfo,
    DeviceType,
    GridPosition,
    rgb_red,
    to_rgb_color,
)
from lightscape.zones import ControllerZone, SpatialControllerZone, ZoneType

COLOR = to_rgb_color(200, 100, 50)


class RecordingManager:
    def __init__(self, zones=4):
        self.calls = []
        self._zones = zones

    def zone_count(self, device_index):
        return self._zones

    def set_led_color(self, device_index, led_index, color):
        self.calls.append(("led", device_index, led_index, color))
        return True

    def set_zone_color(self, device_index, zone_index, color):
        self.calls.append(("zone", device_index, zone_index, color))
        return True

    def set_device_color(self, device_index, color):
        self.calls.append(("device", device_index, color))
        return True


class FakeZone(ControllerZone):
    def __init__(self, leds):
        self.leds = leds
        self.painted = []

    def led_count(self):
        return self.leds

    def set_led(self, led_index, color, brightness=100):
        self.painted.append((led_index, color))

    def set_all_leds(self, color, brightness=100):
        self.painted.append(("all", color))

    def is_matrix(self):
        return False

    def matrix_width(self):
        return 0

    def matrix_height(self):
        return 0

    def zone_type(self):
        return ZoneType.LINEAR


class ConstantEffect(BaseEffect):
    def color_for_position(self, pos, time):
        return COLOR


class PositionEffect(BaseEffect):
    def color_for_position(self, pos, time):
        return to_rgb_color(pos.x, pos.y, pos.z)


class TimeEffect(BaseEffect):
    def color_for_position(self, pos, time):
        return to_rgb_color(round(time * 600), 0, 0)


class ReferenceEffect(ConstantEffect):
    @classmethod
    def static_info(cls):
        return EffectInfo(id="ref", requires_reference_point=True)


def test_base_effect_is_abstract():
    with pytest.raises(TypeError):
        BaseEffect()


def test_defaults_in_saved_settings():
    saved = BaseEffect.save_settings(ConstantEffect())
    assert saved == {
        "speed": 50,
        "brightness": 100,
        "randomColors": False,
        "referencePoint": {"x": 0, "y": 0, "z": 0},
        "colors": [{"r": 255, "g": 0, "b": 0}],
    }


def test_settings_round_trip():
    source = ConstantEffect()
    source.speed = 80
    source.brightness = 40
    source.random_colors = True
    source.reference_point = GridPosition(1, 2, 0)
    source.colors = [to_rgb_color(1, 2, 3), to_rgb_color(10, 20, 30)]
    target = ConstantEffect()
    target.load_settings(source.save_settings())
    assert target.save_settings() == source.save_settings()
    assert target.reference_point == GridPosition(1, 2, 0)


def test_load_settings_keeps_absent_keys_and_emits():
    effect = ConstantEffect()
    seen = []
    effect.settings_changed.connect(lambda: seen.append(True))
    effect.load_settings({"brightness": 30, "referencePoint": {"x": 5}})
    assert effect.brightness == 30
    assert effect.speed == 50
    assert effect.reference_point == GridPosition(0, 0, 0)
    assert seen == [True]


def test_load_settings_skips_incomplete_colors():
    effect = ConstantEffect()
    effect.load_settings({"colors": [{"r": 1, "g": 2}, {"r": 7, "g": 8, "b": 9}]})
    assert effect.colors == [to_rgb_color(7, 8, 9)]


def test_update_only_when_enabled_and_scaled_by_speed():
    slow, fast = ConstantEffect(), ConstantEffect()
    fast.speed = 100
    BaseEffect.update(slow, 0.5)
    assert slow.time == 0.0
    BaseEffect.start(slow)
    BaseEffect.start(fast)
    BaseEffect.update(slow, 0.5)
    BaseEffect.update(fast, 0.5)
    assert slow.time == 0.5
    assert fast.time == pytest.approx(slow.time * 2)


def test_start_stop():
    effect = ConstantEffect()
    BaseEffect.start(effect)
    assert effect.enabled is True
    BaseEffect.stop(effect)
    assert effect.enabled is False


def test_apply_to_devices_routes_by_specificity():
    manager = RecordingManager()
    effect = ConstantEffect()
    effect.initialize(manager, None)
    effect.start()
    effect.apply_to_devices(
        [
            DeviceInfo(index=1, led_index=3, zone_index=2),
            DeviceInfo(index=2, zone_index=4),
            DeviceInfo(index=3),
            DeviceInfo(index=4, type=DeviceType.NON_RGB),
        ]
    )
    assert manager.calls == [
        ("led", 1, 3, COLOR),
        ("zone", 2, 4, COLOR),
        ("device", 3, COLOR),
    ]


def test_apply_to_devices_does_nothing_when_disabled():
    manager = RecordingManager()
    effect = ConstantEffect()
    effect.initialize(manager, None)
    effect.apply_to_devices([DeviceInfo(index=1)])
    assert manager.calls == []


def test_apply_to_devices_applies_brightness():
    manager = RecordingManager()
    effect = ConstantEffect()
    effect.initialize(manager, None)
    effect.brightness = 50
    effect.start()
    effect.apply_to_devices([DeviceInfo(index=0)])
    assert manager.calls == [("device", 0, apply_brightness(COLOR, 0.5))]


def test_step_effect_paints_spatial_and_plain_zones():
    manager = RecordingManager()
    effect = PositionEffect()
    effect.start()
    spatial = SpatialControllerZone(7, 1, GridPosition(2, 1, 0), manager)
    plain_a, plain_b = FakeZone(2), FakeZone(1)
    effect.step_effect([plain_a, spatial, plain_b])
    assert effect.time > 0.0
    assert manager.calls == [("zone", 7, 1, to_rgb_color(2, 1, 0))]
    assert [rgb_red(color) for _, color in plain_a.painted] == [0, 0]
    assert [led for led, _ in plain_a.painted] == [0, 1]
    assert [rgb_red(color) for _, color in plain_b.painted] == [1]


def test_step_effect_disabled_leaves_zones_alone():
    zone = FakeZone(3)
    effect = ConstantEffect()
    BaseEffect.step_effect(effect, [zone])
    assert zone.painted == []
    assert effect.time == 0.0


def test_step_time_grows_with_lower_fps():
    default_fps, low_fps = TimeEffect(), TimeEffect()
    low_fps.fps = 30
    default_zone, low_zone = FakeZone(1), FakeZone(1)
    for effect, zone in ((default_fps, default_zone), (low_fps, low_zone)):
        effect.start()
        effect.step_effect([zone])
    assert default_fps.time == pytest.approx(1 / 60)
    assert low_fps.time == pytest.approx(1 / 30)
    assert default_zone.painted == [(0, to_rgb_color(10, 0, 0))]
    assert low_zone.painted == [(0, to_rgb_color(20, 0, 0))]


def test_initialize_takes_user_position_when_required():
    grid = SpatialGrid()
    grid.set_user_position(GridPosition(1, 1, 2))
    needs_ref = ReferenceEffect()
    needs_ref.initialize(None, grid)
    plain = ConstantEffect()
    plain.initialize(None, grid)
    assert needs_ref.reference_point == GridPosition(1, 1, 2)
    assert plain.reference_point == GridPosition(0, 0, 0)


def test_initialize_resets_time():
    effect = ConstantEffect()
    BaseEffect.start(effect)
    BaseEffect.update(effect, 2.0)
    assert effect.time == pytest.approx(2.0)
    BaseEffect.initialize(effect, None, None)
    assert effect.time == 0.0


def test_calculate_distance():
    a, b = GridPosition(0, 0, 0), GridPosition(3, 4, 0)
    assert calculate_distance(a, b) == pytest.approx(5.0)
    assert calculate_distance(a, a) == 0.0
    assert calculate_distance(a, b) == calculate_distance(b, a)


def test_apply_brightness_clamps():
    assert apply_brightness(COLOR, 1.0) == COLOR
    assert apply_brightness(COLOR, 2.0) == COLOR
    assert apply_brightness(COLOR, 0.0) == 0
    assert apply_brightness(COLOR, -1.0) == 0
    assert rgb_red(apply_brightness(COLOR, 0.5)) < rgb_red(COLOR)