"""A simple effect whose colour follows position and time."""

from __future__ import annotations

from typing import Sequence

from lightscape.base_effect import BaseEffect
from lightscape.effect_info import EffectCategory, EffectInfo
from lightscape.effect_registry import EffectRegistry
from lightscape.types import GridPosition, to_rgb_color
from lightscape.zones import ControllerZone

TEST_EFFECT_CATEGORY = "Test"


class TestEffect(BaseEffect):
    """Cycles red, green and blue along the x, y and z axes."""

    __test__ = False

    @classmethod
    def static_info(cls) -> EffectInfo:
        return EffectInfo(
            name="Test Effect",
            id="test_effect",
            description="A simple test effect that changes color based on position",
            category=EffectCategory.BASIC,
            requires_reference_point=False,
            supports_preview=True,
        )

    def color_for_position(self, pos: GridPosition, time: float) -> int:
        r = (pos.x * 20 + int(time * 50)) % 255
        g = (pos.y * 20 + int(time * 30)) % 255
        b = (pos.z * 20 + int(time * 70)) % 255
        return to_rgb_color(r, g, b)

    def step_effect(self, zones: Sequence[ControllerZone]) -> None:
        super().step_effect(zones)


def register_test_effect(registry: EffectRegistry) -> bool:
    """Register TestEffect in ``registry`` under the "Test" category."""
    return registry.register(TestEffect.static_info(), TestEffect, TEST_EFFECT_CATEGORY)