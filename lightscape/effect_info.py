"""Effect descriptions and the list of effects that are available."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from lightscape.events import Signal


class EffectCategory(Enum):
    """Broad family an effect belongs to; the value is its display name."""

    SPATIAL = "Spatial"
    BASIC = "Basic"
    ADVANCED = "Advanced"
    CUSTOM = "Custom"


@dataclass(frozen=True)
class EffectInfo:
    """Static description of an effect."""

    name: str = ""
    id: str = ""
    description: str = ""
    category: EffectCategory = EffectCategory.BASIC
    requires_reference_point: bool = False
    supports_preview: bool = True


class EffectList:
    """Effect descriptions keyed by id, kept in id order."""

    def __init__(self) -> None:
        self._effects: Dict[str, EffectInfo] = {}
        self.effect_added = Signal()
        self.effect_removed = Signal()
        self.effects_cleared = Signal()

    def __len__(self) -> int:
        return len(self._effects)

    def __contains__(self, effect_id: object) -> bool:
        return effect_id in self._effects

    def add_effect(self, info: EffectInfo) -> bool:
        """Add ``info``; an empty or already known id is ignored."""
        if not info.id or info.id in self._effects:
            return False
        self._effects[info.id] = info
        self.effect_added.emit(info)
        return True

    def remove_effect(self, effect_id: str) -> bool:
        if effect_id not in self._effects:
            return False
        del self._effects[effect_id]
        self.effect_removed.emit(effect_id)
        return True

    def has_effect(self, effect_id: str) -> bool:
        return effect_id in self._effects

    def get(self, effect_id: str) -> Optional[EffectInfo]:
        return self._effects.get(effect_id)

    def effects(self) -> List[EffectInfo]:
        return [self._effects[key] for key in sorted(self._effects)]

    def effects_by_category(self, category: EffectCategory) -> List[EffectInfo]:
        return [info for info in self.effects() if info.category == category]

    def categories(self) -> List[str]:
        """Display names of the categories in use, sorted."""
        return sorted({info.category.value for info in self._effects.values()})