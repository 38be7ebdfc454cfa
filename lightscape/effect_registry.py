"""Registry of effect factories, grouped by category."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional

from lightscape.effect_info import EffectInfo, EffectList

UNCATEGORIZED = "Uncategorized"

EffectFactory = Callable[[], Any]


@dataclass(frozen=True)
class _Entry:
    info: EffectInfo
    factory: EffectFactory
    category: str


class EffectRegistry:
    """Maps effect ids to factories and keeps an EffectList in step."""

    def __init__(self, effect_list: Optional[EffectList] = None) -> None:
        self.effect_list = effect_list if effect_list is not None else EffectList()
        self._entries: Dict[str, _Entry] = {}
        self._categorized: Dict[str, List[EffectInfo]] = {}

    def register(self, info: EffectInfo, factory: EffectFactory, category: str = "") -> bool:
        """Register a factory; an empty or already known id is ignored."""
        if not info.id or info.id in self._entries:
            return False
        self._entries[info.id] = _Entry(info, factory, category)
        self.effect_list.add_effect(info)
        self._categorized.setdefault(category or UNCATEGORIZED, []).append(info)
        return True

    def unregister(self, effect_id: str) -> bool:
        entry = self._entries.pop(effect_id, None)
        if entry is None:
            return False
        category = entry.category or UNCATEGORIZED
        infos = self._categorized.get(category)
        if infos is not None:
            for position, info in enumerate(infos):
                if info.id == effect_id:
                    del infos[position]
                    break
            if not infos:
                del self._categorized[category]
        self.effect_list.remove_effect(effect_id)
        return True

    def create(self, effect_id: str) -> Any:
        """Build a new effect instance; raise KeyError for an unknown id."""
        try:
            entry = self._entries[effect_id]
        except KeyError:
            raise KeyError(f"unknown effect {effect_id!r}") from None
        return entry.factory()

    def has_effect(self, effect_id: str) -> bool:
        return effect_id in self._entries

    def categories(self) -> List[str]:
        return sorted(self._categorized)

    def effects_in_category(self, category: str) -> List[EffectInfo]:
        return list(self._categorized.get(category, []))

    def categorized_effects(self) -> Dict[str, List[EffectInfo]]:
        return {key: list(self._categorized[key]) for key in sorted(self._categorized)}


@lru_cache(maxsize=None)
def default_registry() -> EffectRegistry:
    """The process-wide registry shared by the application."""
    return EffectRegistry()