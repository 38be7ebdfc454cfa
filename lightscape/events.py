"""A small synchronous signal/slot mechanism."""

from __future__ import annotations

from typing import Any, Callable, List

Slot = Callable[..., Any]


class Signal:
    """A list of callables that are invoked, in connection order, on emit."""

    def __init__(self) -> None:
        self._slots: List[Slot] = []

    def connect(self, slot: Slot) -> None:
        """Register ``slot`` to be called on every emit."""
        if not callable(slot):
            raise TypeError("slot must be callable")
        self._slots.append(slot)

    def disconnect(self, slot: Slot) -> None:
        """Remove one registration of ``slot``; raise ValueError if absent."""
        try:
            self._slots.remove(slot)
        except ValueError:
            raise ValueError("slot is not connected") from None

    def emit(self, *args: Any) -> None:
        """Call every connected slot with ``args``."""
        for slot in list(self._slots):
            slot(*args)

    def __len__(self) -> int:
        return len(self._slots)