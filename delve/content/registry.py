"""Lookup table for loaded dungeons."""

from __future__ import annotations

from typing import Dict, Iterator, Optional, Sequence

from .models import Dungeon

__all__ = ["DungeonRegistry"]


def _lookup_name(value: str) -> str:
    return value.strip().lower()


class DungeonRegistry:
    """Dungeons in load order, addressable by key or display name."""

    def __init__(self) -> None:
        self._dungeons: Dict[str, Dungeon] = {}
        self._names: Dict[str, str] = {}

    def register(self, key: str, dungeon: Dungeon) -> None:
        slot = _lookup_name(key)
        if slot in self._dungeons:
            raise ValueError(f"Duplicate dungeon '{key}'")
        self._dungeons[slot] = dungeon
        self._names[slot] = slot
        # A display name never hides another dungeon's key.
        self._names.setdefault(_lookup_name(dungeon.name), slot)

    def get(self, name: str) -> Dungeon:
        if not name:
            raise KeyError("Dungeon name must be provided")
        slot = self._names.get(_lookup_name(name))
        if slot is None:
            raise KeyError(f"Unknown dungeon '{name}'")
        return self._dungeons[slot]

    def first(self) -> Optional[Dungeon]:
        return next(iter(self._dungeons.values()), None)

    def keys(self) -> Sequence[str]:
        return tuple(self._dungeons)

    def values(self) -> Sequence[Dungeon]:
        return tuple(self._dungeons.values())

    def __iter__(self) -> Iterator[Dungeon]:
        return iter(self._dungeons.values())

    def __len__(self) -> int:
        return len(self._dungeons)
