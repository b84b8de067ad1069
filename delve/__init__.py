"""Dungeon encounter resolution and progression engine."""

from .characters import (
    CLASS_PROFILES,
    STAT_ORDER,
    Character,
    ClassKey,
    ClassProfile,
    Stats,
)
from .content import ContentLibrary, Dungeon, Room, StatType, Tactic

__all__ = [
    "CLASS_PROFILES",
    "STAT_ORDER",
    "Character",
    "ClassKey",
    "ClassProfile",
    "ContentLibrary",
    "Dungeon",
    "Room",
    "StatType",
    "Stats",
    "Tactic",
]
