"""Content schemas and registries for dungeon definitions."""

from .loader import ContentLibrary, ContentLoadError, load_default_tactics
from .models import (
    DIFFICULTY_PROFILES,
    DifficultyProfile,
    DifficultyTier,
    Dungeon,
    EncounterType,
    Room,
    SchemaError,
    StatRequirement,
    StatType,
    Tactic,
)
from .narratives import NarrativeLibrary, default_narratives, load_narratives
from .registry import DungeonRegistry

__all__ = [
    "ContentLibrary",
    "ContentLoadError",
    "DIFFICULTY_PROFILES",
    "DifficultyProfile",
    "DifficultyTier",
    "Dungeon",
    "DungeonRegistry",
    "EncounterType",
    "NarrativeLibrary",
    "Room",
    "SchemaError",
    "StatRequirement",
    "StatType",
    "Tactic",
    "default_narratives",
    "load_default_tactics",
    "load_narratives",
]
