"""Schema models for dungeon content."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, MutableMapping, Sequence

__all__ = [
    "DIFFICULTY_PROFILES",
    "DifficultyProfile",
    "DifficultyTier",
    "Dungeon",
    "EncounterType",
    "Room",
    "SchemaError",
    "StatRequirement",
    "StatType",
    "Tactic",
    "slugify",
]


class SchemaError(ValueError):
    """Raised when content data fails validation."""


class StatType(str, Enum):
    """The five character attributes."""

    STRENGTH = "strength"
    WISDOM = "wisdom"
    CHARISMA = "charisma"
    DEXTERITY = "dexterity"
    LUCK = "luck"

    @property
    def label(self) -> str:
        return self.value.title()


class EncounterType(str, Enum):
    """Kinds of room encounter."""

    COMBAT = "combat"
    PUZZLE = "puzzle"
    TRAP = "trap"
    TREASURE = "treasure"
    BOSS = "boss"


class DifficultyTier(str, Enum):
    NORMAL = "normal"
    HARD = "hard"
    HEROIC = "heroic"
    MYTHIC = "mythic"


@dataclass(frozen=True)
class DifficultyProfile:
    """Reward and damage scaling applied for a difficulty tier."""

    reward_multiplier: float
    damage_multiplier: float


DIFFICULTY_PROFILES: Dict[DifficultyTier, DifficultyProfile] = {
    DifficultyTier.NORMAL: DifficultyProfile(reward_multiplier=1.0, damage_multiplier=1.0),
    DifficultyTier.HARD: DifficultyProfile(reward_multiplier=1.5, damage_multiplier=1.5),
    DifficultyTier.HEROIC: DifficultyProfile(reward_multiplier=2.5, damage_multiplier=2.5),
    DifficultyTier.MYTHIC: DifficultyProfile(reward_multiplier=4.0, damage_multiplier=4.0),
}


def slugify(value: str) -> str:
    return "_".join(value.strip().lower().replace("-", " ").split())


def _coerce_mapping(name: str, value: object) -> MutableMapping[str, object]:
    if isinstance(value, MutableMapping):
        return value
    if isinstance(value, Mapping):
        return dict(value)
    raise SchemaError(f"{name} must be a mapping")


def _coerce_sequence(name: str, value: object) -> Sequence[object]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return value
    raise SchemaError(f"{name} must be a sequence")


def _coerce_enum(enum_type, name: str, value: object):
    try:
        return enum_type(str(value).strip().lower())
    except ValueError as exc:
        raise SchemaError(f"Unknown {name} '{value}'") from exc


@dataclass(frozen=True)
class Tactic:
    """An approach the party can take to a room."""

    key: str
    name: str
    primary_stat: StatType
    description: str = ""
    icon: str = ""
    power_modifier: float = 1.0
    risk_modifier: float = 1.0

    @property
    def risk_label(self) -> str:
        if self.risk_modifier < 1.1:
            return "Safe"
        if self.risk_modifier < 1.4:
            return "Balanced"
        return "Risky"

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "Tactic":
        mapping = _coerce_mapping("tactic", data)
        name = str(mapping.get("name") or "").strip()
        if not name:
            raise SchemaError("Tactic entries must include a name")
        if "primary_stat" not in mapping:
            raise SchemaError(f"Tactic '{name}' is missing primary_stat")
        primary_stat = _coerce_enum(StatType, "stat", mapping["primary_stat"])
        power_modifier = float(mapping.get("power_modifier", 1.0))
        risk_modifier = float(mapping.get("risk_modifier", 1.0))
        if power_modifier <= 0:
            raise SchemaError(f"Tactic '{name}' must have a positive power_modifier")
        if risk_modifier < 0:
            raise SchemaError(f"Tactic '{name}' must not have a negative risk_modifier")
        return cls(
            key=str(mapping.get("key") or slugify(name)),
            name=name,
            primary_stat=primary_stat,
            description=str(mapping.get("description", "")),
            icon=str(mapping.get("icon", "")),
            power_modifier=power_modifier,
            risk_modifier=risk_modifier,
        )


@dataclass(frozen=True)
class Room:
    """A single encounter within a dungeon."""

    name: str
    primary_stat: StatType
    encounter_type: EncounterType
    difficulty: int
    is_boss: bool = False
    bonus_loot_chance: float = 0.0
    tactics: Sequence[Tactic] = field(default_factory=tuple)
    description: str = ""

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, object],
        *,
        default_tactics: Mapping[EncounterType, Sequence[Tactic]] | None = None,
    ) -> "Room":
        mapping = _coerce_mapping("room", data)
        name = str(mapping.get("name", "Unknown Room"))
        encounter_type = _coerce_enum(
            EncounterType, "encounter type", mapping.get("encounter", "combat")
        )
        if "primary_stat" not in mapping:
            raise SchemaError(f"Room '{name}' is missing primary_stat")
        primary_stat = _coerce_enum(StatType, "stat", mapping["primary_stat"])
        difficulty = int(mapping.get("difficulty", 10))
        if difficulty <= 0:
            raise SchemaError(f"Room '{name}' must have a positive difficulty")
        is_boss = bool(mapping.get("boss", encounter_type is EncounterType.BOSS))
        bonus_loot_chance = float(mapping.get("bonus_loot_chance", 0.0))
        if "tactics" in mapping:
            raw_tactics = mapping.get("tactics") or ()
            tactics = tuple(
                Tactic.from_mapping(_coerce_mapping("tactic", entry))
                for entry in _coerce_sequence(f"{name}.tactics", raw_tactics)
            )
        else:
            tactics = tuple((default_tactics or {}).get(encounter_type, ()))
        return cls(
            name=name,
            primary_stat=primary_stat,
            encounter_type=encounter_type,
            difficulty=difficulty,
            is_boss=is_boss,
            bonus_loot_chance=max(0.0, min(1.0, bonus_loot_chance)),
            tactics=tactics,
            description=str(mapping.get("description", "")),
        )


@dataclass(frozen=True)
class StatRequirement:
    stat: StatType
    minimum: int


@dataclass(frozen=True)
class Dungeon:
    """A dungeon definition: an ordered sequence of rooms plus reward pools."""

    key: str
    name: str
    rooms: Sequence[Room]
    difficulty: DifficultyTier = DifficultyTier.NORMAL
    base_exp: int = 0
    base_gold: int = 0
    loot_tier: int = 1
    description: str = ""
    stat_requirements: Sequence[StatRequirement] = field(default_factory=tuple)

    @property
    def room_count(self) -> int:
        return len(self.rooms)

    @property
    def boss_room(self) -> Room | None:
        for room in self.rooms:
            if room.is_boss:
                return room
        return None

    @property
    def profile(self) -> DifficultyProfile:
        return DIFFICULTY_PROFILES[self.difficulty]

    @classmethod
    def from_mapping(
        cls,
        key: str,
        data: Mapping[str, object],
        *,
        default_tactics: Mapping[EncounterType, Sequence[Tactic]] | None = None,
    ) -> "Dungeon":
        mapping = _coerce_mapping("dungeon", data)
        name = str(mapping.get("name") or key)
        rooms_raw = _coerce_sequence(f"{name}.rooms", mapping.get("rooms", ()))
        rooms = tuple(
            Room.from_mapping(_coerce_mapping("room", entry), default_tactics=default_tactics)
            for entry in rooms_raw
        )
        if not rooms:
            raise SchemaError(f"Dungeon '{name}' must define at least one room")
        difficulty = _coerce_enum(DifficultyTier, "difficulty", mapping.get("difficulty", "normal"))
        requirements: list[StatRequirement] = []
        requirements_raw = mapping.get("stat_requirements", {})
        if requirements_raw:
            for stat, minimum in _coerce_mapping("stat_requirements", requirements_raw).items():
                requirements.append(
                    StatRequirement(stat=_coerce_enum(StatType, "stat", stat), minimum=int(minimum))
                )
        return cls(
            key=slugify(str(key)),
            name=name,
            rooms=rooms,
            difficulty=difficulty,
            base_exp=max(0, int(mapping.get("base_exp", 0))),
            base_gold=max(0, int(mapping.get("base_gold", 0))),
            loot_tier=max(1, int(mapping.get("loot_tier", 1))),
            description=str(mapping.get("description", "")),
            stat_requirements=tuple(requirements),
        )
