"""Domain models for party members and their class modifiers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Mapping, MutableMapping, Sequence

import yaml

from delve.content.models import EncounterType, StatType

__all__ = [
    "CLASS_PROFILES",
    "STAT_ORDER",
    "Character",
    "ClassKey",
    "ClassProfile",
    "ClassTableError",
    "Stats",
    "load_class_profiles",
]

STAT_ORDER: tuple[StatType, ...] = (
    StatType.STRENGTH,
    StatType.WISDOM,
    StatType.CHARISMA,
    StatType.DEXTERITY,
    StatType.LUCK,
)

_RULES_PATH = Path(__file__).with_name("content") / "rules"


class ClassTableError(RuntimeError):
    """Raised when the class modifier table fails validation."""


class ClassKey(str, Enum):
    WARRIOR = "warrior"
    MAGE = "mage"
    ARCHER = "archer"
    BERSERKER = "berserker"
    PALADIN = "paladin"
    SORCERER = "sorcerer"
    ENCHANTER = "enchanter"
    RANGER = "ranger"
    TRICKSTER = "trickster"


@dataclass(frozen=True)
class ClassProfile:
    """Modifiers a class contributes to dungeon encounters."""

    key: ClassKey
    name: str
    class_line: str
    primary_stat: StatType
    bonus_encounter: EncounterType | None = None
    encounter_multiplier: float = 0.0
    boss_bonus: bool = False
    party_multiplier: float = 0.0
    damage_reduction: float = 0.0
    loot_drop_bonus: float = 0.0

    def applies_to(self, encounter_type: EncounterType, is_boss: bool) -> bool:
        """Return whether the encounter bonus applies to a room."""

        if self.encounter_multiplier <= 0:
            return False
        if self.bonus_encounter is not None and self.bonus_encounter == encounter_type:
            return True
        return self.boss_bonus and (is_boss or encounter_type is EncounterType.BOSS)


@dataclass(frozen=True)
class Stats:
    """Fully resolved stat snapshot for a character."""

    strength: int = 5
    wisdom: int = 5
    charisma: int = 5
    dexterity: int = 5
    luck: int = 5

    def __post_init__(self) -> None:
        for stat in STAT_ORDER:
            value = getattr(self, stat.value)
            if int(value) < 0:
                raise ValueError(f"Stat '{stat.value}' must not be negative")
            object.__setattr__(self, stat.value, int(value))

    def value(self, stat: StatType) -> int:
        return getattr(self, StatType(stat).value)

    @property
    def total(self) -> int:
        return sum(self.value(stat) for stat in STAT_ORDER)

    def to_dict(self) -> Dict[str, int]:
        return {stat.value: self.value(stat) for stat in STAT_ORDER}

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "Stats":
        values: Dict[str, int] = {}
        for key, value in data.items():
            try:
                stat = StatType(str(key).lower())
            except ValueError as exc:
                raise ValueError(f"Unknown stat '{key}'") from exc
            values[stat.value] = int(value)
        return cls(**values)


@dataclass
class Character:
    """A party member as seen by the dungeon engine."""

    id: str
    name: str
    level: int = 1
    stats: Stats = field(default_factory=Stats)
    class_key: ClassKey | None = None
    current_hp: int = 100
    max_hp: int = 100
    is_proxy: bool = False

    @property
    def class_profile(self) -> ClassProfile | None:
        if self.class_key is None:
            return None
        return CLASS_PROFILES[self.class_key]

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {
            "id": self.id,
            "name": self.name,
            "level": self.level,
            "stats": self.stats.to_dict(),
            "current_hp": self.current_hp,
            "max_hp": self.max_hp,
        }
        if self.class_key is not None:
            data["class"] = self.class_key.value
        if self.is_proxy:
            data["is_proxy"] = True
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "Character":
        class_value = data.get("class")
        class_key = ClassKey(str(class_value).lower()) if class_value else None
        stats_raw = data.get("stats") or {}
        if not isinstance(stats_raw, Mapping):
            raise ValueError("Character stats must be a mapping")
        max_hp = int(data.get("max_hp", 100))
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "Unnamed Adventurer")),
            level=int(data.get("level", 1)),
            stats=Stats.from_dict(stats_raw),
            class_key=class_key,
            current_hp=int(data.get("current_hp", max_hp)),
            max_hp=max_hp,
            is_proxy=bool(data.get("is_proxy", False)),
        )


def _load_yaml(path: Path) -> object:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ClassTableError(f"Unable to read class table from {path}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ClassTableError(f"Failed to parse class table from {path}") from exc
    return data or []


def _require_mapping(name: str, value: object) -> MutableMapping[str, object]:
    if isinstance(value, MutableMapping):
        return value
    if isinstance(value, Mapping):
        return dict(value)
    raise ClassTableError(f"Expected mapping for {name}")


def _require_sequence(name: str, value: object) -> Sequence[object]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return value
    raise ClassTableError(f"Expected sequence for {name}")


def _parse_profile(entry: object) -> ClassProfile:
    mapping = _require_mapping("class entry", entry)
    try:
        key = ClassKey(str(mapping.get("key", "")).lower())
    except ValueError as exc:
        raise ClassTableError(f"Unknown class key '{mapping.get('key')}'") from exc
    try:
        primary_stat = StatType(str(mapping.get("primary_stat", "strength")).lower())
        bonus_raw = mapping.get("bonus_encounter")
        bonus_encounter = EncounterType(str(bonus_raw).lower()) if bonus_raw else None
    except ValueError as exc:
        raise ClassTableError(f"Invalid stat or encounter for class '{key.value}'") from exc
    return ClassProfile(
        key=key,
        name=str(mapping.get("name") or key.value.title()),
        class_line=str(mapping.get("class_line") or key.value),
        primary_stat=primary_stat,
        bonus_encounter=bonus_encounter,
        encounter_multiplier=max(0.0, float(mapping.get("encounter_multiplier", 0.0))),
        boss_bonus=bool(mapping.get("boss_bonus", False)),
        party_multiplier=max(0.0, float(mapping.get("party_multiplier", 0.0))),
        damage_reduction=min(1.0, max(0.0, float(mapping.get("damage_reduction", 0.0)))),
        loot_drop_bonus=max(0.0, float(mapping.get("loot_drop_bonus", 0.0))),
    )


def load_class_profiles(path: Path | None = None) -> Dict[ClassKey, ClassProfile]:
    """Load and validate the class table; it must cover every class exactly once."""

    raw = _load_yaml(path or _RULES_PATH / "classes.yaml")
    profiles: Dict[ClassKey, ClassProfile] = {}
    for entry in _require_sequence("classes", raw):
        profile = _parse_profile(entry)
        if profile.key in profiles:
            raise ClassTableError(f"Duplicate class entry '{profile.key.value}'")
        profiles[profile.key] = profile
    missing = set(ClassKey) - set(profiles)
    if missing:
        names = ", ".join(sorted(key.value for key in missing))
        raise ClassTableError(f"Class table is missing entries for: {names}")
    return profiles


CLASS_PROFILES: Dict[ClassKey, ClassProfile] = load_class_profiles()
