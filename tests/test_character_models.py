from pathlib import Path

import pytest

from delve.characters import (
    CLASS_PROFILES,
    Character,
    ClassKey,
    ClassTableError,
    Stats,
    load_class_profiles,
)
from delve.content import EncounterType, StatType


def test_stats_reject_negative_values() -> None:
    with pytest.raises(ValueError):
        Stats(strength=-1)


def test_stats_total_and_lookup() -> None:
    stats = Stats(strength=10, wisdom=4, charisma=3, dexterity=2, luck=1)
    assert stats.total == 20
    assert stats.value(StatType.WISDOM) == 4
    assert Stats.from_dict(stats.to_dict()) == stats


def test_character_serialization_round_trip() -> None:
    character = Character(
        id="hero-1",
        name="Brannoc",
        level=4,
        stats=Stats(strength=12, wisdom=5, charisma=6, dexterity=8, luck=6),
        class_key=ClassKey.WARRIOR,
        current_hp=80,
    )
    payload = character.to_dict()
    assert payload["class"] == "warrior"

    restored = Character.from_dict(payload)
    assert restored == character
    assert restored.class_profile is CLASS_PROFILES[ClassKey.WARRIOR]


def test_character_from_dict_defaults_hp_to_max() -> None:
    restored = Character.from_dict({"id": "x", "max_hp": 60, "stats": {"STRENGTH": 9}})
    assert restored.current_hp == 60
    assert restored.stats.strength == 9
    assert restored.class_key is None
    assert restored.class_profile is None


def test_class_table_covers_every_class() -> None:
    assert set(CLASS_PROFILES) == set(ClassKey)
    warrior = CLASS_PROFILES[ClassKey.WARRIOR]
    assert warrior.applies_to(EncounterType.COMBAT, is_boss=False)
    assert warrior.applies_to(EncounterType.PUZZLE, is_boss=True)
    assert warrior.applies_to(EncounterType.BOSS, is_boss=False)
    mage = CLASS_PROFILES[ClassKey.MAGE]
    assert mage.applies_to(EncounterType.PUZZLE, is_boss=False)
    assert not mage.applies_to(EncounterType.BOSS, is_boss=True)
    assert not CLASS_PROFILES[ClassKey.ENCHANTER].applies_to(EncounterType.COMBAT, False)


def test_class_table_rejects_missing_entries(tmp_path: Path) -> None:
    table = tmp_path / "classes.yaml"
    table.write_text("- key: warrior\n  primary_stat: strength\n", encoding="utf-8")
    with pytest.raises(ClassTableError, match="missing"):
        load_class_profiles(table)


def test_class_table_rejects_duplicates(tmp_path: Path) -> None:
    entries = "".join(f"- key: {key.value}\n" for key in ClassKey)
    table = tmp_path / "classes.yaml"
    table.write_text(entries + "- key: mage\n", encoding="utf-8")
    with pytest.raises(ClassTableError, match="Duplicate"):
        load_class_profiles(table)
