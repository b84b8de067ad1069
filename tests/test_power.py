from __future__ import annotations

from dataclasses import replace

import pytest

from conftest import make_member, make_room
from delve.characters import ClassKey
from delve.content import EncounterType, StatType
from delve.engine import party_power, room_power


def test_empty_party_has_no_power() -> None:
    assert party_power([], StatType.STRENGTH, EncounterType.COMBAT) == 0


def test_plain_members_sum_their_stat() -> None:
    party = [make_member("a", strength=12), make_member("b", strength=8)]
    assert party_power(party, StatType.STRENGTH, EncounterType.TRAP) == 20


def test_encounter_bonus_only_on_matching_encounter() -> None:
    warrior = make_member("w", class_key=ClassKey.WARRIOR, strength=20)
    assert party_power([warrior], StatType.STRENGTH, EncounterType.COMBAT) == 25
    assert party_power([warrior], StatType.STRENGTH, EncounterType.PUZZLE) == 20


def test_boss_bonus_applies_to_boss_rooms() -> None:
    warrior = make_member("w", class_key=ClassKey.WARRIOR, wisdom=20)
    boss_puzzle = make_room(stat=StatType.WISDOM, encounter=EncounterType.PUZZLE, is_boss=True)
    assert room_power([warrior], boss_puzzle) == 25
    berserker = make_member("b", class_key=ClassKey.BERSERKER, wisdom=20)
    assert room_power([berserker], boss_puzzle) == 20


def test_party_multiplier_applies_once() -> None:
    party = [
        make_member("e1", class_key=ClassKey.ENCHANTER, strength=10),
        make_member("e2", class_key=ClassKey.ENCHANTER, strength=10),
        make_member("c", strength=20),
    ]
    assert party_power(party, StatType.STRENGTH, EncounterType.TREASURE) == 48


def test_room_power_honours_stat_override() -> None:
    member = make_member("a", strength=3, luck=17)
    room = make_room(stat=StatType.STRENGTH)
    assert room_power([member], room) == 3
    assert room_power([member], room, StatType.LUCK) == 17


@pytest.mark.parametrize("class_key", [None, *ClassKey])
@pytest.mark.parametrize("encounter", list(EncounterType))
def test_raising_a_stat_never_lowers_power(class_key, encounter) -> None:
    ally = make_member("ally", class_key=ClassKey.ENCHANTER, dexterity=7)
    previous = -1
    for value in range(0, 60, 3):
        member = make_member("m", class_key=class_key, dexterity=value)
        power = party_power([member, ally], StatType.DEXTERITY, encounter, is_boss=False)
        assert power >= previous
        previous = power


def test_power_ignores_hp() -> None:
    healthy = make_member("a", strength=10)
    wounded = replace(healthy, current_hp=1)
    assert party_power([healthy], StatType.STRENGTH, EncounterType.COMBAT) == party_power(
        [wounded], StatType.STRENGTH, EncounterType.COMBAT
    )
