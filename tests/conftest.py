from __future__ import annotations

import random
from pathlib import Path
import sys
from typing import Iterable

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from delve.characters import Character, ClassKey, Stats
from delve.content import DifficultyTier, Dungeon, EncounterType, Room, StatType, Tactic


class ScriptedRandom(random.Random):
    """Random source whose ``random()`` draws come from a fixed script."""

    def __init__(self, values: Iterable[float], seed: int = 0) -> None:
        super().__init__(seed)
        self._script = list(values)
        self.draws = 0

    def random(self) -> float:
        self.draws += 1
        if self._script:
            return self._script.pop(0)
        return super().random()

    # Keeps choice() and randint() on the bit generator instead of the script.
    def getrandbits(self, k: int) -> int:
        return super().getrandbits(k)


@pytest.fixture
def scripted_rng():
    def factory(*values: float) -> ScriptedRandom:
        return ScriptedRandom(values)

    return factory


def make_member(
    member_id: str,
    *,
    class_key: ClassKey | None = None,
    hp: int = 100,
    **stats: int,
) -> Character:
    return Character(
        id=member_id,
        name=member_id.title(),
        stats=Stats(**stats),
        class_key=class_key,
        current_hp=hp,
        max_hp=100,
    )


def make_room(
    name: str = "Hall",
    *,
    stat: StatType = StatType.STRENGTH,
    encounter: EncounterType = EncounterType.COMBAT,
    difficulty: int = 10,
    is_boss: bool = False,
    bonus_loot_chance: float = 0.0,
    tactics: tuple[Tactic, ...] = (),
) -> Room:
    return Room(
        name=name,
        primary_stat=stat,
        encounter_type=encounter,
        difficulty=difficulty,
        is_boss=is_boss,
        bonus_loot_chance=bonus_loot_chance,
        tactics=tactics,
    )


def make_dungeon(
    rooms: Iterable[Room],
    *,
    base_exp: int = 100,
    base_gold: int = 50,
    difficulty: DifficultyTier = DifficultyTier.NORMAL,
    loot_tier: int = 1,
) -> Dungeon:
    return Dungeon(
        key="test_dungeon",
        name="Test Dungeon",
        rooms=tuple(rooms),
        difficulty=difficulty,
        base_exp=base_exp,
        base_gold=base_gold,
        loot_tier=loot_tier,
    )
