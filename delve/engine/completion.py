"""Completion summary assembly."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Sequence

from delve.characters import Character
from delve.content import Dungeon, StatType

from .loot import DungeonLootGenerator, LootGenerator, LootItem
from .resolver import party_loot_bonus
from .run import DungeonRun, FeedEntryType, RoomResult, RunStatus

__all__ = [
    "BOND_EXP_FOR_COOP_DUNGEON",
    "PERFORMANCE_GRADES",
    "DungeonCompletionResult",
    "PerformanceRating",
    "SecretDiscovery",
    "process_dungeon_completion",
    "rate_performance",
    "roll_secret_discovery",
    "stat_readiness",
]

log = logging.getLogger(__name__)

BOND_EXP_FOR_COOP_DUNGEON = 25

# (minimum score, letter, loot multiplier), best first.
PERFORMANCE_GRADES: tuple[tuple[float, str, float], ...] = (
    (0.95, "S", 1.5),
    (0.85, "A", 1.25),
    (0.70, "B", 1.1),
    (0.50, "C", 1.0),
    (0.30, "D", 0.8),
)
FAILING_GRADE = ("F", 0.5)

# Hidden cache odds on a cleared dungeon, scaled by the party's best luck.
SECRET_DISCOVERY_BASE_CHANCE = 0.03
SECRET_DISCOVERY_LUCK_BONUS = 0.002
SECRET_DISCOVERY_MAX_CHANCE = 0.15
SECRET_EQUIPMENT_CHANCE = 0.25


@dataclass(frozen=True)
class PerformanceRating:
    letter: str
    score: float
    loot_multiplier: float


@dataclass(frozen=True)
class SecretDiscovery:
    bonus_gold: int
    bonus_materials: int
    equipment_drop: bool
    narrative: str = "Your keen senses uncovered a hidden treasure cache!"


@dataclass(frozen=True)
class DungeonCompletionResult:
    """Immutable summary of a finished run."""

    success: bool
    dungeon_name: str
    total_exp: int
    total_gold: int
    rooms_cleared: int
    total_rooms: int
    hp_remaining: int
    max_hp: int
    loot: tuple[LootItem, ...]
    room_results: tuple[RoomResult, ...]
    is_coop: bool
    bond_exp: int
    performance_rating: str
    performance_score: float
    loot_multiplier: float
    secret: SecretDiscovery | None = None


def _best_stat(party: Sequence[Character], stat: StatType) -> int:
    return max((member.stats.value(stat) for member in party), default=0)


def stat_readiness(party: Sequence[Character], dungeon: Dungeon) -> float:
    """Return how well the party meets the dungeon's stat requirements, 0..1."""

    if not dungeon.stat_requirements:
        return 1.0
    ratios = [
        min(1.0, _best_stat(party, requirement.stat) / max(1, requirement.minimum))
        for requirement in dungeon.stat_requirements
    ]
    return sum(ratios) / len(ratios)


def rate_performance(
    dungeon: Dungeon, run: DungeonRun, party: Sequence[Character]
) -> PerformanceRating:
    total_rooms = dungeon.room_count
    rooms_ratio = run.rooms_cleared / total_rooms if total_rooms else 0.0
    hp_ratio = run.party_hp / run.max_party_hp if run.max_party_hp > 0 else 0.0
    score = 0.5 * rooms_ratio + 0.3 * hp_ratio + 0.2 * stat_readiness(party, dungeon)
    for minimum, letter, multiplier in PERFORMANCE_GRADES:
        if score >= minimum:
            return PerformanceRating(letter=letter, score=score, loot_multiplier=multiplier)
    letter, multiplier = FAILING_GRADE
    return PerformanceRating(letter=letter, score=score, loot_multiplier=multiplier)


def roll_secret_discovery(
    dungeon: Dungeon, party: Sequence[Character], rng: random.Random
) -> SecretDiscovery | None:
    """Luck-gated roll for a hidden cache on a cleared dungeon."""

    luck = _best_stat(party, StatType.LUCK)
    chance = min(
        SECRET_DISCOVERY_MAX_CHANCE,
        SECRET_DISCOVERY_BASE_CHANCE + SECRET_DISCOVERY_LUCK_BONUS * luck,
    )
    if rng.random() > chance:
        return None
    return SecretDiscovery(
        bonus_gold=int(dungeon.base_gold * 2.0 * dungeon.profile.reward_multiplier),
        bonus_materials=rng.randint(2, 3),
        equipment_drop=rng.random() <= SECRET_EQUIPMENT_CHANCE,
    )


def process_dungeon_completion(
    dungeon: Dungeon,
    run: DungeonRun,
    party: Sequence[Character],
    *,
    loot_generator: LootGenerator | None = None,
    rng: random.Random | None = None,
) -> DungeonCompletionResult:
    """Build the completion summary for ``run``.

    Once the run has a terminal status the result is stored on it, and later
    calls return that same object without rolling loot again. A run still in
    progress gets a fresh preview on every call.
    """

    if run.is_terminal and run.completion is not None:
        log.debug("Run %s already has a completion result", run.id)
        return run.completion

    generator = rng or random.Random()
    success = run.status is RunStatus.COMPLETED
    loot: tuple[LootItem, ...] = ()
    secret: SecretDiscovery | None = None
    if success:
        roll_loot = loot_generator or DungeonLootGenerator(generator)
        items = roll_loot(
            dungeon.loot_tier,
            _best_stat(party, StatType.LUCK),
            list(run.room_results),
            dungeon.difficulty,
            party_loot_bonus(party),
        )
        owner_id = party[0].id if party else None
        loot = tuple(item.owned_by(owner_id) for item in items)
        secret = roll_secret_discovery(dungeon, party, generator)
        if secret is not None:
            run.add_feed_entry(
                FeedEntryType.SECRET_DISCOVERY,
                "A hidden cache was discovered! Your luck revealed secret treasure!",
            )

    rating = rate_performance(dungeon, run, party)
    run.performance_rating = rating.letter
    run.performance_score = rating.score

    result = DungeonCompletionResult(
        success=success,
        dungeon_name=dungeon.name,
        total_exp=run.total_exp,
        total_gold=run.total_gold,
        rooms_cleared=run.rooms_cleared,
        total_rooms=dungeon.room_count,
        hp_remaining=run.party_hp,
        max_hp=run.max_party_hp,
        loot=loot,
        room_results=tuple(run.room_results),
        is_coop=run.is_coop,
        bond_exp=BOND_EXP_FOR_COOP_DUNGEON if success and run.is_coop else 0,
        performance_rating=rating.letter,
        performance_score=rating.score,
        loot_multiplier=rating.loot_multiplier,
        secret=secret,
    )
    if run.is_terminal:
        run.completion = result
    return result
