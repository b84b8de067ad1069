"""Success probability model for room encounters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from delve.characters import Character
from delve.content import Dungeon, Room, Tactic

from .power import room_power
from .tactics import select_best_tactic

__all__ = [
    "MAX_SUCCESS_CHANCE",
    "MIN_SUCCESS_CHANCE",
    "EncounterOdds",
    "chance_label",
    "compute_odds",
    "effective_power",
    "overall_success_estimate",
    "scaled_difficulty",
    "success_chance",
]

MIN_SUCCESS_CHANCE = 0.05
MAX_SUCCESS_CHANCE = 0.95


@dataclass(frozen=True)
class EncounterOdds:
    """Numbers behind a single room attempt."""

    power: float
    difficulty: float
    chance: float


def scaled_difficulty(difficulty: int, party_size: int) -> float:
    """Return room difficulty scaled sub-linearly by party size."""

    return float(max(1, difficulty)) * (1.0 + 0.5 * (max(1, party_size) - 1))


def effective_power(
    party: Sequence[Character],
    room: Room,
    tactic: Tactic | None = None,
) -> float:
    stat = tactic.primary_stat if tactic is not None else None
    modifier = tactic.power_modifier if tactic is not None else 1.0
    return room_power(party, room, stat) * max(0.0, modifier)


def compute_odds(
    party: Sequence[Character],
    room: Room,
    tactic: Tactic | None = None,
) -> EncounterOdds:
    power = effective_power(party, room, tactic)
    difficulty = scaled_difficulty(room.difficulty, len(party))
    chance = min(MAX_SUCCESS_CHANCE, max(MIN_SUCCESS_CHANCE, power / difficulty))
    return EncounterOdds(power=power, difficulty=difficulty, chance=chance)


def success_chance(
    party: Sequence[Character],
    room: Room,
    tactic: Tactic | None = None,
) -> float:
    """Return the clamped probability that ``party`` clears ``room``."""

    return compute_odds(party, room, tactic).chance


def chance_label(chance: float) -> str:
    if chance >= 0.8:
        return "Very High"
    if chance >= 0.6:
        return "High"
    if chance >= 0.4:
        return "Medium"
    if chance >= 0.2:
        return "Low"
    return "Very Low"


def overall_success_estimate(party: Sequence[Character], dungeon: Dungeon) -> float:
    """Average per-room chance using the tactic the optimizer would pick."""

    if not dungeon.rooms:
        return 0.0
    total = sum(
        success_chance(party, room, select_best_tactic(party, room)) for room in dungeon.rooms
    )
    return total / len(dungeon.rooms)
