"""Greedy tactic selection for unattended runs."""

from __future__ import annotations

from typing import Sequence

from delve.characters import Character
from delve.content import Room, Tactic

from .power import room_power

__all__ = ["default_tactic", "select_best_tactic", "tactic_score"]


def default_tactic(room: Room) -> Tactic:
    """Neutral tactic used when a room offers none."""

    return Tactic(
        key="direct",
        name="Direct",
        primary_stat=room.primary_stat,
        description="A straightforward attempt",
        icon="bolt",
    )


def tactic_score(party: Sequence[Character], room: Room, tactic: Tactic) -> float:
    return room_power(party, room, tactic.primary_stat) * tactic.power_modifier


def select_best_tactic(party: Sequence[Character], room: Room) -> Tactic:
    """Pick the tactic with the highest modified power; the first one wins ties.

    Risk modifiers and reward bonuses are not considered.
    """

    if not room.tactics:
        return default_tactic(room)
    best = room.tactics[0]
    best_score = tactic_score(party, room, best)
    for tactic in room.tactics[1:]:
        score = tactic_score(party, room, tactic)
        if score > best_score:
            best = tactic
            best_score = score
    return best
