"""Single room resolution."""

from __future__ import annotations

import logging
import random
from typing import Sequence

from delve.characters import Character
from delve.content import Dungeon, Room, Tactic

from .narrative import room_narrative
from .odds import compute_odds
from .run import RoomResult

__all__ = [
    "FAILURE_EXP_SHARE",
    "MAX_DAMAGE",
    "MAX_DAMAGE_REDUCTION",
    "MIN_DAMAGE",
    "party_damage_reduction",
    "party_loot_bonus",
    "resolve_room",
]

log = logging.getLogger(__name__)

MIN_DAMAGE = 5
MAX_DAMAGE = 25
MAX_DAMAGE_REDUCTION = 0.75
FAILURE_EXP_SHARE = 0.02
# Tactics above this power modifier earn a reward bonus on success.
RISKY_TACTIC_THRESHOLD = 1.1


def party_loot_bonus(party: Sequence[Character]) -> float:
    return max(
        (member.class_profile.loot_drop_bonus for member in party if member.class_profile),
        default=0.0,
    )


def party_damage_reduction(party: Sequence[Character]) -> float:
    """Sum each distinct class's damage reduction, capped."""

    reductions = {
        member.class_profile.key: member.class_profile.damage_reduction
        for member in party
        if member.class_profile is not None
    }
    return min(MAX_DAMAGE_REDUCTION, sum(reductions.values()))


def _reward(base: int, room: Room, dungeon: Dungeon, tactic: Tactic | None) -> int:
    share = 1.0 / dungeon.room_count if dungeon.room_count else 1.0
    amount = int(base * share * dungeon.profile.reward_multiplier)
    if room.is_boss:
        amount *= 2
    if tactic is not None and tactic.power_modifier > RISKY_TACTIC_THRESHOLD:
        amount = int(amount * (1 + (tactic.power_modifier - 1) * 0.5))
    return amount


def resolve_room(
    room: Room,
    room_index: int,
    party: Sequence[Character],
    dungeon: Dungeon,
    tactic: Tactic | None = None,
    *,
    rng: random.Random | None = None,
) -> RoomResult:
    """Roll one room attempt for ``party``.

    At most two values are drawn from ``rng``: the outcome roll and, on
    success, the bonus loot roll.
    """

    generator = rng or random.Random()
    odds = compute_odds(party, room, tactic)
    roll = generator.random()
    success = roll <= odds.chance

    if success:
        exp = _reward(dungeon.base_exp, room, dungeon, tactic)
        gold = _reward(dungeon.base_gold, room, dungeon, tactic)
        loot_chance = room.bonus_loot_chance + party_loot_bonus(party)
        loot_dropped = generator.random() <= loot_chance if loot_chance > 0 else False
        hp_lost = 0
    else:
        gap = int(odds.difficulty - odds.power)
        damage = float(min(MAX_DAMAGE, max(MIN_DAMAGE, gap)))
        risk = max(0.0, tactic.risk_modifier) if tactic is not None else 1.0
        damage *= risk * dungeon.profile.damage_multiplier
        damage *= 1.0 - party_damage_reduction(party)
        hp_lost = max(1, int(damage))
        exp = int(dungeon.base_exp * FAILURE_EXP_SHARE)
        gold = 0
        loot_dropped = False

    log.debug(
        "Room %s (%s): roll=%.3f chance=%.3f success=%s",
        room_index,
        room.name,
        roll,
        odds.chance,
        success,
    )
    return RoomResult(
        room_index=room_index,
        room_name=room.name,
        success=success,
        power=odds.power,
        required_power=odds.difficulty,
        exp_earned=exp,
        gold_earned=gold,
        hp_lost=hp_lost,
        loot_dropped=loot_dropped,
        narrative=room_narrative(room, room_index, success, tactic),
        tactic_name=tactic.name if tactic is not None else None,
    )
