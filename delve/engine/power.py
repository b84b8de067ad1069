"""Party power aggregation."""

from __future__ import annotations

from typing import Sequence

from delve.characters import Character
from delve.content import EncounterType, Room, StatType

__all__ = ["member_power", "party_power", "room_power"]


def member_power(
    member: Character,
    stat: StatType,
    encounter_type: EncounterType,
    is_boss: bool = False,
) -> int:
    """Return one member's contribution before party-wide multipliers."""

    value = max(0, member.stats.value(stat))
    profile = member.class_profile
    if profile is not None and profile.applies_to(encounter_type, is_boss):
        value += int(value * profile.encounter_multiplier)
    return value


def party_power(
    party: Sequence[Character],
    stat: StatType,
    encounter_type: EncounterType,
    is_boss: bool = False,
) -> int:
    """Sum member power for ``stat`` and apply the strongest party multiplier once."""

    total = sum(member_power(member, stat, encounter_type, is_boss) for member in party)
    party_multiplier = max(
        (member.class_profile.party_multiplier for member in party if member.class_profile),
        default=0.0,
    )
    if party_multiplier > 0:
        total += int(total * party_multiplier)
    return max(0, total)


def room_power(
    party: Sequence[Character],
    room: Room,
    stat_override: StatType | None = None,
) -> int:
    stat = stat_override if stat_override is not None else room.primary_stat
    return party_power(party, stat, room.encounter_type, room.is_boss)
