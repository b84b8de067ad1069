"""Narrative line selection for room outcomes and co-op flavor."""

from __future__ import annotations

import random
from typing import Sequence

from delve.characters import Character, ClassKey
from delve.content import EncounterType, NarrativeLibrary, Room, Tactic, default_narratives

__all__ = ["partner_flavor", "room_narrative", "synergy_callouts"]


def room_narrative(
    room: Room,
    room_index: int,
    success: bool,
    tactic: Tactic | None = None,
    *,
    library: NarrativeLibrary | None = None,
) -> str:
    """Pick the outcome line for a room without consuming randomness."""

    library = library or default_narratives()
    tactic_key = tactic.key if tactic is not None else None
    pool = library.room_pool(room.encounter_type, tactic_key, success)
    if not pool:
        return "Success!" if success else "Failed!"
    return pool[max(0, room_index) % len(pool)]


def partner_flavor(
    encounter_type: EncounterType,
    success: bool,
    ally: Character,
    rng: random.Random,
    *,
    library: NarrativeLibrary | None = None,
) -> str | None:
    """Pick a co-op line for ``ally``, preferring lines for their class line."""

    library = library or default_narratives()
    class_line = ally.class_profile.class_line if ally.class_profile else None
    pool = library.partner_pool(encounter_type, success, class_line)
    if not pool:
        return None
    return rng.choice(pool).format(ally=ally.name, encounter=encounter_type.value)


def _first_of_class(party: Sequence[Character], class_key: ClassKey) -> Character | None:
    for member in party:
        if member.class_key is class_key:
            return member
    return None


def synergy_callouts(
    party: Sequence[Character],
    *,
    success: bool,
    loot_dropped: bool,
    library: NarrativeLibrary | None = None,
) -> list[str]:
    """Return callouts for class synergies that affected this room."""

    library = library or default_narratives()
    triggered: list[ClassKey] = []
    if success:
        triggered.append(ClassKey.ENCHANTER)
    else:
        triggered.extend((ClassKey.RANGER, ClassKey.PALADIN))
    if loot_dropped:
        triggered.append(ClassKey.TRICKSTER)

    lines: list[str] = []
    for class_key in triggered:
        member = _first_of_class(party, class_key)
        template = library.synergy.get(class_key.value)
        if member is not None and template:
            lines.append(template.format(name=member.name))
    return lines
