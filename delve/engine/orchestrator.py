"""Room-by-room driver for dungeon runs."""

from __future__ import annotations

import logging
import random
from typing import Sequence

from delve.characters import Character
from delve.content import Dungeon, Tactic

from .completion import DungeonCompletionResult, process_dungeon_completion
from .loot import LootGenerator
from .narrative import partner_flavor, synergy_callouts
from .resolver import resolve_room
from .run import DungeonRun, FeedEntryType, RoomResult, RunStatus
from .tactics import default_tactic, select_best_tactic

__all__ = ["auto_run_dungeon", "finish_run", "play_room"]

log = logging.getLogger(__name__)


def _play_step(
    dungeon: Dungeon,
    run: DungeonRun,
    party: Sequence[Character],
    tactic: Tactic,
    generator: random.Random,
) -> RoomResult:
    index = run.current_room_index
    room = dungeon.rooms[index]
    run.add_feed_entry(FeedEntryType.ROOM_ENTERED, f"Room {index + 1}: {room.name}")
    run.add_feed_entry(
        FeedEntryType.TACTIC_CHOSEN, f"Used {tactic.name} — {tactic.primary_stat.label}"
    )

    result = resolve_room(room, index, party, dungeon, tactic, rng=generator)
    run.record(result)

    if result.success:
        run.add_feed_entry(
            FeedEntryType.OUTCOME_SUCCESS,
            f"Success! +{result.exp_earned} EXP, +{result.gold_earned} Gold",
        )
    else:
        run.add_feed_entry(FeedEntryType.OUTCOME_FAILURE, f"Failed! Lost {result.hp_lost} HP")
    if result.loot_dropped:
        run.add_feed_entry(FeedEntryType.LOOT_FOUND, f"Loot found in {room.name}!")

    if run.is_coop and len(party) > 1:
        ally = party[generator.randint(1, len(party) - 1)]
        message = partner_flavor(room.encounter_type, result.success, ally, generator)
        if message:
            run.add_feed_entry(FeedEntryType.PARTNER_ACTION, message)
        for line in synergy_callouts(
            party, success=result.success, loot_dropped=result.loot_dropped
        ):
            run.add_feed_entry(FeedEntryType.PARTNER_ACTION, line)

    if run.party_hp <= 0:
        run.finish(RunStatus.FAILED)
        run.add_feed_entry(FeedEntryType.DUNGEON_FAILED, "Party HP reached zero. Dungeon failed!")
        log.debug("Run %s wiped in room %s", run.id, index)
    return result


def _mark_cleared(run: DungeonRun) -> None:
    run.finish(RunStatus.COMPLETED)
    run.add_feed_entry(
        FeedEntryType.DUNGEON_COMPLETE,
        f"Dungeon cleared! +{run.total_exp} EXP, +{run.total_gold} Gold",
    )


def auto_run_dungeon(
    dungeon: Dungeon,
    run: DungeonRun,
    party: Sequence[Character],
    *,
    rng: random.Random | None = None,
    loot_generator: LootGenerator | None = None,
) -> DungeonCompletionResult:
    """Simulate every remaining room of ``run`` with greedily chosen tactics.

    Calling this again on a resolved run skips straight to the completion
    summary, which is cached on the run after the first call.
    """

    generator = rng or random.Random()
    if run.resolved:
        log.debug("Run %s already resolved; returning completion", run.id)
        return process_dungeon_completion(
            dungeon, run, party, loot_generator=loot_generator, rng=generator
        )
    run.resolved = True

    if not run.is_terminal:
        while run.current_room_index < dungeon.room_count:
            if run.party_hp <= 0:
                break
            room = dungeon.rooms[run.current_room_index]
            _play_step(dungeon, run, party, select_best_tactic(party, room), generator)
            if run.is_terminal:
                break
        if run.party_hp > 0:
            _mark_cleared(run)
        elif not run.is_terminal:
            # Entered with no HP left.
            run.finish(RunStatus.FAILED)
            run.add_feed_entry(
                FeedEntryType.DUNGEON_FAILED, "Party HP reached zero. Dungeon failed!"
            )

    log.debug(
        "Run %s finished with status %s after %s rooms",
        run.id,
        run.status.value,
        len(run.room_results),
    )
    return process_dungeon_completion(
        dungeon, run, party, loot_generator=loot_generator, rng=generator
    )


def play_room(
    dungeon: Dungeon,
    run: DungeonRun,
    party: Sequence[Character],
    tactic: Tactic | None = None,
    *,
    rng: random.Random | None = None,
) -> RoomResult | None:
    """Resolve the run's current room with a caller-chosen tactic.

    Returns ``None`` when there is nothing left to play.
    """

    if run.resolved or run.is_terminal or run.party_hp <= 0:
        return None
    if run.current_room_index >= dungeon.room_count:
        return None
    room = dungeon.rooms[run.current_room_index]
    chosen = tactic or (room.tactics[0] if room.tactics else default_tactic(room))
    return _play_step(dungeon, run, party, chosen, rng or random.Random())


def finish_run(
    dungeon: Dungeon,
    run: DungeonRun,
    party: Sequence[Character],
    *,
    rng: random.Random | None = None,
    loot_generator: LootGenerator | None = None,
) -> DungeonCompletionResult:
    """Close a manually played run and build its completion summary.

    A run with HP left is cleared only when every room was played;
    abandoning it early counts as a failure.
    """

    if not run.resolved:
        run.resolved = True
        if not run.is_terminal:
            if run.party_hp > 0 and run.current_room_index >= dungeon.room_count:
                _mark_cleared(run)
            else:
                run.finish(RunStatus.FAILED)
                run.add_feed_entry(
                    FeedEntryType.DUNGEON_FAILED, f"The party retreated from {dungeon.name}."
                )
    return process_dungeon_completion(
        dungeon, run, party, loot_generator=loot_generator, rng=rng
    )
