from __future__ import annotations

import random

import pytest

from conftest import make_dungeon, make_member, make_room
from delve.characters import ClassKey
from delve.content import EncounterType, StatType, Tactic
from delve.engine import (
    DungeonRun,
    FeedEntryType,
    RunStatus,
    auto_run_dungeon,
    finish_run,
    play_room,
    process_dungeon_completion,
)
from delve.engine.narrative import partner_flavor


def _no_loot(tier, luck, room_results, difficulty, class_loot_bonus):
    return []


def _easy_dungeon(count: int = 3):
    rooms = [make_room(f"Room {chr(65 + index)}", difficulty=1) for index in range(count)]
    return make_dungeon(rooms, base_exp=120, base_gold=60)


def test_auto_run_clears_dungeon_and_writes_feed(scripted_rng) -> None:
    dungeon = _easy_dungeon()
    party = [make_member("hero", strength=20)]
    run = DungeonRun.start(dungeon, party)

    result = auto_run_dungeon(
        dungeon, run, party, rng=scripted_rng(0.0, 0.0, 0.0, 0.99), loot_generator=_no_loot
    )

    assert result.success is True
    assert run.status is RunStatus.COMPLETED
    assert run.resolved is True
    assert run.completed_at is not None
    assert run.current_room_index == 3
    assert result.rooms_cleared == 3
    assert result.total_exp == 120
    assert result.total_gold == 60
    messages = [entry.message for entry in run.feed]
    assert messages[0] == "Entered Test Dungeon solo"
    assert messages[1:4] == ["Room 1: Room A", "Used Direct — Strength", "Success! +40 EXP, +20 Gold"]
    assert run.feed[-1].type is FeedEntryType.DUNGEON_COMPLETE
    assert messages[-1] == "Dungeon cleared! +120 EXP, +60 Gold"
    assert not any(entry.type is FeedEntryType.PARTNER_ACTION for entry in run.feed)


def test_second_call_returns_same_completion() -> None:
    dungeon = _easy_dungeon()
    party = [make_member("hero", strength=20)]
    run = DungeonRun.start(dungeon, party)
    rng = random.Random(5)

    first = auto_run_dungeon(dungeon, run, party, rng=rng)
    count = len(run.room_results)
    feed_size = len(run.feed)
    second = auto_run_dungeon(dungeon, run, party, rng=rng)

    assert second is first
    assert len(run.room_results) == count
    assert len(run.feed) == feed_size


def test_resolved_run_is_never_simulated() -> None:
    dungeon = _easy_dungeon()
    party = [make_member("hero", strength=20)]
    run = DungeonRun.start(dungeon, party)
    run.resolved = True

    result = auto_run_dungeon(dungeon, run, party, rng=random.Random(1), loot_generator=_no_loot)

    assert run.room_results == []
    assert run.status is RunStatus.IN_PROGRESS
    assert result.success is False


def test_party_wipe_halts_progress(scripted_rng) -> None:
    rooms = [make_room(f"Pit {index}", difficulty=1000) for index in range(3)]
    dungeon = make_dungeon(rooms)
    party = [make_member("hero", strength=1, hp=10)]
    run = DungeonRun.start(dungeon, party)

    result = auto_run_dungeon(dungeon, run, party, rng=scripted_rng(0.99, 0.99, 0.99))

    assert run.party_hp == 0
    assert run.status is RunStatus.FAILED
    assert len(run.room_results) == 1
    assert run.current_room_index == 1
    assert run.feed[-1].type is FeedEntryType.DUNGEON_FAILED
    assert run.feed[-1].message == "Party HP reached zero. Dungeon failed!"
    assert result.success is False
    assert result.loot == ()


def test_party_at_zero_hp_never_enters_a_room() -> None:
    dungeon = _easy_dungeon()
    party = [make_member("hero", strength=20, hp=0)]
    run = DungeonRun.start(dungeon, party)

    auto_run_dungeon(dungeon, run, party, rng=random.Random(2))

    assert run.room_results == []
    assert run.status is RunStatus.FAILED


@pytest.mark.parametrize("seed", [0, 1, 42])
def test_same_seed_replays_identically(seed: int) -> None:
    rooms = [make_room(f"R{index}", difficulty=12 + index * 4, bonus_loot_chance=0.3) for index in range(6)]
    dungeon = make_dungeon(rooms)
    party = [make_member("a", strength=9), make_member("b", class_key=ClassKey.WARRIOR, strength=8)]

    runs = []
    for _ in range(2):
        run = DungeonRun.start(dungeon, party, is_coop=True)
        auto_run_dungeon(dungeon, run, party, rng=random.Random(seed), loot_generator=_no_loot)
        runs.append(run)

    assert runs[0].room_results == runs[1].room_results
    assert [entry.message for entry in runs[0].feed] == [entry.message for entry in runs[1].feed]
    assert runs[0].party_hp == runs[1].party_hp


def test_hp_and_index_stay_in_bounds() -> None:
    rooms = [make_room(f"R{index}", difficulty=40) for index in range(8)]
    dungeon = make_dungeon(rooms)
    party = [make_member("a", strength=15, hp=60)]
    for seed in range(20):
        run = DungeonRun.start(dungeon, party)
        auto_run_dungeon(dungeon, run, party, rng=random.Random(seed), loot_generator=_no_loot)
        assert run.party_hp >= 0
        indices = [result.room_index for result in run.room_results]
        assert indices == list(range(len(indices)))
        assert run.status in (RunStatus.COMPLETED, RunStatus.FAILED)


def test_coop_run_adds_partner_and_synergy_entries(scripted_rng) -> None:
    room = make_room("Gate", difficulty=1, encounter=EncounterType.COMBAT)
    dungeon = make_dungeon([room])
    party = [
        make_member("hero", strength=20),
        make_member("ilsa", class_key=ClassKey.ENCHANTER, strength=5),
    ]
    run = DungeonRun.start(dungeon, party, is_coop=True)

    auto_run_dungeon(dungeon, run, party, rng=scripted_rng(0.0), loot_generator=_no_loot)

    assert run.feed[0].message == "Entered Test Dungeon as a party"
    partner_lines = [entry.message for entry in run.feed if entry.type is FeedEntryType.PARTNER_ACTION]
    assert len(partner_lines) == 2
    assert "Ilsa" in partner_lines[0]
    assert partner_lines[1] == "Ilsa's enchantments amplified the party's power!"


def test_coop_failure_calls_out_defenders(scripted_rng) -> None:
    room = make_room("Pit", difficulty=1000, encounter=EncounterType.TRAP)
    dungeon = make_dungeon([room])
    party = [
        make_member("hero"),
        make_member("rook", class_key=ClassKey.RANGER),
        make_member("tess", class_key=ClassKey.PALADIN),
    ]
    run = DungeonRun.start(dungeon, party, is_coop=True)

    auto_run_dungeon(dungeon, run, party, rng=scripted_rng(0.99), loot_generator=_no_loot)

    messages = [entry.message for entry in run.feed]
    assert "Rook's Ranger instincts softened the blow." in messages
    assert "Tess's Paladin aura shielded the party from the worst of it." in messages


def test_manual_play_then_finish(scripted_rng) -> None:
    dungeon = _easy_dungeon(2)
    party = [make_member("hero", strength=20)]
    run = DungeonRun.start(dungeon, party)
    dash = Tactic(key="dash", name="Dash", primary_stat=StatType.DEXTERITY)

    first = play_room(dungeon, run, party, dash, rng=scripted_rng(0.0))
    second = play_room(dungeon, run, party, rng=scripted_rng(0.0))
    assert first is not None and first.tactic_name == "Dash"
    assert second is not None and second.tactic_name == "Direct"
    assert play_room(dungeon, run, party, rng=scripted_rng(0.0)) is None
    assert run.status is RunStatus.IN_PROGRESS

    result = finish_run(dungeon, run, party, loot_generator=_no_loot)
    assert result.success is True
    assert run.status is RunStatus.COMPLETED
    assert finish_run(dungeon, run, party, loot_generator=_no_loot) is result
    assert play_room(dungeon, run, party, rng=scripted_rng(0.0)) is None


def test_abandoned_manual_run_fails(scripted_rng) -> None:
    dungeon = _easy_dungeon(3)
    party = [make_member("hero", strength=20)]
    run = DungeonRun.start(dungeon, party)
    play_room(dungeon, run, party, rng=scripted_rng(0.0))

    result = finish_run(dungeon, run, party, loot_generator=_no_loot)

    assert result.success is False
    assert run.status is RunStatus.FAILED
    assert run.feed[-1].type is FeedEntryType.DUNGEON_FAILED


def test_completion_preview_does_not_stick_to_the_run(scripted_rng) -> None:
    dungeon = _easy_dungeon(2)
    party = [make_member("hero", strength=20)]
    run = DungeonRun.start(dungeon, party)

    play_room(dungeon, run, party, rng=scripted_rng(0.0))
    preview = process_dungeon_completion(dungeon, run, party, loot_generator=_no_loot)
    play_room(dungeon, run, party, rng=scripted_rng(0.0))
    result = finish_run(dungeon, run, party, loot_generator=_no_loot, rng=scripted_rng(0.99))

    assert preview.success is False
    assert preview.rooms_cleared == 1
    assert result is not preview
    assert result.success is True
    assert result.rooms_cleared == 2
    assert result.total_exp == 120
    assert run.completion is result


def test_combat_partner_line_follows_class_line() -> None:
    warrior = make_member("brannoc", class_key=ClassKey.WARRIOR)
    archer = make_member("rook", class_key=ClassKey.RANGER)
    plain = make_member("pip")
    rng = random.Random(4)

    warrior_lines = {
        "Brannoc charged in alongside you!",
        "Brannoc landed a crushing blow from the flank!",
        "Brannoc held the line while you struck!",
    }
    archer_lines = {
        "Rook provided deadly covering fire!",
        "Rook picked off stragglers from the shadows!",
        "Rook called out the enemy's weak point!",
    }
    for _ in range(10):
        assert partner_flavor(EncounterType.COMBAT, True, warrior, rng) in warrior_lines
        assert partner_flavor(EncounterType.COMBAT, True, archer, rng) in archer_lines
        assert partner_flavor(EncounterType.COMBAT, True, plain, rng) == "Pip fought bravely at your side!"


def test_non_combat_partner_lines_ignore_class_line() -> None:
    warrior = make_member("brannoc", class_key=ClassKey.WARRIOR)
    line = partner_flavor(EncounterType.PUZZLE, True, warrior, random.Random(0))
    assert line in {
        "Brannoc pointed out a clue you missed!",
        "Brannoc's knowledge filled in the gaps!",
        "Brannoc worked the other half of the mechanism!",
    }
    failure = partner_flavor(EncounterType.TRAP, False, warrior, random.Random(0))
    assert failure is not None and "Brannoc" in failure
