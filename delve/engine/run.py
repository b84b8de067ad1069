"""Mutable state for a single dungeon run."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, List, Sequence

from delve.characters import Character
from delve.content import Dungeon

if TYPE_CHECKING:
    from .completion import DungeonCompletionResult

__all__ = ["DungeonRun", "FeedEntry", "FeedEntryType", "RoomResult", "RunStatus"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RunStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not RunStatus.IN_PROGRESS


class FeedEntryType(str, Enum):
    ROOM_ENTERED = "room_entered"
    TACTIC_CHOSEN = "tactic_chosen"
    OUTCOME_SUCCESS = "outcome_success"
    OUTCOME_FAILURE = "outcome_failure"
    LOOT_FOUND = "loot_found"
    PARTNER_ACTION = "partner_action"
    DUNGEON_COMPLETE = "dungeon_complete"
    DUNGEON_FAILED = "dungeon_failed"
    SECRET_DISCOVERY = "secret_discovery"


@dataclass(frozen=True)
class FeedEntry:
    type: FeedEntryType
    message: str
    timestamp: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class RoomResult:
    """Outcome of one room attempt."""

    room_index: int
    room_name: str
    success: bool
    power: float
    required_power: float
    exp_earned: int = 0
    gold_earned: int = 0
    hp_lost: int = 0
    loot_dropped: bool = False
    narrative: str = ""
    tactic_name: str | None = None


@dataclass
class DungeonRun:
    """Progress of one party through one dungeon.

    A run is owned by a single caller at a time. ``resolved`` is flipped
    before any simulation starts so that a second call on the same run takes
    the completion path instead of replaying rooms.
    """

    dungeon_name: str
    party_hp: int
    max_party_hp: int
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    current_room_index: int = 0
    total_exp: int = 0
    total_gold: int = 0
    room_results: List[RoomResult] = field(default_factory=list)
    status: RunStatus = RunStatus.IN_PROGRESS
    resolved: bool = False
    feed: List[FeedEntry] = field(default_factory=list)
    is_coop: bool = False
    participant_names: List[str] = field(default_factory=list)
    started_at: datetime = field(default_factory=_utcnow)
    completed_at: datetime | None = None
    completion: "DungeonCompletionResult | None" = None
    performance_rating: str | None = None
    performance_score: float | None = None

    @classmethod
    def start(
        cls,
        dungeon: Dungeon,
        party: Sequence[Character],
        is_coop: bool = False,
    ) -> "DungeonRun":
        lead = party[0] if party else None
        max_hp = max(0, lead.max_hp) if lead is not None else 100
        current_hp = max(0, min(lead.current_hp, max_hp)) if lead is not None else max_hp
        run = cls(
            dungeon_name=dungeon.name,
            party_hp=current_hp,
            max_party_hp=max_hp,
            is_coop=is_coop,
            participant_names=[member.name for member in party],
        )
        mode = "as a party" if is_coop else "solo"
        run.add_feed_entry(FeedEntryType.ROOM_ENTERED, f"Entered {dungeon.name} {mode}")
        return run

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def rooms_cleared(self) -> int:
        return sum(1 for result in self.room_results if result.success)

    def add_feed_entry(self, entry_type: FeedEntryType, message: str) -> FeedEntry:
        entry = FeedEntry(type=entry_type, message=message)
        self.feed.append(entry)
        return entry

    def record(self, result: RoomResult) -> None:
        """Fold a room result into the running totals."""

        self.room_results.append(result)
        self.total_exp += max(0, result.exp_earned)
        self.total_gold += max(0, result.gold_earned)
        self.party_hp = max(0, self.party_hp - max(0, result.hp_lost))
        self.current_room_index = max(self.current_room_index, result.room_index + 1)

    def finish(self, status: RunStatus) -> None:
        """Move the run into a terminal status; terminal runs never change again."""

        if self.is_terminal or not status.is_terminal:
            return
        self.status = status
        self.completed_at = _utcnow()
