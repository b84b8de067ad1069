"""Dungeon encounter resolution and run progression."""

from .completion import (
    BOND_EXP_FOR_COOP_DUNGEON,
    DungeonCompletionResult,
    PerformanceRating,
    SecretDiscovery,
    process_dungeon_completion,
    stat_readiness,
)
from .loot import DungeonLootGenerator, LootItem, Rarity, format_item_label
from .odds import (
    chance_label,
    effective_power,
    overall_success_estimate,
    scaled_difficulty,
    success_chance,
)
from .orchestrator import auto_run_dungeon, finish_run, play_room
from .power import party_power, room_power
from .proxy import PartnerSummary, build_partner_proxy, build_party_proxies
from .resolver import resolve_room
from .run import DungeonRun, FeedEntry, FeedEntryType, RoomResult, RunStatus
from .tactics import default_tactic, select_best_tactic

__all__ = [
    "BOND_EXP_FOR_COOP_DUNGEON",
    "DungeonCompletionResult",
    "DungeonLootGenerator",
    "DungeonRun",
    "FeedEntry",
    "FeedEntryType",
    "LootItem",
    "PartnerSummary",
    "PerformanceRating",
    "Rarity",
    "RoomResult",
    "SecretDiscovery",
    "RunStatus",
    "auto_run_dungeon",
    "build_partner_proxy",
    "build_party_proxies",
    "chance_label",
    "default_tactic",
    "effective_power",
    "finish_run",
    "format_item_label",
    "overall_success_estimate",
    "party_power",
    "play_room",
    "process_dungeon_completion",
    "resolve_room",
    "room_power",
    "scaled_difficulty",
    "select_best_tactic",
    "stat_readiness",
    "success_chance",
]
