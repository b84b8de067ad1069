"""Equipment drops awarded on dungeon completion."""

from __future__ import annotations

import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Mapping, Protocol, Sequence

from delve.content import DifficultyTier, StatType
from delve.content.models import slugify

from .run import RoomResult

__all__ = [
    "DungeonLootGenerator",
    "EquipmentSlot",
    "LootGenerator",
    "LootItem",
    "Rarity",
    "format_item_label",
]


class Rarity(str, Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class EquipmentSlot(str, Enum):
    WEAPON = "weapon"
    ARMOR = "armor"
    ACCESSORY = "accessory"


# Adjusted roll needed for each rarity, best first.
RARITY_THRESHOLDS: tuple[tuple[float, Rarity], ...] = (
    (95.0, Rarity.LEGENDARY),
    (82.0, Rarity.EPIC),
    (65.0, Rarity.RARE),
    (40.0, Rarity.UNCOMMON),
)

STAT_BONUS_RANGES: Mapping[Rarity, tuple[int, int]] = {
    Rarity.COMMON: (1, 3),
    Rarity.UNCOMMON: (2, 5),
    Rarity.RARE: (4, 8),
    Rarity.EPIC: (7, 12),
    Rarity.LEGENDARY: (10, 18),
}

# (chance, bonus range) for a secondary stat; commons never roll one.
SECONDARY_STAT_ODDS: Mapping[Rarity, tuple[float, tuple[int, int]]] = {
    Rarity.UNCOMMON: (0.3, (1, 2)),
    Rarity.RARE: (0.6, (2, 4)),
    Rarity.EPIC: (0.8, (3, 6)),
    Rarity.LEGENDARY: (1.0, (5, 10)),
}

NAME_PREFIXES: Mapping[Rarity, tuple[str, ...]] = {
    Rarity.COMMON: ("Worn", "Rusty", "Simple", "Basic", "Crude", "Old"),
    Rarity.UNCOMMON: ("Iron", "Steel", "Sturdy", "Polished", "Fine", "Hardened"),
    Rarity.RARE: ("Enchanted", "Arcane", "Blessed", "Tempered", "Gleaming", "Runic"),
    Rarity.EPIC: ("Mythril", "Shadowforged", "Dragonscale", "Celestial", "Void-touched", "Soulbound"),
    Rarity.LEGENDARY: ("Divine", "Abyssal", "Primordial", "Eternal", "Astral", "Godforged"),
}

NAME_BASES: Mapping[EquipmentSlot, tuple[str, ...]] = {
    EquipmentSlot.WEAPON: ("Sword", "Axe", "Staff", "Dagger", "Bow", "Wand", "Mace", "Spear"),
    EquipmentSlot.ARMOR: ("Plate", "Chainmail", "Robes", "Leather Armor", "Breastplate", "Helm", "Gauntlets"),
    EquipmentSlot.ACCESSORY: ("Ring", "Amulet", "Cloak", "Bracelet", "Charm", "Pendant", "Belt"),
}

NAME_SUFFIXES: Mapping[StatType, tuple[str, ...]] = {
    StatType.STRENGTH: ("of Power", "of the Bear", "of Might", "of Valor", "of Fury"),
    StatType.WISDOM: ("of Insight", "of the Owl", "of Knowledge", "of Clarity", "of the Mind"),
    StatType.CHARISMA: ("of Charm", "of the Siren", "of Grace", "of Allure", "of Leadership"),
    StatType.DEXTERITY: ("of Agility", "of the Fox", "of Speed", "of Precision", "of the Wind"),
    StatType.LUCK: ("of Fortune", "of the Rabbit", "of Serendipity", "of Fate", "of the Stars"),
}

MAX_ROOM_DROP_CHANCE = 0.8


@dataclass(frozen=True)
class LootItem:
    """A single piece of equipment found in a dungeon."""

    key: str
    name: str
    rarity: Rarity
    slot: EquipmentSlot
    primary_stat: StatType
    stat_bonus: int
    secondary_stat: StatType | None = None
    secondary_bonus: int = 0
    owner_id: str | None = None

    def owned_by(self, owner_id: str | None) -> "LootItem":
        return replace(self, owner_id=owner_id)


class LootGenerator(Protocol):
    def __call__(
        self,
        tier: int,
        luck: int,
        room_results: Sequence[RoomResult],
        difficulty: DifficultyTier,
        class_loot_bonus: float,
    ) -> Sequence[LootItem]: ...


def format_item_label(item: LootItem) -> str:
    """Return a user-facing label for a loot item."""

    label = f"{item.name} ({item.rarity.value}, +{item.stat_bonus} {item.primary_stat.label}"
    if item.secondary_stat is not None and item.secondary_bonus:
        label += f", +{item.secondary_bonus} {item.secondary_stat.label}"
    return label + ")"


class DungeonLootGenerator:
    """Default loot generator for completed dungeons.

    Every successful room gets a chance at a drop, boosted when the room
    itself rolled bonus loot. Tiers above normal add one guaranteed item at
    ``tier + 1``.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def __call__(
        self,
        tier: int,
        luck: int,
        room_results: Sequence[RoomResult],
        difficulty: DifficultyTier,
        class_loot_bonus: float,
    ) -> list[LootItem]:
        drops: list[LootItem] = []
        for result in room_results:
            if not result.success:
                continue
            if self._rng.random() <= self.room_drop_chance(
                tier, luck, class_loot_bonus, result.loot_dropped
            ):
                drops.append(self.generate_item(tier, luck))
        if difficulty is not DifficultyTier.NORMAL:
            drops.append(self.generate_item(tier + 1, luck))
        return drops

    @staticmethod
    def room_drop_chance(tier: int, luck: int, class_loot_bonus: float, loot_dropped: bool) -> float:
        chance = 0.15 + 0.05 * tier + class_loot_bonus + 0.005 * luck
        if loot_dropped:
            chance += 0.3
        return min(MAX_ROOM_DROP_CHANCE, chance)

    def roll_rarity(self, tier: int, luck: int) -> Rarity:
        adjusted = self._rng.uniform(0, 100) + luck * 0.5 + tier * 3.0
        for threshold, rarity in RARITY_THRESHOLDS:
            if adjusted >= threshold:
                return rarity
        return Rarity.COMMON

    def generate_item(self, tier: int, luck: int) -> LootItem:
        generator = self._rng
        slot = generator.choice(list(EquipmentSlot))
        rarity = self.roll_rarity(tier, luck)
        primary_stat = generator.choice(list(StatType))
        stat_bonus = generator.randint(*STAT_BONUS_RANGES[rarity])

        secondary_stat: StatType | None = None
        secondary_bonus = 0
        odds = SECONDARY_STAT_ODDS.get(rarity)
        if odds is not None and generator.random() <= odds[0]:
            secondary_stat = generator.choice([stat for stat in StatType if stat is not primary_stat])
            secondary_bonus = generator.randint(*odds[1])

        name = f"{generator.choice(NAME_PREFIXES[rarity])} {generator.choice(NAME_BASES[slot])}"
        if rarity is not Rarity.COMMON:
            name = f"{name} {generator.choice(NAME_SUFFIXES[primary_stat])}"
        return LootItem(
            key=f"{slugify(name)}-{generator.getrandbits(32):08x}",
            name=name,
            rarity=rarity,
            slot=slot,
            primary_stat=primary_stat,
            stat_bonus=stat_bonus,
            secondary_stat=secondary_stat,
            secondary_bonus=secondary_bonus,
        )
