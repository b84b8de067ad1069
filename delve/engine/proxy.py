"""Stand-in characters for partners known only by summary data."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from delve.characters import CLASS_PROFILES, STAT_ORDER, Character, ClassKey, Stats
from delve.content import StatType

__all__ = [
    "PROXY_PRIMARY_BONUS",
    "PartnerSummary",
    "build_partner_proxy",
    "build_party_proxies",
    "default_stat_total",
]

PROXY_PRIMARY_BONUS = 2


@dataclass(frozen=True)
class PartnerSummary:
    """Cached facts about a partner's character."""

    id: str
    name: str
    level: int = 1
    class_key: ClassKey | None = None
    stat_total: int | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "PartnerSummary":
        class_value = data.get("class")
        stat_total = data.get("stat_total")
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "Partner")),
            level=int(data.get("level", 1)),
            class_key=ClassKey(str(class_value).lower()) if class_value else None,
            stat_total=int(stat_total) if stat_total is not None else None,
        )


def default_stat_total(level: int) -> int:
    return level * 5 + 25


def build_partner_proxy(summary: PartnerSummary | None) -> Character | None:
    """Synthesize a party member from ``summary``; ``None`` when nothing is cached."""

    if summary is None:
        return None
    total = summary.stat_total if summary.stat_total is not None else default_stat_total(summary.level)
    per_stat, remainder = divmod(max(0, total), len(STAT_ORDER))
    values = {stat.value: per_stat for stat in STAT_ORDER}
    if summary.class_key is not None:
        primary = CLASS_PROFILES[summary.class_key].primary_stat
        values[primary.value] += remainder + PROXY_PRIMARY_BONUS
    else:
        values[StatType.STRENGTH.value] += remainder
    return Character(
        id=summary.id,
        name=summary.name,
        level=max(1, summary.level),
        stats=Stats(**values),
        class_key=summary.class_key,
        is_proxy=True,
    )


def build_party_proxies(summaries: Iterable[PartnerSummary | None]) -> list[Character]:
    proxies: list[Character] = []
    for summary in summaries:
        proxy = build_partner_proxy(summary)
        if proxy is not None:
            proxies.append(proxy)
    return proxies
