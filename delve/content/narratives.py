"""Narrative text pools for room outcomes and co-op flavor."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple

from .loader import ContentLoadError, _load_structured
from .models import EncounterType, SchemaError, _coerce_enum, _coerce_mapping, _coerce_sequence

__all__ = ["NarrativeLibrary", "default_narratives", "load_narratives"]

NARRATIVES_PATH = Path(__file__).with_name("rules") / "narratives.yaml"

PoolKey = Tuple[EncounterType, Optional[str], bool]
ClassLineKey = Tuple[str, EncounterType]


def _strings(name: str, value: object) -> tuple[str, ...]:
    return tuple(str(entry) for entry in _coerce_sequence(name, value or ()))


@dataclass(frozen=True)
class NarrativeLibrary:
    """Read-only lookup of narrative lines.

    Room pools are keyed by ``(encounter, tactic_key, success)`` where a
    ``None`` tactic key marks the encounter's generic pool.
    Partner success lines may also be keyed by ``(class_line, encounter)``.
    """

    rooms: Mapping[PoolKey, tuple[str, ...]] = field(default_factory=dict)
    partner_success: Mapping[EncounterType, tuple[str, ...]] = field(default_factory=dict)
    partner_failure: tuple[str, ...] = ()
    partner_class_lines: Mapping[ClassLineKey, tuple[str, ...]] = field(default_factory=dict)
    synergy: Mapping[str, str] = field(default_factory=dict)

    def room_pool(
        self, encounter: EncounterType, tactic_key: str | None, success: bool
    ) -> tuple[str, ...]:
        if tactic_key is not None:
            pool = self.rooms.get((encounter, tactic_key, success))
            if pool:
                return pool
        return self.rooms.get((encounter, None, success), ())

    def partner_pool(
        self, encounter: EncounterType, success: bool, class_line: str | None = None
    ) -> tuple[str, ...]:
        if not success:
            return self.partner_failure
        if class_line is not None:
            pool = self.partner_class_lines.get((class_line, encounter))
            if pool:
                return pool
        return self.partner_success.get(encounter, ())

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "NarrativeLibrary":
        mapping = _coerce_mapping("narratives", data)
        rooms: Dict[PoolKey, tuple[str, ...]] = {}
        for encounter_name, section in _coerce_mapping("rooms", mapping.get("rooms", {})).items():
            encounter = _coerce_enum(EncounterType, "encounter type", encounter_name)
            section = _coerce_mapping(f"rooms.{encounter.value}", section)
            rooms[(encounter, None, True)] = _strings("success", section.get("success"))
            rooms[(encounter, None, False)] = _strings("failure", section.get("failure"))
            tactics = _coerce_mapping("tactics", section.get("tactics") or {})
            for tactic_key, pools in tactics.items():
                pools = _coerce_mapping(f"tactics.{tactic_key}", pools)
                rooms[(encounter, str(tactic_key), True)] = _strings("success", pools.get("success"))
                rooms[(encounter, str(tactic_key), False)] = _strings("failure", pools.get("failure"))

        partner = _coerce_mapping("partner", mapping.get("partner", {}))
        partner_success = {
            _coerce_enum(EncounterType, "encounter type", name): _strings(str(name), lines)
            for name, lines in _coerce_mapping("partner.success", partner.get("success", {})).items()
        }
        partner_class_lines: Dict[ClassLineKey, tuple[str, ...]] = {}
        for line, pools in _coerce_mapping("partner.class_lines", partner.get("class_lines") or {}).items():
            for name, lines in _coerce_mapping(f"partner.class_lines.{line}", pools).items():
                encounter = _coerce_enum(EncounterType, "encounter type", name)
                partner_class_lines[(str(line), encounter)] = _strings(str(name), lines)
        synergy = {
            str(key): str(line)
            for key, line in _coerce_mapping("synergy", mapping.get("synergy", {})).items()
        }
        return cls(
            rooms=rooms,
            partner_success=partner_success,
            partner_failure=_strings("partner.failure", partner.get("failure")),
            partner_class_lines=partner_class_lines,
            synergy=synergy,
        )


def load_narratives(path: Path | None = None) -> NarrativeLibrary:
    file_path = path or NARRATIVES_PATH
    raw = _load_structured(file_path)
    try:
        return NarrativeLibrary.from_mapping(raw or {})
    except SchemaError as exc:
        raise ContentLoadError(str(exc), path=file_path) from exc


@lru_cache(maxsize=1)
def default_narratives() -> NarrativeLibrary:
    """Return the narrative pools shipped with the package."""

    return load_narratives()
