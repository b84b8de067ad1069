"""Structured content loading helpers."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, Mapping, Sequence

import yaml

from .models import Dungeon, EncounterType, SchemaError, Tactic
from .registry import DungeonRegistry

__all__ = ["ContentLibrary", "ContentLoadError", "load_default_tactics"]

log = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".json", ".yaml", ".yml")
RULES_PATH = Path(__file__).with_name("rules")


class ContentLoadError(RuntimeError):
    """Raised when content could not be loaded from disk."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        if path is not None:
            message = f"{message} (source: {path})"
        super().__init__(message)
        self.path = path


def _load_structured(file_path: Path) -> object:
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ContentLoadError("Unable to read content file", path=file_path) from exc
    suffix = file_path.suffix.lower()
    try:
        if suffix == ".json":
            return json.loads(text)
        if suffix in {".yaml", ".yml"}:
            return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ContentLoadError("Failed to parse structured content", path=file_path) from exc
    raise ContentLoadError(
        f"Unsupported file extension '{file_path.suffix}' for content file",
        path=file_path,
    )


def load_default_tactics(path: Path | None = None) -> Dict[EncounterType, tuple[Tactic, ...]]:
    """Load the per-encounter default tactic pools."""

    file_path = path or RULES_PATH / "tactics.yaml"
    raw = _load_structured(file_path)
    if not isinstance(raw, Mapping):
        raise ContentLoadError("Tactic pools must be a mapping of encounter types", path=file_path)
    pools: Dict[EncounterType, tuple[Tactic, ...]] = {}
    for encounter_name, entries in raw.items():
        try:
            encounter = EncounterType(str(encounter_name).lower())
        except ValueError:
            raise ContentLoadError(
                f"Unknown encounter type '{encounter_name}' in tactic pools", path=file_path
            ) from None
        if not isinstance(entries, Sequence) or isinstance(entries, (str, bytes)):
            raise ContentLoadError(f"Tactic pool for {encounter.value} must be a list", path=file_path)
        try:
            pools[encounter] = tuple(Tactic.from_mapping(entry) for entry in entries)
        except SchemaError as exc:
            raise ContentLoadError(str(exc), path=file_path) from exc
    return pools


@dataclass(frozen=True)
class ContentLibrary:
    """Container bundling the loaded dungeon definitions."""

    base_path: Path
    dungeons: DungeonRegistry
    default_tactics: Mapping[EncounterType, Sequence[Tactic]] = field(default_factory=dict)

    @classmethod
    def load_from_path(cls, base_path: Path) -> "ContentLibrary":
        loader = _ContentLoader(base_path)
        return loader.load()


class _ContentLoader:
    def __init__(self, base_path: Path) -> None:
        self.base_path = base_path

    # -- public entrypoint -------------------------------------------------
    def load(self) -> ContentLibrary:
        default_tactics = load_default_tactics()
        dungeons = self._load_dungeons(default_tactics)
        log.info("Loaded %s dungeons from %s", len(dungeons), self.base_path)
        return ContentLibrary(
            base_path=self.base_path,
            dungeons=dungeons,
            default_tactics=default_tactics,
        )

    # -- concrete loaders --------------------------------------------------
    def _load_dungeons(
        self, default_tactics: Mapping[EncounterType, Sequence[Tactic]]
    ) -> DungeonRegistry:
        registry = DungeonRegistry()
        for file_path in self._dungeon_files():
            for key, mapping in _dungeon_entries(file_path):
                try:
                    dungeon = Dungeon.from_mapping(key, mapping, default_tactics=default_tactics)
                    registry.register(dungeon.key, dungeon)
                except (SchemaError, TypeError, ValueError) as exc:
                    raise ContentLoadError(str(exc), path=file_path) from exc
        return registry

    def _dungeon_files(self) -> Iterator[Path]:
        folder = self.base_path / "dungeons"
        if not folder.is_dir():
            log.warning("No dungeon folder under %s", self.base_path)
            return
        for file_path in sorted(folder.iterdir()):
            if file_path.is_file() and file_path.suffix.lower() in SUPPORTED_EXTENSIONS:
                yield file_path


def _declared_key(mapping: Mapping[str, object]) -> str | None:
    for field_name in ("id", "key", "slug"):
        value = mapping.get(field_name)
        if isinstance(value, str) and value.strip():
            return value
    return None


def _dungeon_entries(file_path: Path) -> Iterator[tuple[str, Dict[str, object]]]:
    """Yield ``(key, mapping)`` pairs from one dungeon file.

    A file holds either a single dungeon or a list of them. Without a declared
    key the file stem is used, suffixed with the list position for lists.
    """

    raw = _load_structured(file_path)
    if isinstance(raw, Mapping):
        yield _declared_key(raw) or file_path.stem, dict(raw)
        return
    if not isinstance(raw, list):
        raise ContentLoadError(
            "Dungeon files must hold a mapping or a list of mappings", path=file_path
        )
    for position, element in enumerate(raw):
        if not isinstance(element, Mapping):
            raise ContentLoadError(
                f"Dungeon entry {position} is not a mapping", path=file_path
            )
        yield _declared_key(element) or f"{file_path.stem}-{position}", dict(element)
