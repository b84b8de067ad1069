import argparse
import logging
import os
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import yaml
from dotenv import load_dotenv

from delve.characters import Character
from delve.content import ContentLibrary, ContentLoadError
from delve.engine import (
    DungeonCompletionResult,
    DungeonLootGenerator,
    DungeonRun,
    PartnerSummary,
    auto_run_dungeon,
    build_partner_proxy,
    chance_label,
    format_item_label,
    overall_success_estimate,
)

log = logging.getLogger("autorun")


@dataclass(frozen=True)
class Settings:
    data_path: Path
    seed: int | None
    log_level: str


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )


def load_environment() -> Settings:
    load_dotenv()
    seed_raw = os.getenv("DELVE_SEED")
    seed: int | None = None
    if seed_raw:
        try:
            seed = int(seed_raw)
        except ValueError:
            raise RuntimeError("DELVE_SEED must be an integer when set.") from None
    return Settings(
        data_path=Path(os.getenv("DELVE_DATA_PATH", "data")),
        seed=seed,
        log_level=os.getenv("DELVE_LOG_LEVEL", "INFO"),
    )


def _read_yaml(path: Path) -> object:
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ContentLoadError("Unable to read file", path=path) from exc
    except yaml.YAMLError as exc:
        raise ContentLoadError("Failed to parse YAML", path=path) from exc


def load_party(path: Path) -> list[Character]:
    raw = _read_yaml(path)
    entries = raw if isinstance(raw, list) else [raw]
    try:
        return [Character.from_dict(entry) for entry in entries]
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise ContentLoadError(f"Invalid party definition: {exc}", path=path) from exc


def load_partner(path: Path) -> PartnerSummary:
    raw = _read_yaml(path)
    if not isinstance(raw, dict):
        raise ContentLoadError("Partner file must contain a mapping", path=path)
    try:
        return PartnerSummary.from_dict(raw)
    except (KeyError, TypeError, ValueError) as exc:
        raise ContentLoadError(f"Invalid partner summary: {exc}", path=path) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Auto-run a dungeon with a party and print the adventure feed."
    )
    parser.add_argument("dungeon", help="Dungeon key or name")
    parser.add_argument("--party", type=Path, help="YAML file with the party members")
    parser.add_argument("--partner", type=Path, help="YAML file with a partner summary")
    parser.add_argument("--coop", action="store_true", help="Run as a cooperative party")
    parser.add_argument("--seed", type=int, help="Random seed for a reproducible run")
    parser.add_argument("--data", type=Path, help="Content directory (default: DELVE_DATA_PATH)")
    return parser


def format_summary(result: DungeonCompletionResult) -> list[str]:
    outcome = "CLEARED" if result.success else "FAILED"
    lines = [
        f"{result.dungeon_name}: {outcome} (rating {result.performance_rating})",
        f"Rooms cleared: {result.rooms_cleared}/{result.total_rooms}",
        f"HP: {result.hp_remaining}/{result.max_hp}",
        f"Rewards: {result.total_exp} EXP, {result.total_gold} Gold",
    ]
    if result.bond_exp:
        lines.append(f"Bond EXP: +{result.bond_exp}")
    if result.secret is not None:
        lines.append(
            f"Secret cache: +{result.secret.bonus_gold} Gold, "
            f"+{result.secret.bonus_materials} materials"
        )
        if result.secret.equipment_drop:
            lines.append("Secret cache: bonus equipment")
    for item in result.loot:
        lines.append(f"Loot: {format_item_label(item)}")
    return lines


def run(args: argparse.Namespace, settings: Settings) -> int:
    library = ContentLibrary.load_from_path(args.data or settings.data_path)
    dungeon = library.dungeons.get(args.dungeon)

    party: list[Character] = load_party(args.party) if args.party else [
        Character(id="adventurer", name="Adventurer")
    ]
    is_coop = bool(args.coop)
    if args.partner:
        proxy = build_partner_proxy(load_partner(args.partner))
        if proxy is not None:
            party.append(proxy)
            is_coop = True

    seed = args.seed if args.seed is not None else settings.seed
    rng = random.Random(seed)
    estimate = overall_success_estimate(party, dungeon)
    log.info(
        "Running %s with %s member(s); estimated success %.0f%% (%s)",
        dungeon.name,
        len(party),
        estimate * 100,
        chance_label(estimate),
    )

    dungeon_run = DungeonRun.start(dungeon, party, is_coop=is_coop)
    result = auto_run_dungeon(
        dungeon, dungeon_run, party, rng=rng, loot_generator=DungeonLootGenerator(rng)
    )
    for entry in dungeon_run.feed:
        print(f"[{entry.type.value}] {entry.message}")
    print()
    for line in format_summary(result):
        print(line)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_environment()
    configure_logging(settings.log_level)
    try:
        return run(args, settings)
    except (ContentLoadError, KeyError) as exc:
        log.error("Unable to run dungeon: %s", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
