"""Helpers to load team and player catalogs from JSON seed files or CSV."""

from __future__ import annotations

import csv
import json
import logging
import os
import re
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from pydantic import ValidationError

from pyauction.models import Catalog, Player, PlayerStats, Team


logger = logging.getLogger(__name__)

_CATALOG_DIR_ENV = "PYAUCTION_CATALOG_DIR"
SAMPLE_DATA_DIR = Path(__file__).resolve().parent.parent / "data"

ROLE_ALIASES: dict[str, str] = {
    "BATTER": "batter",
    "BATSMAN": "batter",
    "BAT": "batter",
    "BOWLER": "bowler",
    "BOWL": "bowler",
    "ALLROUNDER": "all-rounder",
    "AR": "all-rounder",
    "WICKETKEEPER": "wicket-keeper",
    "KEEPER": "wicket-keeper",
    "WK": "wicket-keeper",
}

NATIONALITY_ALIASES: dict[str, str] = {
    "DOMESTIC": "domestic",
    "INDIAN": "domestic",
    "LOCAL": "domestic",
    "OVERSEAS": "overseas",
    "FOREIGN": "overseas",
    "INTERNATIONAL": "overseas",
}

DEFAULT_PLAYERS_MAPPING = {
    "player_id": "id",
    "name": "name",
    "role": "role",
    "nationality": "nationality",
    "base_price": "base_price",
    "matches": "matches",
    "batting_average": "batting_average",
    "bowling_average": "bowling_average",
    "strike_rate": "strike_rate",
    "economy_rate": "economy_rate",
}


class CatalogFormatError(ValueError):
    """Raised when a catalog file cannot be turned into records."""


def _token(value: str) -> str:
    return re.sub(r"[^A-Z]", "", value.upper())


def _canonical_role(raw: str) -> str:
    token = _token(raw)
    if token in ROLE_ALIASES:
        return ROLE_ALIASES[token]
    raise CatalogFormatError(f"Unknown player role {raw!r}")


def _canonical_nationality(raw: str) -> str:
    token = _token(raw)
    if token in NATIONALITY_ALIASES:
        return NATIONALITY_ALIASES[token]
    raise CatalogFormatError(f"Unknown nationality {raw!r}")


def _parse_whole_number(raw: Any, label: str) -> int:
    if isinstance(raw, bool):
        raise CatalogFormatError(f"{label} {raw!r} is not a number")
    if isinstance(raw, int):
        value = Decimal(raw)
    else:
        text = re.sub(r"[\s,$₹£€]", "", str(raw))
        if not text:
            raise CatalogFormatError(f"{label} {raw!r} has no digits")
        try:
            value = Decimal(text)
        except InvalidOperation:
            raise CatalogFormatError(f"{label} {raw!r} is not numeric") from None
    if not value.is_finite() or value != value.to_integral_value():
        raise CatalogFormatError(f"{label} {raw!r} must be a whole number")
    if value < 0:
        raise CatalogFormatError(f"{label} {raw!r} must not be negative")
    return int(value)


def _parse_price(raw_price: Any) -> int:
    return _parse_whole_number(raw_price, "price")



def _parse_optional_float(raw: Any) -> Optional[float]:
    if raw is None:
        return None
    if isinstance(raw, (int, float)):
        return float(raw)
    text = str(raw).strip()
    if not text or text in {"-", "NA", "N/A", "null"}:
        return None
    try:
        return float(text)
    except ValueError:
        raise CatalogFormatError(f"value {raw!r} is not numeric") from None


def team_from_payload(payload: Mapping[str, Any]) -> Team:
    try:
        return Team(
            id=str(payload["id"]),
            name=payload["name"],
            short_name=payload.get("shortName") or payload.get("short_name") or payload["name"][:3].upper(),
            budget=_parse_price(payload["budget"]),
            primary_color=payload.get("primaryColor") or payload.get("primary_color") or "#000000",
        )
    except (KeyError, ValidationError) as exc:
        raise CatalogFormatError(f"Invalid team entry {payload!r}: {exc}") from exc


def player_from_payload(payload: Mapping[str, Any]) -> Player:
    stats = payload.get("stats") or {}
    try:
        return Player(
            id=str(payload["id"]),
            name=payload["name"],
            role=_canonical_role(payload["role"]),
            nationality=_canonical_nationality(payload["nationality"]),
            base_price=_parse_price(payload.get("basePrice", payload.get("base_price"))),
            stats=PlayerStats(
                matches=_parse_whole_number(stats.get("matches") or 0, "matches"),
                batting_average=_parse_optional_float(stats.get("battingAverage", stats.get("batting_average"))),
                bowling_average=_parse_optional_float(stats.get("bowlingAverage", stats.get("bowling_average"))),
                strike_rate=_parse_optional_float(stats.get("strikeRate", stats.get("strike_rate"))),
                economy_rate=_parse_optional_float(stats.get("economyRate", stats.get("economy_rate"))),
            ),
        )
    except (KeyError, ValidationError) as exc:
        raise CatalogFormatError(f"Invalid player entry {payload!r}: {exc}") from exc


def _read_json_list(path: Path) -> List[Mapping[str, Any]]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise CatalogFormatError(f"{path} must contain a JSON list")
    return data


def load_teams_json(path: Path) -> List[Team]:
    return [team_from_payload(entry) for entry in _read_json_list(path)]


def load_players_json(path: Path) -> List[Player]:
    return [player_from_payload(entry) for entry in _read_json_list(path)]


def _row_to_player(row: Mapping[str, str], mapping: Mapping[str, str]) -> Player:
    def extract(key: str) -> Optional[str]:
        column = mapping.get(key)
        if column is None:
            return None
        value = row.get(column)
        return value.strip() if value is not None else None

    stats = {
        "matches": extract("matches") or 0,
        "batting_average": extract("batting_average"),
        "bowling_average": extract("bowling_average"),
        "strike_rate": extract("strike_rate"),
        "economy_rate": extract("economy_rate"),
    }
    return player_from_payload(
        {
            "id": extract("player_id") or "",
            "name": extract("name") or "",
            "role": extract("role") or "",
            "nationality": extract("nationality") or "",
            "base_price": extract("base_price") or "",
            "stats": stats,
        }
    )


def load_players_csv(path: Path, *, mapping: Mapping[str, str] | None = None) -> List[Player]:
    mapping = {**DEFAULT_PLAYERS_MAPPING, **(mapping or {})}
    with path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        players = [_row_to_player(row, mapping) for row in reader]
    logger.info("Loaded %s players from %s", len(players), path)
    return players


def load_catalog(
    teams_path: Path,
    players_path: Path,
    *,
    players_mapping: Mapping[str, str] | None = None,
) -> Catalog:
    """Build a catalog; players may come from JSON or CSV (by file suffix)."""

    teams = load_teams_json(teams_path)
    if players_path.suffix.lower() == ".csv":
        players = load_players_csv(players_path, mapping=players_mapping)
    else:
        players = load_players_json(players_path)
    try:
        catalog = Catalog.build(players, teams)
    except ValueError as exc:
        raise CatalogFormatError(str(exc)) from exc
    logger.info("Catalog ready: %s teams, %s players", len(catalog.teams), len(catalog.players))
    return catalog


def catalog_dir() -> Path:
    raw = os.getenv(_CATALOG_DIR_ENV)
    if raw:
        return Path(raw)
    return SAMPLE_DATA_DIR


def load_default_catalog() -> Catalog:
    """Load ``teams.json`` and ``players.json`` from the configured directory."""

    directory = catalog_dir()
    return load_catalog(directory / "teams.json", directory / "players.json")


def summarize_catalog(players: Sequence[Player]) -> Dict[str, int]:
    summary: Dict[str, int] = {}
    for player in players:
        summary[player.role] = summary.get(player.role, 0) + 1
    summary["overseas"] = sum(1 for player in players if player.is_overseas)
    return summary


def filter_players(players: Iterable[Player], *, exclude_ids: Iterable[str] = ()) -> List[Player]:
    excluded = set(exclude_ids)
    return [player for player in players if player.id not in excluded]
