"""Input adapters that normalize raw team/player data into catalog records."""

from .catalog import (
    CatalogFormatError,
    filter_players,
    load_catalog,
    load_default_catalog,
    load_players_csv,
    load_players_json,
    load_teams_json,
    summarize_catalog,
)

__all__ = [
    "CatalogFormatError",
    "filter_players",
    "load_catalog",
    "load_default_catalog",
    "load_players_csv",
    "load_players_json",
    "load_teams_json",
    "summarize_catalog",
]
