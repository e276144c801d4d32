"""Command-line interface for running a simulated auction end to end."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from pyauction.config import get_constraints
from pyauction.config_loader import ConstraintsProfile
from pyauction.engine.state_machine import SaleListener
from pyauction.ingest import filter_players, load_catalog, load_default_catalog, summarize_catalog
from pyauction.models import Catalog
from pyauction.persistence import SaleStore, SaleStoreSink
from pyauction.simulation import SimulationResult, simulate_auction


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulate a cricket player auction with bot bidders")
    parser.add_argument("--teams", type=Path, default=None, help="Teams JSON (defaults to the sample catalog)")
    parser.add_argument(
        "--players",
        type=Path,
        default=None,
        help="Players JSON or CSV (defaults to the sample catalog)",
    )
    parser.add_argument(
        "--players-column",
        action="append",
        default=[],
        help="Mapping for players CSV columns (e.g., base_price=Base Price)",
    )
    parser.add_argument("--format", default="T20", help="Named squad constraints (e.g., T20, COMPACT)")
    parser.add_argument("--load-profile", type=Path, help="Load squad constraints JSON", default=None)
    parser.add_argument("--save-profile", type=Path, help="Save squad constraints JSON", default=None)
    parser.add_argument(
        "--exclude",
        nargs="*",
        default=None,
        help="Player IDs to keep out of the auction",
    )
    parser.add_argument(
        "--aggression",
        type=float,
        default=None,
        help="Multiplier applied to bot ceilings (0.1-2.0)",
    )
    parser.add_argument("--db", type=Path, default=None, help="Optional SQLite path to record sales")
    parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Optional path to write the auction summary JSON",
    )
    parser.add_argument("--verbose", action="store_true", help="Log every lot")
    return parser.parse_args()


def _parse_mapping(entries: list[str]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for entry in entries:
        if "=" not in entry:
            raise ValueError(f"Invalid mapping entry '{entry}', expected key=value")
        key, value = entry.split("=", 1)
        mapping[key.strip()] = value.strip()
    return mapping


def _report_payload(catalog: Catalog, result: SimulationResult) -> dict:
    teams = []
    for team in result.state.teams if result.state else ():
        check = result.final_report.get(team.team_id)
        teams.append(
            {
                "team_id": team.team_id,
                "players": [acquired.player_id for acquired in team.squad],
                "budget_spent": team.budget_spent,
                "remaining_budget": team.remaining_budget,
                "squad_valid": check.is_valid if check else None,
                "violations": [violation.message for violation in check.violations] if check else [],
            }
        )
    return {
        "players_auctioned": len(result.outcomes),
        "sold": len(result.sold),
        "unsold": [outcome.player_id for outcome in result.unsold],
        "total_spent": result.total_spent,
        "teams": teams,
        "catalog": summarize_catalog(catalog.players),
    }


def main() -> None:
    args = _parse_args()
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    if args.teams or args.players:
        if not (args.teams and args.players):
            raise SystemExit("--teams and --players must be given together")
        catalog = load_catalog(
            args.teams,
            args.players,
            players_mapping=_parse_mapping(args.players_column) or None,
        )
    else:
        catalog = load_default_catalog()

    if args.load_profile:
        constraints = ConstraintsProfile.load(args.load_profile).to_constraints()
    else:
        constraints = get_constraints(args.format)
    if args.save_profile:
        ConstraintsProfile.from_constraints(constraints).save(args.save_profile)
        print(f"Saved constraints profile to {args.save_profile}")

    players = filter_players(catalog.players, exclude_ids=args.exclude or ())
    summary = summarize_catalog(players)
    print(
        f"Auctioning {len(players)} players across {len(catalog.teams)} teams "
        f"({constraints.name}): " + ", ".join(f"{key}={value}" for key, value in sorted(summary.items()))
    )

    listeners: list[SaleListener] = []
    store = None
    auction_id = None
    if args.db:
        store = SaleStore(args.db)
        auction_id = store.start_auction(name="cli", constraints=constraints.name).auction_id
        listeners.append(SaleStoreSink(store, auction_id))

    result = simulate_auction(
        catalog,
        constraints=constraints,
        players=players,
        listeners=listeners,
        aggression=args.aggression,
    )
    if store is not None and auction_id is not None:
        store.complete_auction(auction_id)
        print(f"Recorded auction {auction_id} in {store.db_path}")

    print(f"Sold {len(result.sold)}/{len(result.outcomes)} players for {result.total_spent} in total")
    if result.unsold:
        preview = ", ".join(outcome.player_id for outcome in result.unsold[:5])
        more = len(result.unsold) - 5
        suffix = f", +{more} more" if more > 0 else ""
        print(f"Unsold: {preview}{suffix}")
    for team_id, check in result.final_report.items():
        status = "OK" if check.is_valid else f"{len(check.violations)} issue(s): {check.first_message}"
        print(f"  {team_id}: {status}")

    if args.report:
        args.report.write_text(json.dumps(_report_payload(catalog, result), indent=2), encoding="utf-8")
        print(f"Wrote auction report to {args.report}")


if __name__ == "__main__":
    main()
