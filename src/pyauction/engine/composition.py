"""Squad composition counts derived from a team's acquisitions and the catalog.

Counts are recomputed from the catalog on every call rather than cached on
``TeamState``; the catalog is the only source of a player's role and
nationality.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Sequence

from pyauction.config import DEFAULT_SQUAD_CONSTRAINTS, SquadConstraints
from pyauction.models import ROLES, AcquiredPlayer, Catalog, PlayerRole, TeamState


def count_players_by_role(
    squad: Sequence[AcquiredPlayer],
    catalog: Catalog,
) -> Dict[PlayerRole, int]:
    """Return role -> count for every role, zero-filled."""

    counts: Dict[PlayerRole, int] = {role: 0 for role in ROLES}
    for acquired in squad:
        player = catalog.player(acquired.player_id)
        counts[player.role] += 1
    return counts


def count_overseas_players(squad: Sequence[AcquiredPlayer], catalog: Catalog) -> int:
    return sum(1 for acquired in squad if catalog.player(acquired.player_id).is_overseas)


@dataclass(frozen=True)
class RoleBreakdown:
    current: int
    min: int
    max: int


@dataclass(frozen=True)
class SquadSummary:
    team_id: str
    total_players: int
    max_players: int
    overseas_count: int
    max_overseas: int
    role_breakdown: Dict[PlayerRole, RoleBreakdown]
    budget_used: int
    budget_remaining: int


def squad_summary(
    team_state: TeamState,
    catalog: Catalog,
    constraints: SquadConstraints = DEFAULT_SQUAD_CONSTRAINTS,
) -> SquadSummary:
    role_counts = count_players_by_role(team_state.squad, catalog)
    breakdown = {
        role: RoleBreakdown(
            current=role_counts[role],
            min=constraints.limits_for(role).min,
            max=constraints.limits_for(role).max,
        )
        for role in ROLES
    }
    return SquadSummary(
        team_id=team_state.team_id,
        total_players=len(team_state.squad),
        max_players=constraints.max_squad_size,
        overseas_count=count_overseas_players(team_state.squad, catalog),
        max_overseas=constraints.max_overseas_players,
        role_breakdown=breakdown,
        budget_used=team_state.budget_spent,
        budget_remaining=team_state.remaining_budget,
    )
