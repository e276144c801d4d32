"""Bid and squad legality checks.

Every check returns a ``ValidationResult``; business-rule failures are never
raised. ``validate_acquisition`` runs all of its checks and accumulates the
violations so a caller can show every blocking reason at once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from pyauction.config import DEFAULT_SQUAD_CONSTRAINTS, DEFAULT_TIMING, AuctionTiming, SquadConstraints
from pyauction.models import AuctionState, BiddingState, Catalog, Player, TeamState

from .composition import count_overseas_players, count_players_by_role


class ViolationKind(str, Enum):
    INSUFFICIENT_BUDGET = "INSUFFICIENT_BUDGET"
    SQUAD_FULL = "SQUAD_FULL"
    ROLE_LIMIT_EXCEEDED = "ROLE_LIMIT_EXCEEDED"
    OVERSEAS_LIMIT_EXCEEDED = "OVERSEAS_LIMIT_EXCEEDED"
    BID_TOO_LOW = "BID_TOO_LOW"
    UNKNOWN_TEAM = "UNKNOWN_TEAM"
    AUCTION_NOT_ACTIVE = "AUCTION_NOT_ACTIVE"
    SQUAD_TOO_SMALL = "SQUAD_TOO_SMALL"
    ROLE_MINIMUM_NOT_MET = "ROLE_MINIMUM_NOT_MET"


@dataclass(frozen=True)
class Violation:
    kind: ViolationKind
    message: str
    context: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ValidationResult:
    violations: Tuple[Violation, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.violations

    @property
    def kinds(self) -> Tuple[ViolationKind, ...]:
        return tuple(violation.kind for violation in self.violations)

    @property
    def first_message(self) -> Optional[str]:
        return self.violations[0].message if self.violations else None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def failed(cls, *violations: Violation) -> "ValidationResult":
        return cls(violations=tuple(violations))

    @classmethod
    def merge(cls, results: Iterable["ValidationResult"]) -> "ValidationResult":
        collected: List[Violation] = []
        for result in results:
            collected.extend(result.violations)
        return cls(violations=tuple(collected))


def validate_budget(team_state: TeamState, bid_amount: int) -> ValidationResult:
    if bid_amount > team_state.remaining_budget:
        return ValidationResult.failed(
            Violation(
                kind=ViolationKind.INSUFFICIENT_BUDGET,
                message=(
                    f"Insufficient budget. Required: {bid_amount}, "
                    f"available: {team_state.remaining_budget}"
                ),
                context={
                    "required": bid_amount,
                    "available": team_state.remaining_budget,
                    "shortfall": bid_amount - team_state.remaining_budget,
                },
            )
        )
    return ValidationResult.ok()


def validate_squad_size(
    team_state: TeamState,
    constraints: SquadConstraints = DEFAULT_SQUAD_CONSTRAINTS,
) -> ValidationResult:
    current_size = len(team_state.squad)
    if current_size >= constraints.max_squad_size:
        return ValidationResult.failed(
            Violation(
                kind=ViolationKind.SQUAD_FULL,
                message=f"Squad is full. Maximum {constraints.max_squad_size} players allowed.",
                context={"current_size": current_size, "max_size": constraints.max_squad_size},
            )
        )
    return ValidationResult.ok()


def validate_role_limits(
    team_state: TeamState,
    player: Player,
    catalog: Catalog,
    constraints: SquadConstraints = DEFAULT_SQUAD_CONSTRAINTS,
) -> ValidationResult:
    current_count = count_players_by_role(team_state.squad, catalog)[player.role]
    max_for_role = constraints.limits_for(player.role).max
    if current_count >= max_for_role:
        return ValidationResult.failed(
            Violation(
                kind=ViolationKind.ROLE_LIMIT_EXCEEDED,
                message=(
                    f"Cannot add more {player.role}s. Maximum {max_for_role} allowed, "
                    f"currently have {current_count}."
                ),
                context={"role": player.role, "current_count": current_count, "max_count": max_for_role},
            )
        )
    return ValidationResult.ok()


def validate_overseas_limits(
    team_state: TeamState,
    player: Player,
    catalog: Catalog,
    constraints: SquadConstraints = DEFAULT_SQUAD_CONSTRAINTS,
) -> ValidationResult:
    if not player.is_overseas:
        return ValidationResult.ok()

    overseas_count = count_overseas_players(team_state.squad, catalog)
    if overseas_count >= constraints.max_overseas_players:
        return ValidationResult.failed(
            Violation(
                kind=ViolationKind.OVERSEAS_LIMIT_EXCEEDED,
                message=(
                    f"Cannot add more overseas players. Maximum {constraints.max_overseas_players} "
                    f"allowed, currently have {overseas_count}."
                ),
                context={"current_count": overseas_count, "max_count": constraints.max_overseas_players},
            )
        )
    return ValidationResult.ok()


def validate_acquisition(
    team_state: TeamState,
    player: Player,
    bid_amount: int,
    catalog: Catalog,
    constraints: SquadConstraints = DEFAULT_SQUAD_CONSTRAINTS,
) -> ValidationResult:
    """Run budget, squad-size, role and overseas checks; never stops early."""

    return ValidationResult.merge(
        [
            validate_budget(team_state, bid_amount),
            validate_squad_size(team_state, constraints),
            validate_role_limits(team_state, player, catalog, constraints),
            validate_overseas_limits(team_state, player, catalog, constraints),
        ]
    )


def find_team_state(teams: Sequence[TeamState], team_id: str) -> Optional[TeamState]:
    for team in teams:
        if team.team_id == team_id:
            return team
    return None


def minimum_valid_bid(state: BiddingState, timing: AuctionTiming = DEFAULT_TIMING) -> int:
    if state.current_bid is None:
        return state.current_player.base_price
    return state.current_bid.amount + timing.min_bid_increment


def suggested_bid_increments(current_amount: int) -> Tuple[int, int, int]:
    """Quick-bid step sizes; display only, they do not affect validation."""

    if current_amount < 100:
        return (5, 10, 20)
    if current_amount < 500:
        return (10, 25, 50)
    if current_amount < 1000:
        return (25, 50, 100)
    return (50, 100, 200)


def validate_bid(
    state: AuctionState,
    team_id: str,
    amount: int,
    catalog: Catalog,
    constraints: SquadConstraints = DEFAULT_SQUAD_CONSTRAINTS,
    timing: AuctionTiming = DEFAULT_TIMING,
) -> ValidationResult:
    """Gate to run immediately before dispatching ``PlaceBid``."""

    if not isinstance(state, BiddingState):
        return ValidationResult.failed(
            Violation(
                kind=ViolationKind.AUCTION_NOT_ACTIVE,
                message="Auction not active.",
                context={"phase": state.phase},
            )
        )

    team_state = find_team_state(state.teams, team_id)
    if team_state is None:
        return ValidationResult.failed(
            Violation(
                kind=ViolationKind.UNKNOWN_TEAM,
                message="Team not found in auction.",
                context={"team_id": team_id},
            )
        )

    minimum = minimum_valid_bid(state, timing)
    if amount < minimum:
        return ValidationResult.failed(
            Violation(
                kind=ViolationKind.BID_TOO_LOW,
                message=(
                    f"Bid must be at least {minimum}. "
                    f"Minimum increment is {timing.min_bid_increment}."
                ),
                context={
                    "bid_amount": amount,
                    "minimum_required": minimum,
                    "increment": timing.min_bid_increment,
                },
            )
        )

    return validate_acquisition(team_state, state.current_player, amount, catalog, constraints)


def validate_final_squad(
    team_state: TeamState,
    catalog: Catalog,
    constraints: SquadConstraints = DEFAULT_SQUAD_CONSTRAINTS,
) -> ValidationResult:
    """Advisory close-of-auction check; reported, never corrected."""

    violations: List[Violation] = []
    current_size = len(team_state.squad)
    if current_size < constraints.min_squad_size:
        violations.append(
            Violation(
                kind=ViolationKind.SQUAD_TOO_SMALL,
                message=(
                    f"Squad too small. Minimum {constraints.min_squad_size} players required, "
                    f"have {current_size}."
                ),
                context={"current_size": current_size, "min_size": constraints.min_squad_size},
            )
        )

    role_counts = count_players_by_role(team_state.squad, catalog)
    for role, limits in constraints.role_limits.items():
        current_count = role_counts.get(role, 0)
        if current_count < limits.min:
            violations.append(
                Violation(
                    kind=ViolationKind.ROLE_MINIMUM_NOT_MET,
                    message=f"Need at least {limits.min} {role}(s), have {current_count}.",
                    context={"role": role, "current_count": current_count, "min_count": limits.min},
                )
            )
    return ValidationResult(violations=tuple(violations))


def can_team_bid(
    team_state: TeamState,
    min_bid_amount: int,
    player: Player,
    catalog: Catalog,
    constraints: SquadConstraints = DEFAULT_SQUAD_CONSTRAINTS,
) -> bool:
    if not validate_budget(team_state, min_bid_amount).is_valid:
        return False
    return validate_acquisition(team_state, player, min_bid_amount, catalog, constraints).is_valid


def eligible_bidders(
    state: BiddingState,
    catalog: Catalog,
    constraints: SquadConstraints = DEFAULT_SQUAD_CONSTRAINTS,
    timing: AuctionTiming = DEFAULT_TIMING,
) -> List[str]:
    """Team ids that could legally place the current minimum bid."""

    minimum = minimum_valid_bid(state, timing)
    return [
        team.team_id
        for team in state.teams
        if can_team_bid(team, minimum, state.current_player, catalog, constraints)
    ]


def can_auction_continue(
    state: AuctionState,
    remaining_player_ids: Sequence[str],
    constraints: SquadConstraints = DEFAULT_SQUAD_CONSTRAINTS,
) -> bool:
    """True while players remain and at least one team can still buy."""

    if not remaining_player_ids:
        return False
    return any(
        team.remaining_budget > 0 and len(team.squad) < constraints.max_squad_size
        for team in state.teams
    )
