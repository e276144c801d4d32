"""Heuristic ceiling-bid recommendations with explained adjustment factors.

The estimate starts at the player's base price and passes through a fixed
sequence of stages (quality, role scarcity, overseas slots, budget cap,
current-bid floor). Each stage appends one ``ReasoningFactor`` so the caller
can show why the number came out the way it did.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Literal, Optional, Tuple

from pyauction.config import DEFAULT_SQUAD_CONSTRAINTS, DEFAULT_TIMING, AuctionTiming, SquadConstraints
from pyauction.models import Catalog, Player, PlayerRole, TeamState

from .composition import count_overseas_players, count_players_by_role


logger = logging.getLogger(__name__)

Impact = Literal["positive", "negative", "neutral"]
Confidence = Literal["low", "medium", "high"]


@dataclass(frozen=True)
class ReasoningFactor:
    factor: str
    impact: Impact
    explanation: str


@dataclass(frozen=True)
class BidRecommendation:
    ceiling: int
    confidence: Confidence
    reasoning: Tuple[ReasoningFactor, ...]


@dataclass(frozen=True)
class ConsiderResult:
    should_bid: bool
    reason: str


@dataclass(frozen=True)
class Advice:
    recommendation: Optional[BidRecommendation]
    should_bid: bool
    skip_reason: Optional[str]


def _impact(multiplier: float) -> Impact:
    if multiplier > 1:
        return "positive"
    if multiplier < 1:
        return "negative"
    return "neutral"


def quality_multiplier(player: Player) -> float:
    """Additive stat bonuses on top of 1.0."""

    stats = player.stats
    multiplier = 1.0

    if stats.matches > 100:
        multiplier += 0.3
    elif stats.matches > 50:
        multiplier += 0.15

    if stats.batting_average is not None:
        if stats.batting_average > 40:
            multiplier += 0.4
        elif stats.batting_average > 30:
            multiplier += 0.2

    if stats.strike_rate is not None:
        if stats.strike_rate > 150:
            multiplier += 0.3
        elif stats.strike_rate > 130:
            multiplier += 0.15

    if stats.bowling_average is not None:
        if stats.bowling_average < 20:
            multiplier += 0.4
        elif stats.bowling_average < 25:
            multiplier += 0.2

    if stats.economy_rate is not None:
        if stats.economy_rate < 7:
            multiplier += 0.3
        elif stats.economy_rate < 8:
            multiplier += 0.15

    return multiplier


def _quality_explanation(player: Player, multiplier: float) -> str:
    stats = player.stats
    highlights: List[str] = []
    if stats.matches > 100:
        highlights.append(f"{stats.matches} matches experience")
    if stats.batting_average is not None and stats.batting_average > 30:
        highlights.append(f"batting avg {stats.batting_average:.1f}")
    if stats.strike_rate is not None and stats.strike_rate > 130:
        highlights.append(f"strike rate {stats.strike_rate:.1f}")
    if stats.bowling_average is not None and stats.bowling_average < 25:
        highlights.append(f"bowling avg {stats.bowling_average:.1f}")
    if stats.economy_rate is not None and stats.economy_rate < 8:
        highlights.append(f"economy {stats.economy_rate:.2f}")

    if not highlights:
        return "Average statistics, no premium applied."
    if multiplier > 1.3:
        prefix = "Excellent"
    elif multiplier > 1:
        prefix = "Good"
    else:
        prefix = "Moderate"
    return f"{prefix} stats: {', '.join(highlights)}."


def role_scarcity_multiplier(
    role: PlayerRole,
    team_state: TeamState,
    catalog: Catalog,
    constraints: SquadConstraints = DEFAULT_SQUAD_CONSTRAINTS,
) -> float:
    current = count_players_by_role(team_state.squad, catalog)[role]
    limits = constraints.limits_for(role)
    if current < limits.min:
        return 1 + 0.2 * (limits.min - current)
    if current >= limits.max:
        return 0.5
    return 1.0


def _scarcity_explanation(
    role: PlayerRole,
    multiplier: float,
    team_state: TeamState,
    catalog: Catalog,
    constraints: SquadConstraints,
) -> str:
    current = count_players_by_role(team_state.squad, catalog)[role]
    limits = constraints.limits_for(role)
    if multiplier > 1:
        needed = limits.min - current
        return f"URGENT: Need {needed} more {role}(s) to meet minimum requirement of {limits.min}."
    if multiplier < 1:
        return f"Low priority: Already have {current}/{limits.max} {role}(s)."
    return f"Have {current} {role}(s), within normal range ({limits.min}-{limits.max})."


def overseas_multiplier(
    team_state: TeamState,
    catalog: Catalog,
    constraints: SquadConstraints = DEFAULT_SQUAD_CONSTRAINTS,
) -> float:
    slots_remaining = constraints.max_overseas_players - count_overseas_players(team_state.squad, catalog)
    if slots_remaining <= 0:
        return 0.0
    if slots_remaining <= 2:
        return 0.8
    return 1.0


def _overseas_explanation(
    team_state: TeamState,
    catalog: Catalog,
    constraints: SquadConstraints,
) -> str:
    max_overseas = constraints.max_overseas_players
    remaining = max_overseas - count_overseas_players(team_state.squad, catalog)
    if remaining <= 0:
        return f"Cannot buy: All {max_overseas} overseas slots used."
    if remaining <= 2:
        return f"Caution: Only {remaining} overseas slot(s) remaining. Conserve for high-value players."
    return f"{remaining} overseas slots available."


def budget_cap(
    team_state: TeamState,
    constraints: SquadConstraints = DEFAULT_SQUAD_CONSTRAINTS,
    timing: AuctionTiming = DEFAULT_TIMING,
) -> int:
    """Spendable amount after reserving base price for mandatory future buys."""

    players_needed = max(0, constraints.min_squad_size - len(team_state.squad))
    if players_needed == 0:
        return team_state.remaining_budget
    reserve = max(0, (players_needed - 1) * timing.assumed_base_price)
    return max(timing.assumed_base_price, team_state.remaining_budget - reserve)


def _confidence(reasoning: List[ReasoningFactor]) -> Confidence:
    positives = sum(1 for item in reasoning if item.impact == "positive")
    negatives = sum(1 for item in reasoning if item.impact == "negative")
    if negatives >= 2:
        return "low"
    if positives >= 2 and negatives == 0:
        return "high"
    return "medium"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def recommend(
    player: Player,
    team_state: TeamState,
    catalog: Catalog,
    current_bid: Optional[int] = None,
    constraints: SquadConstraints = DEFAULT_SQUAD_CONSTRAINTS,
    timing: AuctionTiming = DEFAULT_TIMING,
) -> BidRecommendation:
    """Suggest the highest amount ``team_state`` should pay for ``player``."""

    reasoning: List[ReasoningFactor] = []
    estimate = float(player.base_price)

    quality = quality_multiplier(player)
    estimate *= quality
    reasoning.append(
        ReasoningFactor(
            factor="Player Quality",
            impact=_impact(quality),
            explanation=_quality_explanation(player, quality),
        )
    )

    scarcity = role_scarcity_multiplier(player.role, team_state, catalog, constraints)
    estimate *= scarcity
    reasoning.append(
        ReasoningFactor(
            factor="Role Scarcity",
            impact=_impact(scarcity),
            explanation=_scarcity_explanation(player.role, scarcity, team_state, catalog, constraints),
        )
    )

    if player.is_overseas:
        overseas = overseas_multiplier(team_state, catalog, constraints)
        estimate *= overseas
        reasoning.append(
            ReasoningFactor(
                factor="Overseas Slot",
                impact=_impact(overseas),
                explanation=_overseas_explanation(team_state, catalog, constraints),
            )
        )

    cap = budget_cap(team_state, constraints, timing)
    capped = estimate > cap
    estimate = min(estimate, cap)
    reasoning.append(
        ReasoningFactor(
            factor="Budget Constraint",
            impact="negative" if capped else "neutral",
            explanation=(
                f"Budget allows up to {cap}. "
                + ("Recommendation capped by budget." if capped else "No budget constraint hit.")
            ),
        )
    )

    if current_bid is not None:
        # Floor is the next placeable bid, current_bid + increment.
        floor = current_bid + timing.min_bid_increment
        if estimate < floor:
            estimate = float(floor)
            reasoning.append(
                ReasoningFactor(
                    factor="Current Bid",
                    impact="neutral",
                    explanation=f"Adjusted to beat current bid of {current_bid}",
                )
            )

    ceiling = _round_half_up(estimate)
    confidence = _confidence(reasoning)
    logger.debug(
        "Recommendation for %s/%s: ceiling=%s confidence=%s",
        team_state.team_id,
        player.id,
        ceiling,
        confidence,
    )
    return BidRecommendation(ceiling=ceiling, confidence=confidence, reasoning=tuple(reasoning))


def should_consider(
    player: Player,
    team_state: TeamState,
    catalog: Catalog,
    constraints: SquadConstraints = DEFAULT_SQUAD_CONSTRAINTS,
) -> ConsiderResult:
    """Cheap gate run before ``recommend``."""

    if player.is_overseas:
        if count_overseas_players(team_state.squad, catalog) >= constraints.max_overseas_players:
            return ConsiderResult(should_bid=False, reason="No overseas slots available")

    current = count_players_by_role(team_state.squad, catalog)[player.role]
    max_for_role = constraints.limits_for(player.role).max
    if current >= max_for_role:
        return ConsiderResult(
            should_bid=False,
            reason=f"Already have maximum {player.role}s ({current}/{max_for_role})",
        )

    if team_state.remaining_budget < player.base_price:
        return ConsiderResult(should_bid=False, reason="Insufficient budget for base price")

    return ConsiderResult(should_bid=True, reason="Player is a valid target")


def advise(
    player: Optional[Player],
    team_state: Optional[TeamState],
    catalog: Catalog,
    current_bid: Optional[int] = None,
    constraints: SquadConstraints = DEFAULT_SQUAD_CONSTRAINTS,
    timing: AuctionTiming = DEFAULT_TIMING,
    *,
    enabled: bool = True,
) -> Advice:
    """Combine the gate and the full pipeline, short-circuiting when possible."""

    if not enabled:
        return Advice(recommendation=None, should_bid=False, skip_reason="Recommendations disabled")
    if player is None:
        return Advice(recommendation=None, should_bid=False, skip_reason="No player selected")
    if team_state is None:
        return Advice(recommendation=None, should_bid=False, skip_reason="No team selected")

    gate = should_consider(player, team_state, catalog, constraints)
    if not gate.should_bid:
        return Advice(recommendation=None, should_bid=False, skip_reason=gate.reason)

    return Advice(
        recommendation=recommend(player, team_state, catalog, current_bid, constraints, timing),
        should_bid=True,
        skip_reason=None,
    )
