"""Countdown driver and deterministic bot bidders for running whole auctions."""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Union

from pyauction.config import (
    DEFAULT_SQUAD_CONSTRAINTS,
    DEFAULT_TIMING,
    AuctionTiming,
    SquadConstraints,
)
from pyauction.engine import (
    AuctionSession,
    ValidationResult,
    can_auction_continue,
    recommend,
    sale_outcome,
    should_consider,
)
from pyauction.engine.state_machine import SaleListener
from pyauction.models import (
    AuctionState,
    BiddingState,
    Catalog,
    Player,
    SaleOutcome,
    SoldState,
    UnsoldState,
)


logger = logging.getLogger(__name__)

_MAX_LOT_STEPS_ENV = "PYAUCTION_MAX_LOT_STEPS"
_BOT_AGGRESSION_ENV = "PYAUCTION_BOT_AGGRESSION"

_MAX_LOT_STEPS_DEFAULT = 10_000
_BOT_AGGRESSION_DEFAULT = 1.0


def _env_float(name: str, default: float, *, clamp_min: float | None = None, clamp_max: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    if clamp_max is not None:
        value = min(clamp_max, value)
    return value


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("%s below minimum (%s); using %s", name, value, min_value)
        return min_value
    return value


def bot_aggression() -> float:
    return _env_float(_BOT_AGGRESSION_ENV, _BOT_AGGRESSION_DEFAULT, clamp_min=0.1, clamp_max=2.0)


def max_lot_steps() -> int:
    return _env_int(_MAX_LOT_STEPS_ENV, _MAX_LOT_STEPS_DEFAULT, min_value=1)


class RecommendationBidder:
    """Bot that raises to the minimum bid until its recommended ceiling is reached.

    The ceiling is computed without the current-bid floor so that a bot never
    chases a price beyond what the recommendation engine values the player at.
    """

    def __init__(self, team_id: str, *, aggression: float = 1.0):
        self.team_id = team_id
        self.aggression = aggression

    def ceiling(self, session: AuctionSession, player: Player) -> Optional[int]:
        team_state = session.team_state(self.team_id)
        if team_state is None:
            return None
        gate = should_consider(player, team_state, session.catalog, session.constraints)
        if not gate.should_bid:
            return None
        result = recommend(player, team_state, session.catalog, None, session.constraints, session.timing)
        return int(math.floor(result.ceiling * self.aggression))

    def __call__(self, session: AuctionSession) -> Optional[int]:
        state = session.state
        if not isinstance(state, BiddingState):
            return None
        if state.current_bid is not None and state.current_bid.team_id == self.team_id:
            return None
        amount = session.minimum_valid_bid()
        ceiling = self.ceiling(session, state.current_player)
        if amount is None or ceiling is None or amount > ceiling:
            return None
        return amount


class CountdownDriver:
    """Advances the session clock one unit per ``step`` and closes expired lots."""

    def __init__(
        self,
        session: AuctionSession,
        bidders: Sequence[RecommendationBidder] = (),
        *,
        max_steps: Optional[int] = None,
    ):
        self.session = session
        self.bidders = list(bidders)
        self.max_steps = max_steps if max_steps is not None else max_lot_steps()

    def step(self) -> AuctionState:
        state = self.session.state
        if not isinstance(state, BiddingState):
            return state
        for bidder in self.bidders:
            amount = bidder(self.session)
            if amount is None:
                continue
            result = self.session.place_bid(bidder.team_id, amount)
            if not result.is_valid:
                logger.debug("Bot %s bid %s rejected: %s", bidder.team_id, amount, result.first_message)
        state = self.session.tick()
        if isinstance(state, BiddingState) and state.time_remaining == 0:
            state = self.session.expire()
        return state

    def run_lot(self, player: Union[str, Player]) -> Optional[SaleOutcome]:
        """Auction one player to completion; ``None`` if the lot never opened."""

        if isinstance(self.session.state, (SoldState, UnsoldState)):
            self.session.reset()
        state = self.session.start_bidding(player)
        if not isinstance(state, BiddingState):
            return None

        steps = 0
        while isinstance(self.session.state, BiddingState):
            if steps >= self.max_steps:
                logger.warning("Lot exceeded %s steps; forcing expiry", self.max_steps)
                self.session.expire()
                break
            self.step()
            steps += 1
        return sale_outcome(self.session.state)


@dataclass
class SimulationResult:
    outcomes: List[SaleOutcome] = field(default_factory=list)
    state: Optional[AuctionState] = None
    final_report: Dict[str, ValidationResult] = field(default_factory=dict)

    @property
    def sold(self) -> List[SaleOutcome]:
        return [outcome for outcome in self.outcomes if outcome.sold]

    @property
    def unsold(self) -> List[SaleOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.sold]

    @property
    def total_spent(self) -> int:
        return sum(outcome.price or 0 for outcome in self.sold)


def simulate_auction(
    catalog: Catalog,
    *,
    constraints: SquadConstraints = DEFAULT_SQUAD_CONSTRAINTS,
    timing: AuctionTiming = DEFAULT_TIMING,
    players: Optional[Iterable[Player]] = None,
    listeners: Iterable[SaleListener] = (),
    aggression: Optional[float] = None,
) -> SimulationResult:
    """Run every player through a lot with one bot per team, then complete."""

    session = AuctionSession(catalog, constraints=constraints, timing=timing)
    for listener in listeners:
        session.subscribe(listener)
    aggression = aggression if aggression is not None else bot_aggression()
    bidders = [RecommendationBidder(team.id, aggression=aggression) for team in catalog.teams]
    driver = CountdownDriver(session, bidders)

    lot_players = list(players) if players is not None else list(catalog.players)
    result = SimulationResult()
    for index, player in enumerate(lot_players):
        remaining_ids = [candidate.id for candidate in lot_players[index:]]
        if not can_auction_continue(session.state, remaining_ids, constraints):
            logger.info("No team can buy further; stopping with %s players left", len(remaining_ids))
            break
        outcome = driver.run_lot(player)
        if outcome is None:
            continue
        result.outcomes.append(outcome)
        if outcome.sold:
            logger.info("Sold %s to %s for %s", outcome.player_id, outcome.team_id, outcome.price)
        else:
            logger.info("Player %s went unsold", outcome.player_id)

    if isinstance(session.state, (SoldState, UnsoldState)):
        session.reset()
    result.state = session.complete()
    result.final_report = session.final_squad_report()
    return result
