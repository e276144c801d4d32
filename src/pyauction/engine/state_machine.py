"""Auction phase transitions and the session wrapper that drives them.

``transition`` is a pure function from (state, event) to the next state. An
event that is not legal in the current phase returns the *same* state object
and logs a warning, so a stale timer callback firing after a phase change is
harmless. Only contract violations by the caller raise.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, Tuple, Union

from pyauction.config import DEFAULT_SQUAD_CONSTRAINTS, DEFAULT_TIMING, AuctionTiming, SquadConstraints
from pyauction.models import (
    AcquiredPlayer,
    AuctionEvent,
    AuctionState,
    BiddingState,
    Catalog,
    CompleteAuction,
    CompletedState,
    CurrentBid,
    IdleState,
    InvalidBid,
    PlaceBid,
    Player,
    PlayerSold,
    PlayerUnsold,
    ResetToIdle,
    SaleOutcome,
    SoldState,
    StartBidding,
    Team,
    TeamState,
    TimeExpired,
    TimerTick,
    UnsoldState,
)

from .composition import SquadSummary, squad_summary
from .recommendation import Advice, advise
from .validation import (
    ValidationResult,
    eligible_bidders,
    find_team_state,
    minimum_valid_bid,
    suggested_bid_increments,
    validate_bid,
    validate_final_squad,
)


logger = logging.getLogger(__name__)


class AuctionContractError(RuntimeError):
    """Raised when a caller dispatches an event that skipped validation."""


SaleListener = Callable[[SaleOutcome], None]


def create_initial_state(teams: Sequence[Team]) -> IdleState:
    return IdleState(
        completed_player_ids=(),
        teams=tuple(TeamState.from_team(team) for team in teams),
        message="Welcome to the auction! Select a player to begin.",
    )


def calculate_time_after_bid(current_time: int, timing: AuctionTiming = DEFAULT_TIMING) -> int:
    return min(current_time + timing.time_extension_on_bid, timing.max_time_remaining)


def finalize_purchase(team_state: TeamState, player_id: str, purchase_price: int) -> TeamState:
    if purchase_price > team_state.remaining_budget:
        raise AuctionContractError(
            f"Team {team_state.team_id!r} cannot pay {purchase_price} "
            f"with {team_state.remaining_budget} remaining"
        )
    return TeamState(
        team_id=team_state.team_id,
        remaining_budget=team_state.remaining_budget - purchase_price,
        squad=team_state.squad + (AcquiredPlayer(player_id=player_id, purchase_price=purchase_price),),
    )


def update_teams_after_sale(
    teams: Sequence[TeamState],
    winning_team_id: str,
    player_id: str,
    purchase_price: int,
) -> Tuple[TeamState, ...]:
    if find_team_state(teams, winning_team_id) is None:
        raise AuctionContractError(f"Winning team {winning_team_id!r} is not part of this auction")
    return tuple(
        finalize_purchase(team, player_id, purchase_price) if team.team_id == winning_team_id else team
        for team in teams
    )


def sale_outcome(state: AuctionState) -> Optional[SaleOutcome]:
    """Outcome record for a state that just closed a lot, else ``None``."""

    if isinstance(state, SoldState):
        return SaleOutcome(
            player_id=state.sold_player.id,
            team_id=state.winning_bid.team_id,
            price=state.winning_bid.amount,
        )
    if isinstance(state, UnsoldState):
        return SaleOutcome(player_id=state.unsold_player.id)
    return None


def _ignored(state: AuctionState, event: AuctionEvent, reason: str) -> AuctionState:
    logger.warning("Ignoring %s in phase %s: %s", type(event).__name__, state.phase, reason)
    return state


def _sell(state: BiddingState, bid: CurrentBid) -> SoldState:
    player = state.current_player
    return SoldState(
        sold_player=player,
        winning_bid=bid,
        completed_player_ids=state.completed_player_ids + (player.id,),
        teams=update_teams_after_sale(state.teams, bid.team_id, player.id, bid.amount),
        message=f"SOLD! {player.name} to {bid.team_id} for {bid.amount}",
    )


def _unsold(state: BiddingState, message: str) -> UnsoldState:
    player = state.current_player
    return UnsoldState(
        unsold_player=player,
        completed_player_ids=state.completed_player_ids + (player.id,),
        teams=state.teams,
        message=message,
    )


def transition(
    state: AuctionState,
    event: AuctionEvent,
    timing: AuctionTiming = DEFAULT_TIMING,
) -> AuctionState:
    """Return the state that follows ``event``; never mutates ``state``."""

    if isinstance(event, StartBidding):
        if not isinstance(state, IdleState):
            return _ignored(state, event, "not in idle state")
        return BiddingState(
            current_player=event.player,
            current_bid=None,
            time_remaining=timing.initial_bid_time,
            completed_player_ids=state.completed_player_ids,
            teams=state.teams,
            message=f"Bidding started for {event.player.name}",
        )

    if isinstance(event, PlaceBid):
        if not isinstance(state, BiddingState):
            return _ignored(state, event, "not in bidding state")
        return BiddingState(
            current_player=state.current_player,
            current_bid=CurrentBid(team_id=event.team_id, amount=event.amount),
            time_remaining=calculate_time_after_bid(state.time_remaining, timing),
            completed_player_ids=state.completed_player_ids,
            teams=state.teams,
            message=f"{event.team_id} bids {event.amount}",
        )

    if isinstance(event, InvalidBid):
        if not isinstance(state, BiddingState):
            return _ignored(state, event, "not in bidding state")
        return BiddingState(
            current_player=state.current_player,
            current_bid=state.current_bid,
            time_remaining=state.time_remaining,
            completed_player_ids=state.completed_player_ids,
            teams=state.teams,
            message=f"Invalid bid: {event.reason}",
        )

    if isinstance(event, TimerTick):
        if not isinstance(state, BiddingState):
            return _ignored(state, event, "timer only runs while bidding")
        return BiddingState(
            current_player=state.current_player,
            current_bid=state.current_bid,
            time_remaining=max(state.time_remaining - 1, 0),
            completed_player_ids=state.completed_player_ids,
            teams=state.teams,
            message=state.message,
        )

    if isinstance(event, (TimeExpired, PlayerSold)):
        if not isinstance(state, BiddingState):
            return _ignored(state, event, "no active lot")
        if state.current_bid is not None:
            return _sell(state, state.current_bid)
        return _unsold(state, f"UNSOLD! {state.current_player.name} received no bids")

    if isinstance(event, PlayerUnsold):
        if not isinstance(state, BiddingState):
            return _ignored(state, event, "no active lot")
        if state.current_bid is not None:
            return _ignored(state, event, "a bid is standing; let the lot expire or sell it")
        return _unsold(state, f"UNSOLD! {state.current_player.name} - passed")

    if isinstance(event, ResetToIdle):
        if not isinstance(state, (SoldState, UnsoldState)):
            return _ignored(state, event, "round is not finished")
        return IdleState(
            completed_player_ids=state.completed_player_ids,
            teams=state.teams,
            message=None,
        )

    if isinstance(event, CompleteAuction):
        if not isinstance(state, (IdleState, SoldState, UnsoldState)):
            return _ignored(state, event, "cannot complete during bidding or twice")
        return CompletedState(
            completed_player_ids=state.completed_player_ids,
            teams=state.teams,
            message=f"Auction completed after {len(state.completed_player_ids)} players",
        )

    raise TypeError(f"Unhandled auction event: {event!r}")


class AuctionSession:
    """Holds the current state of one auction and validates before dispatch."""

    def __init__(
        self,
        catalog: Catalog,
        *,
        constraints: SquadConstraints = DEFAULT_SQUAD_CONSTRAINTS,
        timing: AuctionTiming = DEFAULT_TIMING,
        teams: Optional[Sequence[Team]] = None,
    ):
        self.catalog = catalog
        self.constraints = constraints
        self.timing = timing
        self._state: AuctionState = create_initial_state(teams if teams is not None else catalog.teams)
        self._listeners: List[SaleListener] = []

    @property
    def state(self) -> AuctionState:
        return self._state

    def subscribe(self, listener: SaleListener) -> None:
        self._listeners.append(listener)

    def dispatch(self, event: AuctionEvent) -> AuctionState:
        previous = self._state
        self._state = transition(previous, event, self.timing)
        if self._state is not previous:
            outcome = sale_outcome(self._state)
            if outcome is not None:
                self._notify(outcome)
        return self._state

    def _notify(self, outcome: SaleOutcome) -> None:
        for listener in list(self._listeners):
            try:
                listener(outcome)
            except Exception:
                # Listener failures never change auction state.
                logger.exception("Sale listener failed for player %s", outcome.player_id)

    # actions

    def start_bidding(self, player: Union[str, Player]) -> AuctionState:
        if isinstance(player, str):
            player = self.catalog.player(player)
        if player.id in self._state.completed_player_ids:
            logger.warning("Player %s has already been auctioned", player.id)
            return self._state
        return self.dispatch(StartBidding(player=player))

    def place_bid(self, team_id: str, amount: int) -> ValidationResult:
        result = validate_bid(self._state, team_id, amount, self.catalog, self.constraints, self.timing)
        if result.is_valid:
            self.dispatch(PlaceBid(team_id=team_id, amount=amount))
        else:
            self.dispatch(InvalidBid(reason=result.first_message or "Invalid bid"))
        return result

    def tick(self) -> AuctionState:
        return self.dispatch(TimerTick())

    def expire(self) -> AuctionState:
        return self.dispatch(TimeExpired())

    def sell(self) -> AuctionState:
        return self.dispatch(PlayerSold())

    def pass_player(self) -> AuctionState:
        return self.dispatch(PlayerUnsold())

    def reset(self) -> AuctionState:
        return self.dispatch(ResetToIdle())

    def complete(self) -> AuctionState:
        return self.dispatch(CompleteAuction())

    # queries

    def minimum_valid_bid(self) -> Optional[int]:
        if not isinstance(self._state, BiddingState):
            return None
        return minimum_valid_bid(self._state, self.timing)

    def suggested_bids(self) -> List[int]:
        state = self._state
        if not isinstance(state, BiddingState):
            return []
        if state.current_bid is None:
            return [state.current_player.base_price]
        amount = state.current_bid.amount
        return [amount + step for step in suggested_bid_increments(amount)]

    def remaining_players(self) -> List[Player]:
        completed = set(self._state.completed_player_ids)
        if isinstance(self._state, BiddingState):
            completed.add(self._state.current_player.id)
        return [player for player in self.catalog.players if player.id not in completed]

    def team_state(self, team_id: str) -> Optional[TeamState]:
        return find_team_state(self._state.teams, team_id)

    def can_team_afford(self, team_id: str, amount: int) -> bool:
        team = self.team_state(team_id)
        return team is not None and team.remaining_budget >= amount

    def eligible_bidders(self) -> List[str]:
        if not isinstance(self._state, BiddingState):
            return []
        return eligible_bidders(self._state, self.catalog, self.constraints, self.timing)

    def recommend_for(self, team_id: str) -> Advice:
        state = self._state
        player = state.current_player if isinstance(state, BiddingState) else None
        current_bid = state.current_bid.amount if isinstance(state, BiddingState) and state.current_bid else None
        return advise(player, self.team_state(team_id), self.catalog, current_bid, self.constraints, self.timing)

    def squad_summary(self, team_id: str) -> Optional[SquadSummary]:
        team = self.team_state(team_id)
        if team is None:
            return None
        return squad_summary(team, self.catalog, self.constraints)

    def final_squad_report(self) -> dict[str, ValidationResult]:
        return {
            team.team_id: validate_final_squad(team, self.catalog, self.constraints)
            for team in self._state.teams
        }

    def player_statuses(self) -> List[dict]:
        """Catalog players with available/sold/unsold status and sale details."""

        sold: dict[str, Tuple[str, int]] = {}
        for team in self._state.teams:
            for acquired in team.squad:
                sold[acquired.player_id] = (team.team_id, acquired.purchase_price)
        completed = set(self._state.completed_player_ids)

        statuses: List[dict] = []
        for player in self.catalog.players:
            entry: dict = {"player": player, "status": "available", "sold_to": None, "sold_price": None}
            if player.id in sold:
                entry["status"] = "sold"
                entry["sold_to"], entry["sold_price"] = sold[player.id]
            elif player.id in completed:
                entry["status"] = "unsold"
            statuses.append(entry)
        return statuses
