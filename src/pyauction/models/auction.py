"""Auction state variants, per-team projections and the events that drive them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Tuple, Union

from .player import Player, Team


@dataclass(frozen=True)
class AcquiredPlayer:
    player_id: str
    purchase_price: int


@dataclass(frozen=True)
class TeamState:
    """Budget and squad of one team for the lifetime of a single auction."""

    team_id: str
    remaining_budget: int
    squad: Tuple[AcquiredPlayer, ...] = ()

    @classmethod
    def from_team(cls, team: Team) -> "TeamState":
        return cls(team_id=team.id, remaining_budget=team.budget, squad=())

    @property
    def budget_spent(self) -> int:
        return sum(acquired.purchase_price for acquired in self.squad)


@dataclass(frozen=True)
class CurrentBid:
    team_id: str
    amount: int


# Phase variants. Each carries only the fields meaningful to its phase, so a
# state without a player can never expose a bid.


@dataclass(frozen=True)
class IdleState:
    completed_player_ids: Tuple[str, ...]
    teams: Tuple[TeamState, ...]
    message: Optional[str] = None
    phase: Literal["idle"] = "idle"


@dataclass(frozen=True)
class BiddingState:
    current_player: Player
    current_bid: Optional[CurrentBid]
    time_remaining: int
    completed_player_ids: Tuple[str, ...]
    teams: Tuple[TeamState, ...]
    message: Optional[str] = None
    phase: Literal["bidding"] = "bidding"


@dataclass(frozen=True)
class SoldState:
    sold_player: Player
    winning_bid: CurrentBid
    completed_player_ids: Tuple[str, ...]
    teams: Tuple[TeamState, ...]
    message: Optional[str] = None
    phase: Literal["sold"] = "sold"


@dataclass(frozen=True)
class UnsoldState:
    unsold_player: Player
    completed_player_ids: Tuple[str, ...]
    teams: Tuple[TeamState, ...]
    message: Optional[str] = None
    phase: Literal["unsold"] = "unsold"


@dataclass(frozen=True)
class CompletedState:
    completed_player_ids: Tuple[str, ...]
    teams: Tuple[TeamState, ...]
    message: Optional[str] = None
    phase: Literal["completed"] = "completed"


AuctionState = Union[IdleState, BiddingState, SoldState, UnsoldState, CompletedState]
AuctionPhase = Literal["idle", "bidding", "sold", "unsold", "completed"]


# Events accepted by the state machine.


@dataclass(frozen=True)
class StartBidding:
    player: Player


@dataclass(frozen=True)
class PlaceBid:
    team_id: str
    amount: int


@dataclass(frozen=True)
class InvalidBid:
    reason: str


@dataclass(frozen=True)
class TimerTick:
    pass


@dataclass(frozen=True)
class TimeExpired:
    pass


@dataclass(frozen=True)
class PlayerSold:
    pass


@dataclass(frozen=True)
class PlayerUnsold:
    pass


@dataclass(frozen=True)
class ResetToIdle:
    pass


@dataclass(frozen=True)
class CompleteAuction:
    pass


AuctionEvent = Union[
    StartBidding,
    PlaceBid,
    InvalidBid,
    TimerTick,
    TimeExpired,
    PlayerSold,
    PlayerUnsold,
    ResetToIdle,
    CompleteAuction,
]


@dataclass(frozen=True)
class SaleOutcome:
    """Completed lot forwarded to persistence; ``team_id`` is ``None`` when unsold."""

    player_id: str
    team_id: Optional[str] = None
    price: Optional[int] = None

    @property
    def sold(self) -> bool:
        return self.team_id is not None
