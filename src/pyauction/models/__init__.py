"""Domain records for players, teams and auction state."""

from .auction import (
    AcquiredPlayer,
    AuctionEvent,
    AuctionPhase,
    AuctionState,
    BiddingState,
    CompleteAuction,
    CompletedState,
    CurrentBid,
    IdleState,
    InvalidBid,
    PlaceBid,
    PlayerSold,
    PlayerUnsold,
    ResetToIdle,
    SaleOutcome,
    SoldState,
    StartBidding,
    TeamState,
    TimeExpired,
    TimerTick,
    UnsoldState,
)
from .catalog import Catalog, CatalogLookupError
from .player import ROLES, Nationality, Player, PlayerRole, PlayerStats, Team

__all__ = [
    "ROLES",
    "AcquiredPlayer",
    "AuctionEvent",
    "AuctionPhase",
    "AuctionState",
    "BiddingState",
    "Catalog",
    "CatalogLookupError",
    "CompleteAuction",
    "CompletedState",
    "CurrentBid",
    "IdleState",
    "InvalidBid",
    "Nationality",
    "PlaceBid",
    "Player",
    "PlayerRole",
    "PlayerSold",
    "PlayerStats",
    "PlayerUnsold",
    "ResetToIdle",
    "SaleOutcome",
    "SoldState",
    "StartBidding",
    "Team",
    "TeamState",
    "TimeExpired",
    "TimerTick",
    "UnsoldState",
]
