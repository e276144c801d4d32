from __future__ import annotations

from typing import Any, List, Literal

from pydantic import BaseModel, Field

from pyauction.models import Player


class StartBiddingRequest(BaseModel):
    player_id: str


class BidRequest(BaseModel):
    team_id: str
    amount: int = Field(gt=0)


class AcquiredPlayerResponse(BaseModel):
    player_id: str
    purchase_price: int


class TeamStateResponse(BaseModel):
    team_id: str
    remaining_budget: int
    budget_spent: int
    squad: List[AcquiredPlayerResponse]


class CurrentBidResponse(BaseModel):
    team_id: str
    amount: int


class AuctionStateResponse(BaseModel):
    phase: Literal["idle", "bidding", "sold", "unsold", "completed"]
    message: str | None = None
    auction_id: str | None = None
    completed_player_ids: List[str]
    teams: List[TeamStateResponse]
    current_player: Player | None = None
    current_bid: CurrentBidResponse | None = None
    time_remaining: int | None = None
    minimum_bid: int | None = None
    suggested_bids: List[int] = Field(default_factory=list)
    sold_player: Player | None = None
    winning_bid: CurrentBidResponse | None = None
    unsold_player: Player | None = None


class ViolationResponse(BaseModel):
    kind: str
    message: str
    context: dict[str, Any] = Field(default_factory=dict)


class BidResponse(BaseModel):
    accepted: bool
    violations: List[ViolationResponse]
    state: AuctionStateResponse


class PlayerStatusResponse(BaseModel):
    player: Player
    status: Literal["available", "sold", "unsold"]
    sold_to: str | None = None
    sold_price: int | None = None
