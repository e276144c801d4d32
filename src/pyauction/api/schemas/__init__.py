"""Pydantic models for API I/O."""

from .auction import (
    AcquiredPlayerResponse,
    AuctionStateResponse,
    BidRequest,
    BidResponse,
    CurrentBidResponse,
    PlayerStatusResponse,
    StartBiddingRequest,
    TeamStateResponse,
    ViolationResponse,
)
from .advice import (
    AdviceResponse,
    BidRecommendationResponse,
    FinalCheckResponse,
    ReasoningFactorResponse,
    RoleBreakdownResponse,
    SquadSummaryResponse,
)
from .history import AuctionDetailResponse, AuctionRecordResponse, SaleRecordResponse

__all__ = [
    "AcquiredPlayerResponse",
    "AdviceResponse",
    "AuctionDetailResponse",
    "AuctionRecordResponse",
    "AuctionStateResponse",
    "BidRecommendationResponse",
    "BidRequest",
    "BidResponse",
    "CurrentBidResponse",
    "FinalCheckResponse",
    "PlayerStatusResponse",
    "ReasoningFactorResponse",
    "RoleBreakdownResponse",
    "SaleRecordResponse",
    "SquadSummaryResponse",
    "StartBiddingRequest",
    "TeamStateResponse",
    "ViolationResponse",
]
