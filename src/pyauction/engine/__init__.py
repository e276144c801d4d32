"""Auction engine: composition counts, validation, recommendations and phase transitions."""

from .composition import (
    RoleBreakdown,
    SquadSummary,
    count_overseas_players,
    count_players_by_role,
    squad_summary,
)
from .recommendation import (
    Advice,
    BidRecommendation,
    ConsiderResult,
    ReasoningFactor,
    advise,
    recommend,
    should_consider,
)
from .state_machine import (
    AuctionContractError,
    AuctionSession,
    create_initial_state,
    sale_outcome,
    transition,
)
from .validation import (
    ValidationResult,
    Violation,
    ViolationKind,
    can_auction_continue,
    eligible_bidders,
    minimum_valid_bid,
    suggested_bid_increments,
    validate_acquisition,
    validate_bid,
    validate_final_squad,
)

__all__ = [
    "Advice",
    "AuctionContractError",
    "AuctionSession",
    "BidRecommendation",
    "ConsiderResult",
    "ReasoningFactor",
    "RoleBreakdown",
    "SquadSummary",
    "ValidationResult",
    "Violation",
    "ViolationKind",
    "advise",
    "can_auction_continue",
    "count_overseas_players",
    "count_players_by_role",
    "create_initial_state",
    "eligible_bidders",
    "minimum_valid_bid",
    "recommend",
    "sale_outcome",
    "should_consider",
    "squad_summary",
    "suggested_bid_increments",
    "transition",
    "validate_acquisition",
    "validate_bid",
    "validate_final_squad",
]
