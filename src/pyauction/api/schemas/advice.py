from __future__ import annotations

from typing import Dict, List, Literal

from pydantic import BaseModel

from .auction import ViolationResponse


class ReasoningFactorResponse(BaseModel):
    factor: str
    impact: Literal["positive", "negative", "neutral"]
    explanation: str


class BidRecommendationResponse(BaseModel):
    ceiling: int
    confidence: Literal["low", "medium", "high"]
    reasoning: List[ReasoningFactorResponse]


class AdviceResponse(BaseModel):
    team_id: str
    should_bid: bool
    skip_reason: str | None = None
    recommendation: BidRecommendationResponse | None = None


class RoleBreakdownResponse(BaseModel):
    current: int
    min: int
    max: int


class SquadSummaryResponse(BaseModel):
    team_id: str
    total_players: int
    max_players: int
    overseas_count: int
    max_overseas: int
    role_breakdown: Dict[str, RoleBreakdownResponse]
    budget_used: int
    budget_remaining: int


class FinalCheckResponse(BaseModel):
    team_id: str
    is_valid: bool
    violations: List[ViolationResponse]
