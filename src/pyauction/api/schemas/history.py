from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel


class AuctionRecordResponse(BaseModel):
    auction_id: str
    name: str
    constraints: str
    state: str
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None = None


class SaleRecordResponse(BaseModel):
    player_id: str
    status: str
    team_id: str | None = None
    price: int | None = None
    recorded_at: datetime


class AuctionDetailResponse(BaseModel):
    auction: AuctionRecordResponse
    sales: List[SaleRecordResponse]
