"""Canonical catalog records shared by the engine, ingest and API layers."""

from __future__ import annotations

from typing import Literal, Optional, Tuple

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


PlayerRole = Literal["batter", "bowler", "all-rounder", "wicket-keeper"]
Nationality = Literal["domestic", "overseas"]

ROLES: Tuple[PlayerRole, ...] = ("batter", "bowler", "all-rounder", "wicket-keeper")


class PlayerStats(BaseModel):
    """Career numbers used by the recommendation engine.

    Averages and rates are ``None`` when they do not apply to the player
    (a pure bowler has no batting average, for example).
    """

    matches: int = Field(default=0, ge=0)
    batting_average: Optional[float] = Field(default=None, ge=0.0)
    bowling_average: Optional[float] = Field(default=None, ge=0.0)
    strike_rate: Optional[float] = Field(default=None, ge=0.0)
    economy_rate: Optional[float] = Field(default=None, ge=0.0)

    model_config = ConfigDict(frozen=True)


class Player(BaseModel):
    """Immutable catalog entry for a player going under the hammer."""

    id: str = Field(..., min_length=1)
    name: str
    role: PlayerRole
    nationality: Nationality
    base_price: int = Field(..., gt=0)
    stats: PlayerStats = Field(default_factory=PlayerStats)

    model_config = ConfigDict(frozen=True)

    @property
    def is_overseas(self) -> bool:
        return self.nationality == "overseas"


class Team(BaseModel):
    """Static franchise record; auction progress lives in ``TeamState``."""

    id: str = Field(..., min_length=1)
    name: str
    short_name: str
    budget: int = Field(..., gt=0)
    primary_color: str = "#000000"

    model_config = ConfigDict(frozen=True)
