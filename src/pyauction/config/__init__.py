"""Configuration helpers for squad rules and auction timing."""

from .constraints import (
    DEFAULT_SQUAD_CONSTRAINTS,
    DEFAULT_TIMING,
    AuctionTiming,
    RoleLimits,
    SquadConstraints,
    build_constraints,
    get_constraints,
    iter_constraints,
)

__all__ = [
    "DEFAULT_SQUAD_CONSTRAINTS",
    "DEFAULT_TIMING",
    "AuctionTiming",
    "RoleLimits",
    "SquadConstraints",
    "build_constraints",
    "get_constraints",
    "iter_constraints",
]
