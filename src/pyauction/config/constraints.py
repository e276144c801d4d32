"""Squad-composition rules and auction timing for supported formats."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping

from pyauction.models.player import ROLES, PlayerRole


@dataclass(frozen=True)
class RoleLimits:
    min: int
    max: int


@dataclass(frozen=True)
class SquadConstraints:
    name: str
    min_squad_size: int
    max_squad_size: int
    max_overseas_players: int
    role_limits: Mapping[PlayerRole, RoleLimits]

    def limits_for(self, role: PlayerRole) -> RoleLimits:
        try:
            return self.role_limits[role]
        except KeyError:
            raise KeyError(f"No role limits configured for role={role!r} in {self.name!r}") from None


@dataclass(frozen=True)
class AuctionTiming:
    """Fixed clock and price constants; one time unit is roughly one second."""

    initial_bid_time: int = 60
    time_extension_on_bid: int = 15
    max_time_remaining: int = 60
    min_bid_increment: int = 5
    assumed_base_price: int = 20


DEFAULT_TIMING = AuctionTiming()


_CONSTRAINTS: Dict[str, SquadConstraints] = {
    "T20": SquadConstraints(
        name="T20",
        min_squad_size=15,
        max_squad_size=25,
        max_overseas_players=8,
        role_limits={
            "batter": RoleLimits(min=3, max=8),
            "bowler": RoleLimits(min=3, max=8),
            "all-rounder": RoleLimits(min=2, max=6),
            "wicket-keeper": RoleLimits(min=1, max=3),
        },
    ),
    "COMPACT": SquadConstraints(
        name="COMPACT",
        min_squad_size=5,
        max_squad_size=8,
        max_overseas_players=2,
        role_limits={
            "batter": RoleLimits(min=1, max=3),
            "bowler": RoleLimits(min=1, max=3),
            "all-rounder": RoleLimits(min=1, max=2),
            "wicket-keeper": RoleLimits(min=1, max=1),
        },
    ),
}

DEFAULT_SQUAD_CONSTRAINTS = _CONSTRAINTS["T20"]


def iter_constraints() -> Iterable[SquadConstraints]:
    """Return an iterator of all configured rule sets."""

    return _CONSTRAINTS.values()


def get_constraints(name: str) -> SquadConstraints:
    """Fetch a named rule set, raising KeyError if missing."""

    key = name.upper()
    if key not in _CONSTRAINTS:
        raise KeyError(f"No squad constraints configured for format={name!r}")
    return _CONSTRAINTS[key]


def build_constraints(
    *,
    name: str,
    min_squad_size: int,
    max_squad_size: int,
    max_overseas_players: int,
    role_limits: Mapping[str, Mapping[str, int]],
) -> SquadConstraints:
    """Validate raw numbers and assemble a ``SquadConstraints`` value."""

    if min_squad_size < 0 or max_squad_size < min_squad_size:
        raise ValueError(
            f"Invalid squad size range {min_squad_size}-{max_squad_size} for {name!r}"
        )
    if max_overseas_players < 0:
        raise ValueError("max_overseas_players cannot be negative")

    missing = [role for role in ROLES if role not in role_limits]
    if missing:
        raise ValueError(f"Role limits missing for: {', '.join(missing)}")

    limits: Dict[PlayerRole, RoleLimits] = {}
    for role in ROLES:
        raw = role_limits[role]
        low, high = int(raw["min"]), int(raw["max"])
        if low < 0 or high < low:
            raise ValueError(f"Invalid limits {low}-{high} for role {role!r}")
        limits[role] = RoleLimits(min=low, max=high)

    return SquadConstraints(
        name=name,
        min_squad_size=min_squad_size,
        max_squad_size=max_squad_size,
        max_overseas_players=max_overseas_players,
        role_limits=limits,
    )
