"""Persist and load squad-constraint profiles."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

from pyauction.config import SquadConstraints, build_constraints


@dataclass
class ConstraintsProfile:
    name: str
    min_squad_size: int
    max_squad_size: int
    max_overseas_players: int
    role_limits: Dict[str, Dict[str, int]]

    @classmethod
    def load(cls, path: Path) -> "ConstraintsProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls(
            name=data.get("name", path.stem),
            min_squad_size=int(data["min_squad_size"]),
            max_squad_size=int(data["max_squad_size"]),
            max_overseas_players=int(data["max_overseas_players"]),
            role_limits={role: dict(limits) for role, limits in data.get("role_limits", {}).items()},
        )

    @classmethod
    def from_constraints(cls, constraints: SquadConstraints) -> "ConstraintsProfile":
        return cls(
            name=constraints.name,
            min_squad_size=constraints.min_squad_size,
            max_squad_size=constraints.max_squad_size,
            max_overseas_players=constraints.max_overseas_players,
            role_limits={
                role: {"min": limits.min, "max": limits.max}
                for role, limits in constraints.role_limits.items()
            },
        )

    def to_constraints(self) -> SquadConstraints:
        return build_constraints(
            name=self.name,
            min_squad_size=self.min_squad_size,
            max_squad_size=self.max_squad_size,
            max_overseas_players=self.max_overseas_players,
            role_limits=self.role_limits,
        )

    def save(self, path: Path) -> None:
        payload = {
            "name": self.name,
            "min_squad_size": self.min_squad_size,
            "max_squad_size": self.max_squad_size,
            "max_overseas_players": self.max_overseas_players,
            "role_limits": self.role_limits,
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
