"""Read-only player/team catalog supplied once before the auction starts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, Optional, Tuple

from .player import Player, Team


class CatalogLookupError(KeyError):
    """Raised when an id is not present in the catalog."""


@dataclass(frozen=True)
class Catalog:
    players: Tuple[Player, ...]
    teams: Tuple[Team, ...] = ()
    _players_by_id: Dict[str, Player] = field(init=False, repr=False, compare=False)
    _teams_by_id: Dict[str, Team] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        players = tuple(self.players)
        teams = tuple(self.teams)
        object.__setattr__(self, "players", players)
        object.__setattr__(self, "teams", teams)

        players_by_id: Dict[str, Player] = {}
        for player in players:
            if player.id in players_by_id:
                raise ValueError(f"Duplicate player id {player.id!r} in catalog")
            players_by_id[player.id] = player
        teams_by_id: Dict[str, Team] = {}
        for team in teams:
            if team.id in teams_by_id:
                raise ValueError(f"Duplicate team id {team.id!r} in catalog")
            teams_by_id[team.id] = team

        object.__setattr__(self, "_players_by_id", players_by_id)
        object.__setattr__(self, "_teams_by_id", teams_by_id)

    @classmethod
    def build(cls, players: Iterable[Player], teams: Iterable[Team] = ()) -> "Catalog":
        return cls(players=tuple(players), teams=tuple(teams))

    def __iter__(self) -> Iterator[Player]:
        return iter(self.players)

    def __len__(self) -> int:
        return len(self.players)

    def __contains__(self, player_id: object) -> bool:
        return player_id in self._players_by_id

    def get_player(self, player_id: str) -> Optional[Player]:
        return self._players_by_id.get(player_id)

    def player(self, player_id: str) -> Player:
        """Fetch a player, raising ``CatalogLookupError`` when missing."""

        try:
            return self._players_by_id[player_id]
        except KeyError:
            raise CatalogLookupError(f"Unknown player id {player_id!r}") from None

    def get_team(self, team_id: str) -> Optional[Team]:
        return self._teams_by_id.get(team_id)

    def team(self, team_id: str) -> Team:
        try:
            return self._teams_by_id[team_id]
        except KeyError:
            raise CatalogLookupError(f"Unknown team id {team_id!r}") from None
