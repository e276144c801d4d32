import pytest

from pyauction.config import get_constraints
from pyauction.engine import count_overseas_players, count_players_by_role, squad_summary
from pyauction.models import AcquiredPlayer, Catalog, CatalogLookupError, Player, TeamState


def _catalog() -> Catalog:
    return Catalog.build(
        [
            Player(id="b1", name="Bat One", role="batter", nationality="domestic", base_price=50),
            Player(id="b2", name="Bat Two", role="batter", nationality="overseas", base_price=60),
            Player(id="w1", name="Keeper", role="wicket-keeper", nationality="overseas", base_price=40),
        ]
    )


def test_count_players_by_role_includes_every_role():
    squad = (AcquiredPlayer("b1", 50), AcquiredPlayer("b2", 70))
    counts = count_players_by_role(squad, _catalog())

    assert counts == {"batter": 2, "bowler": 0, "all-rounder": 0, "wicket-keeper": 0}
    assert count_overseas_players(squad, _catalog()) == 1


def test_counting_unknown_player_raises():
    with pytest.raises(CatalogLookupError):
        count_players_by_role((AcquiredPlayer("ghost", 10),), _catalog())


def test_squad_summary_reports_totals_and_limits():
    team = TeamState(
        team_id="t1",
        remaining_budget=390,
        squad=(AcquiredPlayer("b2", 70), AcquiredPlayer("w1", 40)),
    )

    summary = squad_summary(team, _catalog(), get_constraints("COMPACT"))

    assert summary.total_players == 2
    assert summary.max_players == 8
    assert summary.overseas_count == 2
    assert summary.max_overseas == 2
    assert summary.role_breakdown["batter"].current == 1
    assert summary.role_breakdown["wicket-keeper"].max == 1
    assert summary.budget_used == 110
    assert summary.budget_remaining == 390
