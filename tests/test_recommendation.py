import pytest

from pyauction.config import get_constraints
from pyauction.engine import advise, recommend, should_consider
from pyauction.engine.recommendation import budget_cap, quality_multiplier
from pyauction.models import AcquiredPlayer, Catalog, Player, PlayerStats, TeamState


T20 = get_constraints("T20")
COMPACT = get_constraints("COMPACT")


def _player(player_id: str, role: str = "batter", nationality: str = "domestic", base_price: int = 100, **stats) -> Player:
    return Player(
        id=player_id,
        name=player_id.upper(),
        role=role,
        nationality=nationality,
        base_price=base_price,
        stats=PlayerStats(**stats),
    )


def test_quality_multiplier_adds_stat_bonuses():
    player = _player("p1", matches=120, batting_average=45.0, strike_rate=155.0)
    assert quality_multiplier(player) == pytest.approx(2.0)

    bowler = _player("p2", role="bowler", matches=60, bowling_average=22.0, economy_rate=7.5)
    assert quality_multiplier(bowler) == pytest.approx(1.5)

    assert quality_multiplier(_player("p3")) == pytest.approx(1.0)


def test_budget_cap_reserves_for_remaining_minimum():
    assert budget_cap(TeamState(team_id="t1", remaining_budget=1000), T20) == 720
    assert budget_cap(TeamState(team_id="t1", remaining_budget=100), T20) == 20


def test_recommendation_high_confidence_for_needed_quality_player():
    player = _player("p1", matches=120)
    team = TeamState(team_id="t1", remaining_budget=1000)

    result = recommend(player, team, Catalog.build([player]), constraints=T20)

    assert result.ceiling == 208
    assert result.confidence == "high"
    assert [item.factor for item in result.reasoning] == [
        "Player Quality",
        "Role Scarcity",
        "Budget Constraint",
    ]


def test_recommendation_capped_by_budget():
    player = _player("p1", base_price=50, matches=120, batting_average=45.0)
    team = TeamState(team_id="t1", remaining_budget=100)

    result = recommend(player, team, Catalog.build([player]), constraints=T20)

    assert result.ceiling == 20
    budget = next(item for item in result.reasoning if item.factor == "Budget Constraint")
    assert budget.impact == "negative"


def test_recommendation_beats_current_bid():
    player = _player("p1", base_price=20)
    team = TeamState(team_id="t1", remaining_budget=1000)

    result = recommend(player, team, Catalog.build([player]), current_bid=300, constraints=T20)

    assert result.ceiling == 305
    assert result.reasoning[-1].factor == "Current Bid"


def test_ceiling_is_monotonic_in_batting_average():
    team = TeamState(team_id="t1", remaining_budget=600)
    ceilings = []
    for average in (5.0, 25.0, 30.0, 30.5, 35.0, 40.0, 40.5, 70.0):
        player = _player("p1", base_price=80, batting_average=average)
        catalog = Catalog.build([player])
        ceilings.append(
            [
                recommend(player, team, catalog, current_bid=current_bid, constraints=T20).ceiling
                for current_bid in (None, 50, 100, 400)
            ]
        )

    for column in range(4):
        series = [row[column] for row in ceilings]
        assert series == sorted(series)


def test_overseas_slot_multiplier_applies_only_to_overseas_players():
    owned = _player("o1", nationality="overseas")
    target = _player("o2", role="bowler", nationality="overseas")
    catalog = Catalog.build([owned, target])
    team = TeamState(team_id="t1", remaining_budget=1000, squad=(AcquiredPlayer("o1", 100),))

    result = recommend(target, team, catalog, constraints=COMPACT)

    overseas = next(item for item in result.reasoning if item.factor == "Overseas Slot")
    assert overseas.impact == "negative"
    assert "Only 1 overseas slot" in overseas.explanation


def test_should_consider_rejects_full_role():
    batters = [_player(f"b{i}") for i in range(8)]
    target = _player("b-new")
    catalog = Catalog.build([target, *batters])
    team = TeamState(team_id="t1", remaining_budget=1000, squad=tuple(AcquiredPlayer(p.id, 20) for p in batters))

    gate = should_consider(target, team, catalog, T20)

    assert not gate.should_bid
    assert gate.reason == "Already have maximum batters (8/8)"


def test_should_consider_checks_overseas_before_budget():
    owned = [_player("o1", nationality="overseas"), _player("o2", role="bowler", nationality="overseas")]
    target = _player("o3", role="bowler", nationality="overseas", base_price=500)
    catalog = Catalog.build([target, *owned])
    team = TeamState(team_id="t1", remaining_budget=100, squad=tuple(AcquiredPlayer(p.id, 20) for p in owned))

    assert should_consider(target, team, catalog, COMPACT).reason == "No overseas slots available"

    domestic = _player("d1", role="bowler", base_price=500)
    gate = should_consider(domestic, team, Catalog.build([domestic, *owned]), COMPACT)
    assert gate.reason == "Insufficient budget for base price"


def test_advise_short_circuits():
    player = _player("p1")
    team = TeamState(team_id="t1", remaining_budget=1000)
    catalog = Catalog.build([player])

    assert advise(player, team, catalog, enabled=False).skip_reason == "Recommendations disabled"
    assert advise(None, team, catalog).skip_reason == "No player selected"
    assert advise(player, None, catalog).skip_reason == "No team selected"

    advice = advise(player, team, catalog)
    assert advice.should_bid
    assert advice.recommendation is not None
