import pytest
from pydantic import ValidationError

from pyauction.models import Player, PlayerStats, Team


def test_player_is_frozen():
    player = Player(
        id="p1",
        name="Test Player",
        role="batter",
        nationality="domestic",
        base_price=50,
        stats=PlayerStats(matches=10, batting_average=31.5),
    )

    assert player.id == "p1"
    assert player.stats.batting_average == pytest.approx(31.5)
    assert player.stats.bowling_average is None

    with pytest.raises((TypeError, ValidationError)):
        player.base_price = 60  # type: ignore[misc]


def test_is_overseas_follows_nationality():
    domestic = Player(id="d", name="D", role="bowler", nationality="domestic", base_price=20)
    overseas = Player(id="o", name="O", role="bowler", nationality="overseas", base_price=20)

    assert not domestic.is_overseas
    assert overseas.is_overseas
    assert domestic.stats.matches == 0


def test_player_rejects_non_positive_base_price_and_unknown_role():
    with pytest.raises(ValidationError):
        Player(id="p", name="P", role="batter", nationality="domestic", base_price=0)
    with pytest.raises(ValidationError):
        Player(id="p", name="P", role="captain", nationality="domestic", base_price=20)


def test_team_defaults_primary_color():
    team = Team(id="t1", name="Team One", short_name="ONE", budget=1000)
    assert team.primary_color == "#000000"
    with pytest.raises(ValidationError):
        Team(id="t2", name="Broke", short_name="BRK", budget=0)
