import pytest

from pyauction.config import get_constraints
from pyauction.engine import AuctionSession, ViolationKind
from pyauction.models import BiddingState, Catalog, CatalogLookupError, IdleState, Player, SoldState, Team, UnsoldState


def _catalog() -> Catalog:
    players = [
        Player(id="p1", name="Opener", role="batter", nationality="domestic", base_price=50),
        Player(id="p2", name="Quick", role="bowler", nationality="overseas", base_price=80),
        Player(id="p3", name="Keeper", role="wicket-keeper", nationality="domestic", base_price=30),
    ]
    teams = [
        Team(id="t1", name="Team One", short_name="ONE", budget=500),
        Team(id="t2", name="Team Two", short_name="TWO", budget=60),
    ]
    return Catalog.build(players, teams)


def _session() -> AuctionSession:
    return AuctionSession(_catalog(), constraints=get_constraints("COMPACT"))


def test_place_bid_rejection_keeps_standing_bid():
    session = _session()
    session.start_bidding("p1")
    assert session.place_bid("t1", 50).is_valid

    result = session.place_bid("t2", 52)

    assert result.kinds == (ViolationKind.BID_TOO_LOW,)
    state = session.state
    assert isinstance(state, BiddingState)
    assert state.current_bid.team_id == "t1"
    assert state.message.startswith("Invalid bid: Bid must be at least 55")


def test_over_budget_bid_is_rejected_before_dispatch():
    session = _session()
    session.start_bidding("p2")

    result = session.place_bid("t2", 80)

    assert result.kinds == (ViolationKind.INSUFFICIENT_BUDGET,)
    assert session.state.current_bid is None
    assert not session.can_team_afford("t2", 80)
    assert session.eligible_bidders() == ["t1"]


def test_listeners_receive_outcomes_and_failures_are_contained():
    session = _session()
    received = []

    def broken(outcome):
        raise RuntimeError("disk full")

    session.subscribe(broken)
    session.subscribe(received.append)

    session.start_bidding("p1")
    session.place_bid("t1", 60)
    state = session.sell()

    assert isinstance(state, SoldState)
    assert received[0].player_id == "p1"
    assert received[0].team_id == "t1"
    assert received[0].price == 60
    assert session.team_state("t1").remaining_budget == 440

    session.reset()
    session.start_bidding("p3")
    session.pass_player()
    assert received[1].player_id == "p3"
    assert not received[1].sold


def test_ignored_events_do_not_notify():
    session = _session()
    received = []
    session.subscribe(received.append)

    session.sell()
    session.expire()

    assert received == []
    assert isinstance(session.state, IdleState)


def test_start_bidding_unknown_player_raises():
    with pytest.raises(CatalogLookupError):
        _session().start_bidding("ghost")


def test_start_bidding_skips_already_auctioned_player():
    session = _session()
    session.start_bidding("p3")
    session.expire()
    session.reset()

    state = session.start_bidding("p3")

    assert isinstance(state, IdleState)


def test_queries_during_bidding():
    session = _session()
    assert session.minimum_valid_bid() is None
    assert session.suggested_bids() == []

    session.start_bidding("p1")
    assert session.suggested_bids() == [50]
    assert [p.id for p in session.remaining_players()] == ["p2", "p3"]

    session.place_bid("t1", 50)
    assert session.minimum_valid_bid() == 55
    assert session.suggested_bids() == [55, 60, 70]


def test_recommendation_query_follows_phase():
    session = _session()
    assert session.recommend_for("t1").skip_reason == "No player selected"

    session.start_bidding("p1")
    advice = session.recommend_for("t1")
    assert advice.should_bid
    assert advice.recommendation.ceiling >= 50
    assert session.recommend_for("nope").skip_reason == "No team selected"


def test_player_statuses_and_final_report():
    session = _session()
    session.start_bidding("p1")
    session.place_bid("t2", 55)
    session.expire()
    session.reset()
    session.start_bidding("p2")
    session.expire()

    statuses = {entry["player"].id: entry for entry in session.player_statuses()}
    assert statuses["p1"]["status"] == "sold"
    assert statuses["p1"]["sold_to"] == "t2"
    assert statuses["p1"]["sold_price"] == 55
    assert statuses["p2"]["status"] == "unsold"
    assert statuses["p3"]["status"] == "available"
    assert isinstance(session.state, UnsoldState)

    report = session.final_squad_report()
    assert set(report) == {"t1", "t2"}
    assert not report["t2"].is_valid

    summary = session.squad_summary("t2")
    assert summary.total_players == 1
    assert summary.budget_remaining == 5
    assert session.squad_summary("nope") is None
