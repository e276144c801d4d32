import pytest

from pyauction.engine import AuctionContractError, create_initial_state, transition
from pyauction.models import (
    BiddingState,
    CompleteAuction,
    CompletedState,
    IdleState,
    InvalidBid,
    PlaceBid,
    Player,
    PlayerSold,
    PlayerUnsold,
    ResetToIdle,
    SoldState,
    StartBidding,
    Team,
    TimeExpired,
    TimerTick,
    UnsoldState,
)


PLAYER = Player(id="p1", name="Player One", role="batter", nationality="domestic", base_price=50)
TEAMS = [Team(id=f"team-{i}", name=f"Team {i}", short_name=f"T{i}", budget=1000) for i in (1, 2, 3)]


def _bidding() -> BiddingState:
    state = transition(create_initial_state(TEAMS), StartBidding(player=PLAYER))
    assert isinstance(state, BiddingState)
    return state


def _budgets(state) -> dict[str, int]:
    return {team.team_id: team.remaining_budget for team in state.teams}


def test_initial_state_is_idle_with_full_budgets():
    state = create_initial_state(TEAMS)

    assert isinstance(state, IdleState)
    assert state.completed_player_ids == ()
    assert _budgets(state) == {"team-1": 1000, "team-2": 1000, "team-3": 1000}
    assert not hasattr(state, "current_bid")


def test_start_bidding_opens_a_lot():
    state = _bidding()

    assert state.phase == "bidding"
    assert state.current_player == PLAYER
    assert state.current_bid is None
    assert state.time_remaining == 60


def test_out_of_phase_events_return_the_same_state():
    idle = create_initial_state(TEAMS)
    assert transition(idle, PlaceBid(team_id="team-1", amount=50)) is idle
    assert transition(idle, TimerTick()) is idle
    assert transition(idle, TimeExpired()) is idle
    assert transition(idle, ResetToIdle()) is idle

    bidding = _bidding()
    assert transition(bidding, StartBidding(player=PLAYER)) is bidding
    assert transition(bidding, CompleteAuction()) is bidding
    assert transition(bidding, ResetToIdle()) is bidding


@pytest.mark.parametrize(
    "closed",
    [
        lambda: transition(transition(_bidding(), PlaceBid(team_id="team-1", amount=50)), PlayerSold()),
        lambda: transition(_bidding(), PlayerUnsold()),
        lambda: transition(create_initial_state(TEAMS), CompleteAuction()),
    ],
    ids=["sold", "unsold", "completed"],
)
def test_place_bid_outside_bidding_is_ignored(closed):
    state = closed()
    assert state.phase in {"sold", "unsold", "completed"}

    assert transition(state, PlaceBid(team_id="team-2", amount=500)) is state
    assert transition(state, InvalidBid(reason="late")) is state
    assert transition(state, TimerTick()) is state


def test_unknown_event_raises():
    with pytest.raises(TypeError):
        transition(create_initial_state(TEAMS), object())  # type: ignore[arg-type]


def test_timer_extension_is_capped():
    state = transition(_bidding(), PlaceBid(team_id="team-1", amount=50))
    assert state.time_remaining == 60

    for _ in range(20):
        state = transition(state, TimerTick())
    assert state.time_remaining == 40

    state = transition(state, PlaceBid(team_id="team-2", amount=55))
    assert state.time_remaining == 55
    state = transition(state, PlaceBid(team_id="team-1", amount=60))
    assert state.time_remaining == 60


def test_timer_never_goes_negative():
    state = _bidding()
    for _ in range(65):
        state = transition(state, TimerTick())
    assert state.time_remaining == 0
    assert isinstance(state, BiddingState)


def test_invalid_bid_only_changes_message():
    state = transition(_bidding(), PlaceBid(team_id="team-1", amount=50))
    after = transition(state, InvalidBid(reason="Bid must be at least 55."))

    assert after.current_bid == state.current_bid
    assert after.time_remaining == state.time_remaining
    assert after.message == "Invalid bid: Bid must be at least 55."


def test_time_expired_sells_to_highest_bidder():
    state = _bidding()
    state = transition(state, PlaceBid(team_id="team-1", amount=100))
    state = transition(state, PlaceBid(team_id="team-3", amount=120))

    sold = transition(state, TimeExpired())

    assert isinstance(sold, SoldState)
    assert sold.sold_player == PLAYER
    assert sold.winning_bid.team_id == "team-3"
    assert _budgets(sold) == {"team-1": 1000, "team-2": 1000, "team-3": 880}
    assert sold.completed_player_ids.count("p1") == 1
    winner = next(team for team in sold.teams if team.team_id == "team-3")
    assert [(a.player_id, a.purchase_price) for a in winner.squad] == [("p1", 120)]


def test_expiry_without_bids_is_unsold():
    unsold = transition(_bidding(), TimeExpired())

    assert isinstance(unsold, UnsoldState)
    assert unsold.unsold_player == PLAYER
    assert unsold.completed_player_ids == ("p1",)
    assert _budgets(unsold) == {"team-1": 1000, "team-2": 1000, "team-3": 1000}


def test_player_sold_without_bid_goes_unsold():
    assert isinstance(transition(_bidding(), PlayerSold()), UnsoldState)


def test_pass_is_ignored_while_a_bid_stands():
    state = transition(_bidding(), PlaceBid(team_id="team-2", amount=50))
    assert transition(state, PlayerUnsold()) is state

    passed = transition(_bidding(), PlayerUnsold())
    assert isinstance(passed, UnsoldState)


def test_reset_and_complete():
    sold = transition(transition(_bidding(), PlaceBid(team_id="team-2", amount=75)), PlayerSold())

    idle = transition(sold, ResetToIdle())
    assert isinstance(idle, IdleState)
    assert idle.teams == sold.teams
    assert idle.completed_player_ids == ("p1",)

    done = transition(idle, CompleteAuction())
    assert isinstance(done, CompletedState)
    assert transition(done, CompleteAuction()) is done
    assert transition(done, StartBidding(player=PLAYER)) is done


def test_budget_is_conserved_across_a_sequence_of_sales():
    players = [
        Player(id=f"p{i}", name=f"P{i}", role="bowler", nationality="domestic", base_price=20)
        for i in range(5)
    ]
    state = create_initial_state(TEAMS)
    for index, player in enumerate(players):
        state = transition(state, StartBidding(player=player))
        state = transition(state, PlaceBid(team_id=TEAMS[index % 3].id, amount=20 + index * 15))
        state = transition(state, TimeExpired())
        state = transition(state, ResetToIdle())

    for team in state.teams:
        assert team.remaining_budget + team.budget_spent == 1000
        assert team.remaining_budget >= 0
    assert len(set(state.completed_player_ids)) == len(state.completed_player_ids) == 5


def test_sale_beyond_budget_is_a_contract_error():
    state = transition(_bidding(), PlaceBid(team_id="team-1", amount=5000))
    with pytest.raises(AuctionContractError):
        transition(state, TimeExpired())

    state = transition(_bidding(), PlaceBid(team_id="ghost", amount=50))
    with pytest.raises(AuctionContractError):
        transition(state, TimeExpired())
