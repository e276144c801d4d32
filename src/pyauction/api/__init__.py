"""REST API for a single in-process auction."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any, Callable, Optional

from fastapi import BackgroundTasks, FastAPI, HTTPException, Query

from pyauction.api.schemas import (
    AcquiredPlayerResponse,
    AdviceResponse,
    AuctionDetailResponse,
    AuctionRecordResponse,
    AuctionStateResponse,
    BidRecommendationResponse,
    BidRequest,
    BidResponse,
    CurrentBidResponse,
    FinalCheckResponse,
    PlayerStatusResponse,
    ReasoningFactorResponse,
    RoleBreakdownResponse,
    SaleRecordResponse,
    SquadSummaryResponse,
    StartBiddingRequest,
    TeamStateResponse,
    ViolationResponse,
)
from pyauction.config import DEFAULT_SQUAD_CONSTRAINTS, DEFAULT_TIMING, AuctionTiming, SquadConstraints
from pyauction.engine import (
    Advice,
    AuctionSession,
    SquadSummary,
    ValidationResult,
    sale_outcome,
    validate_final_squad,
)
from pyauction.ingest import load_default_catalog
from pyauction.models import (
    AuctionState,
    BiddingState,
    Catalog,
    CatalogLookupError,
    CompletedState,
    CurrentBid,
    Player,
    SaleOutcome,
    SoldState,
    Team,
    TeamState,
    UnsoldState,
)
from pyauction.persistence import AuctionRecord, DuplicateSaleError, SaleStore, SaleStoreSink, default_db_path
from pyauction.simulation import CountdownDriver


logger = logging.getLogger(__name__)


def _bid_response(bid: Optional[CurrentBid]) -> Optional[CurrentBidResponse]:
    if bid is None:
        return None
    return CurrentBidResponse(team_id=bid.team_id, amount=bid.amount)


def _team_state_response(team: TeamState) -> TeamStateResponse:
    return TeamStateResponse(
        team_id=team.team_id,
        remaining_budget=team.remaining_budget,
        budget_spent=team.budget_spent,
        squad=[
            AcquiredPlayerResponse(player_id=acquired.player_id, purchase_price=acquired.purchase_price)
            for acquired in team.squad
        ],
    )


def _violations(result: ValidationResult) -> list[ViolationResponse]:
    return [
        ViolationResponse(kind=violation.kind.value, message=violation.message, context=dict(violation.context))
        for violation in result.violations
    ]


def _advice_response(team_id: str, advice: Advice) -> AdviceResponse:
    recommendation = None
    if advice.recommendation is not None:
        recommendation = BidRecommendationResponse(
            ceiling=advice.recommendation.ceiling,
            confidence=advice.recommendation.confidence,
            reasoning=[
                ReasoningFactorResponse(factor=item.factor, impact=item.impact, explanation=item.explanation)
                for item in advice.recommendation.reasoning
            ],
        )
    return AdviceResponse(
        team_id=team_id,
        should_bid=advice.should_bid,
        skip_reason=advice.skip_reason,
        recommendation=recommendation,
    )


def _summary_response(summary: SquadSummary) -> SquadSummaryResponse:
    return SquadSummaryResponse(
        team_id=summary.team_id,
        total_players=summary.total_players,
        max_players=summary.max_players,
        overseas_count=summary.overseas_count,
        max_overseas=summary.max_overseas,
        role_breakdown={
            role: RoleBreakdownResponse(current=limits.current, min=limits.min, max=limits.max)
            for role, limits in summary.role_breakdown.items()
        },
        budget_used=summary.budget_used,
        budget_remaining=summary.budget_remaining,
    )


def _record_response(record: AuctionRecord) -> AuctionRecordResponse:
    return AuctionRecordResponse(
        auction_id=record.auction_id,
        name=record.name,
        constraints=record.constraints,
        state=record.state,
        created_at=record.created_at,
        updated_at=record.updated_at,
        completed_at=record.completed_at,
    )


def create_app(
    catalog: Catalog | None = None,
    *,
    db_path: Path | str | None = None,
    constraints: SquadConstraints = DEFAULT_SQUAD_CONSTRAINTS,
    timing: AuctionTiming = DEFAULT_TIMING,
) -> FastAPI:
    app = FastAPI(title="pyauction")
    catalog = catalog if catalog is not None else load_default_catalog()
    store = SaleStore(db_path if db_path is not None else default_db_path())
    session = AuctionSession(catalog, constraints=constraints, timing=timing)
    driver = CountdownDriver(session)
    auction = store.start_auction(name=f"{len(catalog.teams)} teams", constraints=constraints.name)
    sink = SaleStoreSink(store, auction.auction_id)

    app.state.catalog = catalog
    app.state.sale_store = store
    app.state.session = session
    app.state.auction_id = auction.auction_id

    def persist_outcome(outcome: SaleOutcome) -> None:
        try:
            sink(outcome)
        except (sqlite3.Error, DuplicateSaleError):
            logger.exception("Failed to persist outcome for player %s", outcome.player_id)

    def persist_completion() -> None:
        try:
            store.complete_auction(auction.auction_id)
        except (sqlite3.Error, KeyError):
            logger.exception("Failed to mark auction %s completed", auction.auction_id)

    def state_response(state: AuctionState) -> AuctionStateResponse:
        payload: dict[str, Any] = {
            "phase": state.phase,
            "message": state.message,
            "auction_id": auction.auction_id,
            "completed_player_ids": list(state.completed_player_ids),
            "teams": [_team_state_response(team) for team in state.teams],
        }
        if isinstance(state, BiddingState):
            payload.update(
                current_player=state.current_player,
                current_bid=_bid_response(state.current_bid),
                time_remaining=state.time_remaining,
                minimum_bid=session.minimum_valid_bid(),
                suggested_bids=session.suggested_bids(),
            )
        elif isinstance(state, SoldState):
            payload.update(sold_player=state.sold_player, winning_bid=_bid_response(state.winning_bid))
        elif isinstance(state, UnsoldState):
            payload.update(unsold_player=state.unsold_player)
        return AuctionStateResponse(**payload)

    def run_action(action: Callable[[], AuctionState], background_tasks: BackgroundTasks) -> AuctionStateResponse:
        previous = session.state
        state = action()
        if state is not previous:
            outcome = sale_outcome(state)
            if outcome is not None:
                background_tasks.add_task(persist_outcome, outcome)
            if isinstance(state, CompletedState):
                background_tasks.add_task(persist_completion)
        return state_response(state)

    def team_state_or_404(team_id: str) -> TeamState:
        team = session.team_state(team_id)
        if team is None:
            raise HTTPException(status_code=404, detail="Team not found")
        return team

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/players", response_model=list[PlayerStatusResponse])
    async def list_players(status: Optional[str] = Query(default=None)):
        statuses = session.player_statuses()
        if status:
            statuses = [entry for entry in statuses if entry["status"] == status]
        return [PlayerStatusResponse(**entry) for entry in statuses]

    @app.get("/players/{player_id}", response_model=Player)
    async def get_player(player_id: str):
        try:
            return catalog.player(player_id)
        except CatalogLookupError as exc:
            raise HTTPException(status_code=404, detail="Player not found") from exc

    @app.get("/teams", response_model=list[Team])
    async def list_teams():
        return list(catalog.teams)

    @app.get("/teams/{team_id}", response_model=Team)
    async def get_team(team_id: str):
        try:
            return catalog.team(team_id)
        except CatalogLookupError as exc:
            raise HTTPException(status_code=404, detail="Team not found") from exc

    @app.get("/teams/{team_id}/summary", response_model=SquadSummaryResponse)
    async def team_summary(team_id: str):
        summary = session.squad_summary(team_id)
        if summary is None:
            raise HTTPException(status_code=404, detail="Team not found")
        return _summary_response(summary)

    @app.get("/teams/{team_id}/final-check", response_model=FinalCheckResponse)
    async def team_final_check(team_id: str):
        team = team_state_or_404(team_id)
        result = validate_final_squad(team, catalog, constraints)
        return FinalCheckResponse(team_id=team_id, is_valid=result.is_valid, violations=_violations(result))

    @app.get("/auction", response_model=AuctionStateResponse)
    async def get_auction_state():
        return state_response(session.state)

    @app.post("/auction/start", response_model=AuctionStateResponse)
    async def start_bidding(payload: StartBiddingRequest, background_tasks: BackgroundTasks):
        try:
            player = catalog.player(payload.player_id)
        except CatalogLookupError as exc:
            raise HTTPException(status_code=404, detail="Player not found") from exc
        return run_action(lambda: session.start_bidding(player), background_tasks)

    @app.post("/auction/bid", response_model=BidResponse)
    async def place_bid(payload: BidRequest):
        result = session.place_bid(payload.team_id, payload.amount)
        return BidResponse(
            accepted=result.is_valid,
            violations=_violations(result),
            state=state_response(session.state),
        )

    @app.post("/auction/tick", response_model=AuctionStateResponse)
    async def tick(background_tasks: BackgroundTasks):
        return run_action(driver.step, background_tasks)

    @app.post("/auction/expire", response_model=AuctionStateResponse)
    async def expire(background_tasks: BackgroundTasks):
        return run_action(session.expire, background_tasks)

    @app.post("/auction/sell", response_model=AuctionStateResponse)
    async def sell(background_tasks: BackgroundTasks):
        return run_action(session.sell, background_tasks)

    @app.post("/auction/pass", response_model=AuctionStateResponse)
    async def pass_player(background_tasks: BackgroundTasks):
        return run_action(session.pass_player, background_tasks)

    @app.post("/auction/reset", response_model=AuctionStateResponse)
    async def reset(background_tasks: BackgroundTasks):
        return run_action(session.reset, background_tasks)

    @app.post("/auction/complete", response_model=AuctionStateResponse)
    async def complete(background_tasks: BackgroundTasks):
        return run_action(session.complete, background_tasks)

    @app.get("/auction/recommendation/{team_id}", response_model=AdviceResponse)
    async def recommendation(team_id: str):
        team_state_or_404(team_id)
        return _advice_response(team_id, session.recommend_for(team_id))

    @app.get("/auctions", response_model=list[AuctionRecordResponse])
    async def list_auctions(limit: int = 50):
        return [_record_response(record) for record in store.list_auctions(limit=limit)]

    @app.get("/auctions/{auction_id}", response_model=AuctionDetailResponse)
    async def get_auction(auction_id: str):
        record = store.get_auction(auction_id)
        if record is None:
            raise HTTPException(status_code=404, detail="Auction not found")
        sales = [
            SaleRecordResponse(
                player_id=sale.player_id,
                status=sale.status,
                team_id=sale.team_id,
                price=sale.price,
                recorded_at=sale.recorded_at,
            )
            for sale in store.list_sales(auction_id)
        ]
        return AuctionDetailResponse(auction=_record_response(record), sales=sales)

    return app
