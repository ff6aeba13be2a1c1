"""Count confirmation and manual shoe tracker endpoints."""

from fastapi import APIRouter

from api.routes.game import SessionDep, deviation_to_response
from api.schemas import (
    CountCheckResponse,
    CountEntryRequest,
    CounterCardRequest,
    CounterNewRequest,
    CounterStateResponse,
    CountPointResponse,
    RankRemainingResponse,
)
from core.counting import ShoeTracker
from core.errors import InvalidAction
from core.strategy import active_deviations

count_router = APIRouter()
counter_router = APIRouter()


def _counter_state(tracker: ShoeTracker) -> CounterStateResponse:
    return CounterStateResponse(
        num_decks=tracker.num_decks,
        cards_played=tracker.cards_played,
        cards_remaining=tracker.cards_remaining,
        running_count=tracker.running_count,
        true_count=tracker.true_count,
        remaining_by_rank=[
            RankRemainingResponse.model_validate(r) for r in tracker.remaining_by_rank
        ],
        chart=[CountPointResponse.model_validate(p) for p in tracker.chart],
        deviations=[
            deviation_to_response(p) for p in active_deviations(tracker.true_count)
        ],
    )


@count_router.post("/confirm")
async def confirm_count(request: CountEntryRequest, session: SessionDep) -> CountCheckResponse:
    """Check a running-count entry against the live count."""
    check = session.trainer.confirm_count_entry(request.value)
    return CountCheckResponse.model_validate(check)


@counter_router.post("/new")
async def new_counter(request: CounterNewRequest, session: SessionDep) -> CounterStateResponse:
    """Start over, optionally with a different deck count."""
    session.tracker.reset(request.num_decks)
    return _counter_state(session.tracker)


@counter_router.post("/card")
async def record_card(request: CounterCardRequest, session: SessionDep) -> CounterStateResponse:
    """Record one card seen at the table."""
    try:
        session.tracker.record(request.rank)
    except ValueError as exc:
        raise InvalidAction(str(exc), action=request.rank) from exc
    return _counter_state(session.tracker)


@counter_router.post("/undo")
async def undo_card(session: SessionDep) -> CounterStateResponse:
    """Remove the most recently recorded card."""
    session.tracker.undo()
    return _counter_state(session.tracker)


@counter_router.get("/state")
async def counter_state(session: SessionDep) -> CounterStateResponse:
    return _counter_state(session.tracker)
