"""Game API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from api.schemas import (
    ActionRequest,
    ActionResponse,
    CardResponse,
    DealerResponse,
    DeviationResponse,
    GameStateResponse,
    HandResponse,
    HistoryEntryResponse,
    ModeRequest,
    SeatResponse,
    StatsResponse,
)
from api.session import TrainerSession, require_session
from core.cards import Card
from core.game import Trainer
from core.hand import DealerHand, Hand
from core.strategy import IndexPlay

router = APIRouter()

SessionDep = Annotated[TrainerSession, Depends(require_session)]


def card_to_response(card: Card) -> CardResponse:
    return CardResponse(rank=str(card.rank), suit=str(card.suit), value=card.value)


def deviation_to_response(play: IndexPlay) -> DeviationResponse:
    return DeviationResponse(label=play.label, index=play.index, direction=play.direction)


def _hand_to_response(hand: Hand) -> HandResponse:
    """Convert a Hand to HandResponse."""
    result = hand.score
    return HandResponse(
        cards=[card_to_response(c) for c in hand.cards],
        display=result.display,
        total=result.total,
        is_soft=result.is_soft,
        status=hand.status.value,
        is_doubled=hand.is_doubled,
        is_split_hand=hand.is_split_hand,
        is_blackjack=hand.is_blackjack,
    )


def _dealer_to_response(dealer: DealerHand) -> DealerResponse:
    """Only the cards the player can see are sent."""
    return DealerResponse(
        cards=[card_to_response(c) for c in dealer.visible_cards],
        display=dealer.visible_score.display,
        hole_card_hidden=dealer.hole_card_hidden,
    )


def game_state_response(trainer: Trainer) -> GameStateResponse:
    """Convert trainer state to response."""
    session = trainer.session
    engine = trainer.engine
    rnd = engine.round
    shoe = trainer.shoe_summary
    stats = session.stats

    seats = []
    if rnd is not None:
        seats = [
            SeatResponse(
                name=seat.name,
                is_ai=seat.is_ai,
                active_index=seat.active_index,
                hands=[_hand_to_response(h) for h in seat.hands],
            )
            for seat in rnd.seats
        ]

    return GameStateResponse(
        mode=session.mode.value,
        state=str(engine.state),
        seats=seats,
        dealer=_dealer_to_response(rnd.dealer) if rnd is not None else None,
        result_text=rnd.result_text if rnd is not None else "",
        pending_steps=len(engine.pending),
        running_count=trainer.running_count,
        true_count=trainer.true_count,
        cards_remaining=shoe.cards_remaining,
        total_cards=shoe.total_cards,
        cut_card_revealed=shoe.cut_card_revealed,
        count_prompt_due=session.count_prompt_due,
        stats=StatsResponse(
            correct=stats.correct,
            incorrect=stats.incorrect,
            wins=stats.wins,
            losses=stats.losses,
            pushes=stats.pushes,
            player_blackjacks=stats.player_blackjacks,
            dealer_blackjacks=stats.dealer_blackjacks,
            streak=stats.streak,
            best_streak=stats.best_streak,
            count_checks_correct=stats.count_checks_correct,
            count_checks_incorrect=stats.count_checks_incorrect,
            rounds_settled=stats.rounds_settled,
            accuracy=stats.accuracy,
        ),
        deviations=[deviation_to_response(p) for p in trainer.deviations],
    )


@router.post("/mode")
async def select_mode(request: ModeRequest, session: SessionDep) -> GameStateResponse:
    """Start training in a mode with a fresh shoe and statistics."""
    session.trainer.select_mode(request.mode)
    return game_state_response(session.trainer)


@router.post("/deal")
async def deal(session: SessionDep) -> GameStateResponse:
    """Deal a new round."""
    session.trainer.deal_new_game()
    return game_state_response(session.trainer)


@router.post("/action")
async def player_action(request: ActionRequest, session: SessionDep) -> ActionResponse:
    """Judge and apply a player action."""
    trainer = session.trainer
    recommended = trainer.player_action(request.action)
    action = request.action.strip().upper()
    return ActionResponse(
        action=action,
        recommended=recommended.code,
        correct=action == recommended.code,
        game=game_state_response(trainer),
    )


@router.post("/advance")
async def advance(session: SessionDep) -> GameStateResponse:
    """Run one queued step (split card, AI decision, dealer draw)."""
    session.trainer.advance()
    return game_state_response(session.trainer)


@router.get("/state")
async def get_state(session: SessionDep) -> GameStateResponse:
    """Get current game state."""
    return game_state_response(session.trainer)


@router.get("/history")
async def get_history(
    session: SessionDep,
    limit: Annotated[int | None, Query(ge=1, le=500)] = None,
) -> list[HistoryEntryResponse]:
    """Most recent history entries first."""
    return [HistoryEntryResponse.model_validate(e) for e in session.trainer.history(limit)]
