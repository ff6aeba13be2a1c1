"""Pydantic schemas for API requests and responses."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


# Session schemas
class SessionResponse(BaseModel):
    """A freshly created signed session token."""

    session_id: str


# Game schemas
class ModeRequest(BaseModel):
    """Request to start a training session in a mode."""

    mode: Literal["strategy", "counting"]


class ActionRequest(BaseModel):
    """Request for player action (H, S, D or P)."""

    action: str = Field(..., min_length=1, max_length=8)


class CardResponse(BaseModel):
    """Card representation."""

    model_config = ConfigDict(from_attributes=True)

    rank: str
    suit: str
    value: int


class HandResponse(BaseModel):
    """Hand representation."""

    cards: list[CardResponse]
    display: str
    total: int
    is_soft: bool
    status: Literal["playing", "stood", "bust"]
    is_doubled: bool
    is_split_hand: bool
    is_blackjack: bool


class SeatResponse(BaseModel):
    """A table seat with its hands."""

    name: str
    is_ai: bool
    active_index: int
    hands: list[HandResponse]


class DealerResponse(BaseModel):
    """Dealer hand as the player sees it."""

    cards: list[CardResponse]
    display: str
    hole_card_hidden: bool


class StatsResponse(BaseModel):
    """Session statistics."""

    model_config = ConfigDict(from_attributes=True)

    correct: int
    incorrect: int
    wins: int
    losses: int
    pushes: int
    player_blackjacks: int
    dealer_blackjacks: int
    streak: int
    best_streak: int
    count_checks_correct: int
    count_checks_incorrect: int
    rounds_settled: int
    accuracy: float


class DeviationResponse(BaseModel):
    """An index play in effect at the current true count."""

    label: str
    index: float
    direction: Literal["at_or_above", "at_or_below"]


class GameStateResponse(BaseModel):
    """Current trainer state."""

    mode: Literal["strategy", "counting"]
    state: str
    seats: list[SeatResponse]
    dealer: DealerResponse | None
    result_text: str
    pending_steps: int
    running_count: int
    true_count: float
    cards_remaining: int
    total_cards: int
    cut_card_revealed: bool
    count_prompt_due: bool
    stats: StatsResponse
    deviations: list[DeviationResponse]


class ActionResponse(BaseModel):
    """Outcome of judging a player action."""

    action: str
    recommended: str
    correct: bool
    game: GameStateResponse


class HistoryEntryResponse(BaseModel):
    """One history log line."""

    model_config = ConfigDict(from_attributes=True)

    text: str
    correct: bool | None
    is_result: bool


# Counting schemas
class CountEntryRequest(BaseModel):
    """A running-count entry; strings are parsed by the trainer."""

    value: int | str


class CountCheckResponse(BaseModel):
    """Count entry verification result."""

    model_config = ConfigDict(from_attributes=True)

    entered: int
    expected: int
    correct: bool


class CounterNewRequest(BaseModel):
    """Start a manual shoe tracker."""

    num_decks: int = Field(default=8, ge=1, le=8)


class CounterCardRequest(BaseModel):
    """Record one seen card by rank (A, 2-9, T/10/J/Q/K)."""

    rank: str = Field(..., min_length=1, max_length=2)


class CountPointResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    running_count: int
    true_count: float


class RankRemainingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    key: str
    remaining: int
    percent: float


class CounterStateResponse(BaseModel):
    """Manual shoe tracker state."""

    num_decks: int
    cards_played: int
    cards_remaining: int
    running_count: int
    true_count: float
    remaining_by_rank: list[RankRemainingResponse]
    chart: list[CountPointResponse]
    deviations: list[DeviationResponse]
