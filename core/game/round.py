"""Round aggregate: seats, hands, dealer hand and settlement results."""

from dataclasses import dataclass, field
from enum import Enum, auto

from core.hand import DealerHand, Hand


@dataclass
class Seat:
    """A table position holding one or more hands (more than one after splits)."""

    name: str
    hands: list[Hand] = field(default_factory=list)
    active_index: int = 0
    is_ai: bool = False

    @property
    def active_hand(self) -> Hand | None:
        if 0 <= self.active_index < len(self.hands):
            return self.hands[self.active_index]
        return None

    def next_playing_index(self) -> int | None:
        """Index of the first hand at or after the active one still being played."""
        for index in range(self.active_index, len(self.hands)):
            if self.hands[index].is_playing:
                return index
        return None


class Outcome(Enum):
    """Settled result of a single hand."""

    WIN = auto()
    LOSS = auto()
    PUSH = auto()
    BLACKJACK = auto()
    DEALER_BLACKJACK = auto()

    @property
    def is_win(self) -> bool:
        return self in (Outcome.WIN, Outcome.BLACKJACK)

    @property
    def is_loss(self) -> bool:
        return self in (Outcome.LOSS, Outcome.DEALER_BLACKJACK)


@dataclass(frozen=True)
class HandResult:
    """Outcome of one hand; ``weight`` is 2 for doubled hands."""

    seat: str
    hand_index: int
    outcome: Outcome
    weight: int
    text: str


class ContinuationKind(Enum):
    """Queued steps that run one at a time after a visual delay."""

    DEAL_SPLIT_CARD = auto()
    AI_DECISION = auto()
    DEALER_REVEAL = auto()
    DEALER_DRAW = auto()


@dataclass(frozen=True)
class Continuation:
    """A pending step. Each one draws at most one card."""

    kind: ContinuationKind
    seat_index: int | None = None
    delay: float = 0.0


@dataclass
class Round:
    """Transient state of one deal, from the first card to settlement."""

    seats: list[Seat]
    dealer: DealerHand = field(default_factory=DealerHand)
    running_count_at_deal: int = 0
    settled: bool = False
    results: list[HandResult] = field(default_factory=list)
    result_text: str = ""

    @property
    def player(self) -> Seat:
        """The human seat is always first."""
        return self.seats[0]

    @property
    def player_hands(self) -> list[Hand]:
        return self.player.hands

    @property
    def active_hand(self) -> Hand | None:
        return self.player.active_hand

    @property
    def all_hands(self) -> list[Hand]:
        return [hand for seat in self.seats for hand in seat.hands]

    @property
    def player_has_natural(self) -> bool:
        """A natural only counts on the unsplit opening hand."""
        hands = self.player.hands
        return len(hands) == 1 and hands[0].is_blackjack
