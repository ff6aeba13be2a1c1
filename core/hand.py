"""Hand scoring and hand lifecycle for blackjack."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, NamedTuple

from core.cards import Card


class Score(NamedTuple):
    """Result of scoring a list of cards."""

    total: int
    is_soft: bool
    display: str


def score(cards: Iterable[Card]) -> Score:
    """
    Score a hand from its cards alone.

    Non-ace cards are summed (face cards = 10) and aces counted separately.
    With ``k`` aces the low reading counts every ace as 1 and the high
    reading promotes one ace to 11. A two-card high reading of 21 is a
    natural and displays as "Blackjack". A busting high reading falls back
    to the low reading; otherwise the hand is soft and both readings are
    shown as "low / high".
    """
    cards = list(cards)
    base = 0
    aces = 0

    for card in cards:
        if card.is_ace:
            aces += 1
        else:
            base += card.value

    if aces == 0:
        return Score(base, False, str(base))

    low = base + aces
    high = low + 10

    if high == 21 and len(cards) == 2:
        return Score(21, False, "Blackjack")
    if high > 21:
        return Score(low, False, str(low))
    return Score(high, True, f"{low} / {high}")


class HandStatus(Enum):
    """Hand lifecycle. Transitions only move forward from PLAYING."""

    PLAYING = "playing"
    STOOD = "stood"
    BUST = "bust"

    def __str__(self) -> str:
        return self.value


@dataclass
class Hand:
    """A blackjack hand with value calculation."""

    cards: list[Card] = field(default_factory=list)
    status: HandStatus = HandStatus.PLAYING
    is_doubled: bool = False
    is_split_hand: bool = False

    def add_card(self, card: Card) -> None:
        """Add a card to a hand that is still being played."""
        if self.is_frozen:
            raise ValueError(f"Cannot add a card to a {self.status} hand")
        self.cards.append(card)

    def stand(self) -> None:
        """Freeze the hand as stood."""
        self._freeze(HandStatus.STOOD)

    def bust(self) -> None:
        """Freeze the hand as bust."""
        self._freeze(HandStatus.BUST)

    def settle_after_card(self) -> None:
        """Auto-freeze the hand once it reaches 21 or busts."""
        if self.is_frozen:
            return
        if self.value > 21:
            self.bust()
        elif self.value == 21:
            self.stand()

    def _freeze(self, status: HandStatus) -> None:
        if self.is_frozen:
            raise ValueError(f"Hand is already {self.status}")
        self.status = status

    @property
    def score(self) -> Score:
        return score(self.cards)

    @property
    def value(self) -> int:
        return self.score.total

    @property
    def is_soft(self) -> bool:
        return self.score.is_soft

    @property
    def display(self) -> str:
        return self.score.display

    @property
    def is_frozen(self) -> bool:
        return self.status != HandStatus.PLAYING

    @property
    def is_playing(self) -> bool:
        return self.status == HandStatus.PLAYING

    @property
    def is_blackjack(self) -> bool:
        """Check if the hand is a natural (two-card 21 not made by splitting)."""
        return len(self.cards) == 2 and self.value == 21 and not self.is_split_hand

    @property
    def is_busted(self) -> bool:
        return self.value > 21

    @property
    def is_pair(self) -> bool:
        """Check if the hand is two cards of the same rank."""
        return len(self.cards) == 2 and self.cards[0].rank == self.cards[1].rank

    @property
    def can_double(self) -> bool:
        return self.is_playing and len(self.cards) == 2

    @property
    def can_split(self) -> bool:
        return self.is_playing and self.is_pair

    @property
    def awaiting_card(self) -> bool:
        """Check if a freshly split hand still needs its second card."""
        return self.is_playing and len(self.cards) < 2

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        return f"{cards_str} ({self.display})"


@dataclass
class DealerHand(Hand):
    """Dealer hand whose second card stays hidden until the dealer's turn."""

    hole_card_hidden: bool = False

    def add_hole_card(self, card: Card) -> None:
        """Add the face-down second card."""
        self.add_card(card)
        self.hole_card_hidden = True

    def reveal(self) -> None:
        self.hole_card_hidden = False

    @property
    def up_card(self) -> Card | None:
        return self.cards[0] if self.cards else None

    @property
    def visible_cards(self) -> list[Card]:
        if self.hole_card_hidden:
            return self.cards[:1]
        return list(self.cards)

    @property
    def visible_score(self) -> Score:
        """Score of what the player can see."""
        return score(self.visible_cards)

    def should_hit(self, hits_soft_17: bool = True) -> bool:
        """Dealer draws below 17, and on soft 17 under H17 rules."""
        result = self.score
        if result.total < 17:
            return True
        return hits_soft_17 and result.total == 17 and result.is_soft

    @property
    def is_blackjack(self) -> bool:
        return len(self.cards) == 2 and self.value == 21
