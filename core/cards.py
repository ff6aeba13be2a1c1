"""Card and Shoe classes - immutable cards dealt from a multi-deck shoe."""

import logging
import math
from dataclasses import dataclass
from enum import Enum, auto
from random import Random
from typing import Iterable, Iterator

from core.errors import ShoeExhausted

logger = logging.getLogger(__name__)

CARDS_PER_DECK = 52

# Cut card is inserted between these fractions of the shoe size
CUT_CARD_MIN = 0.72
CUT_CARD_MAX = 0.78


class Suit(Enum):
    """Card suits."""

    SPADES = auto()
    CLUBS = auto()
    HEARTS = auto()
    DIAMONDS = auto()

    def __str__(self) -> str:
        symbols = {
            Suit.SPADES: "♠",
            Suit.CLUBS: "♣",
            Suit.HEARTS: "♥",
            Suit.DIAMONDS: "♦",
        }
        return symbols[self]


class Rank(Enum):
    """Card ranks with blackjack values."""

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self) -> str:
        if self.value <= 10:
            return str(self.value)
        return {
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
            Rank.ACE: "A",
        }[self]

    @property
    def blackjack_value(self) -> int:
        """Return the point value used for comparisons (Ace = 11, face cards = 10)."""
        if self.value <= 10:
            return self.value
        if self == Rank.ACE:
            return 11
        return 10

    @property
    def is_ace(self) -> bool:
        return self == Rank.ACE

    @property
    def is_ten_value(self) -> bool:
        return self.blackjack_value == 10

    @classmethod
    def from_symbol(cls, symbol: str) -> "Rank":
        """Parse a rank symbol such as 'A', '10', 'T' or 'k'."""
        key = symbol.strip().upper()
        if key == "T":
            return Rank.TEN
        for rank in cls:
            if str(rank) == key:
                return rank
        raise ValueError(f"Invalid rank: {symbol}")


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card. Rank alone determines value; suit is cosmetic."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        """Return the up-card comparison value (Ace = 11, face cards = 10)."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        return self.rank.is_ace

    @property
    def is_ten_value(self) -> bool:
        return self.rank.is_ten_value

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', 'Kh', '10D'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        suit_map = {
            "S": Suit.SPADES,
            "♠": Suit.SPADES,
            "C": Suit.CLUBS,
            "♣": Suit.CLUBS,
            "H": Suit.HEARTS,
            "♥": Suit.HEARTS,
            "D": Suit.DIAMONDS,
            "♦": Suit.DIAMONDS,
        }

        suit_str = s[-1]
        if suit_str not in suit_map:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(Rank.from_symbol(s[:-1]), suit_map[suit_str])


def canonical_deck() -> list[Card]:
    """Return one 52-card deck in canonical order."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


def build_shoe(num_decks: int, rng: Random | None = None) -> list[Card]:
    """
    Build a freshly shuffled shoe of ``num_decks`` full decks.

    Random.shuffle is a Fisher-Yates permutation, so every call yields an
    independent ordering of the canonical composition.
    """
    if num_decks < 1:
        raise ValueError("Shoe must have at least 1 deck")

    rng = rng or Random()
    cards = [card for _ in range(num_decks) for card in canonical_deck()]
    rng.shuffle(cards)
    return cards


def place_cut_card(
    shoe_size: int,
    rng: Random | None = None,
    low_fraction: float = CUT_CARD_MIN,
    high_fraction: float = CUT_CARD_MAX,
) -> int:
    """
    Pick the cut-card position for a shoe of ``shoe_size`` cards.

    The position is drawn uniformly from
    ``[floor(0.72 * size), floor(0.78 * size)]`` inclusive by default.
    """
    if shoe_size < 0:
        raise ValueError("Shoe size cannot be negative")
    if not 0.0 <= low_fraction <= high_fraction <= 1.0:
        raise ValueError("Cut card fractions must satisfy 0 <= low <= high <= 1")

    rng = rng or Random()
    low = math.floor(shoe_size * low_fraction)
    high = math.floor(shoe_size * high_fraction)
    return rng.randint(low, high)


class Shoe:
    """
    A multi-deck shoe with a cut card.

    Cards are drawn from the end of the internal list. Once the remaining
    depth reaches the cut-card position the cut card is revealed; the round in
    progress still completes, but the shoe must be rebuilt before the next one.
    """

    def __init__(
        self,
        num_decks: int = 6,
        rng: Random | None = None,
        cut_card_range: tuple[float, float] = (CUT_CARD_MIN, CUT_CARD_MAX),
    ) -> None:
        """
        Initialize and shuffle a shoe.

        Args:
            num_decks: Number of decks in the shoe (typically 6 or 8)
            rng: Random number generator for shuffling and cut-card placement
            cut_card_range: Fractions of the shoe size bounding the cut card
        """
        if num_decks < 1:
            raise ValueError("Shoe must have at least 1 deck")

        self._num_decks = num_decks
        self._rng = rng or Random()
        self._cut_card_range = cut_card_range
        self._cards: list[Card] = []
        self._cut_card_position = 0
        self._cut_card_revealed = False
        self.shuffle()

    @classmethod
    def stacked(
        cls,
        cards: Iterable[Card],
        cut_card_position: int = 0,
        num_decks: int = 6,
        rng: Random | None = None,
    ) -> "Shoe":
        """
        Build a shoe that deals ``cards`` first, in the given order.

        Rebuilding a stacked shoe produces a normal shuffled shoe.
        """
        shoe = cls(num_decks=num_decks, rng=rng)
        shoe._cards = list(reversed(list(cards)))
        shoe._cut_card_position = cut_card_position
        shoe._cut_card_revealed = False
        return shoe

    def shuffle(self) -> None:
        """Rebuild the shoe from all decks and place a new cut card."""
        self._cards = build_shoe(self._num_decks, self._rng)
        low, high = self._cut_card_range
        self._cut_card_position = place_cut_card(len(self._cards), self._rng, low, high)
        self._cut_card_revealed = False
        logger.info(
            "Shoe rebuilt: %d decks, cut card at %d",
            self._num_decks,
            self._cut_card_position,
        )

    def draw(self) -> Card:
        """Remove and return the next card."""
        if not self._cards:
            raise ShoeExhausted("Cannot draw from empty shoe")

        if not self._cut_card_revealed and len(self._cards) <= self._cut_card_position:
            self._cut_card_revealed = True
            logger.info("Cut card reached with %d cards remaining", len(self._cards))

        return self._cards.pop()

    @property
    def needs_shuffle(self) -> bool:
        """Check if the shoe must be rebuilt before the next round."""
        return self._cut_card_revealed or not self._cards

    @property
    def cut_card_revealed(self) -> bool:
        return self._cut_card_revealed

    @property
    def cut_card_position(self) -> int:
        return self._cut_card_position

    @property
    def cards_remaining(self) -> int:
        return len(self._cards)

    @property
    def cards_dealt(self) -> int:
        return max(self.total_cards - len(self._cards), 0)

    @property
    def total_cards(self) -> int:
        """Return the number of cards in a full shoe."""
        return self._num_decks * CARDS_PER_DECK

    @property
    def num_decks(self) -> int:
        return self._num_decks

    @property
    def decks_remaining(self) -> float:
        """Return the estimated number of decks remaining."""
        return len(self._cards) / CARDS_PER_DECK

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)
