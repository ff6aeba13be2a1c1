"""Manual shoe tracker for counting cards seen at a real table."""

import logging
from dataclasses import dataclass

from core.cards import CARDS_PER_DECK
from core.counting.base import true_count
from core.errors import ShoeExhausted

logger = logging.getLogger(__name__)

# Tens, jacks, queens and kings share the "T" key
RANK_KEYS = ("A", "2", "3", "4", "5", "6", "7", "8", "9", "T")

KEY_TAGS = {
    "A": -1, "2": 1, "3": 1, "4": 1, "5": 1, "6": 1,
    "7": 0, "8": 0, "9": 0, "T": -1,
}

MAX_DECKS = 8


@dataclass(frozen=True)
class CountPoint:
    """Running and true count after one recorded card."""

    running_count: int
    true_count: float


@dataclass(frozen=True)
class RankRemaining:
    """Unseen cards of one rank key."""

    key: str
    remaining: int
    percent: float


def normalize_key(rank: str) -> str:
    """Map rank input such as '10', 'K' or 'a' onto a tracker key."""
    key = str(rank).strip().upper()
    if key in ("10", "J", "Q", "K"):
        return "T"
    if key == "1":
        return "A"
    if key not in KEY_TAGS:
        raise ValueError(f"Invalid rank: {rank!r}")
    return key


class ShoeTracker:
    """
    Tally of cards seen from a shoe of ``num_decks`` decks.

    Every record can be undone; changing the deck count starts over.
    """

    def __init__(self, num_decks: int = 8) -> None:
        self._num_decks = self._validate_decks(num_decks)
        self._played: list[str] = []
        self._points: list[CountPoint] = []
        self._played_by_key = dict.fromkeys(RANK_KEYS, 0)
        self._running_count = 0

    @staticmethod
    def _validate_decks(num_decks: int) -> int:
        if not 1 <= num_decks <= MAX_DECKS:
            raise ValueError(f"num_decks must be between 1 and {MAX_DECKS}")
        return num_decks

    def record(self, rank: str) -> CountPoint:
        """Record one card by rank and return the updated counts."""
        key = normalize_key(rank)
        if self.cards_remaining <= 0:
            raise ShoeExhausted("Every card in the shoe has been recorded")
        if self._played_by_key[key] >= self.cards_per_key(key):
            raise ShoeExhausted(f"No {key} cards remain in the shoe")

        self._played.append(key)
        self._played_by_key[key] += 1
        self._running_count += KEY_TAGS[key]

        point = CountPoint(self._running_count, self.true_count)
        self._points.append(point)
        return point

    def undo(self) -> str | None:
        """Remove the most recent record. Returns its key, or None if empty."""
        if not self._played:
            return None

        key = self._played.pop()
        self._points.pop()
        self._played_by_key[key] -= 1
        self._running_count -= KEY_TAGS[key]
        return key

    def reset(self, num_decks: int | None = None) -> None:
        """Clear all records, optionally switching the deck count."""
        if num_decks is not None:
            self._num_decks = self._validate_decks(num_decks)
        self._played.clear()
        self._points.clear()
        self._played_by_key = dict.fromkeys(RANK_KEYS, 0)
        self._running_count = 0
        logger.info("Shoe tracker reset with %d decks", self._num_decks)

    def cards_per_key(self, key: str) -> int:
        per_deck = 16 if key == "T" else 4
        return per_deck * self._num_decks

    @property
    def num_decks(self) -> int:
        return self._num_decks

    @property
    def total_cards(self) -> int:
        return self._num_decks * CARDS_PER_DECK

    @property
    def cards_played(self) -> int:
        return len(self._played)

    @property
    def cards_remaining(self) -> int:
        return self.total_cards - len(self._played)

    @property
    def running_count(self) -> int:
        return self._running_count

    @property
    def true_count(self) -> float:
        return true_count(self._running_count, self.cards_remaining)

    @property
    def chart(self) -> list[CountPoint]:
        return list(self._points)

    @property
    def remaining_by_rank(self) -> list[RankRemaining]:
        """Unseen cards per rank key with their share of the remaining shoe."""
        unseen = self.cards_remaining
        result = []
        for key in RANK_KEYS:
            left = self.cards_per_key(key) - self._played_by_key[key]
            percent = left / unseen * 100 if unseen else 0.0
            result.append(RankRemaining(key, left, percent))
        return result
