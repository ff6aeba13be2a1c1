"""Abstract base class for card counting systems."""

from abc import ABC, abstractmethod
from typing import Iterable, Mapping

from core.cards import CARDS_PER_DECK, Card, Rank


def true_count(
    running_count: float,
    cards_remaining: int,
    cards_per_deck: int = CARDS_PER_DECK,
) -> float:
    """
    Normalize a running count by the decks left to deal.

    Returns 0 when no cards remain.
    """
    if cards_remaining <= 0:
        return 0.0
    return running_count / (cards_remaining / cards_per_deck)


class CountingSystem(ABC):
    """
    Abstract base class for card counting systems.

    Tracks a running count over every card counted since the last reset.
    """

    def __init__(self) -> None:
        self._running_count = 0
        self._cards_seen = 0

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    @abstractmethod
    def tag_values(self) -> Mapping[Rank, int]:
        """Map each Rank to its count value."""
        ...

    @property
    def full_deck_sum(self) -> int:
        """Sum of tag values over one 52-card deck (0 for balanced systems)."""
        return sum(self.tag_values[rank] * 4 for rank in Rank)

    @property
    def is_balanced(self) -> bool:
        return self.full_deck_sum == 0

    def tag(self, card: Card) -> int:
        """Return a card's count value without counting it."""
        return self.tag_values[card.rank]

    def count_card(self, card: Card) -> int:
        """
        Count a single card and update the running count.

        Returns:
            The tag value of the card
        """
        tag_value = self.tag(card)
        self._running_count += tag_value
        self._cards_seen += 1
        return tag_value

    def count_cards(self, cards: Iterable[Card]) -> int:
        """Count multiple cards and return their total tag value."""
        return sum(self.count_card(card) for card in cards)

    @property
    def running_count(self) -> int:
        return self._running_count

    @property
    def cards_seen(self) -> int:
        return self._cards_seen

    def true_count(self, cards_remaining: int) -> float:
        """Return the true count for the given number of unseen cards."""
        return true_count(self._running_count, cards_remaining)

    def reset(self) -> None:
        """Reset the count to zero."""
        self._running_count = 0
        self._cards_seen = 0

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(running_count={self._running_count})"
