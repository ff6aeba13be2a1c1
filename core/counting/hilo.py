"""Hi-Lo card counting system."""

from typing import Mapping

from core.cards import Card, Rank
from core.counting.base import CountingSystem

HI_LO_TAGS: Mapping[Rank, int] = {
    Rank.TWO: 1,
    Rank.THREE: 1,
    Rank.FOUR: 1,
    Rank.FIVE: 1,
    Rank.SIX: 1,
    Rank.SEVEN: 0,
    Rank.EIGHT: 0,
    Rank.NINE: 0,
    Rank.TEN: -1,
    Rank.JACK: -1,
    Rank.QUEEN: -1,
    Rank.KING: -1,
    Rank.ACE: -1,
}


def card_count_value(card: Card) -> int:
    """Hi-Lo value of a card: 2-6 are +1, 7-9 are 0, tens and aces are -1."""
    return HI_LO_TAGS[card.rank]


class HiLoSystem(CountingSystem):
    """
    Hi-Lo counting system.

    Tag values:
        2-6: +1 (low cards)
        7-9: 0  (neutral)
        10-A: -1 (high cards)

    Full deck sum: 0 (balanced)
    """

    @property
    def name(self) -> str:
        return "Hi-Lo"

    @property
    def tag_values(self) -> Mapping[Rank, int]:
        return HI_LO_TAGS
