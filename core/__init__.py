"""Blackjack strategy and card-counting trainer core - 100% UI-agnostic."""

from core.cards import Card, Rank, Shoe, Suit
from core.errors import InvalidAction, InvalidCountEntry, ShoeExhausted, TrainerError
from core.hand import DealerHand, Hand, Score, score

__all__ = [
    "Card",
    "Rank",
    "Shoe",
    "Suit",
    "Hand",
    "DealerHand",
    "Score",
    "score",
    "TrainerError",
    "ShoeExhausted",
    "InvalidAction",
    "InvalidCountEntry",
]
