"""Pytest fixtures for blackjack trainer tests."""

from random import Random

import pytest
from hypothesis import strategies as st

from config import GameConfig
from core.cards import Card, Rank, Shoe, Suit
from core.counting import HiLoSystem
from core.game import Trainer
from core.hand import Hand
from core.strategy import BasicStrategy


def cards(*symbols: str) -> list[Card]:
    """Build cards from strings such as 'AS', '10H' or 'KD'."""
    return [Card.from_string(s) for s in symbols]


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def shoe(rng):
    """A shuffled 6-deck shoe."""
    return Shoe(num_decks=6, rng=rng)


@pytest.fixture
def game_config():
    """Table config with no AI seats and the default prompt interval."""
    return GameConfig(num_decks=6, ai_seats=0, count_prompt_interval=5)


@pytest.fixture
def make_cards():
    return cards


@pytest.fixture
def stacked_trainer(rng, game_config):
    """
    Factory for a trainer whose shoe deals the given cards first.

    Without AI seats the deal order is player, dealer up, player, hole.
    """

    def _make(
        *symbols: str,
        mode: str = "strategy",
        config: GameConfig | None = None,
        auto_advance: bool = True,
        cut_card_position: int = 0,
    ) -> Trainer:
        trainer = Trainer(game_config=config or game_config, rng=rng, auto_advance=auto_advance)
        stacked = Shoe.stacked(cards(*symbols), cut_card_position=cut_card_position, rng=rng)
        trainer.select_mode(mode, shoe=stacked)
        return trainer

    return _make


@pytest.fixture
def empty_hand():
    """An empty player hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return Hand(cards=cards("AS", "KH"))


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return Hand(cards=cards("AS", "6H"))


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return Hand(cards=cards("10S", "6H"))


@pytest.fixture
def pair_8s_hand():
    """A pair of 8s hand."""
    return Hand(cards=cards("8S", "8H"))


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return Hand(cards=cards("10S", "6H", "KC"))


@pytest.fixture
def hilo():
    """Hi-Lo counting system."""
    return HiLoSystem()


@pytest.fixture
def basic_strategy():
    return BasicStrategy()


# Hypothesis strategies for property-based testing
@st.composite
def card_strategy(draw):
    """Generate a random card."""
    rank = draw(st.sampled_from(list(Rank)))
    suit = draw(st.sampled_from(list(Suit)))
    return Card(rank, suit)


@st.composite
def card_list_strategy(draw, min_cards=1, max_cards=8):
    """Generate a list of cards."""
    return draw(st.lists(card_strategy(), min_size=min_cards, max_size=max_cards))
