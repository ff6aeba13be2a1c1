"""Tests for Card and Shoe classes."""

import math
from collections import Counter
from random import Random

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from core.cards import (
    CARDS_PER_DECK,
    Card,
    Rank,
    Shoe,
    Suit,
    build_shoe,
    canonical_deck,
    place_cut_card,
)
from core.errors import ShoeExhausted


class TestCard:
    """Tests for the Card class."""

    def test_card_creation(self):
        card = Card(Rank.ACE, Suit.SPADES)
        assert card.rank == Rank.ACE
        assert card.suit == Suit.SPADES

    def test_card_immutability(self):
        """Cards are frozen."""
        card = Card(Rank.ACE, Suit.SPADES)
        with pytest.raises(AttributeError):
            card.rank = Rank.KING

    def test_card_value(self):
        """Face cards are 10, aces 11 as an up card."""
        assert Card(Rank.TWO, Suit.HEARTS).value == 2
        assert Card(Rank.TEN, Suit.HEARTS).value == 10
        assert Card(Rank.JACK, Suit.HEARTS).value == 10
        assert Card(Rank.QUEEN, Suit.HEARTS).value == 10
        assert Card(Rank.KING, Suit.HEARTS).value == 10
        assert Card(Rank.ACE, Suit.HEARTS).value == 11

    def test_card_is_ten_value(self):
        assert Card(Rank.KING, Suit.SPADES).is_ten_value
        assert not Card(Rank.NINE, Suit.SPADES).is_ten_value
        assert not Card(Rank.ACE, Suit.SPADES).is_ten_value

    def test_card_from_string(self):
        assert Card.from_string("AS") == Card(Rank.ACE, Suit.SPADES)
        assert Card.from_string("10d") == Card(Rank.TEN, Suit.DIAMONDS)
        assert Card.from_string("TH") == Card(Rank.TEN, Suit.HEARTS)
        assert Card.from_string("K♣") == Card(Rank.KING, Suit.CLUBS)

    @pytest.mark.parametrize("text", ["", "A", "1S", "AX", "ZZ"])
    def test_card_from_invalid_string(self, text):
        with pytest.raises(ValueError):
            Card.from_string(text)

    def test_card_str(self):
        assert str(Card(Rank.QUEEN, Suit.HEARTS)) == "Q♥"
        assert str(Card(Rank.TEN, Suit.SPADES)) == "10♠"

    def test_suit_does_not_change_value(self):
        for rank in Rank:
            values = {Card(rank, suit).value for suit in Suit}
            assert len(values) == 1


class TestBuildShoe:
    """Tests for shoe construction."""

    def test_canonical_deck(self):
        deck = canonical_deck()
        assert len(deck) == CARDS_PER_DECK
        assert len(set(deck)) == CARDS_PER_DECK

    @pytest.mark.parametrize("num_decks", [1, 2, 6, 8])
    def test_shoe_composition(self, num_decks, rng):
        """Every rank/suit pair appears exactly once per deck."""
        cards = build_shoe(num_decks, rng)
        assert len(cards) == CARDS_PER_DECK * num_decks
        counts = Counter(cards)
        assert set(counts.values()) == {num_decks}
        assert len(counts) == CARDS_PER_DECK

    def test_shoe_is_shuffled(self, rng):
        assert build_shoe(1, rng) != canonical_deck()

    def test_same_seed_same_order(self):
        assert build_shoe(6, Random(7)) == build_shoe(6, Random(7))

    def test_zero_decks_rejected(self):
        with pytest.raises(ValueError):
            build_shoe(0)


class TestCutCard:
    """Tests for cut card placement."""

    @given(
        shoe_size=st.integers(min_value=0, max_value=8 * CARDS_PER_DECK),
        seed=st.integers(min_value=0, max_value=2**32),
    )
    @settings(max_examples=200)
    def test_cut_card_within_bounds(self, shoe_size, seed):
        position = place_cut_card(shoe_size, Random(seed))
        assert math.floor(0.72 * shoe_size) <= position <= math.floor(0.78 * shoe_size)

    def test_six_deck_bounds(self, rng):
        positions = {place_cut_card(312, rng) for _ in range(500)}
        assert min(positions) >= 224
        assert max(positions) <= 243

    def test_invalid_fractions(self):
        with pytest.raises(ValueError):
            place_cut_card(52, low_fraction=0.8, high_fraction=0.7)


class TestShoe:
    """Tests for the Shoe class."""

    def test_shoe_size(self, shoe):
        assert len(shoe) == 312
        assert shoe.total_cards == 312
        assert shoe.cards_dealt == 0
        assert shoe.num_decks == 6

    def test_cut_card_placed_on_build(self, shoe):
        assert 224 <= shoe.cut_card_position <= 243
        assert not shoe.cut_card_revealed
        assert not shoe.needs_shuffle

    def test_draw_removes_card(self, shoe):
        shoe.draw()
        assert len(shoe) == 311
        assert shoe.cards_dealt == 1

    def test_draw_from_empty_shoe(self):
        shoe = Shoe.stacked([])
        with pytest.raises(ShoeExhausted):
            shoe.draw()
        assert shoe.needs_shuffle

    def test_shoe_exhausted_is_index_error(self):
        shoe = Shoe.stacked([])
        with pytest.raises(IndexError):
            shoe.draw()

    def test_stacked_shoe_draw_order(self):
        cards = [Card(Rank.ACE, Suit.SPADES), Card(Rank.TWO, Suit.HEARTS)]
        shoe = Shoe.stacked(cards)
        assert shoe.draw() == cards[0]
        assert shoe.draw() == cards[1]

    def test_cut_card_revealed_when_depth_reached(self):
        cards = [Card(rank, Suit.CLUBS) for rank in Rank]
        shoe = Shoe.stacked(cards, cut_card_position=10)

        while len(shoe) > 10:
            shoe.draw()
            assert not shoe.cut_card_revealed

        shoe.draw()
        assert shoe.cut_card_revealed
        assert shoe.needs_shuffle

    def test_shuffle_restores_full_shoe(self, shoe):
        while not shoe.cut_card_revealed:
            shoe.draw()
        shoe.shuffle()
        assert len(shoe) == 312
        assert not shoe.cut_card_revealed

    def test_draw_whole_shoe(self, rng):
        shoe = Shoe(num_decks=1, rng=rng)
        drawn = [shoe.draw() for _ in range(52)]
        assert sorted(drawn, key=repr) == sorted(canonical_deck(), key=repr)
        with pytest.raises(ShoeExhausted):
            shoe.draw()

    def test_decks_remaining(self, shoe):
        for _ in range(52):
            shoe.draw()
        assert shoe.decks_remaining == 5.0

    def test_invalid_num_decks(self):
        with pytest.raises(ValueError):
            Shoe(num_decks=0)
