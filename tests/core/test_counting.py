"""Tests for Hi-Lo counting, true count and the shoe tracker."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from conftest import card_list_strategy, cards
from core.cards import Card, Rank, Suit, canonical_deck
from core.counting import HiLoSystem, ShoeTracker, card_count_value, true_count
from core.counting.tracker import RANK_KEYS, normalize_key
from core.errors import ShoeExhausted


class TestHiLo:
    """Tests for Hi-Lo counting system."""

    def test_full_deck_sums_to_zero(self, hilo):
        assert hilo.full_deck_sum == 0
        assert hilo.is_balanced

    def test_count_full_deck(self, hilo):
        hilo.count_cards(canonical_deck())
        assert hilo.running_count == 0
        assert hilo.cards_seen == 52

    @pytest.mark.parametrize(
        "rank, value",
        [
            (Rank.TWO, 1), (Rank.SIX, 1), (Rank.SEVEN, 0), (Rank.NINE, 0),
            (Rank.TEN, -1), (Rank.KING, -1), (Rank.ACE, -1),
        ],
    )
    def test_card_count_value(self, rank, value):
        assert card_count_value(Card(rank, Suit.HEARTS)) == value

    @given(card_list_strategy(max_cards=30))
    def test_running_count_is_sum_of_values(self, hand):
        system = HiLoSystem()
        system.count_cards(hand)
        assert system.running_count == sum(card_count_value(c) for c in hand)

    def test_reset(self, hilo):
        hilo.count_cards(cards("2S", "3S"))
        hilo.reset()
        assert hilo.running_count == 0
        assert hilo.cards_seen == 0


class TestTrueCount:
    """Tests for the true count normalization."""

    def test_two_decks_remaining(self):
        assert true_count(10, 104) == 5.0

    def test_no_cards_remaining(self):
        assert true_count(5, 0) == 0

    def test_negative_count(self):
        assert true_count(-6, 156) == -2.0

    def test_partial_deck(self):
        assert true_count(3, 26) == 6.0

    @given(
        running=st.integers(min_value=-100, max_value=100),
        remaining=st.integers(min_value=1, max_value=416),
    )
    def test_sign_follows_running_count(self, running, remaining):
        result = true_count(running, remaining)
        assert (result > 0) == (running > 0)
        assert (result < 0) == (running < 0)

    def test_counter_true_count(self, hilo):
        hilo.count_cards(cards("2S", "3S", "4S", "5S"))
        assert hilo.true_count(104) == 2.0
        assert hilo.true_count(0) == 0.0


class TestShoeTracker:
    """Tests for the manual shoe tracker."""

    def test_initial_state(self):
        tracker = ShoeTracker(num_decks=6)
        assert tracker.total_cards == 312
        assert tracker.cards_remaining == 312
        assert tracker.running_count == 0
        assert tracker.true_count == 0.0
        assert tracker.chart == []

    @pytest.mark.parametrize("num_decks", [0, 9])
    def test_invalid_decks(self, num_decks):
        with pytest.raises(ValueError):
            ShoeTracker(num_decks=num_decks)

    def test_record_updates_counts(self):
        tracker = ShoeTracker(num_decks=1)
        tracker.record("2")
        tracker.record("5")
        point = tracker.record("K")

        assert tracker.running_count == 1
        assert tracker.cards_played == 3
        assert tracker.cards_remaining == 49
        assert point.running_count == 1
        assert point.true_count == pytest.approx(1 / (49 / 52))
        assert len(tracker.chart) == 3

    @pytest.mark.parametrize(
        "rank, key",
        [("10", "T"), ("J", "T"), ("q", "T"), ("K", "T"), ("a", "A"), ("1", "A"), ("7", "7")],
    )
    def test_normalize_key(self, rank, key):
        assert normalize_key(rank) == key

    @pytest.mark.parametrize("rank", ["0", "11", "X", ""])
    def test_invalid_rank(self, rank):
        tracker = ShoeTracker()
        with pytest.raises(ValueError):
            tracker.record(rank)
        assert tracker.cards_played == 0

    def test_undo(self):
        tracker = ShoeTracker(num_decks=1)
        tracker.record("3")
        tracker.record("A")
        assert tracker.undo() == "A"
        assert tracker.running_count == 1
        assert tracker.cards_played == 1
        assert len(tracker.chart) == 1

    def test_undo_empty(self):
        assert ShoeTracker().undo() is None

    def test_rank_exhausted(self):
        tracker = ShoeTracker(num_decks=1)
        for _ in range(4):
            tracker.record("A")
        with pytest.raises(ShoeExhausted):
            tracker.record("A")
        assert tracker.cards_played == 4

    def test_whole_shoe_recorded(self):
        tracker = ShoeTracker(num_decks=1)
        for key in RANK_KEYS:
            for _ in range(tracker.cards_per_key(key)):
                tracker.record(key)
        assert tracker.cards_remaining == 0
        assert tracker.running_count == 0
        assert tracker.true_count == 0.0
        with pytest.raises(ShoeExhausted):
            tracker.record("2")

    def test_remaining_by_rank(self):
        tracker = ShoeTracker(num_decks=2)
        tracker.record("T")
        remaining = {r.key: r for r in tracker.remaining_by_rank}
        assert remaining["T"].remaining == 31
        assert remaining["2"].remaining == 8
        assert remaining["T"].percent == pytest.approx(31 / 103 * 100)
        assert sum(r.remaining for r in remaining.values()) == 103

    def test_reset_changes_decks(self):
        tracker = ShoeTracker(num_decks=8)
        tracker.record("2")
        tracker.reset(num_decks=2)
        assert tracker.num_decks == 2
        assert tracker.cards_played == 0
        assert tracker.running_count == 0
        assert tracker.total_cards == 104

    @given(st.lists(st.sampled_from(RANK_KEYS), max_size=60))
    @settings(max_examples=50)
    def test_undo_everything_restores_start(self, keys):
        tracker = ShoeTracker(num_decks=8)
        for key in keys:
            tracker.record(key)
        while tracker.undo() is not None:
            pass
        assert tracker.running_count == 0
        assert tracker.cards_remaining == tracker.total_cards
