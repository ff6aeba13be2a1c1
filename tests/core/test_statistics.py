"""Tests for session statistics and the history log."""

from hypothesis import given
from hypothesis import strategies as st

from core.game import History, Statistics


class TestStatistics:
    """Tests for decision and outcome counters."""

    def test_initial(self):
        stats = Statistics()
        assert stats.decisions == 0
        assert stats.accuracy == 0.0

    def test_record_decision(self):
        stats = Statistics()
        assert stats.record_decision(True) == 1
        assert stats.record_decision(True) == 2
        assert stats.record_decision(False) == 0
        assert stats.correct == 2
        assert stats.incorrect == 1
        assert stats.best_streak == 2

    def test_accuracy(self):
        stats = Statistics()
        for correct in (True, True, True, False):
            stats.record_decision(correct)
        assert stats.accuracy == 0.75

    def test_count_checks(self):
        stats = Statistics()
        stats.record_count_check(True)
        stats.record_count_check(False)
        stats.record_count_check(False)
        assert stats.count_checks_correct == 1
        assert stats.count_checks_incorrect == 2

    @given(st.lists(st.booleans(), max_size=200))
    def test_streak_matches_history(self, outcomes):
        """The streak is the trailing run of correct entries in history."""
        stats = Statistics()
        history = History()
        for correct in outcomes:
            stats.record_decision(correct)
            history.add_action("Hand 16: Your move: Hit. Strategy: Hit.", correct)

        trailing = 0
        for correct in reversed(outcomes):
            if not correct:
                break
            trailing += 1

        assert stats.streak == trailing
        assert history.trailing_streak() == trailing
        assert stats.best_streak >= stats.streak

    @given(st.lists(st.booleans(), max_size=50), st.integers(min_value=0, max_value=10))
    def test_result_entries_do_not_break_streak(self, outcomes, results):
        history = History()
        for correct in outcomes:
            history.add_action("move", correct)
        for _ in range(results):
            history.add_result("Hand 1: Push.")

        trailing = 0
        for correct in reversed(outcomes):
            if not correct:
                break
            trailing += 1
        assert history.trailing_streak() == trailing


class TestHistory:
    """Tests for the most-recent-first log."""

    def test_newest_first(self):
        history = History()
        history.add_action("first", True)
        history.add_result("second")
        assert [e.text for e in history.recent()] == ["second", "first"]
        assert history.recent()[0].is_result
        assert history.recent()[0].correct is None

    def test_recent_limit(self):
        history = History()
        for i in range(30):
            history.add_action(str(i), True)
        recent = history.recent(25)
        assert len(recent) == 25
        assert recent[0].text == "29"
        assert len(history) == 30

    def test_clear(self):
        history = History()
        history.add_action("x", False)
        history.clear()
        assert len(history) == 0
