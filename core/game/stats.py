"""Session statistics and the decision/result history log."""

from dataclasses import dataclass, field


@dataclass
class Statistics:
    """Counters for the active training session."""

    correct: int = 0
    incorrect: int = 0
    wins: int = 0
    losses: int = 0
    pushes: int = 0
    player_blackjacks: int = 0
    dealer_blackjacks: int = 0
    streak: int = 0
    best_streak: int = 0
    count_checks_correct: int = 0
    count_checks_incorrect: int = 0
    rounds_settled: int = 0

    def record_decision(self, correct: bool) -> int:
        """Update decision counters and return the new streak."""
        if correct:
            self.correct += 1
            self.streak += 1
            self.best_streak = max(self.best_streak, self.streak)
        else:
            self.incorrect += 1
            self.streak = 0
        return self.streak

    def record_count_check(self, correct: bool) -> None:
        if correct:
            self.count_checks_correct += 1
        else:
            self.count_checks_incorrect += 1

    @property
    def decisions(self) -> int:
        return self.correct + self.incorrect

    @property
    def accuracy(self) -> float:
        """Fraction of judged decisions that matched basic strategy."""
        if self.decisions == 0:
            return 0.0
        return self.correct / self.decisions


@dataclass(frozen=True)
class HistoryEntry:
    """
    One line of the history log.

    Action entries carry ``correct``; round results have ``is_result`` set
    and ``correct`` left as None.
    """

    text: str
    correct: bool | None = None
    is_result: bool = False


@dataclass
class History:
    """Most-recent-first log of judged actions and round results."""

    entries: list[HistoryEntry] = field(default_factory=list)

    def add_action(self, text: str, correct: bool) -> HistoryEntry:
        entry = HistoryEntry(text=text, correct=correct)
        self.entries.insert(0, entry)
        return entry

    def add_result(self, text: str) -> HistoryEntry:
        entry = HistoryEntry(text=text, is_result=True)
        self.entries.insert(0, entry)
        return entry

    def recent(self, limit: int | None = None) -> list[HistoryEntry]:
        """Return the newest entries, capped at ``limit`` for display."""
        if limit is None:
            return list(self.entries)
        return self.entries[:limit]

    def trailing_streak(self) -> int:
        """Length of the newest run of correct action entries."""
        run = 0
        for entry in self.entries:
            if entry.is_result:
                continue
            if not entry.correct:
                break
            run += 1
        return run

    def clear(self) -> None:
        self.entries.clear()

    def __len__(self) -> int:
        return len(self.entries)
