"""Trainer facade: the operations a presentation layer drives."""

import logging
from dataclasses import dataclass
from random import Random
from typing import Any

from config import GameConfig
from core.cards import Shoe
from core.errors import InvalidAction, InvalidCountEntry
from core.game.engine import RoundEngine
from core.game.events import EventEmitter, EventHandler, EventType
from core.game.session import SessionState, TrainingMode
from core.game.state import GameState
from core.game.stats import HistoryEntry
from core.strategy import Action, IndexPlay, active_deviations

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CountCheck:
    """Result of comparing a count entry with the live running count."""

    entered: int
    expected: int
    correct: bool


@dataclass(frozen=True)
class ShoeSummary:
    """What the table shows of the shoe."""

    cards_remaining: int
    total_cards: int
    cut_card_revealed: bool


def parse_count_entry(value: Any) -> int:
    """Accept an int or an integer string; anything else is rejected."""
    if isinstance(value, bool):
        raise InvalidCountEntry(f"Not a count: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise InvalidCountEntry(f"Not a count: {value!r}") from None
    raise InvalidCountEntry(f"Not a count: {value!r}")


class Trainer:
    """
    Strategy and counting trainer.

    Owns the event emitter for its whole lifetime; a fresh SessionState and
    RoundEngine are created on every mode selection. With ``auto_advance``
    the queued continuations run immediately after each input, otherwise the
    caller paces them with ``advance()``.
    """

    def __init__(
        self,
        game_config: GameConfig | None = None,
        rng: Random | None = None,
        auto_advance: bool = True,
    ) -> None:
        self.game_config = game_config or GameConfig()
        self.auto_advance = auto_advance
        self.events = EventEmitter()
        self._rng = rng
        self._session: SessionState | None = None
        self._engine: RoundEngine | None = None

    def subscribe(self, handler: EventHandler, event_type: EventType | None = None) -> None:
        self.events.subscribe(handler, event_type)

    # ----------------------------------------------------------------- inputs

    def select_mode(self, mode: TrainingMode | str, shoe: Shoe | None = None) -> SessionState:
        """Start a session in ``mode`` with a new shoe and zeroed statistics."""
        try:
            mode = TrainingMode(mode)
        except ValueError:
            raise InvalidAction(f"Unknown mode: {mode!r}", action="mode") from None

        if self._engine is not None:
            self._engine.cancel_pending()
        self.events.clear_history()

        self._session = SessionState.create(
            mode,
            game_config=self.game_config,
            rng=self._rng,
            shoe=shoe,
            events=self.events,
        )
        self._engine = RoundEngine(self._session)
        logger.info("Mode selected: %s (%d decks)", mode, self._session.shoe.num_decks)
        self.events.emit_new(EventType.MODE_SELECTED, mode=mode.value)
        return self._session

    def deal_new_game(self) -> None:
        self.engine.deal()
        self._maybe_advance()

    def player_action(self, code: str) -> Action:
        """Apply an action code and return what basic strategy recommended."""
        recommended = self.engine.player_action(code)
        self._maybe_advance()
        return recommended

    def advance(self) -> bool:
        """Run one queued continuation. Returns False when nothing was pending."""
        return self.engine.advance() is not None

    def cancel_pending(self) -> int:
        if self._engine is None:
            return 0
        return self._engine.cancel_pending()

    def leave(self) -> None:
        """Abandon the round in progress; shoe, count and statistics are kept."""
        if self._engine is not None:
            self._engine.abandon_round()

    def confirm_count_entry(self, value: Any) -> CountCheck:
        """Compare a running-count entry with the live count."""
        session = self.session
        entered = parse_count_entry(value)
        expected = session.running_count
        check = CountCheck(entered=entered, expected=expected, correct=entered == expected)

        session.stats.record_count_check(check.correct)
        session.count_prompt_due = False
        self.events.emit_new(
            EventType.COUNT_CHECKED,
            entered=entered,
            expected=expected,
            correct=check.correct,
        )
        return check

    def _maybe_advance(self) -> None:
        if self.auto_advance:
            self.engine.run_pending()

    # ----------------------------------------------------------- observations

    @property
    def session(self) -> SessionState:
        if self._session is None:
            raise InvalidAction("Select a mode first", action="mode")
        return self._session

    @property
    def engine(self) -> RoundEngine:
        if self._engine is None:
            raise InvalidAction("Select a mode first", action="mode")
        return self._engine

    @property
    def has_session(self) -> bool:
        return self._session is not None

    @property
    def state(self) -> GameState:
        return self.engine.state

    @property
    def shoe_summary(self) -> ShoeSummary:
        shoe = self.session.shoe
        return ShoeSummary(
            cards_remaining=shoe.cards_remaining,
            total_cards=shoe.total_cards,
            cut_card_revealed=shoe.cut_card_revealed,
        )

    @property
    def running_count(self) -> int:
        return self.session.running_count

    @property
    def true_count(self) -> float:
        return self.session.true_count

    @property
    def deviations(self) -> list[IndexPlay]:
        return active_deviations(self.true_count)

    def history(self, limit: int | None = None) -> list[HistoryEntry]:
        if limit is None:
            limit = self.game_config.history_display_limit
        return self.session.history.recent(limit)
