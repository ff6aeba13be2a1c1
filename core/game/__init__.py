"""Round engine, session state and the trainer facade."""

from core.game.engine import RoundEngine
from core.game.events import EventEmitter, EventType, GameEvent
from core.game.round import HandResult, Outcome, Round, Seat
from core.game.session import SessionState, TrainingMode
from core.game.state import GameState
from core.game.stats import History, HistoryEntry, Statistics
from core.game.trainer import CountCheck, ShoeSummary, Trainer

__all__ = [
    "RoundEngine",
    "EventEmitter",
    "EventType",
    "GameEvent",
    "HandResult",
    "Outcome",
    "Round",
    "Seat",
    "SessionState",
    "TrainingMode",
    "GameState",
    "History",
    "HistoryEntry",
    "Statistics",
    "CountCheck",
    "ShoeSummary",
    "Trainer",
]
