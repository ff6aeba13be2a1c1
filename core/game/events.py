"""Trainer events for the presentation layer."""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable


class EventType(Enum):
    """Types of trainer events."""

    # Session events
    MODE_SELECTED = auto()

    # Shoe events
    SHOE_SHUFFLED = auto()
    CUT_CARD_REACHED = auto()
    CARD_DEALT = auto()

    # Round flow events
    ROUND_STARTED = auto()
    ROUND_SETTLED = auto()

    # Player action events
    DECISION_JUDGED = auto()
    PLAYER_HIT = auto()
    PLAYER_STAND = auto()
    PLAYER_DOUBLE = auto()
    PLAYER_SPLIT_PAIR = auto()
    PLAYER_SPLIT_ACES = auto()
    HAND_BUSTED = auto()
    STREAK_MILESTONE = auto()

    # Dealer events
    DEALER_REVEALS = auto()
    DEALER_HITS = auto()
    DEALER_STANDS = auto()
    DEALER_BUSTS = auto()

    # Counting practice
    COUNT_PROMPT = auto()
    COUNT_CHECKED = auto()

    # Rejections
    INVALID_ACTION = auto()


@dataclass(frozen=True)
class GameEvent:
    """Immutable event passed from the core to its observers."""

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.event_type.name}: {self.data}"


# Type alias for event handlers
EventHandler = Callable[[GameEvent], None]

# Only the most recent events are kept for late observers
DEFAULT_HISTORY_LIMIT = 1000


class EventEmitter:
    """Event emitter with per-type and catch-all subscriptions."""

    def __init__(self, history_limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        self._handlers: dict[EventType | None, list[EventHandler]] = {}
        self._event_history: deque[GameEvent] = deque(maxlen=history_limit)

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """
        Subscribe to events.

        Args:
            handler: Function to call when event occurs
            event_type: Specific event type to subscribe to, or None for all events
        """
        self._handlers.setdefault(event_type, []).append(handler)

    def emit(self, event: GameEvent) -> None:
        """Record an event and deliver it to type-specific then catch-all handlers."""
        self._event_history.append(event)

        for handler in self._handlers.get(event.event_type, []):
            handler(event)
        for handler in self._handlers.get(None, []):
            handler(event)

    def emit_new(self, event_type: EventType, **data: Any) -> GameEvent:
        """Create and emit a new event."""
        event = GameEvent(event_type=event_type, data=data)
        self.emit(event)
        return event

    @property
    def history(self) -> list[GameEvent]:
        return list(self._event_history)

    def clear_history(self) -> None:
        self._event_history.clear()
