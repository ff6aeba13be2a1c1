"""Per-session state shared by every round of a training session."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from random import Random

from config import GameConfig
from core.cards import Card, Shoe
from core.counting import HiLoSystem
from core.game.events import EventEmitter, EventType
from core.game.stats import History, Statistics

logger = logging.getLogger(__name__)


class TrainingMode(Enum):
    """Training modes offered by the trainer."""

    STRATEGY = "strategy"
    COUNTING = "counting"

    def __str__(self) -> str:
        return self.value


@dataclass
class SessionState:
    """
    Everything that outlives a single round.

    Created when a mode is selected and handed to the round engine; the shoe
    and the running count change together on every draw.
    """

    mode: TrainingMode
    game_config: GameConfig
    shoe: Shoe
    events: EventEmitter = field(default_factory=EventEmitter)
    counter: HiLoSystem = field(default_factory=HiLoSystem)
    stats: Statistics = field(default_factory=Statistics)
    history: History = field(default_factory=History)
    count_prompt_due: bool = False
    rounds_since_prompt: int = 0

    @classmethod
    def create(
        cls,
        mode: TrainingMode,
        game_config: GameConfig | None = None,
        rng: Random | None = None,
        shoe: Shoe | None = None,
        events: EventEmitter | None = None,
    ) -> "SessionState":
        """Start a session with a fresh shoe and zeroed counters."""
        game_config = game_config or GameConfig()
        if shoe is None:
            shoe = Shoe(
                num_decks=game_config.num_decks,
                rng=rng,
                cut_card_range=(game_config.cut_card_min, game_config.cut_card_max),
            )
        return cls(
            mode=mode,
            game_config=game_config,
            shoe=shoe,
            events=events or EventEmitter(),
        )

    def draw(self, target: str, hidden: bool = False) -> Card:
        """
        Draw one card and count it.

        Hidden cards are counted too; only the event payload masks them.
        """
        was_revealed = self.shoe.cut_card_revealed
        card = self.shoe.draw()
        self.counter.count_card(card)

        if self.shoe.cut_card_revealed and not was_revealed:
            self.events.emit_new(
                EventType.CUT_CARD_REACHED,
                cards_remaining=self.shoe.cards_remaining,
            )

        logger.debug("Dealt %s to %s", "hidden card" if hidden else card, target)
        self.events.emit_new(
            EventType.CARD_DEALT,
            card="??" if hidden else str(card),
            target=target,
            running_count=self.running_count,
        )
        return card

    def rebuild_shoe(self) -> None:
        """Replace the shoe and reset the running count."""
        self.shoe.shuffle()
        self.counter.reset()
        self.events.emit_new(
            EventType.SHOE_SHUFFLED,
            cards_remaining=self.shoe.cards_remaining,
            cut_card_position=self.shoe.cut_card_position,
        )

    def note_round_settled(self) -> None:
        """Advance the counting-practice prompt schedule."""
        self.stats.rounds_settled += 1
        if self.mode != TrainingMode.COUNTING:
            return

        self.rounds_since_prompt += 1
        if self.rounds_since_prompt >= self.game_config.count_prompt_interval:
            self.rounds_since_prompt = 0
            self.count_prompt_due = True
            self.events.emit_new(EventType.COUNT_PROMPT)

    @property
    def running_count(self) -> int:
        return self.counter.running_count

    @property
    def true_count(self) -> float:
        return self.counter.true_count(self.shoe.cards_remaining)
