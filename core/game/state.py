"""Round state enumeration."""

from enum import Enum, auto


class GameState(Enum):
    """
    Round state machine states.

    Flow: PRE_DEAL → PLAYER_TURN → DEALER_TURN → END, with PRE_DEAL → END
    when either side is dealt a natural.
    """

    PRE_DEAL = auto()
    PLAYER_TURN = auto()
    DEALER_TURN = auto()
    END = auto()

    def __str__(self) -> str:
        return self.name.lower().replace("_", "-")

