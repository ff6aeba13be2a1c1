"""Exceptions raised by the trainer core."""


class TrainerError(Exception):
    """Base class for all trainer errors."""


class ShoeExhausted(TrainerError, IndexError):
    """Raised when a draw is requested but the shoe cannot supply it."""


class InvalidAction(TrainerError, ValueError):
    """Raised when a player action is not legal for the active hand or state."""

    def __init__(self, message: str, action: str | None = None) -> None:
        super().__init__(message)
        self.action = action


class InvalidCountEntry(TrainerError, ValueError):
    """Raised when a running-count entry is not an integer."""
