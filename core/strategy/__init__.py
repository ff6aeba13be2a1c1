"""Strategy tables and count-based deviations."""

from core.strategy.basic import Action, BasicStrategy, recommend
from core.strategy.deviations import (
    ILLUSTRIOUS_18,
    IndexPlay,
    active_deviations,
    find_deviation,
)

__all__ = [
    "Action",
    "BasicStrategy",
    "recommend",
    "IndexPlay",
    "ILLUSTRIOUS_18",
    "active_deviations",
    "find_deviation",
]
