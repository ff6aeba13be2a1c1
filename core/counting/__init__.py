"""Card counting: Hi-Lo running count, true count and the manual shoe tracker."""

from core.counting.base import CountingSystem, true_count
from core.counting.hilo import HiLoSystem, card_count_value
from core.counting.tracker import CountPoint, RankRemaining, ShoeTracker

__all__ = [
    "CountingSystem",
    "HiLoSystem",
    "card_count_value",
    "true_count",
    "ShoeTracker",
    "CountPoint",
    "RankRemaining",
]
