"""Count-based index plays (Illustrious 18) shown alongside basic strategy."""

from dataclasses import dataclass
from typing import Literal

from core.strategy.basic import Action


@dataclass(frozen=True)
class IndexPlay:
    """
    A playing deviation keyed on the true count.

    ``basic_action`` is what the table says; ``deviation_action`` applies once
    the true count crosses ``index`` in the given direction. The insurance
    play has no hand and no table action.
    """

    player_total: int
    is_pair: bool
    dealer_upcard: int  # 2-11 (11 = Ace)
    basic_action: Action | None
    deviation_action: Action | None
    index: float
    direction: Literal["at_or_above", "at_or_below"] = "at_or_above"
    label: str = ""
    is_insurance: bool = False

    def should_deviate(self, true_count: float) -> bool:
        if self.direction == "at_or_above":
            return true_count >= self.index
        return true_count <= self.index

    def get_action(self, true_count: float) -> Action | None:
        """Get the correct action for the given true count."""
        if self.should_deviate(true_count):
            return self.deviation_action
        return self.basic_action


def _stand(total: int, dealer: int, index: float, label: str) -> IndexPlay:
    return IndexPlay(total, False, dealer, Action.HIT, Action.STAND, index, label=label)


def _double(total: int, dealer: int, index: float, label: str) -> IndexPlay:
    return IndexPlay(total, False, dealer, Action.HIT, Action.DOUBLE, index, label=label)


def _hit(total: int, dealer: int, index: float, label: str) -> IndexPlay:
    return IndexPlay(
        total, False, dealer, Action.STAND, Action.HIT, index,
        direction="at_or_below", label=label,
    )


# Ordered by expected value gain (most valuable first)
ILLUSTRIOUS_18: list[IndexPlay] = [
    IndexPlay(0, False, 11, None, None, 3.0, label="Take Insurance", is_insurance=True),
    _stand(16, 10, 0.0, "Stand 16 vs 10"),
    _stand(15, 10, 4.0, "Stand 15 vs 10"),
    IndexPlay(20, True, 5, Action.STAND, Action.SPLIT, 5.0, label="Split 10s vs 5"),
    IndexPlay(20, True, 6, Action.STAND, Action.SPLIT, 4.0, label="Split 10s vs 6"),
    _double(10, 10, 4.0, "Double 10 vs 10"),
    _stand(12, 3, 2.0, "Stand 12 vs 3"),
    _stand(12, 2, 3.0, "Stand 12 vs 2"),
    _double(11, 11, 1.0, "Double 11 vs A"),
    _double(9, 2, 1.0, "Double 9 vs 2"),
    _double(10, 11, 4.0, "Double 10 vs A"),
    _double(9, 7, 3.0, "Double 9 vs 7"),
    _stand(16, 9, 5.0, "Stand 16 vs 9"),
    _hit(13, 2, -1.0, "Hit 13 vs 2"),
    _hit(12, 4, 0.0, "Hit 12 vs 4"),
    _hit(12, 5, -2.0, "Hit 12 vs 5"),
    _hit(12, 6, -1.0, "Hit 12 vs 6"),
    _hit(13, 3, -2.0, "Hit 13 vs 3"),
]


def active_deviations(true_count: float) -> list[IndexPlay]:
    """Return every index play in effect at ``true_count``, most valuable first."""
    return [play for play in ILLUSTRIOUS_18 if play.should_deviate(true_count)]


def find_deviation(
    player_total: int,
    is_pair: bool,
    dealer_upcard: int,
    true_count: float,
) -> IndexPlay | None:
    """
    Find the index play that applies to a hard hand at the given true count.

    Returns:
        The applicable IndexPlay if the true count meets its threshold, else None
    """
    for play in ILLUSTRIOUS_18:
        if (
            not play.is_insurance
            and play.player_total == player_total
            and play.is_pair == is_pair
            and play.dealer_upcard == dealer_upcard
            and play.should_deviate(true_count)
        ):
            return play
    return None
