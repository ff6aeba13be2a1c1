"""Basic strategy tables for blackjack."""

from enum import Enum, auto
from typing import Mapping, Sequence

from core.cards import Card
from core.hand import score


class Action(Enum):
    """Possible player actions."""

    HIT = auto()
    STAND = auto()
    DOUBLE = auto()
    SPLIT = auto()

    # Conditional actions (fallback if double is not allowed)
    DOUBLE_OR_HIT = auto()  # Double if allowed, else hit
    DOUBLE_OR_STAND = auto()  # Double if allowed, else stand

    def __str__(self) -> str:
        return self.name.replace("_", "/").title()

    @property
    def code(self) -> str:
        """Return the single-letter action code (H, S, D, P)."""
        codes = {
            Action.HIT: "H",
            Action.STAND: "S",
            Action.DOUBLE: "D",
            Action.SPLIT: "P",
        }
        if self not in codes:
            raise ValueError(f"{self.name} has no action code")
        return codes[self]

    @classmethod
    def from_code(cls, code: str) -> "Action":
        """Parse an action code such as 'H' or 'p'."""
        codes = {"H": cls.HIT, "S": cls.STAND, "D": cls.DOUBLE, "P": cls.SPLIT}
        try:
            return codes[code.strip().upper()]
        except (KeyError, AttributeError):
            raise ValueError(f"Unknown action code: {code!r}") from None


# Dealer upcards: 2-10, Ace = 11
DEALER_UPCARDS = range(2, 12)


class BasicStrategy:
    """
    Basic strategy lookup tables.

    Pre-computed dictionaries keyed by (player total or pair value, dealer
    upcard) for O(1) lookup. Pairs are checked first, then soft totals, then
    hard totals.
    """

    def __init__(self) -> None:
        self._hard_table = self._build_hard_table()
        self._soft_table = self._build_soft_table()
        self._pair_table = self._build_pair_table()

    def get_action(
        self,
        player_total: int,
        dealer_upcard: int,
        is_soft: bool = False,
        is_pair: bool = False,
        pair_rank: int | None = None,
        can_double: bool = True,
    ) -> Action:
        """
        Get the basic strategy action.

        Args:
            player_total: Player's hand total
            dealer_upcard: Dealer's upcard value (2-11, Ace=11)
            is_soft: Whether the hand is soft
            is_pair: Whether the hand is a pair
            pair_rank: The card value of the pair (2-11, Ace=11)
            can_double: Whether doubling is allowed

        Returns:
            The recommended action
        """
        if dealer_upcard not in DEALER_UPCARDS:
            raise ValueError(f"Invalid dealer upcard value: {dealer_upcard}")

        if is_pair and pair_rank is not None:
            action = self._pair_table.get((pair_rank, dealer_upcard))
            if action:
                return self._resolve_action(action, can_double)

        if is_soft:
            action = self._soft_table.get((player_total, dealer_upcard))
            if action:
                return self._resolve_action(action, can_double)
            return Action.STAND if player_total >= 20 else Action.HIT

        action = self._hard_table.get((player_total, dealer_upcard))
        if action:
            return self._resolve_action(action, can_double)

        # Totals outside the table
        if player_total >= 17:
            return Action.STAND
        return Action.HIT

    def recommend(self, player_cards: Sequence[Card], dealer_up_card: Card) -> Action:
        """Recommend an action for a hand of cards against the dealer upcard."""
        cards = list(player_cards)
        if not cards:
            return Action.HIT

        is_pair = len(cards) == 2 and cards[0].rank == cards[1].rank
        result = score(cards)
        return self.get_action(
            player_total=result.total,
            dealer_upcard=dealer_up_card.value,
            is_soft=result.is_soft,
            is_pair=is_pair,
            pair_rank=cards[0].value if is_pair else None,
            can_double=len(cards) == 2,
        )

    def _resolve_action(self, action: Action, can_double: bool) -> Action:
        """Resolve conditional actions based on what's allowed."""
        if action == Action.DOUBLE_OR_HIT:
            return Action.DOUBLE if can_double else Action.HIT
        if action == Action.DOUBLE_OR_STAND:
            return Action.DOUBLE if can_double else Action.STAND
        return action

    def _build_hard_table(self) -> Mapping[tuple[int, int], Action]:
        """Build hard totals strategy table."""
        H = Action.HIT
        S = Action.STAND
        D = Action.DOUBLE_OR_HIT

        table: dict[tuple[int, int], Action] = {}

        # Hard 4-8: Always hit
        for total in range(4, 9):
            for dealer in DEALER_UPCARDS:
                table[(total, dealer)] = H

        # Hard 9
        for dealer in DEALER_UPCARDS:
            table[(9, dealer)] = D if 3 <= dealer <= 6 else H

        # Hard 10
        for dealer in DEALER_UPCARDS:
            table[(10, dealer)] = D if dealer <= 9 else H

        # Hard 11: Hit against an Ace
        for dealer in DEALER_UPCARDS:
            table[(11, dealer)] = H if dealer == 11 else D

        # Hard 12
        for dealer in DEALER_UPCARDS:
            table[(12, dealer)] = S if dealer in (4, 5, 6) else H

        # Hard 13-16
        for total in range(13, 17):
            for dealer in DEALER_UPCARDS:
                table[(total, dealer)] = S if dealer <= 6 else H

        # Hard 17+: Always stand
        for total in range(17, 22):
            for dealer in DEALER_UPCARDS:
                table[(total, dealer)] = S

        return table

    def _build_soft_table(self) -> Mapping[tuple[int, int], Action]:
        """Build soft totals strategy table."""
        H = Action.HIT
        S = Action.STAND
        D = Action.DOUBLE_OR_HIT
        Ds = Action.DOUBLE_OR_STAND

        table: dict[tuple[int, int], Action] = {}

        # Soft 13-14 (A,2 / A,3)
        for total in (13, 14):
            for dealer in DEALER_UPCARDS:
                table[(total, dealer)] = D if dealer in (5, 6) else H

        # Soft 15-16 (A,4 / A,5)
        for total in (15, 16):
            for dealer in DEALER_UPCARDS:
                table[(total, dealer)] = D if dealer in (4, 5, 6) else H

        # Soft 17 (A,6)
        for dealer in DEALER_UPCARDS:
            table[(17, dealer)] = D if 3 <= dealer <= 6 else H

        # Soft 18 (A,7)
        for dealer in range(2, 7):
            table[(18, dealer)] = Ds
        for dealer in (7, 8):
            table[(18, dealer)] = S
        for dealer in (9, 10, 11):
            table[(18, dealer)] = H

        # Soft 19 (A,8): Double vs 6 only
        for dealer in DEALER_UPCARDS:
            table[(19, dealer)] = Ds if dealer == 6 else S

        # Soft 20+: Always stand
        for total in (20, 21):
            for dealer in DEALER_UPCARDS:
                table[(total, dealer)] = S

        return table

    def _build_pair_table(self) -> Mapping[tuple[int, int], Action]:
        """Build pair splitting strategy table."""
        H = Action.HIT
        S = Action.STAND
        P = Action.SPLIT
        D = Action.DOUBLE_OR_HIT

        table: dict[tuple[int, int], Action] = {}

        for dealer in DEALER_UPCARDS:
            # Pair of 2s and 3s
            table[(2, dealer)] = P if dealer <= 7 else H
            table[(3, dealer)] = P if dealer <= 7 else H

            # Pair of 4s
            table[(4, dealer)] = P if dealer in (5, 6) else H

            # Pair of 5s: Never split, play as hard 10
            table[(5, dealer)] = D if dealer <= 9 else H

            # Pair of 6s
            table[(6, dealer)] = P if dealer <= 6 else H

            # Pair of 7s
            table[(7, dealer)] = P if dealer <= 7 else H

            # Pair of 8s: Always split
            table[(8, dealer)] = P

            # Pair of 9s
            table[(9, dealer)] = S if dealer in (7, 10, 11) else P

            # Pair of 10s: Never split
            table[(10, dealer)] = S

            # Pair of Aces: Always split
            table[(11, dealer)] = P

        return table

    @property
    def hard_table(self) -> Mapping[tuple[int, int], Action]:
        return self._hard_table

    @property
    def soft_table(self) -> Mapping[tuple[int, int], Action]:
        return self._soft_table

    @property
    def pair_table(self) -> Mapping[tuple[int, int], Action]:
        return self._pair_table


_default_strategy = BasicStrategy()


def recommend(player_cards: Sequence[Card], dealer_up_card: Card) -> Action:
    """Recommend the basic strategy action for a hand against the dealer upcard."""
    return _default_strategy.recommend(player_cards, dealer_up_card)
