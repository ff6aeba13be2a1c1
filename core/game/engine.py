"""Round engine: deal, player and AI turns, dealer play and settlement."""

import logging
from collections import deque

from transitions import Machine

from core.errors import InvalidAction, ShoeExhausted
from core.game.events import EventType
from core.game.round import (
    Continuation,
    ContinuationKind,
    HandResult,
    Outcome,
    Round,
    Seat,
)
from core.game.session import SessionState
from core.game.state import GameState
from core.hand import DealerHand, Hand, HandStatus
from core.strategy import Action, recommend

logger = logging.getLogger(__name__)

PLAYER_SEAT = "player"


class RoundEngine:
    """
    Blackjack round engine using a state machine.

    Completely UI-agnostic: inputs are method calls, outputs are events and
    properties. Multi-step work (split deals, AI seats, dealer draws) is
    queued as continuations that the caller runs with ``advance()`` after
    whatever delay it likes, or all at once with ``run_pending()``.
    """

    # State machine states
    STATES = [s.name.lower() for s in GameState]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "begin_play", "source": "pre_deal", "dest": "player_turn"},
        {"trigger": "naturals", "source": "pre_deal", "dest": "end"},
        {"trigger": "player_done", "source": "player_turn", "dest": "dealer_turn"},
        {"trigger": "all_busted", "source": "player_turn", "dest": "end"},
        {"trigger": "dealer_done", "source": "dealer_turn", "dest": "end"},
        {"trigger": "reset_round", "source": "end", "dest": "pre_deal"},
        {"trigger": "abandon", "source": "*", "dest": "pre_deal"},
    ]

    def __init__(self, session: SessionState) -> None:
        self.session = session
        self.round: Round | None = None
        self._pending: deque[Continuation] = deque()

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="pre_deal",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def state(self) -> GameState:
        """Get current round state as enum."""
        return GameState[self._machine_state.upper()]  # type: ignore

    @property
    def pending(self) -> list[Continuation]:
        return list(self._pending)

    # ------------------------------------------------------------------ deal

    def deal(self) -> Round:
        """Start a new round, rebuilding the shoe first if the cut card is out."""
        if self.state not in (GameState.PRE_DEAL, GameState.END) or self._pending:
            self._reject("deal", f"Cannot deal during {self.state}")

        session = self.session
        seat_count = 1 + session.game_config.ai_seats
        cards_needed = 2 * (seat_count + 1)
        if session.shoe.needs_shuffle or session.shoe.cards_remaining < cards_needed:
            session.rebuild_shoe()

        if self.state == GameState.END:
            self.reset_round()

        seats = [Seat(name=PLAYER_SEAT, hands=[Hand()])]
        seats.extend(
            Seat(name=f"ai-{i}", hands=[Hand()], is_ai=True)
            for i in range(1, seat_count)
        )
        dealer = DealerHand()
        self.round = Round(
            seats=seats,
            dealer=dealer,
            running_count_at_deal=session.running_count,
        )

        # First card to every seat, dealer up card, then second cards and the hole card
        for seat in seats:
            seat.hands[0].add_card(session.draw(seat.name))
        dealer.add_card(session.draw("dealer"))
        for seat in seats:
            seat.hands[0].add_card(session.draw(seat.name))
        dealer.add_hole_card(session.draw("dealer", hidden=True))

        session.events.emit_new(
            EventType.ROUND_STARTED,
            player=self.round.player_hands[0].display,
            dealer_up=str(dealer.up_card),
        )

        if self.round.player_has_natural or dealer.is_blackjack:
            logger.info(
                "Natural dealt (player=%s, dealer=%s)",
                self.round.player_has_natural,
                dealer.is_blackjack,
            )
            for hand in self.round.all_hands:
                if hand.is_playing:
                    hand.stand()
            self._reveal_dealer()
            self.naturals()
            self.settle()
            return self.round

        self.begin_play()
        self._progress()
        return self.round

    # -------------------------------------------------------- player actions

    def player_action(self, code: str) -> Action:
        """
        Judge and apply a player action code (H, S, D, P).

        The action is validated first; a rejected action mutates nothing and
        is not judged. Returns the basic strategy recommendation.
        """
        try:
            action = Action.from_code(code)
        except ValueError as exc:
            self._reject(code, str(exc))

        if self.state != GameState.PLAYER_TURN or self.round is None:
            self._reject(code, f"Cannot act during {self.state}")
        if self._pending:
            self._reject(code, "Waiting for cards to be dealt")

        seat = self.round.player
        hand = seat.active_hand
        if hand is None or not hand.is_playing or hand.awaiting_card:
            self._reject(code, "No hand is waiting for a decision")

        self._validate(seat, hand, action, code)

        recommended = recommend(hand.cards, self.round.dealer.up_card)
        self._judge(hand, action, recommended)
        self._apply(seat, action)
        self._progress()
        return recommended

    def _validate(self, seat: Seat, hand: Hand, action: Action, code: str) -> None:
        if action == Action.DOUBLE and not hand.can_double:
            self._reject(code, "Can only double on the first two cards")
        if action == Action.SPLIT and not hand.can_split:
            self._reject(code, "Can only split two cards of equal rank")

        # Split children waiting for their second card keep a claim on the shoe
        cards_needed = {Action.HIT: 1, Action.DOUBLE: 1, Action.SPLIT: 2}.get(action, 0)
        if cards_needed:
            cards_needed += sum(1 for h in seat.hands if h is not hand and h.awaiting_card)
        if self.session.shoe.cards_remaining < cards_needed:
            raise ShoeExhausted(f"{action} needs {cards_needed} cards")

    def _judge(self, hand: Hand, action: Action, recommended: Action) -> None:
        session = self.session
        correct = action == recommended
        streak = session.stats.record_decision(correct)
        session.history.add_action(
            f"Hand {hand.display}: Your move: {action}. Strategy: {recommended}.",
            correct,
        )
        session.events.emit_new(
            EventType.DECISION_JUDGED,
            action=action.code,
            recommended=recommended.code,
            correct=correct,
            streak=streak,
        )
        if correct and streak in session.game_config.streak_milestones:
            session.events.emit_new(EventType.STREAK_MILESTONE, streak=streak)

    def _reject(self, code: str, message: str):
        logger.warning("Rejected action %r: %s", code, message)
        self.session.events.emit_new(EventType.INVALID_ACTION, action=code, message=message)
        raise InvalidAction(message, action=code)

    def _apply(self, seat: Seat, action: Action) -> None:
        """Apply an already validated action to the seat's active hand."""
        hand = seat.active_hand
        events = self.session.events

        if action == Action.HIT:
            hand.add_card(self.session.draw(seat.name))
            hand.settle_after_card()
            events.emit_new(EventType.PLAYER_HIT, seat=seat.name, hand=hand.display)
        elif action == Action.STAND:
            hand.stand()
            events.emit_new(EventType.PLAYER_STAND, seat=seat.name, hand=hand.display)
        elif action == Action.DOUBLE:
            hand.add_card(self.session.draw(seat.name))
            hand.is_doubled = True
            if hand.is_busted:
                hand.bust()
            else:
                hand.stand()
            events.emit_new(EventType.PLAYER_DOUBLE, seat=seat.name, hand=hand.display)
        elif hand.cards[0].is_ace:
            self._split_aces(seat)
        else:
            self._split_pair(seat)

        if hand.status == HandStatus.BUST:
            events.emit_new(EventType.HAND_BUSTED, seat=seat.name, value=hand.value)

    def _split_pair(self, seat: Seat) -> None:
        """Split a non-ace pair; each child waits for its second card."""
        index = seat.active_index
        first, second = seat.hands[index].cards
        seat.hands[index : index + 1] = [
            Hand(cards=[first], is_split_hand=True),
            Hand(cards=[second], is_split_hand=True),
        ]
        self.session.events.emit_new(
            EventType.PLAYER_SPLIT_PAIR, seat=seat.name, rank=str(first.rank)
        )

    def _split_aces(self, seat: Seat) -> None:
        """Split aces; each child gets exactly one card and stands."""
        index = seat.active_index
        first, second = seat.hands[index].cards
        children = []
        for ace in (first, second):
            child = Hand(cards=[ace], is_split_hand=True)
            child.add_card(self.session.draw(seat.name))
            child.stand()
            children.append(child)
        seat.hands[index : index + 1] = children
        self.session.events.emit_new(EventType.PLAYER_SPLIT_ACES, seat=seat.name)

    # --------------------------------------------------------- continuations

    def advance(self) -> Continuation | None:
        """Run the next pending continuation. Returns it, or None if idle."""
        if not self._pending:
            return None

        continuation = self._pending.popleft()
        try:
            self._run(continuation)
        except ShoeExhausted:
            self._pending.appendleft(continuation)
            raise
        return continuation

    def run_pending(self) -> int:
        """Run continuations until none remain. Returns how many ran."""
        count = 0
        while self.advance() is not None:
            count += 1
        return count

    def cancel_pending(self) -> int:
        """Discard queued continuations without touching the shoe or statistics."""
        count = len(self._pending)
        self._pending.clear()
        return count

    def abandon_round(self) -> None:
        """Drop the round in progress unsettled, e.g. when the user navigates away."""
        self.cancel_pending()
        self.round = None
        self.abandon()

    def _queue(self, kind: ContinuationKind, seat_index: int | None = None) -> None:
        config = self.session.game_config
        delay = config.dealer_delay if kind in (
            ContinuationKind.DEALER_REVEAL,
            ContinuationKind.DEALER_DRAW,
        ) else config.deal_delay
        self._pending.append(Continuation(kind, seat_index, delay))

    def _run(self, continuation: Continuation) -> None:
        kind = continuation.kind
        if kind == ContinuationKind.DEAL_SPLIT_CARD:
            self._deal_split_card(continuation.seat_index)
        elif kind == ContinuationKind.AI_DECISION:
            self._play_ai(continuation.seat_index)
        elif kind == ContinuationKind.DEALER_REVEAL:
            self._reveal_dealer()
            self._dealer_step()
        else:
            self._dealer_draw()

    def _deal_split_card(self, seat_index: int) -> None:
        seat = self.round.seats[seat_index]
        hand = seat.active_hand
        hand.add_card(self.session.draw(seat.name))
        hand.settle_after_card()
        self._progress()

    def _play_ai(self, seat_index: int) -> None:
        seat = self.round.seats[seat_index]
        hand = seat.active_hand
        action = recommend(hand.cards, self.round.dealer.up_card)
        self._validate(seat, hand, action, action.code)
        self._apply(seat, action)
        self._progress()

    def _progress(self) -> None:
        """Move to the next hand needing attention, or on to the dealer."""
        for seat_index, seat in enumerate(self.round.seats):
            index = seat.next_playing_index()
            if index is None:
                continue

            seat.active_index = index
            if seat.hands[index].awaiting_card:
                self._queue(ContinuationKind.DEAL_SPLIT_CARD, seat_index)
            elif seat.is_ai:
                self._queue(ContinuationKind.AI_DECISION, seat_index)
            return

        if all(hand.is_busted for hand in self.round.all_hands):
            self._reveal_dealer()
            self.all_busted()
            self.settle()
            return

        self.player_done()
        self._queue(ContinuationKind.DEALER_REVEAL)

    # ----------------------------------------------------------- dealer turn

    def _reveal_dealer(self) -> None:
        dealer = self.round.dealer
        if not dealer.hole_card_hidden:
            return
        dealer.reveal()
        self.session.events.emit_new(
            EventType.DEALER_REVEALS,
            card=str(dealer.cards[1]),
            hand=dealer.display,
        )

    def _dealer_step(self) -> None:
        if self.round.dealer.should_hit(self.session.game_config.dealer_hits_soft_17):
            self._queue(ContinuationKind.DEALER_DRAW)
        else:
            self._finish_dealer()

    def _dealer_draw(self) -> None:
        dealer = self.round.dealer
        try:
            card = self.session.draw("dealer")
        except ShoeExhausted:
            logger.warning("Shoe ran out during the dealer's turn; dealer stands")
            self._finish_dealer()
            return

        dealer.add_card(card)
        self.session.events.emit_new(EventType.DEALER_HITS, hand=dealer.display)
        self._dealer_step()

    def _finish_dealer(self) -> None:
        dealer = self.round.dealer
        if dealer.is_busted:
            self.session.events.emit_new(EventType.DEALER_BUSTS, value=dealer.value)
        else:
            self.session.events.emit_new(EventType.DEALER_STANDS, value=dealer.value)
        self.dealer_done()
        self.settle()

    # ------------------------------------------------------------ settlement

    def settle(self) -> list[HandResult]:
        """
        Settle the round against the dealer. Runs once per round.

        Only the human seat feeds the statistics; AI seats are reported in
        the result text.
        """
        rnd = self.round
        if rnd is None or self.state != GameState.END:
            raise InvalidAction("Round is not over", action="settle")
        if rnd.settled:
            return rnd.results

        stats = self.session.stats
        dealer = rnd.dealer
        player_bj = rnd.player_has_natural

        if player_bj and not dealer.is_blackjack:
            text = "Blackjack! You win."
            rnd.results = [HandResult(PLAYER_SEAT, 0, Outcome.BLACKJACK, 1, text)]
            stats.wins += 1
            stats.player_blackjacks += 1
        elif dealer.is_blackjack and not player_bj:
            text = "Dealer has Blackjack. You lose."
            rnd.results = [HandResult(PLAYER_SEAT, 0, Outcome.DEALER_BLACKJACK, 1, text)]
            stats.losses += 1
            stats.dealer_blackjacks += 1
        elif dealer.is_blackjack and player_bj:
            text = "Push (Both have Blackjack)."
            rnd.results = [HandResult(PLAYER_SEAT, 0, Outcome.PUSH, 1, text)]
            stats.pushes += 1
        else:
            rnd.results = self._compare_hands(rnd.player)
            for result in rnd.results:
                if result.outcome.is_win:
                    stats.wins += result.weight
                elif result.outcome.is_loss:
                    stats.losses += result.weight
                else:
                    stats.pushes += 1
            text = " ".join(result.text for result in rnd.results)

        for seat in rnd.seats[1:]:
            seat_text = " ".join(r.text for r in self._compare_hands(seat))
            text = f"{text} {seat.name}: {seat_text}"

        rnd.result_text = text
        rnd.settled = True
        self.session.history.add_result(text)
        self.session.note_round_settled()

        logger.info("Round settled: %s", text)
        self.session.events.emit_new(
            EventType.ROUND_SETTLED,
            text=text,
            outcomes=[r.outcome.name for r in rnd.results],
        )
        return rnd.results

    def _compare_hands(self, seat: Seat) -> list[HandResult]:
        """Compare every hand of a seat with the dealer's final hand."""
        dealer = self.round.dealer
        results = []
        for index, hand in enumerate(seat.hands):
            weight = 2 if hand.is_doubled else 1
            if hand.is_busted:
                outcome, reason = Outcome.LOSS, "You lose (Busted)."
            elif dealer.is_blackjack and not hand.is_blackjack:
                outcome, reason = Outcome.DEALER_BLACKJACK, "You lose (Dealer Blackjack)."
            elif hand.is_blackjack and not dealer.is_blackjack:
                outcome, reason = Outcome.BLACKJACK, "Blackjack! You win."
            elif dealer.is_busted:
                outcome, reason = Outcome.WIN, "You win (Dealer Busted)."
            elif hand.value > dealer.value:
                outcome, reason = Outcome.WIN, "You win (Higher Score)."
            elif hand.value < dealer.value:
                outcome, reason = Outcome.LOSS, "You lose (Lower Score)."
            else:
                outcome, reason = Outcome.PUSH, "Push."
            results.append(
                HandResult(seat.name, index, outcome, weight, f"Hand {index + 1}: {reason}")
            )
        return results
