"""Blackjack session facade over the pure rules, with a state machine."""

import logging
from random import Random
from typing import Any, Callable

from transitions import Machine

from config import config
from core.hand import Hand
from core.game import rules
from core.game.events import EventEmitter, EventType, GameEvent
from core.game.results import ActionRejectedError, ActionResult, Rejected, RejectionReason
from core.game.state import GameState, RoundState

logger = logging.getLogger(__name__)


class BlackjackGame:
    """
    Stateful blackjack table for presentation shells.

    The rules live in ``core.game.rules`` as pure functions; this class keeps
    the current ``GameState``, mirrors its phase in a state machine that
    refuses any illegal move, and publishes the events each action produced.
    """

    # State machine states
    STATES = [s.name.lower() for s in RoundState]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "new_round", "source": ["betting", "game_over"], "dest": "betting"},
        {"trigger": "bet_placed", "source": "betting", "dest": "betting"},
        {"trigger": "deal_cards", "source": "betting", "dest": "player_turn"},
        {"trigger": "player_hits", "source": "player_turn", "dest": "player_turn"},
        {"trigger": "player_busts", "source": "player_turn", "dest": "game_over"},
        {"trigger": "player_stands", "source": "player_turn", "dest": "dealer_turn"},
        {"trigger": "dealer_settles", "source": "dealer_turn", "dest": "game_over"},
    ]

    def __init__(
        self,
        chips: int | None = None,
        rng: Random | None = None,
        strict: bool | None = None,
        state: GameState | None = None,
    ) -> None:
        """
        Initialize a new table, or resume one from a saved state.

        Args:
            chips: Starting chips (defaults to the configured amount)
            rng: Random number generator for reproducible shuffles
            strict: Raise ActionRejectedError on invalid actions instead of
                returning a Rejected result
            state: Existing state to resume; a new round is started otherwise
        """
        self._rng = rng or Random()
        self.strict = config.game.strict_actions if strict is None else strict
        self.events = EventEmitter()

        if chips is None:
            chips = config.game.starting_chips
        self._state = state if state is not None else GameState(chips=chips)

        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial=self._state.round_state.name.lower(),
            auto_transitions=False,
            model_attribute="_machine_state",
        )

        if state is None:
            self.start_new_round()

    @property
    def state(self) -> GameState:
        """Current immutable game state."""
        return self._state

    @property
    def round_state(self) -> RoundState:
        """Get current round state as enum."""
        return RoundState[self._machine_state.upper()]  # type: ignore[attr-defined]

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    def snapshot(self) -> dict[str, Any]:
        """State snapshot for presentation shells."""
        return self._state.snapshot()

    # Actions

    def start_new_round(self) -> ActionResult:
        """Shuffle a fresh deck and return to betting, keeping the chips."""
        return self._apply("start_new_round", rules.start_new_round(self._state, self._rng), "new_round")

    def place_bet(self, amount: int) -> ActionResult:
        """Add ``amount`` to the current bet."""
        return self._apply("place_bet", rules.place_bet(self._state, amount), "bet_placed")

    def deal(self) -> ActionResult:
        """Deal the opening cards."""
        return self._apply("deal", rules.deal(self._state), "deal_cards")

    def hit(self) -> ActionResult:
        """Player hits (takes another card)."""
        result = rules.hit(self._state)
        if result and result.state.round_state is RoundState.GAME_OVER:
            return self._apply("hit", result, "player_busts")
        return self._apply("hit", result, "player_hits")

    def stand(self) -> ActionResult:
        """Player stands; the dealer plays out and the round settles."""
        return self._apply("stand", rules.stand(self._state), "player_stands", "dealer_settles")

    def _apply(self, action: str, result: ActionResult, *triggers: str) -> ActionResult:
        """Commit an applied result, or report a rejected one."""
        if isinstance(result, Rejected):
            return self._reject(action, result)

        for trigger in triggers:
            getattr(self, trigger)()
        self._state = result.state

        if self.round_state is not self._state.round_state:
            raise RuntimeError(
                f"State machine is in {self.round_state.name} "
                f"but the game state is {self._state.round_state.name}"
            )

        self.events.emit_all(result.events)

        logger.debug(
            "%s applied: state=%s chips=%d bet=%d",
            action,
            self._state.round_state.name,
            self._state.chips,
            self._state.current_bet,
        )
        if self._state.outcome is not None and self._state.round_state is RoundState.GAME_OVER:
            logger.info(
                "Round settled: %s (player %d, dealer %d, payout %d, chips %d)",
                self._state.outcome.name,
                self._state.player_value,
                self._state.dealer_value,
                self._state.payout,
                self._state.chips,
            )
        return result

    def _reject(self, action: str, result: Rejected) -> Rejected:
        """Publish a rejection, raising instead in strict mode."""
        logger.debug("%s rejected: %s (%s)", action, result.reason.name, result.message)

        if result.reason is RejectionReason.INSUFFICIENT_FUNDS:
            self.events.emit_new(
                EventType.INSUFFICIENT_FUNDS,
                action=action,
                available=self._state.chips,
                message=result.message,
            )
        else:
            self.events.emit_new(
                EventType.INVALID_ACTION,
                action=action,
                reason=result.reason.name,
                message=result.message,
            )

        if self.strict:
            raise ActionRejectedError(action, result.reason, result.message)
        return result

    # Read-only views

    @property
    def chips(self) -> int:
        return self._state.chips

    @property
    def current_bet(self) -> int:
        return self._state.current_bet

    @property
    def player_hand(self) -> Hand:
        return self._state.player_hand

    @property
    def dealer_hand(self) -> Hand:
        return self._state.dealer_hand

    @property
    def result_message(self) -> str:
        return self._state.result_message

    def can_bet(self, amount: int) -> bool:
        """Check if a bet of ``amount`` would be accepted."""
        return (
            self.round_state is RoundState.BETTING
            and isinstance(amount, int)
            and not isinstance(amount, bool)
            and amount > 0
            and self._state.chips >= amount
        )

    @property
    def can_deal(self) -> bool:
        """Check if dealing is allowed."""
        return self.round_state is RoundState.BETTING and self._state.current_bet > 0

    @property
    def can_hit(self) -> bool:
        """Check if hitting is allowed."""
        return self.round_state is RoundState.PLAYER_TURN

    @property
    def can_stand(self) -> bool:
        """Check if standing is allowed."""
        return self.round_state is RoundState.PLAYER_TURN

    @property
    def can_start_new_round(self) -> bool:
        """Check if a new round may be started."""
        return self.round_state in (RoundState.BETTING, RoundState.GAME_OVER)
