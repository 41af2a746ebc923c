"""Adapter connecting the core blackjack engine to the PyGame UI."""

import logging
from dataclasses import dataclass
from random import Random
from typing import Callable, Optional

from config import config
from core.cards import Card, Rank, Suit
from core.game import ActionResult, BlackjackGame, EventType, GameEvent, Outcome, RoundState, build_table_view

logger = logging.getLogger(__name__)


# Map core Suit to pygame_ui suit names
SUIT_MAP = {
    Suit.HEARTS: "hearts",
    Suit.DIAMONDS: "diamonds",
    Suit.CLUBS: "clubs",
    Suit.SPADES: "spades",
}

# Map core Rank to pygame_ui value strings
RANK_MAP = {rank: str(rank) for rank in Rank}


@dataclass
class UICardInfo:
    """Card information for the UI layer."""

    value: Optional[str]  # "A", "2", "K", etc.; None while face down
    suit: Optional[str]   # "hearts", "diamonds", "clubs", "spades"
    face_up: bool = True

    @classmethod
    def from_core_card(cls, card: Optional[Card]) -> "UICardInfo":
        """Create UICardInfo from a core Card, or a face-down slot for None."""
        if card is None:
            return cls(value=None, suit=None, face_up=False)
        return cls(value=RANK_MAP[card.rank], suit=SUIT_MAP[card.suit])


@dataclass
class GameSnapshot:
    """Snapshot of game state for UI rendering."""

    state: RoundState
    player_hand: list[UICardInfo]
    dealer_hand: list[UICardInfo]
    dealer_hole_card_hidden: bool
    player_hand_value: int
    dealer_hand_value: Optional[int]
    chips: int
    current_bet: int
    result_message: str
    outcome: Optional[Outcome]
    payout: int
    cards_remaining: int
    can_deal: bool
    can_hit: bool
    can_stand: bool
    can_start_new_round: bool


class EngineAdapter:
    """Adapter between the core BlackjackGame and PyGame UI.

    Subscribes to engine events and translates them to UI callbacks.
    Provides a clean interface for UI code to interact with the engine.
    """

    def __init__(
        self,
        initial_chips: Optional[int] = None,
        rng: Optional[Random] = None,
    ):
        """Initialize the adapter.

        Args:
            initial_chips: Starting chips (defaults to the configured amount)
            rng: Random number generator for reproducible shuffles
        """
        self.game = BlackjackGame(chips=initial_chips, rng=rng, strict=False)
        self.bet_denominations = config.game.bet_denominations

        # UI callbacks
        self._on_card_dealt: Optional[Callable[[str, str], None]] = None
        self._on_round_result: Optional[Callable[[str, int], None]] = None
        self._on_invalid_action: Optional[Callable[[str], None]] = None

        self.game.subscribe(self._handle_event)

    def set_callbacks(
        self,
        on_card_dealt: Optional[Callable[[str, str], None]] = None,
        on_round_result: Optional[Callable[[str, int], None]] = None,
        on_invalid_action: Optional[Callable[[str], None]] = None,
    ) -> None:
        """Set UI callbacks for engine events.

        Args:
            on_card_dealt: Called with (hand name, card text)
            on_round_result: Called with (result message, payout)
            on_invalid_action: Called with a message when an action is refused
        """
        self._on_card_dealt = on_card_dealt
        self._on_round_result = on_round_result
        self._on_invalid_action = on_invalid_action

    def _handle_event(self, event: GameEvent) -> None:
        """Handle events from the core engine."""
        etype = event.event_type
        data = event.data

        if etype == EventType.CARD_DEALT:
            if self._on_card_dealt:
                self._on_card_dealt(data.get("hand", ""), data.get("card", ""))
        elif etype == EventType.ROUND_ENDED:
            if self._on_round_result:
                self._on_round_result(self.game.result_message, data.get("payout", 0))
        elif etype in (EventType.INVALID_ACTION, EventType.INSUFFICIENT_FUNDS):
            if self._on_invalid_action:
                self._on_invalid_action(data.get("message", "Not allowed"))

    # Actions

    def start_new_round(self) -> ActionResult:
        return self.game.start_new_round()

    def place_bet(self, amount: int) -> ActionResult:
        return self.game.place_bet(amount)

    def deal(self) -> ActionResult:
        return self.game.deal()

    def hit(self) -> ActionResult:
        return self.game.hit()

    def stand(self) -> ActionResult:
        return self.game.stand()

    # State

    @property
    def state(self) -> RoundState:
        return self.game.round_state

    def can_bet(self, amount: int) -> bool:
        return self.game.can_bet(amount)

    def get_snapshot(self) -> GameSnapshot:
        """Build a render snapshot with the dealer's hole card concealed."""
        view = build_table_view(self.game.state)
        return GameSnapshot(
            state=view.round_state,
            player_hand=[UICardInfo.from_core_card(c) for c in view.player_cards],
            dealer_hand=[UICardInfo.from_core_card(c) for c in view.dealer_cards],
            dealer_hole_card_hidden=view.dealer_hole_card_hidden,
            player_hand_value=view.player_value,
            dealer_hand_value=view.dealer_value,
            chips=view.chips,
            current_bet=view.current_bet,
            result_message=view.result_message,
            outcome=view.outcome,
            payout=view.payout,
            cards_remaining=view.cards_remaining,
            can_deal=self.game.can_deal,
            can_hit=self.game.can_hit,
            can_stand=self.game.can_stand,
            can_start_new_round=self.game.can_start_new_round,
        )
