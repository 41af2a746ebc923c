"""Round state enumeration and the immutable game state value."""

from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Any

from core.cards import Deck
from core.hand import Hand


class RoundState(Enum):
    """
    Round state machine states.

    Flow: BETTING → PLAYER_TURN → DEALER_TURN → GAME_OVER → (new round) BETTING
    """

    # Wagers are being placed
    BETTING = auto()

    # Player hits or stands
    PLAYER_TURN = auto()

    # Dealer draws and the round settles
    DEALER_TURN = auto()

    # Round settled, result available
    GAME_OVER = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


# Valid state transitions
VALID_TRANSITIONS: dict[RoundState, list[RoundState]] = {
    RoundState.BETTING: [RoundState.BETTING, RoundState.PLAYER_TURN],
    RoundState.PLAYER_TURN: [
        RoundState.PLAYER_TURN,
        RoundState.DEALER_TURN,
        RoundState.GAME_OVER,  # Player busts
    ],
    RoundState.DEALER_TURN: [RoundState.GAME_OVER],
    RoundState.GAME_OVER: [RoundState.BETTING],
}


def is_valid_transition(from_state: RoundState, to_state: RoundState) -> bool:
    """
    Check if a state transition is valid.

    Args:
        from_state: Current state
        to_state: Desired state

    Returns:
        True if the transition is allowed
    """
    return to_state in VALID_TRANSITIONS.get(from_state, [])


class Outcome(Enum):
    """How a round was settled."""

    PLAYER_BUST = "Player busts! Dealer wins."
    DEALER_BUST = "Dealer busts! Player wins."
    DEALER_WINS = "Dealer wins!"
    PLAYER_WINS = "Player wins!"
    PUSH = "Push! Your bet is returned."

    @property
    def message(self) -> str:
        """Result message shown to the player."""
        return self.value

    @property
    def payout_multiplier(self) -> int:
        """Multiple of the stake credited back to the player's chips."""
        return {
            Outcome.PLAYER_BUST: 0,
            Outcome.DEALER_BUST: 2,
            Outcome.DEALER_WINS: 0,
            Outcome.PLAYER_WINS: 2,
            Outcome.PUSH: 1,
        }[self]

    @property
    def player_won(self) -> bool:
        """Check if the player profited from the round."""
        return self.payout_multiplier > 1


@dataclass(frozen=True)
class GameState:
    """
    Complete, immutable state of a single-player table.

    Every engine operation takes a ``GameState`` and produces a new one;
    nothing here is ever mutated in place.
    """

    deck: Deck = field(default_factory=Deck)
    player_hand: Hand = field(default_factory=Hand)
    dealer_hand: Hand = field(default_factory=Hand)
    round_state: RoundState = RoundState.BETTING
    result_message: str = ""
    chips: int = 1000
    current_bet: int = 0
    outcome: Outcome | None = None
    payout: int = 0

    def __post_init__(self) -> None:
        if self.chips < 0:
            raise ValueError("Chips cannot be negative")
        if self.current_bet < 0:
            raise ValueError("Current bet cannot be negative")

    def evolve(self, **changes: Any) -> "GameState":
        """Return a copy of this state with ``changes`` applied."""
        return replace(self, **changes)

    @property
    def player_value(self) -> int:
        """Scored value of the player's hand."""
        return self.player_hand.value

    @property
    def dealer_value(self) -> int:
        """Scored value of the dealer's hand."""
        return self.dealer_hand.value

    @property
    def total_chips(self) -> int:
        """Chips held plus the stake currently on the table."""
        return self.chips + self.current_bet

    def snapshot(self) -> dict[str, Any]:
        """Plain view of the state handed to presentation shells."""
        return {
            "deck": list(self.deck.cards),
            "player_hand": list(self.player_hand.cards),
            "dealer_hand": list(self.dealer_hand.cards),
            "round_state": self.round_state,
            "result_message": self.result_message,
            "chips": self.chips,
            "current_bet": self.current_bet,
        }
