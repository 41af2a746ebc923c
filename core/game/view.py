"""Display projection of the game state shared by the presentation shells."""

from dataclasses import dataclass

from core.cards import Card
from core.game.state import GameState, Outcome, RoundState


def dealer_hole_card_hidden(state: GameState) -> bool:
    """The dealer's first card stays face down while the player is deciding."""
    return state.round_state is RoundState.PLAYER_TURN and bool(state.dealer_hand.cards)


@dataclass(frozen=True)
class TableView:
    """
    What a shell may show of a ``GameState``.

    ``dealer_cards`` holds ``None`` in place of a concealed card and
    ``dealer_value`` is ``None`` while any dealer card is concealed. The
    engine itself never hides anything; this is purely a rendering rule.
    """

    round_state: RoundState
    player_cards: tuple[Card, ...]
    player_value: int
    player_soft: bool
    dealer_cards: tuple[Card | None, ...]
    dealer_value: int | None
    dealer_hole_card_hidden: bool
    chips: int
    current_bet: int
    result_message: str
    outcome: Outcome | None
    payout: int
    cards_remaining: int


def build_table_view(state: GameState) -> TableView:
    """Project ``state`` into what may be displayed right now."""
    hidden = dealer_hole_card_hidden(state)
    dealer_cards: tuple[Card | None, ...] = state.dealer_hand.cards
    if hidden:
        dealer_cards = (None,) + dealer_cards[1:]

    return TableView(
        round_state=state.round_state,
        player_cards=state.player_hand.cards,
        player_value=state.player_value,
        player_soft=state.player_hand.is_soft,
        dealer_cards=dealer_cards,
        dealer_value=None if hidden else state.dealer_value,
        dealer_hole_card_hidden=hidden,
        chips=state.chips,
        current_bet=state.current_bet,
        result_message=state.result_message,
        outcome=state.outcome,
        payout=state.payout,
        cards_remaining=len(state.deck),
    )
