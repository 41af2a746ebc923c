"""
Blackjack rules as pure functions.

Each operation takes the current ``GameState`` and returns an ``ActionResult``:
``Applied`` with the next state and the events it produced, or ``Rejected``
with the unchanged state and the reason. Nothing is mutated; the only input
besides the state is the random source used to shuffle a new deck.
"""

from random import Random

from core.cards import Card, Deck
from core.hand import BLACKJACK, Hand
from core.game.events import EventType, GameEvent, event
from core.game.results import ActionResult, Applied, Rejected, RejectionReason
from core.game.state import GameState, Outcome, RoundState, is_valid_transition

# Dealer draws below this value and stands on all 17s, soft or hard
DEALER_STANDS_ON = 17

DEAL_ORDER = ("player", "player", "dealer", "dealer")


def _enter(state: GameState, to_state: RoundState, **changes) -> GameState:
    """Move ``state`` to ``to_state``, refusing any backward transition."""
    if not is_valid_transition(state.round_state, to_state):
        raise ValueError(
            f"Invalid transition: {state.round_state.name} -> {to_state.name}"
        )
    return state.evolve(round_state=to_state, **changes)


def _wrong_phase(state: GameState, action: str) -> Rejected:
    return Rejected(
        state,
        RejectionReason.INVALID_PHASE,
        f"Cannot {action} during {state.round_state}",
    )


def _card_dealt(card: Card, hand_name: str, hand: Hand) -> GameEvent:
    return event(EventType.CARD_DEALT, card=str(card), hand=hand_name, hand_value=hand.value)


def new_game(chips: int = 1000, rng: Random | None = None) -> GameState:
    """Return the state of a fresh table with a shuffled deck, ready for bets."""
    return start_new_round(GameState(chips=chips), rng).state


def start_new_round(state: GameState, rng: Random | None = None) -> ActionResult:
    """
    Reset everything round-scoped and shuffle a fresh 52-card deck.

    Chips carry over. Allowed before any card is dealt or once the round is
    over; a stake already placed in the betting phase goes back to the chips.
    """
    if state.round_state not in (RoundState.BETTING, RoundState.GAME_OVER):
        return _wrong_phase(state, "start a new round")

    events: list[GameEvent] = []
    chips = state.chips
    if state.current_bet:
        chips += state.current_bet
        events.append(event(EventType.BET_RETURNED, amount=state.current_bet))

    deck = Deck.shuffled(rng)
    next_state = _enter(
        state,
        RoundState.BETTING,
        deck=deck,
        player_hand=Hand(),
        dealer_hand=Hand(),
        result_message="",
        chips=chips,
        current_bet=0,
        outcome=None,
        payout=0,
    )
    events.append(event(EventType.DECK_SHUFFLED, cards=len(deck)))
    events.append(event(EventType.ROUND_STARTED, chips=chips))
    return Applied(next_state, tuple(events))


def place_bet(state: GameState, amount: int) -> ActionResult:
    """Move ``amount`` chips onto the table. Repeated bets accumulate."""
    if state.round_state is not RoundState.BETTING:
        return _wrong_phase(state, "place a bet")
    if isinstance(amount, bool) or not isinstance(amount, int):
        return Rejected(
            state,
            RejectionReason.INVALID_AMOUNT,
            f"Bet must be a whole number of chips, got {amount!r}",
        )
    if amount <= 0:
        return Rejected(
            state,
            RejectionReason.NON_POSITIVE_AMOUNT,
            f"Bet must be positive, got {amount}",
        )
    if state.chips < amount:
        return Rejected(
            state,
            RejectionReason.INSUFFICIENT_FUNDS,
            f"Bet of {amount} exceeds {state.chips} chips",
        )

    next_state = _enter(
        state,
        RoundState.BETTING,
        chips=state.chips - amount,
        current_bet=state.current_bet + amount,
    )
    return Applied(
        next_state,
        (
            event(
                EventType.BET_PLACED,
                amount=amount,
                total_bet=next_state.current_bet,
                chips=next_state.chips,
            ),
        ),
    )


def deal(state: GameState) -> ActionResult:
    """Deal two cards each from the top of the deck: player, player, dealer, dealer."""
    if state.round_state is not RoundState.BETTING:
        return _wrong_phase(state, "deal")
    if state.current_bet == 0:
        return Rejected(state, RejectionReason.NO_BET_PLACED, "Place a bet before dealing")

    deck = state.deck
    hands = {"player": Hand(), "dealer": Hand()}
    events: list[GameEvent] = []
    for hand_name in DEAL_ORDER:
        card, deck = deck.draw()
        hands[hand_name] = hands[hand_name].add_card(card)
        events.append(_card_dealt(card, hand_name, hands[hand_name]))

    next_state = _enter(
        state,
        RoundState.PLAYER_TURN,
        deck=deck,
        player_hand=hands["player"],
        dealer_hand=hands["dealer"],
    )
    return Applied(next_state, tuple(events))


def hit(state: GameState) -> ActionResult:
    """Give the player one card; a bust ends the round on the spot."""
    if state.round_state is not RoundState.PLAYER_TURN:
        return _wrong_phase(state, "hit")

    card, deck = state.deck.draw()
    hand = state.player_hand.add_card(card)
    events = [
        event(EventType.PLAYER_HIT, hand_value=hand.value),
        _card_dealt(card, "player", hand),
    ]

    if not hand.is_busted:
        next_state = _enter(state, RoundState.PLAYER_TURN, deck=deck, player_hand=hand)
        return Applied(next_state, tuple(events))

    events.append(event(EventType.PLAYER_BUSTS, hand_value=hand.value))
    settled, settle_events = _settle(
        state.evolve(deck=deck, player_hand=hand), Outcome.PLAYER_BUST
    )
    return Applied(settled, tuple(events) + settle_events)


def stand(state: GameState) -> ActionResult:
    """End the player's turn; the dealer plays out and the round settles at once."""
    if state.round_state is not RoundState.PLAYER_TURN:
        return _wrong_phase(state, "stand")

    stand_event = event(EventType.PLAYER_STAND, hand_value=state.player_value)
    result = resolve_dealer_and_settle(_enter(state, RoundState.DEALER_TURN))
    return Applied(result.state, (stand_event,) + result.events)


def dealer_should_hit(hand: Hand) -> bool:
    """Dealer draws below 17 and stands on every 17, soft or hard."""
    return hand.value < DEALER_STANDS_ON


def settle_outcome(player_value: int, dealer_value: int) -> Outcome:
    """Decide the round from both final hand values."""
    if player_value > BLACKJACK:
        return Outcome.PLAYER_BUST
    if dealer_value > BLACKJACK:
        return Outcome.DEALER_BUST
    if dealer_value > player_value:
        return Outcome.DEALER_WINS
    if dealer_value < player_value:
        return Outcome.PLAYER_WINS
    return Outcome.PUSH


def resolve_dealer_and_settle(state: GameState) -> ActionResult:
    """
    Run the dealer's fixed policy and settle the wager.

    The player's hand is frozen at this point. The dealer draws from the top
    of the deck until reaching 17 or more, then the outcome decides the
    payout: 2x the stake on a win, 1x on a push, nothing on a loss.
    """
    if state.round_state is not RoundState.DEALER_TURN:
        return _wrong_phase(state, "play the dealer's hand")

    dealer_hand = state.dealer_hand
    deck = state.deck
    events: list[GameEvent] = []
    if dealer_hand.cards:
        events.append(
            event(
                EventType.DEALER_REVEALS,
                card=str(dealer_hand.cards[0]),
                hand_value=dealer_hand.value,
            )
        )

    while dealer_should_hit(dealer_hand):
        card, deck = deck.draw()
        dealer_hand = dealer_hand.add_card(card)
        events.append(event(EventType.DEALER_HITS, card=str(card), hand_value=dealer_hand.value))

    if dealer_hand.is_busted:
        events.append(event(EventType.DEALER_BUSTS, hand_value=dealer_hand.value))
    else:
        events.append(event(EventType.DEALER_STANDS, hand_value=dealer_hand.value))

    outcome = settle_outcome(state.player_value, dealer_hand.value)
    settled, settle_events = _settle(
        state.evolve(deck=deck, dealer_hand=dealer_hand), outcome
    )
    return Applied(settled, tuple(events) + settle_events)


def _settle(state: GameState, outcome: Outcome) -> tuple[GameState, tuple[GameEvent, ...]]:
    """Pay out the stake according to ``outcome`` and close the round."""
    stake = state.current_bet
    payout = stake * outcome.payout_multiplier

    if outcome is Outcome.PUSH:
        result_event = event(EventType.PUSH, amount=payout)
    elif outcome.player_won:
        result_event = event(EventType.PLAYER_WINS, amount=payout - stake)
    else:
        result_event = event(EventType.PLAYER_LOSES, amount=stake)

    settled = _enter(
        state,
        RoundState.GAME_OVER,
        chips=state.chips + payout,
        current_bet=0,
        outcome=outcome,
        result_message=outcome.message,
        payout=payout,
    )
    round_ended = event(
        EventType.ROUND_ENDED,
        outcome=outcome.name,
        payout=payout,
        chips=settled.chips,
    )
    return settled, (result_event, round_ended)
