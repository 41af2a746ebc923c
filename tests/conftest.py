"""Pytest fixtures for blackjack table tests."""

import pytest
from random import Random

from core.cards import Card, Deck, Rank, Suit
from core.hand import Hand
from core.game import BlackjackGame, GameState, RoundState


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def deck(rng):
    """A shuffled deck."""
    return Deck.shuffled(rng)


@pytest.fixture
def stacked_deck():
    """
    Build a deck that deals the given cards in order.

    Cards are listed in draw order ("KH", "7C", ...); the first one listed
    ends up on top.
    """

    def build(*cards: str) -> Deck:
        return Deck(tuple(Card.from_string(c) for c in reversed(cards)))

    return build


@pytest.fixture
def betting_state(stacked_deck):
    """
    Build a state in the betting phase with a bet already on the table.

    ``chips`` is what remains after the bet was placed.
    """

    def build(*cards: str, chips: int = 900, bet: int = 100) -> GameState:
        return GameState(
            deck=stacked_deck(*cards),
            round_state=RoundState.BETTING,
            chips=chips,
            current_bet=bet,
        )

    return build


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return Hand((Card(Rank.ACE, Suit.SPADES), Card(Rank.KING, Suit.HEARTS)))


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return Hand((Card(Rank.ACE, Suit.SPADES), Card(Rank.SIX, Suit.HEARTS)))


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return Hand(
        (
            Card(Rank.KING, Suit.SPADES),
            Card(Rank.QUEEN, Suit.HEARTS),
            Card(Rank.TWO, Suit.CLUBS),
        )
    )


@pytest.fixture
def game(rng):
    """A new game instance that reports rejections instead of raising."""
    return BlackjackGame(chips=1000, rng=rng, strict=False)
