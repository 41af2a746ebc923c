"""Core blackjack engine - 100% UI-agnostic."""

from core.cards import Card, Deck, Rank, Suit
from core.hand import Hand, hand_value

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "Hand",
    "hand_value",
]
