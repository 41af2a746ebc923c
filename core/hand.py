"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from core.cards import Card

BLACKJACK = 21


def hand_value(cards: Iterable[Card]) -> int:
    """
    Calculate the best value of a sequence of cards.

    Every ace starts at 11 and is demoted to 1 while the total is over 21.
    Returns the highest value that doesn't bust, or the lowest bust value.
    """
    total = 0
    aces = 0

    for card in cards:
        if card.is_ace:
            aces += 1
        total += card.value

    # Reduce aces from 11 to 1 as needed
    while total > BLACKJACK and aces > 0:
        total -= 10
        aces -= 1

    return total


@dataclass(frozen=True)
class Hand:
    """An immutable blackjack hand with value calculation."""

    cards: tuple[Card, ...] = field(default_factory=tuple)

    def add_card(self, card: Card) -> "Hand":
        """Return a new hand with ``card`` appended."""
        return Hand(self.cards + (card,))

    @property
    def value(self) -> int:
        """Best hand value, recomputed from the cards on every access."""
        return hand_value(self.cards)

    @property
    def is_soft(self) -> bool:
        """
        Check if the hand is soft (has an ace counted as 11).

        A hand is soft if it contains an ace that can be counted as 11
        without busting.
        """
        if not any(card.is_ace for card in self.cards):
            return False

        total_hard = sum(1 if card.is_ace else card.value for card in self.cards)
        return total_hard + 10 <= BLACKJACK

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return self.value > BLACKJACK

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        value_str = f"({self.value})"
        if self.is_soft:
            value_str = f"(soft {self.value})"
        if self.is_busted:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Hand({list(self.cards)!r}, value={self.value})"
