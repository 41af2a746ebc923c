"""Card and Deck - immutable card representations."""

from dataclasses import dataclass, field
from enum import Enum, auto
from random import Random
from typing import Iterator


class Suit(Enum):
    """Card suits."""

    CLUBS = auto()
    DIAMONDS = auto()
    HEARTS = auto()
    SPADES = auto()

    def __str__(self) -> str:
        symbols = {
            Suit.CLUBS: "♣",
            Suit.DIAMONDS: "♦",
            Suit.HEARTS: "♥",
            Suit.SPADES: "♠",
        }
        return symbols[self]

    @property
    def is_red(self) -> bool:
        """Check if this suit is drawn in red."""
        return self in (Suit.DIAMONDS, Suit.HEARTS)


class Rank(Enum):
    """Card ranks with blackjack values."""

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self) -> str:
        if self.value <= 10:
            return str(self.value)
        return {
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
            Rank.ACE: "A",
        }[self]

    @property
    def blackjack_value(self) -> int:
        """Return the blackjack point value (Ace = 11, face cards = 10)."""
        if self.value <= 10:
            return self.value
        if self == Rank.ACE:
            return 11
        return 10  # Face cards

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        """Return the blackjack point value."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', 'Kh'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        rank_map = {str(rank): rank for rank in Rank}
        rank_map["T"] = Rank.TEN

        suit_map = {
            "C": Suit.CLUBS,
            "♣": Suit.CLUBS,
            "D": Suit.DIAMONDS,
            "♦": Suit.DIAMONDS,
            "H": Suit.HEARTS,
            "♥": Suit.HEARTS,
            "S": Suit.SPADES,
            "♠": Suit.SPADES,
        }

        if rank_str not in rank_map:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in suit_map:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(rank_map[rank_str], suit_map[suit_str])


def standard_cards() -> tuple[Card, ...]:
    """Return the 52 cards of a standard deck in suit-then-rank order."""
    return tuple(Card(rank, suit) for suit in Suit for rank in Rank)


@dataclass(frozen=True)
class Deck:
    """
    An immutable, ordered stack of cards.

    The top of the deck is the end of ``cards``; drawing returns the top card
    together with a new deck holding the rest.
    """

    cards: tuple[Card, ...] = field(default_factory=tuple)

    @classmethod
    def fresh(cls) -> "Deck":
        """Return an unshuffled standard 52-card deck."""
        return cls(standard_cards())

    @classmethod
    def shuffled(cls, rng: Random | None = None) -> "Deck":
        """Return a fresh 52-card deck in uniformly random order."""
        return cls.fresh().shuffle(rng)

    def shuffle(self, rng: Random | None = None) -> "Deck":
        """
        Return a new deck with the same cards in random order.

        ``Random.shuffle`` is a Fisher-Yates shuffle, so every permutation is
        equally likely.
        """
        cards = list(self.cards)
        (rng or Random()).shuffle(cards)
        return Deck(tuple(cards))

    def draw(self) -> tuple[Card, "Deck"]:
        """Draw the top card, returning it with the remaining deck."""
        if not self.cards:
            raise IndexError("Cannot draw from empty deck")
        return self.cards[-1], Deck(self.cards[:-1])

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __contains__(self, card: object) -> bool:
        return card in self.cards

    @property
    def cards_remaining(self) -> int:
        """Return the number of cards remaining."""
        return len(self.cards)

    @property
    def top(self) -> Card | None:
        """Peek at the next card to be drawn."""
        return self.cards[-1] if self.cards else None
