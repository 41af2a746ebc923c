"""Tests for hand evaluation."""

import pytest
from dataclasses import FrozenInstanceError

from hypothesis import given, strategies as st

from core.cards import Card, Rank, Suit
from core.hand import Hand, hand_value


def make_hand(*cards: str) -> Hand:
    """Build a hand from card strings."""
    return Hand(tuple(Card.from_string(c) for c in cards))


@st.composite
def card_strategy(draw):
    """Generate a random card."""
    rank = draw(st.sampled_from(list(Rank)))
    suit = draw(st.sampled_from(list(Suit)))
    return Card(rank, suit)


class TestHandValue:
    """Tests for hand value calculation."""

    def test_empty_hand(self):
        """An empty hand is worth nothing."""
        assert Hand().value == 0
        assert hand_value([]) == 0

    def test_hard_totals(self):
        """Test hands without aces."""
        assert make_hand("10S", "7H").value == 17
        assert make_hand("5S", "6H").value == 11
        assert make_hand("JS", "QH").value == 20

    def test_blackjack(self, blackjack_hand):
        """Ace and king make 21."""
        assert blackjack_hand.value == 21

    def test_two_aces(self):
        """Only one of two aces can count as 11."""
        assert make_hand("AS", "AH").value == 12

    def test_two_aces_and_nine(self):
        """A-A-9 is 21, one ace high and one low."""
        assert make_hand("AS", "AH", "9C").value == 21

    def test_ace_demoted_to_avoid_bust(self):
        """An ace drops to 1 when 11 would bust."""
        assert make_hand("AS", "9H", "5C").value == 15

    def test_four_aces(self):
        """Test four aces."""
        assert make_hand("AS", "AH", "AD", "AC").value == 14

    def test_bust(self, bust_hand):
        """K-Q-2 is 22 and busts."""
        assert bust_hand.value == 22
        assert bust_hand.is_busted

    def test_value_is_idempotent(self):
        """Reading the value twice gives the same answer."""
        hand = make_hand("AS", "6H", "KC")
        assert hand.value == hand.value == hand_value(hand.cards) == 17

    @given(st.lists(card_strategy(), min_size=1, max_size=8))
    def test_value_matches_best_total(self, cards):
        """The value is the highest total not over 21, else the lowest total."""
        low = sum(1 if c.is_ace else c.value for c in cards)
        aces = sum(1 for c in cards if c.is_ace)
        candidates = [low + 10 * i for i in range(aces + 1)]
        safe = [v for v in candidates if v <= 21]
        expected = max(safe) if safe else low

        assert hand_value(cards) == expected


class TestHandSoftness:
    """Tests for soft hand detection."""

    def test_soft_17(self, soft_17_hand):
        """A-6 is a soft 17."""
        assert soft_17_hand.value == 17
        assert soft_17_hand.is_soft

    def test_hard_hand_is_not_soft(self):
        """Test hands without aces."""
        assert not make_hand("10S", "7H").is_soft

    def test_ace_counted_low_is_not_soft(self):
        """A-9-5 counts the ace as 1."""
        assert not make_hand("AS", "9H", "5C").is_soft


class TestHandImmutability:
    """Hands never change in place."""

    def test_add_card_returns_new_hand(self):
        """Adding a card leaves the original hand untouched."""
        hand = make_hand("10S")
        bigger = hand.add_card(Card(Rank.SEVEN, Suit.HEARTS))

        assert len(hand) == 1
        assert len(bigger) == 2
        assert bigger.value == 17

    def test_fields_are_frozen(self):
        """Test that hand fields cannot be reassigned."""
        hand = make_hand("10S")
        with pytest.raises(FrozenInstanceError):
            hand.cards = ()

    def test_str_shows_bust(self, bust_hand):
        """Test string representation of a busted hand."""
        assert str(bust_hand).endswith("(BUST)")

    def test_str_shows_soft(self, soft_17_hand):
        """Test string representation of a soft hand."""
        assert str(soft_17_hand).endswith("(soft 17)")
