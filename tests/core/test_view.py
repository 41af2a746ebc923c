"""Tests for the display projection of the table."""

from core.cards import Card
from core.game import rules
from core.game import RoundState, build_table_view
from core.game.view import dealer_hole_card_hidden


class TestDealerConcealment:
    """The dealer's first card is hidden only during the player's turn."""

    def test_hidden_during_player_turn(self, betting_state):
        state = rules.deal(betting_state("KH", "7C", "9D", "8S")).state

        view = build_table_view(state)

        assert view.dealer_hole_card_hidden
        assert view.dealer_cards == (None, Card.from_string("8S"))
        assert view.dealer_value is None
        assert view.player_value == 17

    def test_engine_state_is_not_altered(self, betting_state):
        """Concealment is a view; the state still holds both cards."""
        state = rules.deal(betting_state("KH", "7C", "9D", "8S")).state

        build_table_view(state)

        assert state.dealer_hand.cards[0] == Card.from_string("9D")
        assert state.dealer_value == 17

    def test_revealed_when_round_over(self, betting_state):
        """Test the dealer's hand once the round has settled."""
        state = rules.deal(betting_state("KH", "7C", "9D", "8S")).state
        state = rules.stand(state).state

        view = build_table_view(state)

        assert state.round_state == RoundState.GAME_OVER
        assert not view.dealer_hole_card_hidden
        assert None not in view.dealer_cards
        assert view.dealer_value == 17
        assert view.result_message == "Push! Your bet is returned."

    def test_nothing_hidden_while_betting(self, betting_state):
        state = betting_state("KH")

        assert not dealer_hole_card_hidden(state)
        assert build_table_view(state).dealer_cards == ()
