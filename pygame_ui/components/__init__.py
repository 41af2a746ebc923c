"""UI components for the blackjack table."""

from pygame_ui.components.card import CardSprite, CardGroup
from pygame_ui.components.button import Button, ActionButton, ButtonState

__all__ = [
    "CardSprite",
    "CardGroup",
    "Button",
    "ActionButton",
    "ButtonState",
]
