"""Scene classes for the blackjack table."""

from pygame_ui.scenes.game_scene import GameScene

__all__ = ["GameScene"]
