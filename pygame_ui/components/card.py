"""Card sprites for drawing hands on the table."""

from typing import List, Optional

import pygame

from pygame_ui.config import COLORS, DIMENSIONS
from pygame_ui.core.engine_adapter import UICardInfo

SUIT_SYMBOLS = {
    "hearts": "♥",
    "diamonds": "♦",
    "clubs": "♣",
    "spades": "♠",
}


class CardSprite:
    """A single card drawn face up, or face down when its identity is withheld."""

    def __init__(self, info: UICardInfo, x: float = 0, y: float = 0):
        self.info = info
        self.x = x
        self.y = y
        self.shadow_offset = DIMENSIONS.CARD_SHADOW_OFFSET

    @property
    def is_face_up(self) -> bool:
        return self.info.face_up and self.info.value is not None

    def _render_card_face(self, width: int, height: int) -> pygame.Surface:
        """Render the face-up side of the card."""
        surface = pygame.Surface((width, height), pygame.SRCALPHA)

        rect = pygame.Rect(0, 0, width, height)
        radius = DIMENSIONS.CARD_CORNER_RADIUS
        pygame.draw.rect(surface, COLORS.CARD_WHITE, rect, border_radius=radius)
        pygame.draw.rect(surface, COLORS.CARD_BLACK, rect, width=2, border_radius=radius)

        is_red = self.info.suit in ("hearts", "diamonds")
        color = COLORS.CARD_RED if is_red else COLORS.CARD_BLACK
        suit_symbol = SUIT_SYMBOLS.get(self.info.suit, "?")

        # Value and suit in the corner
        font_size = max(16, int(height * 0.18))
        font = pygame.font.Font(None, font_size)
        surface.blit(font.render(self.info.value, True, color), (8, 6))
        surface.blit(font.render(suit_symbol, True, color), (8, 6 + font_size - 6))

        # Large center suit
        center_font = pygame.font.Font(None, int(height * 0.45))
        center_suit = center_font.render(suit_symbol, True, color)
        surface.blit(center_suit, center_suit.get_rect(center=(width // 2, height // 2)))

        return surface

    def _render_card_back(self, width: int, height: int) -> pygame.Surface:
        """Render the face-down (back) side of the card."""
        surface = pygame.Surface((width, height), pygame.SRCALPHA)

        rect = pygame.Rect(0, 0, width, height)
        radius = DIMENSIONS.CARD_CORNER_RADIUS
        pygame.draw.rect(surface, COLORS.CARD_BACK, rect, border_radius=radius)
        pygame.draw.rect(surface, COLORS.CARD_BLACK, rect, width=2, border_radius=radius)

        inner_rect = rect.inflate(-12, -12)
        pygame.draw.rect(surface, COLORS.CARD_BACK_PATTERN, inner_rect, border_radius=4)

        # Diamond grid
        pattern_color = (*COLORS.CARD_BACK[:3], 60)
        for i in range(-height, width + height, 16):
            pygame.draw.line(surface, pattern_color, (i, 6), (i + height, height - 6), 1)
            pygame.draw.line(surface, pattern_color, (i + height, 6), (i, height - 6), 1)

        return surface

    def draw(self, surface: pygame.Surface) -> None:
        """Draw the card centered on its position, with a drop shadow."""
        width, height = DIMENSIONS.CARD_WIDTH, DIMENSIONS.CARD_HEIGHT

        shadow = pygame.Surface((width, height), pygame.SRCALPHA)
        pygame.draw.rect(
            shadow,
            (0, 0, 0, 80),
            shadow.get_rect(),
            border_radius=DIMENSIONS.CARD_CORNER_RADIUS,
        )
        surface.blit(
            shadow,
            shadow.get_rect(center=(int(self.x) + self.shadow_offset, int(self.y) + self.shadow_offset)),
        )

        if self.is_face_up:
            card_surface = self._render_card_face(width, height)
        else:
            card_surface = self._render_card_back(width, height)
        surface.blit(card_surface, card_surface.get_rect(center=(int(self.x), int(self.y))))


class CardGroup:
    """Manages the sprites of one hand."""

    def __init__(self):
        self.cards: List[CardSprite] = []

    def sync(self, infos: List[UICardInfo], center_x: float, y: float) -> None:
        """Rebuild the sprites from the latest snapshot and lay them out in a row."""
        self.cards = [CardSprite(info) for info in infos]
        self.arrange(center_x, y)

    def arrange(self, center_x: float, y: float, spacing: Optional[float] = None) -> None:
        """Arrange cards in a row centered on ``center_x``."""
        if spacing is None:
            spacing = DIMENSIONS.HAND_SPACING

        total_width = (len(self.cards) - 1) * spacing
        start_x = center_x - total_width / 2
        for i, card in enumerate(self.cards):
            card.x = start_x + i * spacing
            card.y = y

    def clear(self) -> None:
        """Remove all cards."""
        self.cards.clear()

    def draw(self, surface: pygame.Surface) -> None:
        """Draw all cards left to right."""
        for card in self.cards:
            card.draw(surface)
