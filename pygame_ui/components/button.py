"""Interactive button component with hover and press states."""

from enum import Enum, auto
from typing import Callable, Optional, Tuple

import pygame

from pygame_ui.config import COLORS, DIMENSIONS


class ButtonState(Enum):
    """Visual state of a button."""

    NORMAL = auto()
    HOVERED = auto()
    PRESSED = auto()
    DISABLED = auto()


class Button:
    """A clickable button with hover and press feedback."""

    def __init__(
        self,
        x: float,
        y: float,
        width: float = DIMENSIONS.BUTTON_WIDTH,
        height: float = DIMENSIONS.BUTTON_HEIGHT,
        text: str = "Button",
        font_size: int = 28,
        on_click: Optional[Callable[[], None]] = None,
        bg_color: Tuple[int, int, int] = None,
        hover_color: Tuple[int, int, int] = None,
        text_color: Tuple[int, int, int] = COLORS.TEXT_WHITE,
        enabled: bool = True,
    ):
        """Initialize a button.

        Args:
            x: Center x position
            y: Center y position
            width: Button width
            height: Button height
            text: Button text
            font_size: Text font size
            on_click: Callback function when clicked
            bg_color: Normal background color
            hover_color: Hovered background color
            text_color: Text color
            enabled: Whether button is interactive
        """
        self.text = text
        self.font_size = font_size
        self.on_click = on_click
        self.enabled = enabled

        # Colors
        self.bg_color = bg_color or COLORS.BUTTON_DEFAULT
        self.hover_color = hover_color or COLORS.BUTTON_HOVER
        self.pressed_color = COLORS.BUTTON_PRESSED
        self.disabled_color = COLORS.BUTTON_DISABLED
        self.text_color = text_color

        self.width = width
        self.height = height
        self.center_x = x
        self.center_y = y

        self.state = ButtonState.NORMAL if enabled else ButtonState.DISABLED
        self._is_pressed = False
        self._font: Optional[pygame.font.Font] = None

    @property
    def font(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.Font(None, self.font_size)
        return self._font

    @property
    def rect(self) -> pygame.Rect:
        """Get the button's rectangle."""
        return pygame.Rect(
            int(self.center_x - self.width / 2),
            int(self.center_y - self.height / 2),
            int(self.width),
            int(self.height),
        )

    def set_enabled(self, enabled: bool) -> None:
        """Enable or disable the button.

        Args:
            enabled: Whether button should be enabled
        """
        if enabled == self.enabled:
            return
        self.enabled = enabled
        self._is_pressed = False
        self.state = ButtonState.NORMAL if enabled else ButtonState.DISABLED

    def contains_point(self, point: Tuple[float, float]) -> bool:
        """Check if a point is inside the button."""
        return self.rect.collidepoint(point)

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Handle a pygame event.

        Args:
            event: The pygame event

        Returns:
            True if event was consumed (clicked)
        """
        if not self.enabled:
            return False

        if event.type == pygame.MOUSEMOTION:
            if not self._is_pressed:
                hovered = self.contains_point(event.pos)
                self.state = ButtonState.HOVERED if hovered else ButtonState.NORMAL

        elif event.type == pygame.MOUSEBUTTONDOWN:
            if event.button == 1 and self.contains_point(event.pos):
                self.state = ButtonState.PRESSED
                self._is_pressed = True
                return False  # Don't consume yet, wait for release

        elif event.type == pygame.MOUSEBUTTONUP:
            if event.button == 1 and self._is_pressed:
                self._is_pressed = False
                if self.contains_point(event.pos):
                    self.state = ButtonState.HOVERED
                    if self.on_click:
                        self.on_click()
                    return True
                self.state = ButtonState.NORMAL

        return False

    def draw(self, surface: pygame.Surface) -> None:
        """Draw the button.

        Args:
            surface: Pygame surface to draw on
        """
        if not self.enabled:
            bg_color = self.disabled_color
            text_color = COLORS.TEXT_MUTED
        elif self.state == ButtonState.PRESSED:
            bg_color = self.pressed_color
            text_color = self.text_color
        elif self.state == ButtonState.HOVERED:
            bg_color = self.hover_color
            text_color = self.text_color
        else:
            bg_color = self.bg_color
            text_color = self.text_color

        rect = self.rect
        if self.state == ButtonState.PRESSED:
            rect = rect.move(0, 2)
        pygame.draw.rect(surface, bg_color, rect, border_radius=DIMENSIONS.BUTTON_CORNER_RADIUS)

        text_surface = self.font.render(self.text, True, text_color)
        surface.blit(text_surface, text_surface.get_rect(center=rect.center))


class ActionButton(Button):
    """Specialized button for table actions (Hit, Stand, Deal, ...)."""

    def __init__(
        self,
        x: float,
        y: float,
        text: str,
        action: str,
        on_click: Optional[Callable[[], None]] = None,
        hotkey: Optional[str] = None,
        **kwargs,
    ):
        """Initialize an action button.

        Args:
            x: X position
            y: Y position
            text: Button text
            action: Action identifier
            on_click: Click callback
            hotkey: Keyboard shortcut hint
        """
        super().__init__(x=x, y=y, text=text, on_click=on_click, **kwargs)
        self.action = action
        self.hotkey = hotkey

    def draw(self, surface: pygame.Surface) -> None:
        """Draw the action button with optional hotkey hint."""
        super().draw(surface)

        if self.hotkey and self.enabled:
            hint_font = pygame.font.Font(None, 18)
            hint_text = hint_font.render(f"[{self.hotkey}]", True, COLORS.TEXT_MUTED)
            hint_rect = hint_text.get_rect(
                centerx=int(self.center_x),
                top=int(self.center_y + self.height / 2 + 4),
            )
            surface.blit(hint_text, hint_rect)
