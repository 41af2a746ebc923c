"""Blackjack table scene - integrated with the core engine."""

import logging
from typing import List, Optional

import pygame

from core.game import Outcome, RoundState
from pygame_ui.config import COLORS, DIMENSIONS
from pygame_ui.core.engine_adapter import EngineAdapter, GameSnapshot
from pygame_ui.components.button import ActionButton, Button
from pygame_ui.components.card import CardGroup

logger = logging.getLogger(__name__)

NOTICE_DURATION = 1.5


def result_color(outcome: Optional[Outcome]) -> tuple:
    """Banner color for a settled round; a push is neither a win nor a loss."""
    if outcome is None:
        return COLORS.TEXT_WHITE
    if outcome.player_won:
        return COLORS.RESULT_WIN
    if outcome == Outcome.PUSH:
        return COLORS.RESULT_PUSH
    return COLORS.RESULT_LOSE


class GameScene:
    """The table: betting chips, deal, hit, stand and the round result."""

    def __init__(self, engine: Optional[EngineAdapter] = None):
        self.engine = engine or EngineAdapter()

        self.dealer_hand = CardGroup()
        self.player_hand = CardGroup()

        self.bet_buttons: List[Button] = []
        self.buttons: List[ActionButton] = []

        # Short-lived notice for refused actions
        self._notice: str = ""
        self._notice_time = 0.0

        self.engine.set_callbacks(
            on_card_dealt=self._on_card_dealt,
            on_round_result=self._on_round_result,
            on_invalid_action=self._on_invalid_action,
        )
        self._setup_buttons()
        self._sync_hands()

    def _setup_buttons(self) -> None:
        """Set up bet and action buttons."""
        bet_y = DIMENSIONS.CENTER_Y + 10
        denominations = self.engine.bet_denominations
        spacing = 130
        start_x = DIMENSIONS.CENTER_X - spacing * (len(denominations) - 1) / 2
        self.bet_buttons = [
            Button(
                x=start_x + i * spacing,
                y=bet_y,
                text=f"BET {amount}",
                on_click=lambda amount=amount: self._on_bet(amount),
                bg_color=(100, 80, 40),
                hover_color=(130, 100, 60),
            )
            for i, amount in enumerate(denominations)
        ]

        button_y = DIMENSIONS.PLAYER_HAND_Y + 150
        button_spacing = 140
        self.buttons = [
            ActionButton(
                x=DIMENSIONS.CENTER_X - button_spacing * 1.5,
                y=button_y,
                text="DEAL",
                action="deal",
                on_click=self._on_deal,
                hotkey="SPACE",
                bg_color=(60, 100, 60),
                hover_color=(80, 130, 80),
            ),
            ActionButton(
                x=DIMENSIONS.CENTER_X - button_spacing * 0.5,
                y=button_y,
                text="HIT",
                action="hit",
                on_click=self._on_hit,
                hotkey="H",
                bg_color=(60, 100, 60),
                hover_color=(80, 130, 80),
            ),
            ActionButton(
                x=DIMENSIONS.CENTER_X + button_spacing * 0.5,
                y=button_y,
                text="STAND",
                action="stand",
                on_click=self._on_stand,
                hotkey="S",
                bg_color=(100, 60, 60),
                hover_color=(130, 80, 80),
            ),
            ActionButton(
                x=DIMENSIONS.CENTER_X + button_spacing * 1.5,
                y=button_y,
                text="NEW ROUND",
                action="new_round",
                on_click=self._on_new_round,
                hotkey="N",
                bg_color=(60, 60, 100),
                hover_color=(80, 80, 130),
                width=150,
            ),
        ]

    def _update_button_states(self) -> None:
        """Enable only the controls the current phase allows."""
        snapshot = self.engine.get_snapshot()

        for button, amount in zip(self.bet_buttons, self.engine.bet_denominations):
            button.set_enabled(self.engine.can_bet(amount))

        enabled = {
            "deal": snapshot.can_deal,
            "hit": snapshot.can_hit,
            "stand": snapshot.can_stand,
            "new_round": snapshot.state == RoundState.GAME_OVER,
        }
        for button in self.buttons:
            button.set_enabled(enabled[button.action])

    def _sync_hands(self) -> None:
        """Rebuild card sprites from the engine snapshot."""
        snapshot = self.engine.get_snapshot()
        self.dealer_hand.sync(snapshot.dealer_hand, DIMENSIONS.CENTER_X, DIMENSIONS.DEALER_HAND_Y)
        self.player_hand.sync(snapshot.player_hand, DIMENSIONS.CENTER_X, DIMENSIONS.PLAYER_HAND_Y)
        self._update_button_states()

    # Engine callbacks

    def _on_card_dealt(self, hand: str, card: str) -> None:
        logger.debug("Dealt %s to %s", card, hand)

    def _on_round_result(self, message: str, payout: int) -> None:
        logger.info("%s (payout %d)", message, payout)

    def _on_invalid_action(self, message: str) -> None:
        self._notice = message
        self._notice_time = NOTICE_DURATION

    # Player actions

    def _on_bet(self, amount: int) -> None:
        self.engine.place_bet(amount)
        self._sync_hands()

    def _on_deal(self) -> None:
        self.engine.deal()
        self._sync_hands()

    def _on_hit(self) -> None:
        self.engine.hit()
        self._sync_hands()

    def _on_stand(self) -> None:
        self.engine.stand()
        self._sync_hands()

    def _on_new_round(self) -> None:
        self.engine.start_new_round()
        self._sync_hands()

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Handle input events."""
        for button in self.bet_buttons + self.buttons:
            if button.handle_event(event):
                return True

        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_h:
                self._on_hit()
                return True
            elif event.key == pygame.K_s:
                self._on_stand()
                return True
            elif event.key in (pygame.K_SPACE, pygame.K_RETURN):
                self._on_deal()
                return True
            elif event.key == pygame.K_n:
                self._on_new_round()
                return True
            elif event.key in (pygame.K_1, pygame.K_2, pygame.K_3):
                index = event.key - pygame.K_1
                if index < len(self.engine.bet_denominations):
                    self._on_bet(self.engine.bet_denominations[index])
                return True

        return False

    def update(self, dt: float) -> None:
        """Update timers."""
        if self._notice_time > 0:
            self._notice_time = max(0.0, self._notice_time - dt)

    def _draw_text(
        self,
        surface: pygame.Surface,
        text: str,
        center: tuple,
        size: int = 36,
        color: tuple = COLORS.TEXT_WHITE,
    ) -> None:
        font = pygame.font.Font(None, size)
        rendered = font.render(text, True, color)
        surface.blit(rendered, rendered.get_rect(center=center))

    def _draw_hand_labels(self, surface: pygame.Surface, snapshot: GameSnapshot) -> None:
        """Draw hand titles and totals; the dealer total stays hidden with the hole card."""
        self._draw_text(
            surface, "DEALER", (DIMENSIONS.CENTER_X, DIMENSIONS.DEALER_HAND_Y - 95), color=COLORS.GOLD
        )
        if snapshot.dealer_hand:
            dealer_total = "?" if snapshot.dealer_hand_value is None else str(snapshot.dealer_hand_value)
            self._draw_text(
                surface, f"Total: {dealer_total}", (DIMENSIONS.CENTER_X, DIMENSIONS.DEALER_HAND_Y + 85), size=28
            )

        self._draw_text(
            surface, "PLAYER", (DIMENSIONS.CENTER_X, DIMENSIONS.PLAYER_HAND_Y - 95), color=COLORS.GOLD
        )
        if snapshot.player_hand:
            self._draw_text(
                surface,
                f"Total: {snapshot.player_hand_value}",
                (DIMENSIONS.CENTER_X, DIMENSIONS.PLAYER_HAND_Y + 85),
                size=28,
            )

    def draw(self, surface: pygame.Surface) -> None:
        """Draw all table elements."""
        snapshot = self.engine.get_snapshot()

        surface.fill(COLORS.FELT_GREEN)
        for x in range(0, DIMENSIONS.SCREEN_WIDTH, 40):
            pygame.draw.line(surface, COLORS.FELT_DARK, (x, 0), (x, DIMENSIONS.SCREEN_HEIGHT), 1)
        for y in range(0, DIMENSIONS.SCREEN_HEIGHT, 40):
            pygame.draw.line(surface, COLORS.FELT_DARK, (0, y), (DIMENSIONS.SCREEN_WIDTH, y), 1)

        self._draw_text(surface, "BLACKJACK", (DIMENSIONS.CENTER_X, 30), size=48, color=COLORS.GOLD)
        self._draw_text(surface, f"Chips: {snapshot.chips}", (120, 40))
        self._draw_text(surface, f"Bet: {snapshot.current_bet}", (120, 80))
        self._draw_text(
            surface, str(snapshot.state), (DIMENSIONS.SCREEN_WIDTH - 120, 40), size=24, color=COLORS.TEXT_MUTED
        )

        if snapshot.state == RoundState.BETTING:
            for button in self.bet_buttons:
                button.draw(surface)
        else:
            self.dealer_hand.draw(surface)
            self.player_hand.draw(surface)
            self._draw_hand_labels(surface, snapshot)

        if snapshot.state == RoundState.GAME_OVER and snapshot.result_message:
            color = result_color(snapshot.outcome)
            self._draw_text(surface, snapshot.result_message, (DIMENSIONS.CENTER_X, DIMENSIONS.CENTER_Y + 10), size=44, color=color)

        for button in self.buttons:
            button.draw(surface)

        if self._notice_time > 0:
            self._draw_text(
                surface, self._notice, (DIMENSIONS.CENTER_X, DIMENSIONS.SCREEN_HEIGHT - 20), size=24, color=COLORS.TEXT_MUTED
            )
