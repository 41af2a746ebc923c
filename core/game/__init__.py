"""Game engine and state management."""

from core.game.events import GameEvent, EventType, EventEmitter
from core.game.state import GameState, Outcome, RoundState
from core.game.results import (
    ActionRejectedError,
    ActionResult,
    Applied,
    Rejected,
    RejectionReason,
)
from core.game.engine import BlackjackGame
from core.game.view import TableView, build_table_view

__all__ = [
    "GameEvent",
    "EventType",
    "EventEmitter",
    "GameState",
    "Outcome",
    "RoundState",
    "ActionRejectedError",
    "ActionResult",
    "Applied",
    "Rejected",
    "RejectionReason",
    "BlackjackGame",
    "TableView",
    "build_table_view",
]
