"""Result types returned by every engine operation."""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Union

from core.game.events import GameEvent
from core.game.state import GameState


class RejectionReason(Enum):
    """Why an operation left the state unchanged."""

    INVALID_PHASE = auto()
    INSUFFICIENT_FUNDS = auto()
    NON_POSITIVE_AMOUNT = auto()
    INVALID_AMOUNT = auto()
    NO_BET_PLACED = auto()


@dataclass(frozen=True)
class Applied:
    """The operation took effect and produced ``state``."""

    state: GameState
    events: tuple[GameEvent, ...] = field(default_factory=tuple)

    @property
    def applied(self) -> bool:
        return True

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class Rejected:
    """The operation was refused; ``state`` is the unchanged input."""

    state: GameState
    reason: RejectionReason
    message: str = ""

    @property
    def applied(self) -> bool:
        return False

    def __bool__(self) -> bool:
        return False


ActionResult = Union[Applied, Rejected]


class ActionRejectedError(Exception):
    """Raised instead of returning ``Rejected`` when a game runs in strict mode."""

    def __init__(self, action: str, reason: RejectionReason, message: str = "") -> None:
        self.action = action
        self.reason = reason
        self.message = message
        super().__init__(f"{action} rejected ({reason.name}): {message}")
