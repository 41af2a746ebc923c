"""Events describing what happened at the table."""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable, Iterable


class EventType(Enum):
    """Types of game events."""

    # Round flow
    ROUND_STARTED = auto()
    ROUND_ENDED = auto()
    DECK_SHUFFLED = auto()

    # Chips
    BET_PLACED = auto()
    BET_RETURNED = auto()

    CARD_DEALT = auto()

    # Player turn
    PLAYER_HIT = auto()
    PLAYER_STAND = auto()
    PLAYER_BUSTS = auto()

    # Dealer turn
    DEALER_REVEALS = auto()
    DEALER_HITS = auto()
    DEALER_STANDS = auto()
    DEALER_BUSTS = auto()

    # Settlement
    PLAYER_WINS = auto()
    PLAYER_LOSES = auto()
    PUSH = auto()

    # Refused actions
    INVALID_ACTION = auto()
    INSUFFICIENT_FUNDS = auto()


@dataclass(frozen=True)
class GameEvent:
    """
    Immutable record of one thing that happened.

    The rules return these alongside each new state; shells only ever read
    them, so ``data`` holds plain values (card text, totals, chip amounts).
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.event_type.name}: {self.data}"


def event(event_type: EventType, **data: Any) -> GameEvent:
    """Build an event without emitting it."""
    return GameEvent(event_type=event_type, data=data)


EventHandler = Callable[[GameEvent], None]


class EventEmitter:
    """
    Fans events out to subscribers.

    Handlers subscribe to one ``EventType`` or, with ``None``, to everything.
    Type-specific handlers run before catch-all ones. The most recent
    ``max_history`` events are kept for inspection.
    """

    def __init__(self, max_history: int = 500) -> None:
        self._handlers: dict[EventType | None, list[EventHandler]] = {}
        self._history: deque[GameEvent] = deque(maxlen=max_history)

    def subscribe(self, handler: EventHandler, event_type: EventType | None = None) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, handler: EventHandler, event_type: EventType | None = None) -> None:
        """Remove a handler; unknown handlers are ignored."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, game_event: GameEvent) -> None:
        self._history.append(game_event)
        for handler in self._handlers.get(game_event.event_type, []):
            handler(game_event)
        for handler in self._handlers.get(None, []):
            handler(game_event)

    def emit_all(self, game_events: Iterable[GameEvent]) -> None:
        """Emit a batch of events in order, as returned by one rule."""
        for game_event in game_events:
            self.emit(game_event)

    def emit_new(self, event_type: EventType, **data: Any) -> GameEvent:
        """Build, emit and return a new event."""
        new_event = event(event_type, **data)
        self.emit(new_event)
        return new_event

    @property
    def history(self) -> list[GameEvent]:
        """Copy of the retained events, oldest first."""
        return list(self._history)

    def clear_history(self) -> None:
        self._history.clear()
