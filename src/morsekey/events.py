"""Decoding events and the listener registry that delivers them."""

import threading
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, DefaultDict, List, Type, TypeVar, TYPE_CHECKING

if TYPE_CHECKING:
    from .decoder import Symbol


@dataclass(frozen=True)
class PressClassified:
    """A press was recognised as a dot or a dash."""

    symbol: "Symbol"
    duration_ms: float


@dataclass(frozen=True)
class InvalidPress:
    """A press fell outside both the dot and the dash range."""

    duration_ms: float


@dataclass(frozen=True)
class CharacterDecoded:
    """
    A letter was closed and produced a character.

    ``known`` is False when the character is the unknown-sequence placeholder.
    """

    character: str
    sequence: str
    known: bool = True


@dataclass(frozen=True)
class LetterBoundary:
    """The current letter was closed, whether or not it decoded."""


@dataclass(frozen=True)
class WordCompleted:
    """A non-empty word was closed."""

    word: str


E = TypeVar("E")
Listener = Callable[[E], None]


class EventBus:
    """
    Typed publish/subscribe channel.

    Any number of listeners can subscribe to each event type. Listeners run
    synchronously in subscription order on the publishing thread, and their
    exceptions propagate to the publisher.
    """

    def __init__(self) -> None:
        self._listeners: DefaultDict[type, List[Callable]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event_type: Type[E], listener: Listener) -> Callable[[], None]:
        """
        Register a listener for one event type.

        Args:
            event_type: Event class to listen for
            listener: Callable receiving the event

        Returns:
            Callable that removes this subscription
        """
        with self._lock:
            self._listeners[event_type].append(listener)

        def unsubscribe() -> None:
            self.unsubscribe(event_type, listener)

        return unsubscribe

    def unsubscribe(self, event_type: type, listener: Callable) -> None:
        """Remove a listener; unknown listeners are ignored."""
        with self._lock:
            listeners = self._listeners.get(event_type, [])
            if listener in listeners:
                listeners.remove(listener)

    def publish(self, event: object) -> None:
        """Deliver an event to every listener of its exact type."""
        with self._lock:
            listeners = list(self._listeners.get(type(event), ()))
        for listener in listeners:
            listener(event)

    def listener_count(self, event_type: type) -> int:
        """Number of listeners currently subscribed to an event type."""
        with self._lock:
            return len(self._listeners.get(event_type, ()))
