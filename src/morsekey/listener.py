"""Keyboard listener producing key events for the decoding pipeline."""

import logging
from queue import Empty, Queue
from typing import Callable, Optional, Set, Union

from pynput import keyboard

from .keystate import KeyEvent
from .scheduler import monotonic_ms

logger = logging.getLogger(__name__)


def key_name(key: Union[keyboard.Key, keyboard.KeyCode, None]) -> Optional[str]:
    """
    Name a pynput key the way the configuration does.

    Special keys use their pynput name ("space", "ctrl_l"), printable keys
    their character.

    Returns:
        Key name, or None for keys without a usable name
    """
    if isinstance(key, keyboard.Key):
        return key.name
    if isinstance(key, keyboard.KeyCode) and key.char:
        return key.char
    return None


def is_valid_key_name(name: str) -> bool:
    """Check whether a configured key name can ever be produced by key_name."""
    return len(name) == 1 or name in keyboard.Key.__members__


class KeyListener:
    """
    Global keyboard listener that queues press and release events.

    Auto-repeat presses of a key that is already down are dropped, so each
    physical press yields one down and one up event.
    """

    def __init__(self, clock: Callable[[], float] = monotonic_ms):
        """
        Initialize listener.

        Args:
            clock: Millisecond clock used to stamp events
        """
        self.clock = clock
        self._event_queue: Queue[KeyEvent] = Queue()
        self._listener: Optional[keyboard.Listener] = None
        self._running = False
        self._pressed: Set[str] = set()

    def start(self) -> None:
        """Start listening for keyboard input."""
        if self._running:
            return

        self._running = True
        self._listener = keyboard.Listener(
            on_press=self._on_key_press, on_release=self._on_key_release
        )
        self._listener.start()

    def stop(self) -> None:
        """Stop listening for keyboard input."""
        if not self._running:
            return

        self._running = False
        if self._listener:
            self._listener.stop()
            self._listener = None
        self._pressed.clear()

    def _on_key_press(self, key) -> None:
        if not self._running:
            return

        name = key_name(key)
        if name is None or name in self._pressed:
            return

        self._pressed.add(name)
        self._event_queue.put(KeyEvent(name, True, self.clock()))

    def _on_key_release(self, key) -> None:
        if not self._running:
            return

        name = key_name(key)
        if name is None or name not in self._pressed:
            return

        self._pressed.discard(name)
        self._event_queue.put(KeyEvent(name, False, self.clock()))

    def get_event(self, timeout: Optional[float] = None) -> Optional[KeyEvent]:
        """
        Get the next key event from the queue.

        Args:
            timeout: Maximum time to wait in seconds, None for blocking

        Returns:
            KeyEvent or None if timeout
        """
        try:
            return self._event_queue.get(timeout=timeout)
        except Empty:
            return None

    def is_running(self) -> bool:
        """Check if the listener is running."""
        return self._running

    def __enter__(self) -> "KeyListener":
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.stop()
