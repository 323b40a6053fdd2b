"""Real-time decoding of keyboard input."""

import threading
from typing import Callable, Optional

from .config import MorseKeyConfig
from .events import CharacterDecoded, InvalidPress, PressClassified, WordCompleted
from .listener import KeyListener
from .pipeline import DecodingPipeline
from .store import MappingStore


class DecodedStream:
    """
    Real-time stream of decoded characters and words from the keyboard.

    A background thread moves events from the keyboard listener into the
    decoding pipeline one at a time. Callbacks are subscribed to the
    pipeline's event bus; more listeners can be added through ``bus``.
    """

    def __init__(
        self,
        config: Optional[MorseKeyConfig] = None,
        store: Optional[MappingStore] = None,
        char_callback: Optional[Callable[[CharacterDecoded], None]] = None,
        word_callback: Optional[Callable[[WordCompleted], None]] = None,
        element_callback: Optional[Callable[[PressClassified], None]] = None,
        invalid_callback: Optional[Callable[[InvalidPress], None]] = None,
    ):
        """
        Initialize decoded stream.

        Args:
            config: Configuration object, uses defaults if None
            store: Custom mapping store, see DecodingPipeline
            char_callback: Optional callback for decoded characters
            word_callback: Optional callback for completed words
            element_callback: Optional callback for dots and dashes
            invalid_callback: Optional callback for out-of-range presses
        """
        self.config = config or MorseKeyConfig()
        self.pipeline = DecodingPipeline(self.config, store=store)
        self.bus = self.pipeline.bus
        self.listener = KeyListener(clock=self.pipeline.clock)
        self._running = False
        self._thread: Optional[threading.Thread] = None

        for event_type, callback in (
            (CharacterDecoded, char_callback),
            (WordCompleted, word_callback),
            (PressClassified, element_callback),
            (InvalidPress, invalid_callback),
        ):
            if callback is not None:
                self.bus.subscribe(event_type, callback)

    def start(self) -> None:
        """Start the decoded stream."""
        if self._running:
            return

        self._running = True
        self.listener.start()
        self._thread = threading.Thread(target=self._process_loop, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop the decoded stream and close whatever was being keyed."""
        if not self._running:
            return

        self._running = False
        self.listener.stop()
        if self._thread:
            self._thread.join(timeout=1.0)
            self._thread = None
        self.pipeline.flush()

    def _process_loop(self) -> None:
        """Main processing loop."""
        while self._running:
            event = self.listener.get_event(timeout=0.05)
            if event is not None:
                self.pipeline.process_event(event)

    def is_running(self) -> bool:
        """Check if the stream is running."""
        return self._running

    def __enter__(self) -> "DecodedStream":
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.stop()
