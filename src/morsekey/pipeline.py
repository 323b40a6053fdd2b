"""Wiring of the classifier, state machine, decoder and pause scheduler."""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple

from .config import MorseKeyConfig
from .decoder import SequenceDecoder, Symbol
from .events import EventBus, InvalidPress
from .keystate import BOUNCE_MS, KeyEvent, KeyPressStateMachine, PressResult, PressState
from .scheduler import PauseScheduler, monotonic_ms
from .store import JsonMappingStore, MappingStore, MemoryMappingStore
from .timing import PauseClass, PressClass, TimingClassifier, calculate_wpm

logger = logging.getLogger(__name__)


@dataclass
class SessionStats:
    """Running totals for the words completed in a session."""

    words: int = 0
    characters: int = 0
    keying_ms: float = 0.0
    word_start: Optional[float] = None

    @property
    def effective_wpm(self) -> float:
        """Speed over completed words, five characters per word."""
        return calculate_wpm(self.characters, self.keying_ms / 60000.0)

    def element_keyed(self, timestamp: float) -> None:
        if self.word_start is None:
            self.word_start = timestamp

    def word_completed(self, word: str, timestamp: float) -> None:
        self.words += 1
        self.characters += len(word)
        if self.word_start is not None:
            self.keying_ms += max(0.0, timestamp - self.word_start)
        self.word_start = None

    def reset(self) -> None:
        self.words = 0
        self.characters = 0
        self.keying_ms = 0.0
        self.word_start = None


class DecodingPipeline:
    """
    Decodes key events for one designated key into characters and words.

    Input events and the scheduler's timer callbacks all run under one
    re-entrant lock, so every piece of decoding state has a single writer at
    a time. Subscribe to ``bus`` to receive the decoded output.

    Event timestamps must come from the same clock as ``clock``, since the
    scheduler measures idle time from them.
    """

    def __init__(
        self,
        config: Optional[MorseKeyConfig] = None,
        store: Optional[MappingStore] = None,
        bus: Optional[EventBus] = None,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
        clock: Callable[[], float] = monotonic_ms,
    ):
        """
        Initialize pipeline.

        Args:
            config: Configuration object, uses defaults if None
            store: Custom mapping store, a JSON file at config.custom_map_path if None
            bus: Event bus for output events, a new one if None
            timer_factory: Timer constructor for the pause scheduler
            clock: Millisecond clock used when events carry no timestamp
        """
        self.config = config or MorseKeyConfig()
        self.bus = bus or EventBus()
        self.clock = clock
        self._lock = threading.RLock()

        self.classifier = TimingClassifier(self.config.wpm)
        self.state_machine = KeyPressStateMachine(
            self.classifier,
            bus=self.bus,
            designated_key=self.config.key,
            bounce_ms=self.config.bounce_ms,
            settle_ms=self.config.settle_ms,
        )
        self.decoder = SequenceDecoder(
            bus=self.bus,
            store=store or JsonMappingStore(self.config.custom_map_path),
            custom_lookup_enabled=self.config.custom_lookup_enabled,
            represent_unknown_enabled=self.config.represent_unknown_enabled,
        )
        self.scheduler = PauseScheduler(
            self.classifier,
            on_letter=self._letter_gap,
            on_word=self._word_gap,
            lock=self._lock,
            timer_factory=timer_factory,
            clock=clock,
        )
        self.stats = SessionStats()

        self._last_action: Optional[float] = None
        self._interrupted = False

    def process_event(self, event: KeyEvent) -> PressResult:
        """
        Feed one key transition through the pipeline.

        Args:
            event: Key event with a millisecond timestamp

        Returns:
            The press classification, if the event completed a press
        """
        with self._lock:
            if event.is_pressed:
                if self.state_machine.press(event.key, event.timestamp):
                    # a held key is not silence
                    self._interrupted = self.scheduler.pending
                    self.scheduler.cancel()
                return None

            pressing = (
                event.key == self.state_machine.designated_key
                and self.state_machine.state is PressState.PRESSING
            )
            result = self.state_machine.release(event.key, event.timestamp)
            interrupted = pressing and self._interrupted
            if pressing:
                self._interrupted = False

            if isinstance(result, Symbol):
                self.stats.element_keyed(event.timestamp)
                self.decoder.add_element(result)
                self._arm(event.timestamp)
            elif isinstance(result, InvalidPress):
                self._arm(event.timestamp)
            elif interrupted:
                # bounce: resume the idle period the press interrupted
                self._arm(self._last_action)

            return result

    def key_down(self, key: str, timestamp: Optional[float] = None) -> None:
        """Feed a press, stamped with the pipeline clock if no timestamp is given."""
        self.process_event(KeyEvent(key, True, self.clock() if timestamp is None else timestamp))

    def key_up(self, key: str, timestamp: Optional[float] = None) -> PressResult:
        """Feed a release, stamped with the pipeline clock if no timestamp is given."""
        return self.process_event(
            KeyEvent(key, False, self.clock() if timestamp is None else timestamp)
        )

    def set_wpm(self, wpm: int) -> None:
        """Change speed; the next classification uses the new thresholds."""
        with self._lock:
            self.classifier.set_speed(wpm)
            self.config.wpm = wpm

    def set_designated_key(self, key: str) -> None:
        with self._lock:
            rebinding = key != self.state_machine.designated_key
            self.state_machine.set_designated_key(key)
            if rebinding and self._interrupted:
                self._interrupted = False
                self._arm(self._last_action)
            self.config.key = key

    def set_custom_lookup_enabled(self, enabled: bool) -> None:
        with self._lock:
            self.decoder.set_custom_lookup_enabled(enabled)
            self.config.custom_lookup_enabled = bool(enabled)

    def set_represent_unknown_enabled(self, enabled: bool) -> None:
        with self._lock:
            self.decoder.set_represent_unknown_enabled(enabled)
            self.config.represent_unknown_enabled = bool(enabled)

    def add_custom_mapping(self, character: str, sequence: str) -> None:
        with self._lock:
            self.decoder.add_custom_mapping(character, sequence)

    def remove_custom_mapping(self, sequence: str) -> bool:
        with self._lock:
            return self.decoder.remove_custom_mapping(sequence)

    def flush(self) -> None:
        """Close any open letter and word immediately, cancelling pending gaps."""
        with self._lock:
            self.scheduler.cancel()
            self._interrupted = False
            if self.decoder.current_sequence:
                self.decoder.end_letter()
            self._word_gap()

    def clear(self) -> None:
        """Discard the open letter and word and reset session totals."""
        with self._lock:
            self.scheduler.cancel()
            self._interrupted = False
            self.decoder.clear()
            self.stats.reset()

    def close(self) -> None:
        """Stop the scheduler; no further gap callbacks will fire."""
        self.scheduler.close()

    def _arm(self, timestamp: float) -> None:
        self._last_action = timestamp
        self.scheduler.arm(timestamp)

    def _letter_gap(self) -> None:
        # an invalid press alone leaves nothing to close
        if self.decoder.current_sequence:
            self.decoder.end_letter()

    def _word_gap(self) -> None:
        word = self.decoder.end_word()
        if word is not None:
            self.stats.word_completed(word, self.clock())
            logger.debug(f"Word {word!r}, {self.stats.effective_wpm:.1f} WPM effective")

    def __enter__(self) -> "DecodingPipeline":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def decode_timings(
    timings: Iterable[Tuple[float, float]],
    classifier: Optional[TimingClassifier] = None,
    decoder: Optional[SequenceDecoder] = None,
) -> str:
    """
    Decode recorded mark/space durations without timers.

    Each pair is a press duration followed by the silence after it, both in
    milliseconds. Silences are classified with the same thresholds the live
    scheduler uses; the text is closed at the end of the recording.

    Args:
        timings: (mark_ms, space_ms) pairs in keying order
        classifier: Timing classifier, 10 WPM if None
        decoder: Sequence decoder, one with an in-memory store if None

    Returns:
        Decoded words separated by single spaces
    """
    classifier = classifier or TimingClassifier()
    decoder = decoder or SequenceDecoder(store=MemoryMappingStore())
    words: List[str] = []

    def close_word() -> None:
        word = decoder.end_word()
        if word is not None:
            words.append(word)

    for mark_ms, space_ms in timings:
        press = classifier.classify_press(mark_ms) if mark_ms >= BOUNCE_MS else None
        if press is PressClass.DOT:
            decoder.add_element(Symbol.DOT)
        elif press is PressClass.DASH:
            decoder.add_element(Symbol.DASH)

        pause = classifier.classify_pause(space_ms)
        if pause in (PauseClass.LETTER, PauseClass.WORD) and decoder.current_sequence:
            decoder.end_letter()
        if pause is PauseClass.WORD:
            close_word()

    if decoder.current_sequence:
        decoder.end_letter()
    close_word()
    return " ".join(words)
