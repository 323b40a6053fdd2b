"""Idle-time scheduler that closes letters and words after silence."""

import logging
import threading
import time
from typing import Callable, Optional

from .timing import TimingClassifier, TimingProfile

logger = logging.getLogger(__name__)


def monotonic_ms() -> float:
    """Current monotonic time in milliseconds."""
    return time.monotonic() * 1000.0


class PauseScheduler:
    """
    Turns one continuous silence into a letter boundary and then a word boundary.

    Each call to ``arm`` starts a new idle period measured from the action's
    timestamp: the letter callback fires at ``letter_separator_min`` and the
    word callback at ``word_separator_min`` from that same instant. Arming
    again, or cancelling, drops both stages. Every idle period carries a
    generation number, and a timer whose generation is stale does nothing
    even if its thread was already running when it was cancelled.
    """

    def __init__(
        self,
        classifier: TimingClassifier,
        on_letter: Callable[[], None],
        on_word: Callable[[], None],
        lock: Optional[threading.RLock] = None,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
        clock: Callable[[], float] = monotonic_ms,
    ):
        """
        Initialize scheduler.

        Args:
            classifier: Source of the separator thresholds
            on_letter: Called when a letter gap elapses
            on_word: Called when a word gap elapses
            lock: Lock shared with the code feeding actions, so callbacks and
                input never run concurrently
            timer_factory: Creates timers with the threading.Timer signature
            clock: Returns the current time in milliseconds
        """
        self.classifier = classifier
        self.on_letter = on_letter
        self.on_word = on_word
        self._lock = lock or threading.RLock()
        self._timer_factory = timer_factory
        self._clock = clock

        self._generation = 0
        self._closed = False
        self._letter_timer: Optional[threading.Timer] = None
        self._word_timer: Optional[threading.Timer] = None
        self._action_time: Optional[float] = None
        self._profile: Optional[TimingProfile] = None

    @property
    def pending_stage(self) -> Optional[str]:
        """Name of the armed stage ("letter" or "word"), or None when idle."""
        with self._lock:
            if self._letter_timer is not None:
                return "letter"
            if self._word_timer is not None:
                return "word"
            return None

    @property
    def pending(self) -> bool:
        return self.pending_stage is not None

    def arm(self, action_time: Optional[float] = None) -> None:
        """
        Start a new idle period, replacing any pending one.

        Args:
            action_time: Timestamp of the classified action in milliseconds,
                the current clock reading if None
        """
        with self._lock:
            if self._closed:
                return

            self._cancel_timers()
            self._generation += 1
            self._action_time = self._clock() if action_time is None else action_time
            self._profile = self.classifier.get_thresholds()

            deadline = self._action_time + self._profile.letter_separator_min
            self._letter_timer = self._start(deadline, self._letter_expired)

    def cancel(self) -> None:
        """Drop the current idle period, releasing both timers."""
        with self._lock:
            self._cancel_timers()
            self._generation += 1

    def close(self) -> None:
        """Cancel and refuse any further arming."""
        with self._lock:
            self.cancel()
            self._closed = True

    def _start(self, deadline: float, callback: Callable[[int], None]) -> threading.Timer:
        delay_ms = max(0.0, deadline - self._clock())
        timer = self._timer_factory(delay_ms / 1000.0, callback, args=(self._generation,))
        timer.daemon = True
        timer.start()
        return timer

    def _cancel_timers(self) -> None:
        for timer in (self._letter_timer, self._word_timer):
            if timer is not None:
                timer.cancel()
        self._letter_timer = None
        self._word_timer = None

    def _letter_expired(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._letter_timer is None:
                return

            self._letter_timer = None
            deadline = self._action_time + self._profile.word_separator_min
            self._word_timer = self._start(deadline, self._word_expired)
            logger.debug("Letter gap elapsed")
            self.on_letter()

    def _word_expired(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._word_timer is None:
                return

            self._word_timer = None
            logger.debug("Word gap elapsed")
            self.on_word()
