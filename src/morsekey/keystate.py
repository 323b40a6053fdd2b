"""Press/release state machine for the designated Morse key."""

import logging
from enum import Enum
from typing import Optional, Union

from .decoder import Symbol
from .events import EventBus, InvalidPress, PressClassified
from .timing import PressClass, TimingClassifier

logger = logging.getLogger(__name__)

BOUNCE_MS = 50.0
SETTLE_MS = 50.0


class KeyEvent:
    """Represents a key transition (press or release)."""

    def __init__(self, key: str, is_pressed: bool, timestamp: float):
        """
        Initialize key event.

        Args:
            key: Name of the key, e.g. "space"
            is_pressed: True for key down, False for key up
            timestamp: Event time in milliseconds on a monotonic clock
        """
        self.key = key
        self.is_pressed = is_pressed
        self.timestamp = timestamp

    def __repr__(self) -> str:
        action = "DOWN" if self.is_pressed else "UP"
        return f"KeyEvent({self.key} {action} @ {self.timestamp:.1f}ms)"


class PressState(Enum):
    """Lifecycle of a single press."""

    IDLE = "idle"
    PRESSING = "pressing"
    PROCESSING = "processing"


PressResult = Union[Symbol, InvalidPress, None]


class KeyPressStateMachine:
    """
    Measures how long the designated key is held and classifies the press.

    State flow is IDLE -> PRESSING -> PROCESSING -> IDLE. Releases shorter
    than the bounce threshold return straight to IDLE without an event. After
    a classified release the machine stays in PROCESSING until the settle
    delay has passed, and presses arriving in that window are ignored.
    """

    def __init__(
        self,
        classifier: TimingClassifier,
        bus: Optional[EventBus] = None,
        designated_key: str = "space",
        bounce_ms: float = BOUNCE_MS,
        settle_ms: float = SETTLE_MS,
    ):
        """
        Initialize state machine.

        Args:
            classifier: Timing classifier for press durations
            bus: Event bus for press events, a private one if None
            designated_key: The only key this machine reacts to
            bounce_ms: Presses shorter than this are discarded
            settle_ms: Delay between a classified release and readiness
        """
        self.classifier = classifier
        self.bus = bus or EventBus()
        self.designated_key = designated_key
        self.bounce_ms = bounce_ms
        self.settle_ms = settle_ms

        self.state = PressState.IDLE
        self.press_start_time: Optional[float] = None
        self.release_time: Optional[float] = None
        self.last_duration: Optional[float] = None

    def process_event(self, event: KeyEvent) -> PressResult:
        """
        Feed a key event.

        Args:
            event: Key transition to process

        Returns:
            Symbol for a dot or dash, InvalidPress for an out-of-range press,
            None when the event completed no press
        """
        if event.is_pressed:
            self.press(event.key, event.timestamp)
            return None
        return self.release(event.key, event.timestamp)

    def press(self, key: str, timestamp: float) -> bool:
        """
        Handle key down.

        Returns:
            True if the press was accepted
        """
        if key != self.designated_key:
            return False

        if self.state is PressState.PROCESSING and self.release_time is not None:
            if timestamp - self.release_time >= self.settle_ms:
                self.settle()

        if self.state is not PressState.IDLE:
            return False

        self.press_start_time = timestamp
        self.state = PressState.PRESSING
        return True

    def release(self, key: str, timestamp: float) -> PressResult:
        """Handle key up, classifying the press if one is in progress."""
        if key != self.designated_key or self.state is not PressState.PRESSING:
            return None

        self.release_time = timestamp
        duration = timestamp - self.press_start_time
        self.last_duration = duration

        if duration < self.bounce_ms:
            logger.debug(f"Ignoring {duration:.0f}ms press as contact bounce")
            self._reset()
            return None

        self.state = PressState.PROCESSING
        classification = self.classifier.classify_press(duration)

        if classification is PressClass.INVALID:
            logger.debug(f"Invalid press of {duration:.0f}ms")
            event = InvalidPress(duration)
            self.bus.publish(event)
            return event

        symbol = Symbol.DOT if classification is PressClass.DOT else Symbol.DASH
        self.bus.publish(PressClassified(symbol, duration))
        return symbol

    def settle(self) -> None:
        """Return from PROCESSING to IDLE."""
        if self.state is PressState.PROCESSING:
            self._reset()

    def set_designated_key(self, key: str) -> None:
        """Rebind the designated key, dropping any press in progress."""
        if key != self.designated_key:
            self.designated_key = key
            self._reset()

    def _reset(self) -> None:
        self.state = PressState.IDLE
        self.press_start_time = None
        self.release_time = None
