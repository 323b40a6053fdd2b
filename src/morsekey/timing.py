"""Timing classifier converting press and pause durations into Morse units."""

import logging
import math
from dataclasses import dataclass
from enum import Enum

from .errors import InvalidSpeedError

logger = logging.getLogger(__name__)

DEFAULT_WPM = 10

# Reference thresholds in milliseconds at 10 WPM (120ms dot unit)
BASE_UNIT_MS = 120.0
BASE_DOT = (50, 200)
BASE_DASH = (300, 800)
BASE_ELEMENT_SEPARATOR = (50, 300)
BASE_LETTER_SEPARATOR = (500, 1200)
BASE_WORD_SEPARATOR_MIN = 1500


class PressClass(Enum):
    """Classification of a single key press."""

    DOT = "dot"
    DASH = "dash"
    INVALID = "invalid"


class PauseClass(Enum):
    """Classification of a silence between presses."""

    WORD = "word"
    LETTER = "letter"
    ELEMENT = "element"
    NONE = "none"


@dataclass(frozen=True)
class TimingProfile:
    """Duration thresholds in milliseconds derived from a speed setting."""

    wpm: int
    unit_ms: float
    dot_min: int
    dot_max: int
    dash_min: int
    dash_max: int
    element_separator_min: int
    element_separator_max: int
    letter_separator_min: int
    letter_separator_max: int
    word_separator_min: int

    @classmethod
    def for_wpm(cls, wpm: int) -> "TimingProfile":
        """
        Build the profile for a speed by scaling the 10 WPM reference.

        Rounded thresholds are nudged apart where rounding would make them
        collide, so the ordering between dot, dash and separator ranges holds
        at every positive speed.

        Args:
            wpm: Words per minute

        Returns:
            TimingProfile for the given speed
        """
        unit = dot_duration_ms(wpm)
        scale = unit / BASE_UNIT_MS

        def scaled(value: float) -> int:
            return _round_half_up(value * scale)

        dot_min = scaled(BASE_DOT[0])
        dot_max = max(scaled(BASE_DOT[1]), dot_min)
        dash_min = max(scaled(BASE_DASH[0]), dot_max + 1)
        dash_max = max(scaled(BASE_DASH[1]), dash_min)

        element_min = scaled(BASE_ELEMENT_SEPARATOR[0])
        element_max = max(scaled(BASE_ELEMENT_SEPARATOR[1]), element_min)
        letter_min = max(scaled(BASE_LETTER_SEPARATOR[0]), element_min + 1)
        letter_max = max(scaled(BASE_LETTER_SEPARATOR[1]), letter_min)
        word_min = max(scaled(BASE_WORD_SEPARATOR_MIN), letter_min + 1)

        return cls(
            wpm=wpm,
            unit_ms=unit,
            dot_min=dot_min,
            dot_max=dot_max,
            dash_min=dash_min,
            dash_max=dash_max,
            element_separator_min=element_min,
            element_separator_max=element_max,
            letter_separator_min=letter_min,
            letter_separator_max=letter_max,
            word_separator_min=word_min,
        )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _check_wpm(wpm: object) -> int:
    if isinstance(wpm, bool) or not isinstance(wpm, int) or wpm <= 0:
        raise InvalidSpeedError(wpm)
    return wpm


def dot_duration_ms(wpm: int) -> float:
    """
    Convert WPM to the dot unit in milliseconds.

    Standard: PARIS = 50 units, so one unit lasts 60000 / (50 * WPM) = 1200 / WPM ms.

    Args:
        wpm: Words per minute

    Returns:
        Dot duration in milliseconds
    """
    return 1200.0 / _check_wpm(wpm)


def calculate_wpm(characters: int, minutes: float) -> float:
    """
    Compute a typing speed where five characters count as one word.

    Args:
        characters: Number of characters produced
        minutes: Elapsed time in minutes

    Returns:
        Words per minute, 0.0 when no time has elapsed
    """
    if minutes <= 0:
        return 0.0
    return (characters / 5.0) / minutes


class TimingClassifier:
    """
    Classifies press and pause durations against the current speed.

    The profile is replaced as a whole on every speed change, so readers
    never observe a half-updated set of thresholds.
    """

    def __init__(self, wpm: int = DEFAULT_WPM):
        """
        Initialize classifier.

        Args:
            wpm: Initial speed in words per minute
        """
        self._profile = TimingProfile.for_wpm(_check_wpm(wpm))

    @property
    def wpm(self) -> int:
        """Current speed setting."""
        return self._profile.wpm

    @property
    def unit_ms(self) -> float:
        """Current dot unit in milliseconds."""
        return self._profile.unit_ms

    def set_speed(self, wpm: int) -> None:
        """
        Change the speed and recompute every threshold.

        Args:
            wpm: Words per minute, a positive integer

        Raises:
            InvalidSpeedError: If wpm is not a positive integer
        """
        self._profile = TimingProfile.for_wpm(_check_wpm(wpm))
        logger.debug(f"Speed set to {wpm} WPM (unit {self._profile.unit_ms:.1f}ms)")

    def classify_press(self, duration_ms: float) -> PressClass:
        """Classify a press duration as dot, dash or invalid."""
        profile = self._profile
        if profile.dot_min <= duration_ms <= profile.dot_max:
            return PressClass.DOT
        if profile.dash_min <= duration_ms <= profile.dash_max:
            return PressClass.DASH
        return PressClass.INVALID

    def classify_pause(self, duration_ms: float) -> PauseClass:
        """Classify a silence, longest category first."""
        profile = self._profile
        if duration_ms >= profile.word_separator_min:
            return PauseClass.WORD
        if duration_ms >= profile.letter_separator_min:
            return PauseClass.LETTER
        if duration_ms >= profile.element_separator_min:
            return PauseClass.ELEMENT
        return PauseClass.NONE

    def get_thresholds(self) -> TimingProfile:
        """Return a read-only snapshot of the current thresholds."""
        return self._profile
