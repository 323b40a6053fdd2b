"""Exception types raised by the morsekey package."""

from typing import Optional


class MorseKeyError(Exception):
    """Base class for all morsekey errors."""


class InvalidSpeedError(MorseKeyError, ValueError):
    """Raised when a speed setting is not a positive integer WPM."""

    def __init__(self, wpm: object):
        super().__init__(f"WPM must be a positive integer, got {wpm!r}")
        self.wpm = wpm


class InvalidMappingError(MorseKeyError, ValueError):
    """Raised when a custom mapping has a malformed character or sequence."""


class DuplicateSequenceError(MorseKeyError):
    """
    Raised when a custom mapping reuses a sequence that is already claimed.

    Attributes:
        sequence: The rejected sequence
        existing: Character the sequence already maps to
    """

    def __init__(self, sequence: str, existing: Optional[str] = None):
        message = f"Morse sequence {sequence!r} already exists"
        if existing is not None:
            message += f" (mapped to {existing!r})"
        super().__init__(message)
        self.sequence = sequence
        self.existing = existing


class DuplicateCharacterError(MorseKeyError):
    """
    Raised when a custom mapping reuses a character that is already claimed.

    Attributes:
        character: The rejected character
        existing: Sequence that already produces the character
    """

    def __init__(self, character: str, existing: Optional[str] = None):
        message = f"Character {character!r} already exists"
        if existing is not None:
            message += f" (sequence {existing!r})"
        super().__init__(message)
        self.character = character
        self.existing = existing
