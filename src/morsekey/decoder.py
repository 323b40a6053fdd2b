"""Sequence decoder turning dots and dashes into characters and words."""

import logging
import re
from enum import Enum
from typing import Dict, List, Optional, Union

from .errors import DuplicateCharacterError, DuplicateSequenceError, InvalidMappingError
from .events import CharacterDecoded, EventBus, LetterBoundary, WordCompleted
from .store import MappingStore, MemoryMappingStore

logger = logging.getLogger(__name__)


class Symbol(Enum):
    """A single Morse element."""

    DOT = "."
    DASH = "-"

    def __str__(self) -> str:
        return self.value


# International Morse Code, letters and digits
STANDARD_TABLE: Dict[str, str] = {
    ".-": "A",
    "-...": "B",
    "-.-.": "C",
    "-..": "D",
    ".": "E",
    "..-.": "F",
    "--.": "G",
    "....": "H",
    "..": "I",
    ".---": "J",
    "-.-": "K",
    ".-..": "L",
    "--": "M",
    "-.": "N",
    "---": "O",
    ".--.": "P",
    "--.-": "Q",
    ".-.": "R",
    "...": "S",
    "-": "T",
    "..-": "U",
    "...-": "V",
    ".--": "W",
    "-..-": "X",
    "-.--": "Y",
    "--..": "Z",
    "-----": "0",
    ".----": "1",
    "..---": "2",
    "...--": "3",
    "....-": "4",
    ".....": "5",
    "-....": "6",
    "--...": "7",
    "---..": "8",
    "----.": "9",
}

# Emitted for sequences that match no table entry
UNKNOWN_CHARACTER = "�"

_SEQUENCE_RE = re.compile(r"^[.\-]+$")


def normalize_sequence(text: str) -> str:
    """
    Normalize user-typed Morse into a dot/dash string.

    Middle dots become dots, underscores become dashes, and whitespace is
    removed.

    Args:
        text: Sequence as typed by a user

    Returns:
        Sequence made only of "." and "-"

    Raises:
        InvalidMappingError: If the result is empty or has other characters
    """
    sequence = re.sub(r"\s", "", text.replace("·", ".").replace("_", "-"))
    if not _SEQUENCE_RE.match(sequence):
        raise InvalidMappingError(
            f"Morse sequence can only contain dots (.) and dashes (-), got {text!r}"
        )
    return sequence


class SequenceDecoder:
    """
    Accumulates symbols into letters and letters into words.

    Lookups consult the custom table before the standard table when custom
    lookup is enabled. The custom table is loaded once from the store and
    written back after every successful change.
    """

    def __init__(
        self,
        bus: Optional[EventBus] = None,
        store: Optional[MappingStore] = None,
        custom_lookup_enabled: bool = True,
        represent_unknown_enabled: bool = True,
    ):
        """
        Initialize decoder.

        Args:
            bus: Event bus for decoded output, a private one if None
            store: Persistence for the custom table, in-memory if None
            custom_lookup_enabled: Consult the custom table during lookup
            represent_unknown_enabled: Emit a placeholder for unknown sequences
        """
        self.bus = bus or EventBus()
        self.store = store or MemoryMappingStore()
        self.custom_lookup_enabled = custom_lookup_enabled
        self.represent_unknown_enabled = represent_unknown_enabled

        self._standard: Dict[str, str] = STANDARD_TABLE
        self._custom: Dict[str, str] = dict(self.store.load())
        self._sequence: List[Symbol] = []
        self._word: List[str] = []

    @property
    def current_sequence(self) -> str:
        """The letter being keyed, as a dot/dash string."""
        return "".join(symbol.value for symbol in self._sequence)

    @property
    def word_buffer(self) -> str:
        """Characters decoded since the last word boundary."""
        return "".join(self._word)

    @property
    def custom_table(self) -> Dict[str, str]:
        """Copy of the custom table."""
        return dict(self._custom)

    def add_element(self, symbol: Union[Symbol, str]) -> None:
        """Append a dot or dash to the current letter."""
        self._sequence.append(Symbol(symbol))

    def lookup(self, sequence: str) -> Optional[str]:
        """
        Resolve a sequence to a character.

        Args:
            sequence: Dot/dash string

        Returns:
            Character, or None if no enabled table has the sequence
        """
        if self.custom_lookup_enabled and sequence in self._custom:
            return self._custom[sequence]
        return self._standard.get(sequence)

    def end_letter(self) -> Optional[str]:
        """
        Close the current letter.

        Returns:
            The character appended to the word, or None if nothing was
        """
        sequence = self.current_sequence
        char = self.lookup(sequence)
        self._sequence = []

        if char is not None:
            self._word.append(char)
            self.bus.publish(CharacterDecoded(char, sequence))
        elif self.represent_unknown_enabled:
            char = UNKNOWN_CHARACTER
            self._word.append(char)
            self.bus.publish(CharacterDecoded(char, sequence, known=False))
        else:
            logger.debug(f"Dropped unknown sequence {sequence!r}")

        self.bus.publish(LetterBoundary())
        return char

    def end_word(self) -> Optional[str]:
        """
        Close the current word.

        Returns:
            The completed word, or None if the word buffer was empty
        """
        if not self._word:
            return None

        word = "".join(self._word)
        self._word = []
        self.bus.publish(WordCompleted(word))
        return word

    def add_custom_mapping(self, character: str, sequence: str) -> None:
        """
        Map a new sequence to a new character and persist the custom table.

        Nothing changes unless every check passes.

        Args:
            character: Single character to produce
            sequence: Dot/dash sequence, normalized before checking

        Raises:
            InvalidMappingError: If either argument is malformed
            DuplicateSequenceError: If the sequence is in either table
            DuplicateCharacterError: If the character is in either table
        """
        if not isinstance(character, str) or len(character) != 1:
            raise InvalidMappingError(f"Custom mapping needs a single character, got {character!r}")
        sequence = normalize_sequence(sequence)

        for table in (self._standard, self._custom):
            if sequence in table:
                raise DuplicateSequenceError(sequence, table[sequence])
        for table in (self._standard, self._custom):
            for existing_sequence, existing_char in table.items():
                if existing_char == character:
                    raise DuplicateCharacterError(character, existing_sequence)

        updated = dict(self._custom)
        updated[sequence] = character
        self.store.save(updated)
        self._custom = updated
        logger.debug(f"Added custom mapping {sequence!r} -> {character!r}")

    def remove_custom_mapping(self, sequence: str) -> bool:
        """
        Delete a custom mapping and persist; absent sequences are ignored.

        Returns:
            True if a mapping was removed

        Raises:
            InvalidMappingError: If the sequence is malformed
        """
        sequence = normalize_sequence(sequence)
        if sequence not in self._custom:
            return False

        updated = dict(self._custom)
        del updated[sequence]
        self.store.save(updated)
        self._custom = updated
        logger.debug(f"Removed custom mapping {sequence!r}")
        return True

    def set_custom_lookup_enabled(self, enabled: bool) -> None:
        self.custom_lookup_enabled = bool(enabled)

    def set_represent_unknown_enabled(self, enabled: bool) -> None:
        self.represent_unknown_enabled = bool(enabled)

    def clear(self) -> None:
        """Drop the current letter and word without emitting events."""
        self._sequence = []
        self._word = []
