"""
morsekey - decode Morse code keyed on a single keyboard key.

This package classifies press durations into dots and dashes, assembles them
into characters and words using idle-time gaps, and supports user-defined
characters layered over the standard Morse table.
"""

__version__ = "0.1.0"

from .config import MorseKeyConfig, load_config, save_config
from .decoder import STANDARD_TABLE, UNKNOWN_CHARACTER, SequenceDecoder, Symbol, normalize_sequence
from .errors import (
    DuplicateCharacterError,
    DuplicateSequenceError,
    InvalidMappingError,
    InvalidSpeedError,
    MorseKeyError,
)
from .events import (
    CharacterDecoded,
    EventBus,
    InvalidPress,
    LetterBoundary,
    PressClassified,
    WordCompleted,
)
from .keystate import KeyEvent, KeyPressStateMachine, PressState
from .pipeline import DecodingPipeline, SessionStats, decode_timings
from .scheduler import PauseScheduler
from .store import JsonMappingStore, MappingStore, MemoryMappingStore
from .timing import PauseClass, PressClass, TimingClassifier, TimingProfile, calculate_wpm

# Keyboard input is optional (requires a desktop session for pynput)
try:
    from .listener import KeyListener
    from .stream import DecodedStream
    _input_available = True
except (ImportError, OSError):
    KeyListener = None
    DecodedStream = None
    _input_available = False

# Audio module is optional (requires PortAudio)
try:
    from .audio import Sidetone
    _audio_available = True
except (ImportError, OSError):
    Sidetone = None
    _audio_available = False

__all__ = [
    "MorseKeyConfig",
    "load_config",
    "save_config",
    "STANDARD_TABLE",
    "UNKNOWN_CHARACTER",
    "SequenceDecoder",
    "Symbol",
    "normalize_sequence",
    "MorseKeyError",
    "DuplicateCharacterError",
    "DuplicateSequenceError",
    "InvalidMappingError",
    "InvalidSpeedError",
    "CharacterDecoded",
    "EventBus",
    "InvalidPress",
    "LetterBoundary",
    "PressClassified",
    "WordCompleted",
    "KeyEvent",
    "KeyPressStateMachine",
    "PressState",
    "DecodingPipeline",
    "SessionStats",
    "decode_timings",
    "PauseScheduler",
    "JsonMappingStore",
    "MappingStore",
    "MemoryMappingStore",
    "PauseClass",
    "PressClass",
    "TimingClassifier",
    "TimingProfile",
    "calculate_wpm",
]

if _input_available:
    __all__.extend(["KeyListener", "DecodedStream"])

if _audio_available:
    __all__.append("Sidetone")
