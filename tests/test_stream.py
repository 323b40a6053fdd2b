"""Tests for stream module."""

import pytest

try:
    from pynput import keyboard  # noqa: F401
except ImportError as e:
    # pynput needs a display or input backend
    pytest.skip(f"pynput not usable: {e}", allow_module_level=True)

from morsekey.config import MorseKeyConfig  # noqa: E402
from morsekey.events import CharacterDecoded, InvalidPress, PressClassified, WordCompleted  # noqa: E402
from morsekey.store import MemoryMappingStore  # noqa: E402
from morsekey.stream import DecodedStream  # noqa: E402


class TestDecodedStream:
    """Test DecodedStream class."""

    def test_initialization(self):
        """Test decoded stream initialization."""
        stream = DecodedStream(store=MemoryMappingStore())
        assert stream.is_running() is False
        assert stream.config is not None
        assert stream.pipeline is not None
        assert stream.listener is not None
        assert stream.bus is stream.pipeline.bus

    def test_custom_config(self):
        """Test initialization with custom config."""
        config = MorseKeyConfig(key="ctrl_r", wpm=15)
        stream = DecodedStream(config, store=MemoryMappingStore())
        assert stream.pipeline.state_machine.designated_key == "ctrl_r"
        assert stream.pipeline.classifier.wpm == 15

    def test_callbacks_subscribed(self):
        """Test that callbacks are registered on the bus."""
        stream = DecodedStream(
            store=MemoryMappingStore(),
            char_callback=lambda e: None,
            word_callback=lambda e: None,
            element_callback=lambda e: None,
        )
        assert stream.bus.listener_count(CharacterDecoded) == 1
        assert stream.bus.listener_count(WordCompleted) == 1
        assert stream.bus.listener_count(PressClassified) == 1
        assert stream.bus.listener_count(InvalidPress) == 0

    def test_stop_when_not_running(self):
        """Test that stopping an idle stream is safe."""
        stream = DecodedStream(store=MemoryMappingStore())
        stream.stop()
        assert stream.is_running() is False
