"""Tests for events module."""

from morsekey.decoder import Symbol
from morsekey.events import (
    CharacterDecoded,
    EventBus,
    InvalidPress,
    LetterBoundary,
    PressClassified,
    WordCompleted,
)

import pytest


class TestEvents:
    """Test event value types."""

    def test_character_decoded_defaults_known(self):
        """Test that decoded characters are known unless stated."""
        event = CharacterDecoded("A", ".-")
        assert event.known is True
        assert event == CharacterDecoded("A", ".-", known=True)

    def test_events_compare_by_value(self):
        """Test value equality of events."""
        assert PressClassified(Symbol.DOT, 100) == PressClassified(Symbol.DOT, 100)
        assert InvalidPress(900) != InvalidPress(901)
        assert LetterBoundary() == LetterBoundary()
        assert WordCompleted("SOS").word == "SOS"


class TestEventBus:
    """Test EventBus class."""

    def test_publish_to_matching_type(self):
        """Test that listeners only see their event type."""
        bus = EventBus()
        words, letters = [], []
        bus.subscribe(WordCompleted, words.append)
        bus.subscribe(LetterBoundary, letters.append)

        bus.publish(WordCompleted("HI"))
        assert words == [WordCompleted("HI")]
        assert letters == []

    def test_subscription_order(self):
        """Test that listeners run in subscription order."""
        bus = EventBus()
        calls = []
        bus.subscribe(LetterBoundary, lambda e: calls.append(1))
        bus.subscribe(LetterBoundary, lambda e: calls.append(2))
        bus.publish(LetterBoundary())
        assert calls == [1, 2]

    def test_unsubscribe(self):
        """Test removing a listener through the returned handle."""
        bus = EventBus()
        words = []
        unsubscribe = bus.subscribe(WordCompleted, words.append)
        assert bus.listener_count(WordCompleted) == 1

        unsubscribe()
        unsubscribe()
        bus.publish(WordCompleted("HI"))
        assert words == []
        assert bus.listener_count(WordCompleted) == 0

    def test_publish_without_listeners(self):
        """Test that unobserved events are fine."""
        EventBus().publish(InvalidPress(1000))

    def test_listener_errors_propagate(self):
        """Test that listener exceptions reach the publisher."""
        bus = EventBus()

        def broken(event):
            raise RuntimeError("display failed")

        bus.subscribe(WordCompleted, broken)
        with pytest.raises(RuntimeError):
            bus.publish(WordCompleted("HI"))
