"""Tests for sidetone module."""

import pytest

try:
    from morsekey.audio import Sidetone
except (ImportError, OSError):
    Sidetone = None

from morsekey.decoder import Symbol
from morsekey.events import EventBus, PressClassified

pytestmark = pytest.mark.skipif(Sidetone is None, reason="audio backend not available")


class TestSidetone:
    """Test Sidetone class."""

    def test_tone_shape(self):
        """Test generated tone length, type and envelope."""
        sidetone = Sidetone(sample_rate=8000, volume=0.5)
        tone = sidetone._generate_tone(0.1)

        assert len(tone) == 800
        assert tone.dtype.name == "float32"
        assert abs(tone[0]) < 1e-6
        assert abs(tone).max() <= 0.5 + 1e-6

    def test_attach_plays_on_press(self, monkeypatch):
        """Test that classified presses trigger playback of the right length."""
        played = []
        sidetone = Sidetone()
        monkeypatch.setattr(sidetone, "play", played.append)

        bus = EventBus()
        detach = sidetone.attach(bus)
        bus.publish(PressClassified(Symbol.DASH, 400))
        detach()
        bus.publish(PressClassified(Symbol.DOT, 100))

        assert played == [Symbol.DASH]

    def test_for_speed(self):
        """Test that tone lengths follow the dot unit."""
        sidetone = Sidetone.for_speed(20, frequency=600)

        assert sidetone.frequency == 600
        assert sidetone.dot_duration == pytest.approx(0.06)
        assert sidetone.dash_duration == pytest.approx(0.18)
