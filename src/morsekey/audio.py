"""Sidetone feedback for classified presses.

Plays a short tone for every dot and a longer one for every dash.
"""

import numpy as np
import sounddevice as sd
from typing import Callable

from .decoder import Symbol
from .events import EventBus, PressClassified
from .timing import dot_duration_ms


class Sidetone:
    """Audio feedback generator for classified Morse elements."""

    def __init__(
        self,
        frequency: int = 800,
        dot_duration: float = 0.1,
        dash_duration: float = 0.3,
        sample_rate: int = 44100,
        volume: float = 0.3,
    ):
        """Initialize sidetone generator.

        Args:
            frequency: Tone frequency in Hz (default 800 Hz)
            dot_duration: Tone length for a dot in seconds (default 0.1s)
            dash_duration: Tone length for a dash in seconds (default 0.3s)
            sample_rate: Audio sample rate in Hz (default 44100)
            volume: Volume level from 0.0 to 1.0 (default 0.3)
        """
        self.frequency = frequency
        self.dot_duration = dot_duration
        self.dash_duration = dash_duration
        self.sample_rate = sample_rate
        self.volume = volume

    @classmethod
    def for_speed(cls, wpm: int, frequency: int = 800) -> "Sidetone":
        """Sidetone whose dot lasts one unit and dash three units at wpm."""
        unit = dot_duration_ms(wpm) / 1000.0
        return cls(frequency=frequency, dot_duration=unit, dash_duration=3 * unit)

    def _generate_tone(self, duration: float) -> np.ndarray:
        """Generate a sine wave tone with envelope.

        Args:
            duration: Duration in seconds

        Returns:
            NumPy array of audio samples
        """
        t = np.linspace(0, duration, int(self.sample_rate * duration), False)
        tone = np.sin(2 * np.pi * self.frequency * t)

        # 5ms rise/fall avoids clicks
        ramp = int(0.005 * self.sample_rate)
        if len(tone) > ramp * 2:
            tone[:ramp] *= np.linspace(0, 1, ramp)
            tone[-ramp:] *= np.linspace(1, 0, ramp)

        tone *= self.volume
        return tone.astype(np.float32)

    def play(self, symbol: Symbol) -> None:
        """Play the tone for one element without blocking."""
        duration = self.dot_duration if symbol is Symbol.DOT else self.dash_duration
        sd.play(self._generate_tone(duration), self.sample_rate)

    def on_press(self, event: PressClassified) -> None:
        self.play(event.symbol)

    def attach(self, bus: EventBus) -> Callable[[], None]:
        """
        Play a tone for every PressClassified event on a bus.

        Returns:
            Callable that detaches the sidetone
        """
        return bus.subscribe(PressClassified, self.on_press)

    def stop(self) -> None:
        """Stop all audio playback."""
        sd.stop()
