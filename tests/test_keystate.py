"""Tests for key press state machine."""

import pytest
from morsekey.decoder import Symbol
from morsekey.events import EventBus, InvalidPress, PressClassified
from morsekey.keystate import KeyEvent, KeyPressStateMachine, PressState
from morsekey.timing import TimingClassifier


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def events(bus):
    collected = []
    bus.subscribe(PressClassified, collected.append)
    bus.subscribe(InvalidPress, collected.append)
    return collected


@pytest.fixture
def machine(bus):
    return KeyPressStateMachine(TimingClassifier(10), bus=bus)


def press(machine, start, duration, key="space"):
    machine.process_event(KeyEvent(key, True, start))
    return machine.process_event(KeyEvent(key, False, start + duration))


class TestKeyEvent:
    """Test KeyEvent class."""

    def test_creation(self):
        """Test creating a key event."""
        event = KeyEvent("space", True, 1500.0)
        assert event.key == "space"
        assert event.is_pressed is True
        assert event.timestamp == 1500.0

    def test_repr(self):
        """Test event string representation."""
        text = repr(KeyEvent("ctrl_r", False, 12.5))
        assert "ctrl_r" in text
        assert "UP" in text
        assert "12.5" in text


class TestKeyPressStateMachine:
    """Test KeyPressStateMachine class."""

    def test_initial_state(self, machine):
        """Test that the machine starts idle."""
        assert machine.state is PressState.IDLE
        assert machine.press_start_time is None
        assert machine.release_time is None

    def test_press_enters_pressing(self, machine):
        """Test key down on the designated key."""
        assert machine.press("space", 1000) is True
        assert machine.state is PressState.PRESSING
        assert machine.press_start_time == 1000

    def test_other_key_ignored(self, machine, events):
        """Test that other keys never change state."""
        assert press(machine, 0, 100, key="a") is None
        assert machine.state is PressState.IDLE
        assert events == []

    def test_release_of_other_key_ignored(self, machine):
        """Test that releasing another key leaves a press in progress."""
        machine.press("space", 0)
        assert machine.release("ctrl_l", 100) is None
        assert machine.state is PressState.PRESSING

    def test_repeat_press_ignored(self, machine):
        """Test that a second key down keeps the first start time."""
        machine.press("space", 0)
        assert machine.press("space", 30) is False
        assert machine.press_start_time == 0

    def test_release_without_press(self, machine, events):
        """Test that a stray key up is ignored."""
        assert machine.release("space", 100) is None
        assert machine.state is PressState.IDLE
        assert events == []

    def test_bounce_discarded(self, machine, events):
        """Test that a 40ms press is dropped without an event."""
        assert press(machine, 0, 40) is None
        assert events == []
        assert machine.state is PressState.IDLE
        assert machine.press_start_time is None
        assert machine.release_time is None
        assert machine.last_duration == 40

    def test_dot(self, machine, events):
        """Test that a 100ms press is a dot."""
        assert press(machine, 0, 100) is Symbol.DOT
        assert events == [PressClassified(Symbol.DOT, 100)]
        assert machine.state is PressState.PROCESSING

    def test_dash(self, machine, events):
        """Test that a 400ms press is a dash."""
        assert press(machine, 0, 400) is Symbol.DASH
        assert events == [PressClassified(Symbol.DASH, 400)]

    def test_invalid(self, machine, events):
        """Test that a 1000ms press is reported as invalid."""
        result = press(machine, 0, 1000)
        assert result == InvalidPress(1000)
        assert events == [InvalidPress(1000)]
        assert machine.state is PressState.PROCESSING

    def test_gap_between_dot_and_dash_invalid(self, machine, events):
        """Test that 250ms is neither a dot nor a dash at 10 WPM."""
        assert press(machine, 0, 250) == InvalidPress(250)

    def test_bounce_threshold_boundary(self, machine):
        """Test that exactly 50ms is classified, not discarded."""
        assert press(machine, 0, 50) is Symbol.DOT

    def test_press_during_settle_ignored(self, machine):
        """Test that presses inside the settle window are dropped."""
        press(machine, 0, 100)
        assert machine.press("space", 120) is False
        assert machine.state is PressState.PROCESSING

    def test_press_after_settle_accepted(self, machine):
        """Test that the machine settles before a later press."""
        press(machine, 0, 100)
        assert machine.press("space", 150) is True
        assert machine.state is PressState.PRESSING
        assert machine.press_start_time == 150
        assert machine.release_time is None

    def test_explicit_settle(self, machine):
        """Test forcing the return to idle."""
        press(machine, 0, 100)
        machine.settle()
        assert machine.state is PressState.IDLE
        assert machine.press_start_time is None
        assert machine.release_time is None

    def test_settle_only_from_processing(self, machine):
        """Test that settle does not abort a press in progress."""
        machine.press("space", 0)
        machine.settle()
        assert machine.state is PressState.PRESSING

    def test_sequence_of_presses(self, machine):
        """Test a dot, dash, dot sequence with normal spacing."""
        results = [press(machine, 0, 100), press(machine, 250, 400), press(machine, 800, 90)]
        assert results == [Symbol.DOT, Symbol.DASH, Symbol.DOT]

    def test_speed_change_applies_to_next_press(self, machine):
        """Test that classification uses the current speed."""
        assert press(machine, 0, 250) == InvalidPress(250)
        machine.classifier.set_speed(20)
        assert press(machine, 1000, 250) is Symbol.DASH

    def test_rebind_key(self, machine):
        """Test that rebinding switches the designated key."""
        machine.press("space", 0)
        machine.set_designated_key("ctrl_r")
        assert machine.state is PressState.IDLE

        assert press(machine, 100, 100, key="space") is None
        assert press(machine, 300, 100, key="ctrl_r") is Symbol.DOT

    def test_custom_bounce(self, bus):
        """Test a configurable bounce threshold."""
        machine = KeyPressStateMachine(TimingClassifier(10), bus=bus, bounce_ms=80)
        assert press(machine, 0, 70) is None
        assert press(machine, 100, 90) is Symbol.DOT
