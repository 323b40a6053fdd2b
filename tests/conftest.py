"""Shared fixtures: deterministic timers and clock."""

import pytest


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class FakeTimer:
    """Stand-in for threading.Timer that fires only when asked."""

    def __init__(self, interval, function, args=None, kwargs=None, deadline=None):
        self.interval = interval
        self.deadline = deadline
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.function(*self.args, **self.kwargs)

    def run_anyway(self):
        """Invoke the callback as a timer thread that lost a cancel race would."""
        self.function(*self.args, **self.kwargs)


class FakeTimerFactory:
    """Creates FakeTimers and remembers them."""

    def __init__(self, clock=None):
        self.clock = clock
        self.timers = []

    def __call__(self, interval, function, args=None, kwargs=None):
        deadline = None
        if self.clock is not None:
            deadline = self.clock.now + interval * 1000.0
        timer = FakeTimer(interval, function, args, kwargs, deadline)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> FakeTimer:
        return self.timers[-1]

    @property
    def live(self):
        return [t for t in self.timers if t.started and not t.cancelled]

    def advance(self, ms):
        """Move the clock forward, firing each live timer as its deadline passes."""
        target = self.clock.now + ms
        while True:
            due = [t for t in self.live if t.deadline <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.deadline)
            self.clock.now = max(self.clock.now, timer.deadline)
            timer.cancel()
            timer.run_anyway()
        self.clock.now = target


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def timers(clock):
    return FakeTimerFactory(clock)
