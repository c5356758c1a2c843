from unittest.mock import MagicMock

from dockdash.scheduler import RefreshScheduler


class FakeTimers:
    """Collects callbacks instead of waiting for them."""

    def __init__(self):
        self.scheduled = []

    def __call__(self, delay, callback):
        timer = MagicMock()
        self.scheduled.append((delay, callback, timer))
        return timer


def test_fires_with_action_id():
    timers = FakeTimers()
    on_due = MagicMock()
    scheduler = RefreshScheduler(timers, on_due)

    scheduler.schedule(7, 2.0)
    assert scheduler.pending == [7]
    delay, callback, _ = timers.scheduled[0]
    assert delay == 2.0

    callback()
    on_due.assert_called_once_with(7)
    assert scheduler.pending == []


def test_new_request_coalesces_waiting_ones():
    timers = FakeTimers()
    on_due = MagicMock()
    scheduler = RefreshScheduler(timers, on_due)

    scheduler.schedule(1, 2.0)
    scheduler.schedule(2, 2.0)

    first_timer = timers.scheduled[0][2]
    first_timer.stop.assert_called_once()
    assert scheduler.pending == [2]

    # A cancelled timer that fires anyway is a no-op
    timers.scheduled[0][1]()
    on_due.assert_not_called()


def test_cancel_all():
    timers = FakeTimers()
    on_due = MagicMock()
    scheduler = RefreshScheduler(timers, on_due)

    scheduler.schedule(3, 1.0)
    scheduler.cancel_all()

    timers.scheduled[0][2].stop.assert_called_once()
    assert scheduler.pending == []


def test_cancel_unknown_id_is_harmless():
    scheduler = RefreshScheduler(FakeTimers(), MagicMock())
    scheduler.cancel(99)
    assert scheduler.pending == []
