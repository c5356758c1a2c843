"""
Delayed refresh scheduling.

Every container action asks for a listing refresh a short while later, so the
table catches up with the runtime. Requests are keyed by the action id that
asked for them; a new request cancels the ones still waiting, so a burst of
actions produces a single refresh.
"""

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

# set_timer(delay, callback) -> handle with a stop() method, e.g. textual's App.set_timer
TimerFactory = Callable[[float, Callable[[], None]], Any]


class RefreshScheduler:
    def __init__(self, set_timer: TimerFactory, on_due: Callable[[int], None]):
        self._set_timer = set_timer
        self._on_due = on_due
        self._timers: Dict[int, Any] = {}

    @property
    def pending(self) -> List[int]:
        return sorted(self._timers)

    def schedule(self, action_id: int, delay: float) -> None:
        for waiting in list(self._timers):
            logger.debug(f"Refresh for action {waiting} coalesced into action {action_id}")
            self.cancel(waiting)
        self._timers[action_id] = self._set_timer(delay, lambda: self._fire(action_id))

    def cancel(self, action_id: int) -> None:
        timer = self._timers.pop(action_id, None)
        if timer is not None:
            timer.stop()

    def cancel_all(self) -> None:
        for action_id in list(self._timers):
            self.cancel(action_id)

    def _fire(self, action_id: int) -> None:
        if self._timers.pop(action_id, None) is None:
            return
        self._on_due(action_id)
