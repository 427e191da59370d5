from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, Tuple

logger = logging.getLogger(__name__)


class CoalescingScheduler:
    """Debounce primitive: only the last action scheduled under a key runs.

    ``schedule`` cancels whatever is pending under the same key before arming
    a new timer, so a burst of calls collapses into one delayed call.
    ``timer_factory`` takes ``(delay, callback)`` and returns an object with
    ``start`` and ``cancel``; it defaults to `threading.Timer`.
    """

    def __init__(self, timer_factory=None):
        self._timer_factory = timer_factory or threading.Timer
        self._pending: Dict[str, Tuple[object, Callable[[], None]]] = {}
        self._lock = threading.Lock()

    def schedule(self, key: str, delay: float, action: Callable[[], None]) -> None:
        with self._lock:
            previous = self._pending.pop(key, None)
            if previous is not None:
                previous[0].cancel()
                logger.debug("Cancelled pending %r", key)
            timer = self._timer_factory(delay, lambda: self._fire(key, timer))
            if hasattr(timer, 'daemon'):
                timer.daemon = True
            self._pending[key] = (timer, action)
        timer.start()
        logger.debug("Armed %r for %.3fs", key, delay)

    def _fire(self, key: str, timer) -> None:
        with self._lock:
            entry = self._pending.get(key)
            # A timer cancelled too late to stop its thread must not run.
            if entry is None or entry[0] is not timer:
                return
            del self._pending[key]
        entry[1]()

    def cancel(self, key: str) -> bool:
        with self._lock:
            entry = self._pending.pop(key, None)
        if entry is None:
            return False
        entry[0].cancel()
        return True

    def cancel_all(self) -> None:
        with self._lock:
            entries = list(self._pending.values())
            self._pending.clear()
        for timer, _ in entries:
            timer.cancel()

    def is_pending(self, key: str) -> bool:
        with self._lock:
            return key in self._pending

    def flush(self, key: str) -> bool:
        """Run the pending action for ``key`` now instead of waiting for its timer."""
        with self._lock:
            entry = self._pending.pop(key, None)
        if entry is None:
            return False
        entry[0].cancel()
        entry[1]()
        return True
