"""Debounce — delay a call until input has been quiet for a fixed interval.

Every ``call`` cancels the pending invocation (if any) and schedules a new
one ``interval_ms`` later, so only the last call in a burst runs. The
returned handle can be cancelled on its own; ``cancel()`` drops whatever is
pending. Calls already running are never interrupted.

Usage:
    search = Debouncer(300, run_search)
    search.call("js")      # scheduled
    search.call("jso")     # previous one cancelled, rescheduled
    search.cancel()        # view closed: nothing runs
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class Debouncer:
    """``timer_factory(seconds, fn)`` must return an object with start()/cancel()."""

    def __init__(
        self,
        interval_ms: int,
        fn: Callable,
        *,
        timer_factory: Callable = threading.Timer,
    ) -> None:
        self.interval_ms = interval_ms
        self.fn = fn
        self._timer_factory = timer_factory
        self._handle = None
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def call(self, *args, **kwargs):
        """Schedule ``fn(*args, **kwargs)``, superseding any pending call."""
        handle = None

        def _fire():
            with self._lock:
                if self._handle is not handle:
                    return None
                self._handle = None
            logger.debug("Debounced call fired after %sms quiet period", self.interval_ms)
            return self.fn(*args, **kwargs)

        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
            handle = self._timer_factory(self.interval_ms / 1000, _fire)
            self._handle = handle
        handle.start()
        return handle

    def cancel(self) -> bool:
        """Drop the pending call. Returns True if one was pending."""
        with self._lock:
            if self._handle is None:
                return False
            self._handle.cancel()
            self._handle = None
            return True
