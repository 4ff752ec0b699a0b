from __future__ import annotations

"""Cancellable one-second ticker for time-attack sessions."""

import threading
from typing import Callable, Optional


class SessionTimer:
    """Calls `callback` every `interval_s` seconds on a daemon thread until cancelled.

    Usable as a context manager so the ticker is always stopped on exit.
    """

    def __init__(self, interval_s: float, callback: Callable[[], None]) -> None:
        self.interval_s = float(interval_s)
        self.callback = callback
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        self._running = False

    def _arm(self) -> None:
        self._timer = threading.Timer(self.interval_s, self._fire)
        self._timer.daemon = True
        self._timer.start()

    def _fire(self) -> None:
        with self._lock:
            if not self._running:
                return
        self.callback()
        with self._lock:
            if self._running:
                self._arm()

    def start(self) -> None:
        with self._lock:
            if self._running:
                return
            self._running = True
            self._arm()

    def cancel(self) -> None:
        with self._lock:
            self._running = False
            if self._timer:
                self._timer.cancel()
                self._timer = None

    @property
    def running(self) -> bool:
        return self._running

    def __enter__(self) -> "SessionTimer":
        self.start()
        return self

    def __exit__(self, *_exc) -> None:
        self.cancel()
