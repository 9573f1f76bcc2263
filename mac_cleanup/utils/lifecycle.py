"""Run-once teardown shared by normal exit, errors and termination signals."""
from __future__ import annotations

import atexit
import logging
import signal
import threading
from typing import Callable, Iterable

logger = logging.getLogger(__name__)

TERMINATION_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGTERM", "SIGHUP") if hasattr(signal, name)
)


class Finalizer:
    """Wraps a teardown callable so it runs at most once, however it is reached.

    `install()` registers it with atexit and turns SIGTERM/SIGHUP into
    SystemExit, so the caller's `finally` block (and then atexit) sees the
    same path as a normal return. SIGINT already arrives as KeyboardInterrupt.
    """

    def __init__(self, action: Callable[[], None]):
        self._action = action
        self._lock = threading.Lock()
        self._previous = {}
        self.done = False

    def __call__(self) -> None:
        with self._lock:
            if self.done:
                return
            self.done = True
        logger.debug("Running teardown")
        self._action()

    def install(self, signals: Iterable[int] = TERMINATION_SIGNALS) -> "Finalizer":
        atexit.register(self)
        if threading.current_thread() is threading.main_thread():
            for sig in signals:
                self._previous[sig] = signal.signal(sig, self._on_signal)
        return self

    def uninstall(self) -> None:
        """Unregister from atexit and put back the signal handlers replaced by install()."""
        atexit.unregister(self)
        if threading.current_thread() is threading.main_thread():
            for sig, previous in self._previous.items():
                signal.signal(sig, previous if previous is not None else signal.SIG_DFL)
        self._previous.clear()

    def _on_signal(self, signum, _frame):
        logger.debug("Received signal %s", signum)
        raise SystemExit(128 + signum)
