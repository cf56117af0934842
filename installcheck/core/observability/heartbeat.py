"""
Heartbeat — periodic liveness lines for long, silent operations.

CI hosts kill jobs that print nothing for a while.  ``npm install``
from a git reference can easily stay quiet for many minutes, so the
driver keeps a daemon thread printing a timestamped line every
``interval`` seconds until the run ends.

The thread waits on a ``threading.Event`` rather than sleeping, so
``stop()`` takes effect immediately and no line is emitted after it
returns.
"""

from __future__ import annotations

import logging
import sys
import threading
from collections.abc import Callable
from datetime import UTC, datetime

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_S = 60.0

# How long stop() waits for the thread to exit.
_JOIN_TIMEOUT_S = 5.0


def _write_stderr(line: str) -> None:
    sys.stderr.write(line + "\n")
    sys.stderr.flush()


def liveness_line() -> str:
    """Format one heartbeat line."""
    return f"[{datetime.now(UTC).isoformat(timespec='seconds')}] still running..."


class Heartbeat:
    """Cancellable background liveness printer.

    Usage::

        with Heartbeat(interval=60):
            run_long_thing()

    or explicitly with ``start()`` / ``stop()``.  ``stop()`` is
    idempotent and safe to call when nothing was started.
    """

    def __init__(
        self,
        interval: float = DEFAULT_INTERVAL_S,
        emit: Callable[[str], None] = _write_stderr,
    ):
        self._interval = interval
        self._emit = emit
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._lock = threading.Lock()
        self.beats = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self, interval: float | None = None) -> None:
        """Launch the heartbeat thread (no-op if already running)."""
        if interval is not None:
            self._interval = interval
        if self._interval <= 0:
            raise ValueError(f"Heartbeat interval must be positive, got {self._interval}")

        if self.running:
            logger.debug("Heartbeat already running")
            return

        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._loop,
            args=(self._stop_event,),
            daemon=True,
            name="heartbeat",
        )
        self._thread.start()
        logger.debug("Heartbeat started (every %.1fs)", self._interval)

    def stop(self) -> None:
        """Cancel the heartbeat thread.  Harmless when not running."""
        thread = self._thread
        self._stop_event.set()
        if thread is None:
            return

        # Waits for an in-flight emit, so nothing is printed after we return.
        with self._lock:
            pass
        if thread is not threading.current_thread():
            thread.join(timeout=_JOIN_TIMEOUT_S)
            if thread.is_alive():
                logger.warning("Heartbeat thread did not exit within %.0fs", _JOIN_TIMEOUT_S)
        self._thread = None
        logger.debug("Heartbeat stopped after %d beat(s)", self.beats)

    def _loop(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self._interval):
            with self._lock:
                if stop_event.is_set():
                    break
                try:
                    self._emit(liveness_line())
                except Exception as e:
                    logger.debug("Heartbeat emit failed: %s", e)
                self.beats += 1

    def __enter__(self) -> Heartbeat:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
