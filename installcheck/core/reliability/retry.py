"""
Retry policy — run a fallible operation a bounded number of times.

Fixed delay between attempts, no exponential backoff, no jitter.  The
install check uses the reference policy: two attempts, 15 seconds
apart.  Only exceptions listed in ``retry_on`` are retried; anything
else propagates on the first failure.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar

from installcheck.core.engine.errors import CommandFailedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 2
DEFAULT_DELAY_S = 15.0


@dataclass
class RetryPolicy:
    """Bounded fixed-delay retry.

    Args:
        max_attempts: Total attempts, including the first one.
        delay: Seconds to wait between attempts.
        retry_on: Exception types that trigger a retry.
        sleep: Sleep function (injectable for tests).
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    delay: float = DEFAULT_DELAY_S
    retry_on: tuple[type[BaseException], ...] = (CommandFailedError,)
    sleep: Callable[[float], None] = time.sleep

    # ── History of the last run() ────────────────────────────────
    attempts: int = 0
    delays: list[float] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.delay < 0:
            raise ValueError(f"delay must be >= 0, got {self.delay}")

    def run(self, operation: Callable[[], T], *, label: str = "operation") -> T:
        """Invoke ``operation`` until it succeeds or attempts run out.

        Returns:
            Whatever the operation returned on its successful attempt.

        Raises:
            The last retryable exception once all attempts have failed,
            or any non-retryable exception immediately.
        """
        self.attempts = 0
        self.delays = []

        while True:
            self.attempts += 1
            try:
                return operation()
            except self.retry_on as e:
                if self.attempts >= self.max_attempts:
                    logger.error(
                        "%s failed after %d attempt(s): %s", label, self.attempts, e,
                    )
                    raise
                logger.warning(
                    "%s failed (attempt %d/%d): %s — retrying in %.0fs",
                    label,
                    self.attempts,
                    self.max_attempts,
                    e,
                    self.delay,
                )
                self.delays.append(self.delay)
                self.sleep(self.delay)
