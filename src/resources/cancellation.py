"""
Cooperative cancellation for blocking management API calls.

A `CancellationToken` is handed to every adapter operation. `run_cancellable`
executes one SDK round-trip on a worker thread and returns as soon as either the
call completes or the token fires, so a cancelled caller gets
`OperationCancelled` promptly instead of waiting for the HTTP response.
"""

import logging
import threading
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any, TypeVar

from resources.errors import OperationCancelled

logger = logging.getLogger(__name__)

T = TypeVar("T")

_POLL_INTERVAL_SECONDS = 0.05


class CancellationToken:
    """Thread-safe cancellation signal with an optional deadline."""

    def __init__(self, timeout_seconds: float | None = None):
        self._event = threading.Event()
        self._reason: str | None = None
        self._deadline = time.monotonic() + timeout_seconds if timeout_seconds else None

    @classmethod
    def none(cls) -> "CancellationToken":
        """A token that is never cancelled and has no deadline."""
        return cls()

    def cancel(self, reason: str | None = None) -> None:
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    @property
    def reason(self) -> str | None:
        if self._reason is None and self._deadline_passed():
            return "deadline exceeded"
        return self._reason

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set() or self._deadline_passed()

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None when there is no deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def raise_if_cancelled(self, operation: str) -> None:
        if self.is_cancelled:
            raise OperationCancelled(operation, self.reason)

    def wait(self, timeout: float) -> bool:
        """Block up to `timeout` seconds; True if the token fired meanwhile."""
        if self._deadline is not None:
            timeout = min(timeout, self.remaining() or 0.0)
        return self._event.wait(timeout) or self._deadline_passed()

    def _deadline_passed(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline


def run_cancellable(
    token: CancellationToken,
    operation: str,
    func: Callable[..., T],
    *args: Any,
    **kwargs: Any,
) -> T:
    """
    Run a blocking call, abandoning it if the token fires first.

    Exceptions raised by `func` propagate unchanged.

    Raises:
        OperationCancelled: If the token is cancelled before or during the call.
    """
    token.raise_if_cancelled(operation)

    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"evgroup-{operation}")
    try:
        future = executor.submit(func, *args, **kwargs)
        while not future.done():
            if token.wait(_POLL_INTERVAL_SECONDS):
                future.cancel()
                logger.warning(f"Abandoning in-flight {operation} call: {token.reason or 'cancelled'}")
                raise OperationCancelled(operation, token.reason)
        return future.result()
    finally:
        # Never join the worker: an abandoned HTTP call finishes in the background.
        executor.shutdown(wait=False)
