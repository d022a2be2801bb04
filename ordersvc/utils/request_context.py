"""Per-request deadline and cancellation signal."""
import threading
import time
from typing import Optional

from ordersvc.exceptions import RequestCancelledError


class RequestContext:
    """Carries a request's deadline and cancellation flag down to every store call.

    Services and stores call :meth:`raise_if_done` before each database round
    trip so an expired or cancelled request stops issuing work.
    """

    def __init__(self, deadline: Optional[float] = None):
        self._deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def background(cls) -> 'RequestContext':
        """A context that never expires (CLI commands, seeding, tests)."""
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> 'RequestContext':
        return cls(time.monotonic() + seconds)

    def remaining(self) -> Optional[float]:
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def done(self) -> bool:
        return self.cancelled or self.expired

    def raise_if_done(self) -> None:
        if self.cancelled:
            raise RequestCancelledError('Request cancelled')
        if self.expired:
            raise RequestCancelledError('Request deadline exceeded')
