"""Cooperative cancellation for long-running paginated queries.

A `Context` is checked by the query executor before every page fetch. It can
be cancelled from another thread, or given a deadline; a fetch already in
flight is never interrupted.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Optional

from .exceptions import QueryCancelledError


class Context:
    """Cancellation signal with an optional monotonic deadline.

    Example:
        ctx = Context.with_timeout(5.0)
        items = db.query(options, ctx=ctx)

        # from another thread
        ctx.cancel()
    """

    def __init__(self, deadline: Optional[float] = None) -> None:
        self._cancelled = threading.Event()
        self._deadline = deadline

    @classmethod
    def background(cls) -> "Context":
        """A context that is never cancelled and has no deadline."""
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> "Context":
        return cls(deadline=time.monotonic() + seconds)

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    def cancel(self) -> None:
        self._cancelled.set()

    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def done(self) -> bool:
        return self._cancelled.is_set() or self.expired()

    def error(self, **details: Any) -> Optional[QueryCancelledError]:
        """Return the cancellation error, or None while the context is live."""
        if self._cancelled.is_set():
            return QueryCancelledError("query cancelled", reason="cancelled", **details)
        if self.expired():
            return QueryCancelledError("query deadline exceeded", reason="deadline_exceeded", **details)
        return None

    def raise_if_done(self, **details: Any) -> None:
        if self.done():
            raise self.error(**details)
