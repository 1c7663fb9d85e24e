"""Tests for cooperative cancellation contexts."""

import threading
import time

from hephaestus.context import Context
from hephaestus.exceptions import QueryCancelledError


def test_background_is_never_done():
    ctx = Context.background()
    assert not ctx.done()
    assert ctx.error() is None
    ctx.raise_if_done()


def test_cancel():
    ctx = Context()
    ctx.cancel()
    assert ctx.done()
    err = ctx.error(table="movies")
    assert isinstance(err, QueryCancelledError)
    assert err.details == {"reason": "cancelled", "table": "movies"}


def test_cancel_from_other_thread():
    ctx = Context()
    thread = threading.Thread(target=ctx.cancel)
    thread.start()
    thread.join()
    assert ctx.done()


def test_timeout():
    ctx = Context.with_timeout(0)
    assert ctx.expired()
    assert ctx.error().details["reason"] == "deadline_exceeded"


def test_deadline_in_future():
    ctx = Context.with_timeout(60)
    assert ctx.deadline > time.monotonic()
    assert not ctx.done()


def test_raise_if_done():
    ctx = Context()
    ctx.cancel()
    try:
        ctx.raise_if_done(pages_fetched=2)
    except QueryCancelledError as e:
        assert e.details["pages_fetched"] == 2
    else:
        raise AssertionError("expected QueryCancelledError")
