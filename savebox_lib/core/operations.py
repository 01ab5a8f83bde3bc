"""Handles returned by the asynchronous store methods.

An operation wraps the `concurrent.futures.Future` of a blocking store call.
Callers can block on `result()`, `await` it from asyncio code, or register
`on_complete` callbacks that are delivered through the main-thread
dispatcher when one is attached.
"""
from __future__ import annotations
import asyncio
import logging
from concurrent.futures import Future
from typing import Any, Callable, Generic, Optional, TypeVar

from .dispatcher import MainThreadDispatcher

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Operation(Generic[T]):
    def __init__(self, future: "Future[T]", dispatcher: Optional[MainThreadDispatcher], fallback: T) -> None:
        self.future = future
        self._dispatcher = dispatcher
        self._fallback = fallback

    def _value_of(self, fut: "Future[T]") -> T:
        exc = fut.exception()
        if exc is not None:
            # Store methods do not raise; this only guards custom submissions.
            logger.error("Asynchronous save operation failed: %s", exc)
            return self._fallback
        return fut.result()

    def on_complete(self, callback: Callable[[T], Any]) -> "Operation[T]":
        """Call `callback(result)` once the operation finishes.

        With a dispatcher the call happens during the next `drain()` on the
        main thread; without one it happens on the completing thread.
        """
        def _done(fut: "Future[T]") -> None:
            value = self._value_of(fut)
            if self._dispatcher is not None:
                self._dispatcher.enqueue(callback, value)
                return
            try:
                callback(value)
            except Exception:
                logger.exception("Error in completion callback %r", callback)

        self.future.add_done_callback(_done)
        return self

    def done(self) -> bool:
        return self.future.done()

    def result(self, timeout: Optional[float] = None) -> T:
        return self._value_of(self._wait(timeout))

    def _wait(self, timeout: Optional[float]) -> "Future[T]":
        self.future.exception(timeout)
        return self.future

    def __await__(self):
        return asyncio.wrap_future(self.future).__await__()


class SaveOperation(Operation[bool]):
    def __init__(self, future: "Future[bool]", dispatcher: Optional[MainThreadDispatcher] = None) -> None:
        super().__init__(future, dispatcher, False)


class LoadOperation(Operation[Any]):
    def __init__(
        self, future: "Future[Any]", dispatcher: Optional[MainThreadDispatcher] = None, fallback: Any = None
    ) -> None:
        super().__init__(future, dispatcher, fallback)
