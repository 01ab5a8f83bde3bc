"""Hand-off of completion callbacks to the host's main thread.

Worker threads enqueue callbacks; the host calls `drain()` once per tick
from the thread that created the dispatcher. Callbacks run in FIFO order,
exactly once, and an exception in one callback is logged without affecting
the others. A full queue never blocks the main thread; see `enqueue`.
"""
from __future__ import annotations
import logging
import queue
import threading
from typing import Any, Callable, Tuple

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 1024
DEFAULT_PUT_TIMEOUT = 1.0


class MainThreadDispatcher:
    def __init__(self, maxsize: int = DEFAULT_QUEUE_SIZE, put_timeout: float = DEFAULT_PUT_TIMEOUT) -> None:
        # Bounded: worker threads wait at most put_timeout for room, then drop.
        self._queue: "queue.Queue[Tuple[Callable[..., Any], Tuple[Any, ...]]]" = queue.Queue(maxsize=maxsize)
        self._owner = threading.get_ident()
        self._draining = False
        self.put_timeout = put_timeout

    @property
    def owner_thread_id(self) -> int:
        return self._owner

    def bind_to_current_thread(self) -> None:
        """Make the calling thread the one allowed to drain."""
        self._owner = threading.get_ident()

    def enqueue(self, callback: Callable[..., Any], *args: Any) -> bool:
        """Queue `callback(*args)` for the next `drain()`.

        Never blocks the owner thread: with a full queue the callback runs
        inline there, since only that thread can make room. Other threads
        wait up to `put_timeout` seconds and then drop the callback.
        Returns False if the callback was dropped.
        """
        item = (callback, args)
        if threading.get_ident() == self._owner:
            try:
                self._queue.put_nowait(item)
            except queue.Full:
                logger.warning("Callback queue full; running %r inline on the main thread", callback)
                self._run(callback, args)
            return True
        try:
            self._queue.put(item, timeout=self.put_timeout)
        except queue.Full:
            logger.error("Callback queue still full after %.1fs; dropping %r", self.put_timeout, callback)
            return False
        return True

    def _run(self, callback: Callable[..., Any], args: Tuple[Any, ...]) -> None:
        try:
            callback(*args)
        except Exception:
            logger.exception("Error executing queued callback %r", callback)

    def pending(self) -> int:
        return self._queue.qsize()

    def drain(self) -> int:
        """Run the callbacks queued before this call. Returns how many ran.

        Callbacks enqueued while draining wait for the next tick. A nested
        call from inside a callback returns 0 immediately.
        """
        if threading.get_ident() != self._owner:
            raise RuntimeError("MainThreadDispatcher.drain() called from a non-owner thread")
        if self._draining:
            return 0
        self._draining = True
        ran = 0
        try:
            for _ in range(self._queue.qsize()):
                try:
                    callback, args = self._queue.get_nowait()
                except queue.Empty:
                    break
                ran += 1
                self._run(callback, args)
        finally:
            self._draining = False
        return ran
