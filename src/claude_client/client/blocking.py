"""
Synchronous bridge over the asynchronous client.

Coroutines run on a private event loop thread owned by the bridge. Each
blocking call submits its coroutine with ``run_coroutine_threadsafe`` and
parks the calling thread on the returned future, which is used exactly
once. Waiting callers never block the loop thread, so any number of
threads can be parked at the same time.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import threading
from collections.abc import Awaitable, Callable, Coroutine
from typing import Any, TypeVar

from claude_client.client.cancel import CancelReason, CancelToken
from claude_client.errors import CancellationError, IllegalStateError
from claude_client.telemetry import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class BlockingBridge:
    """Runs coroutines to completion on behalf of synchronous callers."""

    def __init__(self, name: str = "claude-client-loop") -> None:
        self._name = name
        self._lock = threading.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._closed = False

    @property
    def running(self) -> bool:
        return self._loop is not None

    def in_loop_thread(self) -> bool:
        """Whether the current thread is the bridge's event loop thread."""
        thread = self._thread
        return thread is not None and thread.ident == threading.get_ident()

    def _submit(self, coro: Coroutine[Any, Any, T]) -> concurrent.futures.Future[T]:
        # Submitting under the lock orders the task before any shutdown drain.
        with self._lock:
            if self._closed:
                raise IllegalStateError("client is closed")
            if self._loop is None:
                loop = asyncio.new_event_loop()
                thread = threading.Thread(
                    target=self._run_loop, args=(loop,), name=self._name, daemon=True
                )
                thread.start()
                self._loop, self._thread = loop, thread
                logger.debug("Bridge event loop started", thread=self._name)
            return asyncio.run_coroutine_threadsafe(coro, self._loop)

    @staticmethod
    def _run_loop(loop: asyncio.AbstractEventLoop) -> None:
        asyncio.set_event_loop(loop)
        loop.run_forever()

    def run(self, coro: Coroutine[Any, Any, T], *, cancel: CancelToken | None = None) -> T:
        """Run a coroutine on the bridge loop and wait for its result.

        Args:
            coro: Coroutine to run
            cancel: Optional token that releases the caller when cancelled

        Returns:
            The coroutine's result

        Raises:
            CancellationError: If the caller is interrupted or the token is
                cancelled while waiting
            IllegalStateError: If called from the bridge loop thread, or
                after shutdown
            Exception: Whatever the coroutine raised, unchanged
        """
        if self.in_loop_thread():
            coro.close()
            raise IllegalStateError("blocking call issued from the client's event loop thread")
        try:
            future = self._submit(coro)
        except IllegalStateError:
            coro.close()
            raise

        unregister = cancel.on_cancel(lambda _reason: future.cancel()) if cancel else None
        try:
            return future.result()
        except (concurrent.futures.CancelledError, asyncio.CancelledError) as e:
            reason = cancel.reason if cancel and cancel.reason else CancelReason.SHUTDOWN
            raise CancellationError(reason=reason.value) from e
        except KeyboardInterrupt as e:
            # Cancelling the future cancels the task on the loop; the remote
            # call may still complete server-side.
            future.cancel()
            raise CancellationError(reason=CancelReason.INTERRUPTED.value) from e
        finally:
            if unregister is not None:
                unregister()

    def shutdown(self, cleanup: Callable[[], Awaitable[Any]] | None = None) -> None:
        """Cancel pending calls, run cleanup on the loop and stop its thread.

        Args:
            cleanup: Coroutine function run on the bridge loop before it stops
        """
        if self.in_loop_thread():
            raise IllegalStateError("bridge cannot be shut down from its own loop thread")
        with self._lock:
            loop, thread = self._loop, self._thread
            self._loop = self._thread = None
            self._closed = True
        if loop is None or thread is None:
            return

        async def drain() -> None:
            current = asyncio.current_task()
            while pending := [t for t in asyncio.all_tasks() if t is not current]:
                for task in pending:
                    task.cancel()
                await asyncio.gather(*pending, return_exceptions=True)
            if cleanup is not None:
                await cleanup()

        try:
            asyncio.run_coroutine_threadsafe(drain(), loop).result()
        finally:
            loop.call_soon_threadsafe(loop.stop)
            thread.join()
            loop.close()
            logger.debug("Bridge event loop stopped", thread=self._name)
