"""
Cancellation control for blocking calls.

A CancelToken lets any thread release a caller parked in
``messages.create_blocking``.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class CancelReason(str, Enum):
    """Reasons for cancellation."""

    USER_REQUEST = "user_request"
    INTERRUPTED = "interrupted"
    TIMEOUT = "timeout"
    SHUTDOWN = "shutdown"


@dataclass
class CancelState:
    """State of a cancellation token.

    Attributes:
        cancelled: Whether cancellation was requested
        reason: Reason for cancellation
        timestamp: Time of cancellation
    """

    cancelled: bool = False
    reason: CancelReason | None = None
    timestamp: float | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class CancelToken:
    """Thread-safe cancellation token.

    Example:
        >>> token = CancelToken()
        >>> threading.Timer(5.0, token.cancel).start()
        >>> client.messages.create_blocking(configure, cancel=token)
    """

    def __init__(self) -> None:
        self._state = CancelState()
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[CancelReason], Any]] = []

    def cancel(
        self,
        reason: CancelReason = CancelReason.USER_REQUEST,
        **metadata: Any,
    ) -> bool:
        """Request cancellation.

        Returns:
            True if cancellation was newly requested, False if already cancelled
        """
        with self._lock:
            if self._state.cancelled:
                return False
            self._state.cancelled = True
            self._state.reason = reason
            self._state.timestamp = time.time()
            self._state.metadata.update(metadata)
            callbacks = list(self._callbacks)

        self._event.set()
        for callback in callbacks:
            callback(reason)
        return True

    @property
    def is_cancelled(self) -> bool:
        return self._state.cancelled

    @property
    def reason(self) -> CancelReason | None:
        return self._state.reason

    @property
    def state(self) -> CancelState:
        return self._state

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled.

        Returns:
            True if cancelled, False if the timeout elapsed first
        """
        return self._event.wait(timeout)

    def on_cancel(self, callback: Callable[[CancelReason], Any]) -> Callable[[], None]:
        """Register a callback to run on cancellation.

        The callback runs immediately if the token is already cancelled.

        Returns:
            Function that unregisters the callback
        """
        with self._lock:
            already = self._state.cancelled
            if not already:
                self._callbacks.append(callback)

        if already:
            callback(self._state.reason or CancelReason.USER_REQUEST)

        def remove() -> None:
            with self._lock:
                if callback in self._callbacks:
                    self._callbacks.remove(callback)

        return remove
