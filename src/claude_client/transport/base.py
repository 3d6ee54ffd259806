"""
Transport contract consumed by the client facade.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class TransportResponse:
    """Raw result of a transport call."""

    status: int
    body: bytes
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300


@runtime_checkable
class Transport(Protocol):
    """Sends a serialized payload and returns the serialized answer.

    Implementations raise TransportError on connectivity failures and
    return non-success statuses as ordinary responses.
    """

    async def send(
        self,
        endpoint: str,
        payload: bytes,
        headers: Mapping[str, str],
    ) -> TransportResponse: ...

    async def close(self) -> None: ...
