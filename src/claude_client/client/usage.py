"""
Accumulated token usage and cost across calls of one client.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping

from claude_client.telemetry import get_logger
from claude_client.types.model import ZERO_COST, Cost, ModelSpec, find_spec
from claude_client.types.response import MessageResponse, Usage

logger = get_logger(__name__)


class UsageCollector:
    """Collects overall Usage and Cost from message responses.

    Updates may come from the caller's loop and from the blocking bridge
    thread concurrently, so both totals change under one lock.

    Args:
        models: Limits and pricing consulted before the built-in catalogue
    """

    def __init__(self, models: Mapping[str, ModelSpec] | None = None) -> None:
        self._lock = threading.Lock()
        self._models = dict(models or {})
        self._usage = Usage.ZERO
        self._cost = ZERO_COST

    @property
    def usage(self) -> Usage:
        return self._usage

    @property
    def cost(self) -> Cost:
        return self._cost

    def update(self, usage: Usage, model_cost: Cost | None = None) -> None:
        """Add usage, and its cost when the model pricing is known."""
        with self._lock:
            self._usage = self._usage + usage
            if model_cost is not None:
                self._cost = self._cost + usage.cost(model_cost)

    def record(self, response: MessageResponse) -> None:
        """Add the usage of a response, priced by the model it reports."""
        spec = find_spec(response.model, self._models) if response.model else None
        if spec is None:
            logger.debug("No pricing for model, cost not updated", model=response.model)
        self.update(response.usage, spec.cost if spec else None)

    def __repr__(self) -> str:
        return f"UsageCollector(usage={self._usage!r}, cost={self._cost!r})"
