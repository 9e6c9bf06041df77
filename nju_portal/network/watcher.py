"""Polls the network identity and reports changes to the orchestrator."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Optional

from ..models import ReadyTrigger

if TYPE_CHECKING:
    from ..orchestrator import AutoAuthOrchestrator


class NetworkWatcher:
    """Fires ``become_ready(NETWORK_CHANGED)`` whenever the SSID changes."""

    def __init__(self, orchestrator: "AutoAuthOrchestrator", interval: float = 5.0) -> None:
        self._orchestrator = orchestrator
        self.interval = interval
        self._last_identity: Optional[str] = None

    async def check_once(self) -> bool:
        """Return True when a change was detected and dispatched."""

        identity = self._orchestrator.read_identity()
        if identity == self._last_identity:
            return False
        logging.info("Network changed: %s -> %s", self._last_identity or "unknown", identity or "unknown")
        self._last_identity = identity
        await self._orchestrator.become_ready(ReadyTrigger.NETWORK_CHANGED)
        return True

    async def run(self, stop_event: asyncio.Event) -> None:
        self._last_identity = self._orchestrator.read_identity()
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                await self.check_once()
