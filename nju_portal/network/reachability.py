"""Best-effort check for existing outbound internet access."""

from __future__ import annotations

import asyncio
import logging

import aiohttp

from ..utils.http_client import PROBE_URL, HttpClient


class ReachabilityProber:
    """Reports whether a well-known external host answers within the probe timeout."""

    def __init__(self, http_client: HttpClient, url: str = PROBE_URL, method: str = "HEAD") -> None:
        self._client = http_client
        self.url = url
        self.method = method

    async def is_reachable(self) -> bool:
        try:
            status = await self._client.probe_status(self.url, self.method)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as exc:
            logging.debug("Reachability probe to %s failed: %s", self.url, exc)
            return False
        logging.debug("Reachability probe to %s returned %s", self.url, status)
        return 200 <= status < 300
