"""Shared HTTP helpers for the portal gateway and the reachability probe."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp
import requests

USER_AGENT = "nju-portal/0.1 (+https://p2.nju.edu.cn)"

PORTAL_LOGIN_URL = "http://p2.nju.edu.cn/api/portal/v1/login"
PORTAL_LOGOUT_URL = "http://p2.nju.edu.cn/portal_io/logout"
PROBE_URL = "https://www.gitee.com"

PORTAL_HEADERS: Dict[str, str] = {
    "accept": "application/json, text/plain, */*",
    "user-agent": USER_AGENT,
}

PROBE_HEADERS: Dict[str, str] = {
    "user-agent": USER_AGENT,
    "accept": "*/*",
}


class PortalTransportError(Exception):
    """Raised when a portal request never produced an HTTP response."""


class HttpClient:
    """Blocking portal requests plus an async session for short probes."""

    def __init__(self, timeout: float = 10, probe_timeout: float = 1.5) -> None:
        self.timeout = timeout
        self.probe_timeout = probe_timeout
        self._portal_session = requests.Session()
        self._portal_session.headers.update(PORTAL_HEADERS)

        self._probe_session: Optional[aiohttp.ClientSession] = None
        self._probe_lock: Optional[asyncio.Lock] = None
        self._probe_loop: Optional[asyncio.AbstractEventLoop] = None

    def post_json(self, url: str, payload: Dict[str, Any]) -> str:
        """POST ``payload`` as JSON and return the raw response body."""

        try:
            response = self._portal_session.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            logging.error("HTTP POST to %s failed: %s", url, exc)
            raise PortalTransportError(str(exc)) from exc
        logging.debug("POST %s -> %s (%s bytes)", url, response.status_code, len(response.content))
        return response.text

    def get_text(self, url: str) -> str:
        """GET ``url`` and return the raw response body."""

        try:
            response = self._portal_session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            logging.error("HTTP GET to %s failed: %s", url, exc)
            raise PortalTransportError(str(exc)) from exc
        logging.debug("GET %s -> %s (%s bytes)", url, response.status_code, len(response.content))
        return response.text

    async def probe_status(self, url: str, method: str = "HEAD") -> int:
        """Issue a bounded request and return its final HTTP status."""

        session = await self._get_probe_session()
        async with session.request(method.upper(), url, allow_redirects=True) as resp:
            return resp.status

    async def _get_probe_session(self) -> aiohttp.ClientSession:
        current_loop = asyncio.get_running_loop()
        if self._probe_session:
            if (
                self._probe_session.closed
                or not self._probe_loop
                or self._probe_loop.is_closed()
                or self._probe_loop is not current_loop
            ):
                await self._shutdown_probe_session()

        if self._probe_lock is None:
            self._probe_lock = asyncio.Lock()

        async with self._probe_lock:
            if self._probe_session and not self._probe_session.closed:
                return self._probe_session
            timeout = aiohttp.ClientTimeout(total=self.probe_timeout)
            self._probe_session = aiohttp.ClientSession(
                timeout=timeout,
                headers=PROBE_HEADERS.copy(),
            )
            self._probe_loop = current_loop
        return self._probe_session

    async def _shutdown_probe_session(self) -> None:
        if self._probe_session:
            try:
                await self._probe_session.close()
            except aiohttp.ClientError as exc:  # pragma: no cover - best effort cleanup
                logging.debug("Closing probe session failed: %s", exc)
        self._probe_session = None
        self._probe_loop = None

    async def aclose(self) -> None:
        """Close both sessions from inside a running loop."""

        self._portal_session.close()
        await self._shutdown_probe_session()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.aclose()
