"""Client for the NJU portal login/logout endpoints."""

from __future__ import annotations

import asyncio
import logging

from pydantic import ValidationError

from ..models import LoginRequest, PortalOutcome, PortalReply
from ..utils.http_client import (
    PORTAL_LOGIN_URL,
    PORTAL_LOGOUT_URL,
    HttpClient,
    PortalTransportError,
)

LOGIN_SUCCESS_CODE = 0
LOGOUT_SUCCESS_CODE = 101
SUCCESS_CODES = frozenset({LOGIN_SUCCESS_CODE, LOGOUT_SUCCESS_CODE})

LOGOUT_KEYWORDS = ("logout", "log out", "logged out")

GENERIC_SUCCESS_MESSAGE = "Operation succeeded."
GENERIC_LOGOUT_MESSAGE = "Logged out."
# An empty body almost always means an HTTP(S) proxy swallowed the reply.
EMPTY_RESPONSE_MESSAGE = "The gateway returned an empty response, possibly because of a proxy."
NETWORK_ERROR_PREFIX = "network error: "


def _non_blank(value: str | None) -> str | None:
    if value and value.strip():
        return value
    return None


def parse_portal_reply(body: str) -> PortalOutcome:
    """Decode a gateway reply body into a :class:`PortalOutcome`."""

    try:
        reply = PortalReply.model_validate_json(body)
    except ValidationError:
        return _parse_non_json(body)

    if reply.reply_code in SUCCESS_CODES:
        return PortalOutcome(success=True, message=_non_blank(reply.reply_msg) or GENERIC_SUCCESS_MESSAGE)

    detail = reply.results.io_reply_msg if reply.results else None
    message = _non_blank(detail) or _non_blank(reply.reply_msg) or body
    return PortalOutcome(success=False, message=message)


def _parse_non_json(body: str) -> PortalOutcome:
    lowered = body.lower()
    if any(keyword in lowered for keyword in LOGOUT_KEYWORDS):
        return PortalOutcome(success=True, message=GENERIC_LOGOUT_MESSAGE)
    if not body.strip():
        return PortalOutcome(success=False, message=EMPTY_RESPONSE_MESSAGE)
    return PortalOutcome(success=False, message=body)


class PortalAPI:
    """Sends credentials to the gateway and interprets its replies.

    The underlying requests are blocking; both operations run them in a worker
    thread so the caller's event loop is never stalled, and both resolve to a
    :class:`PortalOutcome` instead of raising.
    """

    def __init__(
        self,
        http_client: HttpClient,
        login_url: str = PORTAL_LOGIN_URL,
        logout_url: str = PORTAL_LOGOUT_URL,
    ) -> None:
        self._client = http_client
        self.login_url = login_url
        self.logout_url = logout_url

    async def login(self, username: str, password: str) -> PortalOutcome:
        payload = LoginRequest(username=username, password=password).model_dump()
        logging.info("Submitting portal login for %s", username)
        try:
            body = await asyncio.to_thread(self._client.post_json, self.login_url, payload)
        except PortalTransportError as exc:
            return PortalOutcome(success=False, message=f"{NETWORK_ERROR_PREFIX}{exc}")

        outcome = parse_portal_reply(body)
        logging.info("Portal login %s: %s", "succeeded" if outcome.success else "failed", outcome.message)
        return outcome

    async def logout(self) -> PortalOutcome:
        logging.info("Submitting portal logout")
        try:
            body = await asyncio.to_thread(self._client.get_text, self.logout_url)
        except PortalTransportError as exc:
            return PortalOutcome(success=False, message=f"{NETWORK_ERROR_PREFIX}{exc}")

        outcome = parse_portal_reply(body)
        logging.info("Portal logout %s: %s", "succeeded" if outcome.success else "failed", outcome.message)
        return outcome
