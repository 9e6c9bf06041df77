"""Models for credentials, the login payload, and gateway replies."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel


class Credentials(BaseModel):
    """A single stored username/password pair."""

    username: str = ""
    password: str = ""

    @property
    def is_valid(self) -> bool:
        return bool(self.username.strip()) and bool(self.password.strip())


class LoginRequest(BaseModel):
    """JSON body accepted by the portal login endpoint."""

    domain: Literal["default"] = "default"
    username: str
    password: str


class PortalResults(BaseModel):
    io_reply_msg: Optional[str] = None


class PortalReply(BaseModel):
    """Raw shape of a gateway reply; unknown fields are ignored."""

    reply_code: int = -1
    reply_msg: Optional[str] = None
    results: Optional[PortalResults] = None


class PortalOutcome(BaseModel):
    """Result of a login or logout call, always safe to show to the user."""

    success: bool
    message: str
