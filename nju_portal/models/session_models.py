"""State owned by the auto-auth orchestrator and the events it emits."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class ReadyTrigger(str, Enum):
    PERMISSION_GRANTED = "permission_granted"
    PERMISSION_DENIED = "permission_denied"
    FOREGROUND = "foreground"
    NETWORK_CHANGED = "network_changed"


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class NotificationAction(str, Enum):
    OPEN_NETWORK_SETTINGS = "open_network_settings"


class Notification(BaseModel):
    """One-shot message for the presentation layer."""

    text: str
    severity: Severity = Severity.INFO
    action: Optional[NotificationAction] = None


class AuthSession(BaseModel):
    """Process-lifetime guard for automatic login attempts.

    ``auto_attempt_made`` only changes through the named transitions below so
    that an automatic failure can never re-arm the guard.
    """

    auto_attempt_made: bool = False

    def mark_auto_attempt(self) -> None:
        self.auto_attempt_made = True

    def reset_after_manual_login(self) -> None:
        self.auto_attempt_made = False

    def reset_after_logout(self) -> None:
        self.auto_attempt_made = False


class ControlState(BaseModel):
    """What the presentation layer shows: controls, fields and status text."""

    login_enabled: bool = True
    logout_enabled: bool = True
    credentials_editable: bool = True
    username: str = ""
    password: str = ""
    status: str = ""
    login_in_flight: bool = False
    logout_in_flight: bool = False
