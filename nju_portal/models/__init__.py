"""Data models for credentials, gateway replies, and orchestrator state."""

from .auth_models import Credentials, LoginRequest, PortalOutcome, PortalReply, PortalResults
from .session_models import (
    AuthSession,
    ControlState,
    Notification,
    NotificationAction,
    ReadyTrigger,
    Severity,
)

__all__ = [
    "Credentials",
    "LoginRequest",
    "PortalOutcome",
    "PortalReply",
    "PortalResults",
    "AuthSession",
    "ControlState",
    "Notification",
    "NotificationAction",
    "ReadyTrigger",
    "Severity",
]
