"""Utility helpers for HTTP and credential storage."""

from .credential_store import CredentialStore
from .http_client import HttpClient, PortalTransportError

__all__ = ["CredentialStore", "HttpClient", "PortalTransportError"]
