"""API layer for the portal gateway."""

from .portal_api import PortalAPI, parse_portal_reply

__all__ = ["PortalAPI", "parse_portal_reply"]
