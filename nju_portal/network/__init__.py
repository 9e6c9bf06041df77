"""Network signals: identity lookup, reachability, and change polling."""

from .identity import NetworkIdentityProvider, StaticIdentityProvider, SystemIdentityProvider, normalize_identity
from .reachability import ReachabilityProber
from .watcher import NetworkWatcher

__all__ = [
    "NetworkIdentityProvider",
    "StaticIdentityProvider",
    "SystemIdentityProvider",
    "normalize_identity",
    "ReachabilityProber",
    "NetworkWatcher",
]
