"""Decides when to authenticate against the portal and what to tell the user.

All methods are coroutines meant to run on a single asyncio event loop. Portal
calls and probes are awaited, so their results are always applied back on
that loop; no locking is needed around the session guard or control state.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from .api.portal_api import EMPTY_RESPONSE_MESSAGE, PortalAPI
from .models import (
    AuthSession,
    ControlState,
    Credentials,
    Notification,
    NotificationAction,
    PortalOutcome,
    ReadyTrigger,
    Severity,
)
from .network.identity import NetworkIdentityProvider, normalize_identity
from .network.reachability import ReachabilityProber
from .utils.credential_store import CredentialStore

DEFAULT_TARGET_NETWORK = "NJU-WLAN"

PROXY_REMEDIATION_MESSAGE = (
    "Network error detected, most likely caused by a proxy server. "
    "Disable any HTTP(S) proxy and try again."
)
PERMISSION_DENIED_REASON = "Permission to read the current network was not granted."


class StatusListener(Protocol):
    def on_status(self, text: str) -> None:
        ...

    def on_notification(self, notification: Notification) -> None:
        ...


class AutoAuthOrchestrator:
    def __init__(
        self,
        portal: PortalAPI,
        identity_provider: NetworkIdentityProvider,
        prober: ReachabilityProber,
        store: CredentialStore,
        listener: StatusListener,
        target_network: str = DEFAULT_TARGET_NETWORK,
    ) -> None:
        self._portal = portal
        self._identity = identity_provider
        self._prober = prober
        self._store = store
        self._listener = listener
        self.target_network = target_network
        self.session = AuthSession()
        self.controls = ControlState()
        self.identity_permitted = True

    # ------------------------------------------------------------------
    # Signals
    # ------------------------------------------------------------------
    def read_identity(self) -> Optional[str]:
        """Current network name, or ``None`` when it cannot be determined."""

        if not self.identity_permitted:
            return None
        try:
            return normalize_identity(self._identity.current_identity())
        except Exception as exc:  # pragma: no cover - provider bugs degrade to unknown
            logging.warning("Network identity lookup failed: %s", exc)
            return None

    def set_identity_permission(self, granted: bool) -> None:
        """Record the outcome of the permission prompt for reading the network."""

        if granted != self.identity_permitted:
            logging.info("Network identity permission %s", "granted" if granted else "denied")
        self.identity_permitted = granted

    def unavailable_reason(self) -> str:
        if not self.identity_permitted:
            return PERMISSION_DENIED_REASON
        try:
            return self._identity.unavailable_reason()
        except Exception as exc:  # pragma: no cover
            logging.debug("Unable to describe identity failure: %s", exc)
            return "The current network could not be detected."

    def _stored_credentials(self) -> Credentials:
        username, password = self._store.load()
        return Credentials(username=username or "", password=password or "")

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    def _status(self, text: str) -> None:
        self.controls.status = text
        logging.debug("Status: %s", text.replace("\n", " "))
        self._listener.on_status(text)

    def _notify(
        self,
        text: str,
        severity: Severity = Severity.INFO,
        action: Optional[NotificationAction] = None,
    ) -> None:
        self._listener.on_notification(Notification(text=text, severity=severity, action=action))

    def _enter_manual_confirm(self, message: Optional[str] = None) -> None:
        self._status(
            message
            or (
                "Unable to determine the current network automatically.\n"
                f"Make sure you are connected to {self.target_network}, then use login or logout manually."
            )
        )

    def _off_target_status(self, identity: str, action: str) -> None:
        self._status(f"Current network: {identity}.\nNot connected to {self.target_network}, cannot {action}.")

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------
    async def become_ready(self, trigger: ReadyTrigger = ReadyTrigger.FOREGROUND) -> None:
        """Re-evaluate everything after a lifecycle or network event."""

        logging.debug("Ready trigger: %s", trigger.value)
        if trigger is ReadyTrigger.PERMISSION_DENIED:
            self.set_identity_permission(False)
        elif trigger is ReadyTrigger.PERMISSION_GRANTED:
            self.set_identity_permission(True)

        self._prefill_from_store()

        if self.identity_permitted and self._identity.radio_enabled() is False:
            self._status("Wi-Fi is turned off. Turn it on first.")
            self._notify(
                "Wi-Fi is turned off.",
                Severity.WARNING,
                NotificationAction.OPEN_NETWORK_SETTINGS,
            )
            return

        identity = self.read_identity()
        if identity == self.target_network:
            self._status(f"Connected to {self.target_network}, authenticating...")
            await self._auto_login_if_possible()
        elif identity is not None:
            self._status(
                f"Current network: {identity}.\n"
                f"Connect to {self.target_network} first, then come back."
            )
            self._notify(
                f"Not connected to {self.target_network}. Open the network settings to switch.",
                Severity.WARNING,
                NotificationAction.OPEN_NETWORK_SETTINGS,
            )
        else:
            self._status("Unable to read the current network.\nChecking whether authentication is needed...")
            await self._maybe_auto_login_without_identity()

    async def request_login(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> Optional[PortalOutcome]:
        """User pressed login; credentials replace the fields while editable."""

        if not self.controls.username and not self.controls.password:
            self._prefill_from_store()
        if self.controls.credentials_editable:
            if username is not None:
                self.controls.username = username
            if password is not None:
                self.controls.password = password
        elif username is not None or password is not None:
            logging.info("Credentials are locked; using the stored account")
        return await self._login(auto=False)

    async def request_logout(self) -> Optional[PortalOutcome]:
        identity = self.read_identity()
        if identity is not None and identity != self.target_network:
            self._off_target_status(identity, "log out")
            self._notify(f"Log out while connected to {self.target_network}.", Severity.WARNING)
            return None

        if identity is None:
            self._status(
                "Unable to read the current network, trying to log out anyway.\n"
                f"Make sure you are connected to {self.target_network}."
            )

        if not self._store.has_valid_credentials():
            self._status("No saved account found, nothing to log out.")
            return None

        if self.controls.logout_in_flight:
            logging.info("Logout already in progress; ignoring request")
            return None

        self.controls.logout_in_flight = True
        self.controls.logout_enabled = False
        self._status("Logging out...")
        try:
            outcome = await self._portal.logout()
        finally:
            self.controls.logout_in_flight = False
            self.controls.logout_enabled = True

        if outcome.success:
            self._store.clear()
            self.controls.username = ""
            self.controls.password = ""
            self.controls.credentials_editable = True
            self.controls.login_enabled = True
            self.session.reset_after_logout()
            self._status("Logged out and cleared the saved account.")
            self._notify("Logged out.")
        else:
            self._status(f"Logout failed: {outcome.message}")
            self._notify(f"Logout failed: {outcome.message}", Severity.ERROR)
        return outcome

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _prefill_from_store(self) -> None:
        stored = self._stored_credentials()
        if stored.username:
            self.controls.username = stored.username
        if stored.password:
            self.controls.password = stored.password
        if stored.is_valid:
            self.controls.credentials_editable = False

    async def _auto_login_if_possible(self) -> None:
        if self.session.auto_attempt_made:
            self._enter_manual_confirm(
                "Automatic authentication was already attempted in this session.\n"
                "Use login manually if you are still offline."
            )
            return

        stored = self._stored_credentials()
        if not stored.is_valid:
            self._status(
                f"Connected to {self.target_network}. Enter your username and password, then log in."
            )
            return

        self.session.mark_auto_attempt()
        self.controls.username = stored.username
        self.controls.password = stored.password
        await self._login(auto=True)

    async def _maybe_auto_login_without_identity(self) -> None:
        stored = self._stored_credentials()
        reason = self.unavailable_reason()

        if not stored.is_valid or self.session.auto_attempt_made:
            self._enter_manual_confirm(
                f"{reason}\nMake sure you are connected to {self.target_network}, then log in or out manually."
            )
            return

        # Set before probing so a slow probe or a re-entrant event cannot attempt twice.
        self.session.mark_auto_attempt()
        self._status("Checking internet connectivity...")

        if await self._prober.is_reachable():
            self._enter_manual_confirm(
                "The network already reaches the internet, no authentication needed.\n"
                f"If you are still offline, make sure you are on {self.target_network} and log in manually."
            )
            return

        self._status("The network is not connected yet, attempting automatic authentication...")
        self.controls.username = stored.username
        self.controls.password = stored.password
        await self._login(auto=True)

    async def _login(self, auto: bool) -> Optional[PortalOutcome]:
        identity = self.read_identity()

        if identity is not None and identity != self.target_network:
            self.controls.login_enabled = True
            self._off_target_status(identity, "authenticate")
            if not auto:
                self._notify(
                    f"Connect to {self.target_network} before logging in.",
                    Severity.WARNING,
                    NotificationAction.OPEN_NETWORK_SETTINGS,
                )
            return None

        if identity is None:
            self._status(
                "Unable to read the current network.\n"
                f"Make sure you are connected to {self.target_network} before logging in."
            )

        if self.controls.login_in_flight:
            logging.info("Login already in progress; ignoring %s request", "automatic" if auto else "manual")
            return None

        if not self.controls.login_enabled:
            self._status("Already authenticated in this session. Log out first to log in again.")
            if not auto:
                self._notify("Already authenticated.", Severity.WARNING)
            return None

        username = self.controls.username.strip()
        password = self.controls.password.strip()
        if not username or not password:
            if not auto:
                self._notify("Enter your username and password first.", Severity.WARNING)
            return None

        self.controls.login_in_flight = True
        self.controls.login_enabled = False
        self._status("Authenticating automatically..." if auto else "Authenticating...")
        try:
            outcome = await self._portal.login(username, password)
        finally:
            self.controls.login_in_flight = False
            self.controls.login_enabled = True

        self._status(outcome.message)
        if not outcome.success and outcome.message == EMPTY_RESPONSE_MESSAGE:
            self._notify(PROXY_REMEDIATION_MESSAGE, Severity.ERROR)
            self.controls.credentials_editable = True
            return outcome

        if outcome.success:
            self._on_login_success(username, password, auto)
        else:
            self._on_login_failure(outcome, auto)
        return outcome

    def _on_login_success(self, username: str, password: str, auto: bool) -> None:
        self._store.save(username, password)
        self.controls.credentials_editable = False
        if auto:
            # Already authenticated; keep the control off so nothing resubmits.
            self.controls.login_enabled = False
        else:
            self.session.reset_after_manual_login()
        self._notify("Automatic authentication succeeded!" if auto else "Authentication succeeded!")

    def _on_login_failure(self, outcome: PortalOutcome, auto: bool) -> None:
        if not auto:
            self.controls.credentials_editable = True
            self._notify(f"Authentication failed: {outcome.message}", Severity.ERROR)
            return

        if self.read_identity() is None:
            self._status(
                f"{self.unavailable_reason()}\n"
                f"Make sure you are connected to {self.target_network}, then log in manually."
            )
        else:
            self._status(
                f"Automatic authentication failed: {outcome.message}\n\n"
                f"Make sure you are connected to {self.target_network}, then log in manually."
            )
