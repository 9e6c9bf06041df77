from __future__ import annotations

import argparse
import asyncio
import logging
import os

from dotenv import load_dotenv

from .api.portal_api import PortalAPI
from .models import Notification, ReadyTrigger, Severity
from .network.identity import StaticIdentityProvider, SystemIdentityProvider
from .network.reachability import ReachabilityProber
from .network.watcher import NetworkWatcher
from .orchestrator import DEFAULT_TARGET_NETWORK, AutoAuthOrchestrator
from .utils.credential_store import DEFAULT_CREDENTIALS_PATH, CredentialStore
from .utils.http_client import PORTAL_LOGIN_URL, PORTAL_LOGOUT_URL, PROBE_URL, HttpClient

load_dotenv()


def _env_str(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    return value


def _env_float(name: str) -> float | None:
    value = _env_str(name)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _env_bool(name: str) -> bool:
    value = _env_str(name)
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Authenticate against the NJU campus network portal.")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--login", action="store_true", help="Log in now (user-initiated, ignores the one-shot guard)")
    mode.add_argument("--logout", action="store_true", help="Log out and forget the saved account")
    mode.add_argument("--watch", action="store_true", help="Keep running and re-check whenever the network changes")
    parser.add_argument("--username", default=_env_str("PORTAL_USERNAME"), help="Portal username for --login")
    parser.add_argument("--password", default=_env_str("PORTAL_PASSWORD"), help="Portal password for --login")
    parser.add_argument(
        "--target-network",
        default=_env_str("TARGET_NETWORK") or DEFAULT_TARGET_NETWORK,
        help="SSID that must be associated before authenticating",
    )
    parser.add_argument(
        "--assume-network",
        default=_env_str("ASSUME_NETWORK"),
        help="Skip SSID detection and pretend this network is associated",
    )
    parser.add_argument(
        "--no-network-detection",
        action="store_true",
        default=_env_bool("NO_NETWORK_DETECTION"),
        help="Treat the current network as unknown (as if detection were not permitted)",
    )
    parser.add_argument("--login-url", default=_env_str("PORTAL_LOGIN_URL") or PORTAL_LOGIN_URL, help="Portal login endpoint")
    parser.add_argument("--logout-url", default=_env_str("PORTAL_LOGOUT_URL") or PORTAL_LOGOUT_URL, help="Portal logout endpoint")
    parser.add_argument("--probe-url", default=_env_str("PROBE_URL") or PROBE_URL, help="External host used to test connectivity")
    parser.add_argument(
        "--probe-method",
        choices=["HEAD", "GET"],
        default=(_env_str("PROBE_METHOD") or "HEAD").upper(),
        help="HTTP method for the connectivity probe",
    )
    parser.add_argument(
        "--probe-timeout",
        type=float,
        default=_env_float("PROBE_TIMEOUT") or 1.5,
        help="Connectivity probe timeout in seconds",
    )
    parser.add_argument(
        "--http-timeout",
        type=float,
        default=_env_float("HTTP_TIMEOUT") or 10.0,
        help="Portal request timeout in seconds",
    )
    credentials_env = _env_str("CREDENTIALS_FILE")
    parser.add_argument(
        "--credentials-file",
        default=os.path.expanduser(credentials_env) if credentials_env else DEFAULT_CREDENTIALS_PATH,
        help="File that keeps the portal account between runs",
    )
    parser.add_argument(
        "--watch-interval",
        type=float,
        default=_env_float("WATCH_INTERVAL") or 5.0,
        help="Seconds between network checks in --watch mode",
    )
    parser.add_argument("--verbose", action="store_true", default=_env_bool("VERBOSE"), help="Enable debug logging")
    return parser.parse_args(argv)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


class ConsolePresenter:
    """Renders orchestrator output as log lines."""

    _LEVELS = {
        Severity.INFO: logging.INFO,
        Severity.WARNING: logging.WARNING,
        Severity.ERROR: logging.ERROR,
    }

    def on_status(self, text: str) -> None:
        for line in text.splitlines():
            if line.strip():
                logging.info("%s", line)

    def on_notification(self, notification: Notification) -> None:
        logging.log(self._LEVELS[notification.severity], ">> %s", notification.text)
        if notification.action:
            logging.info("   (open your system network settings to switch networks)")


def build_orchestrator(args: argparse.Namespace, http_client: HttpClient) -> AutoAuthOrchestrator:
    if args.assume_network:
        identity_provider = StaticIdentityProvider(args.assume_network)
    else:
        identity_provider = SystemIdentityProvider()

    orchestrator = AutoAuthOrchestrator(
        portal=PortalAPI(http_client, login_url=args.login_url, logout_url=args.logout_url),
        identity_provider=identity_provider,
        prober=ReachabilityProber(http_client, url=args.probe_url, method=args.probe_method),
        store=CredentialStore(args.credentials_file),
        listener=ConsolePresenter(),
        target_network=args.target_network,
    )
    return orchestrator


async def _run(args: argparse.Namespace) -> None:
    async with HttpClient(timeout=args.http_timeout, probe_timeout=args.probe_timeout) as http_client:
        orchestrator = build_orchestrator(args, http_client)
        ready = ReadyTrigger.PERMISSION_DENIED if args.no_network_detection else ReadyTrigger.PERMISSION_GRANTED
        orchestrator.set_identity_permission(not args.no_network_detection)

        if args.login:
            await orchestrator.request_login(args.username, args.password)
            return

        if args.logout:
            await orchestrator.request_logout()
            return

        await orchestrator.become_ready(ready)
        if not args.watch:
            return

        stop_event = asyncio.Event()
        watcher = NetworkWatcher(orchestrator, interval=args.watch_interval)
        logging.info("Watching for network changes every %ss (Ctrl+C to stop)", args.watch_interval)
        await watcher.run(stop_event)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    configure_logging(args.verbose)
    try:
        asyncio.run(_run(args))
    except KeyboardInterrupt:
        logging.info("Stopped.")


if __name__ == "__main__":
    main()
