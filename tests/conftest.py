"""Shared fakes and fixtures for orchestrator and client tests."""

import asyncio

import pytest

from nju_portal.models import PortalOutcome
from nju_portal.network.identity import StaticIdentityProvider
from nju_portal.orchestrator import AutoAuthOrchestrator
from nju_portal.utils.credential_store import CredentialStore


class FakePortal:
    """Records calls and answers with preset outcomes."""

    def __init__(self):
        self.login_calls = []
        self.logout_calls = 0
        self.login_outcome = PortalOutcome(success=True, message="login ok")
        self.logout_outcome = PortalOutcome(success=True, message="logout ok")

    async def login(self, username, password):
        self.login_calls.append((username, password))
        await asyncio.sleep(0)
        return self.login_outcome

    async def logout(self):
        self.logout_calls += 1
        await asyncio.sleep(0)
        return self.logout_outcome


class FakeProber:
    def __init__(self, reachable=False):
        self.reachable = reachable
        self.calls = 0

    async def is_reachable(self):
        self.calls += 1
        await asyncio.sleep(0)
        return self.reachable


class RecordingListener:
    def __init__(self):
        self.statuses = []
        self.notifications = []

    def on_status(self, text):
        self.statuses.append(text)

    def on_notification(self, notification):
        self.notifications.append(notification)


@pytest.fixture
def portal():
    return FakePortal()


@pytest.fixture
def prober():
    return FakeProber()


@pytest.fixture
def listener():
    return RecordingListener()


@pytest.fixture
def store(tmp_path):
    return CredentialStore(str(tmp_path / "credentials.json"))


@pytest.fixture
def identity():
    return StaticIdentityProvider("NJU-WLAN")


@pytest.fixture
def orchestrator(portal, identity, prober, store, listener):
    return AutoAuthOrchestrator(
        portal=portal,
        identity_provider=identity,
        prober=prober,
        store=store,
        listener=listener,
        target_network="NJU-WLAN",
    )
