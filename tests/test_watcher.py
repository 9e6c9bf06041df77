"""Network change polling."""

import asyncio

from nju_portal.network.watcher import NetworkWatcher


def test_change_triggers_ready(orchestrator, identity, portal, store):
    store.save("alice", "secret")
    identity.identity = "eduroam"
    watcher = NetworkWatcher(orchestrator, interval=0.01)

    async def scenario():
        assert await watcher.check_once() is True
        assert await watcher.check_once() is False
        identity.identity = "NJU-WLAN"
        assert await watcher.check_once() is True

    asyncio.run(scenario())
    assert portal.login_calls == [("alice", "secret")]


def test_run_stops_on_event(orchestrator):
    watcher = NetworkWatcher(orchestrator, interval=0.01)

    async def scenario():
        stop_event = asyncio.Event()
        task = asyncio.create_task(watcher.run(stop_event))
        await asyncio.sleep(0.05)
        stop_event.set()
        await asyncio.wait_for(task, timeout=1)

    asyncio.run(scenario())
