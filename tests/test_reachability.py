"""Connectivity probe outcomes."""

import asyncio
from unittest.mock import AsyncMock, Mock

import aiohttp
import pytest

from nju_portal.network.reachability import ReachabilityProber
from nju_portal.utils.http_client import HttpClient


def _prober(**probe_kwargs):
    http_client = Mock(spec=HttpClient)
    http_client.probe_status = AsyncMock(**probe_kwargs)
    return ReachabilityProber(http_client, url="https://example.org", method="HEAD"), http_client


@pytest.mark.parametrize("status, expected", [(200, True), (204, True), (302, False), (503, False)])
def test_status_codes(status, expected):
    prober, _ = _prober(return_value=status)
    assert asyncio.run(prober.is_reachable()) is expected


@pytest.mark.parametrize(
    "error",
    [asyncio.TimeoutError(), aiohttp.ClientConnectionError("refused"), OSError("no route")],
)
def test_errors_mean_unreachable(error):
    prober, _ = _prober(side_effect=error)
    assert asyncio.run(prober.is_reachable()) is False


def test_uses_configured_target():
    prober, http_client = _prober(return_value=200)
    asyncio.run(prober.is_reachable())
    http_client.probe_status.assert_awaited_once_with("https://example.org", "HEAD")
