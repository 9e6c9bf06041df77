"""Portal HTTP transport."""

import asyncio
from unittest.mock import Mock

import pytest
import requests

from nju_portal.utils.http_client import HttpClient, PortalTransportError


def test_post_json_returns_body_regardless_of_status():
    client = HttpClient(timeout=3)
    response = Mock(status_code=500, text='{"reply_code":1}', content=b'{"reply_code":1}')
    client._portal_session = Mock()
    client._portal_session.post.return_value = response

    assert client.post_json("http://gw/login", {"a": 1}) == '{"reply_code":1}'
    client._portal_session.post.assert_called_once_with("http://gw/login", json={"a": 1}, timeout=3)


def test_request_errors_are_wrapped():
    client = HttpClient()
    client._portal_session = Mock()
    client._portal_session.get.side_effect = requests.ConnectionError("refused")

    with pytest.raises(PortalTransportError, match="refused"):
        client.get_text("http://gw/logout")


def test_async_context_closes_sessions():
    async def scenario():
        async with HttpClient() as client:
            session = await client._get_probe_session()
            portal_session = client._portal_session
            portal_session.close = Mock()
        return client, session, portal_session

    client, session, portal_session = asyncio.run(scenario())

    assert session.closed is True
    assert client._probe_session is None
    portal_session.close.assert_called_once_with()
