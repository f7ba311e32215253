"""
Tests for WebSocket endpoint negotiation and the reachability probe.

Run with: pytest tests/test_websocket.py -v
"""
import asyncio
import re
from unittest.mock import MagicMock, patch

import pytest
import websockets

from browserless_client import (
    BrowserlessConfig,
    WebSocketOptions,
    WebSocketResponse,
    build_ws_endpoint,
)


class FakeConnection:
    """Stand-in for the websockets connect() context manager."""

    def __init__(self, exc=None, delay=0.0):
        self.exc = exc
        self.delay = delay
        self.opened = False
        self.closed = False

    async def __aenter__(self):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.exc is not None:
            raise self.exc
        self.opened = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.closed = True
        return False


# =============================================================================
# Endpoint computation
# =============================================================================

class TestEndpoint:
    """Tests for build_ws_endpoint."""

    def test_puppeteer_endpoint(self, config):
        endpoint = build_ws_endpoint(config, WebSocketOptions(browser="chromium", library="puppeteer"))
        assert endpoint == "ws://localhost:3000?token=T"

    def test_playwright_endpoint(self, config):
        endpoint = build_ws_endpoint(config, WebSocketOptions(browser="firefox", library="playwright"))
        assert endpoint == "ws://localhost:3000/firefox/playwright?token=T"

    def test_defaults_are_chromium_puppeteer(self, config):
        assert build_ws_endpoint(config, WebSocketOptions()) == "ws://localhost:3000?token=T"

    def test_token_is_percent_encoded(self):
        cfg = BrowserlessConfig(token="a b&c", host="localhost", port=3000)
        assert build_ws_endpoint(cfg, WebSocketOptions()) == "ws://localhost:3000?token=a%20b%26c"

    def test_unknown_library_rejected(self, config):
        with pytest.raises(ValueError, match="Unsupported library"):
            build_ws_endpoint(config, WebSocketOptions(library="selenium"))

    def test_unknown_browser_rejected(self, config):
        with pytest.raises(ValueError, match="Unsupported browser"):
            build_ws_endpoint(config, WebSocketOptions(browser="netscape", library="playwright"))


# =============================================================================
# Reachability probe
# =============================================================================

class TestProbe:
    """Tests for create_websocket_connection."""

    @pytest.mark.asyncio
    async def test_successful_probe_closes_socket(self, make_client):
        client, _ = make_client()
        connection = FakeConnection()

        with patch("browserless_client.client.connect", MagicMock(return_value=connection)) as mock_connect:
            result = await client.create_websocket_connection()

        assert result.success
        assert result.error is None
        assert isinstance(result.data, WebSocketResponse)
        assert result.data.browser_ws_endpoint == "ws://localhost:3000?token=T"
        assert re.fullmatch(r"session-\d+", result.data.session_id)
        assert connection.opened
        assert connection.closed
        mock_connect.assert_called_once_with("ws://localhost:3000?token=T", open_timeout=5.0)

    @pytest.mark.asyncio
    async def test_playwright_probe(self, make_client):
        client, _ = make_client()

        with patch("browserless_client.client.connect", MagicMock(return_value=FakeConnection())):
            result = await client.create_websocket_connection(
                WebSocketOptions(browser="webkit", library="playwright")
            )

        assert result.success
        assert result.data.to_dict()["browserWSEndpoint"] == "ws://localhost:3000/webkit/playwright?token=T"

    @pytest.mark.asyncio
    async def test_connection_refused(self, make_client):
        client, _ = make_client()
        refused = FakeConnection(exc=ConnectionRefusedError(111, "Connect call failed"))

        with patch("browserless_client.client.connect", MagicMock(return_value=refused)):
            result = await client.create_websocket_connection()

        assert not result.success
        assert result.data is None
        assert result.status_code is None
        assert result.error.startswith("WebSocket connection failed: ")
        assert "Connect call failed" in result.error

    @pytest.mark.asyncio
    async def test_handshake_rejected(self, make_client):
        client, _ = make_client()
        rejected = FakeConnection(exc=websockets.exceptions.InvalidHandshake("server rejected handshake"))

        with patch("browserless_client.client.connect", MagicMock(return_value=rejected)):
            result = await client.create_websocket_connection()

        assert result.error == "WebSocket connection failed: server rejected handshake"

    @pytest.mark.asyncio
    async def test_probe_times_out(self, make_client):
        cfg = BrowserlessConfig(token="T", host="localhost", port=3000, timeout=0.05)
        client, _ = make_client(cfg=cfg)
        hanging = FakeConnection(delay=5.0)

        with patch("browserless_client.client.connect", MagicMock(return_value=hanging)):
            result = await client.create_websocket_connection()

        assert not result.success
        assert result.error == "WebSocket connection failed: timed out after 0.05s"
        assert not hanging.opened

    @pytest.mark.asyncio
    async def test_unknown_library_does_not_connect(self, make_client):
        client, _ = make_client()

        with patch("browserless_client.client.connect") as mock_connect:
            result = await client.create_websocket_connection(WebSocketOptions(library="selenium"))

        assert not result.success
        assert "Unsupported library" in result.error
        mock_connect.assert_not_called()

    @pytest.mark.asyncio
    async def test_unexpected_error_is_caught(self, make_client):
        client, _ = make_client()

        with patch("browserless_client.client.connect", MagicMock(side_effect=RuntimeError("boom"))):
            result = await client.create_websocket_connection()

        assert not result.success
        assert result.error == "boom"
