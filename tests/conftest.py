"""
Pytest configuration and shared fixtures.
"""
import json

import httpx
import pytest

from browserless_client import BrowserlessClient, BrowserlessConfig


class RecordingHandler:
    """httpx.MockTransport handler that records requests and replays a canned response."""

    def __init__(self, response=None, exc=None):
        self.requests = []
        self.response = response if response is not None else httpx.Response(200, json={})
        self.exc = exc

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        return httpx.Response(
            self.response.status_code,
            headers=self.response.headers,
            content=self.response.content,
        )

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


@pytest.fixture
def config():
    """Configuration pointing at a local Browserless instance."""
    return BrowserlessConfig(token="T", protocol="http", host="localhost", port=3000, timeout=5.0)


@pytest.fixture
def make_client(config):
    """Factory building a client whose HTTP traffic goes to a RecordingHandler."""
    def factory(response=None, exc=None, cfg=None):
        handler = RecordingHandler(response=response, exc=exc)
        client = BrowserlessClient(cfg or config, transport=httpx.MockTransport(handler))
        return client, handler

    return factory


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (requires a Browserless instance)"
    )
