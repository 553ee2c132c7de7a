"""Shared fixtures for Cronofy client tests."""

import json

import httpx
import pytest

from cronofy import Client

API_URL = "https://api.cronofy.test"
APP_URL = "https://app.cronofy.test"


class RecordingHandler:
    """MockTransport handler that records every request it receives."""

    def __init__(self, handler=None):
        self.handler = handler or (lambda request: httpx.Response(200, json={}))
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


@pytest.fixture
def make_client():
    """Build a Client wired to a recording mock transport."""

    def _make(handler=None, access_token="access-1", refresh_token="refresh-1"):
        recorder = RecordingHandler(handler)
        client = Client(
            "client-id",
            "client-secret",
            access_token=access_token,
            refresh_token=refresh_token,
            api_url=API_URL,
            app_url=APP_URL,
            transport=httpx.MockTransport(recorder),
        )
        return client, recorder

    return _make
