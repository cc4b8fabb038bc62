"""
pytest shared fixtures

Settings builders and a stub kweenkl API that records every request.
"""

import json

import httpx
import pytest

from core.config import Settings

API_URL = "https://api.test.kweenkl.com"
DEVICE_TOKEN = "device-token-0123456789"


# ================================================================
# Environment isolation
# ================================================================

@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's real KWEENKL_* variables out of the tests."""
    for name in (
        "KWEENKL_API_URL",
        "KWEENKL_DEVICE_TOKEN",
        "KWEENKL_DEBUG",
        "KWEENKL_REQUEST_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


def make_settings(**overrides) -> Settings:
    values = {"api_url": API_URL, "device_token": None}
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings():
    """No device token: only the send tool is available."""
    return make_settings()


@pytest.fixture
def admin_settings():
    """Device token configured: channel management is available."""
    return make_settings(device_token=DEVICE_TOKEN)


# ================================================================
# Stub kweenkl API
# ================================================================

class StubApi:
    """Answers every request with one canned response and records it."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.json_body = {}
        self.text = None
        self.error = None

    def respond(self, status_code=200, json_body=None, text=None):
        self.status_code = status_code
        self.json_body = json_body if json_body is not None else {}
        self.text = text

    def fail(self, error: Exception):
        self.error = error

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.json_body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_body(self):
        return json.loads(self.last_request.content)


@pytest.fixture
def stub_api():
    return StubApi()
