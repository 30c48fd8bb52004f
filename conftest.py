"""Shared fixtures for the test suite."""
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from backend import create_app
from config import Settings
from gateway import AIGateway
from rate_limit import FixedWindowRateLimiter

AI_CONFIG = {
    "apiKey": "sk-test",
    "baseUrl": "https://api.example.com/v1",
    "model": "test-model",
}


class FakeLLM:
    """Stands in for the chat-completion provider and records every request."""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.content = "[]"
        self.body = None

    def reply(self, content):
        self.content = content if isinstance(content, str) else json.dumps(content, ensure_ascii=False)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.body is not None:
            return httpx.Response(self.status_code, json=self.body)
        return httpx.Response(self.status_code, json={
            "choices": [{"message": {"role": "assistant", "content": self.content}}],
        })

    @property
    def last_payload(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture()
def ai_config():
    return dict(AI_CONFIG)


@pytest.fixture()
def settings():
    return Settings(rate_limit_max=1000)


@pytest.fixture()
def fake_llm():
    return FakeLLM()


@pytest.fixture()
def gateway(settings, fake_llm):
    return AIGateway(settings, transport=httpx.MockTransport(fake_llm.handler))


@pytest.fixture()
def client(settings, gateway):
    app = create_app(settings, gateway=gateway)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def make_client(fake_llm):
    """Build a TestClient around custom settings or a custom limiter."""
    def _make(settings=None, limiter=None, raise_server_exceptions=True):
        settings = settings or Settings(rate_limit_max=1000)
        gw = AIGateway(settings, transport=httpx.MockTransport(fake_llm.handler))
        app = create_app(settings, gateway=gw, limiter=limiter)
        return TestClient(app, raise_server_exceptions=raise_server_exceptions)
    return _make


@pytest.fixture()
def manual_clock():
    class Clock:
        now = 0.0

        def __call__(self):
            return self.now

    return Clock()


@pytest.fixture()
def limiter_factory(manual_clock):
    def _make(max_requests=2, window=60):
        return FixedWindowRateLimiter(max_requests=max_requests, window=window, clock=manual_clock)
    return _make
