# tests/conftest.py
from __future__ import annotations

import json
from typing import Any, List

import httpx
import pytest
from fastapi.testclient import TestClient

# With src/ layout and `pip install -e .`, we can import the app package directly:
from poshanix_proxy.app import create_app
from poshanix_proxy.core.config import Settings


class UpstreamStub:
    """
    Stands in for the LLM vendor. Answers every call with `body`
    (or raises it, when it's an exception) and keeps the requests it saw.
    """

    def __init__(self) -> None:
        self.body: Any = {}
        self.status_code = 200
        self.requests: List[httpx.Request] = []

    def reply_text(self, content: str) -> None:
        self.body = {"choices": [{"message": {"role": "assistant", "content": content}}]}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.body, Exception):
            raise self.body
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last_payload(self) -> Any:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def upstream() -> UpstreamStub:
    return UpstreamStub()


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key="sk-test", api_type="openai")


@pytest.fixture
def client(settings: Settings, upstream: UpstreamStub) -> TestClient:
    app = create_app(settings, transport=httpx.MockTransport(upstream))
    return TestClient(app)
