"""Pytest fixtures for the item finder tests.

The chat-completion API is faked with httpx.MockTransport: responses are
queued up front and every request is recorded for assertions.
"""
import json
from typing import Any, Optional

import httpx
import pytest

from shared.config import Settings, get_settings
from item_finder import ItemFinder


API_URL = "https://api.openai.com/v1/chat/completions"


def completion(content: Any, status_code: int = 200) -> httpx.Response:
    """Chat-completion response whose message content is `content` encoded as JSON."""
    if not isinstance(content, str):
        content = json.dumps(content)
    return httpx.Response(
        status_code,
        json={"choices": [{"message": {"role": "assistant", "content": content}}]},
    )


class FakeApi:
    """Queue of canned responses plus a log of the requests that consumed them."""

    def __init__(self):
        self.responses: list[httpx.Response] = []
        self.requests: list[httpx.Request] = []

    def push(self, response: httpx.Response) -> "FakeApi":
        self.responses.append(response)
        return self

    def push_content(self, content: Any) -> "FakeApi":
        return self.push(completion(content))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"Unexpected request to {request.url}")
        return self.responses.pop(0)

    def body(self, index: int = 0) -> dict:
        return json.loads(self.requests[index].content)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("AI_ITEM_FINDER_OPENAI_API_KEY", "AI_ITEM_FINDER_OPENAI_MODEL", "AI_ITEM_FINDER_OPENAI_API_URL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        openai_api_key="test-api-key",
        openai_model="gpt-4o-mini",
        openai_api_url=API_URL,
    )


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def make_finder(settings, fake_api):
    def _make(settings_override: Optional[Settings] = None, **kwargs) -> ItemFinder:
        return ItemFinder(settings_override or settings, http_client=fake_api.client(), **kwargs)

    return _make


@pytest.fixture
def finder(make_finder) -> ItemFinder:
    return make_finder()
