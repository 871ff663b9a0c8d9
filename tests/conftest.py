import asyncio

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app
from app.providers.gemini import CompletionError
from app.runtime_state import ConversationStore


class FakeProvider:
    """Stands in for GeminiProvider; records every transcript it is sent."""

    def __init__(self, replies=None, error=None, delay=0.0):
        self.calls = []
        self.replies = list(replies or [])
        self.error = error
        self.delay = delay

    async def complete(self, turns):
        self.calls.append(list(turns))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.replies:
            return self.replies.pop(0)
        return f"echo: {turns[-1].text}"


@pytest.fixture
def cfg():
    return Settings(gemini_api_key="test-key", environment="test", _env_file=None)


@pytest.fixture
def store():
    return ConversationStore()


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def failing_provider():
    return FakeProvider(error=CompletionError("boom"))


@pytest.fixture
def client(cfg, store, provider):
    return TestClient(create_app(cfg, store, provider))
