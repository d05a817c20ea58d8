import json
import os
import tempfile
from pathlib import Path

# Point the record store at a throwaway file before the app is imported
os.environ.setdefault("INSIGHT_DB_PATH", str(Path(tempfile.mkdtemp()) / "test-insights.db"))
os.environ.setdefault("DEEPSEEK_API_KEY", "test-deepseek-key")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")

import httpx
import pytest

from insight_worker.config import Settings
from insight_worker.services.providers import ProviderConfig, ProviderRegistry
from insight_worker.state import State


CHAT_PROVIDER = ProviderConfig(
    id="chat", endpoint="https://llm.test/v1/chat/completions", model_id="chat-model", credential="secret"
)
REASONING_PROVIDER = ProviderConfig(
    id="reasoner",
    endpoint="https://llm.test/v1/chat/completions",
    model_id="reasoner-model",
    credential="secret",
    reasoning=True,
)


def chat_body(content, **message_extra):
    return {"choices": [{"message": {"content": content, **message_extra}}]}


def mock_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def json_handler(body, status_code=200, seen=None):
    """Handler that answers every request with ``body`` and records requests in ``seen``."""

    def _handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=body)

    return _handler


def make_state(handler, active="chat"):
    registry = ProviderRegistry([CHAT_PROVIDER, REASONING_PROVIDER], active=active)
    return State(providers=registry, timeout_s=5.0, http_client=mock_client(handler))


def request_json(request: httpx.Request):
    return json.loads(request.content.decode("utf-8"))


@pytest.fixture
def settings():
    return Settings(openai_api_key="sk-openai", deepseek_api_key="sk-deepseek")
