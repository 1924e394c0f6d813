"""Test fixtures for the task runner."""

from __future__ import annotations

import hashlib
import os
import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Sequence
from unittest.mock import MagicMock

import pytest
from qdrant_client import QdrantClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from aidevs_tasks.core.config import Settings, get_settings  # noqa: E402
from aidevs_tasks.retrieval.vector_store import VectorStore  # noqa: E402

VECTOR_SIZE = 4


@pytest.fixture(autouse=True)
def reset_state(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset cached settings and environment between tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    for key in list(os.environ):
        if key.startswith("AIDEVS_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class FakeLLM:
    """In-process stand-in for LLMClient with scripted replies."""

    def __init__(
        self,
        replies: Sequence[str] = (),
        vectors: dict[str, list[float]] | None = None,
        messages: Sequence[Any] = (),
    ) -> None:
        self.replies = list(replies)
        self.vectors = vectors or {}
        self.messages = list(messages)
        self.asked: list[dict[str, Any]] = []
        self.embedded: list[str] = []

    def ask(self, question: str, context: str | None = None, model: str | None = None) -> str:
        self.asked.append({"question": question, "context": context, "model": model})
        if not self.replies:
            return f"answer to {question}"
        return self.replies.pop(0)

    def embed(self, text: str, model: str | None = None) -> list[float]:
        self.embedded.append(text)
        if text in self.vectors:
            return list(self.vectors[text])
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        return [digest[i] / 255.0 + 0.01 for i in range(VECTOR_SIZE)]

    def complete(self, messages: Sequence[dict[str, Any]], model: str | None = None, tools: Any = None) -> Any:
        self.asked.append({"messages": list(messages), "model": model, "tools": tools})
        return self.messages.pop(0)


def tool_call_message(name: str, arguments: str) -> SimpleNamespace:
    call = SimpleNamespace(function=SimpleNamespace(name=name, arguments=arguments))
    return SimpleNamespace(content=None, tool_calls=[call])


def json_response(payload: Any, status_code: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = status_code < 400
    resp.json.return_value = payload
    resp.text = str(payload)
    return resp


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def memory_store() -> VectorStore:
    return VectorStore(QdrantClient(location=":memory:"), vector_size=VECTOR_SIZE)


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key="test-key", qdrant_url=":memory:", vector_size=VECTOR_SIZE)
