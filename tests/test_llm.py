"""Tests for the OpenAI wrapper."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from openai import OpenAIError

from aidevs_tasks.core.errors import EmbeddingError, NoAnswer
from aidevs_tasks.llm.client import DEFAULT_CONTEXT, LLMClient


def _chat_response(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content, tool_calls=None))])


def test_ask_sends_system_context_and_question() -> None:
    openai = MagicMock()
    openai.chat.completions.create.return_value = _chat_response("Warszawa")
    llm = LLMClient(openai)

    assert llm.ask("Stolica Polski?") == "Warszawa"

    kwargs = openai.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-3.5-turbo"
    assert kwargs["messages"] == [
        {"role": "system", "content": DEFAULT_CONTEXT},
        {"role": "user", "content": "Stolica Polski?"},
    ]
    assert "tools" not in kwargs


def test_ask_without_content_raises_no_answer() -> None:
    openai = MagicMock()
    openai.chat.completions.create.return_value = _chat_response("")
    with pytest.raises(NoAnswer):
        LLMClient(openai).ask("?")


def test_complete_without_choices_raises_no_answer() -> None:
    openai = MagicMock()
    openai.chat.completions.create.return_value = SimpleNamespace(choices=[])
    with pytest.raises(NoAnswer):
        LLMClient(openai).complete([{"role": "user", "content": "hi"}], model="gpt-4")


def test_complete_forwards_tools() -> None:
    openai = MagicMock()
    openai.chat.completions.create.return_value = _chat_response("ok")
    tools = [{"type": "function", "function": {"name": "f"}}]
    LLMClient(openai).complete([{"role": "user", "content": "hi"}], tools=tools)
    assert openai.chat.completions.create.call_args.kwargs["tools"] == tools


def test_embed_returns_first_vector() -> None:
    openai = MagicMock()
    openai.embeddings.create.return_value = SimpleNamespace(data=[SimpleNamespace(embedding=[0.1, 0.2])])
    assert LLMClient(openai).embed("Hawaiian pizza") == [0.1, 0.2]
    openai.embeddings.create.assert_called_once_with(model="text-embedding-ada-002", input="Hawaiian pizza")


def test_embed_failure_raises_embedding_error() -> None:
    openai = MagicMock()
    openai.embeddings.create.side_effect = OpenAIError("quota")
    with pytest.raises(EmbeddingError):
        LLMClient(openai).embed("text")


def test_empty_embedding_data_raises() -> None:
    openai = MagicMock()
    openai.embeddings.create.return_value = SimpleNamespace(data=[])
    with pytest.raises(EmbeddingError):
        LLMClient(openai).embed("text")


def test_moderate_returns_flags() -> None:
    openai = MagicMock()
    openai.moderations.create.return_value = SimpleNamespace(
        results=[SimpleNamespace(flagged=False), SimpleNamespace(flagged=True)]
    )
    assert LLMClient(openai).moderate(["nice", "nasty"]) == [False, True]


def test_transcribe_uploads_audio_file(tmp_path: Path) -> None:
    audio = tmp_path / "speech.mp3"
    audio.write_bytes(b"ID3")
    openai = MagicMock()
    openai.audio.transcriptions.create.return_value = SimpleNamespace(text="Dzień dobry")

    assert LLMClient(openai).transcribe(audio) == "Dzień dobry"

    kwargs = openai.audio.transcriptions.create.call_args.kwargs
    assert kwargs["model"] == "whisper-1"
    assert kwargs["file"].name == str(audio)
