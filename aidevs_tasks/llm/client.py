"""Thin wrapper around the OpenAI SDK.

One explicitly constructed client is shared by every component of a task run;
tests swap it for a fake exposing the same methods.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

from openai import OpenAI, OpenAIError

from aidevs_tasks.core.config import Settings
from aidevs_tasks.core.errors import EmbeddingError, NoAnswer, TaskError
from aidevs_tasks.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CONTEXT = "Answers concisely as possible"


class LLMClient:
    """Chat, embedding, moderation and transcription calls."""

    def __init__(
        self,
        client: OpenAI,
        chat_model: str = "gpt-3.5-turbo",
        embedding_model: str = "text-embedding-ada-002",
    ) -> None:
        self.client = client
        self.chat_model = chat_model
        self.embedding_model = embedding_model

    @classmethod
    def from_settings(cls, settings: Settings) -> "LLMClient":
        client = OpenAI(api_key=settings.openai_api_key, base_url=settings.openai_base_url)
        return cls(client, chat_model=settings.chat_model, embedding_model=settings.embedding_model)

    def ask(self, question: str, context: str | None = None, model: str | None = None) -> str:
        """Send a system context plus a user question and return the first reply."""
        model = model or self.chat_model
        messages = [
            {"role": "system", "content": context or DEFAULT_CONTEXT},
            {"role": "user", "content": question},
        ]
        logger.info("Question to %s: %s", model, question)
        message = self.complete(messages, model=model)
        answer = message.content
        if not answer:
            raise NoAnswer(f"{model} response does not contain answer.")
        logger.info("%s answer: %s", model, answer)
        return answer

    def complete(
        self,
        messages: Sequence[dict[str, Any]],
        model: str | None = None,
        tools: Sequence[dict[str, Any]] | None = None,
    ) -> Any:
        """Run a chat completion and return the first choice's message."""
        model = model or self.chat_model
        kwargs: dict[str, Any] = {"model": model, "messages": list(messages)}
        if tools:
            kwargs["tools"] = list(tools)
        try:
            response = self.client.chat.completions.create(**kwargs)
        except OpenAIError as exc:
            raise NoAnswer(f"{model} request failed: {exc}") from exc
        if not response.choices:
            raise NoAnswer(f"{model} response does not contain any choices.")
        return response.choices[0].message

    def embed(self, text: str, model: str | None = None) -> list[float]:
        model = model or self.embedding_model
        try:
            response = self.client.embeddings.create(model=model, input=text)
        except OpenAIError as exc:
            raise EmbeddingError(f"Embedding with {model} failed: {exc}") from exc
        if not response.data:
            raise EmbeddingError(f"{model} response does not contain embedding array")
        return list(response.data[0].embedding)

    def moderate(self, inputs: Sequence[str]) -> list[bool]:
        try:
            response = self.client.moderations.create(input=list(inputs))
        except OpenAIError as exc:
            raise TaskError(f"Moderation request failed: {exc}") from exc
        return [result.flagged for result in response.results]

    def transcribe(self, audio_path: Path, model: str = "whisper-1") -> str:
        try:
            with audio_path.open("rb") as fh:
                response = self.client.audio.transcriptions.create(model=model, file=fh, response_format="json")
        except OpenAIError as exc:
            raise NoAnswer(f"Transcription with {model} failed: {exc}") from exc
        logger.info("%s response: %s", model, response.text)
        return response.text


__all__ = ["LLMClient", "DEFAULT_CONTEXT"]
