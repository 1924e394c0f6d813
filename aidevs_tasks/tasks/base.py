"""Shared plumbing for task runners."""

from __future__ import annotations

from functools import cached_property
from typing import Any, Callable, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from aidevs_tasks.challenge.client import ChallengeClient
from aidevs_tasks.core.config import Settings
from aidevs_tasks.core.errors import ParseError
from aidevs_tasks.llm.client import LLMClient
from aidevs_tasks.retrieval.vector_store import VectorStore

M = TypeVar("M", bound=BaseModel)


class TaskResponse(BaseModel):
    """Fields every task payload carries."""

    code: int = 0
    msg: str = ""

    model_config = {"extra": "allow", "populate_by_name": True}


class TaskContext:
    """Clients for one task run, each constructed at most once.

    Use as a context manager so the HTTP session is closed after the run.
    """

    def __init__(
        self,
        settings: Settings,
        challenge: ChallengeClient | None = None,
        llm: LLMClient | None = None,
        store: VectorStore | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.settings = settings
        self._owns_session = session is None
        self.session = session or requests.Session()
        if challenge is not None:
            self.__dict__["challenge"] = challenge
        if llm is not None:
            self.__dict__["llm"] = llm
        if store is not None:
            self.__dict__["store"] = store

    def __enter__(self) -> "TaskContext":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP session unless it was handed in by the caller."""
        if self._owns_session:
            self.session.close()

    @cached_property
    def challenge(self) -> ChallengeClient:
        return ChallengeClient.from_settings(self.settings, session=self.session)

    @cached_property
    def llm(self) -> LLMClient:
        return LLMClient.from_settings(self.settings)

    @cached_property
    def store(self) -> VectorStore:
        return VectorStore.from_settings(self.settings)

    def get_task(self, token: str, model: type[M]) -> M:
        """Fetch the task payload and validate it against ``model``."""
        return parse_payload(self.challenge.get_task(token), model)


def parse_payload(payload: dict[str, Any], model: type[M]) -> M:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ParseError(f"Task API response does not match {model.__name__}: {exc}") from exc


TaskRunner = Callable[[TaskContext, str], Any]

__all__ = ["TaskContext", "TaskResponse", "TaskRunner", "parse_payload"]
