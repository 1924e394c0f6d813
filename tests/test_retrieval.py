"""Tests for the lazy-indexed semantic retrieval pipeline."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from pydantic import BaseModel

from aidevs_tasks.core.errors import (
    CollectionUnavailable,
    DimensionMismatch,
    EmbeddingError,
    EmptyResult,
    UpsertError,
)
from aidevs_tasks.retrieval.pipeline import (
    DatasetSpec,
    SemanticIndex,
    answer,
    ensure_collection,
    populate,
    resolve,
)
from aidevs_tasks.retrieval.types import CollectionInfo, Point
from aidevs_tasks.retrieval.vector_store import VectorStore

from conftest import FakeLLM, json_response


class Article(BaseModel):
    info: str
    url: str


ARTICLES = [
    Article(info="Alpha text", url="http://a"),
    Article(info="Beta text", url="http://b"),
]
VECTORS = {
    "Alpha text": [1.0, 0.0, 0.0, 0.0],
    "Beta text": [0.0, 1.0, 0.0, 0.0],
    "tell me about alpha": [0.9, 0.1, 0.0, 0.0],
}


def test_ensure_collection_creates_missing_collection(memory_store: VectorStore) -> None:
    info = ensure_collection(memory_store, "news")
    assert info.point_count == 0
    assert info.vector_size == 4


def test_ensure_collection_is_idempotent(memory_store: VectorStore) -> None:
    first = ensure_collection(memory_store, "news")
    populate(memory_store, "news", FakeLLM(vectors=VECTORS), ARTICLES, carrier=lambda item: item.info)
    create = MagicMock(wraps=memory_store.create)
    memory_store.create = create

    second = ensure_collection(memory_store, "news")
    third = ensure_collection(memory_store, "news")

    assert first.point_count == 0
    assert second.point_count == third.point_count == len(ARTICLES)
    create.assert_not_called()


def test_ensure_collection_gives_up_after_one_create() -> None:
    store = MagicMock()
    store.describe.side_effect = CollectionUnavailable("not found")

    with pytest.raises(CollectionUnavailable, match="created but still"):
        ensure_collection(store, "news")

    store.create.assert_called_once_with("news")
    assert store.describe.call_count == 2


def test_ensure_collection_returns_info_after_create() -> None:
    store = MagicMock()
    store.describe.side_effect = [CollectionUnavailable("not found"), CollectionInfo("news", 0, 1536)]
    info = ensure_collection(store, "news")
    assert info.point_count == 0
    store.create.assert_called_once_with("news")


def test_populate_point_count_matches_dataset(memory_store: VectorStore) -> None:
    ensure_collection(memory_store, "news")
    llm = FakeLLM(vectors=VECTORS)

    count = populate(memory_store, "news", llm, ARTICLES, carrier=lambda item: item.info)

    assert count == len(ARTICLES)
    assert memory_store.describe("news").point_count == len(ARTICLES)
    assert llm.embedded == ["Alpha text", "Beta text"]


def test_resolve_returns_nearest_point(memory_store: VectorStore) -> None:
    llm = FakeLLM(vectors=VECTORS)
    ensure_collection(memory_store, "news")
    populate(memory_store, "news", llm, ARTICLES, carrier=lambda item: item.info)

    attributes = resolve(memory_store, "news", llm, "tell me about alpha")

    assert attributes["url"] == "http://a"


def test_resolve_self_match(memory_store: VectorStore) -> None:
    llm = FakeLLM(vectors=VECTORS)
    ensure_collection(memory_store, "news")
    populate(memory_store, "news", llm, ARTICLES, carrier=lambda item: item.info)

    assert resolve(memory_store, "news", llm, "Beta text") == {"info": "Beta text", "url": "http://b"}


def test_resolve_on_empty_collection_raises(memory_store: VectorStore) -> None:
    ensure_collection(memory_store, "news")
    with pytest.raises(EmptyResult):
        resolve(memory_store, "news", FakeLLM(vectors=VECTORS), "tell me about alpha")


def test_resolve_rejects_wrong_dimension(memory_store: VectorStore) -> None:
    ensure_collection(memory_store, "news")
    llm = FakeLLM(vectors={"short": [1.0, 0.0]})
    with pytest.raises(DimensionMismatch) as excinfo:
        resolve(memory_store, "news", llm, "short")
    assert (excinfo.value.expected, excinfo.value.actual) == (4, 2)


def test_answer_passes_context_as_system_prompt() -> None:
    llm = FakeLLM(replies=["42"])
    assert answer(llm, "gpt-4", "How old?", "Mam 42 lat") == "42"
    assert llm.asked == [{"question": "How old?", "context": "Mam 42 lat", "model": "gpt-4"}]


def test_semantic_index_populates_only_once(memory_store: VectorStore) -> None:
    session = MagicMock()
    session.get.return_value = json_response([item.model_dump() for item in ARTICLES])
    dataset = DatasetSpec(collection="news", shape=list[Article], carrier=lambda item: item.info)
    index = SemanticIndex(memory_store, FakeLLM(vectors=VECTORS), dataset, session=session)

    assert index.ensure_populated("http://dataset").point_count == 2
    assert index.ensure_populated("http://dataset").point_count == 2
    session.get.assert_called_once()
    assert index.lookup("tell me about alpha")["url"] == "http://a"


class FailingEmbedder(FakeLLM):
    def __init__(self, fail_on: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self.fail_on = fail_on

    def embed(self, text: str, model: str | None = None) -> list[float]:
        if text == self.fail_on:
            raise EmbeddingError(f"Embedding of '{text}' failed")
        return super().embed(text, model=model)


def test_populate_embedding_failure_leaves_collection_empty(memory_store: VectorStore) -> None:
    ensure_collection(memory_store, "news")
    embedder = FailingEmbedder("Beta text", vectors=VECTORS)

    with pytest.raises(EmbeddingError):
        populate(memory_store, "news", embedder, ARTICLES, carrier=lambda item: item.info)

    assert embedder.embedded == ["Alpha text"]
    assert memory_store.describe("news").point_count == 0


def test_upsert_of_wrong_dimension_raises(memory_store: VectorStore) -> None:
    ensure_collection(memory_store, "news")
    with pytest.raises(UpsertError):
        memory_store.upsert("news", [Point(id=0, vector=[1.0, 0.0], attributes={"url": "http://a"})])
