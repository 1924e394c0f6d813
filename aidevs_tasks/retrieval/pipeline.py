"""Lazy-indexed semantic retrieval.

A collection is created on first use, filled from its dataset only while it
holds no points, and then queried with a top-1 nearest neighbour search. The
count check is not transactional: two concurrent first runs may both populate,
which converges to the same points because ids are record positions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Sequence, TypeVar

import requests
from pydantic import BaseModel

from aidevs_tasks.core.errors import CollectionUnavailable, EmptyResult
from aidevs_tasks.core.logging import get_logger
from aidevs_tasks.ingest.loaders import load_dataset
from aidevs_tasks.retrieval.types import (
    ChatModel,
    CollectionInfo,
    CollectionStore,
    Embedder,
    Point,
    PointAttributes,
)

logger = get_logger(__name__)

R = TypeVar("R", bound=BaseModel)


def ensure_collection(store: CollectionStore, name: str) -> CollectionInfo:
    """Describe ``name``, creating it once if it does not exist yet."""
    try:
        return store.describe(name)
    except CollectionUnavailable as exc:
        logger.info("Qdrant collection '%s' does not exist, creating it (%s)", name, exc)
    store.create(name)
    try:
        return store.describe(name)
    except CollectionUnavailable as exc:
        raise CollectionUnavailable(f"Qdrant collection '{name}' created but still can not get its info") from exc


def record_attributes(record: BaseModel) -> PointAttributes:
    """Dump a record into store-compatible scalars (dates and URLs become strings)."""
    return record.model_dump(mode="json")


def populate(
    store: CollectionStore,
    name: str,
    embedder: Embedder,
    records: Sequence[R],
    carrier: Callable[[R], str],
    attributes: Callable[[R], PointAttributes] = record_attributes,
) -> int:
    """Embed every record in dataset order and upsert them in one blocking call."""
    points: list[Point] = []
    for index, record in enumerate(records):
        vector = embedder.embed(carrier(record))
        points.append(Point(id=index, vector=vector, attributes=attributes(record)))
    store.upsert(name, points)
    logger.info("Upserted %d points into '%s'", len(points), name)
    return len(points)


def resolve(store: CollectionStore, name: str, embedder: Embedder, query: str) -> PointAttributes:
    """Return the attributes of the point nearest to ``query``."""
    vector = embedder.embed(query)
    hits = store.search(name, vector, top_k=1)
    if not hits:
        raise EmptyResult(f"Qdrant search in '{name}' returned no results")
    best = hits[0]
    logger.debug("Best match %s (score %.4f)", best.id, best.score)
    return best.payload


def answer(llm: ChatModel, model: str | None, question: str, context: str) -> str:
    """Ask the chat model ``question`` grounded by ``context``."""
    return llm.ask(question, context=context, model=model)


@dataclass
class DatasetSpec(Generic[R]):
    """How to turn one dataset into collection points."""

    collection: str
    shape: Any
    carrier: Callable[[R], str]
    attributes: Callable[[R], PointAttributes] = record_attributes


class SemanticIndex(Generic[R]):
    """Bind a store, an embedder and one dataset into a lazily filled index."""

    def __init__(
        self,
        store: CollectionStore,
        embedder: Embedder,
        dataset: DatasetSpec[R],
        session: requests.Session | None = None,
    ) -> None:
        self.store = store
        self.embedder = embedder
        self.dataset = dataset
        self.session = session

    @property
    def collection(self) -> str:
        return self.dataset.collection

    def ensure_populated(self, source_url: str) -> CollectionInfo:
        info = ensure_collection(self.store, self.collection)
        if info.point_count > 0:
            return info
        logger.info("Qdrant collection '%s' empty, filling it", self.collection)
        records = load_dataset(source_url, self.dataset.shape, session=self.session)
        populate(
            self.store,
            self.collection,
            self.embedder,
            records,
            carrier=self.dataset.carrier,
            attributes=self.dataset.attributes,
        )
        return self.store.describe(self.collection)

    def lookup(self, query: str) -> PointAttributes:
        return resolve(self.store, self.collection, self.embedder, query)


__all__ = [
    "ensure_collection",
    "populate",
    "resolve",
    "answer",
    "record_attributes",
    "DatasetSpec",
    "SemanticIndex",
]
