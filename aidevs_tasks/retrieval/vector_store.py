"""Qdrant-backed vector collection store."""

from __future__ import annotations

from typing import Sequence

from qdrant_client import QdrantClient, models
from qdrant_client.http.exceptions import ResponseHandlingException, UnexpectedResponse

from aidevs_tasks.core.config import Settings
from aidevs_tasks.core.errors import CollectionUnavailable, DimensionMismatch, FetchError, UpsertError
from aidevs_tasks.core.logging import get_logger
from aidevs_tasks.retrieval.types import CollectionInfo, Point, SearchHit

logger = get_logger(__name__)

# Local (":memory:") mode raises ValueError for unknown collections.
_STORE_ERRORS = (UnexpectedResponse, ResponseHandlingException, ValueError)


class VectorStore:
    """Named collections of (id, vector, payload) points using cosine distance."""

    def __init__(self, client: QdrantClient, vector_size: int = 1536) -> None:
        self.client = client
        self.vector_size = vector_size
        self._dims: dict[str, int] = {}

    @classmethod
    def from_settings(cls, settings: Settings) -> "VectorStore":
        url = settings.require("qdrant_url", "Qdrant URL")
        client = QdrantClient(location=":memory:") if url == ":memory:" else QdrantClient(url=url)
        return cls(client, vector_size=settings.vector_size)

    def describe(self, name: str) -> CollectionInfo:
        try:
            info = self.client.get_collection(name)
        except _STORE_ERRORS as exc:
            raise CollectionUnavailable(f"Qdrant collection '{name}' unavailable: {exc}") from exc
        vectors = info.config.params.vectors
        size = getattr(vectors, "size", None)
        if size is not None:
            self._dims[name] = size
        count = info.points_count or 0
        return CollectionInfo(name=name, point_count=count, vector_size=size)

    def create(self, name: str) -> None:
        try:
            self.client.create_collection(
                collection_name=name,
                vectors_config=models.VectorParams(size=self.vector_size, distance=models.Distance.COSINE),
            )
        except _STORE_ERRORS as exc:
            raise CollectionUnavailable(f"Qdrant collection '{name}' could not be created: {exc}") from exc
        self._dims[name] = self.vector_size

    def upsert(self, name: str, points: Sequence[Point]) -> None:
        if not points:
            return
        structs = [models.PointStruct(id=point.id, vector=point.vector, payload=point.attributes) for point in points]
        try:
            self.client.upsert(collection_name=name, points=structs, wait=True)
        except _STORE_ERRORS as exc:
            raise UpsertError(f"Qdrant rejected {len(structs)} points for '{name}': {exc}") from exc

    def search(self, name: str, vector: Sequence[float], top_k: int = 1) -> list[SearchHit]:
        expected = self._dims.get(name)
        if expected is None:
            expected = self.describe(name).vector_size
        if expected is not None and len(vector) != expected:
            raise DimensionMismatch(expected, len(vector))
        try:
            response = self.client.query_points(
                collection_name=name,
                query=list(vector),
                limit=top_k,
                with_payload=True,
            )
        except _STORE_ERRORS as exc:
            raise FetchError(f"Qdrant search in '{name}' failed: {exc}") from exc
        return [SearchHit(id=hit.id, score=hit.score, payload=dict(hit.payload or {})) for hit in response.points]


__all__ = ["VectorStore"]
