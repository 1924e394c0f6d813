"""Retrieval data structures and collaborator protocols."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence

PointAttributes = dict[str, Any]


@dataclass(slots=True)
class Point:
    id: int
    vector: list[float]
    attributes: PointAttributes = field(default_factory=dict)


@dataclass(slots=True)
class SearchHit:
    id: int | str
    score: float
    payload: PointAttributes


@dataclass(slots=True)
class CollectionInfo:
    name: str
    point_count: int
    vector_size: int | None = None


class Embedder(Protocol):
    def embed(self, text: str) -> list[float]: ...


class ChatModel(Protocol):
    def ask(self, question: str, context: str | None = None, model: str | None = None) -> str: ...


class CollectionStore(Protocol):
    def describe(self, name: str) -> CollectionInfo: ...

    def create(self, name: str) -> None: ...

    def upsert(self, name: str, points: Sequence[Point]) -> None: ...

    def search(self, name: str, vector: Sequence[float], top_k: int = 1) -> list[SearchHit]: ...


__all__ = [
    "Point",
    "PointAttributes",
    "SearchHit",
    "CollectionInfo",
    "Embedder",
    "ChatModel",
    "CollectionStore",
]
