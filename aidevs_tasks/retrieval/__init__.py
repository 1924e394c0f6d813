"""Semantic retrieval components."""

from .context import PEOPLE_CONTEXT, ContextLine, render
from .pipeline import DatasetSpec, SemanticIndex, answer, ensure_collection, populate, resolve
from .vector_store import VectorStore

__all__ = [
    "VectorStore",
    "SemanticIndex",
    "DatasetSpec",
    "ensure_collection",
    "populate",
    "resolve",
    "answer",
    "render",
    "ContextLine",
    "PEOPLE_CONTEXT",
]
