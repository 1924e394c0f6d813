"""Error taxonomy shared by every task.

Every error aborts the current task run and is surfaced at the CLI boundary.
Nothing here is retried automatically.
"""

from __future__ import annotations


class TaskError(Exception):
    """Base class for failures that abort a task run."""


class ConfigurationError(TaskError):
    """A setting required by the task is missing or malformed."""


class ChallengeApiError(TaskError):
    """The challenge API answered with a non-zero code or could not be reached."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class FetchError(TaskError):
    """Network or transport failure while fetching a remote resource."""


class ParseError(TaskError):
    """A payload did not match the expected shape."""


class CollectionUnavailable(TaskError):
    """The vector collection could not be described or created."""


class EmbeddingError(TaskError):
    """The embedding provider failed to return a vector."""


class UpsertError(TaskError):
    """The vector store rejected a batch of points."""


class DimensionMismatch(TaskError):
    """A vector length differs from the collection's configured size."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Vector dimension mismatch: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class EmptyResult(TaskError):
    """A vector search returned no hits."""


class NoAnswer(TaskError):
    """The LLM provider returned nothing usable."""


class UnknownTool(TaskError):
    """The LLM asked for a tool that is not part of the declared set."""


__all__ = [
    "TaskError",
    "ConfigurationError",
    "ChallengeApiError",
    "FetchError",
    "ParseError",
    "CollectionUnavailable",
    "EmbeddingError",
    "UpsertError",
    "DimensionMismatch",
    "EmptyResult",
    "NoAnswer",
    "UnknownTool",
]
