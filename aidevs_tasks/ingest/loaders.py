"""Remote JSON dataset loading."""

from __future__ import annotations

from typing import Any, TypeVar

import requests
from pydantic import TypeAdapter, ValidationError

from aidevs_tasks.core.errors import FetchError, ParseError
from aidevs_tasks.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def fetch_json(url: str, session: requests.Session | None = None, timeout: float = 60.0) -> Any:
    """Fetch a URL once and decode its body as JSON."""
    http = session or requests.Session()
    logger.info("Fetching dataset from %s", url)
    try:
        resp = http.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise FetchError(f"Fetching {url} failed: {exc}") from exc
    try:
        return resp.json()
    except ValueError as exc:
        raise ParseError(f"Response from {url} is not valid JSON") from exc


def load_dataset(
    url: str,
    shape: type[T] | Any,
    session: requests.Session | None = None,
    timeout: float = 60.0,
) -> T:
    """Fetch ``url`` and validate the JSON body against ``shape``.

    ``shape`` is anything pydantic can adapt, e.g. ``list[NewsItem]`` for a bare
    array or ``dict[str, list[str]]`` for an object of arrays.
    """
    raw = fetch_json(url, session=session, timeout=timeout)
    try:
        return TypeAdapter(shape).validate_python(raw)
    except ValidationError as exc:
        raise ParseError(f"Dataset from {url} does not match expected shape: {exc}") from exc


__all__ = ["fetch_json", "load_dataset"]
