"""Brave Search web API client."""

from __future__ import annotations

from typing import Any

import requests
from pydantic import BaseModel, ValidationError

from aidevs_tasks.core.errors import EmptyResult, FetchError, ParseError
from aidevs_tasks.core.logging import get_logger

logger = get_logger(__name__)

API_BASE_URL = "https://api.search.brave.com/res/v1"


class SearchResultItem(BaseModel):
    title: str
    url: str
    description: str = ""

    model_config = {"extra": "ignore"}


class WebResults(BaseModel):
    results: list[SearchResultItem] = []


class BraveSearchResponse(BaseModel):
    web: WebResults = WebResults()

    model_config = {"extra": "ignore"}


class BraveSearchClient:
    def __init__(self, api_key: str, session: requests.Session | None = None, timeout: float = 30.0) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout
        self.headers: dict[str, str] = {
            "Accept": "application/json",
            "Accept-Encoding": "gzip",
            "X-Subscription-Token": api_key,
        }

    def set_country(self, country_code: str) -> None:
        self.headers["X-Loc-Country"] = country_code

    def search(self, query: str) -> BraveSearchResponse:
        try:
            resp = self.session.get(
                f"{API_BASE_URL}/web/search",
                params={"q": query},
                headers=self.headers,
                timeout=self.timeout,
            )
            resp.raise_for_status()
            raw: Any = resp.json()
        except requests.RequestException as exc:
            raise FetchError(f"Brave search for '{query}' failed: {exc}") from exc
        except ValueError as exc:
            raise ParseError("Brave search response is not valid JSON") from exc
        try:
            return BraveSearchResponse.model_validate(raw)
        except ValidationError as exc:
            raise ParseError(f"Unexpected Brave search response: {exc}") from exc

    def first_url(self, query: str) -> str:
        results = self.search(query).web.results
        if not results:
            raise EmptyResult(f"No search results for '{query}'")
        logger.info("First result for '%s': %s", query, results[0].url)
        return results[0].url


__all__ = ["BraveSearchClient", "BraveSearchResponse", "SearchResultItem"]
