"""RenderForm image rendering client."""

from __future__ import annotations

from typing import Any

import requests
from pydantic import BaseModel, Field, ValidationError

from aidevs_tasks.core.errors import FetchError, ParseError

API_V2_BASE_URL = "https://get.renderform.io/api/v2"


class RenderRequest(BaseModel):
    template: str
    data: dict[str, str] | None = None
    expires: int | None = None
    file_name: str | None = Field(default=None, serialization_alias="fileName")
    webhook_url: str | None = Field(default=None, serialization_alias="webhookUrl")
    metadata: dict[str, Any] | None = None
    version: str | None = None


class RenderResponse(BaseModel):
    request_id: str = Field(alias="requestId")
    href: str


class RenderDataBuilder:
    """Collect ``component.text`` / ``component.src`` template fields."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def text(self, component: str, value: str) -> "RenderDataBuilder":
        self._data[f"{component}.text"] = value
        return self

    def source(self, component: str, url: str) -> "RenderDataBuilder":
        self._data[f"{component}.src"] = url
        return self

    def build(self) -> dict[str, str]:
        return dict(self._data)


class RenderFormClient:
    def __init__(self, api_key: str, session: requests.Session | None = None, timeout: float = 60.0) -> None:
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    def render(self, request: RenderRequest) -> RenderResponse:
        try:
            resp = self.session.post(
                f"{API_V2_BASE_URL}/render",
                headers={"X-API-KEY": self.api_key},
                json=request.model_dump(by_alias=True, exclude_none=True),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise FetchError(f"RenderForm request failed: {exc}") from exc
        try:
            body = resp.json()
        except ValueError as exc:
            raise ParseError(f"RenderForm response ({resp.status_code}) is not valid JSON") from exc
        if not isinstance(body, dict):
            raise ParseError(f"Unexpected RenderForm response ({resp.status_code}): {body!r}")
        if not resp.ok:
            raise FetchError(
                f"RenderForm API error: {body.get('msg')} [{body.get('status', resp.status_code)}] {body.get('errors', [])}"
            )
        try:
            return RenderResponse.model_validate(body)
        except ValidationError as exc:
            raise ParseError(f"Unexpected RenderForm response: {exc}") from exc


__all__ = ["RenderFormClient", "RenderRequest", "RenderResponse", "RenderDataBuilder"]
