"""HTTP client for the AI Devs challenge API."""

from __future__ import annotations

from typing import Any, Mapping

import requests

from aidevs_tasks.core.config import Settings
from aidevs_tasks.core.errors import ChallengeApiError
from aidevs_tasks.core.logging import get_logger

logger = get_logger(__name__)


class ChallengeClient:
    """Token/task/answer protocol of the challenge API.

    Every endpoint returns a JSON object with a numeric ``code``; anything
    other than zero is fatal for the whole task run.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        session: requests.Session | None = None,
        timeout: float = 60.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings, session: requests.Session | None = None) -> "ChallengeClient":
        return cls(
            base_url=settings.api_url,
            api_key=settings.require("api_key", "Challenge API key"),
            session=session,
            timeout=settings.request_timeout,
        )

    def get_token(self, task_name: str) -> str:
        payload = self._request("POST", f"/token/{task_name}", json={"apikey": self.api_key})
        _check_code(payload)
        token = payload.get("token")
        if not token:
            raise ChallengeApiError("API response does not contain token")
        logger.debug("Received token for '%s'", task_name)
        return token

    def get_task(self, token: str) -> dict[str, Any]:
        payload = self._request("GET", f"/task/{token}")
        logger.debug("Task API response: %s", payload)
        if "msg" in payload:
            logger.info("Task message: %s", payload["msg"])
        _check_code(payload)
        return payload

    def ask_task(self, token: str, form: Mapping[str, str]) -> dict[str, Any]:
        """Send multipart form fields to the task endpoint (used by tasks that accept questions)."""
        files = {key: (None, value) for key, value in form.items()}
        payload = self._request("POST", f"/task/{token}", files=files)
        logger.debug("Task API response: %s", payload)
        _check_code(payload)
        return payload

    def post_answer(self, token: str, answer: Any) -> dict[str, Any]:
        payload = self._request("POST", f"/answer/{token}", json={"answer": answer})
        logger.info("Answer response: %s", payload)
        _check_code(payload, action="Post answer")
        return payload

    def get_hint(self, task_name: str) -> str:
        payload = self._request("GET", f"/hint/{task_name}")
        logger.debug("Hint response: %s", payload)
        hint = payload.get("answer")
        if hint is None:
            raise ChallengeApiError(f"Hint response for '{task_name}' does not contain answer")
        return str(hint)

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise ChallengeApiError(f"Request to {path} failed: {exc}") from exc
        try:
            payload = resp.json()
        except ValueError as exc:
            raise ChallengeApiError(f"Request to {path} failed ({resp.status_code}): {resp.text}") from exc
        if not isinstance(payload, dict):
            raise ChallengeApiError(f"Unexpected response from {path}: {payload!r}")
        return payload


def _check_code(payload: Mapping[str, Any], action: str = "API call") -> None:
    code = payload.get("code", 0)
    if code != 0:
        raise ChallengeApiError(f"{action} error [{code}]: {payload.get('msg', '')}", code=code)


__all__ = ["ChallengeClient"]
