"""Tests for the challenge API client."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from aidevs_tasks.challenge.client import ChallengeClient
from aidevs_tasks.core.errors import ChallengeApiError

from conftest import json_response


def _client(*responses: MagicMock) -> tuple[ChallengeClient, MagicMock]:
    session = MagicMock()
    session.request.side_effect = list(responses)
    return ChallengeClient("https://challenge.example/", "secret", session=session), session


def test_get_token_posts_api_key() -> None:
    client, session = _client(json_response({"code": 0, "msg": "ok", "token": "abc"}))

    assert client.get_token("helloapi") == "abc"
    method, url = session.request.call_args.args
    assert (method, url) == ("POST", "https://challenge.example/token/helloapi")
    assert session.request.call_args.kwargs["json"] == {"apikey": "secret"}


def test_non_zero_code_is_fatal() -> None:
    client, _ = _client(json_response({"code": -3, "msg": "invalid key"}))
    with pytest.raises(ChallengeApiError, match="invalid key") as excinfo:
        client.get_token("helloapi")
    assert excinfo.value.code == -3


def test_post_answer_wraps_payload() -> None:
    client, session = _client(json_response({"code": 0, "msg": "OK"}))

    client.post_answer("tok", [1, 0])

    assert session.request.call_args.args[1] == "https://challenge.example/answer/tok"
    assert session.request.call_args.kwargs["json"] == {"answer": [1, 0]}


def test_ask_task_sends_multipart_form() -> None:
    client, session = _client(json_response({"code": 0, "msg": "ok", "answer": "yes"}))

    payload = client.ask_task("tok", {"question": "What?"})

    assert payload["answer"] == "yes"
    kwargs = session.request.call_args.kwargs
    assert kwargs["files"] == {"question": (None, "What?")}
    assert "data" not in kwargs


def test_transport_error_is_wrapped() -> None:
    session = MagicMock()
    session.request.side_effect = requests.ConnectionError("down")
    client = ChallengeClient("https://challenge.example", "secret", session=session)
    with pytest.raises(ChallengeApiError, match="down"):
        client.get_task("tok")


def test_hint_returns_answer_field() -> None:
    client, _ = _client(json_response({"answer": "look closer"}))
    assert client.get_hint("people") == "look closer"
