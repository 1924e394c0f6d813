"""Tests for the callback HTTP servers."""

from __future__ import annotations

from datetime import datetime
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from aidevs_tasks.api.server import parse_listen_address, public_endpoint
from aidevs_tasks.core.errors import ConfigurationError, EmptyResult, UnknownTool
from aidevs_tasks.tasks import TaskContext, google, ownapi, ownapipro

from conftest import FakeLLM, tool_call_message


def test_ownapi_answers_question() -> None:
    llm = FakeLLM(replies=["Paris"])
    client = TestClient(ownapi.create_app(llm))

    resp = client.post("/ownapi", json={"question": "Capital of France?"})

    assert resp.status_code == 200
    assert resp.json() == {"answer": "Paris"}
    assert llm.asked[0]["question"] == "Capital of France?"


def test_ownapi_rejects_malformed_body() -> None:
    client = TestClient(ownapi.create_app(FakeLLM()))
    assert client.post("/ownapi", json={"text": "hi"}).status_code == 422


def test_ownapipro_remembers_then_answers() -> None:
    llm = FakeLLM(
        replies=["Kraków"],
        messages=[
            tool_call_message("remember", '{"data": "I live in Kraków", "category": "home"}'),
            tool_call_message("answer", '{"question": "Where do I live?"}'),
        ],
    )
    conversation = ownapipro.Conversation(llm, now=datetime(2024, 1, 1, 12, 0))
    client = TestClient(ownapipro.create_app(conversation))

    first = client.post("/ownapipro", json={"question": "I live in Kraków"})
    second = client.post("/ownapipro", json={"question": "Where do I live?"})

    assert first.json() == {"reply": "Ok"}
    assert second.json() == {"reply": "Kraków"}
    context = llm.asked[-1]["context"]
    assert "Fact about me: home I live in Kraków" in context
    assert "Today is: 2024-01-01 12:00:00" in context


def test_conversation_rejects_unknown_tool() -> None:
    conversation = ownapipro.Conversation(FakeLLM())
    with pytest.raises(UnknownTool):
        conversation.handle("forget", "{}")


def test_task_error_becomes_bad_gateway() -> None:
    llm = FakeLLM(messages=[tool_call_message("forget", "{}")])
    client = TestClient(ownapipro.create_app(ownapipro.Conversation(llm)))

    resp = client.post("/ownapipro", json={"question": "hello"})

    assert resp.status_code == 502
    assert "forget" in resp.json()["detail"]


def test_google_replies_with_first_search_url() -> None:
    llm = FakeLLM(replies=["najlepsza pizza kraków"])
    search_client = MagicMock()
    search_client.first_url.return_value = "https://pizza.example"
    client = TestClient(google.create_app(llm, search_client))

    resp = client.post("/search", json={"question": "Gdzie zjem dobrą pizzę w Krakowie?"})

    assert resp.json() == {"reply": "https://pizza.example"}
    search_client.first_url.assert_called_once_with("najlepsza pizza kraków")
    assert llm.asked[0]["context"] == google.REPHRASE_CONTEXT


def test_google_without_results_is_bad_gateway() -> None:
    search_client = MagicMock()
    search_client.first_url.side_effect = EmptyResult("No search results")
    client = TestClient(google.create_app(FakeLLM(), search_client))
    assert client.post("/search", json={"question": "?"}).status_code == 502


def test_parse_listen_address() -> None:
    assert parse_listen_address("0.0.0.0:8080") == ("0.0.0.0", 8080)
    with pytest.raises(ConfigurationError):
        parse_listen_address("8080")
    with pytest.raises(ConfigurationError):
        parse_listen_address("localhost:http")


def test_public_endpoint_joins_paths() -> None:
    assert public_endpoint("https://tunnel.example/", "/ownapi") == "https://tunnel.example/ownapi"


def test_server_task_requires_listen_address(settings) -> None:
    ctx = TaskContext(settings, challenge=MagicMock(), llm=FakeLLM())
    with pytest.raises(ConfigurationError, match="API listen address not found"):
        ownapi.run(ctx, "tok")
