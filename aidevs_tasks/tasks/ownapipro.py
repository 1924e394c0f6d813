"""Conversational endpoint that either remembers a fact or answers a question."""

from __future__ import annotations

import threading
from datetime import datetime
from enum import Enum
from typing import Any

from fastapi import FastAPI
from pydantic import BaseModel, ValidationError

from aidevs_tasks.api.schemas import AnswerArgs, QuestionRequest, RememberArgs, ReplyResponse
from aidevs_tasks.api.server import install_error_handler, public_endpoint, serve_and_announce
from aidevs_tasks.core.errors import NoAnswer, ParseError, UnknownTool
from aidevs_tasks.core.logging import get_logger
from aidevs_tasks.llm.client import LLMClient
from aidevs_tasks.tasks.base import TaskContext, TaskResponse

logger = get_logger(__name__)

ENDPOINT = "ownapipro"
ROUTER_CONTEXT = "Decide if provided input is data to remember or a question"


class ConversationTool(str, Enum):
    REMEMBER = "remember"
    ANSWER = "answer"


CHAT_TOOLS: list[dict[str, Any]] = [
    {
        "type": "function",
        "function": {
            "name": ConversationTool.REMEMBER.value,
            "description": "Remember provided data",
            "parameters": {
                "type": "object",
                "properties": {
                    "data": {"type": "string", "description": "Data to remember"},
                    "category": {"type": "string", "description": "Data category"},
                },
                "required": ["data", "category"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": ConversationTool.ANSWER.value,
            "description": "Answer on the question",
            "parameters": {
                "type": "object",
                "properties": {"question": {"type": "string", "description": "Question"}},
                "required": ["question"],
            },
        },
    },
]


class Conversation:
    """Facts remembered during one server lifetime."""

    def __init__(self, llm: LLMClient, now: datetime | None = None) -> None:
        self.llm = llm
        self._lock = threading.Lock()
        self.context = "\n".join(
            (
                "Answer concisely as possible",
                "If you do not know answer for the question say 'I do not know'",
                f"Today is: {now or datetime.now()}",
            )
        )

    def reply(self, text: str) -> str:
        message = self.llm.complete(
            [{"role": "system", "content": ROUTER_CONTEXT}, {"role": "user", "content": text}],
            tools=CHAT_TOOLS,
        )
        if not message.tool_calls:
            raise NoAnswer("Model response does not contain tool calls.")
        call = message.tool_calls[0].function
        return self.handle(call.name, call.arguments)

    def handle(self, name: str, arguments: str) -> str:
        logger.debug("Calling '%s' function", name)
        try:
            tool = ConversationTool(name)
        except ValueError as exc:
            raise UnknownTool(f"Unexpected function name: {name}") from exc
        if tool is ConversationTool.REMEMBER:
            args = _parse_args(arguments, RememberArgs)
            with self._lock:
                self.context += f"\nFact about me: {args.category} {args.data}"
            return "Ok"
        if tool is ConversationTool.ANSWER:
            args = _parse_args(arguments, AnswerArgs)
            with self._lock:
                context = self.context
            return self.llm.ask(args.question, context=context)
        raise UnknownTool(f"Function '{name}' has no handler")


def _parse_args(arguments: str, model: type[BaseModel]) -> Any:
    try:
        return model.model_validate_json(arguments)
    except ValidationError as exc:
        raise ParseError(f"Invalid tool arguments: {arguments}") from exc


def create_app(conversation: Conversation) -> FastAPI:
    app = install_error_handler(FastAPI(title="ownapipro"))

    @app.post(f"/{ENDPOINT}", response_model=ReplyResponse)
    def reply(request: QuestionRequest) -> ReplyResponse:
        logger.debug("Received question: %s", request.question)
        return ReplyResponse(reply=conversation.reply(request.question))

    return app


def run(ctx: TaskContext, token: str) -> None:
    listen_address = ctx.settings.require("api_listen_address", "API listen address")
    endpoint = public_endpoint(ctx.settings.require("api_tunnel_url", "API tunnel URL"), ENDPOINT)
    logger.info("API tunneled endpoint: %s", endpoint)
    ctx.get_task(token, TaskResponse)
    app = create_app(Conversation(ctx.llm))
    serve_and_announce(app, listen_address, lambda: ctx.challenge.post_answer(token, endpoint))
