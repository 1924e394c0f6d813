"""Expose an HTTP endpoint that answers the grader's questions with the LLM."""

from __future__ import annotations

from fastapi import FastAPI

from aidevs_tasks.api.schemas import AnswerResponse, QuestionRequest
from aidevs_tasks.api.server import install_error_handler, public_endpoint, serve_and_announce
from aidevs_tasks.core.logging import get_logger
from aidevs_tasks.llm.client import LLMClient
from aidevs_tasks.tasks.base import TaskContext, TaskResponse

logger = get_logger(__name__)

ENDPOINT = "ownapi"


def create_app(llm: LLMClient) -> FastAPI:
    app = install_error_handler(FastAPI(title="ownapi"))

    @app.post(f"/{ENDPOINT}", response_model=AnswerResponse)
    def answer(request: QuestionRequest) -> AnswerResponse:
        logger.debug("Received question: %s", request.question)
        return AnswerResponse(answer=llm.ask(request.question))

    return app


def run(ctx: TaskContext, token: str) -> None:
    listen_address = ctx.settings.require("api_listen_address", "API listen address")
    endpoint = public_endpoint(ctx.settings.require("api_tunnel_url", "API tunnel URL"), ENDPOINT)
    logger.info("API tunneled endpoint: %s", endpoint)
    ctx.get_task(token, TaskResponse)
    serve_and_announce(create_app(ctx.llm), listen_address, lambda: ctx.challenge.post_answer(token, endpoint))
