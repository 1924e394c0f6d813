"""Endpoint that turns a question into a web search and replies with the top URL."""

from __future__ import annotations

from fastapi import FastAPI

from aidevs_tasks.api.schemas import QuestionRequest, ReplyResponse
from aidevs_tasks.api.server import install_error_handler, public_endpoint, serve_and_announce
from aidevs_tasks.core.logging import get_logger
from aidevs_tasks.integrations.brave_search import BraveSearchClient
from aidevs_tasks.llm.client import LLMClient
from aidevs_tasks.tasks.base import TaskContext, TaskResponse

logger = get_logger(__name__)

ENDPOINT = "search"
SEARCH_COUNTRY = "PL"
REPHRASE_CONTEXT = "Rephrase provided query to format which can be used as input for search engine like Google"


def create_app(llm: LLMClient, search_client: BraveSearchClient) -> FastAPI:
    app = install_error_handler(FastAPI(title="google"))

    @app.post(f"/{ENDPOINT}", response_model=ReplyResponse)
    def search(request: QuestionRequest) -> ReplyResponse:
        logger.debug("Received question: %s", request.question)
        query = llm.ask(request.question, context=REPHRASE_CONTEXT)
        return ReplyResponse(reply=search_client.first_url(query))

    return app


def run(ctx: TaskContext, token: str) -> None:
    api_key = ctx.settings.require("brave_search_api_key", "Brave Search API key")
    listen_address = ctx.settings.require("api_listen_address", "API listen address")
    endpoint = public_endpoint(ctx.settings.require("api_tunnel_url", "API tunnel URL"), ENDPOINT)
    logger.info("API tunneled endpoint: %s", endpoint)
    ctx.get_task(token, TaskResponse)

    search_client = BraveSearchClient(api_key, session=ctx.session)
    search_client.set_country(SEARCH_COUNTRY)
    app = create_app(ctx.llm, search_client)
    serve_and_announce(app, listen_address, lambda: ctx.challenge.post_answer(token, endpoint))
