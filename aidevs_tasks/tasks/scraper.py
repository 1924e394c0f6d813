"""Answer a question about an article hosted on a deliberately unstable server."""

from __future__ import annotations

import requests

from aidevs_tasks.core.errors import FetchError, NoAnswer
from aidevs_tasks.core.logging import get_logger
from aidevs_tasks.tasks.base import TaskContext, TaskResponse
from aidevs_tasks.utils.http import retrying_session

logger = get_logger(__name__)

MAX_ANSWER_LENGTH = 200
USER_AGENTS = (
    "Chrome/123.0.0.0",
    "Safari/537.36",
    "Mozilla/5.0 (X11; Linux x86_64)",
    "AppleWebKit/537.36 (KHTML, like Gecko)",
)
CONTEXT_HEADER = "\n".join(
    (
        "Answer on my question only using data provided after ### markers.",
        "Answers concisely as possible",
        "###",
    )
)


class ScraperTask(TaskResponse):
    input: str
    question: str


def download_text(url: str, session: requests.Session | None = None) -> str:
    """Fetch ``url`` as text, rotating user agents when the server detects a bot."""
    http = session or retrying_session()
    logger.info("Downloading txt file from %s", url)
    for user_agent in USER_AGENTS:
        logger.debug("Download try with user agent '%s'", user_agent)
        try:
            resp = http.get(url, headers={"User-Agent": user_agent}, timeout=30)
        except requests.RequestException as exc:
            logger.error("Request error: %s", exc)
            continue
        content = resp.text
        if "bot detected" in content:
            logger.debug("Server detected bot, trying next user agent.")
            continue
        return content
    raise FetchError(f"Text download from {url} failed")


def run(ctx: TaskContext, token: str) -> str:
    task = ctx.get_task(token, ScraperTask)
    logger.info("Task question: %s", task.question)
    article = download_text(task.input)
    answer = ctx.llm.ask(task.question, context=f"{CONTEXT_HEADER}\n{article}")
    if len(answer) > MAX_ANSWER_LENGTH:
        raise NoAnswer(f"Answer too long ({len(answer)} > {MAX_ANSWER_LENGTH} characters)")
    return answer
