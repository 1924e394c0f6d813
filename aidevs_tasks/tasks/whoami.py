"""Guess a person from hints, fetching a new hint until the model is confident."""

from __future__ import annotations

from aidevs_tasks.core.errors import NoAnswer
from aidevs_tasks.core.logging import get_logger
from aidevs_tasks.tasks.base import TaskContext, TaskResponse

logger = get_logger(__name__)

MODEL = "gpt-4"
QUESTION = "Who is being talked about?"
NOT_ENOUGH_DATA = "Not enough data"
MAX_HINTS = 20
CONTEXT_HEADER = "\n".join(
    (
        "Answer on my question using data provided after ### markers and your base knowledge",
        "Answer concisely as possible",
        f"If you do not know the persons name and surname reply only with '{NOT_ENOUGH_DATA}'",
        "",
        "###",
    )
)


class WhoAmITask(TaskResponse):
    hint: str


def run(ctx: TaskContext, token: str) -> str:
    hints: list[str] = []
    for _ in range(MAX_HINTS):
        hint = ctx.get_task(token, WhoAmITask).hint
        if hint in hints:
            continue
        hints.append(hint)
        context = "\n".join([CONTEXT_HEADER, *hints])
        answer = ctx.llm.ask(QUESTION, context=context, model=MODEL)
        if NOT_ENOUGH_DATA in answer:
            logger.info("Not enough data, fetching next hint")
            continue
        return answer
    raise NoAnswer(f"Person not recognised after {MAX_HINTS} hints")
