"""Task registry and runner."""

from __future__ import annotations

from enum import Enum
from typing import Any

from aidevs_tasks.core.logging import get_logger
from aidevs_tasks.tasks import (
    blogger,
    embedding,
    functions,
    gnome,
    google,
    helloapi,
    inprompt,
    knowledge,
    liar,
    meme,
    moderation,
    optimaldb,
    ownapi,
    ownapipro,
    people,
    rodo,
    scraper,
    search,
    tools,
    whisper,
    whoami,
)
from aidevs_tasks.tasks.base import TaskContext, TaskRunner

logger = get_logger(__name__)


class Task(str, Enum):
    HELLOAPI = "helloapi"
    MODERATION = "moderation"
    BLOGGER = "blogger"
    LIAR = "liar"
    INPROMPT = "inprompt"
    EMBEDDING = "embedding"
    WHISPER = "whisper"
    FUNCTIONS = "functions"
    RODO = "rodo"
    SCRAPER = "scraper"
    WHOAMI = "whoami"
    SEARCH = "search"
    PEOPLE = "people"
    KNOWLEDGE = "knowledge"
    TOOLS = "tools"
    GNOME = "gnome"
    OWNAPI = "ownapi"
    OWNAPIPRO = "ownapipro"
    GOOGLE = "google"
    MEME = "meme"
    OPTIMALDB = "optimaldb"


RUNNERS: dict[Task, TaskRunner] = {
    Task.HELLOAPI: helloapi.run,
    Task.MODERATION: moderation.run,
    Task.BLOGGER: blogger.run,
    Task.LIAR: liar.run,
    Task.INPROMPT: inprompt.run,
    Task.EMBEDDING: embedding.run,
    Task.WHISPER: whisper.run,
    Task.FUNCTIONS: functions.run,
    Task.RODO: rodo.run,
    Task.SCRAPER: scraper.run,
    Task.WHOAMI: whoami.run,
    Task.SEARCH: search.run,
    Task.PEOPLE: people.run,
    Task.KNOWLEDGE: knowledge.run,
    Task.TOOLS: tools.run,
    Task.GNOME: gnome.run,
    Task.OWNAPI: ownapi.run,
    Task.OWNAPIPRO: ownapipro.run,
    Task.GOOGLE: google.run,
    Task.MEME: meme.run,
    Task.OPTIMALDB: optimaldb.run,
}

# These serve a callback endpoint and post its public URL themselves.
SELF_ANSWERING = frozenset({Task.OWNAPI, Task.OWNAPIPRO, Task.GOOGLE})


def run_task(task: Task, ctx: TaskContext) -> Any:
    """Obtain a token, compute the answer and post it back.

    Any error propagates before the answer is posted, so a failed run never
    submits a partial answer.
    """
    logger.info("Start '%s' task", task.value)
    token = ctx.challenge.get_token(task.value)
    answer = RUNNERS[task](ctx, token)
    if task in SELF_ANSWERING:
        return None
    ctx.challenge.post_answer(token, answer)
    return answer


def show_hint(task: Task, ctx: TaskContext) -> str:
    logger.info("Get '%s' task hint", task.value)
    return ctx.challenge.get_hint(task.value)


__all__ = ["Task", "RUNNERS", "SELF_ANSWERING", "run_task", "show_hint", "TaskContext"]
