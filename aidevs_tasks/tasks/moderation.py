"""Flag which of the received inputs should be moderated."""

from __future__ import annotations

from aidevs_tasks.core.logging import get_logger
from aidevs_tasks.tasks.base import TaskContext, TaskResponse

logger = get_logger(__name__)


class ModerationTask(TaskResponse):
    input: list[str]


def run(ctx: TaskContext, token: str) -> list[int]:
    task = ctx.get_task(token, ModerationTask)
    flags = [int(flagged) for flagged in ctx.llm.moderate(task.input)]
    logger.debug("Model response flags: %s", flags)
    return flags
