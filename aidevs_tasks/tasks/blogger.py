"""Expand culinary blog topics about Margherita pizza into paragraphs."""

from __future__ import annotations

from aidevs_tasks.core.logging import get_logger
from aidevs_tasks.tasks.base import TaskContext, TaskResponse

logger = get_logger(__name__)

SYSTEM_CONTEXT = (
    "You're a culinary blogger, you write a blog about Margherita pizza. "
    "Expand on the topic provided in Polish."
)


class BloggerTask(TaskResponse):
    blog: list[str]


def run(ctx: TaskContext, token: str) -> list[str]:
    task = ctx.get_task(token, BloggerTask)
    chapters: list[str] = []
    for topic in task.blog:
        logger.info("Request for chapter about: %s", topic)
        chapters.append(ctx.llm.ask(topic, context=SYSTEM_CONTEXT))
    return chapters
