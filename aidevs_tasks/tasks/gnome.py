"""Read the colour of a gnome's hat from a picture with a vision model."""

from __future__ import annotations

from aidevs_tasks.core.errors import NoAnswer
from aidevs_tasks.core.logging import get_logger
from aidevs_tasks.tasks.base import TaskContext, TaskResponse

logger = get_logger(__name__)

MODEL = "gpt-4o"


class GnomeTask(TaskResponse):
    hint: str = ""
    url: str


def build_messages(task: GnomeTask) -> list[dict]:
    prompt = "\n".join(
        (
            task.msg,
            "hint: it won't always be a drawing of a gnome, return ERROR in this case",
            "Answer concisely as possible",
        )
    )
    return [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": prompt},
                {"type": "image_url", "image_url": {"url": task.url, "detail": "high"}},
            ],
        }
    ]


def run(ctx: TaskContext, token: str) -> str:
    task = ctx.get_task(token, GnomeTask)
    logger.info("Task hint: %s", task.hint)
    message = ctx.llm.complete(build_messages(task), model=MODEL)
    if not message.content:
        raise NoAnswer(f"{MODEL} response does not contain answer.")
    logger.info("%s answer: %s", MODEL, message.content)
    return message.content
