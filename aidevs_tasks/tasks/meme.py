"""Render a meme from the received image and caption."""

from __future__ import annotations

from aidevs_tasks.core.logging import get_logger
from aidevs_tasks.integrations.render_form import RenderDataBuilder, RenderFormClient, RenderRequest
from aidevs_tasks.tasks.base import TaskContext, TaskResponse

logger = get_logger(__name__)

RENDER_FORM_TEMPLATE = "lively-snakes-smash-gently-1459"


class MemeTask(TaskResponse):
    image: str
    text: str


def run(ctx: TaskContext, token: str) -> str:
    api_key = ctx.settings.require("render_form_api_key", "RenderForm API key")
    task = ctx.get_task(token, MemeTask)
    client = RenderFormClient(api_key, session=ctx.session)
    data = RenderDataBuilder().source("image", task.image).text("title", task.text).build()
    response = client.render(RenderRequest(template=RENDER_FORM_TEMPLATE, data=data))
    logger.info("Rendered image URL: %s", response.href)
    return response.href
