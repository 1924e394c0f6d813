"""Find the newsletter link that best matches a question.

The unknow.news archive is embedded into a Qdrant collection on first use;
later runs only embed the question and search.
"""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel

from aidevs_tasks.core.errors import ParseError
from aidevs_tasks.core.logging import get_logger
from aidevs_tasks.retrieval.pipeline import DatasetSpec, SemanticIndex
from aidevs_tasks.tasks.base import TaskContext, TaskResponse

logger = get_logger(__name__)

COLLECTION = "unknowNews"
ARCHIVE_URL = "https://unknow.news/archiwum_aidevs.json"


class SearchTask(TaskResponse):
    question: str


class NewsItem(BaseModel):
    title: str
    url: str
    info: str
    date: dt.date


NEWS_DATASET: DatasetSpec[NewsItem] = DatasetSpec(
    collection=COLLECTION,
    shape=list[NewsItem],
    carrier=lambda item: item.info,
)


def run(ctx: TaskContext, token: str) -> str:
    task = ctx.get_task(token, SearchTask)
    logger.info("Task question: %s", task.question)
    index = SemanticIndex(ctx.store, ctx.llm, NEWS_DATASET, session=ctx.session)
    index.ensure_populated(ARCHIVE_URL)
    attributes = index.lookup(task.question)
    url = attributes.get("url")
    if not url:
        raise ParseError("Qdrant result payload does not contain 'url' field")
    logger.info("Answer: %s", url)
    return url
