"""Return the embedding vector of a fixed phrase."""

from __future__ import annotations

from aidevs_tasks.core.logging import get_logger
from aidevs_tasks.tasks.base import TaskContext

logger = get_logger(__name__)

INPUT = "Hawaiian pizza"
MODEL = "text-embedding-ada-002"


def run(ctx: TaskContext, token: str) -> list[float]:
    logger.info("Embedding generation for '%s' phrase using %s model.", INPUT, MODEL)
    embedding = ctx.llm.embed(INPUT, model=MODEL)
    logger.info("Received embedding array length: %d", len(embedding))
    return embedding
