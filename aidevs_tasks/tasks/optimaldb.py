"""Shrink a friends database below 9 kB without losing the key facts."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from aidevs_tasks.core.errors import TaskError
from aidevs_tasks.core.logging import get_logger
from aidevs_tasks.ingest.loaders import load_dataset
from aidevs_tasks.llm.client import LLMClient
from aidevs_tasks.tasks.base import TaskContext, TaskResponse

logger = get_logger(__name__)

DATABASE_SIZE_LIMIT = 9 * 1024 - 256
CHUNK_SIZE = 15
MAX_WORKERS = 4
SUMMARY_CONTEXT = (
    "Summarize the received text, keep important information. "
    "Your response should be as short as possible. "
    "You can skip person's name in your response. "
    "Be careful and not skip names of favourite person's things. "
    "Answer in Polish"
)

FriendsDatabase = dict[str, list[str]]


class OptimaldbTask(TaskResponse):
    database: str
    hint: str = ""


def database_size(database: FriendsDatabase) -> int:
    return sum(len(record.encode("utf-8")) for records in database.values() for record in records)


def optimize(database: FriendsDatabase, llm: LLMClient) -> FriendsDatabase:
    """Summarise every person's records in chunks; chunk order is preserved."""
    optimized: FriendsDatabase = {}
    with ThreadPoolExecutor(max_workers=MAX_WORKERS) as pool:
        for name, records in database.items():
            chunks = [" ".join(records[i : i + CHUNK_SIZE]) for i in range(0, len(records), CHUNK_SIZE)]
            optimized[name] = list(pool.map(lambda chunk: llm.ask(chunk, context=SUMMARY_CONTEXT), chunks))
    size = database_size(optimized)
    logger.debug("Optimized friends database size: %d kB", size // 1024)
    if size > DATABASE_SIZE_LIMIT:
        raise TaskError(f"Database after optimization is too big ({size // 1024} kB)")
    return optimized


def render_database(database: FriendsDatabase) -> str:
    return "".join(f"# {name}\n" + "".join(f"{record}\n" for record in records) for name, records in database.items())


def run(ctx: TaskContext, token: str) -> str:
    task = ctx.get_task(token, OptimaldbTask)
    logger.info("Task hint: %s", task.hint)
    database = load_dataset(task.database, FriendsDatabase, session=ctx.session)
    logger.debug("Downloaded friends database size: %d kB", database_size(database) // 1024)
    return render_database(optimize(database, ctx.llm))
