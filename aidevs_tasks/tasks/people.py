"""Answer a question about one person from a downloaded people database."""

from __future__ import annotations

import re

from pydantic import BaseModel, Field

from aidevs_tasks.core.errors import ParseError
from aidevs_tasks.core.logging import get_logger
from aidevs_tasks.retrieval.context import PEOPLE_CONTEXT, render
from aidevs_tasks.retrieval.pipeline import DatasetSpec, SemanticIndex, answer
from aidevs_tasks.tasks.base import TaskContext, TaskResponse

logger = get_logger(__name__)

COLLECTION = "people"
MODEL = "gpt-3.5-turbo"

_UPPERCASE_WORD_RE = re.compile(r"\b[A-ZĄĆĘŁŃÓŚŹŻ]\w*\b")


class PeopleTask(TaskResponse):
    data: str
    question: str


class Person(BaseModel):
    name: str = Field(alias="imie")
    surname: str = Field(alias="nazwisko")
    age: int = Field(alias="wiek")
    about: str = Field(alias="o_mnie")
    favourite_bomba_character: str = Field(alias="ulubiona_postac_z_kapitana_bomby")
    favourite_series: str = Field(alias="ulubiony_serial")
    favourite_movie: str = Field(alias="ulubiony_film")
    favourite_color: str = Field(alias="ulubiony_kolor")

    model_config = {"populate_by_name": True}


PEOPLE_DATASET: DatasetSpec[Person] = DatasetSpec(
    collection=COLLECTION,
    shape=list[Person],
    carrier=lambda person: f"{person.name} {person.surname}",
)


def find_fullname(question: str) -> str:
    """Return the last two capitalised words of ``question``."""
    words = _UPPERCASE_WORD_RE.findall(question)
    if len(words) < 2:
        raise ParseError(f"Can not find person fullname in question '{question}'")
    return " ".join(words[-2:])


def run(ctx: TaskContext, token: str) -> str:
    task = ctx.get_task(token, PeopleTask)
    logger.info("Task question: %s", task.question)
    index = SemanticIndex(ctx.store, ctx.llm, PEOPLE_DATASET, session=ctx.session)
    index.ensure_populated(task.data)
    attributes = index.lookup(find_fullname(task.question))
    context = render(attributes, PEOPLE_CONTEXT)
    return answer(ctx.llm, MODEL, task.question, context)
