"""Classify a request as a Calendar entry or a ToDo item."""

from __future__ import annotations

import datetime as dt
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from aidevs_tasks.core.errors import ParseError
from aidevs_tasks.core.logging import get_logger
from aidevs_tasks.tasks.base import TaskContext, TaskResponse

logger = get_logger(__name__)


class ToolsTask(TaskResponse):
    example_calendar: str = Field(alias="example for Calendar")
    example_todo: str = Field(alias="example for ToDo")
    hint: str = ""
    question: str


class Calendar(BaseModel):
    tool: Literal["Calendar"]
    desc: str
    date: dt.date


class ToDo(BaseModel):
    tool: Literal["ToDo"]
    desc: str


Tool = Annotated[Union[Calendar, ToDo], Field(discriminator="tool")]
_TOOL_ADAPTER: TypeAdapter[Calendar | ToDo] = TypeAdapter(Tool)


def parse_tool(answer: str) -> Calendar | ToDo:
    try:
        return _TOOL_ADAPTER.validate_json(answer)
    except ValidationError as exc:
        raise ParseError(f"Model answer is not a valid tool: {answer}") from exc


def build_context(task: ToolsTask, today: dt.date) -> str:
    return "\n".join(
        (
            task.msg,
            task.hint,
            f"Today date: {today.isoformat()}",
            "Examples:",
            task.example_calendar,
            task.example_todo,
        )
    )


def run(ctx: TaskContext, token: str) -> dict[str, str]:
    task = ctx.get_task(token, ToolsTask)
    answer = ctx.llm.ask(task.question, context=build_context(task, dt.date.today()))
    tool = parse_tool(answer)
    logger.debug("Selected tool: %s", tool)
    return tool.model_dump(mode="json")
