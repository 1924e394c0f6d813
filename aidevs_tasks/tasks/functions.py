"""Answer with a function-calling definition of ``addUser``."""

from __future__ import annotations

from typing import Any

from aidevs_tasks.tasks.base import TaskContext, TaskResponse

ADD_USER_FUNCTION: dict[str, Any] = {
    "name": "addUser",
    "description": "Add user",
    "parameters": {
        "type": "object",
        "properties": {
            "name": {"type": "string", "description": "User's name"},
            "surname": {"type": "string", "description": "User's surname"},
            "year": {"type": "integer", "description": "User's year of birth"},
        },
    },
}


def run(ctx: TaskContext, token: str) -> dict[str, Any]:
    ctx.get_task(token, TaskResponse)
    return ADD_USER_FUNCTION
