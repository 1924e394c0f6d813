"""Warm-up task: return the ``cookie`` field of the task payload."""

from __future__ import annotations

from aidevs_tasks.tasks.base import TaskContext, TaskResponse


class HelloApiTask(TaskResponse):
    cookie: str


def run(ctx: TaskContext, token: str) -> str:
    task = ctx.get_task(token, HelloApiTask)
    return task.cookie
