"""Guardrails check: decide whether the task API answered our question truthfully."""

from __future__ import annotations

from aidevs_tasks.core.errors import NoAnswer
from aidevs_tasks.tasks.base import TaskContext, TaskResponse, parse_payload

QUESTION = "What is SSL certificate?"
VERIFIER_CONTEXT = (
    "You are a verifier of the truthfulness of answers. "
    "Respond briefly with YES or NO whether the given question and answer match."
)


class LiarTask(TaskResponse):
    answer: str


def run(ctx: TaskContext, token: str) -> str:
    task = parse_payload(ctx.challenge.ask_task(token, {"question": QUESTION}), LiarTask)
    verdict = ctx.llm.ask(f"{QUESTION}\n\n{task.answer}", context=VERIFIER_CONTEXT).strip()
    if verdict not in ("YES", "NO"):
        raise NoAnswer(f"Model verdict '{verdict}' is not YES or NO")
    return verdict
