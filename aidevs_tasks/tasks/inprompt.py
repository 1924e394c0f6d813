"""Answer a question about one person using only the sentences that mention them."""

from __future__ import annotations

from aidevs_tasks.core.errors import ParseError
from aidevs_tasks.tasks.base import TaskContext, TaskResponse

CONTEXT_HEADER = (
    "Answer on my question only using data provided after ### markers.",
    "Answers concisely as possible",
    "###",
)


class InPromptTask(TaskResponse):
    input: list[str]
    question: str


def find_capitalized_word(line: str) -> str | None:
    for word in line.split():
        if word[0].isupper():
            return word.rstrip("".join(ch for ch in word if not ch.isalpha()))
    return None


def build_context(sentences: list[str], name: str) -> str:
    return "\n".join([*CONTEXT_HEADER, *(sentence for sentence in sentences if name in sentence)])


def run(ctx: TaskContext, token: str) -> str:
    task = ctx.get_task(token, InPromptTask)
    name = find_capitalized_word(task.question)
    if name is None:
        raise ParseError(f"Name in question '{task.question}' not found.")
    return ctx.llm.ask(task.question, context=build_context(task.input, name))
