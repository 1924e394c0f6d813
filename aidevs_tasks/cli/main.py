"""CLI entrypoint for the AI Devs task runner."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from aidevs_tasks.core.config import get_settings
from aidevs_tasks.core.errors import TaskError
from aidevs_tasks.core.logging import configure_logging, get_logger
from aidevs_tasks.tasks import Task, TaskContext, run_task, show_hint

app = typer.Typer(name="aidevs", help="Run AI Devs challenge tasks", no_args_is_help=True)

logger = get_logger(__name__)


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", help="Path to YAML configuration"),
    log_level: str = typer.Option("INFO", "--log-level", envvar="AIDEVS_LOG_LEVEL", help="Logging level"),
    json_logs: bool = typer.Option(True, "--json-logs/--plain-logs", help="Emit logs as JSON lines"),
) -> None:
    configure_logging(level=log_level, use_json=json_logs)
    ctx.obj = config


def _context(ctx: typer.Context) -> TaskContext:
    try:
        return TaskContext(get_settings(ctx.obj))
    except TaskError as exc:
        _fail(exc)


def _fail(exc: TaskError) -> None:
    logger.error("%s: %s", type(exc).__name__, exc)
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1)


@app.command()
def run(
    ctx: typer.Context,
    task: Task = typer.Argument(..., help="Task name"),
) -> None:
    """Solve a task and post the answer."""
    with _context(ctx) as task_ctx:
        try:
            answer = run_task(task, task_ctx)
        except TaskError as exc:
            _fail(exc)
    if answer is not None:
        typer.echo(json.dumps({"answer": answer}, ensure_ascii=False, default=str))


@app.command()
def hint(
    ctx: typer.Context,
    task: Task = typer.Argument(..., help="Task name"),
) -> None:
    """Print the hint for a task."""
    with _context(ctx) as task_ctx:
        try:
            text = show_hint(task, task_ctx)
        except TaskError as exc:
            _fail(exc)
    typer.echo(f"{task.value} hint: {text}")


if __name__ == "__main__":
    app()
