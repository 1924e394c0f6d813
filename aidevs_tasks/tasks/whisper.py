"""Download the audio file linked in the task message and transcribe it."""

from __future__ import annotations

import re
import tempfile
from pathlib import Path
from urllib.parse import urlparse

import requests

from aidevs_tasks.core.errors import FetchError, ParseError
from aidevs_tasks.core.logging import get_logger
from aidevs_tasks.tasks.base import TaskContext, TaskResponse

logger = get_logger(__name__)

MODEL = "whisper-1"
_URL_RE = re.compile(r"https?://\S+")


class WhisperTask(TaskResponse):
    hint: str = ""


def find_audio_url(message: str) -> str:
    match = _URL_RE.search(message)
    if match is None:
        raise ParseError("Audio source URL not found in task API response message.")
    return match.group(0)


def download_to(url: str, dest_dir: Path, session: requests.Session) -> Path:
    file_name = Path(urlparse(url).path).name
    if not file_name:
        raise ParseError(f"Can not extract last path segment from {url}")
    out_path = dest_dir / file_name
    logger.debug("Downloading %s to %s", url, out_path)
    try:
        with session.get(url, stream=True, timeout=60) as resp:
            resp.raise_for_status()
            with out_path.open("wb") as fh:
                for chunk in resp.iter_content(chunk_size=64 * 1024):
                    fh.write(chunk)
    except requests.RequestException as exc:
        raise FetchError(f"Downloading {url} failed: {exc}") from exc
    return out_path


def run(ctx: TaskContext, token: str) -> str:
    task = ctx.get_task(token, WhisperTask)
    logger.info("Task hint: %s", task.hint)
    audio_url = find_audio_url(task.msg)
    with tempfile.TemporaryDirectory() as tmp_dir:
        audio_path = download_to(audio_url, Path(tmp_dir), ctx.session)
        return ctx.llm.transcribe(audio_path, model=MODEL)
