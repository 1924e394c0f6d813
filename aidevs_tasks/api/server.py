"""Run a FastAPI app in the background while the task announces its public URL."""

from __future__ import annotations

import threading
import time
from typing import Callable, TypeVar

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from aidevs_tasks.core.errors import ConfigurationError, TaskError
from aidevs_tasks.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

STARTUP_TIMEOUT = 10.0


def install_error_handler(app: FastAPI) -> FastAPI:
    """Report task failures inside a request as 502 responses with the error message."""

    @app.exception_handler(TaskError)
    async def _task_error(_request: Request, exc: TaskError) -> JSONResponse:
        logger.error("Request failed: %s", exc)
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    return app


def parse_listen_address(address: str) -> tuple[str, int]:
    host, _, port = address.rpartition(":")
    if not host or not port.isdigit():
        raise ConfigurationError(f"API listen address '{address}' must look like HOST:PORT")
    return host, int(port)


def public_endpoint(tunnel_url: str, path: str) -> str:
    return f"{tunnel_url.rstrip('/')}/{path.lstrip('/')}"


def serve_and_announce(app: FastAPI, listen_address: str, announce: Callable[[], T]) -> T:
    """Start ``app``, call ``announce`` once it accepts requests, then serve until stopped."""
    host, port = parse_listen_address(listen_address)
    server = uvicorn.Server(uvicorn.Config(app, host=host, port=port, log_config=None))
    thread = threading.Thread(target=server.run, name="callback-server", daemon=True)
    thread.start()

    deadline = time.monotonic() + STARTUP_TIMEOUT
    while not server.started:
        if not thread.is_alive() or time.monotonic() > deadline:
            server.should_exit = True
            raise TaskError(f"Callback server failed to start on {listen_address}")
        time.sleep(0.1)
    logger.info("Callback server listening on %s", listen_address)

    try:
        result = announce()
    except BaseException:
        server.should_exit = True
        thread.join()
        raise
    try:
        thread.join()
    except KeyboardInterrupt:
        server.should_exit = True
        thread.join()
    return result


__all__ = ["install_error_handler", "serve_and_announce", "parse_listen_address", "public_endpoint"]
