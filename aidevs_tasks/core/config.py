"""Application configuration handling."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, field_validator

from aidevs_tasks.core.errors import ConfigurationError

ENV_PREFIX = "AIDEVS_"
DEFAULT_CONFIG_PATH = Path("~/.config/aidevs-tasks/config.yaml")

_YAML_KEY_MAP: Mapping[tuple[str, ...], str] = {
    ("challenge", "api_url"): "api_url",
    ("challenge", "api_key"): "api_key",
    ("challenge", "timeout"): "request_timeout",
    ("openai", "api_key"): "openai_api_key",
    ("openai", "base_url"): "openai_base_url",
    ("openai", "chat_model"): "chat_model",
    ("openai", "embedding_model"): "embedding_model",
    ("qdrant", "url"): "qdrant_url",
    ("qdrant", "vector_size"): "vector_size",
    ("server", "listen_address"): "api_listen_address",
    ("server", "tunnel_url"): "api_tunnel_url",
    ("render_form", "api_key"): "render_form_api_key",
    ("brave_search", "api_key"): "brave_search_api_key",
}


class Settings(BaseModel):
    """Runtime configuration loaded from YAML file and environment variables."""

    api_url: str = "https://tasks.aidevs.pl"
    api_key: str | None = None
    openai_api_key: str | None = None
    openai_base_url: str | None = None
    chat_model: str = "gpt-3.5-turbo"
    embedding_model: str = "text-embedding-ada-002"
    qdrant_url: str | None = None
    vector_size: int = 1536
    api_listen_address: str | None = None
    api_tunnel_url: str | None = None
    render_form_api_key: str | None = None
    brave_search_api_key: str | None = None
    request_timeout: float = 60.0

    model_config = {
        "validate_assignment": True,
        "extra": "ignore",
    }

    @field_validator("api_url", "api_tunnel_url", mode="before")
    @classmethod
    def _strip_trailing_slash(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.rstrip("/")
        return value

    @classmethod
    def from_yaml(cls, path: Path | None = None) -> "Settings":
        """Load YAML config and overlay env vars; fall back to defaults."""
        config_path = cls._resolve_config_path(path)
        data: dict[str, Any] = {}
        if config_path and config_path.exists():
            with config_path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
            data.update(_flatten_yaml(raw))
        data.update(_load_env_overrides())
        return cls(**data)

    @staticmethod
    def _resolve_config_path(path: Path | None) -> Path | None:
        if path is not None:
            return path.expanduser()
        env_path = os.environ.get(f"{ENV_PREFIX}CONFIG")
        if env_path:
            return Path(env_path).expanduser()
        resolved_default = DEFAULT_CONFIG_PATH.expanduser()
        return resolved_default if resolved_default.exists() else None

    def require(self, field_name: str, label: str) -> str:
        """Return a configured optional value or fail with a readable message."""
        value = getattr(self, field_name)
        if not value:
            raise ConfigurationError(f"{label} not found in configuration")
        return value


def _flatten_yaml(raw: Mapping[str, Any], prefix: tuple[str, ...] = ()) -> dict[str, Any]:
    """Flatten nested YAML configuration to Settings field names."""
    flat: dict[str, Any] = {}
    for key, value in raw.items():
        next_prefix = prefix + (key,)
        if isinstance(value, Mapping):
            flat.update(_flatten_yaml(value, prefix=next_prefix))
        else:
            mapped_key = _YAML_KEY_MAP.get(next_prefix)
            if mapped_key:
                flat[mapped_key] = value
            elif key in Settings.model_fields:
                flat[key] = value
    return flat


def _load_env_overrides() -> dict[str, Any]:
    """Map environment variables with AIDEVS_ prefix into Settings fields."""
    overrides: dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field_name = key[len(ENV_PREFIX) :].lower()
        if field_name in Settings.model_fields:
            overrides[field_name] = value
    return overrides


@lru_cache(maxsize=1)
def get_settings(path: Path | None = None) -> Settings:
    """Cached settings accessor; reads a local .env before resolving."""
    load_dotenv(find_dotenv(usecwd=True))
    return Settings.from_yaml(path)


__all__ = ["Settings", "get_settings"]
