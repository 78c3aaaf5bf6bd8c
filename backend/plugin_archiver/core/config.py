"""Application configuration handling."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "PARC_"
DEFAULT_CONFIG_PATH = Path("~/.config/plugin-archiver/config.yaml")

_YAML_KEY_MAP: Mapping[tuple[str, ...], str] = {
    ("source", "base_url"): "source_base_url",
    ("source", "ref"): "source_ref",
    ("storage", "db_path"): "db_path",
    ("chunking", "chunk_size"): "chunk_size",
    ("discovery", "max_depth"): "max_depth",
    ("discovery", "max_files"): "max_files",
    ("fetch", "workers"): "fetch_workers",
    ("fetch", "timeout"): "request_timeout",
    ("archive", "cache_max_age"): "cache_max_age",
}


class Settings(BaseModel):
    """Runtime configuration loaded from YAML file and environment variables."""

    source_base_url: str = "https://cdn.jsdelivr.net/wp/plugins"
    source_ref: str = "trunk"
    db_path: Path = Field(default=Path.home() / ".plugin-archiver" / "store.db")
    chunk_size: int = Field(default=10, ge=1)
    max_depth: int = Field(default=32, ge=1)
    max_files: int = Field(default=5000, ge=1)
    fetch_workers: int = Field(default=4, ge=1)
    request_timeout: float = Field(default=30.0, gt=0)
    cache_max_age: int = Field(default=3600, ge=0)

    model_config = {
        "validate_assignment": True,
        "extra": "ignore",
    }

    @field_validator("db_path", mode="before")
    @classmethod
    def _expand_db_path(cls, value: Any) -> Path:
        if isinstance(value, Path):
            return value.expanduser()
        if isinstance(value, str):
            return Path(value).expanduser()
        raise TypeError("db_path must be a path or string")

    @field_validator("source_base_url", mode="after")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    def package_url(self, slug: str, path: str = "") -> str:
        """URL of a listing or file below the package root on the source host."""
        return f"{self.source_base_url}/{slug}/{self.source_ref}{path}"

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
    """Map environment variables with PARC_ prefix into Settings fields."""
    overrides: dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field_name = key[len(ENV_PREFIX) :].lower()
        if field_name in Settings.model_fields:
            overrides[field_name] = value
    return overrides


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings accessor for dependency injection."""
    return Settings.from_yaml()


__all__ = ["Settings", "get_settings"]
