"""Configuration model for ghmcp."""

from pathlib import Path, PurePosixPath
from typing import Literal

from pydantic import BaseModel, field_validator

from ghmcp.constants import (
    DEFAULT_BIN_DIR,
    DEFAULT_BINARY_NAME,
    DEFAULT_CONTAINER_BIN_DIR,
    DEFAULT_CONTAINER_IMAGE,
    DEFAULT_LOG_LEVEL,
)

LogLevel = Literal["debug", "info", "warn", "error"]


class ConfigRecord(BaseModel):
    """Flat key/value runner configuration."""

    bin_dir: Path = DEFAULT_BIN_DIR
    binary_name: str = DEFAULT_BINARY_NAME
    container_bin_dir: str = DEFAULT_CONTAINER_BIN_DIR
    container_image: str = DEFAULT_CONTAINER_IMAGE
    log_level: LogLevel = DEFAULT_LOG_LEVEL
    debug: bool = False
    health_check: bool = False
    memory_limit: str | None = None
    cpu_limit: str | None = None

    @field_validator("bin_dir")
    @classmethod
    def _expand_bin_dir(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("binary_name", "container_image")
    @classmethod
    def _require_non_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("binary_name")
    @classmethod
    def _reject_path_separators(cls, value: str) -> str:
        if "/" in value:
            raise ValueError("must be a file name, not a path")
        return value

    @field_validator("container_bin_dir")
    @classmethod
    def _require_absolute_sandbox_dir(cls, value: str) -> str:
        if not PurePosixPath(value).is_absolute():
            raise ValueError("must be an absolute path inside the container")
        return value.rstrip("/") or "/"

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip().lower()
            if value == "warning":
                return "warn"
        return value

    @field_validator("memory_limit", "cpu_limit", mode="before")
    @classmethod
    def _blank_limit_is_unset(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def binary_path(self) -> Path:
        return self.bin_dir / self.binary_name
