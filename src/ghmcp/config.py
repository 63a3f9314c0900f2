"""Configuration storage and layering for ghmcp.

The config file is a flat ``KEY=value`` record. Only the keys in
``FILE_KEYS`` are honored; anything else in a hand-edited file is dropped on
load so unrelated settings can never leak into a launch.

Precedence, lowest first: defaults, config file, environment, command-line
flags.
"""

import contextlib
import logging
import os
import time
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ghmcp.constants import CONFIG_PATH_ENV, DEFAULT_CONFIG_FILE
from ghmcp.errors import ConfigError
from ghmcp.models import ConfigRecord

log = logging.getLogger(__name__)

FILE_KEYS: dict[str, str] = {
    "BIN_DIR": "bin_dir",
    "BINARY_NAME": "binary_name",
    "CONTAINER_BIN_DIR": "container_bin_dir",
    "CONTAINER_IMAGE": "container_image",
    "LOG_LEVEL": "log_level",
    "DEBUG": "debug",
    "HEALTH_CHECK": "health_check",
    "MEMORY_LIMIT": "memory_limit",
    "CPU_LIMIT": "cpu_limit",
}

ENV_KEYS: dict[str, str] = {
    "GITHUB_MCP_BIN_DIR": "bin_dir",
    "GITHUB_MCP_BINARY_NAME": "binary_name",
    "GITHUB_MCP_CONTAINER_BIN_DIR": "container_bin_dir",
    "GITHUB_MCP_CONTAINER_IMAGE": "container_image",
    "GITHUB_MCP_LOG_LEVEL": "log_level",
    "GITHUB_MCP_DEBUG": "debug",
    "GITHUB_MCP_HEALTH_CHECK": "health_check",
    "CONTAINER_MEMORY_LIMIT": "memory_limit",
    "CONTAINER_CPU_LIMIT": "cpu_limit",
}


def resolve_config_path(flag_value: str | None, environ: Mapping[str, str]) -> Path:
    """Return the config file path from the flag, the environment, or the default."""
    if flag_value:
        return Path(flag_value).expanduser()
    env_value = environ.get(CONFIG_PATH_ENV, "").strip()
    if env_value:
        return Path(env_value).expanduser()
    return DEFAULT_CONFIG_FILE


def _strip_quotes(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    return value


def parse_config_text(text: str) -> dict[str, str]:
    """Return recognized settings from config file text, keyed by field name."""
    values: dict[str, str] = {}
    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            log.debug("config line %d has no '=', skipping", lineno)
            continue
        field_name = FILE_KEYS.get(key.strip())
        if field_name is None:
            log.debug("ignoring unrecognized config key %r", key.strip())
            continue
        value = _strip_quotes(value)
        if value:
            values[field_name] = value
    return values


def _merge(base: ConfigRecord, updates: Mapping[str, Any], source: str) -> ConfigRecord:
    """Layer updates over base, keeping base values for keys that fail validation."""
    merged = {**base.model_dump(), **updates}
    try:
        return ConfigRecord.model_validate(merged)
    except ValidationError as e:
        bad_fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        error = ConfigError(f"Invalid value(s) in {source} for: {', '.join(bad_fields)}")
        log.warning("%s; ignoring them. %s", error.message, error.hint)
        kept = {key: value for key, value in updates.items() if key not in bad_fields}
        return ConfigRecord.model_validate({**base.model_dump(), **kept})


def _read_config_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeError) as e:
        raise ConfigError(f"Unable to read configuration file {path}: {e}") from e


def load_config(path: Path | None = None) -> ConfigRecord:
    """Load the config file, returning defaults when it is missing or unreadable."""
    path = DEFAULT_CONFIG_FILE if path is None else path
    if not path.exists():
        log.debug("no configuration file at %s, using defaults", path)
        return ConfigRecord()

    try:
        text = _read_config_text(path)
    except ConfigError as e:
        log.warning("%s; using defaults", e.message)
        return ConfigRecord()

    log.debug("loading configuration from %s", path)
    return _merge(ConfigRecord(), parse_config_text(text), str(path))


def environment_overrides(environ: Mapping[str, str]) -> dict[str, str]:
    """Return record overrides taken from GITHUB_MCP_* environment variables."""
    overrides: dict[str, str] = {}
    for env_key, field_name in ENV_KEYS.items():
        value = environ.get(env_key, "").strip()
        if value:
            overrides[field_name] = value
    return overrides


def apply_overrides(
    record: ConfigRecord, overrides: Mapping[str, Any], source: str = "overrides"
) -> ConfigRecord:
    """Return a new record with non-empty overrides layered on top."""
    present = {
        key: value for key, value in overrides.items() if value is not None and value != ""
    }
    if not present:
        return record
    return _merge(record, present, source)


def _bool_text(value: bool) -> str:
    return "true" if value else "false"


def render_config(record: ConfigRecord, generated_at: datetime | None = None) -> str:
    """Render the full record as config file text."""
    generated_at = generated_at or datetime.now()
    lines = [
        "# GitHub MCP Server Apple Container Configuration",
        f"# Generated on {generated_at:%Y-%m-%d %H:%M:%S}",
        "",
        "# Binary location",
        f"BIN_DIR={record.bin_dir}",
        f"BINARY_NAME={record.binary_name}",
        "",
        "# Container configuration",
        f"CONTAINER_BIN_DIR={record.container_bin_dir}",
        f"CONTAINER_IMAGE={record.container_image}",
    ]
    if record.memory_limit:
        lines.append(f"MEMORY_LIMIT={record.memory_limit}")
    if record.cpu_limit:
        lines.append(f"CPU_LIMIT={record.cpu_limit}")
    lines += [
        "",
        "# Logging",
        f"LOG_LEVEL={record.log_level}",
        f"DEBUG={_bool_text(record.debug)}",
        "",
        "# Features",
        f"HEALTH_CHECK={_bool_text(record.health_check)}",
    ]
    return "\n".join(lines) + "\n"


def save_config(record: ConfigRecord, path: Path | None = None) -> Path:
    """Atomically replace the config file with a freshly rendered record."""
    path = DEFAULT_CONFIG_FILE if path is None else path
    temp_file = path.with_name(f".{path.name}.{os.getpid()}.{time.time_ns()}.tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(temp_file, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o644)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(render_config(record))
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_file, path)
    except OSError as e:
        with contextlib.suppress(OSError):
            temp_file.unlink(missing_ok=True)
        raise ConfigError(
            f"Unable to save configuration to {path}: {e}",
            hint="Check that the directory exists and is writable, or pass --config.",
        ) from e
    log.info("configuration saved to %s", path)
    return path
