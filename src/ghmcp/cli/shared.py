"""Shared CLI presentation helpers."""

import logging
import os
import shutil
import sys
from pathlib import Path
from typing import TextIO

from ghmcp.constants import BLUE, BOLD, GREEN, RED, RESET, RUNNER_COMMAND, YELLOW
from ghmcp.errors import GhmcpError

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

_STATUS_STYLES = {
    "info": ("ℹ️ ", BLUE),
    "success": ("✅", GREEN),
    "warning": ("⚠️ ", YELLOW),
    "error": ("❌", RED),
    "step": ("🔹", BOLD),
}


def supports_color(stream: TextIO | None = None) -> bool:
    """Return whether ANSI color output should be used."""
    if os.getenv("NO_COLOR") is not None:
        return False
    if os.getenv("TERM", "").lower() == "dumb":
        return False
    stream = stream if stream is not None else sys.stdout
    return hasattr(stream, "isatty") and stream.isatty()


def configure_logging(log_level: str = "info", debug: bool = False) -> None:
    """Send log records to stderr; stdout belongs to the MCP stream."""
    level = logging.DEBUG if debug else LOG_LEVELS.get(log_level, logging.INFO)
    logging.basicConfig(level=level, format="%(name)s %(levelname)s: %(message)s")


def print_status(kind: str, message: str, stream: TextIO | None = None) -> None:
    stream = stream if stream is not None else sys.stderr
    symbol, color = _STATUS_STYLES[kind]
    text = f"{symbol} {message}"
    if supports_color(stream):
        text = f"{color}{text}{RESET}"
    print(text, file=stream)


def report_error(error: GhmcpError, stream: TextIO | None = None) -> None:
    """Print an error and its remediation hint to stderr."""
    stream = stream if stream is not None else sys.stderr
    text = f"Error: {error.message}"
    if supports_color(stream):
        text = f"{RED}{text}{RESET}"
    print(text, file=stream)
    if error.hint:
        print(f"Hint: {error.hint}", file=stream)


def runner_command() -> str:
    """Return the absolute path of the installed runner script."""
    found = shutil.which(RUNNER_COMMAND)
    if found:
        return found
    return str(Path(sys.executable).with_name(RUNNER_COMMAND))
