"""MCP client configuration artifacts.

Two targets are supported: the Claude Desktop JSON descriptor and the
Claude Code CLI registry (``claude mcp add`` / ``claude mcp list``).
"""

import json
import logging
import os
import shutil
import subprocess
from pathlib import Path

from ghmcp.constants import SERVER_NAME
from ghmcp.models import RegistryState, RegistryStatus

log = logging.getLogger(__name__)

DESKTOP_CONFIG_FILE = Path.home() / ".claude_desktop_config.json"
BACKUP_SUFFIX = ".backup"
ALTERNATE_SUFFIX = ".github-mcp"
CLAUDE_COMMAND = "claude"
CLAUDE_TIMEOUT_SECONDS = 60


def desktop_descriptor(command: str, token: str) -> dict:
    return {"mcpServers": {SERVER_NAME: {"command": command, "args": [token]}}}


def render_desktop_descriptor(command: str, token: str) -> str:
    return json.dumps(desktop_descriptor(command, token), indent=2) + "\n"


def backup_path_for(path: Path) -> Path:
    return path.with_name(path.name + BACKUP_SUFFIX)


def alternate_path_for(path: Path) -> Path:
    return path.with_name(path.name + ALTERNATE_SUFFIX)


def backup_file(path: Path) -> Path:
    """Copy an existing artifact aside and return the backup path."""
    backup = backup_path_for(path)
    shutil.copy2(path, backup)
    log.debug("backed up %s to %s", path, backup)
    return backup


def write_desktop_descriptor(path: Path, command: str, token: str) -> Path:
    """Write the descriptor, readable only by the owner since it holds the token."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(render_desktop_descriptor(command, token))
    return path


def registration_argv(command: str, token: str) -> list[str]:
    return [CLAUDE_COMMAND, "mcp", "add", SERVER_NAME, command, token]


def registration_command(command: str, token: str) -> str:
    """Return the one-line registration command shown to the user."""
    return f'{CLAUDE_COMMAND} mcp add {SERVER_NAME} "{command}" "{token}"'


def register_with_claude_code(command: str, token: str) -> bool:
    """Run `claude mcp add`; return whether it exited successfully."""
    try:
        result = subprocess.run(
            registration_argv(command, token),
            capture_output=True,
            text=True,
            timeout=CLAUDE_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        log.debug("claude mcp add failed to run: %s", e)
        return False
    if result.returncode != 0:
        log.debug("claude mcp add exited %d: %s", result.returncode, result.stderr.strip())
        return False
    return True


def query_claude_registry() -> RegistryStatus:
    """Ask Claude Code which MCP servers it knows about."""
    if shutil.which(CLAUDE_COMMAND) is None:
        return RegistryStatus(RegistryState.NOT_AVAILABLE)
    try:
        result = subprocess.run(
            [CLAUDE_COMMAND, "mcp", "list"],
            capture_output=True,
            text=True,
            timeout=CLAUDE_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        log.debug("claude mcp list failed to run: %s", e)
        return RegistryStatus(RegistryState.ERROR)
    if result.returncode != 0:
        return RegistryStatus(RegistryState.ERROR)

    prefix = f"{SERVER_NAME}:"
    for line in result.stdout.splitlines():
        if line.startswith(prefix):
            return RegistryStatus(RegistryState.CONFIGURED, line[len(prefix):].strip())
    return RegistryStatus(RegistryState.NOT_CONFIGURED)
