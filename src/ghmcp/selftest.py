"""Self-tests run by the setup wizard against the installed runner."""

import json
import logging
import subprocess
from collections.abc import Mapping, Sequence
from typing import TextIO

from ghmcp import __version__
from ghmcp.wait_indicator import WaitIndicator

log = logging.getLogger(__name__)

PROBE_TIMEOUT_SECONDS = 10
RUNNER_CHECK_TIMEOUT_SECONDS = 30
MCP_PROTOCOL_VERSION = "2024-11-05"

INITIALIZE_REQUEST = {
    "jsonrpc": "2.0",
    "method": "initialize",
    "params": {
        "protocolVersion": MCP_PROTOCOL_VERSION,
        "capabilities": {},
        "clientInfo": {"name": "github-mcp-setup", "version": __version__},
    },
    "id": 1,
}


def check_runner(command: str) -> bool:
    """Return whether `command --help` runs cleanly."""
    try:
        result = subprocess.run(
            [command, "--help"],
            capture_output=True,
            text=True,
            timeout=RUNNER_CHECK_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        log.debug("%s --help failed: %s", command, e)
        return False
    return result.returncode == 0


def contains_result(output: str) -> bool:
    """Return whether any output line is a JSON-RPC message with a result."""
    for line in output.splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            message = json.loads(line)
        except json.JSONDecodeError:
            continue
        if isinstance(message, dict) and "result" in message:
            return True
    return False


def probe_protocol(
    argv: Sequence[str],
    env: Mapping[str, str] | None = None,
    timeout: float = PROBE_TIMEOUT_SECONDS,
    stream: TextIO | None = None,
) -> bool:
    """Send one initialize request and wait a bounded time for a result."""
    request = json.dumps(INITIALIZE_REQUEST) + "\n"
    with WaitIndicator("Waiting for MCP initialize response...", stream=stream):
        try:
            result = subprocess.run(
                list(argv),
                input=request,
                capture_output=True,
                text=True,
                timeout=timeout,
                env=dict(env) if env is not None else None,
            )
            output = result.stdout
        except subprocess.TimeoutExpired as e:
            log.debug("protocol probe timed out after %ss", timeout)
            output = e.stdout or ""
        except OSError as e:
            log.debug("protocol probe failed to start: %s", e)
            return False

    if isinstance(output, bytes):
        output = output.decode(errors="replace")
    return contains_result(output)
