"""Shared constants for ghmcp."""

from pathlib import Path

BOLD = "\033[1m"
RED = "\033[0;31m"
GREEN = "\033[0;32m"
YELLOW = "\033[1;33m"
BLUE = "\033[0;34m"
RESET = "\033[0m"

SERVER_NAME = "github"
DEFAULT_BINARY_NAME = "github-mcp-server"
DEFAULT_STATE_DIR = Path.home() / ".github-mcp"
DEFAULT_BIN_DIR = DEFAULT_STATE_DIR / "bin"
DEFAULT_CONFIG_FILE = Path.home() / ".github-mcp-config"
DEFAULT_CONTAINER_BIN_DIR = "/usr/local/bin"
DEFAULT_CONTAINER_IMAGE = "alpine:latest"
DEFAULT_LOG_LEVEL = "info"

CONTAINER_COMMAND = "container"
# Selects the server's standard-input/output operating mode.
STDIO_MODE_ARG = "stdio"

PRIMARY_TOKEN_ENV = "GITHUB_PERSONAL_ACCESS_TOKEN"
SECONDARY_TOKEN_ENV = "GITHUB_TOKEN"
CONFIG_PATH_ENV = "GITHUB_MCP_CONFIG"

RUNNER_COMMAND = "github-mcp-run"
