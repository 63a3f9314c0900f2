"""`github-mcp-run`: launch the GitHub MCP server inside an Apple container."""

import argparse
import logging
import os
import sys
from collections.abc import Mapping, Sequence
from typing import Any

from ghmcp import __version__
from ghmcp.cli.shared import configure_logging, report_error
from ghmcp.config import (
    apply_overrides,
    environment_overrides,
    load_config,
    resolve_config_path,
    save_config,
)
from ghmcp.credentials import CredentialResolver
from ghmcp.errors import BuildError, GhmcpError
from ghmcp.health import HealthChecker, launch_target
from ghmcp.launcher import LaunchAssembler
from ghmcp.runtime import ContainerRuntime

log = logging.getLogger(__name__)

EPILOG = """\
Environment variables:
  GITHUB_PERSONAL_ACCESS_TOKEN    GitHub Personal Access Token
  GITHUB_TOKEN                    Alternative token variable
  GITHUB_MCP_BIN_DIR              Binary directory
  GITHUB_MCP_BINARY_NAME          Binary filename
  GITHUB_MCP_CONTAINER_BIN_DIR    Binary directory inside the container
  GITHUB_MCP_CONTAINER_IMAGE      Container image
  GITHUB_MCP_LOG_LEVEL            Log level
  GITHUB_MCP_DEBUG                Enable debug mode (true/false)
  GITHUB_MCP_HEALTH_CHECK         Enable health check (true/false)
  GITHUB_MCP_CONFIG               Configuration file path
  CONTAINER_MEMORY_LIMIT          Container memory limit (example: 512m)
  CONTAINER_CPU_LIMIT             Container CPU limit (example: 2)

Configuration file format (KEY=value, # comments):
  BIN_DIR=/path/to/bin
  BINARY_NAME=github-mcp-server
  CONTAINER_IMAGE=alpine:latest
  LOG_LEVEL=info
  DEBUG=false
  HEALTH_CHECK=true

Examples:
  # Basic usage with token
  github-mcp-run ghp_xxxxxxxxxxxxxxxxxxxx

  # Use environment token
  export GITHUB_PERSONAL_ACCESS_TOKEN=ghp_xxxxxxxxxxxxxxxxxxxx
  github-mcp-run --env-token

  # Debug mode with health check, restricted toolsets
  github-mcp-run --debug --health-check ghp_xxxxxxxxxxxxxxxxxxxx --toolsets repos,issues

Claude Desktop configuration:
  {
    "mcpServers": {
      "github": {
        "command": "/path/to/github-mcp-run",
        "args": ["ghp_xxxxxxxxxxxxxxxxxxxx"]
      }
    }
  }

Claude Code CLI configuration:
  claude mcp add github /path/to/github-mcp-run ghp_xxxxxxxxxxxxxxxxxxxx
"""


def build_parser() -> argparse.ArgumentParser:
    """Build parser for the runner."""
    parser = argparse.ArgumentParser(
        prog="github-mcp-run",
        usage=(
            "%(prog)s [OPTIONS] <token> [server-args...]\n"
            "       %(prog)s [OPTIONS] --env-token [server-args...]"
        ),
        description="GitHub MCP Server Runner for Apple Containers",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--env-token",
        action="store_true",
        help="Use the token from GITHUB_PERSONAL_ACCESS_TOKEN or GITHUB_TOKEN",
    )
    parser.add_argument(
        "--config",
        metavar="FILE",
        help="Configuration file (default: ~/.github-mcp-config)",
    )
    parser.add_argument("--bin-dir", metavar="DIR", help="Host directory holding the binary")
    parser.add_argument(
        "--binary-name", metavar="NAME", help="Binary filename (default: github-mcp-server)"
    )
    parser.add_argument(
        "--container-image", metavar="IMG", help="Container image (default: alpine:latest)"
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warn", "error"],
        help="Log level (default: info)",
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--health-check",
        action="store_true",
        help="Perform a health check before running",
    )
    parser.add_argument(
        "--save-config",
        action="store_true",
        help="Save the resolved configuration to the config file and exit",
    )
    parser.add_argument(
        "args",
        nargs="*",
        metavar="token [server-args...]",
        help="GitHub token (unless --env-token), then arguments passed to the server verbatim",
    )
    return parser


RUNNER_FLAGS = frozenset(
    {
        "-h",
        "--help",
        "-V",
        "--version",
        "--env-token",
        "-d",
        "--debug",
        "--health-check",
        "--save-config",
    }
)
RUNNER_VALUE_OPTIONS = frozenset(
    {"--config", "--bin-dir", "--binary-name", "--container-image", "--log-level"}
)


def split_argv(argv: Sequence[str]) -> tuple[list[str], list[str]]:
    """Split argv into runner options and the untouched tail.

    Runner options end at the first token that is not one of them, or at
    ``--``. Everything after that point belongs to the token and the server.
    """
    argv = list(argv)
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--":
            return argv[:i], argv[i + 1 :]
        if arg in RUNNER_FLAGS:
            i += 1
        elif arg in RUNNER_VALUE_OPTIONS:
            i += 2
        elif arg.partition("=")[0] in RUNNER_VALUE_OPTIONS:
            i += 1
        else:
            break
    return argv[:i], argv[i:]


def parse_runner_args(
    parser: argparse.ArgumentParser, argv: Sequence[str]
) -> argparse.Namespace:
    """Parse runner options; the tail is passed on without interpretation."""
    options, tail = split_argv(argv)
    args = parser.parse_args(options)
    if not args.env_token and tail and tail[0].startswith("-"):
        parser.error(f"unrecognized arguments: {tail[0]}")
    args.args = tail
    return args


def split_positionals(
    positionals: Sequence[str], env_token: bool
) -> tuple[str | None, list[str]]:
    """Split positionals into the explicit token and the server arguments."""
    if env_token or not positionals:
        return None, list(positionals)
    return positionals[0], list(positionals[1:])


def flag_overrides(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "bin_dir": args.bin_dir,
        "binary_name": args.binary_name,
        "container_image": args.container_image,
        "log_level": args.log_level,
        "debug": True if args.debug else None,
        "health_check": True if args.health_check else None,
    }


def run(argv: list[str], environ: Mapping[str, str] | None = None) -> int:
    """Execute the runner."""
    parser = build_parser()
    args = parse_runner_args(parser, argv)
    environ = os.environ if environ is None else environ

    config_path = resolve_config_path(args.config, environ)
    record = load_config(config_path)
    record = apply_overrides(record, environment_overrides(environ), "environment")
    record = apply_overrides(record, flag_overrides(args), "command-line flags")
    configure_logging(record.log_level, record.debug)
    log.debug("GitHub MCP Server Runner %s starting", __version__)

    if args.save_config:
        try:
            save_config(record, config_path)
        except GhmcpError as e:
            report_error(e)
            return 1
        print(f"Configuration saved to {config_path}", file=sys.stderr)
        return 0

    token, server_args = split_positionals(args.args, args.env_token)
    runtime = ContainerRuntime()
    assembler = LaunchAssembler(runtime)
    try:
        credential = CredentialResolver(environ).resolve(token)
        clearance = HealthChecker(runtime, enabled=record.health_check).check(
            launch_target(record)
        )
        if not record.binary_path.is_file():
            raise BuildError(
                f"GitHub MCP server binary not found at {record.binary_path}",
                hint="Build it first: github-mcp-build (or run github-mcp-setup).",
            )
        spec = assembler.assemble(record, credential, server_args, clearance)
        log.info("Starting GitHub MCP server in container")
        assembler.launch(spec)
    except GhmcpError as e:
        report_error(e)
        return 1
    return 0


def entrypoint() -> None:
    """Console script entrypoint."""
    raise SystemExit(run(sys.argv[1:]))
