"""`github-mcp-build`: compile the GitHub MCP server for Apple containers."""

import argparse
import os
import sys
from collections.abc import Mapping
from pathlib import Path

from ghmcp.build import DEFAULT_REPO_URL, REPO_URL_ENV, BinaryBuilder, BuildSettings
from ghmcp.cli.shared import configure_logging, print_status, report_error
from ghmcp.config import apply_overrides, environment_overrides, load_config, resolve_config_path
from ghmcp.errors import GhmcpError


def build_parser() -> argparse.ArgumentParser:
    """Build parser for the build command."""
    parser = argparse.ArgumentParser(
        prog="github-mcp-build",
        description="Build the GitHub MCP server binary for Apple containers (linux/arm64)",
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "-v",
        "--version",
        default="latest",
        metavar="TAG",
        help="Build a specific version or tag (default: latest release)",
    )
    parser.add_argument(
        "-o",
        "--output",
        metavar="DIR",
        help="Output directory (default: BIN_DIR from the configuration)",
    )
    parser.add_argument(
        "-n",
        "--name",
        metavar="NAME",
        help="Binary name (default: BINARY_NAME from the configuration)",
    )
    parser.add_argument(
        "--repo",
        metavar="URL",
        help=f"Repository URL (default: ${REPO_URL_ENV} or {DEFAULT_REPO_URL})",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Stream git and go output to the terminal"
    )
    parser.add_argument(
        "--skip-cleanup", action="store_true", help="Keep the temporary build directory"
    )
    return parser


def run(argv: list[str], environ: Mapping[str, str] | None = None) -> int:
    """Execute the build command."""
    parser = build_parser()
    args = parser.parse_args(argv)
    environ = os.environ if environ is None else environ

    record = load_config(resolve_config_path(None, environ))
    record = apply_overrides(record, environment_overrides(environ), "environment")
    configure_logging("info", args.debug)

    settings = BuildSettings(
        output_dir=Path(args.output).expanduser() if args.output else record.bin_dir,
        binary_name=args.name or record.binary_name,
        version=args.version,
        repo_url=args.repo or environ.get(REPO_URL_ENV) or DEFAULT_REPO_URL,
        verbose=args.verbose,
        keep_build_dir=args.skip_cleanup,
    )

    print("🔨 GitHub MCP Server Build for Apple Containers", file=sys.stderr)
    try:
        binary = BinaryBuilder(settings, environ).build()
    except GhmcpError as e:
        report_error(e)
        return 1

    print_status("success", "Build completed successfully!")
    print("\nNext steps:", file=sys.stderr)
    print(f"  1. The binary is ready in: {binary}", file=sys.stderr)
    print("  2. Run it in an Apple container with github-mcp-run", file=sys.stderr)
    print("  3. Configure your MCP clients with github-mcp-setup", file=sys.stderr)
    return 0


def entrypoint() -> None:
    """Console script entrypoint."""
    raise SystemExit(run(sys.argv[1:]))
