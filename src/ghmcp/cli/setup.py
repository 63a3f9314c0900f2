"""`github-mcp-setup`: guided setup for MCP clients."""

import argparse
import os
import sys
from collections.abc import Mapping

from ghmcp.build import builder_for
from ghmcp.cli.prompts import Prompter
from ghmcp.cli.shared import configure_logging, print_status, report_error, runner_command
from ghmcp.cli.wizard import EXAMPLE_TOKEN, SetupWizard, print_summary
from ghmcp.clients import query_claude_registry
from ghmcp.config import apply_overrides, environment_overrides, load_config, resolve_config_path
from ghmcp.credentials import CredentialResolver
from ghmcp.errors import CredentialError, GhmcpError
from ghmcp.models import Credential, CredentialSource, SetupSession
from ghmcp.runtime import ContainerRuntime

EPILOG = """\
Environment variables:
  GITHUB_PERSONAL_ACCESS_TOKEN    GitHub Personal Access Token
  GITHUB_TOKEN                    Alternative token variable

Examples:
  github-mcp-setup                              # Interactive setup
  github-mcp-setup --check-only                 # Check system only
  github-mcp-setup --build-only                 # Build binary only
  github-mcp-setup --test ghp_xxxxxxxxxxxx      # Test with token
"""


def build_parser() -> argparse.ArgumentParser:
    """Build parser for the setup command."""
    parser = argparse.ArgumentParser(
        prog="github-mcp-setup",
        description="GitHub MCP Server Setup Helper for Apple Containers",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--config",
        metavar="FILE",
        help="Configuration file (default: ~/.github-mcp-config)",
    )
    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--interactive",
        dest="mode",
        action="store_const",
        const="interactive",
        help="Run the interactive setup (default)",
    )
    mode_group.add_argument(
        "--check-only",
        dest="mode",
        action="store_const",
        const="check",
        help="Check prerequisites and the binary only",
    )
    mode_group.add_argument(
        "--build-only",
        dest="mode",
        action="store_const",
        const="build",
        help="Build the binary only",
    )
    mode_group.add_argument(
        "--show-config",
        dest="mode",
        action="store_const",
        const="show-config",
        help="Show configuration examples",
    )
    mode_group.add_argument("--test", metavar="TOKEN", help="Test the setup with TOKEN")
    parser.set_defaults(mode="interactive")
    return parser


def _run_mode(wizard: SetupWizard, mode: str, test_token: str | None) -> int:
    if mode == "interactive":
        session = wizard.run()
        if session.error is not None:
            raise session.error
        print_status("success", "Setup completed successfully!")
        print_status("info", "You can now use the GitHub MCP server with Claude")
        return 0

    wizard.check_prerequisites()

    if mode == "check":
        return 0 if wizard.binary_present() else 1

    if mode == "build":
        wizard.build_binary()
        return 0

    if mode == "show-config":
        session = SetupSession(registry_status=query_claude_registry())
        print_summary(session, wizard.runner_command, EXAMPLE_TOKEN)
        return 0

    if mode == "test":
        if not test_token:
            raise CredentialError("Token required for testing", hint="Pass it as --test TOKEN.")
        if not wizard.binary_present():
            wizard.build_binary()
        wizard.run_self_tests(Credential(test_token, CredentialSource.ARGUMENT), protocol=True)
        return 0 if wizard.session.runner_check_passed else 1

    raise ValueError(f"unknown setup mode: {mode}")


def run(argv: list[str], environ: Mapping[str, str] | None = None) -> int:
    """Execute the setup command."""
    parser = build_parser()
    args = parser.parse_args(argv)
    environ = os.environ if environ is None else environ
    mode = "test" if args.test is not None else args.mode

    record = load_config(resolve_config_path(args.config, environ))
    record = apply_overrides(record, environment_overrides(environ), "environment")
    configure_logging(record.log_level, args.debug or record.debug)

    print("🚀 GitHub MCP Server Setup for Apple Containers", file=sys.stderr)
    print("=" * 46, file=sys.stderr)

    wizard = SetupWizard(
        record=record,
        runtime=ContainerRuntime(),
        resolver=CredentialResolver(environ),
        prompter=Prompter(),
        runner_command=runner_command(),
        builder=builder_for(record, environ),
        environ=environ,
    )
    try:
        return _run_mode(wizard, mode, args.test)
    except GhmcpError as e:
        report_error(e)
        return 1
    except (KeyboardInterrupt, EOFError):
        print("\nSetup cancelled", file=sys.stderr)
        return 130


def entrypoint() -> None:
    """Console script entrypoint."""
    raise SystemExit(run(sys.argv[1:]))
