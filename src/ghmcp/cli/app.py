"""Top-level CLI router."""

import sys

from . import build as build_cmd
from . import run as run_cmd
from . import setup as setup_cmd


def main(argv: list[str] | None = None) -> int:
    """Route to setup, build, or the runner (the default)."""
    args = list(sys.argv[1:] if argv is None else argv)
    if args and args[0] == "setup":
        return setup_cmd.run(args[1:])
    if args and args[0] == "build":
        return build_cmd.run(args[1:])
    if args and args[0] == "run":
        args = args[1:]
    return run_cmd.run(args)


def entrypoint() -> None:
    """Console script entrypoint."""
    raise SystemExit(main())
