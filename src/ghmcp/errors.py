"""Error taxonomy for ghmcp.

Every error carries a user-facing message and a single remediation hint.
The CLI prints both and exits nonzero; components never print on their own.
"""

from __future__ import annotations

from enum import Enum


class GhmcpError(Exception):
    """Base class for errors surfaced to the operator."""

    default_hint = ""

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = self.default_hint if hint is None else hint


class ConfigError(GhmcpError):
    """Raised when the config file cannot be read or holds invalid values.

    Always recovered by falling back to defaults for the affected keys.
    """

    default_hint = "Fix or remove the offending lines in the configuration file."


class CredentialError(GhmcpError):
    """Raised when no usable GitHub token can be found."""

    default_hint = (
        "Pass the token as the first argument, or use --env-token with "
        "GITHUB_PERSONAL_ACCESS_TOKEN or GITHUB_TOKEN set."
    )


class HealthCheckKind(str, Enum):
    RUNTIME_UNAVAILABLE = "runtime_unavailable"
    BINARY_MISSING = "binary_missing"
    BINARY_NOT_EXECUTABLE = "binary_not_executable"
    IMAGE_UNREACHABLE = "image_unreachable"


_HEALTH_HINTS = {
    HealthCheckKind.RUNTIME_UNAVAILABLE: (
        "Install Apple containers and make sure `container` is on PATH."
    ),
    HealthCheckKind.BINARY_MISSING: "Build the server binary first: github-mcp-build",
    HealthCheckKind.BINARY_NOT_EXECUTABLE: "Run `chmod +x` on the server binary.",
    HealthCheckKind.IMAGE_UNREACHABLE: (
        "Check that the container image exists and `container run` works."
    ),
}


class HealthCheckError(GhmcpError):
    """Raised when a pre-launch health check step fails."""

    def __init__(self, kind: HealthCheckKind, message: str, hint: str | None = None) -> None:
        super().__init__(message, _HEALTH_HINTS[kind] if hint is None else hint)
        self.kind = kind


class BuildError(GhmcpError):
    """Raised when the server binary is required but cannot be produced."""

    default_hint = "Run github-mcp-build from an environment with git and Go 1.21+."


class LaunchError(GhmcpError):
    """Raised when the sandboxed process cannot be assembled or started."""

    default_hint = "Re-run with --health-check --debug to diagnose the container runtime."


class VerificationMismatch(GhmcpError):
    """Registration reported success but the client's registry disagrees.

    Downgraded to a warning by the setup wizard, but always shown distinctly.
    """

    default_hint = "Restart Claude Code CLI and check `claude mcp list`."


class ArtifactError(GhmcpError):
    """Raised when a client configuration artifact cannot be written."""

    default_hint = "Choose a writable path for the client configuration file."
