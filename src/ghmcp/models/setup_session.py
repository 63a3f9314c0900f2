"""State accumulated by one run of the setup wizard."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ghmcp.errors import GhmcpError
from ghmcp.models.credential import Credential


class ClientTarget(str, Enum):
    DESKTOP = "1"
    CLI = "2"
    BOTH = "3"
    PRINT_ONLY = "4"

    @property
    def configures_desktop(self) -> bool:
        return self in (ClientTarget.DESKTOP, ClientTarget.BOTH)

    @property
    def configures_cli(self) -> bool:
        return self in (ClientTarget.CLI, ClientTarget.BOTH)


class RegistrationOutcome(str, Enum):
    CONFIGURED = "configured"
    FAILED = "failed"
    MANUAL = "manual"


class RegistryState(str, Enum):
    CONFIGURED = "configured"
    NOT_CONFIGURED = "not_configured"
    NOT_AVAILABLE = "not_available"
    ERROR = "error"


@dataclass(frozen=True)
class RegistryStatus:
    """Result of independently querying the Claude Code MCP registry."""

    state: RegistryState
    details: str = ""


@dataclass
class SetupSession:
    target: ClientTarget | None = None
    credential: Credential | None = None
    binary_built: bool = False
    runner_check_passed: bool | None = None
    protocol_check_passed: bool | None = None
    desktop_config_path: Path | None = None
    desktop_backup_path: Path | None = None
    registration: RegistrationOutcome | None = None
    registry_status: RegistryStatus | None = None
    warnings: list[GhmcpError] = field(default_factory=list)
    error: GhmcpError | None = None
