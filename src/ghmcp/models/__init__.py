"""Model package for ghmcp."""

from ghmcp.models.config_record import ConfigRecord, LogLevel
from ghmcp.models.credential import Credential, CredentialSource
from ghmcp.models.launch_spec import HealthClearance, LaunchSpec, LaunchTarget, VolumeMount
from ghmcp.models.setup_session import (
    ClientTarget,
    RegistrationOutcome,
    RegistryState,
    RegistryStatus,
    SetupSession,
)

__all__ = [
    "ClientTarget",
    "ConfigRecord",
    "Credential",
    "CredentialSource",
    "HealthClearance",
    "LaunchSpec",
    "LaunchTarget",
    "LogLevel",
    "RegistrationOutcome",
    "RegistryState",
    "RegistryStatus",
    "SetupSession",
    "VolumeMount",
]
