"""Launch models for the sandboxed server process."""

import posixpath
from dataclasses import dataclass, field
from pathlib import Path

from ghmcp.constants import STDIO_MODE_ARG

REDACTED = "<redacted>"


@dataclass(frozen=True)
class LaunchTarget:
    """The part of a launch that is validated before anything is assembled."""

    binary_path: Path
    image: str


@dataclass(frozen=True)
class HealthClearance:
    """Proof that health checking ran (or was disabled) for a target."""

    target: LaunchTarget
    checked: bool


@dataclass(frozen=True)
class VolumeMount:
    host_dir: Path
    sandbox_dir: str
    read_only: bool = True

    def as_arg(self) -> str:
        spec = f"{self.host_dir}:{self.sandbox_dir}"
        return f"{spec}:ro" if self.read_only else spec


@dataclass(frozen=True)
class LaunchSpec:
    """Fully resolved container invocation for one run of the server."""

    runtime: str
    image: str
    volume: VolumeMount
    binary_name: str
    env: dict[str, str] = field(default_factory=dict)
    server_args: tuple[str, ...] = ()
    memory_limit: str | None = None
    cpu_limit: str | None = None

    @property
    def sandbox_binary(self) -> str:
        return posixpath.join(self.volume.sandbox_dir, self.binary_name)

    def argv(self) -> list[str]:
        return self._build_argv(redact=False)

    def redacted_argv(self) -> list[str]:
        """Return argv with injected environment values masked, for logging."""
        return self._build_argv(redact=True)

    def _build_argv(self, *, redact: bool) -> list[str]:
        argv = [self.runtime, "run", "-i", "--rm", "--volume", self.volume.as_arg()]
        for key, value in self.env.items():
            argv.extend(["-e", f"{key}={REDACTED if redact else value}"])
        if self.memory_limit:
            argv.extend(["--memory", self.memory_limit])
        if self.cpu_limit:
            argv.extend(["--cpus", self.cpu_limit])
        argv.append(self.image)
        argv.append(self.sandbox_binary)
        argv.append(STDIO_MODE_ARG)
        argv.extend(self.server_args)
        return argv
