"""Assemble and hand off to the sandboxed GitHub MCP server."""

import logging
from collections.abc import Sequence
from typing import NoReturn

from ghmcp.constants import PRIMARY_TOKEN_ENV
from ghmcp.errors import LaunchError
from ghmcp.health import launch_target
from ghmcp.models import ConfigRecord, Credential, HealthClearance, LaunchSpec, VolumeMount
from ghmcp.runtime import ContainerRuntime

log = logging.getLogger(__name__)


class LaunchAssembler:
    """Build the container invocation and replace this process with it."""

    def __init__(self, runtime: ContainerRuntime) -> None:
        self.runtime = runtime

    def assemble(
        self,
        record: ConfigRecord,
        credential: Credential,
        server_args: Sequence[str],
        clearance: HealthClearance,
    ) -> LaunchSpec:
        """Return the launch spec for record; requires a matching health clearance."""
        if clearance.target != launch_target(record):
            raise LaunchError(
                "Refusing to launch: health clearance was issued for "
                f"{clearance.target.binary_path} ({clearance.target.image}), not "
                f"{record.binary_path} ({record.container_image})"
            )
        # The runtime can only mount directories, never single files.
        if record.bin_dir.exists() and not record.bin_dir.is_dir():
            raise LaunchError(
                f"Binary directory {record.bin_dir} is not a directory",
                hint="Set BIN_DIR to the directory that contains the server binary.",
            )

        spec = LaunchSpec(
            runtime=self.runtime.command,
            image=record.container_image,
            volume=VolumeMount(host_dir=record.bin_dir, sandbox_dir=record.container_bin_dir),
            binary_name=record.binary_name,
            env={PRIMARY_TOKEN_ENV: credential.value},
            server_args=tuple(server_args),
            memory_limit=record.memory_limit,
            cpu_limit=record.cpu_limit,
        )
        log.debug("container image: %s", spec.image)
        log.debug("binary path: %s", record.binary_path)
        log.debug("server arguments: %s", list(spec.server_args))
        if spec.memory_limit:
            log.debug("memory limit: %s", spec.memory_limit)
        if spec.cpu_limit:
            log.debug("CPU limit: %s", spec.cpu_limit)
        return spec

    def launch(self, spec: LaunchSpec) -> NoReturn:
        """Exec the container runtime in place of this process.

        Never returns on success: stdio is inherited by the container so the
        MCP stream passes straight through. Failure to exec is a LaunchError.
        """
        log.debug("executing: %s", " ".join(spec.redacted_argv()))
        try:
            self.runtime.replace_process(spec.argv())
        except OSError as e:
            raise LaunchError(f"Failed to start {spec.runtime}: {e}") from e
