"""Pre-launch health checks."""

import logging
import os
import stat

from ghmcp.errors import HealthCheckError, HealthCheckKind
from ghmcp.models import ConfigRecord, HealthClearance, LaunchTarget
from ghmcp.runtime import ContainerRuntime

log = logging.getLogger(__name__)

_EXECUTE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def launch_target(record: ConfigRecord) -> LaunchTarget:
    return LaunchTarget(binary_path=record.binary_path, image=record.container_image)


class HealthChecker:
    """Validate a launch target before anything is assembled.

    Steps run in order and stop at the first failure. When disabled the
    check is a no-op that still hands back a clearance.
    """

    def __init__(self, runtime: ContainerRuntime, enabled: bool) -> None:
        self.runtime = runtime
        self.enabled = enabled

    def check(self, target: LaunchTarget) -> HealthClearance:
        if not self.enabled:
            log.debug("health check disabled")
            return HealthClearance(target=target, checked=False)

        log.info("Performing health check...")
        self._check_runtime()
        self._check_binary(target)
        self._check_image(target)
        log.info("Health check passed")
        return HealthClearance(target=target, checked=True)

    def _check_runtime(self) -> None:
        if not self.runtime.is_available():
            raise HealthCheckError(
                HealthCheckKind.RUNTIME_UNAVAILABLE,
                f"Apple containers not available ({self.runtime.command} command not found)",
            )

    def _check_binary(self, target: LaunchTarget) -> None:
        path = target.binary_path
        if not path.is_file():
            raise HealthCheckError(
                HealthCheckKind.BINARY_MISSING, f"Binary not found at {path}"
            )
        if os.access(path, os.X_OK):
            return

        log.warning("Binary is not executable, fixing permissions")
        try:
            path.chmod(path.stat().st_mode | _EXECUTE_BITS)
        except OSError as e:
            raise HealthCheckError(
                HealthCheckKind.BINARY_NOT_EXECUTABLE,
                f"Binary at {path} is not executable and permissions could not be fixed: {e}",
            ) from e

    def _check_image(self, target: LaunchTarget) -> None:
        log.debug("testing container image availability")
        if not self.runtime.can_run_image(target.image):
            raise HealthCheckError(
                HealthCheckKind.IMAGE_UNREACHABLE,
                f"Container image {target.image} not available or container runtime not working",
            )
