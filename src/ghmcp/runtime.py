"""Adapter around the host container runtime command."""

import logging
import os
import shutil
import subprocess
from typing import NoReturn

from ghmcp.constants import CONTAINER_COMMAND

log = logging.getLogger(__name__)

IMAGE_PROBE_TIMEOUT_SECONDS = 120


class ContainerRuntime:
    """The only place that invokes the `container` CLI."""

    def __init__(
        self,
        command: str = CONTAINER_COMMAND,
        probe_timeout: float = IMAGE_PROBE_TIMEOUT_SECONDS,
    ) -> None:
        self.command = command
        self.probe_timeout = probe_timeout

    def is_available(self) -> bool:
        return shutil.which(self.command) is not None

    def version(self) -> str | None:
        """Return the runtime's version string, if it reports one."""
        try:
            result = subprocess.run(
                [self.command, "--version"],
                capture_output=True,
                text=True,
                timeout=10,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            log.debug("%s --version failed: %s", self.command, e)
            return None
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def can_run_image(self, image: str) -> bool:
        """Start a throwaway no-op container from image and report success."""
        argv = [self.command, "run", "--rm", image, "echo", "test"]
        log.debug("probing image with: %s", " ".join(argv))
        try:
            result = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                timeout=self.probe_timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            log.debug("image probe failed: %s", e)
            return False
        if result.returncode != 0:
            log.debug("image probe exited %d: %s", result.returncode, result.stderr.strip())
            return False
        return True

    def replace_process(self, argv: list[str]) -> NoReturn:
        """Replace the current process with argv; raises OSError if exec fails."""
        os.execvp(argv[0], argv)
