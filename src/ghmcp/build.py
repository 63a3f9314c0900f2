"""Clone and compile the upstream GitHub MCP server binary."""

import logging
import re
import shutil
import stat
import subprocess
import tempfile
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from ghmcp.constants import DEFAULT_BIN_DIR, DEFAULT_BINARY_NAME
from ghmcp.errors import BuildError
from ghmcp.models import ConfigRecord

log = logging.getLogger(__name__)

DEFAULT_REPO_URL = "https://github.com/github/github-mcp-server.git"
REPO_URL_ENV = "GITHUB_MCP_REPO_URL"
BUILD_PACKAGE = "./cmd/github-mcp-server"
MIN_GO_VERSION = (1, 21)
RELEASE_TAG_RE = re.compile(r"^v(\d+)\.(\d+)\.(\d+)$")
GO_VERSION_RE = re.compile(r"\bgo(\d+)\.(\d+)(?:\.(\d+))?")
# Apple containers run linux/arm64 guests; cgo off keeps the binary static.
TARGET_ENV = {"CGO_ENABLED": "0", "GOOS": "linux", "GOARCH": "arm64"}


@dataclass
class BuildSettings:
    output_dir: Path = DEFAULT_BIN_DIR
    binary_name: str = DEFAULT_BINARY_NAME
    version: str = "latest"
    repo_url: str = DEFAULT_REPO_URL
    verbose: bool = False
    keep_build_dir: bool = False


def toolchain_available() -> bool:
    """Return whether git and go are both on PATH."""
    return shutil.which("git") is not None and shutil.which("go") is not None


def parse_go_version(output: str) -> tuple[int, int, int] | None:
    """Extract (major, minor, patch) from `go version` output."""
    match = GO_VERSION_RE.search(output)
    if match is None:
        return None
    major, minor, patch = match.groups()
    return int(major), int(minor), int(patch or 0)


def detect_go_version() -> tuple[int, int, int] | None:
    """Return the installed Go version, or None when go is missing or silent."""
    if shutil.which("go") is None:
        return None
    try:
        result = subprocess.run(["go", "version"], capture_output=True, text=True, timeout=30)
    except (OSError, subprocess.TimeoutExpired) as e:
        log.debug("go version failed: %s", e)
        return None
    return parse_go_version(result.stdout)


def latest_release_tag(ls_remote_output: str) -> str | None:
    """Return the highest vX.Y.Z tag from `git ls-remote --tags --refs` output."""
    tags: list[tuple[tuple[int, ...], str]] = []
    for line in ls_remote_output.splitlines():
        _, _, ref = line.partition("\t")
        name = ref.strip().removeprefix("refs/tags/")
        match = RELEASE_TAG_RE.match(name)
        if match:
            tags.append((tuple(int(part) for part in match.groups()), name))
    if not tags:
        return None
    return max(tags)[1]


class BinaryBuilder:
    """Fetch a tagged source tree and compile the server for the container."""

    def __init__(self, settings: BuildSettings, environ: Mapping[str, str]) -> None:
        self.settings = settings
        self._environ = dict(environ)

    @property
    def output_path(self) -> Path:
        return self.settings.output_dir / self.settings.binary_name

    def build(self) -> Path:
        go_version = self.check_toolchain()
        log.info("Found Go version: %s", ".".join(str(part) for part in go_version))
        version = self.resolve_version()

        build_dir = Path(tempfile.mkdtemp(prefix="github-mcp-build-"))
        try:
            self._clone(version, build_dir)
            self._download_modules(build_dir)
            binary = self._compile(version, build_dir)
            self._verify(binary)
        finally:
            if self.settings.keep_build_dir:
                log.info("Build directory kept at %s", build_dir)
            else:
                shutil.rmtree(build_dir, ignore_errors=True)
        return binary

    def check_toolchain(self) -> tuple[int, int, int]:
        for tool in ("git", "go"):
            if shutil.which(tool) is None:
                raise BuildError(f"{tool} is required but not installed")
        output = self._run(["go", "version"], capture=True).stdout
        go_version = parse_go_version(output)
        if go_version is None:
            raise BuildError(f"Unable to determine Go version from: {output.strip()}")
        if go_version[:2] < MIN_GO_VERSION:
            found = ".".join(str(part) for part in go_version)
            raise BuildError(f"Go 1.21+ is required, found {found}")
        return go_version

    def resolve_version(self) -> str:
        if self.settings.version != "latest":
            return self.settings.version
        log.info("Fetching latest release information...")
        output = self._run(
            ["git", "ls-remote", "--tags", "--refs", self.settings.repo_url], capture=True
        ).stdout
        tag = latest_release_tag(output)
        if tag is None:
            log.warning("No release tags found, using main branch")
            return "main"
        log.info("Using latest release: %s", tag)
        return tag

    def _clone(self, version: str, build_dir: Path) -> None:
        log.info("Cloning %s (%s)", self.settings.repo_url, version)
        argv = ["git", "clone", "--depth", "1"]
        if version != "main":
            argv += ["--branch", version]
        self._run([*argv, self.settings.repo_url, str(build_dir)])

    def _download_modules(self, build_dir: Path) -> None:
        if not (build_dir / "go.mod").is_file():
            raise BuildError("go.mod not found in repository")
        self._run(["go", "mod", "download"], cwd=build_dir)

    def _compile(self, version: str, build_dir: Path) -> Path:
        commit = self._run(
            ["git", "rev-parse", "HEAD"], cwd=build_dir, capture=True
        ).stdout.strip()
        build_date = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        ldflags = (
            f"-s -w -X main.version={version} -X main.commit={commit} -X main.date={build_date}"
        )
        self.settings.output_dir.mkdir(parents=True, exist_ok=True)
        output = self.output_path
        log.info("Building linux/arm64 binary %s (version %s)", output, version)
        self._run(
            ["go", "build", "-ldflags", ldflags, "-o", str(output), BUILD_PACKAGE],
            cwd=build_dir,
            env={**self._environ, **TARGET_ENV},
        )
        return output

    def _verify(self, binary: Path) -> None:
        if not binary.is_file():
            raise BuildError(f"Binary not found at {binary} after build")
        try:
            binary.chmod(binary.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        except OSError as e:
            raise BuildError(
                f"Binary at {binary} could not be made executable: {e}",
                hint=f"Fix the permissions by hand: chmod +x {binary}",
            ) from e
        log.info("Binary built: %s (%d bytes)", binary, binary.stat().st_size)

    def _run(
        self,
        argv: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        capture: bool = False,
    ) -> subprocess.CompletedProcess[str]:
        log.debug("running: %s", " ".join(argv))
        try:
            return subprocess.run(
                list(argv),
                cwd=str(cwd) if cwd else None,
                env=dict(env) if env is not None else None,
                check=True,
                text=True,
                capture_output=capture or not self.settings.verbose,
            )
        except FileNotFoundError as e:
            raise BuildError(f"{argv[0]} is required but not installed") from e
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or "").strip()
            message = f"Command failed with exit code {e.returncode}: {' '.join(argv)}"
            if detail:
                message += f"\n{detail}"
            raise BuildError(message) from e


def builder_for(record: ConfigRecord, environ: Mapping[str, str]) -> BinaryBuilder | None:
    """Return a builder targeting record's binary path, or None without a toolchain."""
    if not toolchain_available():
        return None
    settings = BuildSettings(
        output_dir=record.bin_dir,
        binary_name=record.binary_name,
        repo_url=environ.get(REPO_URL_ENV) or DEFAULT_REPO_URL,
    )
    return BinaryBuilder(settings, environ)
