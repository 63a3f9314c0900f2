"""GitHub token resolution."""

import logging
import re
from collections.abc import Mapping

from ghmcp.constants import PRIMARY_TOKEN_ENV, SECONDARY_TOKEN_ENV
from ghmcp.errors import CredentialError
from ghmcp.models import Credential, CredentialSource

log = logging.getLogger(__name__)

# Classic and server-to-server PAT shape. Fine-grained tokens (github_pat_...)
# do not match, so a mismatch is only ever a warning.
TOKEN_PATTERN = re.compile(r"^gh[ps]_[A-Za-z0-9]{36,255}$")

_ENV_SOURCES = (
    (PRIMARY_TOKEN_ENV, CredentialSource.PRIMARY_ENV),
    (SECONDARY_TOKEN_ENV, CredentialSource.SECONDARY_ENV),
)


def looks_like_pat(token: str) -> bool:
    """Return whether a token matches the classic GitHub PAT format."""
    return TOKEN_PATTERN.fullmatch(token) is not None


class CredentialResolver:
    """Pick the token from an explicit value or the environment.

    Order: explicit argument, GITHUB_PERSONAL_ACCESS_TOKEN, GITHUB_TOKEN.
    """

    def __init__(self, environ: Mapping[str, str]) -> None:
        self._environ = environ

    def resolve(self, explicit: str | None = None) -> Credential:
        credential = self._find(explicit)
        if credential is None:
            raise CredentialError(
                "GitHub Personal Access Token required "
                f"(no argument given and neither {PRIMARY_TOKEN_ENV} nor "
                f"{SECONDARY_TOKEN_ENV} is set)"
            )
        self.check_format(credential)
        log.debug("using token %s from %s", credential.masked(), credential.source.value)
        return credential

    def from_environment(self) -> Credential | None:
        """Return the environment token, if any, without failing."""
        return self._find(None)

    def _find(self, explicit: str | None) -> Credential | None:
        if explicit:
            return Credential(explicit, CredentialSource.ARGUMENT)
        for env_key, source in _ENV_SOURCES:
            value = self._environ.get(env_key, "")
            if value:
                return Credential(value, source)
        return None

    @staticmethod
    def check_format(credential: Credential) -> bool:
        """Warn when the token does not look like a PAT; never rejects it."""
        if looks_like_pat(credential.value):
            return True
        log.warning(
            "Token from %s doesn't match the GitHub PAT pattern; using it anyway",
            credential.source.value,
        )
        return False
