"""Credential model for ghmcp."""

from dataclasses import dataclass, field
from enum import Enum


class CredentialSource(str, Enum):
    ARGUMENT = "command-line argument"
    PRIMARY_ENV = "GITHUB_PERSONAL_ACCESS_TOKEN"
    SECONDARY_ENV = "GITHUB_TOKEN"
    PROMPT = "interactive prompt"


@dataclass(frozen=True)
class Credential:
    """A GitHub token held in memory for a single launch.

    The raw value is excluded from ``repr`` and ``str`` so it cannot leak
    through logging or tracebacks by accident.
    """

    value: str = field(repr=False)
    source: CredentialSource

    def masked(self) -> str:
        if len(self.value) <= 8:
            return "****"
        return f"{self.value[:4]}****{self.value[-4:]}"

    def __str__(self) -> str:
        return self.masked()
