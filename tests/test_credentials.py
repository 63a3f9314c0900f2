"""Unit tests for ghmcp.credentials and the Credential model."""

import logging

import pytest

from ghmcp.credentials import CredentialResolver, looks_like_pat
from ghmcp.errors import CredentialError
from ghmcp.models import Credential, CredentialSource

CLASSIC = "ghp_" + "a" * 36


class TestResolve:
    def test_explicit_token_wins(self):
        resolver = CredentialResolver({"GITHUB_PERSONAL_ACCESS_TOKEN": "env-token"})
        credential = resolver.resolve(CLASSIC)
        assert credential.value == CLASSIC
        assert credential.source is CredentialSource.ARGUMENT

    def test_primary_env_before_secondary(self):
        resolver = CredentialResolver(
            {"GITHUB_PERSONAL_ACCESS_TOKEN": "primary", "GITHUB_TOKEN": "secondary"}
        )
        credential = resolver.resolve()
        assert credential.value == "primary"
        assert credential.source is CredentialSource.PRIMARY_ENV

    def test_secondary_env_used_when_primary_empty(self):
        resolver = CredentialResolver(
            {"GITHUB_PERSONAL_ACCESS_TOKEN": "", "GITHUB_TOKEN": "secondary"}
        )
        credential = resolver.resolve()
        assert credential.value == "secondary"
        assert credential.source is CredentialSource.SECONDARY_ENV

    def test_empty_explicit_falls_back_to_environment(self):
        resolver = CredentialResolver({"GITHUB_TOKEN": "secondary"})
        assert resolver.resolve("").value == "secondary"

    def test_nothing_found_raises(self):
        with pytest.raises(CredentialError) as exc_info:
            CredentialResolver({}).resolve()
        assert "GITHUB_PERSONAL_ACCESS_TOKEN" in exc_info.value.message
        assert "--env-token" in exc_info.value.hint

    def test_from_environment_returns_none_when_unset(self):
        assert CredentialResolver({}).from_environment() is None


class TestFormat:
    @pytest.mark.parametrize(
        "token, expected",
        [
            (CLASSIC, True),
            ("ghs_" + "B" * 40, True),
            ("ghp_" + "a" * 35, False),
            ("github_pat_" + "a" * 60, False),
            ("gho_" + "a" * 36, False),
        ],
    )
    def test_looks_like_pat(self, token, expected):
        assert looks_like_pat(token) is expected

    def test_unusual_format_warns_but_is_accepted(self, caplog):
        resolver = CredentialResolver({})
        with caplog.at_level(logging.WARNING, logger="ghmcp.credentials"):
            credential = resolver.resolve("github_pat_abc")
        assert credential.value == "github_pat_abc"
        assert "doesn't match" in caplog.text

    def test_token_never_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="ghmcp.credentials"):
            CredentialResolver({}).resolve(CLASSIC)
        assert CLASSIC not in caplog.text


class TestCredentialModel:
    def test_masked_long_token(self):
        assert Credential("ghp_abcdefgh1234", CredentialSource.ARGUMENT).masked() == "ghp_****1234"

    def test_masked_short_token(self):
        assert Credential("short", CredentialSource.ARGUMENT).masked() == "****"

    def test_repr_and_str_hide_value(self):
        credential = Credential(CLASSIC, CredentialSource.PROMPT)
        assert CLASSIC not in repr(credential)
        assert CLASSIC not in str(credential)
