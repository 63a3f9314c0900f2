"""Unit tests for ghmcp.clients."""

import json
import stat
import subprocess
from unittest.mock import patch

from ghmcp.clients import (
    alternate_path_for,
    backup_file,
    desktop_descriptor,
    query_claude_registry,
    register_with_claude_code,
    registration_argv,
    registration_command,
    render_desktop_descriptor,
    write_desktop_descriptor,
)
from ghmcp.models import RegistryState


class TestDesktopDescriptor:
    def test_descriptor_shape(self):
        assert desktop_descriptor("/p/run", "tok123") == {
            "mcpServers": {"github": {"command": "/p/run", "args": ["tok123"]}}
        }

    def test_render_is_indented_json(self):
        text = render_desktop_descriptor("/p/run", "tok123")
        assert text.endswith("\n")
        assert json.loads(text)["mcpServers"]["github"]["args"] == ["tok123"]
        assert '\n  "mcpServers"' in text

    def test_write_is_owner_only(self, tmp_path):
        path = write_desktop_descriptor(tmp_path / "sub" / "claude.json", "/p/run", "tok123")

        assert json.loads(path.read_text(encoding="utf-8")) == desktop_descriptor(
            "/p/run", "tok123"
        )
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_write_truncates_existing_file(self, tmp_path):
        path = tmp_path / "claude.json"
        path.write_text("x" * 4096, encoding="utf-8")

        write_desktop_descriptor(path, "/p/run", "tok123")

        assert path.read_text(encoding="utf-8") == render_desktop_descriptor("/p/run", "tok123")

    def test_backup_and_alternate_paths(self, tmp_path):
        path = tmp_path / ".claude_desktop_config.json"
        path.write_text('{"old": true}', encoding="utf-8")

        backup = backup_file(path)

        assert backup == tmp_path / ".claude_desktop_config.json.backup"
        assert backup.read_text(encoding="utf-8") == '{"old": true}'
        assert alternate_path_for(path) == tmp_path / ".claude_desktop_config.json.github-mcp"


class TestRegistration:
    def test_registration_command_text(self):
        assert (
            registration_command("/p/run", "tok123")
            == 'claude mcp add github "/p/run" "tok123"'
        )

    def test_registration_argv(self):
        assert registration_argv("/p/run", "tok123") == [
            "claude",
            "mcp",
            "add",
            "github",
            "/p/run",
            "tok123",
        ]

    def test_register_success(self):
        completed = subprocess.CompletedProcess([], 0, stdout="", stderr="")
        with patch("ghmcp.clients.subprocess.run", return_value=completed) as mock_run:
            assert register_with_claude_code("/p/run", "tok123") is True
        assert mock_run.call_args[0][0] == registration_argv("/p/run", "tok123")

    def test_register_failure(self):
        completed = subprocess.CompletedProcess([], 1, stdout="", stderr="already exists")
        with patch("ghmcp.clients.subprocess.run", return_value=completed):
            assert register_with_claude_code("/p/run", "tok123") is False

    def test_register_missing_cli(self):
        with patch("ghmcp.clients.subprocess.run", side_effect=FileNotFoundError("claude")):
            assert register_with_claude_code("/p/run", "tok123") is False


class TestQueryRegistry:
    def test_not_available_without_cli(self):
        with patch("ghmcp.clients.shutil.which", return_value=None):
            assert query_claude_registry().state is RegistryState.NOT_AVAILABLE

    def test_configured_with_details(self):
        listing = "filesystem: npx fs\ngithub: /p/run tok123\n"
        completed = subprocess.CompletedProcess([], 0, stdout=listing, stderr="")
        with patch("ghmcp.clients.shutil.which", return_value="/usr/bin/claude"):
            with patch("ghmcp.clients.subprocess.run", return_value=completed):
                status = query_claude_registry()

        assert status.state is RegistryState.CONFIGURED
        assert status.details == "/p/run tok123"

    def test_not_configured(self):
        completed = subprocess.CompletedProcess([], 0, stdout="filesystem: npx fs\n", stderr="")
        with patch("ghmcp.clients.shutil.which", return_value="/usr/bin/claude"):
            with patch("ghmcp.clients.subprocess.run", return_value=completed):
                assert query_claude_registry().state is RegistryState.NOT_CONFIGURED

    def test_error_on_nonzero_exit(self):
        completed = subprocess.CompletedProcess([], 2, stdout="", stderr="boom")
        with patch("ghmcp.clients.shutil.which", return_value="/usr/bin/claude"):
            with patch("ghmcp.clients.subprocess.run", return_value=completed):
                assert query_claude_registry().state is RegistryState.ERROR
