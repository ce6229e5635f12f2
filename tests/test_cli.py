# ABOUTME: Tests for the mcp-auto-add command line
# ABOUTME: Target CLIs, clipboard tools and editors are always mocked

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from mcpadd.cli import EXIT_ERROR, EXIT_SUCCESS, main

WHICH = "mcpadd.utils.executables.shutil.which"
RUN = "mcpadd.platforms.base.subprocess.run"

TOOL_JSON = '{"tool": {"command": "npx", "args": ["-y", "tool"]}}'


@pytest.fixture(autouse=True)
def isolated(tmp_path: Path, monkeypatch):
    """Run every test with a private HOME and project directory."""
    home = tmp_path / "home"
    project = tmp_path / "project"
    home.mkdir()
    project.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("PROJECT_TYPE", raising=False)
    monkeypatch.delenv("EDITOR", raising=False)
    monkeypatch.chdir(project)
    return home, project


def answers(monkeypatch, *replies: str) -> None:
    replies_iter = iter(replies)
    monkeypatch.setattr("builtins.input", lambda _prompt="": next(replies_iter))


class TestDryRun:
    """--dry-run renders without side effects."""

    def test_claude_local(self, capsys) -> None:
        with patch(RUN) as mock_run:
            code = main(["-j", TOOL_JSON, "--dry-run"])

        assert code == EXIT_SUCCESS
        mock_run.assert_not_called()
        out = capsys.readouterr().out
        assert (
            "claude mcp add-json tool "
            "'{\"command\":\"npx\",\"args\":[\"-y\",\"tool\"],\"env\":{},"
            "\"description\":\"MCP server from JSON\"}' -s user"
        ) in out

    def test_gemini_remote_defaults_to_http(self, capsys) -> None:
        code = main(["--gemini", "-d", "-j", '{"gitmcp": {"url": "https://gitmcp.io/docs"}}'])

        assert code == EXIT_SUCCESS
        assert "gemini mcp add --transport http gitmcp https://gitmcp.io/docs" in (
            capsys.readouterr().out
        )

    def test_opencode_prints_fragment(self, isolated, capsys) -> None:
        home, project = isolated
        code = main(["--oc", "-d", "-j", TOOL_JSON])

        assert code == EXIT_SUCCESS
        assert '"command": [' in capsys.readouterr().out
        assert not (home / ".config" / "opencode" / "opencode.json").exists()

    def test_invalid_name_fails(self, capsys) -> None:
        code = main(["-d", "-j", '{"bad name!": {"command": "npx"}}'])

        assert code == EXIT_ERROR
        assert "Invalid server name" in capsys.readouterr().err


class TestForce:
    """--force registers with defaults and no prompts."""

    def test_claude_invocation(self, capsys) -> None:
        with patch(WHICH, return_value="/usr/bin/claude"), patch(RUN) as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stdout="Added", stderr="")
            code = main(["-f", "-j", TOOL_JSON])

        assert code == EXIT_SUCCESS
        argv = mock_run.call_args[0][0]
        assert argv[:4] == ["/usr/bin/claude", "mcp", "add-json", "tool"]
        assert argv[-2:] == ["-s", "user"]
        assert "claude mcp list" in capsys.readouterr().out

    def test_claude_failure_exit_code(self, capsys) -> None:
        with patch(WHICH, return_value="/usr/bin/claude"), patch(RUN) as mock_run:
            mock_run.return_value = MagicMock(returncode=1, stdout="", stderr="already exists")
            code = main(["-f", "-j", TOOL_JSON])

        assert code == EXIT_ERROR
        err = capsys.readouterr().err
        assert "already exists" in err
        assert "Server name already exists" in err

    def test_claude_not_installed(self, capsys) -> None:
        with patch(WHICH, return_value=None), \
             patch("mcpadd.platforms.base.conventional_dirs", return_value=[]):
            code = main(["-f", "-j", TOOL_JSON])

        assert code == EXIT_ERROR
        assert "claude.ai/download" in capsys.readouterr().err

    def test_opencode_twice_is_idempotent(self, isolated) -> None:
        home, _ = isolated
        config = home / ".config" / "opencode" / "opencode.json"

        assert main(["--opencode", "-f", "-j", TOOL_JSON]) == EXIT_SUCCESS
        first = config.read_bytes()
        assert main(["--opencode", "-f", "-j", TOOL_JSON]) == EXIT_SUCCESS

        assert config.read_bytes() == first
        assert json.loads(first)["mcp"]["tool"]["command"] == ["npx", "-y", "tool"]

    def test_json_file_input(self, isolated) -> None:
        home, project = isolated
        (project / "server.json").write_text(TOOL_JSON)

        assert main(["--oc", "-f", "-jf", "server.json"]) == EXIT_SUCCESS
        assert (home / ".config" / "opencode" / "opencode.json").exists()

    def test_invalid_json(self, capsys) -> None:
        code = main(["-f", "-j", "{not json"])

        assert code == EXIT_ERROR
        assert "Invalid JSON configuration" in capsys.readouterr().err

    def test_auto_detect_failure(self, capsys) -> None:
        code = main([".", "-f"])

        assert code == EXIT_ERROR
        assert "Could not detect project type" in capsys.readouterr().err


def test_generate_copies_to_clipboard(capsys) -> None:
    with patch("mcpadd.utils.clipboard.subprocess.run") as mock_run:
        mock_run.return_value = MagicMock(returncode=0)
        code = main(["--gemini", "-g", "-j", TOOL_JSON])

    assert code == EXIT_SUCCESS
    out = capsys.readouterr().out
    assert "gemini mcp add tool npx -y tool" in out
    assert "Copied to clipboard using xclip" in out
    assert mock_run.call_args.kwargs["input"] == "gemini mcp add tool npx -y tool"


class TestInteractive:
    """Prompts choose scope, name and confirmation."""

    def test_opencode_project_scope(self, isolated, monkeypatch) -> None:
        _, project = isolated
        answers(monkeypatch, "2", "", "y")

        assert main(["--oc", "-j", TOOL_JSON]) == EXIT_SUCCESS

        data = json.loads((project / "opencode.json").read_text())
        assert "tool" in data["mcp"]

    def test_renamed_server(self, isolated, monkeypatch) -> None:
        _, project = isolated
        answers(monkeypatch, "project", "renamed", "yes")

        assert main(["--oc", "-j", TOOL_JSON]) == EXIT_SUCCESS

        data = json.loads((project / "opencode.json").read_text())
        assert list(data["mcp"]) == ["renamed"]

    def test_declined(self, isolated, monkeypatch, capsys) -> None:
        _, project = isolated
        answers(monkeypatch, "", "", "n")

        assert main(["--oc", "-j", TOOL_JSON]) == EXIT_SUCCESS
        assert "Operation cancelled" in capsys.readouterr().out
        assert not (project / "opencode.json").exists()

    def test_remote_transport_prompt(self, monkeypatch) -> None:
        answers(monkeypatch, "", "", "1", "y")

        with patch(WHICH, return_value="/usr/bin/claude"), patch(RUN) as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
            code = main(["-j", '{"gitmcp": {"url": "https://gitmcp.io/docs"}}'])

        assert code == EXIT_SUCCESS
        argv = mock_run.call_args[0][0]
        assert argv[1:] == ["mcp", "add", "--transport", "sse", "gitmcp", "https://gitmcp.io/docs"]

    def test_overwrite_prompt(self, isolated, monkeypatch) -> None:
        _, project = isolated
        (project / "opencode.json").write_text(
            json.dumps({"mcp": {"tool": {"type": "local", "command": ["old"]}}})
        )
        answers(monkeypatch, "2", "", "y", "n")

        assert main(["--oc", "-j", TOOL_JSON]) == EXIT_ERROR

        data = json.loads((project / "opencode.json").read_text())
        assert data["mcp"]["tool"]["command"] == ["old"]

    def test_failed_probe_cancels(self, monkeypatch, capsys) -> None:
        answers(monkeypatch, "n")

        code = main(["-j", '{"command": "/nonexistent/server"}'])

        assert code == EXIT_ERROR
        assert "Cancelled due to executable validation failure" in capsys.readouterr().err

    def test_fallback_menu_exit(self, monkeypatch, capsys) -> None:
        answers(monkeypatch, "1", "4")

        assert main([]) == EXIT_SUCCESS
        assert "Auto-detection failed" in capsys.readouterr().out


class TestEditMode:
    """edit / --edit opens a config at the server's line."""

    def test_no_configs(self, capsys) -> None:
        assert main(["edit"]) == EXIT_ERROR
        assert "No MCP configuration files found" in capsys.readouterr().err

    def test_opens_editor_at_line(self, isolated, monkeypatch) -> None:
        _, project = isolated
        config = project / ".mcp.json"
        config.write_text(json.dumps({"mcpServers": {"github": {"command": "npx"}}}, indent=2))
        monkeypatch.setenv("EDITOR", "vim")
        answers(monkeypatch, "1")

        with patch("mcpadd.editor.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            assert main(["-e"]) == EXIT_SUCCESS

        mock_run.assert_called_once_with(["vim", "+3", str(config)])

    def test_editor_missing(self, isolated, monkeypatch, capsys) -> None:
        _, project = isolated
        (project / "opencode.json").write_text("{}")
        monkeypatch.setenv("EDITOR", "nano")

        with patch("mcpadd.editor.subprocess.run", side_effect=FileNotFoundError("nano")):
            assert main(["edit"]) == EXIT_ERROR
        assert "Failed to open editor" in capsys.readouterr().err


def test_version(capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])
    assert exc_info.value.code == 0
    assert "mcp-auto-add v0.1.0" in capsys.readouterr().out
