# Tests for Claude Code platform adapter
import json
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from mcpadd.errors import ExecutableNotFoundError, ExternalToolFailure, ValidationError
from mcpadd.models import LocalServer, RegistrationRequest, RemoteServer
from mcpadd.platforms.claude import ClaudeAdapter, claude_json_payload

WHICH = "mcpadd.utils.executables.shutil.which"


def completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> MagicMock:
    return MagicMock(spec=subprocess.CompletedProcess, returncode=returncode,
                     stdout=stdout, stderr=stderr)


def test_claude_adapter_properties(tmp_path: Path) -> None:
    """Test adapter name, defaults and scopes."""
    adapter = ClaudeAdapter(home=tmp_path, cwd=tmp_path)

    assert adapter.name == "Claude Code"
    assert adapter.default_remote_transport == "sse"
    assert adapter.allowed_scopes == ("user", "local", "project")


def test_claude_config_paths(tmp_path: Path) -> None:
    """Test config file resolution per scope."""
    home = tmp_path / "home"
    project = tmp_path / "project"
    adapter = ClaudeAdapter(home=home, cwd=project)

    assert adapter.config_path("user") == home / ".claude" / "settings.json"
    assert adapter.config_path("local") == project / ".claude" / "settings.local.json"
    assert adapter.config_path("project") == project / ".mcp.json"

    home.mkdir()
    (home / ".claude.json").write_text("{}")
    assert adapter.config_path("user") == home / ".claude.json"


def test_claude_json_payload_is_compact() -> None:
    payload = claude_json_payload(LocalServer(command="npx", args=["-y", "tool"], cwd="/srv"))
    assert payload == (
        '{"command":"npx","args":["-y","tool"],"env":{},'
        '"description":"MCP server from JSON"}'
    )


def test_claude_dry_run_local(tmp_path: Path) -> None:
    """Test the rendered add-json command line."""
    adapter = ClaudeAdapter(home=tmp_path, cwd=tmp_path)
    request = RegistrationRequest(
        spec=LocalServer(command="npx", args=["-y", "tool"]), server_name="tool"
    )

    assert adapter.preview(request) == (
        "claude mcp add-json tool "
        "'{\"command\":\"npx\",\"args\":[\"-y\",\"tool\"],\"env\":{},"
        "\"description\":\"MCP server from JSON\"}' -s user"
    )


def test_claude_remote_args(tmp_path: Path) -> None:
    """Test remote registration defaults to sse and omits the user scope."""
    adapter = ClaudeAdapter(home=tmp_path, cwd=tmp_path)
    spec = RemoteServer(url="https://gitmcp.io/docs")

    args = adapter.build_args(RegistrationRequest(spec=spec, server_name="gitmcp"))
    assert args == ["mcp", "add", "--transport", "sse", "gitmcp", "https://gitmcp.io/docs"]

    args = adapter.build_args(
        RegistrationRequest(spec=spec, server_name="gitmcp", scope="project")
    )
    assert args == [
        "mcp", "add", "--transport", "sse", "-s", "project", "gitmcp", "https://gitmcp.io/docs"
    ]


def test_claude_rejects_stdio_transport_for_url(tmp_path: Path) -> None:
    adapter = ClaudeAdapter(home=tmp_path, cwd=tmp_path)
    spec = RemoteServer(url="https://gitmcp.io/docs", transport="stdio")
    with pytest.raises(ValidationError):
        adapter.build_args(RegistrationRequest(spec=spec, server_name="gitmcp"))


def test_claude_metacharacters_stay_single_argument(tmp_path: Path) -> None:
    """Test that shell metacharacters never split or join arguments."""
    runner = MagicMock(return_value=completed(stdout="Added"))
    adapter = ClaudeAdapter(home=tmp_path, cwd=tmp_path, runner=runner)
    spec = LocalServer(command="node", args=["; rm -rf /", "$(whoami)"])

    with patch(WHICH, return_value="/usr/bin/claude"):
        adapter.add_local(spec, "tool", "user")

    argv = runner.call_args[0][0]
    payload = json.loads(argv[4])
    assert payload["args"] == ["; rm -rf /", "$(whoami)"]
    assert "; rm -rf /" not in argv
    assert runner.call_args.kwargs.get("shell") is None


def test_claude_url_with_metacharacters_is_one_element(tmp_path: Path) -> None:
    runner = MagicMock(return_value=completed())
    adapter = ClaudeAdapter(home=tmp_path, cwd=tmp_path, runner=runner)
    url = "https://example.com/mcp?a=1&b=2;ls"

    with patch(WHICH, return_value="/usr/bin/claude"):
        adapter.add_remote(RemoteServer(url=url), "remote", "user")

    argv = runner.call_args[0][0]
    assert argv[-1] == url
    assert argv.count(url) == 1


def test_claude_add_local_success(tmp_path: Path, monkeypatch) -> None:
    """Test successful add-json invocation."""
    monkeypatch.setenv("CLAUDECODE", "1")
    runner = MagicMock(return_value=completed(stdout="Added stdio MCP server tool"))
    adapter = ClaudeAdapter(home=tmp_path, cwd=tmp_path, runner=runner)

    with patch(WHICH, return_value="/usr/bin/claude"):
        result = adapter.add_local(LocalServer(command="npx"), "tool", "local")

    assert result.ok
    assert result.message == 'MCP server "tool" added to Claude Code'
    argv = runner.call_args[0][0]
    assert argv[:4] == ["/usr/bin/claude", "mcp", "add-json", "tool"]
    assert argv[-2:] == ["-s", "local"]
    assert "CLAUDECODE" not in runner.call_args.kwargs["env"]


def test_claude_error_marker_in_output(tmp_path: Path) -> None:
    """Test that "error" in output counts as failure despite exit 0."""
    runner = MagicMock(return_value=completed(stdout="Error: server tool already exists"))
    adapter = ClaudeAdapter(home=tmp_path, cwd=tmp_path, runner=runner)

    with patch(WHICH, return_value="/usr/bin/claude"):
        with pytest.raises(ExternalToolFailure) as exc_info:
            adapter.add_local(LocalServer(command="npx"), "tool", "user")

    assert exc_info.value.returncode == 0
    assert "already exists" in exc_info.value.output
    assert any("claude mcp list" in hint for hint in exc_info.value.hints)


def test_claude_nonzero_exit(tmp_path: Path) -> None:
    runner = MagicMock(return_value=completed(returncode=2, stderr="bad"))
    adapter = ClaudeAdapter(home=tmp_path, cwd=tmp_path, runner=runner)

    with patch(WHICH, return_value="/usr/bin/claude"):
        with pytest.raises(ExternalToolFailure, match="exit code 2"):
            adapter.add_remote(RemoteServer(url="https://x.io"), "x", "user")


def test_claude_launch_failure(tmp_path: Path) -> None:
    runner = MagicMock(side_effect=PermissionError("Permission denied"))
    adapter = ClaudeAdapter(home=tmp_path, cwd=tmp_path, runner=runner)

    with patch(WHICH, return_value="/usr/bin/claude"):
        with pytest.raises(ExternalToolFailure, match="could not be started") as exc_info:
            adapter.add_local(LocalServer(command="npx"), "tool", "user")

    assert exc_info.value.returncode is None
    assert "Permission denied" in exc_info.value.output

def test_claude_not_installed(tmp_path: Path) -> None:
    """Test missing executable is reported before anything runs."""
    runner = MagicMock()
    adapter = ClaudeAdapter(home=tmp_path, cwd=tmp_path, runner=runner)

    with patch(WHICH, return_value=None), \
         patch("mcpadd.platforms.base.conventional_dirs", return_value=[]):
        with pytest.raises(ExecutableNotFoundError) as exc_info:
            adapter.add_local(LocalServer(command="npx"), "tool", "user")

    runner.assert_not_called()
    assert "claude.ai/download" in exc_info.value.hints[0]


def test_claude_found_in_local_bin(tmp_path: Path) -> None:
    """Test fallback to ~/.local/bin when not on PATH."""
    bin_dir = tmp_path / ".local" / "bin"
    bin_dir.mkdir(parents=True)
    claude = bin_dir / "claude"
    claude.write_text("#!/bin/sh\n")
    claude.chmod(0o755)

    adapter = ClaudeAdapter(home=tmp_path, cwd=tmp_path)
    with patch(WHICH, return_value=None):
        assert adapter.locate() == str(claude)


def test_claude_invalid_name_never_runs(tmp_path: Path) -> None:
    runner = MagicMock()
    adapter = ClaudeAdapter(home=tmp_path, cwd=tmp_path, runner=runner)

    with pytest.raises(ValidationError):
        adapter.add_local(LocalServer(command="npx"), "; rm -rf /", "user")
    runner.assert_not_called()
