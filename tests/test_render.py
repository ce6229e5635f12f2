# Tests for dry-run and generate rendering
import json
from unittest.mock import MagicMock, patch

from mcpadd.models import LocalServer, RegistrationRequest, RemoteServer
from mcpadd.platforms.claude import ClaudeAdapter
from mcpadd.platforms.gemini import GeminiAdapter
from mcpadd.platforms.opencode import OpenCodeAdapter
from mcpadd.render import dry_run, dry_run_argv, generate


def test_dry_run_argv_claude(tmp_path):
    """Test the exact argument vector for a local Claude registration."""
    adapter = ClaudeAdapter(home=tmp_path, cwd=tmp_path)
    request = RegistrationRequest(
        spec=LocalServer(command="npx", args=["-y", "tool"]), server_name="tool"
    )

    argv = dry_run_argv(adapter, request)

    assert argv[:4] == ["claude", "mcp", "add-json", "tool"]
    assert json.loads(argv[4]) == {
        "command": "npx",
        "args": ["-y", "tool"],
        "env": {},
        "description": "MCP server from JSON",
    }
    assert argv[5:] == ["-s", "user"]


def test_dry_run_argv_none_for_file_target(tmp_path):
    adapter = OpenCodeAdapter(home=tmp_path, cwd=tmp_path)
    request = RegistrationRequest(spec=LocalServer(command="npx"), server_name="tool")
    assert dry_run_argv(adapter, request) is None


def test_dry_run_has_no_side_effects(tmp_path):
    """Test nothing is run or written."""
    runner = MagicMock()
    cli_adapter = GeminiAdapter(home=tmp_path, cwd=tmp_path, runner=runner)
    file_adapter = OpenCodeAdapter(home=tmp_path, cwd=tmp_path)
    request = RegistrationRequest(
        spec=RemoteServer(url="https://gitmcp.io/docs"), server_name="gitmcp"
    )

    with patch("mcpadd.utils.executables.shutil.which") as mock_which:
        assert dry_run(cli_adapter, request) == (
            "gemini mcp add --transport http gitmcp https://gitmcp.io/docs"
        )
        dry_run(file_adapter, request)

    runner.assert_not_called()
    mock_which.assert_not_called()
    assert list(tmp_path.iterdir()) == []


def test_generate_copies_command(tmp_path):
    adapter = GeminiAdapter(home=tmp_path, cwd=tmp_path)
    request = RegistrationRequest(
        spec=LocalServer(command="node", args=["/srv/my server/index.js"]), server_name="srv"
    )
    copy = MagicMock(return_value="xclip")

    text, tool = generate(adapter, request, copy=copy)

    assert text == "gemini mcp add srv node '/srv/my server/index.js'"
    assert tool == "xclip"
    copy.assert_called_once_with(text)


def test_generate_opencode_snippet_without_clipboard(tmp_path):
    adapter = OpenCodeAdapter(home=tmp_path, cwd=tmp_path)
    request = RegistrationRequest(
        spec=LocalServer(command="npx", args=["-y", "tool"]), server_name="tool"
    )

    text, tool = generate(adapter, request, copy=lambda _text: None)

    assert tool is None
    assert json.loads(text)["tool"]["command"] == ["npx", "-y", "tool"]
