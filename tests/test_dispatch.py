# Tests for the registration dispatcher
import json
from unittest.mock import MagicMock, patch

from mcpadd.dispatch import dispatch
from mcpadd.models import LocalServer, RegistrationRequest, RemoteServer, Target
from mcpadd.platforms.claude import ClaudeAdapter
from mcpadd.platforms.gemini import GeminiAdapter
from mcpadd.platforms.opencode import OpenCodeAdapter

WHICH = "mcpadd.utils.executables.shutil.which"


def test_dispatch_local_to_add_local(tmp_path):
    """Test local specs go through add_local."""
    adapter = OpenCodeAdapter(home=tmp_path, cwd=tmp_path)
    request = RegistrationRequest(spec=LocalServer(command="npx"), server_name="tool")

    result = dispatch(adapter, request)

    assert result.ok
    data = json.loads(adapter.config_path("user").read_text())
    assert data["mcp"]["tool"]["type"] == "local"


def test_dispatch_remote_to_add_remote(tmp_path):
    runner = MagicMock(return_value=MagicMock(returncode=0, stdout="ok", stderr=""))
    adapter = GeminiAdapter(home=tmp_path, cwd=tmp_path, runner=runner)
    request = RegistrationRequest(
        spec=RemoteServer(url="https://gitmcp.io/docs"), server_name="gitmcp"
    )

    with patch(WHICH, return_value="/usr/bin/gemini"):
        result = dispatch(adapter, request)

    assert result.ok
    assert runner.call_args[0][0][1:4] == ["mcp", "add", "--transport"]


def test_dispatch_illegal_scope_before_adapter(tmp_path):
    """Test scope is rejected without touching the adapter."""
    adapter = MagicMock(spec=GeminiAdapter)
    adapter.allowed_scopes = ("user", "project")
    adapter.name = "Gemini CLI"
    request = RegistrationRequest(spec=LocalServer(command="npx"), server_name="t", scope="local")

    result = dispatch(adapter, request)

    assert not result.ok
    assert "Validation failed" in result.message
    adapter.add_local.assert_not_called()


def test_dispatch_external_failure_carries_output(tmp_path):
    runner = MagicMock(return_value=MagicMock(returncode=1, stdout="", stderr="duplicate"))
    adapter = ClaudeAdapter(home=tmp_path, cwd=tmp_path, runner=runner)
    request = RegistrationRequest(spec=LocalServer(command="npx"), server_name="tool")

    with patch(WHICH, return_value="/usr/bin/claude"):
        result = dispatch(adapter, request)

    assert not result.ok
    assert result.output == "STDERR: duplicate"
    assert result.hints


def test_dispatch_missing_executable(tmp_path):
    adapter = ClaudeAdapter(home=tmp_path, cwd=tmp_path)
    request = RegistrationRequest(spec=LocalServer(command="npx"), server_name="tool")

    with patch(WHICH, return_value=None), \
         patch("mcpadd.platforms.base.conventional_dirs", return_value=[]):
        result = dispatch(adapter, request)

    assert not result.ok
    assert "not installed" in result.message
    assert result.hints == ["Install Claude Code from: https://claude.ai/download"]


def test_dispatch_accepts_target_value(tmp_path, monkeypatch):
    """Test a Target value builds its adapter."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    request = RegistrationRequest(
        spec=LocalServer(command="npx"), server_name="tool", scope="project"
    )

    result = dispatch(Target.OPENCODE, request)

    assert result.ok
    assert (tmp_path / "opencode.json").exists()
