# Claude Code target adapter
import json
from pathlib import Path

from mcpadd.models import LocalServer, RemoteServer, Target
from mcpadd.platforms.base import CliAdapter


def claude_json_payload(spec: LocalServer) -> str:
    """Compact JSON handed to `claude mcp add-json`.

    ABOUTME: Only command, args, env and description; cwd is not part of it
    """
    payload = {
        "command": spec.command,
        "args": list(spec.args),
        "env": dict(spec.env),
        "description": spec.description,
    }
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


class ClaudeAdapter(CliAdapter):
    """Adapter for Claude Code (`claude mcp ...`).

    ABOUTME: Local servers go through add-json, URL servers through add --transport
    ABOUTME: Output mentioning "error" or "failed" counts as failure
    """

    target = Target.CLAUDE
    display_name = "Claude Code"
    executable = "claude"
    install_hint = "Install Claude Code from: https://claude.ai/download"
    default_remote_transport = "sse"
    allowed_scopes = ("user", "local", "project")
    output_error_markers = ("error", "failed")
    # ABOUTME: Set inside a running Claude session and block nested CLI calls
    blocked_env_vars = ("CLAUDECODE", "CLAUDE_CODE")

    def config_path(self, scope: str) -> Path:
        """Path of the file Claude Code writes for a scope.

        ABOUTME: user prefers ~/.claude.json when present
        """
        if scope == "local":
            return self.cwd / ".claude" / "settings.local.json"
        if scope == "project":
            return self.cwd / ".mcp.json"

        legacy = self.home / ".claude.json"
        if legacy.exists():
            return legacy
        return self.home / ".claude" / "settings.json"

    def local_args(self, spec: LocalServer, name: str, scope: str) -> list[str]:
        return ["mcp", "add-json", name, claude_json_payload(spec), "-s", scope]

    def remote_args(self, spec: RemoteServer, name: str, transport: str, scope: str) -> list[str]:
        args = ["mcp", "add", "--transport", transport]
        if scope != "user":
            args += ["-s", scope]
        return args + [name, spec.url]

    def failure_hints(self, remote: bool) -> list[str]:
        if remote:
            causes = ["Invalid URL format", "Server name already exists",
                      "Network connectivity issues", "Invalid transport type"]
        else:
            causes = ["Invalid JSON configuration", "Server name already exists",
                      "Insufficient permissions", "Invalid scope specified"]
        return [f"This might be due to: {cause}" for cause in causes] + [
            "Run with --verbose to see the full command",
            "Try a different server name",
            'Run "claude mcp list" to see existing servers',
        ]
