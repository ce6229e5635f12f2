# Gemini CLI target adapter
from pathlib import Path

from mcpadd.models import LocalServer, RemoteServer, Target
from mcpadd.platforms.base import CliAdapter
from mcpadd.utils.executables import nvm_bin_dirs


class GeminiAdapter(CliAdapter):
    """Adapter for Gemini CLI (`gemini mcp add ...`).

    ABOUTME: Command and args are trailing positionals, no embedded JSON
    ABOUTME: --scope is long-form only and omitted for the default user scope
    """

    target = Target.GEMINI
    display_name = "Gemini CLI"
    executable = "gemini"
    install_hint = "Install with: npm install -g @google/gemini-cli"
    default_remote_transport = "http"
    allowed_scopes = ("user", "project")

    def config_path(self, scope: str) -> Path:
        """Path of the Gemini settings file for a scope.

        ABOUTME: Falls back to the XDG location when only that directory exists
        """
        if scope == "project":
            return self.cwd / ".gemini" / "settings.json"

        primary = self.home / ".gemini" / "settings.json"
        xdg = self.home / ".config" / "gemini" / "settings.json"
        if not primary.parent.exists() and xdg.parent.exists():
            return xdg
        return primary

    def search_dirs(self) -> list[Path]:
        """npm global installs, including every nvm node version."""
        return (
            nvm_bin_dirs(self.home)
            + [self.home / ".npm-global" / "bin"]
            + super().search_dirs()
        )

    def _scope_args(self, scope: str) -> list[str]:
        return [] if scope == "user" else ["--scope", scope]

    def local_args(self, spec: LocalServer, name: str, scope: str) -> list[str]:
        return ["mcp", "add", *self._scope_args(scope), name, spec.command, *spec.args]

    def remote_args(self, spec: RemoteServer, name: str, transport: str, scope: str) -> list[str]:
        return ["mcp", "add", "--transport", transport, *self._scope_args(scope), name, spec.url]

    def failure_hints(self, remote: bool) -> list[str]:
        if remote:
            causes = ["Invalid URL format", "Server name already exists",
                      "Network connectivity issues", "Invalid transport type"]
        else:
            causes = ["Invalid command configuration", "Server name already exists",
                      "Insufficient permissions", "Invalid scope specified"]
        return [f"This might be due to: {cause}" for cause in causes] + [
            "Run with --verbose to see the full command",
            "Check your Gemini CLI installation",
            'Run "gemini mcp list" to see existing servers',
        ]
