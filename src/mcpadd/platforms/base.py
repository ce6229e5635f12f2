# Target adapter base utilities
import json
import logging
import os
import re
import subprocess
from collections.abc import Callable
from pathlib import Path
from typing import Any, cast

from mcpadd.errors import ExecutableNotFoundError, ExternalToolFailure
from mcpadd.models import (
    REMOTE_TRANSPORTS,
    AddResult,
    LocalServer,
    RegistrationRequest,
    RemoteServer,
    Target,
)
from mcpadd.utils.executables import conventional_dirs, find_executable
from mcpadd.utils.validation import (
    shell_escape,
    validate_scope,
    validate_server_name,
    validate_transport,
    validate_url,
)

logger = logging.getLogger(__name__)

# ABOUTME: Arguments made only of these characters are shown unquoted
SAFE_DISPLAY_PATTERN = re.compile(r"^[A-Za-z0-9_@%+=:,./-]+$")

Runner = Callable[..., "subprocess.CompletedProcess[str]"]


def read_json_file(path: Path) -> dict[str, Any]:
    """Read JSON file with error handling.

    ABOUTME: Returns empty dict if file doesn't exist
    ABOUTME: Raises ValueError for invalid JSON or a non-object document
    """
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            result = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(result, dict):
        raise ValueError(f"Invalid JSON in {path}: top level is not an object")
    return cast(dict[str, Any], result)


def dump_json(data: dict[str, Any]) -> str:
    """Serialize with the 2-space layout used for every written file."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def write_json_file(path: Path, data: dict[str, Any]) -> None:
    """Write JSON file with error handling.

    ABOUTME: Creates parent directories if needed
    ABOUTME: Single full overwrite; key order is preserved
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_json(data), encoding="utf-8")


def quote_for_display(arg: str) -> str:
    """Shell-quote an argument only when it needs it."""
    if SAFE_DISPLAY_PATTERN.match(arg):
        return arg
    return shell_escape(arg)


def display_command(argv: list[str]) -> str:
    """Render an argument vector as a pasteable shell command line."""
    return " ".join(quote_for_display(arg) for arg in argv)


class CliAdapter:
    """Shared behaviour for targets registered through their own CLI.

    ABOUTME: Subclasses supply the argument-vector shapes
    ABOUTME: Every invocation is an argv list; no shell is ever used
    """

    target: Target
    display_name = ""
    executable = ""
    install_hint = ""
    default_remote_transport = "sse"
    allowed_scopes: tuple[str, ...] = ("user", "project")
    # ABOUTME: Case-insensitive output substrings treated as failure
    output_error_markers: tuple[str, ...] = ()
    blocked_env_vars: tuple[str, ...] = ()

    def __init__(
        self,
        home: Path | None = None,
        cwd: Path | None = None,
        runner: Runner | None = None,
    ) -> None:
        """Initialize adapter with optional home, project dir and runner.

        ABOUTME: runner defaults to subprocess.run and is replaceable in tests
        """
        self.home = home if home else Path.home()
        self.cwd = cwd if cwd else Path.cwd()
        self._runner = runner if runner else subprocess.run

    @property
    def name(self) -> str:
        """Human-readable target name."""
        return self.display_name

    def config_path(self, scope: str) -> Path:
        raise NotImplementedError

    def search_dirs(self) -> list[Path]:
        """Directories searched when the CLI is not on PATH."""
        return conventional_dirs(self.home)

    def locate(self) -> str:
        """Return the path of the target CLI.

        Raises:
            ExecutableNotFoundError: If it is not on PATH or in search_dirs()
        """
        found = find_executable(self.executable, self.search_dirs())
        if not found:
            raise ExecutableNotFoundError(self.display_name, self.install_hint)
        return found

    def resolve_transport(self, spec: RemoteServer) -> str:
        return validate_transport(spec.transport, REMOTE_TRANSPORTS, self.default_remote_transport)

    def local_args(self, spec: LocalServer, name: str, scope: str) -> list[str]:
        raise NotImplementedError

    def remote_args(self, spec: RemoteServer, name: str, transport: str, scope: str) -> list[str]:
        raise NotImplementedError

    def build_args(self, request: RegistrationRequest) -> list[str]:
        """Validate a request and build its argument vector (without the executable).

        Raises:
            ValidationError: If name, scope, URL or transport is illegal
        """
        name = validate_server_name(request.server_name)
        scope = validate_scope(request.scope, self.allowed_scopes)
        spec = request.spec
        if isinstance(spec, RemoteServer):
            validate_url(spec.url)
            transport = self.resolve_transport(spec)
            return self.remote_args(spec, name, transport, scope)
        return self.local_args(spec, name, scope)

    def preview(self, request: RegistrationRequest) -> str:
        """Command line that would be executed."""
        return display_command([self.executable, *self.build_args(request)])

    def command_line(self, request: RegistrationRequest) -> str:
        """Pasteable command line for the clipboard."""
        return self.preview(request)

    def failure_hints(self, remote: bool) -> list[str]:
        return []

    def _child_env(self) -> dict[str, str] | None:
        if not self.blocked_env_vars:
            return None
        return {k: v for k, v in os.environ.items() if k not in self.blocked_env_vars}

    def run(self, args: list[str], name: str, remote: bool) -> AddResult:
        """Execute the target CLI with args and interpret the result.

        Raises:
            ExecutableNotFoundError: If the CLI cannot be found
            ExternalToolFailure: On non-zero exit or an error marker in the output
        """
        executable = self.locate()
        argv = [executable, *args]
        logger.debug(f"Full command: {display_command(argv)}")

        try:
            result = self._runner(argv, capture_output=True, text=True, env=self._child_env())
        except OSError as e:
            raise ExternalToolFailure(
                argv, None, stderr=str(e), hints=self.failure_hints(remote)
            ) from e

        stdout = result.stdout or ""
        stderr = result.stderr or ""
        combined = (stdout + "\n" + stderr).lower()
        flagged = any(marker in combined for marker in self.output_error_markers)

        if result.returncode != 0 or flagged:
            raise ExternalToolFailure(
                argv, result.returncode, stdout, stderr, hints=self.failure_hints(remote)
            )

        if stdout.strip():
            logger.debug(f"{self.display_name} output: {stdout.strip()}")
        return AddResult.success(
            f'MCP server "{name}" added to {self.display_name}',
            output=stdout.strip(),
        )

    def add_local(self, spec: LocalServer, name: str, scope: str) -> AddResult:
        """Register a stdio server through the target CLI."""
        name = validate_server_name(name)
        scope = validate_scope(scope, self.allowed_scopes)
        args = self.build_args(RegistrationRequest(spec=spec, server_name=name, scope=scope))
        logger.info(f'Adding MCP server "{name}" with scope "{scope}"...')
        logger.debug(f"Config file for scope {scope}: {self.config_path(scope)}")
        return self.run(args, name, remote=False)

    def add_remote(self, spec: RemoteServer, name: str, scope: str) -> AddResult:
        """Register a URL server through the target CLI."""
        name = validate_server_name(name)
        scope = validate_scope(scope, self.allowed_scopes)
        args = self.build_args(RegistrationRequest(spec=spec, server_name=name, scope=scope))
        logger.info(f'Adding URL-based MCP server "{name}" with scope "{scope}"...')
        logger.debug(f"Config file for scope {scope}: {self.config_path(scope)}")
        return self.run(args, name, remote=True)
