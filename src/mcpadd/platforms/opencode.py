# OpenCode target adapter
import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from mcpadd.errors import ConfigFileError
from mcpadd.models import (
    REMOTE_TRANSPORTS,
    AddResult,
    LocalServer,
    RegistrationRequest,
    RemoteServer,
    ServerSpec,
    Target,
)
from mcpadd.platforms.base import read_json_file, write_json_file
from mcpadd.utils.backup import create_backup
from mcpadd.utils.validation import (
    validate_scope,
    validate_server_name,
    validate_transport,
    validate_url,
)

logger = logging.getLogger(__name__)

SCHEMA_KEY = "$schema"
SCHEMA_URL = "https://opencode.ai/config.json"
CONTAINER_KEY = "mcp"

# ABOUTME: Called with the server name when an entry already exists
ConfirmOverwrite = Callable[[str], bool]


def opencode_entry(spec: ServerSpec) -> dict[str, Any]:
    """Convert a spec to an OpenCode `mcp` entry.

    ABOUTME: Local command and args collapse into one "command" array
    ABOUTME: "environment" (not "env") is written only when non-empty
    """
    if isinstance(spec, RemoteServer):
        return {"type": "remote", "enabled": True, "url": spec.url}

    entry: dict[str, Any] = {
        "type": "local",
        "enabled": True,
        "command": [spec.command, *spec.args],
    }
    if spec.env:
        entry["environment"] = dict(spec.env)
    return entry


class OpenCodeAdapter:
    """Adapter for OpenCode (opencode.json).

    ABOUTME: Never shells out; reads, merges and rewrites the JSON file
    ABOUTME: Corrupt files are moved to a timestamped backup and replaced
    """

    target = Target.OPENCODE
    # ABOUTME: OpenCode stores a type tag, so this is informational only
    default_remote_transport = "http"
    allowed_scopes: tuple[str, ...] = ("user", "project")

    def __init__(
        self,
        home: Path | None = None,
        cwd: Path | None = None,
        confirm_overwrite: ConfirmOverwrite | None = None,
    ) -> None:
        """Initialize adapter with optional home, project dir and overwrite callback.

        ABOUTME: Without a callback existing entries are never overwritten
        """
        self.home = home if home else Path.home()
        self.cwd = cwd if cwd else Path.cwd()
        self._confirm_overwrite = confirm_overwrite

    @property
    def name(self) -> str:
        """Human-readable target name."""
        return "OpenCode"

    def config_path(self, scope: str) -> Path:
        """~/.config/opencode/opencode.json for user, ./opencode.json for project."""
        if scope == "project":
            return self.cwd / "opencode.json"
        return self.home / ".config" / "opencode" / "opencode.json"

    def check_remote(self, spec: RemoteServer) -> None:
        """Reject a bad URL or transport before anything is written."""
        validate_url(spec.url)
        validate_transport(spec.transport, REMOTE_TRANSPORTS, self.default_remote_transport)

    def snippet(self, request: RegistrationRequest) -> dict[str, Any]:
        name = validate_server_name(request.server_name)
        if isinstance(request.spec, RemoteServer):
            self.check_remote(request.spec)
        return {name: opencode_entry(request.spec)}

    def preview(self, request: RegistrationRequest) -> str:
        """JSON fragment that would be merged into the "mcp" section."""
        validate_scope(request.scope, self.allowed_scopes)
        return json.dumps(self.snippet(request), indent=2, ensure_ascii=False)

    def command_line(self, request: RegistrationRequest) -> str:
        """Pasteable snippet for the "mcp" section of opencode.json."""
        return self.preview(request)

    def load_document(self, path: Path) -> dict[str, Any]:
        """Read the config file, recovering from invalid JSON.

        ABOUTME: Missing file yields an empty document
        ABOUTME: Invalid JSON is moved aside to <file>.backup.<timestamp>
        ABOUTME: An unreadable file (directory, no permission) raises ConfigFileError
        """
        try:
            return read_json_file(path)
        except OSError as e:
            raise ConfigFileError(path, f"could not read ({e})") from e
        except ValueError as e:
            logger.warning(f"Existing config file has invalid JSON, creating backup... ({e})")
            try:
                backup_path = create_backup(path, move=True)
            except OSError as backup_error:
                raise ConfigFileError(
                    path, f"could not back up invalid file: {backup_error}"
                ) from backup_error
            logger.warning(f"Backup saved to: {backup_path}")
            return {}

    def _write(self, spec: ServerSpec, name: str, scope: str) -> AddResult:
        name = validate_server_name(name)
        scope = validate_scope(scope, self.allowed_scopes)
        if isinstance(spec, RemoteServer):
            self.check_remote(spec)

        path = self.config_path(scope)
        entry = opencode_entry(spec)
        logger.info(f'Adding MCP server "{name}" to OpenCode (scope: {scope})...')
        logger.debug(f"Server config: {json.dumps(entry, indent=2)}")

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigFileError(path.parent, f"could not create directory ({e})") from e

        document = self.load_document(path)
        if not document.get(SCHEMA_KEY):
            document[SCHEMA_KEY] = SCHEMA_URL
        servers = document.get(CONTAINER_KEY)
        if servers is None:
            servers = document[CONTAINER_KEY] = {}
        elif not isinstance(servers, dict):
            raise ConfigFileError(path, f'"{CONTAINER_KEY}" is not an object')

        if name in servers:
            logger.warning(f'Server "{name}" already exists in config')
            if not (self._confirm_overwrite and self._confirm_overwrite(name)):
                return AddResult.failure(
                    f'Cancelled - server "{name}" not overwritten',
                    hints=["Choose a different server name or rerun with --force"],
                )

        servers[name] = entry
        try:
            write_json_file(path, document)
        except OSError as e:
            raise ConfigFileError(path, f"could not write ({e})") from e

        return AddResult.success(
            f'Successfully added MCP server "{name}" to OpenCode!', config_path=path
        )

    def add_local(self, spec: LocalServer, name: str, scope: str) -> AddResult:
        """Write a local server entry."""
        return self._write(spec, name, scope)

    def add_remote(self, spec: RemoteServer, name: str, scope: str) -> AddResult:
        """Write a remote server entry."""
        return self._write(spec, name, scope)
