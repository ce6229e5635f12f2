# ABOUTME: Edit mode helpers: find MCP config files, locate servers, open an editor
# ABOUTME: Editors are launched with an argument vector, never through a shell
import json
import logging
import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from mcpadd.config import EDITOR_ENV
from mcpadd.models import Target

logger = logging.getLogger(__name__)

FALLBACK_EDITORS = ("nano", "vim", "vi", "code", "emacs")
DEFAULT_EDITOR = "nano"

# ABOUTME: Top-level keys that hold server entries, checked in order
SERVER_CONTAINERS = ("mcpServers", "mcp")


@dataclass(frozen=True)
class ConfigLocation:
    """An MCP config file that exists on disk."""
    label: str
    path: Path
    scope: str
    target: Target


@dataclass(frozen=True)
class ServerEntry:
    """A server entry found in a config file.

    ABOUTME: line is 1-based, the first line mentioning the quoted name as a key
    """
    name: str
    line: int
    config: dict[str, Any]

    @property
    def summary(self) -> str:
        launch = self.config.get("command") or self.config.get("url") or "No command"
        if isinstance(launch, list):
            launch = " ".join(str(part) for part in launch)
        launch = str(launch)
        return launch if len(launch) <= 50 else launch[:47] + "..."


def candidate_configs(home: Path, cwd: Path) -> list[ConfigLocation]:
    """Every location a supported tool may keep MCP servers in."""
    return [
        ConfigLocation("Claude Code (user)", home / ".claude.json", "user", Target.CLAUDE),
        ConfigLocation("Claude (user)", home / ".claude" / "mcp.json", "user", Target.CLAUDE),
        ConfigLocation("Cursor (user)", home / ".cursor" / "mcp.json", "user", Target.CLAUDE),
        ConfigLocation(
            "Gemini CLI (user)", home / ".gemini" / "settings.json", "user", Target.GEMINI
        ),
        ConfigLocation(
            "Gemini CLI (user, XDG)",
            home / ".config" / "gemini" / "settings.json",
            "user",
            Target.GEMINI,
        ),
        ConfigLocation(
            "OpenCode (user)",
            home / ".config" / "opencode" / "opencode.json",
            "user",
            Target.OPENCODE,
        ),
        ConfigLocation("Cursor (local)", cwd / ".cursor" / "mcp.json", "local", Target.CLAUDE),
        ConfigLocation("VS Code (local)", cwd / ".vscode" / "mcp.json", "local", Target.CLAUDE),
        ConfigLocation("Project (.mcp.json)", cwd / ".mcp.json", "project", Target.CLAUDE),
        ConfigLocation(
            "Project (.gemini/settings.json)",
            cwd / ".gemini" / "settings.json",
            "project",
            Target.GEMINI,
        ),
        ConfigLocation("OpenCode (project)", cwd / "opencode.json", "project", Target.OPENCODE),
    ]


def find_all_configs(home: Path | None = None, cwd: Path | None = None) -> list[ConfigLocation]:
    """Return the candidate config files that exist."""
    home = home or Path.home()
    cwd = cwd or Path.cwd()

    found = []
    for location in candidate_configs(home, cwd):
        if location.path.is_file():
            logger.debug(f"Found config: {location.path} ({location.target.value})")
            found.append(location)
    return found


def find_key_line(lines: list[str], key: str) -> int | None:
    """1-based number of the first line holding "key" followed by a colon."""
    quoted = json.dumps(key)
    for idx, line in enumerate(lines, start=1):
        position = line.find(quoted)
        if position != -1 and ":" in line[position + len(quoted):]:
            return idx
    return None


def list_servers_in_config(path: Path) -> list[ServerEntry]:
    """List server entries of a config file with their line numbers.

    ABOUTME: Unreadable or invalid files yield an empty list
    """
    try:
        content = path.read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, json.JSONDecodeError) as e:
        logger.debug(f"Error reading config {path}: {e}")
        return []
    if not isinstance(data, dict):
        return []

    container: Any = None
    for key in SERVER_CONTAINERS:
        if isinstance(data.get(key), dict) and data[key]:
            container = data[key]
            break
    if not container:
        return []

    lines = content.splitlines()
    entries = []
    for name, config in container.items():
        line = find_key_line(lines, name)
        if line is None:
            continue
        entries.append(ServerEntry(name, line, config if isinstance(config, dict) else {}))
    return entries


def get_editor() -> list[str]:
    """Editor argv prefix: $EDITOR, else the first common editor on PATH.

    ABOUTME: $EDITOR may carry flags, e.g. "code --wait"
    """
    configured = os.environ.get(EDITOR_ENV, "").strip()
    if configured:
        logger.debug(f"Using {EDITOR_ENV} from environment: {configured}")
        return shlex.split(configured)

    for editor in FALLBACK_EDITORS:
        if shutil.which(editor):
            logger.debug(f"Found available editor: {editor}")
            return [editor]
    return [DEFAULT_EDITOR]


def editor_command(editor: list[str], path: Path, line: int | None = None) -> list[str]:
    """Full argv that opens path, at line when the editor supports jumping.

    Examples:
        >>> editor_command(["code"], Path("/tmp/a.json"), 7)
        ['code', '-g', '/tmp/a.json:7']
    """
    if line is None:
        return [*editor, str(path)]

    program = Path(editor[0]).name
    if program in ("code", "code-insiders", "codium"):
        return [*editor, "-g", f"{path}:{line}"]
    if program.startswith("subl"):
        return [*editor, f"{path}:{line}"]
    if program in ("nano", "vim", "vi", "nvim", "emacs", "emacsclient", "micro"):
        return [*editor, f"+{line}", str(path)]

    logger.warning(f"Line jump not supported for {program}, opening at beginning")
    return [*editor, str(path)]


def open_editor(path: Path, line: int | None = None, editor: list[str] | None = None) -> int:
    """Open path in the editor and wait for it to exit.

    Returns:
        The editor's exit code

    Raises:
        OSError: If the editor cannot be started
    """
    argv = editor_command(editor or get_editor(), path, line)
    logger.debug(f"Opening editor: {argv}")
    return subprocess.run(argv).returncode
