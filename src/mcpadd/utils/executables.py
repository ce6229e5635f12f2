# ABOUTME: Discovery of external executables (target CLIs, node)
# ABOUTME: Searches PATH first, then conventional install directories
import glob
import logging
import os
import shutil
from pathlib import Path

from mcpadd.config import NVM_CURRENT_ENV

logger = logging.getLogger(__name__)


def conventional_dirs(home: Path) -> list[Path]:
    """Directories where CLIs are commonly installed outside PATH."""
    return [
        home / ".local" / "bin",
        home / "bin",
        Path("/usr/local/bin"),
        Path("/usr/bin"),
    ]


def nvm_bin_dirs(home: Path) -> list[Path]:
    """bin directories of nvm-managed node versions, newest name last.

    ABOUTME: NVM_CURRENT, when set, is moved to the front
    """
    versions_dir = home / ".nvm" / "versions" / "node"
    pattern = str(versions_dir / "*" / "bin")
    dirs = [Path(p) for p in sorted(glob.glob(pattern))]

    current = os.environ.get(NVM_CURRENT_ENV)
    if current:
        preferred = versions_dir / current / "bin"
        if preferred in dirs:
            dirs.remove(preferred)
            dirs.insert(0, preferred)
    return dirs


def _is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


def find_executable(name: str, search_dirs: list[Path] | None = None) -> str | None:
    """Locate an executable by name.

    ABOUTME: Uses shutil.which() for PATH lookup
    ABOUTME: Falls back to search_dirs in order

    Returns:
        Absolute path as a string, or None if not found
    """
    found = shutil.which(name)
    if found:
        logger.debug(f"Found {name} in PATH: {found}")
        return found

    for directory in search_dirs or []:
        candidate = directory / name
        if _is_executable(candidate):
            logger.debug(f"Found {name} at: {candidate}")
            return str(candidate)

    logger.debug(f"{name} not found in PATH or common locations")
    return None


def find_node_executable(home: Path | None = None) -> str | None:
    """Return the node command to register.

    ABOUTME: Prefers the bare name "node" when it is on PATH, for portability
    ABOUTME: Otherwise an absolute path from nvm or system directories
    """
    if shutil.which("node"):
        return "node"

    home = home or Path.home()
    return find_executable("node", nvm_bin_dirs(home) + [Path("/usr/local/bin"), Path("/usr/bin")])
