# ABOUTME: Backup utilities for target configuration files.
# ABOUTME: Handles timestamped backups with automatic retention cleanup (keep last 5 per file).
import logging
import re
import shutil
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

MAX_BACKUPS_PER_FILE = 5

# ABOUTME: Backup suffix format: .backup.{YYYYMMDD}_{HHMMSS}[_{n}]
BACKUP_SUFFIX_PATTERN = re.compile(r"\.backup\.(\d{8}_\d{6})(?:_(\d+))?$")


def backup_path_for(source_path: Path, now: datetime | None = None) -> Path:
    """Return a free timestamped backup path beside source_path.

    ABOUTME: Adds a counter when a backup with the same second already exists

    Examples:
        >>> backup_path_for(Path("opencode.json"), datetime(2026, 1, 8, 14, 30, 22)).name
        'opencode.json.backup.20260108_143022'
    """
    timestamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    candidate = source_path.with_name(f"{source_path.name}.backup.{timestamp}")
    counter = 1
    while candidate.exists():
        candidate = source_path.with_name(f"{source_path.name}.backup.{timestamp}_{counter}")
        counter += 1
    return candidate


def create_backup(source_path: Path, move: bool = False) -> Path:
    """Create a timestamped backup of a file next to it.

    ABOUTME: Uses shutil.copy2() to preserve file metadata
    ABOUTME: move=True renames the original away instead of copying

    Args:
        source_path: Path to file to backup
        move: Rename the original rather than copy it

    Returns:
        Path to created backup file

    Raises:
        FileNotFoundError: If source_path doesn't exist
        OSError: If backup creation fails
    """
    if not source_path.exists():
        raise FileNotFoundError(f"Source file not found: {source_path}")

    backup_path = backup_path_for(source_path)

    if move:
        shutil.move(str(source_path), str(backup_path))
    else:
        shutil.copy2(source_path, backup_path)
    logger.debug(f"Backed up {source_path} to {backup_path}")

    cleanup_old_backups(source_path)

    return backup_path


def list_backups(source_path: Path) -> list[Path]:
    """Return existing backups of source_path, newest first."""
    directory = source_path.parent
    if not directory.exists():
        return []

    backups: list[tuple[str, int, Path]] = []
    prefix = source_path.name
    for file_path in directory.iterdir():
        if not file_path.is_file() or not file_path.name.startswith(prefix):
            continue
        match = BACKUP_SUFFIX_PATTERN.match(file_path.name[len(prefix):])
        if not match:
            continue
        backups.append((match.group(1), int(match.group(2) or 0), file_path))

    backups.sort(key=lambda x: (x[0], x[1]), reverse=True)
    return [path for _, _, path in backups]


def cleanup_old_backups(source_path: Path, max_backups: int = MAX_BACKUPS_PER_FILE) -> list[Path]:
    """Remove old backups of a file, keeping only the most recent.

    ABOUTME: Logs warnings on errors but does not raise exceptions

    Returns:
        List of paths that were deleted
    """
    deleted_files: list[Path] = []

    for file_path in list_backups(source_path)[max_backups:]:
        try:
            file_path.unlink()
            deleted_files.append(file_path)
            logger.debug(f"Deleted old backup: {file_path}")
        except OSError as e:
            logger.warning(f"Failed to delete old backup {file_path}: {e}")

    return deleted_files
