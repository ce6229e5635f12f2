# ABOUTME: Validation utilities for server names, scopes, transports and URLs
# ABOUTME: Also probes local executables before they are registered
import logging
import os
import re
import shutil
import subprocess
from pathlib import Path
from urllib.parse import urlparse

from mcpadd.errors import ValidationError
from mcpadd.models import DEFAULT_SCOPE

logger = logging.getLogger(__name__)

SERVER_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
SERVER_NAME_MAX_LENGTH = 64
URL_PREFIX_PATTERN = re.compile(r"^https?://", re.IGNORECASE)

# ABOUTME: Package runners resolve their own targets, so probing them is pointless
PACKAGE_RUNNERS = ("npx", "npm", "yarn", "pnpm", "bun", "uvx")
PROBE_FLAGS = ("--version", "--help", "-v", "-h")
PROBE_TIMEOUT = 5  # seconds


def validate_server_name(name: str | None) -> str:
    """Validate a server name and return it trimmed.

    ABOUTME: Allows letters, digits, hyphen and underscore, 1-64 chars
    ABOUTME: Never truncates; over-long names are rejected

    Raises:
        ValidationError: If the name is empty, too long, or has illegal characters

    Examples:
        >>> validate_server_name("  gitmcp ")
        'gitmcp'
    """
    if not isinstance(name, str):
        raise ValidationError("server name", name, "server name is required")

    trimmed = name.strip()
    if not trimmed:
        raise ValidationError("server name", name, "server name cannot be empty")
    if len(trimmed) > SERVER_NAME_MAX_LENGTH:
        raise ValidationError(
            "server name",
            trimmed,
            f"exceeds maximum length ({SERVER_NAME_MAX_LENGTH} characters)",
        )
    if not SERVER_NAME_PATTERN.match(trimmed):
        raise ValidationError(
            "server name",
            trimmed,
            "can only contain letters, numbers, hyphens, and underscores",
        )
    return trimmed


def validate_scope(scope: str | None, allowed_scopes: tuple[str, ...]) -> str:
    """Validate a scope against a target's allowed set.

    ABOUTME: Empty or None falls back to "user"
    """
    if scope and scope not in allowed_scopes:
        raise ValidationError("scope", scope, "not supported by this target", allowed_scopes)
    return scope or DEFAULT_SCOPE


def validate_transport(
    transport: str | None,
    allowed_transports: tuple[str, ...],
    default: str,
) -> str:
    """Validate a transport, returning the default when none is given."""
    if transport and transport not in allowed_transports:
        raise ValidationError("transport", transport, "unknown transport type", allowed_transports)
    return transport or default


def validate_url(url: str | None) -> str:
    """Validate that a URL is a well-formed http(s) URL.

    ABOUTME: Uses urllib.parse for URL parsing
    ABOUTME: Requires HTTP or HTTPS scheme and a host

    Raises:
        ValidationError: If the URL is missing, has another scheme, or no host
    """
    if not isinstance(url, str) or not url:
        raise ValidationError("URL", url, "URL is required")
    if not URL_PREFIX_PATTERN.match(url):
        raise ValidationError("URL", url, "URL must start with http:// or https://")

    try:
        parsed = urlparse(url)
        # Accessing port validates its range
        parsed.port
    except ValueError as e:
        raise ValidationError("URL", url, f"invalid URL format ({e})") from e

    if parsed.scheme.lower() not in ("http", "https"):
        raise ValidationError("URL", url, "URL must use HTTP or HTTPS scheme")
    if not parsed.hostname:
        raise ValidationError("URL", url, "URL missing host/domain")
    if any(ch.isspace() for ch in url):
        raise ValidationError("URL", url, "URL must not contain whitespace")
    return url


def shell_escape(arg: str) -> str:
    """Quote a string for display as a single POSIX shell word.

    ABOUTME: Display and clipboard only; subprocesses always get argv lists
    ABOUTME: Embedded single quotes use the usual POSIX close/escape/reopen idiom
    """
    if not arg:
        return "''"
    return "'" + arg.replace("'", "'\\''") + "'"


def validate_command_exists(command: str) -> str | None:
    """Return the resolved path of a command, or None if it is not found.

    ABOUTME: Uses shutil.which() for cross-platform command lookup
    ABOUTME: Paths containing a separator are checked directly
    """
    if os.sep in command or "/" in command:
        path = Path(command)
        if path.is_file() and os.access(path, os.X_OK):
            return str(path)
        return None
    return shutil.which(command)


def should_probe(command: str) -> bool:
    """Whether a local command is worth probing before registration."""
    return bool(command) and Path(command).name not in PACKAGE_RUNNERS


def check_executable(command: str, timeout: int | None = None) -> tuple[bool, str]:
    """Check that a command can be launched.

    ABOUTME: Verifies the file/PATH entry, then tries common probe flags
    ABOUTME: A failed flag probe is only a warning if the file exists

    Returns:
        Tuple of (success, message)
    """
    if timeout is None:
        timeout = PROBE_TIMEOUT

    if os.sep in command or "/" in command:
        path = Path(command)
        if not path.exists():
            return False, f"Executable not found at path: {command}"
        if not path.is_file():
            return False, f"Path is not a file: {command}"
        if not os.access(path, os.X_OK):
            return False, f"File is not executable: {command}"
    elif shutil.which(command) is None:
        return False, f"Command not found in PATH: {command}"

    for flag in PROBE_FLAGS:
        try:
            result = subprocess.run(
                [command, flag],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            logger.debug(f"Probe {command} {flag} timed out after {timeout}s")
            continue
        except OSError as e:
            logger.debug(f"Probe {command} {flag} failed: {e}")
            continue
        if result.returncode == 0:
            logger.debug(f"Executable test successful: {command} {flag}")
            return True, f"Executable test successful: {command}"

    return True, f"Could not test {command} with standard flags, but it exists"
