# Environment file utilities
import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

# ABOUTME: Pattern matches KEY=value where KEY is uppercase with underscores
ENV_LINE_PATTERN = re.compile(r"^([A-Z_][A-Z0-9_]*)=(.*)$")


def parse_env_text(text: str) -> dict[str, str]:
    """Parse KEY=value lines into a dict.

    ABOUTME: Lines that don't match (comments, lowercase keys) are skipped
    ABOUTME: Values are kept verbatim, including quotes

    Examples:
        >>> parse_env_text("API_KEY=abc\\n# comment\\nlower=x")
        {'API_KEY': 'abc'}
    """
    env: dict[str, str] = {}
    for line in text.splitlines():
        match = ENV_LINE_PATTERN.match(line.rstrip("\r"))
        if match:
            env[match.group(1)] = match.group(2)
    return env


def read_env_file(project_dir: Path) -> dict[str, str]:
    """Read environment variables from project_dir/.env.

    Returns an empty dict if the file doesn't exist.
    """
    env_path = project_dir / ".env"
    if not env_path.exists():
        logger.debug("No .env file found")
        return {}

    env = parse_env_text(env_path.read_text(encoding="utf-8"))
    logger.debug(f"Found {len(env)} environment variables in {env_path}")
    return env
