# ABOUTME: System clipboard access through xclip, xsel or pbcopy/pbpaste
# ABOUTME: Text is passed on stdin; no shell is involved
import logging
import subprocess

from mcpadd.errors import McpAddError

logger = logging.getLogger(__name__)

COPY_TOOLS: list[list[str]] = [
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
    ["pbcopy"],
]

PASTE_TOOLS: list[list[str]] = [
    ["xclip", "-selection", "clipboard", "-o"],
    ["xsel", "--clipboard", "--output"],
    ["pbpaste"],
]


class ClipboardError(McpAddError):
    """No clipboard tool could be used."""


def copy_to_clipboard(text: str) -> str | None:
    """Copy text to the clipboard.

    Returns:
        Name of the tool that succeeded, or None if none worked
    """
    for argv in COPY_TOOLS:
        try:
            result = subprocess.run(argv, input=text, text=True, capture_output=True)
        except OSError as e:
            logger.debug(f"{argv[0]} unavailable: {e}")
            continue
        if result.returncode == 0:
            return argv[0]
        logger.debug(f"{argv[0]} exited with {result.returncode}")
    return None


def read_from_clipboard() -> str:
    """Read text from the clipboard.

    Raises:
        ClipboardError: If no clipboard tool works
    """
    for argv in PASTE_TOOLS:
        try:
            result = subprocess.run(argv, text=True, capture_output=True)
        except OSError as e:
            logger.debug(f"{argv[0]} unavailable: {e}")
            continue
        if result.returncode == 0:
            return result.stdout
    raise ClipboardError(
        "Could not read from clipboard. Please install xclip, xsel, or use macOS pbpaste."
    )
