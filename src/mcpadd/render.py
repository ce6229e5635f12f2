# ABOUTME: Renders what a registration would do without doing it
# ABOUTME: dry-run shows the exact argv or JSON fragment; generate copies it
import logging
from collections.abc import Callable

from mcpadd.models import RegistrationRequest, TargetAdapter
from mcpadd.platforms.base import CliAdapter
from mcpadd.utils.clipboard import copy_to_clipboard

logger = logging.getLogger(__name__)


def dry_run_argv(adapter: TargetAdapter, request: RegistrationRequest) -> list[str] | None:
    """Exact argument vector a CLI target would run, or None for file targets.

    Raises:
        ValidationError: If the request is illegal for the target
    """
    if isinstance(adapter, CliAdapter):
        return [adapter.executable, *adapter.build_args(request)]
    return None


def dry_run(adapter: TargetAdapter, request: RegistrationRequest) -> str:
    """Text shown for --dry-run.

    ABOUTME: No subprocess is started and no file is written
    ABOUTME: CLI targets render a command line, OpenCode a JSON fragment
    """
    rendered = adapter.preview(request)
    logger.debug(f"Dry run for {adapter.name}: {rendered}")
    return rendered


def generate(
    adapter: TargetAdapter,
    request: RegistrationRequest,
    copy: Callable[[str], str | None] = copy_to_clipboard,
) -> tuple[str, str | None]:
    """Build the pasteable artifact and hand it to the clipboard.

    Args:
        adapter: Adapter for the chosen target
        request: Spec, server name and scope
        copy: Clipboard collaborator returning the tool it used, or None

    Returns:
        Tuple of (artifact text, clipboard tool name or None)
    """
    text = adapter.command_line(request)
    tool = copy(text)
    if tool:
        logger.debug(f"Copied to clipboard using {tool}")
    else:
        logger.debug("Could not copy to clipboard automatically")
    return text, tool
