# Target adapter registry
from pathlib import Path

from mcpadd.models import Target, TargetAdapter
from mcpadd.platforms.claude import ClaudeAdapter
from mcpadd.platforms.gemini import GeminiAdapter
from mcpadd.platforms.opencode import ConfirmOverwrite, OpenCodeAdapter

# Registry of all available target adapters, default first
ALL_TARGETS: dict[Target, type] = {
    Target.CLAUDE: ClaudeAdapter,
    Target.GEMINI: GeminiAdapter,
    Target.OPENCODE: OpenCodeAdapter,
}

DEFAULT_TARGET = Target.CLAUDE

__all__ = [
    "TargetAdapter",
    "ClaudeAdapter",
    "GeminiAdapter",
    "OpenCodeAdapter",
    "ALL_TARGETS",
    "DEFAULT_TARGET",
    "get_adapter",
]


def get_adapter(
    target: Target | str,
    home: Path | None = None,
    cwd: Path | None = None,
    confirm_overwrite: ConfirmOverwrite | None = None,
) -> TargetAdapter:
    """Instantiate the adapter for a target.

    ABOUTME: confirm_overwrite only matters for the file-writing target

    Raises:
        ValueError: If the target is unknown
    """
    target = Target(target)
    adapter_cls = ALL_TARGETS[target]
    if adapter_cls is OpenCodeAdapter:
        return OpenCodeAdapter(home=home, cwd=cwd, confirm_overwrite=confirm_overwrite)
    return adapter_cls(home=home, cwd=cwd)
