# ABOUTME: Interactive terminal prompts built on input()
# ABOUTME: Numbered menus, validated text answers and yes/no confirmation
from mcpadd.errors import ValidationError
from mcpadd.models import DEFAULT_SCOPE
from mcpadd.utils.validation import validate_server_name

BOLD = "\033[1m"
RESET = "\033[0m"
RED = "\033[91m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
CYAN = "\033[96m"
DIM = "\033[2m"

SCOPE_DESCRIPTIONS = {
    "user": "Available to you across all projects (recommended)",
    "local": "Available only in this project",
    "project": "Shared with everyone in the project",
}

INPUT_SOURCES = [
    ("auto", "Auto-detect from current directory"),
    ("json", "Paste JSON configuration"),
    ("file", "Load JSON from file"),
    ("clipboard", "Read JSON from clipboard"),
]

FALLBACK_SOURCES = [
    ("json", "Paste JSON configuration"),
    ("file", "Load JSON from file"),
    ("clipboard", "Read JSON from clipboard"),
    ("exit", "Exit"),
]


def choose(message: str, choices: list[tuple[str, str]], default: str | None = None) -> str:
    """Show a numbered menu and return the value of the chosen entry.

    ABOUTME: Enter picks the default; invalid answers re-prompt

    Args:
        message: Question shown above the menu
        choices: (value, label) pairs
        default: Value chosen on empty input, first entry if None
    """
    values = [value for value, _ in choices]
    if default not in values:
        default = values[0]

    print(f"{BOLD}{message}{RESET}")
    for idx, (value, label) in enumerate(choices, start=1):
        marker = f" {DIM}(default){RESET}" if value == default else ""
        print(f"  {idx}. {label}{marker}")

    while True:
        answer = input(f"Choice [1-{len(choices)}]: ").strip()
        if not answer:
            return default
        if answer.isdigit() and 1 <= int(answer) <= len(choices):
            return values[int(answer) - 1]
        if answer in values:
            return answer
        print(f"{RED}Please enter a number between 1 and {len(choices)}{RESET}")


def ask_text(message: str, default: str | None = None) -> str:
    """Ask for a line of text, returning default on empty input."""
    suffix = f" [{default}]" if default else ""
    answer = input(f"{message}{suffix}: ").strip()
    return answer or (default or "")


def confirm(message: str, default: bool = True) -> bool:
    """Ask a yes/no question."""
    hint = "Y/n" if default else "y/N"
    while True:
        answer = input(f"{message} ({hint}): ").strip().lower()
        if not answer:
            return default
        if answer in ("y", "yes"):
            return True
        if answer in ("n", "no"):
            return False
        print(f"{RED}Please answer y or n{RESET}")


def choose_scope(allowed_scopes: tuple[str, ...], project_file: str | None = None) -> str:
    """Scope menu restricted to a target's allowed scopes."""
    choices = []
    for scope in allowed_scopes:
        label = f"{scope} - {SCOPE_DESCRIPTIONS.get(scope, scope)}"
        if scope == "project" and project_file:
            label += f" (requires {project_file})"
        choices.append((scope, label))
    return choose("Choose MCP server scope:", choices, default=DEFAULT_SCOPE)


def ask_server_name(default: str) -> str:
    """Ask for a server name until a valid one is given."""
    while True:
        answer = ask_text("Server name", default)
        try:
            return validate_server_name(answer)
        except ValidationError as e:
            print(f"{RED}{e.message}{RESET}")


def ask_transport(allowed: tuple[str, ...], default: str) -> str:
    """Transport menu for URL servers."""
    labels = {
        "sse": "sse - Server-Sent Events",
        "http": "http - Streamable HTTP",
    }
    choices = [(transport, labels.get(transport, transport)) for transport in allowed]
    return choose("Choose transport type:", choices, default=default)


def ask_json() -> str:
    """Read a pasted JSON configuration.

    ABOUTME: Reads lines until an empty line, so multi-line pastes work
    """
    print(f"{CYAN}Paste your JSON configuration below.{RESET}")
    print(f"{CYAN}Press Enter on an empty line when done:{RESET}")
    while True:
        lines = []
        while True:
            line = input()
            if not line.strip():
                break
            lines.append(line)
        text = "\n".join(lines)
        if text.strip():
            return text
        print(f"{RED}JSON configuration cannot be empty{RESET}")


def ask_input_source() -> str:
    """Menu shown when no input flag was given."""
    return choose("How would you like to provide the MCP configuration?", INPUT_SOURCES)


def ask_fallback_source() -> str:
    """Menu shown after auto-detection fails."""
    return choose("Auto-detection failed. What would you like to do?", FALLBACK_SOURCES)
