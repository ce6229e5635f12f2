# CLI interface for mcp-auto-add
import argparse
import logging
import sys
from dataclasses import replace

from mcpadd import __version__
from mcpadd.config import PROJECT_FILES, RunOptions, configure_logging, default_server_name
from mcpadd.detect import detect_server
from mcpadd.dispatch import dispatch
from mcpadd.editor import find_all_configs, list_servers_in_config, open_editor
from mcpadd.errors import DetectionError, McpAddError
from mcpadd.models import (
    DEFAULT_SCOPE,
    REMOTE_TRANSPORTS,
    AddResult,
    LocalServer,
    RegistrationRequest,
    RemoteServer,
    ServerSpec,
    Target,
    TargetAdapter,
)
from mcpadd.parser import normalize, read_json_input_file
from mcpadd.platforms import get_adapter
from mcpadd.platforms.opencode import ConfirmOverwrite
from mcpadd.prompts import (
    BOLD,
    CYAN,
    GREEN,
    RED,
    RESET,
    YELLOW,
    ask_fallback_source,
    ask_input_source,
    ask_json,
    ask_server_name,
    ask_text,
    ask_transport,
    choose,
    choose_scope,
    confirm,
)
from mcpadd.render import dry_run, generate
from mcpadd.utils.clipboard import read_from_clipboard
from mcpadd.utils.validation import check_executable, should_probe

logger = logging.getLogger(__name__)

# ABOUTME: 0 = success or explicit early exit, 1 = any unrecoverable error
EXIT_SUCCESS = 0
EXIT_ERROR = 1

HELP_EPILOG = """\
input formats:
  {"command": "npx", "args": ["-y", "tool"], "env": {"KEY": "value"}}
  {"url": "https://gitmcp.io/docs", "transport": "http"}
  {"server-name": {"command": "npx", "args": ["-y", "tool"]}}
  "server-name": {"command": "npx", "args": ["-y", "tool"]}

scopes:
  user      available across all projects (default)
  local     this project only (Claude Code only)
  project   shared through a committed file (.mcp.json, .gemini/settings.json, opencode.json)

config files:
  Claude Code   ~/.claude.json, .claude/settings.local.json, .mcp.json
  Gemini CLI    ~/.gemini/settings.json, .gemini/settings.json
  OpenCode      ~/.config/opencode/opencode.json, ./opencode.json

command differences:
  Claude Code   claude mcp add-json <name> '<json>' -s <scope>
                claude mcp add --transport <sse|http> <name> <url>
  Gemini CLI    gemini mcp add [--scope project] <name> <command> [args...]
                gemini mcp add --transport <http|sse> [--scope project] <name> <url>
  OpenCode      writes the "mcp" section of opencode.json directly

auto-detection:
  Python        pyproject.toml, requirements.txt or setup.py; needs uv, .venv and server.py
  Node.js       package.json; runs build/index.js or a globally installed package
  TypeScript    package.json and tsconfig.json; builds with bun/pnpm/yarn/npm first
  Override with: export PROJECT_TYPE=python|node|typescript
"""


def print_error(message: str, hints: list[str] | None = None) -> None:
    print(f"{RED}Error: {message}{RESET}", file=sys.stderr)
    for hint in hints or []:
        print(f"  {YELLOW}{hint}{RESET}", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for mcp-auto-add."""
    parser = argparse.ArgumentParser(
        prog="mcp-auto-add",
        description=(
            "Add MCP servers to Claude Code, Gemini CLI or OpenCode "
            "from JSON or by auto-detecting the current project"
        ),
        epilog=HELP_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "mode",
        nargs="?",
        choices=[".", "edit"],
        help="'.' auto-detects from the current folder, 'edit' opens an existing config"
    )
    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"mcp-auto-add v{__version__}"
    )

    source = parser.add_argument_group("input")
    source.add_argument(
        "-j", "--json",
        metavar="JSON",
        help="JSON configuration string"
    )
    source.add_argument(
        "-jf", "--json-file",
        dest="json_file",
        metavar="FILE",
        help="Read JSON configuration from a file"
    )
    source.add_argument(
        "-c", "--clipboard",
        action="store_true",
        help="Read JSON configuration from the clipboard"
    )

    target = parser.add_argument_group("target")
    target.add_argument(
        "--gemini",
        action="store_true",
        help="Add to Gemini CLI instead of Claude Code"
    )
    target.add_argument(
        "--opencode", "--oc",
        dest="opencode",
        action="store_true",
        help="Add to OpenCode (writes opencode.json directly)"
    )

    modes = parser.add_argument_group("modes")
    modes.add_argument(
        "-f", "--force",
        action="store_true",
        help="Skip prompts and use defaults (scope user, suggested name)"
    )
    modes.add_argument(
        "-d", "--dry-run",
        dest="dry_run",
        action="store_true",
        help="Show what would be run or written without doing it"
    )
    modes.add_argument(
        "-g", "--generate-command",
        dest="generate_command",
        action="store_true",
        help="Print the command (or JSON snippet) and copy it to the clipboard"
    )
    modes.add_argument(
        "-e", "--edit",
        action="store_true",
        help="Edit an existing MCP configuration file"
    )
    modes.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show detailed output"
    )
    return parser


def confirm_overwrite_for(options: RunOptions) -> ConfirmOverwrite | None:
    """Overwrite policy for file-writing targets."""
    if options.force:
        return lambda _name: True
    if options.interactive:
        return lambda name: confirm(
            f'Server "{name}" already exists. Overwrite?', default=False
        )
    return None


def spec_from_source(source: str, options: RunOptions) -> tuple[ServerSpec, bool]:
    """Read and normalize a spec from one input source.

    Returns:
        Tuple of (spec, whether it was auto-detected)
    """
    if source == "auto":
        print(f"{CYAN}Auto-detecting MCP configuration from current directory...{RESET}")
        spec = detect_server(options.project_dir, options.home, dry_run=options.dry_run)
        return spec, True
    if source == "json":
        text = options.json_text if options.json_text else ask_json()
        return normalize(text), False
    if source == "file":
        file_path = options.json_file if options.json_file else ask_text("Path to JSON file")
        return normalize(read_json_input_file(file_path, options.project_dir)), False
    if source == "clipboard":
        print(f"{CYAN}Reading JSON from clipboard...{RESET}")
        return normalize(read_from_clipboard()), False
    raise ValueError(f"Unknown input source: {source}")


def obtain_spec(options: RunOptions) -> tuple[ServerSpec, bool] | None:
    """Resolve the input source and produce a spec.

    ABOUTME: Returns None when the user chooses to exit
    ABOUTME: Interactive runs fall back to a menu when auto-detection fails
    """
    if options.json_text:
        source = "json"
    elif options.json_file:
        source = "file"
    elif options.clipboard:
        source = "clipboard"
    elif options.auto_detect or not options.interactive:
        source = "auto"
    else:
        source = ask_input_source()

    try:
        return spec_from_source(source, options)
    except DetectionError as e:
        if not options.interactive or options.auto_detect:
            raise
        print(f"{YELLOW}Auto-detection failed: {e.message}{RESET}")
        fallback = ask_fallback_source()
        if fallback == "exit":
            return None
        return spec_from_source(fallback, options)


def print_summary(spec: ServerSpec, name: str) -> None:
    print()
    print(f"{BOLD}MCP Configuration Summary:{RESET}")
    print(f"  Server Name: {name}")
    if isinstance(spec, RemoteServer):
        print(f"  URL: {spec.url}")
        print(f"  Transport: {spec.transport or '(target default)'}")
    else:
        print(f"  Command: {spec.command}")
        print(f"  Arguments: {' '.join(spec.args) if spec.args else '(none)'}")
        print(f"  Environment Variables: {len(spec.env)}")
        if spec.cwd:
            print(f"  Working Directory: {spec.cwd}")
    print(f"  Description: {spec.description}")
    print()


def probe_local_command(spec: LocalServer) -> None:
    """Check the command before an interactive registration.

    Raises:
        McpAddError: If the check fails and the user declines to continue
    """
    if not should_probe(spec.command):
        return
    ok, message = check_executable(spec.command)
    if ok:
        logger.debug(message)
        return
    print(f"{RED}Executable test failed: {message}{RESET}")
    if not confirm("Executable test failed. Continue anyway?", default=False):
        raise McpAddError("Cancelled due to executable validation failure")


def build_request(
    spec: ServerSpec, auto_detected: bool, adapter: TargetAdapter, options: RunOptions
) -> RegistrationRequest | None:
    """Decide name, scope and transport, prompting when interactive.

    ABOUTME: Returns None when the user declines the final confirmation
    """
    name = default_server_name(spec, auto_detected, options.project_dir)

    if not options.interactive:
        if isinstance(spec, RemoteServer) and not spec.transport:
            spec = replace(spec, transport=adapter.default_remote_transport)
        return RegistrationRequest(spec=spec, server_name=name, scope=DEFAULT_SCOPE)

    print_summary(spec, name)
    if isinstance(spec, LocalServer):
        probe_local_command(spec)

    scope = choose_scope(adapter.allowed_scopes, PROJECT_FILES.get(adapter.target))
    name = ask_server_name(name)
    if isinstance(spec, RemoteServer) and not spec.transport:
        spec = replace(
            spec,
            transport=ask_transport(REMOTE_TRANSPORTS, adapter.default_remote_transport),
        )

    if not confirm(f"Add this MCP server to {adapter.name}?", default=True):
        return None
    return RegistrationRequest(spec=spec, server_name=name, scope=scope)


def print_guidance(target: Target, request: RegistrationRequest, result: AddResult) -> None:
    """Scope-specific advice after a successful registration."""
    if result.config_path:
        print(f"  Config file: {result.config_path}")
    if request.scope == "project":
        print(f"{CYAN}Commit {PROJECT_FILES[target]} to share this server with your team{RESET}")
    elif request.scope == "local":
        print(f"{CYAN}This server is only available in the current project{RESET}")

    if target is Target.OPENCODE:
        print(f"{CYAN}Restart OpenCode to load the new server{RESET}")
    elif target is Target.GEMINI:
        print(f"{CYAN}Run 'gemini mcp list' to verify, then restart Gemini CLI{RESET}")
    else:
        print(f"{CYAN}Run 'claude mcp list' to verify, then restart Claude Code{RESET}")


def cmd_add(options: RunOptions) -> int:
    """Normalize input, then register, preview or generate.

    ABOUTME: dry-run and generate never start the target CLI or write files
    """
    adapter = get_adapter(
        options.target,
        home=options.home,
        cwd=options.cwd,
        confirm_overwrite=confirm_overwrite_for(options),
    )
    logger.debug(f"Target: {adapter.name}")

    obtained = obtain_spec(options)
    if obtained is None:
        print("Exiting.")
        return EXIT_SUCCESS
    spec, auto_detected = obtained

    request = build_request(spec, auto_detected, adapter, options)
    if request is None:
        print(f"{YELLOW}Operation cancelled{RESET}")
        return EXIT_SUCCESS

    if options.dry_run:
        print(f"{BOLD}Dry run - would execute:{RESET}")
        print(dry_run(adapter, request))
        return EXIT_SUCCESS

    if options.generate_command:
        text, tool = generate(adapter, request)
        print(f"{BOLD}Generated for {adapter.name}:{RESET}")
        print(text)
        print()
        if tool:
            print(f"{GREEN}Copied to clipboard using {tool}{RESET}")
        else:
            print(f"{YELLOW}Could not copy to clipboard automatically.{RESET}")
            print("Please copy the text above manually.")
        return EXIT_SUCCESS

    result = dispatch(adapter, request)
    if not result.ok:
        print_error(result.message, result.hints)
        if result.output:
            print(result.output, file=sys.stderr)
        return EXIT_ERROR

    print(f"{GREEN}{result.message}{RESET}")
    if result.output and options.verbose:
        print(result.output)
    print_guidance(adapter.target, request, result)
    return EXIT_SUCCESS


def cmd_edit(options: RunOptions) -> int:
    """Pick a config file and server entry, then open the editor at its line."""
    print(f"{BOLD}MCP Configuration Editor{RESET}")

    configs = find_all_configs(options.home, options.project_dir)
    if not configs:
        print_error(
            "No MCP configuration files found",
            [
                "MCP config files are typically created when you add your first MCP server",
                'Run "mcp-auto-add" to add a server first',
            ],
        )
        return EXIT_ERROR

    print(f"Found {len(configs)} MCP configuration file(s)")
    if len(configs) == 1:
        location = configs[0]
        print(f"Using: {location.label}")
    else:
        choices = []
        for idx, config in enumerate(configs):
            count = len(list_servers_in_config(config.path))
            plural = "s" if count != 1 else ""
            choices.append((str(idx), f"{config.label} ({count} server{plural})"))
        location = configs[int(choose("Which MCP configuration file?", choices))]

    servers = list_servers_in_config(location.path)
    line = None
    if servers:
        choices = [
            (str(idx), f"{server.name} - {server.summary}")
            for idx, server in enumerate(servers)
        ]
        selected = servers[int(choose("Which server would you like to edit?", choices))]
        line = selected.line
        print(f"Opening {selected.name} configuration...")
        print(f"  File: {location.path}")
        print(f"  Line: {line}")
    else:
        print("No servers configured yet in this file, opening it for editing...")

    try:
        open_editor(location.path, line)
    except OSError as e:
        print_error(
            f"Failed to open editor: {e}",
            ["Try setting the EDITOR environment variable", "Example: export EDITOR=nano"],
        )
        return EXIT_ERROR

    print(f"{GREEN}Editor closed{RESET}")
    print(f"{CYAN}Restart {get_adapter(location.target).name} to apply changes{RESET}")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    ABOUTME: Parses args and dispatches to add or edit mode
    ABOUTME: Returns exit code for sys.exit()
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    options = RunOptions.from_args(args)
    configure_logging(options.verbose)

    try:
        if options.edit:
            return cmd_edit(options)
        return cmd_add(options)
    except KeyboardInterrupt:
        print()
        print(f"{YELLOW}Operation cancelled{RESET}")
        return EXIT_ERROR
    except McpAddError as e:
        print_error(e.message, e.hints)
        return EXIT_ERROR
    except Exception as e:
        if options.verbose:
            logger.exception("Unexpected error")
        print_error(f"Fatal error: {e}")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
