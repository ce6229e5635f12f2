# Run options and environment settings for mcp-auto-add
import argparse
import logging
from dataclasses import dataclass
from pathlib import Path

from mcpadd.models import DEFAULT_SERVER_NAME, ServerSpec, Target

# ABOUTME: Environment variables the tool reads
PROJECT_TYPE_ENV = "PROJECT_TYPE"
EDITOR_ENV = "EDITOR"
NVM_CURRENT_ENV = "NVM_CURRENT"

# ABOUTME: Format shared by every log line
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(message)s"

# ABOUTME: Project-scope files to commit, shown after a project-scope add
PROJECT_FILES = {
    Target.CLAUDE: ".mcp.json",
    Target.GEMINI: ".gemini/settings.json",
    Target.OPENCODE: "opencode.json",
}


@dataclass(frozen=True)
class RunOptions:
    """Options for one invocation, threaded explicitly through the workflow.

    ABOUTME: Built once from argparse; nothing reads process-wide flags
    """
    target: Target = Target.CLAUDE
    force: bool = False
    dry_run: bool = False
    verbose: bool = False
    generate_command: bool = False
    json_text: str | None = None
    json_file: str | None = None
    clipboard: bool = False
    auto_detect: bool = False
    edit: bool = False
    cwd: Path | None = None
    home: Path | None = None

    @property
    def interactive(self) -> bool:
        """Prompts are shown unless forced or only rendering."""
        return not (self.force or self.dry_run or self.generate_command)

    @property
    def has_input_source(self) -> bool:
        return bool(self.json_text or self.json_file or self.clipboard or self.auto_detect)

    @property
    def project_dir(self) -> Path:
        return self.cwd or Path.cwd()

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "RunOptions":
        """Collect parsed command-line arguments into RunOptions."""
        if args.opencode:
            target = Target.OPENCODE
        elif args.gemini:
            target = Target.GEMINI
        else:
            target = Target.CLAUDE

        return cls(
            target=target,
            force=args.force,
            dry_run=args.dry_run,
            verbose=args.verbose,
            generate_command=args.generate_command,
            json_text=args.json,
            json_file=args.json_file,
            clipboard=args.clipboard,
            auto_detect=args.mode == ".",
            edit=args.edit or args.mode == "edit",
        )


def default_server_name(spec: ServerSpec, auto_detected: bool, project_dir: Path) -> str:
    """Name offered when the user does not pick one.

    ABOUTME: Suggested name first, then the project directory for auto-detected configs
    """
    if spec.suggested_name:
        return spec.suggested_name
    if auto_detected and project_dir.name:
        return project_dir.name
    return DEFAULT_SERVER_NAME


def configure_logging(verbose: bool) -> None:
    """Configure root logging once for the CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )
