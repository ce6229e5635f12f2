# ABOUTME: Auto-detection of a launch configuration from the project directory
# ABOUTME: Supports Python (uv + .venv), Node.js and TypeScript projects
import json
import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Any

import tomli

from mcpadd.config import PROJECT_TYPE_ENV
from mcpadd.errors import DetectionError
from mcpadd.models import LocalServer
from mcpadd.utils.env import read_env_file
from mcpadd.utils.executables import find_node_executable

logger = logging.getLogger(__name__)

PROJECT_TYPES = ("python", "node", "typescript")

PYTHON_MARKERS = ("pyproject.toml", "requirements.txt", "setup.py")
ENTRY_FILE = Path("build") / "index.js"

# ABOUTME: Checked in order; npm is used when no lock file matches
BUILD_COMMANDS: list[tuple[str, list[str]]] = [
    ("bun.lockb", ["bun", "run", "build"]),
    ("pnpm-lock.yaml", ["pnpm", "build"]),
    ("yarn.lock", ["yarn", "build"]),
]
DEFAULT_BUILD_COMMAND = ["npm", "run", "build"]

DEFAULT_DESCRIPTIONS = {
    "python": "Python MCP server",
    "node": "Node.js MCP server",
    "typescript": "TypeScript MCP server",
}


def detect_project_type(cwd: Path) -> str | None:
    """Detect the project type from marker files.

    ABOUTME: PROJECT_TYPE in the environment overrides detection
    """
    override = os.environ.get(PROJECT_TYPE_ENV)
    if override:
        logger.debug(f"Found {PROJECT_TYPE_ENV} environment variable: {override}")
        return override

    if any((cwd / marker).exists() for marker in PYTHON_MARKERS):
        logger.debug("Detected Python project")
        return "python"
    if (cwd / "package.json").exists():
        if (cwd / "tsconfig.json").exists():
            logger.debug("Detected TypeScript project")
            return "typescript"
        logger.debug("Detected Node.js project")
        return "node"

    logger.debug("Could not detect project type")
    return None


def read_package_json(cwd: Path) -> dict[str, Any]:
    """Return package.json as a dict, or {} if missing or unreadable."""
    path = cwd / "package.json"
    if not path.exists():
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.debug(f"Error reading package.json: {e}")
        return {}
    return data if isinstance(data, dict) else {}


def read_pyproject_description(cwd: Path) -> str | None:
    """Return [project].description from pyproject.toml, if any."""
    path = cwd / "pyproject.toml"
    if not path.exists():
        return None
    try:
        with open(path, "rb") as f:
            data = tomli.load(f)
    except (OSError, tomli.TOMLDecodeError) as e:
        logger.debug(f"Error reading pyproject.toml: {e}")
        return None

    description = data.get("project", {}).get("description")
    return description if isinstance(description, str) and description else None


def is_global_package(package_name: str, cwd: Path) -> bool:
    """Whether package_name is installed with `npm install -g`.

    ABOUTME: Always False inside the package's own source directory
    """
    if read_package_json(cwd).get("name") == package_name:
        logger.debug(f"{package_name} is not a global package (we're in its directory)")
        return False

    try:
        result = subprocess.run(
            ["npm", "list", "-g", package_name],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as e:
        logger.debug(f"npm unavailable: {e}")
        return False

    is_global = result.returncode == 0
    logger.debug(f"{package_name} is {'' if is_global else 'not '}a global package")
    return is_global


def build_command_for(cwd: Path) -> list[str]:
    """Pick the build command from the lock file present."""
    for lock_file, argv in BUILD_COMMANDS:
        if (cwd / lock_file).exists():
            return list(argv)
    return list(DEFAULT_BUILD_COMMAND)


def build_typescript_project(cwd: Path) -> None:
    """Run the project's build script in cwd.

    ABOUTME: Output goes straight to the terminal

    Raises:
        DetectionError: If there is no package.json or the build fails
    """
    if not (cwd / "package.json").exists():
        raise DetectionError("No package.json found, cannot build TypeScript project")

    argv = build_command_for(cwd)
    logger.info(f"Running build command: {' '.join(argv)}")
    try:
        result = subprocess.run(argv, cwd=cwd)
    except OSError as e:
        raise DetectionError(
            f"TypeScript build failed: {e}",
            hints=['Check package.json has a "build" script'],
        ) from e
    if result.returncode != 0:
        raise DetectionError(
            "TypeScript build failed. Please fix build issues before continuing.",
            hints=['Check package.json has a "build" script'],
        )
    logger.info("TypeScript build completed successfully")


def _python_launch(cwd: Path) -> tuple[str, list[str]]:
    if shutil.which("uv") is None:
        raise DetectionError(
            "uv is not installed",
            hints=["Install uv first: curl -LsSf https://astral.sh/uv/install.sh | sh"],
        )

    python_exec = cwd / ".venv" / "bin" / "python"
    server_script = cwd / "server.py"
    if not python_exec.exists():
        raise DetectionError(
            f"Python executable not found at {python_exec}",
            hints=["Create and sync the virtual environment: uv venv && uv sync"],
        )
    if not server_script.exists():
        raise DetectionError(f"Server file not found at {server_script}")
    return str(python_exec), [str(server_script)]


def _node_launch(
    project_type: str, cwd: Path, home: Path | None, build: bool
) -> tuple[str, list[str]]:
    project_name = cwd.name
    if is_global_package(project_name, cwd):
        return project_name, []

    node = find_node_executable(home)
    if not node:
        raise DetectionError(
            "Could not find Node.js executable",
            hints=["Please ensure Node.js is installed"],
        )

    if project_type == "typescript" and build:
        build_typescript_project(cwd)

    entry_path = cwd / ENTRY_FILE
    if not entry_path.exists():
        hints = []
        if project_type == "typescript":
            hints = ["Build the project first with 'npm run build' or similar"]
        raise DetectionError(f"Entry file not found at {entry_path}", hints=hints)
    return node, [str(entry_path)]


def detect_server(cwd: Path, home: Path | None = None, dry_run: bool = False) -> LocalServer:
    """Generate a local server configuration for the project in cwd.

    ABOUTME: TypeScript projects are built first unless dry_run is set
    ABOUTME: env comes from cwd/.env

    Args:
        cwd: Project directory
        home: Home directory used when searching for node
        dry_run: Skip the TypeScript build

    Returns:
        LocalServer ready for registration

    Raises:
        DetectionError: If the project type is unknown or a required file is missing
    """
    project_type = detect_project_type(cwd)
    if not project_type:
        raise DetectionError(
            "Could not detect project type",
            hints=[
                "Python needs pyproject.toml, requirements.txt, or setup.py",
                "Node.js needs package.json (TypeScript also tsconfig.json)",
                f"Override with: export {PROJECT_TYPE_ENV}=python",
            ],
        )
    if project_type not in PROJECT_TYPES:
        raise DetectionError(
            f"Unknown project type: {project_type}",
            hints=[f"{PROJECT_TYPE_ENV} must be one of: {', '.join(PROJECT_TYPES)}"],
        )

    logger.info(f"Detected project type: {project_type}")
    description = DEFAULT_DESCRIPTIONS[project_type]

    if project_type == "python":
        command, args = _python_launch(cwd)
        description = read_pyproject_description(cwd) or description
    else:
        command, args = _node_launch(project_type, cwd, home, build=not dry_run)
        package_description = read_package_json(cwd).get("description")
        if isinstance(package_description, str) and package_description:
            description = package_description

    env = read_env_file(cwd)
    logger.debug(f"Command: {command}")
    logger.debug(f"Args: {json.dumps(args)}")
    logger.debug(f"Environment variables: {len(env)} found")
    return LocalServer(command=command, args=args, env=env, description=description)
