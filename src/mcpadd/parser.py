# ABOUTME: Normalizes raw JSON input into a LocalServer or RemoteServer
# ABOUTME: Accepts bare objects, wrapped {"name": {...}} objects and key fragments
import json
import logging
import re
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path
from typing import Any

from mcpadd.errors import McpAddError, ParseError
from mcpadd.models import DEFAULT_LOCAL_DESCRIPTION, LocalServer, RemoteServer, ServerSpec

logger = logging.getLogger(__name__)

# ABOUTME: A fragment is a quoted or bare key followed by ':' and '{'
FRAGMENT_PATTERN = r'^(?:"[^"]+"|[A-Za-z_][A-Za-z0-9_]*)\s*:\s*\{'

# ABOUTME: Shape matcher signature: (data, suggested_name, default_transport) -> spec or None
ShapeMatcher = Callable[[dict[str, Any], str | None, str | None], ServerSpec | None]


def load_json_object(raw_text: str) -> dict[str, Any]:
    """Parse JSON text into a dict, retrying once for a bare key fragment.

    ABOUTME: '"name": {...}' is retried as '{"name": {...}}'
    ABOUTME: Both parser messages are kept when the retry also fails

    Raises:
        ParseError: If the text is not a JSON object
    """
    try:
        parsed = json.loads(raw_text)
    except json.JSONDecodeError as first_error:
        fragment = raw_text.strip()
        if not re.match(FRAGMENT_PATTERN, fragment):
            raise ParseError(
                f"Invalid JSON configuration: {first_error}",
                causes=[str(first_error)],
            ) from first_error

        logger.info("Detected JSON fragment, attempting to wrap in braces...")
        try:
            parsed = json.loads("{" + fragment + "}")
        except json.JSONDecodeError as second_error:
            raise ParseError(
                f"Invalid JSON configuration: {first_error}. "
                f"Also tried wrapping as fragment: {second_error}",
                causes=[str(first_error), str(second_error)],
            ) from second_error

    if not isinstance(parsed, dict):
        raise ParseError(
            f"Invalid JSON configuration: expected an object, got {type(parsed).__name__}"
        )
    return parsed


def _string_field(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ParseError(f"Invalid JSON configuration: '{key}' must be a string")
    return value


def _match_remote(
    data: dict[str, Any], suggested_name: str | None, default_transport: str | None
) -> ServerSpec | None:
    if not data.get("url"):
        return None
    if data.get("command"):
        logger.warning("Configuration has both 'url' and 'command'; using the URL")

    url = _string_field(data, "url")
    logger.info("Detected URL-based MCP configuration")
    return RemoteServer(
        url=url or "",
        transport=_string_field(data, "transport") or default_transport,
        description=_string_field(data, "description") or "",
        suggested_name=suggested_name or _string_field(data, "name"),
    )


def _as_text(value: Any) -> str:
    """Strings pass through; other JSON values become their JSON text."""
    return value if isinstance(value, str) else json.dumps(value)


def _match_local(
    data: dict[str, Any], suggested_name: str | None, default_transport: str | None
) -> ServerSpec | None:
    if "command" not in data:
        return None

    command = _string_field(data, "command")
    if not command:
        raise ParseError("Invalid JSON configuration: 'command' cannot be empty")

    args = data.get("args") or []
    if not isinstance(args, list):
        raise ParseError("Invalid JSON configuration: 'args' must be an array")

    env = data.get("env") or {}
    if not isinstance(env, dict):
        raise ParseError("Invalid JSON configuration: 'env' must be an object")

    return LocalServer(
        command=command,
        args=[_as_text(arg) for arg in args],
        env={str(key): _as_text(value) for key, value in env.items()},
        description=_string_field(data, "description") or DEFAULT_LOCAL_DESCRIPTION,
        cwd=_string_field(data, "cwd"),
        suggested_name=suggested_name or _string_field(data, "name"),
    )


def _match_wrapper(
    data: dict[str, Any], suggested_name: str | None, default_transport: str | None
) -> ServerSpec | None:
    if len(data) != 1:
        return None
    (outer_key, inner), = data.items()
    if not isinstance(inner, dict):
        return None

    logger.info(f'Detected wrapped JSON format with server name: "{outer_key}"')
    spec = normalize_object(inner, outer_key, default_transport)
    # Outer key wins over anything found inside
    return replace(spec, suggested_name=outer_key)


# ABOUTME: Canonical shapes first, wrapper last
SHAPES: tuple[ShapeMatcher, ...] = (_match_remote, _match_local, _match_wrapper)


def normalize_object(
    data: dict[str, Any],
    fallback_name: str | None = None,
    default_transport: str | None = None,
) -> ServerSpec:
    """Turn an already-parsed JSON object into a server spec.

    Raises:
        ParseError: If no known shape matches
    """
    for shape in SHAPES:
        spec = shape(data, fallback_name, default_transport)
        if spec is not None:
            return spec

    raise ParseError(
        "Invalid JSON configuration: expected a 'command' or 'url' field, "
        'or a single {"server-name": {...}} wrapper'
    )


def normalize(
    raw_text: str,
    fallback_name: str | None = None,
    default_transport: str | None = None,
) -> ServerSpec:
    """Parse raw JSON text into a LocalServer or RemoteServer.

    ABOUTME: Pure transform, no side effects beyond log lines
    ABOUTME: default_transport fills in RemoteServer.transport when absent

    Args:
        raw_text: JSON text from the command line, a file or the clipboard
        fallback_name: Suggested name used when the input carries none
        default_transport: Target's remote default transport

    Raises:
        ParseError: If the text is malformed or matches no shape

    Examples:
        >>> normalize('{"gitmcp": {"url": "https://gitmcp.io/docs"}}').suggested_name
        'gitmcp'
    """
    return normalize_object(load_json_object(raw_text), fallback_name, default_transport)


def spec_to_dict(spec: ServerSpec, wrap: bool = True) -> dict[str, Any]:
    """Convert a spec back to its JSON input form.

    ABOUTME: Wraps under suggested_name when present so normalize() round-trips
    """
    data: dict[str, Any]
    if isinstance(spec, RemoteServer):
        data = {"url": spec.url}
        if spec.transport:
            data["transport"] = spec.transport
        data["description"] = spec.description
    else:
        data = {
            "command": spec.command,
            "args": list(spec.args),
            "env": dict(spec.env),
            "description": spec.description,
        }
        if spec.cwd:
            data["cwd"] = spec.cwd

    if wrap and spec.suggested_name:
        return {spec.suggested_name: data}
    return data


def spec_to_json(spec: ServerSpec, wrap: bool = True) -> str:
    """Serialize a spec to JSON text accepted by normalize()."""
    return json.dumps(spec_to_dict(spec, wrap=wrap), indent=2)


def read_json_input_file(file_path: str, cwd: Path | None = None) -> str:
    """Read JSON text from a file path, relative paths resolved against cwd.

    Raises:
        McpAddError: If the file is missing or unreadable
    """
    path = Path(file_path).expanduser()
    if not path.is_absolute():
        path = (cwd or Path.cwd()) / path

    if not path.exists():
        raise McpAddError(f"Failed to read JSON file: JSON file not found: {path}")
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise McpAddError(f"Failed to read JSON file: {e}") from e
