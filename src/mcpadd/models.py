# Core data models for mcpadd
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Literal, Protocol, Union, runtime_checkable

# ABOUTME: Scope and transport vocabularies shared by every target
Scope = Literal["user", "local", "project"]
Transport = Literal["stdio", "sse", "http"]

ALL_SCOPES: tuple[str, ...] = ("user", "local", "project")
ALL_TRANSPORTS: tuple[str, ...] = ("stdio", "sse", "http")
REMOTE_TRANSPORTS: tuple[str, ...] = ("sse", "http")

DEFAULT_SCOPE = "user"
DEFAULT_SERVER_NAME = "mcp-server"
DEFAULT_LOCAL_DESCRIPTION = "MCP server from JSON"


class Target(str, Enum):
    """The assistant tool a server is registered with.

    ABOUTME: Passed explicitly through dispatcher and adapters
    ABOUTME: Value doubles as the registry key
    """
    CLAUDE = "claude"
    GEMINI = "gemini"
    OPENCODE = "opencode"


@dataclass(frozen=True)
class LocalServer:
    """Immutable stdio server launched as a local subprocess.

    ABOUTME: args is always a list (possibly empty), never None
    ABOUTME: suggested_name is only a default, never authoritative
    """
    command: str
    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)
    description: str = DEFAULT_LOCAL_DESCRIPTION
    cwd: str | None = None
    suggested_name: str | None = None

    @property
    def kind(self) -> str:
        return "local"


@dataclass(frozen=True)
class RemoteServer:
    """Immutable server reachable over HTTP or SSE.

    ABOUTME: transport None means "use the target's remote default"
    """
    url: str
    transport: str | None = None
    description: str = ""
    suggested_name: str | None = None

    def __post_init__(self) -> None:
        if not self.description:
            object.__setattr__(self, "description", f"URL-based MCP server: {self.url}")

    @property
    def kind(self) -> str:
        return "remote"


ServerSpec = Union[LocalServer, RemoteServer]


@dataclass(frozen=True)
class RegistrationRequest:
    """A validated server spec plus the name and scope to register it under."""
    spec: ServerSpec
    server_name: str
    scope: str = DEFAULT_SCOPE

    @property
    def is_remote(self) -> bool:
        return isinstance(self.spec, RemoteServer)


@dataclass
class AddResult:
    """Outcome of a registration attempt.

    ABOUTME: Uniform across all three adapters
    ABOUTME: hints carry troubleshooting lines for failures
    """
    ok: bool
    message: str
    hints: list[str] = field(default_factory=list)
    output: str = ""
    config_path: Path | None = None

    @classmethod
    def success(
        cls, message: str, output: str = "", config_path: Path | None = None
    ) -> "AddResult":
        return cls(ok=True, message=message, output=output, config_path=config_path)

    @classmethod
    def failure(cls, message: str, hints: list[str] | None = None, output: str = "") -> "AddResult":
        return cls(ok=False, message=message, hints=list(hints or []), output=output)


@runtime_checkable
class TargetAdapter(Protocol):
    """Protocol for target-specific registration adapters.

    ABOUTME: Defines interface all target adapters must implement
    ABOUTME: Uses @runtime_checkable for isinstance() support
    """

    target: Target

    @property
    def name(self) -> str:
        """Human-readable target name."""
        ...

    @property
    def default_remote_transport(self) -> str:
        """Transport used for URL servers when the input names none."""
        ...

    @property
    def allowed_scopes(self) -> tuple[str, ...]:
        """Scopes this target accepts."""
        ...

    def config_path(self, scope: str) -> Path:
        """Config file the target uses for the given scope."""
        ...

    def add_local(self, spec: LocalServer, name: str, scope: str) -> AddResult:
        """Register a stdio server."""
        ...

    def add_remote(self, spec: RemoteServer, name: str, scope: str) -> AddResult:
        """Register a URL server."""
        ...

    def preview(self, request: RegistrationRequest) -> str:
        """Exact artifact a registration would produce, without side effects."""
        ...

    def command_line(self, request: RegistrationRequest) -> str:
        """Human-pasteable form of the artifact."""
        ...
