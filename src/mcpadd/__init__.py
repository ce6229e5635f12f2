# mcpadd - add MCP servers to Claude Code, Gemini CLI and OpenCode
# ABOUTME: Version information
__version__ = "0.1.0"

# ABOUTME: Export core data models and errors
from mcpadd.dispatch import dispatch
from mcpadd.errors import (
    ConfigFileError,
    DetectionError,
    ExecutableNotFoundError,
    ExternalToolFailure,
    McpAddError,
    ParseError,
    ValidationError,
)
from mcpadd.models import (
    AddResult,
    LocalServer,
    RegistrationRequest,
    RemoteServer,
    ServerSpec,
    Target,
    TargetAdapter,
)

# ABOUTME: Export the normalizer and adapter registry
from mcpadd.parser import normalize, spec_to_json
from mcpadd.platforms import get_adapter

__all__ = [
    "__version__",
    "AddResult",
    "LocalServer",
    "RemoteServer",
    "RegistrationRequest",
    "ServerSpec",
    "Target",
    "TargetAdapter",
    "McpAddError",
    "ParseError",
    "ValidationError",
    "ExecutableNotFoundError",
    "ExternalToolFailure",
    "ConfigFileError",
    "DetectionError",
    "normalize",
    "spec_to_json",
    "get_adapter",
    "dispatch",
]
