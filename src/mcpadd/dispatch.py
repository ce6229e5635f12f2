# ABOUTME: Dispatcher selecting the target adapter for a registration
# ABOUTME: Normalizes every adapter failure into an AddResult
import logging

from mcpadd.errors import ExternalToolFailure, McpAddError, ValidationError
from mcpadd.models import AddResult, RegistrationRequest, RemoteServer, Target, TargetAdapter
from mcpadd.platforms import get_adapter
from mcpadd.utils.validation import validate_scope, validate_server_name

logger = logging.getLogger(__name__)


def prepare_request(adapter: TargetAdapter, request: RegistrationRequest) -> RegistrationRequest:
    """Validate name and scope against the adapter before anything runs.

    Raises:
        ValidationError: If the name or scope is illegal for this target
    """
    return RegistrationRequest(
        spec=request.spec,
        server_name=validate_server_name(request.server_name),
        scope=validate_scope(request.scope, adapter.allowed_scopes),
    )


def dispatch(target: Target | TargetAdapter, request: RegistrationRequest) -> AddResult:
    """Register request.spec with a target.

    ABOUTME: Local specs go to add_local, URL specs to add_remote
    ABOUTME: Never raises McpAddError; failures come back as AddResult(ok=False)

    Args:
        target: Target value, or an already-built adapter for it
        request: Spec, server name and scope

    Returns:
        AddResult describing success or failure with troubleshooting hints
    """
    adapter = get_adapter(target) if isinstance(target, str) else target
    try:
        request = prepare_request(adapter, request)
        spec = request.spec
        if isinstance(spec, RemoteServer):
            return adapter.add_remote(spec, request.server_name, request.scope)
        return adapter.add_local(spec, request.server_name, request.scope)
    except ValidationError as e:
        logger.debug(f"Validation failed: {e.message}")
        return AddResult.failure(f"Validation failed: {e.message}", hints=e.hints)
    except ExternalToolFailure as e:
        return AddResult.failure(
            f"Failed to add MCP server to {adapter.name}: {e.message}",
            hints=e.hints,
            output=e.output,
        )
    except McpAddError as e:
        return AddResult.failure(
            f"Failed to add MCP server to {adapter.name}: {e.message}", hints=e.hints
        )
