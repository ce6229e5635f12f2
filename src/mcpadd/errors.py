# ABOUTME: Exception hierarchy for mcpadd
# ABOUTME: Every failure path raises one of these with a human-readable message


class McpAddError(Exception):
    """Base class for all mcpadd errors.

    ABOUTME: hints are troubleshooting lines shown under the message
    """

    def __init__(self, message: str, hints: list[str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hints: list[str] = list(hints or [])


class ParseError(McpAddError):
    """Input JSON could not be turned into a server spec."""

    def __init__(self, message: str, causes: list[str] | None = None) -> None:
        super().__init__(message)
        self.causes: list[str] = list(causes or [])


class ValidationError(McpAddError):
    """A name, scope, transport or URL is not acceptable.

    ABOUTME: Raised before any subprocess or file operation
    """

    def __init__(
        self,
        field: str,
        value: object,
        reason: str,
        allowed: tuple[str, ...] | list[str] | None = None,
    ) -> None:
        message = f"Invalid {field} {value!r}: {reason}"
        if allowed:
            message += f" (allowed: {', '.join(allowed)})"
        super().__init__(message)
        self.field = field
        self.value = value
        self.allowed = tuple(allowed or ())


class ExecutableNotFoundError(McpAddError):
    """The target's CLI could not be located."""

    def __init__(self, executable: str, install_hint: str) -> None:
        super().__init__(
            f"{executable} CLI is not installed or not in PATH",
            hints=[install_hint],
        )
        self.executable = executable


class ExternalToolFailure(McpAddError):
    """The target's CLI exited non-zero or reported an error."""

    def __init__(
        self,
        argv: list[str],
        returncode: int | None,
        stdout: str = "",
        stderr: str = "",
        hints: list[str] | None = None,
    ) -> None:
        if returncode is None:
            detail = "could not be started"
        elif returncode:
            detail = f"exit code {returncode}"
        else:
            detail = "error reported in output"
        super().__init__(f"'{' '.join(argv[:3])}' failed ({detail})", hints=hints)
        self.argv = list(argv)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr

    @property
    def output(self) -> str:
        parts = []
        if self.stderr.strip():
            parts.append(f"STDERR: {self.stderr.strip()}")
        if self.stdout.strip():
            parts.append(f"STDOUT: {self.stdout.strip()}")
        return "\n".join(parts)


class ConfigFileError(McpAddError):
    """A target config file or its directory could not be read or written."""

    def __init__(self, path: object, reason: str) -> None:
        super().__init__(
            f"Config file error at {path}: {reason}",
            hints=[
                "Check read and write permissions for the config directory",
                "Verify the config path is accessible",
                f"Manual path: {path}",
            ],
        )
        self.path = path


class DetectionError(McpAddError):
    """The current directory could not be turned into a launch command."""
