# ABOUTME: Utility modules for mcpadd
# ABOUTME: Exports validation, backup, env file, executable and clipboard helpers

from mcpadd.utils.backup import create_backup, list_backups
from mcpadd.utils.clipboard import ClipboardError, copy_to_clipboard, read_from_clipboard
from mcpadd.utils.env import read_env_file
from mcpadd.utils.executables import find_executable, find_node_executable
from mcpadd.utils.validation import (
    check_executable,
    shell_escape,
    validate_command_exists,
    validate_scope,
    validate_server_name,
    validate_transport,
    validate_url,
)

__all__ = [
    "validate_server_name",
    "validate_scope",
    "validate_transport",
    "validate_url",
    "validate_command_exists",
    "check_executable",
    "shell_escape",
    "create_backup",
    "list_backups",
    "read_env_file",
    "find_executable",
    "find_node_executable",
    "ClipboardError",
    "copy_to_clipboard",
    "read_from_clipboard",
]
