"""Platform layer: processes and files."""

from .files import atomic_write_text, same_path, sha256_file
from .process import CommandResult, CommandRunner, ExecutionError, format_command, frozen_env

__all__ = [
    "CommandResult",
    "CommandRunner",
    "ExecutionError",
    "atomic_write_text",
    "format_command",
    "frozen_env",
    "same_path",
    "sha256_file",
]
