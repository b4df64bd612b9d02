"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from caskpub.core.errors import ErrorCode
from caskpub.output.console import Style
from caskpub.release.errors import (
    ConfigurationError,
    ExecutionError,
    FilesystemError,
    ManifestFormatError,
    ManifestMismatchError,
    MissingArtifactError,
    PipelineError,
    PrerequisiteError,
    PublishError,
)

if TYPE_CHECKING:
    from caskpub.output.console import ConsoleProtocol

__all__ = ["print_pipeline_error", "pipeline_error_exit_code"]


def print_pipeline_error(error: PipelineError, console: ConsoleProtocol) -> None:
    """``[ERROR] <message>`` plus a dimmed hint line when there is one."""
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def pipeline_error_exit_code(error: PipelineError) -> int:
    match error:
        case ConfigurationError() | ManifestFormatError() | ManifestMismatchError():
            return int(ErrorCode.USER_ERROR)
        case PrerequisiteError():
            return int(ErrorCode.ENV_ERROR)
        case ExecutionError():
            return int(ErrorCode.BUILD_ERROR)
        case PublishError():
            return int(ErrorCode.NETWORK_ERROR)
        case MissingArtifactError() | FilesystemError():
            return int(ErrorCode.IO_ERROR)
    # Fallback for exhaustiveness
    return int(ErrorCode.USER_ERROR)
