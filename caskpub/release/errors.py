from __future__ import annotations

from dataclasses import dataclass

from caskpub.platform.process import ExecutionError

__all__ = [
    "CaskError",
    "ConfigurationError",
    "ExecutionError",
    "FilesystemError",
    "ManifestFormatError",
    "ManifestMismatchError",
    "MissingArtifactError",
    "PipelineError",
    "PrerequisiteError",
    "PublishError",
]


@dataclass(frozen=True, slots=True)
class ConfigurationError:
    """Bad CLI input or project metadata, detected before any side effect."""

    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class PrerequisiteError:
    """gh CLI missing or not authenticated."""

    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class MissingArtifactError:
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class FilesystemError:
    """Read, write, copy or mkdir failure."""

    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class PublishError:
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class ManifestFormatError:
    """A required cask field could not be located."""

    message: str
    field: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class ManifestMismatchError:
    """The cask url points at a different artifact variant."""

    message: str
    url: str
    hint: str | None = None


CaskError = MissingArtifactError | FilesystemError | ManifestFormatError | ManifestMismatchError

PipelineError = (
    ConfigurationError
    | PrerequisiteError
    | MissingArtifactError
    | FilesystemError
    | ExecutionError
    | PublishError
    | ManifestFormatError
    | ManifestMismatchError
)
