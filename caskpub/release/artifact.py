"""Locate the built DMG, stage it under its release name and hash it.

Layout (defaults from ``release.toml``)::

    src-tauri/target/<target>/release/bundle/dmg/<ProductName>_<version>_universal.dmg
        -> release-artifacts/<AssetPrefix>_<version>_universal.dmg
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from caskpub.core.config import ReleaseSettings
from caskpub.core.result import Err, Ok, Result
from caskpub.output.console import ConsoleProtocol, Style
from caskpub.platform.files import same_path, sha256_file
from caskpub.release.errors import FilesystemError, MissingArtifactError
from caskpub.release.options import PublishOptions

ArtifactRole = Literal["source", "staged"]
StageError = FilesystemError | MissingArtifactError


@dataclass(frozen=True, slots=True)
class ArtifactReference:
    path: Path
    role: ArtifactRole


@dataclass(frozen=True, slots=True)
class StagedArtifact:
    path: Path
    name: str
    # False under dry-run: the path is where the copy would go.
    exists: bool


def default_build_output(root: Path, version: str, settings: ReleaseSettings) -> Path:
    return (
        root
        / "src-tauri"
        / "target"
        / settings.target
        / "release"
        / "bundle"
        / "dmg"
        / settings.build_output_name(version)
    )


def ensure_file_exists(path: Path, label: str) -> Result[None, MissingArtifactError]:
    if not path.is_file():
        return Err(MissingArtifactError(f"{label} not found: {path}"))
    return Ok(None)


def resolve_source(
    root: Path,
    options: PublishOptions,
    version: str,
    settings: ReleaseSettings,
) -> Result[ArtifactReference, MissingArtifactError]:
    """Path of the DMG to publish: ``--asset-path`` or the default build output."""
    if options.asset_path is not None:
        custom = (root / options.asset_path).resolve()
        checked = ensure_file_exists(custom, "Asset")
        if isinstance(checked, Err):
            return checked
        return Ok(ArtifactReference(path=custom, role="source"))

    default = default_build_output(root, version, settings)
    checked = ensure_file_exists(default, "Universal DMG")
    if isinstance(checked, Err):
        return Err(
            MissingArtifactError(
                checked.error.message,
                hint="Build first or pass --asset-path <path>",
            )
        )
    return Ok(ArtifactReference(path=default, role="source"))


def stage(
    root: Path,
    source: ArtifactReference,
    version: str,
    settings: ReleaseSettings,
    *,
    dry_run: bool,
    console: ConsoleProtocol,
) -> Result[StagedArtifact, StageError]:
    """Copy the source DMG to the artifacts dir under its release name.

    Under dry-run nothing is created or copied; the would-be path is still
    returned for logging.
    """
    artifacts_dir = (root / settings.artifacts_dir).resolve()
    staged_name = settings.staged_name(version)
    staged_path = artifacts_dir / staged_name

    console.header("Stage Release Asset")
    console.print(f"source: {source.path}")
    console.print(f"staged: {staged_path}")

    if dry_run:
        console.print("[dry-run] skipped copy", Style.DIM)
        return Ok(StagedArtifact(path=staged_path, name=staged_name, exists=False))

    try:
        artifacts_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        return Err(FilesystemError(f"failed to create {artifacts_dir}: {e}"))

    if not same_path(source.path, staged_path):
        try:
            shutil.copyfile(source.path, staged_path)
        except OSError as e:
            return Err(FilesystemError(f"failed to copy {source.path} -> {staged_path}: {e}"))

    if not staged_path.is_file():
        return Err(FilesystemError(f"Staged DMG not found: {staged_path}"))
    return Ok(StagedArtifact(path=staged_path, name=staged_name, exists=True))


def digest(artifact: ArtifactReference) -> Result[str, StageError]:
    """sha256 of the referenced file as lowercase hex."""
    checked = ensure_file_exists(artifact.path, "Artifact")
    if isinstance(checked, Err):
        return checked
    try:
        return Ok(sha256_file(artifact.path))
    except OSError as e:
        return Err(FilesystemError(f"failed to read {artifact.path}: {e}"))
