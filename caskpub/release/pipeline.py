"""Release pipeline: build -> resolve -> stage -> sha256 -> gh release -> cask.

Stages run strictly in order and the first ``Err`` aborts the run. Each
stage consumes the previous stage's output (resolved path, staged path,
digest) rather than recomputing it. The version files and the notes file
are checked before anything is built or copied.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from caskpub.core.config import ReleaseSettings
from caskpub.core.result import Err, Ok, Result
from caskpub.output.console import ConsoleProtocol
from caskpub.platform.process import CommandRunner
from caskpub.release.artifact import (
    ArtifactReference,
    StagedArtifact,
    digest,
    resolve_source,
    stage,
)
from caskpub.release.build import build_universal
from caskpub.release.cask import sync_cask
from caskpub.release.errors import PipelineError
from caskpub.release.gh import check_notes_file, publish_release
from caskpub.release.options import PublishOptions
from caskpub.release.steps import Executed, StepOutcome
from caskpub.release.version import read_release_version


@dataclass(frozen=True, slots=True)
class PipelineReport:
    version: str
    tag: str
    repo: str
    dry_run: bool
    source: ArtifactReference
    staged: StagedArtifact
    sha256: str
    outcomes: tuple[StepOutcome, ...]


def _print_banner(
    console: ConsoleProtocol,
    *,
    settings: ReleaseSettings,
    version: str,
    tag: str,
    options: PublishOptions,
) -> None:
    console.print(f"{settings.product_name} GitHub Release + Homebrew cask publisher")
    console.print(f"version: {version}")
    console.print(f"tag: {tag}")
    console.print(f"repo: {options.repo}")
    console.print(f"dry-run: {'yes' if options.dry_run else 'no'}")


def run_pipeline(
    root: Path,
    *,
    options: PublishOptions,
    settings: ReleaseSettings,
    runner: CommandRunner,
    console: ConsoleProtocol,
) -> Result[PipelineReport, PipelineError]:
    version = read_release_version(root)
    if isinstance(version, Err):
        return version
    release_version = version.value
    tag = options.release_tag(release_version)

    if not options.skip_gh:
        notes = check_notes_file(root, options)
        if isinstance(notes, Err):
            return notes

    _print_banner(console, settings=settings, version=release_version, tag=tag, options=options)

    outcomes: list[StepOutcome] = []

    built = build_universal(runner, options, settings, console)
    if isinstance(built, Err):
        return built
    outcomes.append(built.value)

    console.header("Resolve Universal DMG")
    source = resolve_source(root, options, release_version, settings)
    if isinstance(source, Err):
        return source
    console.print(f"asset: {source.value.path}")

    staged = stage(
        root,
        source.value,
        release_version,
        settings,
        dry_run=options.dry_run,
        console=console,
    )
    if isinstance(staged, Err):
        return staged
    outcomes.append(Executed(step="stage", detail=staged.value.name, dry_run=options.dry_run))

    console.header("Compute SHA256")
    # Under dry-run the staged copy does not exist; hash the source instead.
    hashed = (
        source.value
        if options.dry_run
        else ArtifactReference(path=staged.value.path, role="staged")
    )
    sha = digest(hashed)
    if isinstance(sha, Err):
        return sha
    console.print(f"sha256: {sha.value}")
    outcomes.append(Executed(step="digest", detail=f"sha256 {sha.value}", dry_run=False))

    published = publish_release(
        runner,
        tag=tag,
        staged=staged.value,
        options=options,
        root=root,
        settings=settings,
        console=console,
    )
    if isinstance(published, Err):
        return published
    outcomes.append(published.value)

    cask = sync_cask(
        root,
        options=options,
        version=release_version,
        digest=sha.value,
        settings=settings,
        console=console,
    )
    if isinstance(cask, Err):
        return cask
    outcomes.append(cask.value)

    return Ok(
        PipelineReport(
            version=release_version,
            tag=tag,
            repo=options.repo,
            dry_run=options.dry_run,
            source=source.value,
            staged=staged.value,
            sha256=sha.value,
            outcomes=tuple(outcomes),
        )
    )
