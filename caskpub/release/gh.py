"""GitHub Release create-or-upload through the ``gh`` CLI.

One release per tag, two states: absent (``gh release view`` exits non-zero)
or present (exit 0). The state is queried fresh on every run:

- absent  -> ``gh release create <tag> <asset> ...``
- present -> ``gh release upload <tag> <asset> --clobber``
"""

from __future__ import annotations

from pathlib import Path

from caskpub.core.config import ReleaseSettings
from caskpub.core.result import Err, Ok, Result
from caskpub.output.console import ConsoleProtocol
from caskpub.platform.process import CommandRunner
from caskpub.release.artifact import StagedArtifact, ensure_file_exists
from caskpub.release.errors import (
    ConfigurationError,
    MissingArtifactError,
    PrerequisiteError,
    PublishError,
)
from caskpub.release.options import PublishOptions
from caskpub.release.steps import Executed, Skipped, StepOutcome

GhError = MissingArtifactError | PrerequisiteError | PublishError

_NOT_FOUND_MARKERS = (
    "release not found",
    "http 404",
)

# Output that means `gh release view` failed for a reason other than the
# release being absent. Treating these as "absent" would attempt a create.
_HARD_FAILURE_MARKERS = (
    "gh auth login",
    "authentication required",
    "bad credentials",
    "http 401",
    "http 403",
    "rate limit",
    "http 429",
    "http 500",
    "http 502",
    "http 503",
    "http 504",
    "timed out",
    "timeout",
    "connection reset",
    "connection refused",
    "could not resolve host",
    "network is unreachable",
    "no such host",
)


def _is_hard_view_failure(text: str) -> bool:
    lowered = text.lower()
    if any(marker in lowered for marker in _NOT_FOUND_MARKERS):
        return False
    return any(marker in lowered for marker in _HARD_FAILURE_MARKERS)


def ensure_gh_ready(
    runner: CommandRunner,
    settings: ReleaseSettings,
    console: ConsoleProtocol,
) -> Result[None, PrerequisiteError]:
    """``gh --version`` and ``gh auth status`` must both succeed."""
    console.header("Check GitHub CLI")

    version = runner.run([settings.gh, "--version"], capture_output=True, allow_failure=True)
    if isinstance(version, Err) or not version.value.ok:
        return Err(
            PrerequisiteError(
                f"{settings.gh}: missing",
                hint="Install GitHub CLI: https://cli.github.com/",
            )
        )
    if version.value.stdout:
        console.print(version.value.stdout.splitlines()[0])

    auth = runner.run([settings.gh, "auth", "status"], capture_output=True, allow_failure=True)
    if isinstance(auth, Err) or not auth.value.ok:
        detail = auth.value.output if isinstance(auth, Ok) else None
        return Err(
            PrerequisiteError(
                f"{settings.gh} auth required",
                hint=detail or "Run: gh auth login",
            )
        )
    return Ok(None)


def release_exists(
    runner: CommandRunner,
    *,
    tag: str,
    repo: str,
    settings: ReleaseSettings,
    console: ConsoleProtocol,
) -> Result[bool, PublishError]:
    result = runner.run(
        [settings.gh, "release", "view", tag, "--repo", repo],
        capture_output=True,
        allow_failure=True,
    )
    if isinstance(result, Err):
        # allow_failure=True never yields Err; keep the type checker honest.
        return Err(PublishError(result.error.message))

    view = result.value
    if view.dry_run:
        console.info("[dry-run] release existence check skipped, assuming absent")
        return Ok(False)
    if view.ok:
        return Ok(True)

    combined = view.output
    if view.returncode == -1 or _is_hard_view_failure(combined):
        return Err(
            PublishError(
                f"gh release view {tag} failed (exit={view.returncode})",
                hint=combined or None,
            )
        )
    if combined:
        console.info(f"gh release view returned non-zero: {combined}")
    return Ok(False)


def create_command(
    *,
    tag: str,
    repo: str,
    asset: Path,
    options: PublishOptions,
    root: Path,
    settings: ReleaseSettings,
) -> list[str]:
    cmd = [settings.gh, "release", "create", tag, str(asset), "--repo", repo, "--title", tag]
    if options.draft:
        cmd.append("--draft")
    if options.notes_file is not None:
        cmd += ["--notes-file", str((root / options.notes_file).resolve())]
    elif options.generate_notes:
        cmd.append("--generate-notes")
    else:
        cmd += ["--notes", f"Release {tag}"]
    return cmd


def upload_command(*, tag: str, repo: str, asset: Path, settings: ReleaseSettings) -> list[str]:
    return [settings.gh, "release", "upload", tag, str(asset), "--repo", repo, "--clobber"]


def create_release(
    runner: CommandRunner,
    *,
    tag: str,
    repo: str,
    asset: Path,
    options: PublishOptions,
    root: Path,
    settings: ReleaseSettings,
) -> Result[None, PublishError]:
    cmd = create_command(
        tag=tag,
        repo=repo,
        asset=asset,
        options=options,
        root=root,
        settings=settings,
    )
    result = runner.run(cmd)
    if isinstance(result, Err):
        return Err(PublishError(f"gh release create failed: {result.error.message}"))
    return Ok(None)


def upload_asset(
    runner: CommandRunner,
    *,
    tag: str,
    repo: str,
    asset: Path,
    settings: ReleaseSettings,
) -> Result[None, PublishError]:
    result = runner.run(upload_command(tag=tag, repo=repo, asset=asset, settings=settings))
    if isinstance(result, Err):
        return Err(PublishError(f"gh release upload failed: {result.error.message}"))
    return Ok(None)


def check_notes_file(root: Path, options: PublishOptions) -> Result[None, ConfigurationError]:
    if options.notes_file is None:
        return Ok(None)
    path = (root / options.notes_file).resolve()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigurationError(f"failed to read --notes-file: {e}", hint=str(path)))
    if not text.strip():
        return Err(ConfigurationError("--notes-file is empty", hint=str(path)))
    return Ok(None)


def publish_release(
    runner: CommandRunner,
    *,
    tag: str,
    staged: StagedArtifact,
    options: PublishOptions,
    root: Path,
    settings: ReleaseSettings,
    console: ConsoleProtocol,
) -> Result[StepOutcome, GhError]:
    """Create the release with the asset attached, or replace the asset."""
    if options.skip_gh:
        console.skip("GitHub Release upload")
        return Ok(Skipped(step="gh", reason="--skip-gh"))

    if not options.dry_run:
        present = ensure_file_exists(staged.path, "Staged DMG")
        if isinstance(present, Err):
            return present

    ready = ensure_gh_ready(runner, settings, console)
    if isinstance(ready, Err):
        return ready

    console.header("GitHub Release Upload")
    exists = release_exists(runner, tag=tag, repo=options.repo, settings=settings, console=console)
    if isinstance(exists, Err):
        return exists

    if not exists.value:
        created = create_release(
            runner,
            tag=tag,
            repo=options.repo,
            asset=staged.path,
            options=options,
            root=root,
            settings=settings,
        )
        if isinstance(created, Err):
            return created
        detail = f"created {'draft ' if options.draft else ''}release {tag} on {options.repo}"
        return Ok(Executed(step="gh", detail=detail, dry_run=options.dry_run))

    uploaded = upload_asset(
        runner, tag=tag, repo=options.repo, asset=staged.path, settings=settings
    )
    if isinstance(uploaded, Err):
        return uploaded
    return Ok(
        Executed(
            step="gh",
            detail=f"uploaded {staged.name} to {tag} on {options.repo}",
            dry_run=options.dry_run,
        )
    )
