from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from caskpub.core.config import ReleaseSettings
from caskpub.core.result import Err, Ok, Result
from caskpub.release.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class PublishOptions:
    """Resolved flags for one publish run.

    Paths are kept as given; stages resolve them against the project root.
    """

    repo: str
    cask_path: Path
    skip_build: bool = False
    skip_gh: bool = False
    skip_cask: bool = False
    dry_run: bool = False
    draft: bool = False
    generate_notes: bool = False
    notes_file: Path | None = None
    tag: str | None = None
    asset_path: Path | None = None

    def release_tag(self, version: str) -> str:
        return self.tag or f"v{version}"


def _value(flag: str, raw: str | None) -> Result[str | None, ConfigurationError]:
    if raw is None:
        return Ok(None)
    if not raw.strip():
        return Err(ConfigurationError(f"Missing value for {flag}"))
    return Ok(raw.strip())


def _is_repo_slug(value: str) -> bool:
    owner, sep, name = value.partition("/")
    return bool(sep) and bool(owner) and bool(name) and "/" not in name


def resolve_options(
    *,
    settings: ReleaseSettings,
    skip_build: bool = False,
    skip_gh: bool = False,
    skip_cask: bool = False,
    dry_run: bool = False,
    draft: bool = False,
    generate_notes: bool = False,
    notes_file: str | None = None,
    tag: str | None = None,
    repo: str | None = None,
    cask: str | None = None,
    asset_path: str | None = None,
) -> Result[PublishOptions, ConfigurationError]:
    """Validate raw flag values into ``PublishOptions``.

    ``--repo`` and ``--cask`` fall back to ``release.toml`` settings. No
    filesystem access happens here.
    """
    values: dict[str, str | None] = {}
    for flag, raw in (
        ("--notes-file", notes_file),
        ("--tag", tag),
        ("--repo", repo),
        ("--cask", cask),
        ("--asset-path", asset_path),
    ):
        checked = _value(flag, raw)
        if isinstance(checked, Err):
            return checked
        values[flag] = checked.value

    if values["--notes-file"] is not None and generate_notes:
        return Err(ConfigurationError("Use either --notes-file or --generate-notes, not both."))

    repo_slug = values["--repo"] or settings.repo
    if not _is_repo_slug(repo_slug):
        return Err(
            ConfigurationError(
                f"Invalid --repo: {repo_slug}",
                hint="Expected owner/repo",
            )
        )

    notes_path = values["--notes-file"]
    asset = values["--asset-path"]
    return Ok(
        PublishOptions(
            repo=repo_slug,
            cask_path=Path(values["--cask"] or settings.cask),
            skip_build=skip_build,
            skip_gh=skip_gh,
            skip_cask=skip_cask,
            dry_run=dry_run,
            draft=draft,
            generate_notes=generate_notes,
            notes_file=Path(notes_path) if notes_path is not None else None,
            tag=values["--tag"],
            asset_path=Path(asset) if asset is not None else None,
        )
    )
