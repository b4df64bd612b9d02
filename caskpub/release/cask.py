"""Homebrew cask synchronization.

The cask is edited as text. Three fields are addressed by line-anchored
patterns and must all be present; a cask whose shape has drifted is rejected
instead of being partially updated::

    version "2.3.1"
    sha256 "<64 hex chars>"
    url "https://github.com/<repo>/releases/download/v#{version}/App_#{version}_universal.dmg"

``version`` and ``sha256`` are rewritten; ``url`` is only validated.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from caskpub.core.config import ReleaseSettings
from caskpub.core.result import Err, Ok, Result
from caskpub.output.console import ConsoleProtocol
from caskpub.platform.files import atomic_write_text
from caskpub.release.errors import (
    CaskError,
    FilesystemError,
    ManifestFormatError,
    ManifestMismatchError,
    MissingArtifactError,
)
from caskpub.release.options import PublishOptions
from caskpub.release.steps import Executed, Skipped, StepOutcome

FieldName = Literal["version", "sha256", "url"]


@dataclass(frozen=True, slots=True)
class FieldMatch:
    name: FieldName
    value: str
    line: str


@dataclass(frozen=True, slots=True)
class CaskField:
    """One addressable cask field.

    ``pattern`` has three groups: the text before the value, the value, and
    the closing quote.
    """

    name: FieldName
    pattern: re.Pattern[str]

    def find(self, text: str) -> Result[FieldMatch, ManifestFormatError]:
        m = self.pattern.search(text)
        if m is None:
            return Err(
                ManifestFormatError(
                    f"Failed to find {self.name} in cask file",
                    field=self.name,
                )
            )
        return Ok(FieldMatch(name=self.name, value=m.group(2), line=m.group(0).strip()))

    def replace(self, text: str, value: str) -> str:
        """Substitute the first occurrence's value."""
        return self.pattern.sub(lambda m: f"{m.group(1)}{value}{m.group(3)}", text, count=1)


VERSION_FIELD = CaskField("version", re.compile(r'^(\s*version\s+")([^"]+)(")', re.MULTILINE))
SHA256_FIELD = CaskField("sha256", re.compile(r'^(\s*sha256\s+")([0-9a-fA-F]+)(")', re.MULTILINE))
URL_FIELD = CaskField("url", re.compile(r'^(\s*url\s+")([^"]+)(")', re.MULTILINE))

CASK_SCHEMA: tuple[CaskField, ...] = (VERSION_FIELD, SHA256_FIELD, URL_FIELD)


@dataclass(frozen=True, slots=True)
class CaskFields:
    version: FieldMatch
    sha256: FieldMatch
    url: FieldMatch


@dataclass(frozen=True, slots=True)
class CaskUpdate:
    path: Path
    before: CaskFields
    after: CaskFields
    changed: bool
    written: bool


def parse_cask(text: str) -> Result[CaskFields, ManifestFormatError]:
    found: dict[FieldName, FieldMatch] = {}
    for cask_field in CASK_SCHEMA:
        m = cask_field.find(text)
        if isinstance(m, Err):
            return m
        found[cask_field.name] = m.value
    return Ok(CaskFields(version=found["version"], sha256=found["sha256"], url=found["url"]))


def render_cask(text: str, *, version: str, digest: str) -> str:
    updated = VERSION_FIELD.replace(text, version)
    return SHA256_FIELD.replace(updated, digest)


def update_cask(
    path: Path,
    *,
    version: str,
    digest: str,
    qualifier: str,
    dry_run: bool,
    console: ConsoleProtocol,
) -> Result[CaskUpdate, CaskError]:
    """Rewrite version/sha256 in the cask at ``path``.

    Writes only when the content actually changes; under dry-run prints a
    before/after preview of the two lines instead.
    """
    if not path.is_file():
        return Err(MissingArtifactError(f"Cask file not found: {path}"))

    try:
        # Bytes in, bytes out: keep the original line endings untouched.
        original = path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return Err(FilesystemError(f"failed to read cask file: {e}", hint=str(path)))

    before = parse_cask(original)
    if isinstance(before, Err):
        return before

    if qualifier not in before.value.url.value:
        return Err(
            ManifestMismatchError(
                f"Cask url does not point to a {qualifier} asset",
                url=before.value.url.value,
            )
        )

    updated = render_cask(original, version=version, digest=digest)
    after = parse_cask(updated)
    if isinstance(after, Err):
        return after

    if updated == original:
        console.success("cask file already matches target version/sha256")
        return Ok(
            CaskUpdate(
                path=path, before=before.value, after=after.value, changed=False, written=False
            )
        )

    if dry_run:
        console.print("[dry-run] cask changes preview:")
        console.print(f"- {before.value.version.line}")
        console.print(f"+ {after.value.version.line}")
        console.print(f"- {before.value.sha256.line}")
        console.print(f"+ {after.value.sha256.line}")
        return Ok(
            CaskUpdate(
                path=path, before=before.value, after=after.value, changed=True, written=False
            )
        )

    try:
        atomic_write_text(path, updated)
    except OSError as e:
        return Err(FilesystemError(f"failed to write cask file: {e}", hint=str(path)))

    console.success(f"updated cask: {path}")
    console.success(after.value.version.line)
    console.success(after.value.sha256.line)
    return Ok(
        CaskUpdate(path=path, before=before.value, after=after.value, changed=True, written=True)
    )


def sync_cask(
    root: Path,
    *,
    options: PublishOptions,
    version: str,
    digest: str,
    settings: ReleaseSettings,
    console: ConsoleProtocol,
) -> Result[StepOutcome, CaskError]:
    if options.skip_cask:
        console.skip("cask update")
        return Ok(Skipped(step="cask", reason="--skip-cask"))

    cask_path = (root / options.cask_path).resolve()
    if not cask_path.is_file():
        return Err(MissingArtifactError(f"Cask file not found: {cask_path}"))

    console.header("Update Homebrew Cask")
    result = update_cask(
        cask_path,
        version=version,
        digest=digest,
        qualifier=settings.qualifier,
        dry_run=options.dry_run,
        console=console,
    )
    if isinstance(result, Err):
        return result

    update = result.value
    if not update.changed:
        detail = f"{options.cask_path} already up to date"
    elif update.written:
        detail = f"{options.cask_path} -> {update.after.version.value}"
    else:
        detail = f"{options.cask_path} would change to {update.after.version.value}"
    return Ok(Executed(step="cask", detail=detail, dry_run=options.dry_run))
