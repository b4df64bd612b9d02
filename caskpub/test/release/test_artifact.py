from __future__ import annotations

import hashlib
from pathlib import Path

import pytest

from caskpub.core.config import ReleaseSettings
from caskpub.core.result import Err, Ok
from caskpub.output.console import MockConsole
from caskpub.release.artifact import (
    ArtifactReference,
    default_build_output,
    digest,
    resolve_source,
    stage,
)
from caskpub.release.errors import FilesystemError, MissingArtifactError
from caskpub.release.options import PublishOptions
from caskpub.test._fixtures import DMG_BYTES, Project


def _options(project: Project, **overrides: object) -> PublishOptions:
    fields: dict[str, object] = {"repo": "owner/app", "cask_path": Path("Casks/app.rb")}
    fields.update(overrides)
    return PublishOptions(**fields)  # type: ignore[arg-type]


def test_default_build_output_layout(tmp_path: Path) -> None:
    settings = ReleaseSettings(product_name="Cockpit Tools")

    path = default_build_output(tmp_path, "1.0.0", settings)

    assert path == (
        tmp_path
        / "src-tauri/target/universal-apple-darwin/release/bundle/dmg"
        / "Cockpit Tools_1.0.0_universal.dmg"
    )


class TestResolveSource:
    def test_default_output(self, project: Project) -> None:
        result = resolve_source(project.root, _options(project), "2.3.1", project.settings)

        assert isinstance(result, Ok)
        assert result.value.path == project.dmg
        assert result.value.role == "source"

    def test_missing_default_output_hints_at_asset_path(self, project: Project) -> None:
        project.dmg.unlink()

        result = resolve_source(project.root, _options(project), "2.3.1", project.settings)

        assert isinstance(result, Err)
        assert isinstance(result.error, MissingArtifactError)
        assert result.error.message.startswith("Universal DMG not found: ")
        assert result.error.hint is not None
        assert "--asset-path" in result.error.hint

    def test_asset_path_relative_to_root(self, project: Project) -> None:
        custom = project.root / "dist" / "Custom.dmg"
        custom.parent.mkdir()
        custom.write_bytes(b"custom")

        options = _options(project, asset_path=Path("dist/Custom.dmg"))
        result = resolve_source(project.root, options, "2.3.1", project.settings)

        assert isinstance(result, Ok)
        assert result.value.path == custom.resolve()

    def test_missing_asset_path(self, project: Project) -> None:
        options = _options(project, asset_path=Path("nope.dmg"))

        result = resolve_source(project.root, options, "2.3.1", project.settings)

        assert isinstance(result, Err)
        assert result.error.message.startswith("Asset not found: ")


class TestStage:
    def test_copies_under_release_name(self, project: Project, console: MockConsole) -> None:
        source = ArtifactReference(path=project.dmg, role="source")

        result = stage(
            project.root,
            source,
            "2.3.1",
            project.settings,
            dry_run=False,
            console=console,
        )

        assert isinstance(result, Ok)
        staged = result.value
        assert staged.name == "Prefix_2.3.1_universal.dmg"
        assert staged.path == project.staged.resolve()
        assert staged.exists
        assert staged.path.read_bytes() == DMG_BYTES

    def test_overwrites_previous_copy(self, project: Project, console: MockConsole) -> None:
        project.staged.parent.mkdir()
        project.staged.write_bytes(b"stale")
        source = ArtifactReference(path=project.dmg, role="source")

        result = stage(
            project.root,
            source,
            "2.3.1",
            project.settings,
            dry_run=False,
            console=console,
        )

        assert isinstance(result, Ok)
        assert project.staged.read_bytes() == DMG_BYTES

    def test_source_already_staged(self, project: Project, console: MockConsole) -> None:
        project.staged.parent.mkdir()
        project.staged.write_bytes(DMG_BYTES)
        source = ArtifactReference(path=project.staged, role="source")

        result = stage(
            project.root,
            source,
            "2.3.1",
            project.settings,
            dry_run=False,
            console=console,
        )

        assert isinstance(result, Ok)
        assert project.staged.read_bytes() == DMG_BYTES

    def test_copy_that_leaves_no_file_is_filesystem_error(
        self, project: Project, console: MockConsole, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        import caskpub.release.artifact as artifact_mod

        def fake_copyfile(src: Path, dst: Path) -> Path:
            del src
            return dst

        monkeypatch.setattr(artifact_mod.shutil, "copyfile", fake_copyfile)
        source = ArtifactReference(path=project.dmg, role="source")

        result = stage(
            project.root,
            source,
            "2.3.1",
            project.settings,
            dry_run=False,
            console=console,
        )

        assert isinstance(result, Err)
        assert isinstance(result.error, FilesystemError)
        assert result.error.message.startswith("Staged DMG not found: ")

    def test_dry_run_touches_nothing(self, project: Project, console: MockConsole) -> None:
        source = ArtifactReference(path=project.dmg, role="source")

        result = stage(
            project.root,
            source,
            "2.3.1",
            project.settings,
            dry_run=True,
            console=console,
        )

        assert isinstance(result, Ok)
        assert not result.value.exists
        assert not project.staged.parent.exists()
        assert console.find("[dry-run] skipped copy")


class TestDigest:
    def test_matches_hashlib(self, project: Project) -> None:
        result = digest(ArtifactReference(path=project.dmg, role="source"))

        assert result == Ok(hashlib.sha256(DMG_BYTES).hexdigest())

    def test_is_deterministic(self, project: Project) -> None:
        ref = ArtifactReference(path=project.dmg, role="source")

        assert digest(ref) == digest(ref)

    def test_single_byte_changes_digest(self, project: Project, tmp_path: Path) -> None:
        other = tmp_path / "other.dmg"
        other.write_bytes(DMG_BYTES[:-1] + b"?")

        a = digest(ArtifactReference(path=project.dmg, role="source"))
        b = digest(ArtifactReference(path=other, role="source"))

        assert isinstance(a, Ok) and isinstance(b, Ok)
        assert a.value != b.value

    def test_missing_file(self, tmp_path: Path) -> None:
        result = digest(ArtifactReference(path=tmp_path / "gone.dmg", role="staged"))

        assert isinstance(result, Err)
        assert isinstance(result.error, MissingArtifactError)
