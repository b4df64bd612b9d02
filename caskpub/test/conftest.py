from __future__ import annotations

import json
from pathlib import Path

import pytest

from caskpub.core.config import ReleaseSettings
from caskpub.output.console import MockConsole
from caskpub.platform.process import CommandRunner, frozen_env
from caskpub.test._fixtures import (
    CASK_TEXT,
    DMG_BYTES,
    RELEASE_TOML,
    FakeProcesses,
    Project,
    RunnerFactory,
)


@pytest.fixture
def fake_processes(monkeypatch: pytest.MonkeyPatch) -> FakeProcesses:
    import caskpub.platform.process as process_mod

    fake = FakeProcesses()
    monkeypatch.setattr(process_mod.subprocess, "run", fake)
    return fake


@pytest.fixture
def console() -> MockConsole:
    return MockConsole()


@pytest.fixture
def make_runner(tmp_path: Path, console: MockConsole) -> RunnerFactory:
    def factory(*, dry_run: bool = False, cwd: Path | None = None) -> CommandRunner:
        return CommandRunner(
            cwd=cwd or tmp_path,
            env=frozen_env({"PATH": "/usr/bin:/bin"}),
            console=console,
            dry_run=dry_run,
        )

    return factory


@pytest.fixture
def project(tmp_path: Path) -> Project:
    """A Tauri project at version 2.3.1 with a built DMG and a 2.3.0 cask."""
    root = tmp_path / "app"
    root.mkdir()
    (root / "package.json").write_text(
        json.dumps({"name": "app", "version": "2.3.1"}), encoding="utf-8"
    )
    (root / "release.toml").write_text(RELEASE_TOML, encoding="utf-8")

    dmg_dir = root / "src-tauri" / "target" / "universal-apple-darwin"
    dmg_dir = dmg_dir / "release" / "bundle" / "dmg"
    dmg_dir.mkdir(parents=True)
    dmg = dmg_dir / "App_2.3.1_universal.dmg"
    dmg.write_bytes(DMG_BYTES)

    cask = root / "Casks" / "app.rb"
    cask.parent.mkdir()
    cask.write_text(CASK_TEXT, encoding="utf-8")

    settings = ReleaseSettings(
        repo="owner/app",
        cask="Casks/app.rb",
        product_name="App",
        asset_prefix="Prefix",
    )
    return Project(root=root, dmg=dmg, cask=cask, settings=settings)
