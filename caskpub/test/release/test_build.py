from __future__ import annotations

from pathlib import Path

from caskpub.core.config import ReleaseSettings
from caskpub.core.result import Err, Ok
from caskpub.output.console import MockConsole
from caskpub.platform.process import ExecutionError
from caskpub.release.build import build_command, build_universal
from caskpub.release.options import PublishOptions
from caskpub.release.steps import Executed, Skipped
from caskpub.test._fixtures import FakeProcesses, RunnerFactory

_BUILD = ("npm", "run", "tauri", "build")


def _options(**overrides: bool) -> PublishOptions:
    return PublishOptions(repo="owner/app", cask_path=Path("Casks/app.rb"), **overrides)


def test_build_command_targets_universal() -> None:
    assert build_command(ReleaseSettings()) == [
        "npm",
        "run",
        "tauri",
        "build",
        "--",
        "--target",
        "universal-apple-darwin",
    ]


def test_build_command_uses_configured_prefix() -> None:
    settings = ReleaseSettings(build_command=("pnpm", "tauri"), target="aarch64-apple-darwin")

    assert build_command(settings) == [
        "pnpm",
        "tauri",
        "build",
        "--",
        "--target",
        "aarch64-apple-darwin",
    ]


def test_runs_build(
    fake_processes: FakeProcesses, make_runner: RunnerFactory, console: MockConsole
) -> None:
    result = build_universal(make_runner(), _options(), ReleaseSettings(), console)

    assert isinstance(result, Ok)
    assert isinstance(result.value, Executed)
    assert len(fake_processes.commands(*_BUILD)) == 1


def test_skip_build_spawns_nothing(
    fake_processes: FakeProcesses, make_runner: RunnerFactory, console: MockConsole
) -> None:
    result = build_universal(make_runner(), _options(skip_build=True), ReleaseSettings(), console)

    assert result == Ok(Skipped(step="build", reason="--skip-build"))
    assert fake_processes.calls == []
    assert console.find("[skip] universal build")


def test_build_failure_is_execution_error(
    fake_processes: FakeProcesses, make_runner: RunnerFactory, console: MockConsole
) -> None:
    fake_processes.respond(*_BUILD, returncode=1)

    result = build_universal(make_runner(), _options(), ReleaseSettings(), console)

    assert isinstance(result, Err)
    assert isinstance(result.error, ExecutionError)
    assert result.error.returncode == 1


def test_missing_toolchain_is_execution_error(
    fake_processes: FakeProcesses, make_runner: RunnerFactory, console: MockConsole
) -> None:
    fake_processes.missing.add("npm")

    result = build_universal(make_runner(), _options(), ReleaseSettings(), console)

    assert isinstance(result, Err)
    assert result.error.returncode == -1
    assert result.error.message.startswith("Failed to start")
