from __future__ import annotations

from caskpub.core.config import ReleaseSettings
from caskpub.core.result import Err, Ok, Result
from caskpub.output.console import ConsoleProtocol
from caskpub.platform.process import CommandRunner, ExecutionError
from caskpub.release.options import PublishOptions
from caskpub.release.steps import Executed, Skipped, StepOutcome


def build_command(settings: ReleaseSettings) -> list[str]:
    return [*settings.build_command, "build", "--", "--target", settings.target]


def build_universal(
    runner: CommandRunner,
    options: PublishOptions,
    settings: ReleaseSettings,
    console: ConsoleProtocol,
) -> Result[StepOutcome, ExecutionError]:
    """Run the Tauri universal build unless ``--skip-build``."""
    if options.skip_build:
        console.skip("universal build")
        return Ok(Skipped(step="build", reason="--skip-build"))

    console.header("Build Universal DMG")
    result = runner.run(build_command(settings))
    if isinstance(result, Err):
        return result
    return Ok(Executed(step="build", detail=f"target {settings.target}", dry_run=runner.dry_run))
