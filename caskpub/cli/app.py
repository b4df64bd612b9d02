from __future__ import annotations

import os
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import NoReturn

import click
import typer

from caskpub import __version__
from caskpub.core.config import load_settings
from caskpub.core.errors import ErrorCode
from caskpub.core.result import Err
from caskpub.output.console import ConsoleProtocol, RichConsole, Style
from caskpub.output.errors import pipeline_error_exit_code, print_pipeline_error
from caskpub.platform.process import CommandRunner, frozen_env
from caskpub.release.errors import ConfigurationError, PipelineError
from caskpub.release.options import resolve_options
from caskpub.release.pipeline import PipelineReport, run_pipeline
from caskpub.release.steps import describe

app = typer.Typer(
    add_completion=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _fail(error: PipelineError, console: ConsoleProtocol) -> NoReturn:
    console.newline()
    print_pipeline_error(error, console)
    raise typer.Exit(code=pipeline_error_exit_code(error))


def _print_summary(report: PipelineReport, console: ConsoleProtocol, *, cask: Path) -> None:
    console.header("Done")
    for outcome in report.outcomes:
        console.print(f"- {describe(outcome)}")

    if report.dry_run:
        console.print("Dry run: nothing was built, copied, uploaded or written.", Style.DIM)
        return

    console.print("Next steps:")
    console.print(f"- review the cask diff: git diff -- {cask}")
    console.print("- commit and push the cask update (after the release asset is uploaded)")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=int(ErrorCode.OK))


@app.command()
def publish(
    skip_build: bool = typer.Option(False, "--skip-build", help="Skip Tauri universal build step"),
    skip_gh: bool = typer.Option(
        False, "--skip-gh", help="Skip GitHub Release create/upload step"
    ),
    skip_cask: bool = typer.Option(False, "--skip-cask", help="Skip cask file update step"),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print planned actions without writing/uploading"
    ),
    draft: bool = typer.Option(
        False, "--draft", help="Create release as draft when release does not exist"
    ),
    generate_notes: bool = typer.Option(
        False,
        "--generate-notes",
        help="Use GitHub generated release notes when creating release",
    ),
    notes_file: str | None = typer.Option(
        None, "--notes-file", metavar="<path>", help="Pass release notes file to gh release create"
    ),
    tag: str | None = typer.Option(
        None,
        "--tag",
        metavar="<tag>",
        help="Override release tag (default: v<package.json version>)",
    ),
    repo: str | None = typer.Option(
        None,
        "--repo",
        metavar="<owner/repo>",
        help="GitHub repo for release (default: release.toml)",
    ),
    cask: str | None = typer.Option(
        None, "--cask", metavar="<path>", help="Homebrew cask file path (default: release.toml)"
    ),
    asset_path: str | None = typer.Option(
        None,
        "--asset-path",
        metavar="<path>",
        help="Use an existing universal .dmg instead of default output path",
    ),
    root: Path = typer.Option(
        Path("."), "--root", metavar="<dir>", help="Project root (default: current directory)"
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Build universal DMG, upload it to GitHub Release, and update Homebrew cask."""
    del version
    console = RichConsole()
    err_console = RichConsole(stderr=True)

    try:
        project_root = root.expanduser().resolve()
    except OSError as e:
        _fail(ConfigurationError(f"invalid --root: {e}"), err_console)
    if not project_root.is_dir():
        _fail(ConfigurationError(f"invalid --root: {project_root} is not a directory"), err_console)

    settings = load_settings(project_root)
    if isinstance(settings, Err):
        hint = str(settings.error.path) if settings.error.path else None
        _fail(ConfigurationError(settings.error.message, hint=hint), err_console)

    options = resolve_options(
        settings=settings.value,
        skip_build=skip_build,
        skip_gh=skip_gh,
        skip_cask=skip_cask,
        dry_run=dry_run,
        draft=draft,
        generate_notes=generate_notes,
        notes_file=notes_file,
        tag=tag,
        repo=repo,
        cask=cask,
        asset_path=asset_path,
    )
    if isinstance(options, Err):
        _fail(options.error, err_console)

    runner = CommandRunner(
        cwd=project_root,
        env=frozen_env(os.environ),
        console=console,
        dry_run=options.value.dry_run,
    )
    result = run_pipeline(
        project_root,
        options=options.value,
        settings=settings.value,
        runner=runner,
        console=console,
    )
    if isinstance(result, Err):
        _fail(result.error, err_console)

    _print_summary(result.value, console, cask=options.value.cask_path)


_HELP_FLAGS = frozenset({"-h", "--help"})


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return the process exit status.

    Help wins over everything else on the command line, including a token
    that would otherwise be consumed as a flag value. Usage errors (unknown
    flag, missing value) are reported as ``[ERROR]`` lines with exit 1.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    if any(arg in _HELP_FLAGS for arg in args):
        args = ["--help"]

    try:
        result = app(args=args, prog_name="caskpub", standalone_mode=False)
    except click.exceptions.ClickException as e:
        print_pipeline_error(ConfigurationError(e.format_message()), RichConsole(stderr=True))
        return int(ErrorCode.USER_ERROR)
    except click.exceptions.Abort:
        RichConsole(stderr=True).error("Aborted.")
        return int(ErrorCode.USER_ERROR)
    return result if isinstance(result, int) else int(ErrorCode.OK)
