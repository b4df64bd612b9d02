"""External command execution.

All subprocess calls of the pipeline go through ``CommandRunner.run``:

- the command line and working directory are echoed before anything runs
- dry-run never spawns a process and reports a synthetic success
- a non-zero exit is an ``ExecutionError`` unless the caller passes
  ``allow_failure=True``, in which case the ``CommandResult`` is returned for
  inspection (``gh release view`` uses the exit status as a yes/no answer)

Usage:
    runner = CommandRunner(cwd=root, env=frozen_env(os.environ), console=console)
    match runner.run(["gh", "--version"]):
        case Ok(result):
            ...
        case Err(error):
            console.error(error.message)
"""

from __future__ import annotations

import os
import shutil
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from caskpub.core.result import Err, Ok, Result
from caskpub.output.console import ConsoleProtocol, Style

__all__ = [
    "CommandResult",
    "CommandRunner",
    "ExecutionError",
    "format_command",
    "frozen_env",
]


def format_command(cmd: Sequence[str]) -> str:
    return " ".join(cmd)


def frozen_env(source: Mapping[str, str]) -> Mapping[str, str]:
    """Snapshot an environment into a read-only mapping."""
    return MappingProxyType(dict(source))


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of one command invocation.

    Attributes:
        command: The command that was executed.
        returncode: Exit status (-1 when the program could not be started).
        stdout: Captured standard output (empty unless captured).
        stderr: Captured standard error (empty unless captured).
        dry_run: True when nothing was actually spawned.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """stdout and stderr joined, stripped."""
        return f"{self.stdout}\n{self.stderr}".strip()


@dataclass(frozen=True, slots=True)
class ExecutionError:
    """A command could not be started or exited non-zero."""

    command: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    cause: str | None = None

    @property
    def message(self) -> str:
        if self.cause is not None:
            return f"Failed to start {format_command(self.command)}: {self.cause}"
        return f"Command failed (exit={self.returncode}): {format_command(self.command)}"

    @property
    def hint(self) -> str | None:
        return self.stderr.strip() or None

    def __str__(self) -> str:
        return self.message


class CommandRunner:
    """Runs external programs with an explicit environment.

    The environment is captured once by the caller; the runner never reads
    ``os.environ`` itself.
    """

    def __init__(
        self,
        *,
        cwd: Path,
        env: Mapping[str, str],
        console: ConsoleProtocol,
        dry_run: bool = False,
    ) -> None:
        self._cwd = cwd
        self._env = env
        self._console = console
        self._dry_run = dry_run

    @property
    def cwd(self) -> Path:
        return self._cwd

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    def run(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path | None = None,
        capture_output: bool = False,
        allow_failure: bool = False,
        dry_run: bool | None = None,
    ) -> Result[CommandResult, ExecutionError]:
        """Execute ``cmd``.

        Args:
            cmd: Program and arguments.
            cwd: Working directory (defaults to the runner's).
            capture_output: Capture stdout/stderr instead of streaming them.
            allow_failure: Return non-zero results instead of an error.
            dry_run: Override the runner-wide dry-run flag for this call.

        Returns:
            Ok(CommandResult), or Err(ExecutionError) on spawn failure or a
            non-zero exit that was not allowed.
        """
        command = tuple(cmd)
        workdir = cwd or self._cwd
        skip = self._dry_run if dry_run is None else dry_run

        self._console.print(f"$ {format_command(command)}")
        self._console.print(f"cwd: {workdir}", Style.DIM)

        if skip:
            self._console.print("[dry-run] skipped", Style.DIM)
            return Ok(CommandResult(command=command, returncode=0, dry_run=True))

        argv = [self._resolve_program(command[0]), *command[1:]]
        try:
            proc = subprocess.run(
                argv,
                cwd=str(workdir),
                env=dict(self._env),
                capture_output=capture_output,
                text=True,
                check=False,
            )
        except OSError as e:
            if allow_failure:
                return Ok(CommandResult(command=command, returncode=-1, stderr=str(e)))
            return Err(ExecutionError(command=command, returncode=-1, cause=str(e)))

        result = CommandResult(
            command=command,
            returncode=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )
        if result.returncode != 0 and not allow_failure:
            return Err(
                ExecutionError(
                    command=command,
                    returncode=result.returncode,
                    stdout=result.stdout,
                    stderr=result.stderr,
                )
            )
        return Ok(result)

    def _resolve_program(self, program: str) -> str:
        # Windows needs the full path to find .cmd shims (npm.cmd) without a shell.
        if os.name != "nt":
            return program
        return shutil.which(program, path=self._env.get("PATH")) or program
