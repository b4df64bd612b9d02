from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

StepName = Literal["build", "stage", "digest", "gh", "cask"]

STEP_ORDER: tuple[StepName, ...] = ("build", "stage", "digest", "gh", "cask")


@dataclass(frozen=True, slots=True)
class Skipped:
    """The step was disabled by a flag."""

    step: StepName
    reason: str


@dataclass(frozen=True, slots=True)
class Executed:
    """The step ran (possibly as a dry-run preview).

    ``detail`` is a one-line summary for the final report.
    """

    step: StepName
    detail: str
    dry_run: bool = False


StepOutcome = Skipped | Executed


def describe(outcome: StepOutcome) -> str:
    match outcome:
        case Skipped(step=step, reason=reason):
            return f"{step}: skipped ({reason})"
        case Executed(step=step, detail=detail, dry_run=True):
            return f"{step}: {detail} [dry-run]"
        case Executed(step=step, detail=detail):
            return f"{step}: {detail}"
