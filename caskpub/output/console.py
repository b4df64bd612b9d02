"""Console output abstraction.

Pipeline stages report progress through ``ConsoleProtocol`` rather than
printing directly, so the same code drives the rich terminal output and the
``MockConsole`` used in tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "Style",
    "ConsoleProtocol",
    "RichConsole",
    "MockConsole",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    SKIP = auto()
    DIM = auto()
    HEADER = auto()

    def __str__(self) -> str:
        return self.name.lower()


class ConsoleProtocol(Protocol):
    """Styled line-oriented output."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None: ...

    def success(self, message: str) -> None:
        """``[ok] message``"""
        ...

    def error(self, message: str) -> None:
        """``[ERROR] message``"""
        ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None:
        """``[info] message``"""
        ...

    def skip(self, message: str) -> None:
        """``[skip] message``, for a step disabled by a flag."""
        ...

    def header(self, message: str) -> None:
        """``=== message ===`` preceded by a blank line."""
        ...

    def newline(self) -> None: ...


class RichConsole:
    """Console implementation using Rich."""

    def __init__(self, *, stderr: bool = False) -> None:
        # Import Rich lazily to keep `--help` fast
        from rich.console import Console

        self._console = Console(stderr=stderr, highlight=False)
        self._style_map = {
            Style.DEFAULT: "",
            Style.SUCCESS: "green",
            Style.ERROR: "red bold",
            Style.WARNING: "yellow",
            Style.INFO: "cyan",
            Style.SKIP: "yellow",
            Style.DIM: "dim",
            Style.HEADER: "blue bold",
        }

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        rich_style = self._style_map.get(style, "")
        if rich_style:
            self._console.print(message, style=rich_style, markup=False)
        else:
            self._console.print(message, markup=False)

    def success(self, message: str) -> None:
        self.print(f"[ok] {message}", Style.SUCCESS)

    def error(self, message: str) -> None:
        self.print(f"[ERROR] {message}", Style.ERROR)

    def warning(self, message: str) -> None:
        self.print(f"[warn] {message}", Style.WARNING)

    def info(self, message: str) -> None:
        self.print(f"[info] {message}", Style.INFO)

    def skip(self, message: str) -> None:
        self.print(f"[skip] {message}", Style.SKIP)

    def header(self, message: str) -> None:
        self._console.print()
        self.print(f"=== {message} ===", Style.HEADER)

    def newline(self) -> None:
        self._console.print()


@dataclass
class OutputRecord:
    """A single output record for MockConsole."""

    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console implementation that captures output for testing."""

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"[ok] {message}", Style.SUCCESS))

    def error(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"[ERROR] {message}", Style.ERROR))

    def warning(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"[warn] {message}", Style.WARNING))

    def info(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"[info] {message}", Style.INFO))

    def skip(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"[skip] {message}", Style.SKIP))

    def header(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"=== {message} ===", Style.HEADER))

    def newline(self) -> None:
        self.outputs.append(OutputRecord("", Style.DEFAULT))

    # Test helpers

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(o.style == Style.ERROR for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        """Find all outputs containing a substring."""
        return [o for o in self.outputs if substring in o.message]

    def count(self, style: Style) -> int:
        return sum(1 for o in self.outputs if o.style == style)
