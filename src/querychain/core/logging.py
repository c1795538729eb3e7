# src/querychain/core/logging.py
"""Leveled console logging on top of rich."""

import time
from contextlib import contextmanager
from enum import IntEnum
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

from rich.console import Console
from rich.table import Table

# Shared console; every module logs through this instance.
console = Console()


def _style(style: str) -> Callable[[Any], str]:
    return lambda value: f"[{style}]{value}[/{style}]"


color_palette: Dict[str, Callable[[Any], str]] = {
    "table": _style("bold blue"),
    "column": _style("cyan"),
    "operation": _style("magenta"),
    "value": _style("green"),
    "dim": _style("dim"),
    "error": _style("bold red"),
}


class LogLevel(IntEnum):
    DEBUG = 10
    INFO = 20
    SUCCESS = 25
    WARNING = 30
    ERROR = 40


class Logger:
    """Small leveled logger printing rich markup to a shared console."""

    _prefixes = {
        LogLevel.DEBUG: "[dim]·[/dim]",
        LogLevel.INFO: "[blue]ℹ[/blue]",
        LogLevel.SUCCESS: "[green]✓[/green]",
        LogLevel.WARNING: "[yellow]⚠[/yellow]",
        LogLevel.ERROR: "[bold red]✗[/bold red]",
    }

    def __init__(self, out: Optional[Console] = None, level: LogLevel = LogLevel.INFO):
        self.console = out or console
        self.level = level
        self._indent = 0

    def set_level(self, level: LogLevel) -> None:
        self.level = LogLevel(level)

    def is_enabled(self, level: LogLevel) -> bool:
        return level >= self.level

    def _emit(self, level: LogLevel, message: str) -> None:
        if not self.is_enabled(level):
            return
        pad = "  " * self._indent
        self.console.print(f"{pad}{self._prefixes[level]} {message}", highlight=False)

    def debug(self, message: str) -> None:
        self._emit(LogLevel.DEBUG, message)

    def info(self, message: str) -> None:
        self._emit(LogLevel.INFO, message)

    def success(self, message: str) -> None:
        self._emit(LogLevel.SUCCESS, message)

    def warn(self, message: str) -> None:
        self._emit(LogLevel.WARNING, message)

    def error(self, message: str) -> None:
        self._emit(LogLevel.ERROR, message)

    def section(self, title: str) -> None:
        """Print a rule separating logical phases."""
        if self.is_enabled(LogLevel.INFO):
            self.console.rule(f"[bold]{title}[/bold]")

    @contextmanager
    def indented(self) -> Iterator[None]:
        self._indent += 1
        try:
            yield
        finally:
            self._indent -= 1

    @contextmanager
    def timed(self, label: str) -> Iterator[None]:
        """Log how long the wrapped block took."""
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start
            self.info(f"{label} {color_palette['dim'](f'({elapsed:.4f}s)')}")

    def table(self, headers: Sequence[str], rows: List[Sequence[Any]], title: Optional[str] = None) -> None:
        if not self.is_enabled(LogLevel.INFO):
            return
        grid = Table(title=title)
        for header in headers:
            grid.add_column(str(header))
        for row in rows:
            grid.add_row(*[str(cell) for cell in row])
        self.console.print(grid)


log = Logger()
