"""kernel.console._rich -- Rich backend for interactive terminals."""

from __future__ import annotations

from typing import TextIO

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

_THEME = Theme(
    {
        "level.info": "green",
        "level.ok": "bold green",
        "level.warning": "bold yellow",
        "level.error": "bold red",
        "step": "bold cyan",
        "detail": "dim",
    }
)


class RichBackend:
    """ConsoleProtocol implementation backed by rich.console.Console.

    Every caller-supplied string is escaped, so node responses or URLs that
    contain square brackets print literally.
    """

    def __init__(self, file: TextIO | None = None) -> None:
        self._con = Console(theme=_THEME, highlight=False, file=file)

    def _level(self, style: str, label: str, message: str) -> None:
        self._con.print(f"[{style}]\\[{label}][/] {escape(message)}")

    def info(self, message: str) -> None:
        self._level("level.info", "INFO", message)

    def success(self, message: str) -> None:
        self._level("level.ok", "OK", message)

    def warning(self, message: str) -> None:
        self._level("level.warning", "WARNING", message)

    def error(self, message: str) -> None:
        self._level("level.error", "ERROR", message)

    def banner(self, title: str) -> None:
        self._con.print(Rule(Text(title, style="bold")))

    def table(self, headers: list[str], rows: list[list[str]], *, title: str = "") -> None:
        grid = Table(title=title or None, box=box.SIMPLE_HEAD, show_edge=False)
        for header in headers:
            grid.add_column(header, justify="right" if header != headers[0] else "left")
        for row in rows:
            grid.add_row(*(Text(cell) for cell in row))
        self._con.print(grid)

    def kv(self, data: dict[str, str], *, title: str = "") -> None:
        grid = Table.grid(padding=(0, 2))
        grid.add_column(style="bold", justify="right")
        grid.add_column()
        for key, value in data.items():
            grid.add_row(Text(key), Text(value))
        if title:
            self._con.print(f"[bold]{escape(title)}[/]")
        self._con.print(grid)

    def step(self, current: int, total: int, description: str) -> None:
        self._con.print(f"\n[step]\\[{current}/{total}][/] {escape(description)}")

    def step_detail(self, message: str) -> None:
        self._con.print(f"    [detail]{escape(message)}[/]")

    def check(self, name: str, *, passed: bool, detail: str = "", fatal: bool = True) -> None:
        suffix = f" ({detail})" if detail else ""
        if passed:
            self.success(f"{name}: PASSED{suffix}")
        elif fatal:
            self.error(f"{name}: FAILED{suffix}")
        else:
            self.warning(f"{name}: FAILED{suffix}")
