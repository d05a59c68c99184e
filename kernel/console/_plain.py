"""kernel.console._plain -- Plain-text backend.

Bracketed level prefixes, fixed-width tables, no colour. Used when stdout
is not a TTY (pipes, CI logs) or when --plain is given.
"""

from __future__ import annotations

import sys
from typing import TextIO

RULE_WIDTH = 66


def format_table(headers: list[str], rows: list[list[str]]) -> list[str]:
    """Lay out ``rows`` under ``headers`` with left-aligned padded columns."""
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row[: len(widths)]):
            widths[i] = max(widths[i], len(cell))

    def line(cells: list[str]) -> str:
        padded = [cell.ljust(width) for cell, width in zip(cells, widths, strict=False)]
        return ("  " + "  ".join(padded)).rstrip()

    out = [line(headers), line(["-" * w for w in widths])]
    out.extend(line(row) for row in rows)
    return out


class PlainBackend:
    """ConsoleProtocol implementation writing plain lines to a text stream."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def _emit(self, text: str) -> None:
        # Resolve sys.stdout late so output capture set up after construction works
        out = self._stream or sys.stdout
        out.write(text + "\n")

    def info(self, message: str) -> None:
        self._emit(f"[INFO] {message}")

    def success(self, message: str) -> None:
        self._emit(f"[OK] {message}")

    def warning(self, message: str) -> None:
        self._emit(f"[WARNING] {message}")

    def error(self, message: str) -> None:
        self._emit(f"[ERROR] {message}")

    def banner(self, title: str) -> None:
        rule = "=" * RULE_WIDTH
        self._emit(rule)
        self._emit(title.center(RULE_WIDTH).rstrip())
        self._emit(rule)

    def table(self, headers: list[str], rows: list[list[str]], *, title: str = "") -> None:
        if title:
            self._emit(f"\n  {title}:")
        if headers:
            for text in format_table(headers, rows):
                self._emit(text)

    def kv(self, data: dict[str, str], *, title: str = "") -> None:
        if title:
            self._emit(f"\n  {title}:")
        width = max((len(k) for k in data), default=0)
        for key, value in data.items():
            self._emit(f"  {key.rjust(width)}: {value}")

    def step(self, current: int, total: int, description: str) -> None:
        self._emit(f"\n[{current}/{total}] {description}")

    def step_detail(self, message: str) -> None:
        self._emit(f"    {message}")

    def check(self, name: str, *, passed: bool, detail: str = "", fatal: bool = True) -> None:
        suffix = f" ({detail})" if detail else ""
        if passed:
            self.success(f"{name}: PASSED{suffix}")
        elif fatal:
            self.error(f"{name}: FAILED{suffix}")
        else:
            self.warning(f"{name}: FAILED{suffix}")
