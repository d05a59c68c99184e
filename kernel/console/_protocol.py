"""kernel.console._protocol -- ConsoleProtocol definition.

Standard-library typing only; both backends satisfy it structurally.
"""

from __future__ import annotations

from typing import Protocol


class ConsoleProtocol(Protocol):
    """Terminal output for a benchmark run.

    Messages carry a level prefix (``[INFO]``, ``[OK]``, ``[WARNING]``,
    ``[ERROR]``). Stage progress is a numbered ``step`` followed by indented
    ``step_detail`` lines. Connectivity probes report through ``check``::

        console.step(2, 7, "Testing basic connectivity...")
        console.check("Health check", passed=False, fatal=False)
        console.check("JSON-RPC connectivity", passed=True, detail="Block: 0x1a")

    Results are shown with ``table`` and settings with ``kv``.
    """

    def info(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def banner(self, title: str) -> None:
        """Full-width title between two rules."""
        ...

    def table(self, headers: list[str], rows: list[list[str]], *, title: str = "") -> None: ...

    def kv(self, data: dict[str, str], *, title: str = "") -> None:
        """Key-value pairs with right-aligned keys."""
        ...

    def step(self, current: int, total: int, description: str) -> None:
        """Numbered stage header ``[current/total] description``."""
        ...

    def step_detail(self, message: str) -> None: ...

    def check(self, name: str, *, passed: bool, detail: str = "", fatal: bool = True) -> None:
        """Report a PASSED/FAILED check.

        A failed non-fatal check is shown at warning level, a failed fatal
        one at error level.
        """
        ...
