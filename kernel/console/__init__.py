"""kernel.console -- terminal output for linea-bench.

Import the ``console`` proxy anywhere; ``cli.main`` picks the backend once::

    from kernel.console import configure, console

    configure(backend="auto")
    console.step(4, 7, "Running load tests at 6 levels...")
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from kernel.console._plain import PlainBackend

if TYPE_CHECKING:
    from kernel.console._protocol import ConsoleProtocol

BACKENDS = ("auto", "rich", "plain")

# Plain until configure() runs, so imports never touch the terminal
_backend: ConsoleProtocol = PlainBackend()


def configure(*, backend: str = "auto") -> ConsoleProtocol:
    """Select and return the active console backend.

    Args:
        backend: ``"rich"``, ``"plain"``, or ``"auto"`` (Rich on a TTY,
            plain text otherwise).

    Raises:
        ValueError: For any other backend name.
    """
    global _backend  # noqa: PLW0603

    if backend not in BACKENDS:
        msg = f"Unknown console backend: {backend}"
        raise ValueError(msg)
    if backend == "auto":
        backend = "rich" if sys.stdout.isatty() else "plain"

    if backend == "rich":
        from kernel.console._rich import RichBackend

        _backend = RichBackend()
    else:
        _backend = PlainBackend()
    return _backend


def get_console() -> ConsoleProtocol:
    return _backend


class _ConsoleProxy:
    """Forwards attribute access to whichever backend is active."""

    def __getattr__(self, name: str) -> object:
        return getattr(_backend, name)


console: ConsoleProtocol = _ConsoleProxy()  # type: ignore[assignment]
