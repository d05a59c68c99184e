"""Exception hierarchy for linea-bench.

Every subclass of BenchmarkError is fatal: the CLI reports it and exits 1.
"""

from __future__ import annotations


class BenchmarkError(Exception):
    """Base class for conditions that abort a benchmark run."""


class ConnectivityError(BenchmarkError):
    """Raised when the JSON-RPC startup probe fails."""


class MissingToolError(BenchmarkError):
    """Raised when a required external tool is not on PATH."""


class LoadGeneratorError(BenchmarkError):
    """Raised when the load-generation tool fails or its output is unreadable."""


class TransportError(BenchmarkError):
    """Raised by HTTP adapters when a request never got a response."""
