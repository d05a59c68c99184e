"""Port interfaces for linea-bench.

All ports are defined as typing.Protocol -- structural subtyping means any class
with matching method signatures satisfies the Protocol without inheritance.

This module has ZERO external imports -- only stdlib and typing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from domain.models import LoadGeneratorSummary, RpcResponse


class RpcClientPort(Protocol):
    """Abstraction over the target node's HTTP surface.

    Both methods raise TransportError when no response was received.
    """

    def get_health(self) -> str:
        """GET the health path and return the response body."""
        ...

    def post_rpc(self) -> RpcResponse:
        """POST the eth_blockNumber envelope and return status and body."""
        ...


class LoadGeneratorPort(Protocol):
    """Abstraction over the external concurrent load-generation tool."""

    def is_available(self) -> bool:
        """Return True if the tool can be invoked."""
        ...

    def run(self, concurrency: int, total_requests: int) -> tuple[str, LoadGeneratorSummary]:
        """Run one blocking burst and return (raw output, parsed summary).

        Raises LoadGeneratorError on a non-zero exit or unparseable output.
        """
        ...


class FileSystemPort(Protocol):
    """Abstraction over the output directory."""

    def read_file(self, path: str) -> str:
        """Read and return the contents of a file."""
        ...

    def write_file(self, path: str, content: str) -> None:
        """Write content to a file, creating parent directories as needed."""
        ...

    def append_file(self, path: str, content: str) -> None:
        """Append content to a file, creating it if missing."""
        ...

    def file_exists(self, path: str) -> bool:
        """Return True if the file exists."""
        ...

    def list_files(self) -> list[str]:
        """List file names directly under the base directory, sorted."""
        ...

    def clear(self) -> None:
        """Create the base directory if needed and remove the previous run's artifacts.

        Files this tool did not write are left in place.
        """
        ...


class ClockPort(Protocol):
    """Abstraction over wall-clock time and sleeping."""

    def monotonic(self) -> float:
        """Return a monotonic timestamp in seconds."""
        ...

    def sleep(self, seconds: float) -> None:
        """Block for the given number of seconds."""
        ...

    def timestamp(self) -> str:
        """Return the local time formatted as ``YYYY-MM-DD HH:MM:SS``."""
        ...
