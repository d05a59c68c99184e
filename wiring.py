"""
wiring.py -- Maps each pipeline port to its concrete adapter.

The kernel never constructs adapters itself. ``open_adapters`` builds the
production set for one run and closes the HTTP client afterwards; tests build
``Adapters`` directly from fakes.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from adapters.ab_runner import ApacheBenchRunner
from adapters.http_rpc import HttpxRpcClient
from adapters.local_fs import LocalFileSystem
from adapters.system_clock import SystemClock

if TYPE_CHECKING:
    from domain.models import BenchmarkConfig
    from domain.ports import ClockPort, FileSystemPort, LoadGeneratorPort, RpcClientPort

logger = logging.getLogger("linea_bench.wiring")


@dataclass(frozen=True)
class Adapters:
    """The four ports a benchmark run needs."""

    client: RpcClientPort
    generator: LoadGeneratorPort
    fs: FileSystemPort
    clock: ClockPort


@contextmanager
def open_adapters(config: BenchmarkConfig) -> Iterator[Adapters]:
    """Build production adapters for ``config`` and release them on exit."""
    logger.debug("Wiring adapters for %s -> %s", config.node_url, config.output_dir)
    with HttpxRpcClient(config.node_url, timeout=config.request_timeout_seconds) as client:
        yield Adapters(
            client=client,
            generator=ApacheBenchRunner(
                config.node_url,
                ab_path=config.ab_path,
                timeout=config.request_timeout_seconds,
            ),
            fs=LocalFileSystem(config.output_dir),
            clock=SystemClock(),
        )
