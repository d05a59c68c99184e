"""Shared pytest fixtures and test factories for linea-bench.

Provides:
- Fake port implementations (RpcClient, LoadGenerator, FileSystem, Clock)
- A factory for realistic Apache Bench reports
- Pytest fixtures wrapping the fakes and factories
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from domain.errors import LoadGeneratorError
from domain.models import BenchmarkConfig, LoadGeneratorSummary, RpcResponse, is_artifact

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

OK_BODY = '{"jsonrpc":"2.0","id":1,"result":"0x1a"}'


# ── Apache Bench output ───────────────────────────────────────────────────


def make_ab_output(
    concurrency: int = 100,
    complete: int = 1000,
    failed: int = 0,
    rps: float = 1234.56,
    time_per_request: float = 81.004,
) -> str:
    """Build an ``ab`` report shaped like the real tool's output."""
    return f"""This is ApacheBench, Version 2.3 <$Revision: 1903618 $>
Copyright 1996 Adam Twiss, Zeus Technology Ltd, http://www.zeustech.net/
Licensed to The Apache Software Foundation, http://www.apache.org/

Benchmarking localhost (be patient)


Server Software:        nginx/1.25.3
Server Hostname:        localhost
Server Port:            80

Document Path:          /
Document Length:        40 bytes

Concurrency Level:      {concurrency}
Time taken for tests:   0.810 seconds
Complete requests:      {complete}
Failed requests:        {failed}
   (Connect: 0, Receive: 0, Length: {failed}, Exceptions: 0)
Total transferred:      211000 bytes
Total body sent:        222000
HTML transferred:       40000 bytes
Requests per second:    {rps:.2f} [#/sec] (mean)
Time per request:       {time_per_request:.3f} [ms] (mean)
Time per request:       0.810 [ms] (mean, across all concurrent requests)
Transfer rate:          254.38 [Kbytes/sec] received
                        267.66 kb/s sent
                        522.04 kb/s total

Connection Times (ms)
              min  mean[+/-sd] median   max
Connect:        0    1   0.6      1       4
Processing:     3   78  20.1     80     120
Waiting:        2   77  20.0     79     119
Total:          4   79  20.0     81     121
"""


# ── Fake Port Implementations ─────────────────────────────────────────────


class FakeClock:
    """Manually driven ClockPort. ``sleep`` advances time instantly."""

    def __init__(self, start: float = 1000.0, stamp: str = "2026-10-18 12:00:00") -> None:
        self.now = start
        self.stamp = stamp
        self.sleeps: list[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def timestamp(self) -> str:
        return self.stamp

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRpcClient:
    """Scripted RpcClientPort.

    ``responses`` are consumed in order (RpcResponse or an exception to
    raise); once exhausted every call returns ``default``. When a clock is
    given, each RPC call advances it by ``latency`` seconds.
    """

    def __init__(
        self,
        responses: Sequence[RpcResponse | Exception] = (),
        *,
        default: RpcResponse | None = None,
        health: str = "healthy",
        health_exc: Exception | None = None,
        clock: FakeClock | None = None,
        latency: float = 0.0,
    ) -> None:
        self._responses = list(responses)
        self._default = default or RpcResponse(status_code=200, body=OK_BODY)
        self._health = health
        self._health_exc = health_exc
        self._clock = clock
        self._latency = latency
        self.rpc_calls = 0
        self.health_calls = 0

    def get_health(self) -> str:
        self.health_calls += 1
        if self._health_exc is not None:
            raise self._health_exc
        return self._health

    def post_rpc(self) -> RpcResponse:
        self.rpc_calls += 1
        if self._clock is not None:
            self._clock.advance(self._latency)
        item = self._responses.pop(0) if self._responses else self._default
        if isinstance(item, Exception):
            raise item
        return item


class FakeLoadGenerator:
    """LoadGeneratorPort returning synthetic ``ab`` results per level."""

    def __init__(
        self,
        failed_by_level: dict[int, int] | None = None,
        *,
        available: bool = True,
        fail_at: int | None = None,
    ) -> None:
        self._failed = failed_by_level or {}
        self._available = available
        self._fail_at = fail_at
        self.calls: list[tuple[int, int]] = []

    def is_available(self) -> bool:
        return self._available

    def run(self, concurrency: int, total_requests: int) -> tuple[str, LoadGeneratorSummary]:
        self.calls.append((concurrency, total_requests))
        if concurrency == self._fail_at:
            msg = f"ab exited with code 1 at concurrency {concurrency}"
            raise LoadGeneratorError(msg)
        failed = self._failed.get(concurrency, 0)
        rps = 10.0 * concurrency
        raw = make_ab_output(
            concurrency=concurrency, complete=total_requests, failed=failed, rps=rps
        )
        summary = LoadGeneratorSummary(
            requests_per_second=rps,
            mean_time_per_request_ms=81.004,
            failed_requests=failed,
            complete_requests=total_requests,
        )
        return raw, summary


class InMemoryFileSystem:
    """Stateful in-memory FileSystemPort."""

    def __init__(self) -> None:
        self.files: dict[str, str] = {}
        self.clear_count = 0

    def read_file(self, path: str) -> str:
        if path not in self.files:
            msg = f"File not found: {path}"
            raise FileNotFoundError(msg)
        return self.files[path]

    def write_file(self, path: str, content: str) -> None:
        self.files[path] = content

    def append_file(self, path: str, content: str) -> None:
        self.files[path] = self.files.get(path, "") + content

    def file_exists(self, path: str) -> bool:
        return path in self.files

    def list_files(self) -> list[str]:
        return sorted(self.files)

    def clear(self) -> None:
        for name in [n for n in self.files if is_artifact(n)]:
            del self.files[name]
        self.clear_count += 1


# ── Factories ─────────────────────────────────────────────────────────────


def make_config(**overrides: object) -> BenchmarkConfig:
    """Create a BenchmarkConfig with zero delays and a short sustained window."""
    values: dict[str, object] = {
        "concurrency_levels": (10, 50, 100),
        "level_cooldown_seconds": 0.0,
        "sustained_duration_seconds": 1.0,
        "sustained_delay_seconds": 0.1,
        "cache_request_count": 5,
    }
    values.update(overrides)
    return BenchmarkConfig(**values)  # type: ignore[arg-type]


# ── Pytest Fixtures ──────────────────────────────────────────────────────


@pytest.fixture
def fake_clock() -> FakeClock:
    """Provide a FakeClock starting at t=1000."""
    return FakeClock()


@pytest.fixture
def memory_fs() -> InMemoryFileSystem:
    """Provide an empty in-memory FileSystemPort."""
    return InMemoryFileSystem()


@pytest.fixture
def rpc_client_factory() -> type[FakeRpcClient]:
    """Provide the FakeRpcClient class for scripted construction."""
    return FakeRpcClient


@pytest.fixture
def load_generator_factory() -> type[FakeLoadGenerator]:
    """Provide the FakeLoadGenerator class for scripted construction."""
    return FakeLoadGenerator


@pytest.fixture
def ab_output_factory() -> Callable[..., str]:
    """Provide the make_ab_output factory function."""
    return make_ab_output


@pytest.fixture
def config_factory() -> Callable[..., BenchmarkConfig]:
    """Provide the make_config factory function."""
    return make_config
