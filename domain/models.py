"""Core data types for linea-bench.

All types are frozen dataclasses with complete type annotations.
This module has ZERO imports from outside the Python standard library.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

# ---------------------------------------------------------------------------
# Output artifacts
# ---------------------------------------------------------------------------

SUMMARY_CSV = "benchmark_summary.csv"
SUSTAINED_FILE = "sustained_test.txt"
CACHE_FILE = "cache_test.txt"
REPORT_FILE = "performance_report.html"

# Line key under which sustained_test.txt records the benchmarked node
NODE_URL_KEY = "Node URL"

CSV_HEADER = (
    "timestamp",
    "concurrent_clients",
    "requests_per_second",
    "avg_response_time",
    "errors",
    "success_rate",
)

# The JSON-RPC envelope sent by every stage.
RPC_PAYLOAD: dict[str, object] = {
    "jsonrpc": "2.0",
    "method": "eth_blockNumber",
    "params": [],
    "id": 1,
}


def detail_file_name(concurrency: int) -> str:
    """Return the raw-output file name for one concurrency level."""
    return f"load_test_{concurrency}_clients_detailed.txt"


_DETAIL_FILE_RE = re.compile(r"load_test_\d+_clients_detailed\.txt")


def is_artifact(name: str) -> bool:
    """Return True if ``name`` is a file this tool writes into the output directory."""
    if name in (SUMMARY_CSV, SUSTAINED_FILE, CACHE_FILE, REPORT_FILE):
        return True
    return _DETAIL_FILE_RE.fullmatch(name) is not None


class Severity(Enum):
    """Visual severity of a load-test row in the HTML report."""

    GOOD = "good"
    WARNING = "warning"
    ERROR = "error"


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BenchmarkConfig:
    """Run-scoped configuration, built once at startup."""

    node_url: str = "http://localhost"
    ws_url: str = "ws://localhost:8080"
    concurrency_levels: tuple[int, ...] = (10, 50, 100, 200, 500, 1000)
    requests_per_client: int = 10
    level_cooldown_seconds: float = 5.0
    sustained_duration_seconds: float = 60.0
    sustained_delay_seconds: float = 0.1
    cache_request_count: int = 100
    request_timeout_seconds: float = 10.0
    output_dir: str = "./benchmark_results"
    ab_path: str = "ab"


# ---------------------------------------------------------------------------
# Stage results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RpcResponse:
    """Outcome of a single JSON-RPC POST that reached the server."""

    status_code: int
    body: str


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of the startup connectivity probe."""

    health_passed: bool
    health_body: str
    block_number: str | None
    error: str = ""

    @property
    def rpc_passed(self) -> bool:
        return self.block_number is not None


@dataclass(frozen=True)
class LoadGeneratorSummary:
    """Metrics extracted from one load-generation tool run."""

    requests_per_second: float
    mean_time_per_request_ms: float
    failed_requests: int
    complete_requests: int


@dataclass(frozen=True)
class LoadTestResult:
    """One concurrency level of the load-test sweep."""

    timestamp: str
    concurrency: int
    requests_per_second: float
    avg_response_time_ms: float
    failed_requests: int
    total_requests: int

    @property
    def success_rate(self) -> float:
        """Percentage of completed requests that did not fail.

        Defined as 0.0 when no request completed.
        """
        if self.total_requests <= 0:
            return 0.0
        return (self.total_requests - self.failed_requests) / self.total_requests * 100


@dataclass(frozen=True)
class SustainedResult:
    """Outcome of the serial sustained-load loop."""

    target_seconds: float
    elapsed_seconds: float
    request_count: int
    error_count: int

    @property
    def requests_per_second(self) -> float:
        if self.elapsed_seconds <= 0:
            return 0.0
        return self.request_count / self.elapsed_seconds

    @property
    def error_rate(self) -> float | None:
        """Error percentage, or None when nothing was attempted."""
        attempts = self.request_count + self.error_count
        if attempts == 0:
            return None
        return self.error_count / attempts * 100


@dataclass(frozen=True)
class CacheResult:
    """Outcome of the repeated identical-request timing probe."""

    request_count: int
    total_seconds: float
    failures: int = 0

    @property
    def average_seconds(self) -> float:
        if self.request_count <= 0:
            return 0.0
        return self.total_seconds / self.request_count

    @property
    def requests_per_second(self) -> float:
        if self.total_seconds <= 0:
            return 0.0
        return self.request_count / self.total_seconds


@dataclass(frozen=True)
class SummaryRow:
    """One data record of benchmark_summary.csv, as read back for reporting."""

    timestamp: str
    concurrency: str
    requests_per_second: str
    avg_response_time: str
    errors: str
    success_rate: float


@dataclass(frozen=True)
class BenchmarkRun:
    """Everything one invocation measured."""

    started_at: str
    target_url: str
    probe: ProbeResult | None = None
    load_tests: tuple[LoadTestResult, ...] = field(default_factory=tuple)
    sustained: SustainedResult | None = None
    cache: CacheResult | None = None
    report_path: str = ""
