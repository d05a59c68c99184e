"""Cache probe module -- black-box timing of repeated identical requests.

Nothing here looks at cache headers; repeated-request throughput is the only
signal.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from domain.errors import TransportError
from domain.models import CACHE_FILE, CacheResult

if TYPE_CHECKING:
    from domain.ports import ClockPort, FileSystemPort, RpcClientPort

logger = logging.getLogger("linea_bench.cache_probe")


def run_cache_probe(
    client: RpcClientPort,
    clock: ClockPort,
    request_count: int = 100,
) -> CacheResult:
    """Send ``request_count`` identical requests back to back and time them.

    A transport failure or a non-200 status counts as a failure; every
    request still contributes to the timing.
    """
    failures = 0
    start = clock.monotonic()
    for _ in range(request_count):
        try:
            response = client.post_rpc()
        except TransportError as exc:
            logger.debug("Cache probe request failed: %s", exc)
            failures += 1
        else:
            if response.status_code != 200:
                failures += 1
    total = clock.monotonic() - start

    if failures:
        logger.warning("Cache probe: %d of %d requests failed", failures, request_count)
    return CacheResult(request_count=request_count, total_seconds=total, failures=failures)


def format_summary(result: CacheResult) -> str:
    """Render the key-value text summary for cache_test.txt."""
    lines = [
        "Cache Performance Test",
        f"Total Requests: {result.request_count}",
        f"Failed Requests: {result.failures}",
        f"Total Time: {result.total_seconds:.3f}s",
        f"Average Response Time: {result.average_seconds:.3f}s",
        f"Requests per Second: {result.requests_per_second:.2f}",
    ]
    return "\n".join(lines) + "\n"


def write_summary(fs: FileSystemPort, result: CacheResult) -> None:
    fs.write_file(CACHE_FILE, format_summary(result))
