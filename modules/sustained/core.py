"""Sustained module -- serial availability loop over a fixed wall-clock window."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from domain.errors import TransportError
from domain.models import NODE_URL_KEY, SUSTAINED_FILE, SustainedResult

if TYPE_CHECKING:
    from domain.ports import ClockPort, FileSystemPort, RpcClientPort

logger = logging.getLogger("linea_bench.sustained")


def run_sustained(
    client: RpcClientPort,
    clock: ClockPort,
    duration_seconds: float,
    delay_seconds: float = 0.1,
) -> SustainedResult:
    """Issue one request at a time until ``duration_seconds`` have elapsed.

    HTTP 200 counts as a request; any other status or a transport failure
    counts as an error. The loop always finishes the request in flight, so the
    recorded elapsed time may exceed the target.
    """
    start = clock.monotonic()
    deadline = start + duration_seconds
    request_count = 0
    error_count = 0

    while clock.monotonic() < deadline:
        try:
            response = client.post_rpc()
        except TransportError as exc:
            logger.debug("Sustained request failed: %s", exc)
            error_count += 1
        else:
            if response.status_code == 200:
                request_count += 1
            else:
                error_count += 1
        clock.sleep(delay_seconds)

    elapsed = clock.monotonic() - start
    result = SustainedResult(
        target_seconds=duration_seconds,
        elapsed_seconds=elapsed,
        request_count=request_count,
        error_count=error_count,
    )
    if error_count:
        logger.warning("Sustained run saw %d error(s) in %.1fs", error_count, elapsed)
    return result


def format_summary(result: SustainedResult, target_url: str = "") -> str:
    """Render the key-value text summary for sustained_test.txt.

    A non-empty ``target_url`` is recorded as a ``Node URL`` line, which
    ``report.recorded_target_url`` reads back.
    """
    rate = result.error_rate
    error_rate = "undefined" if rate is None else f"{rate:.2f}%"
    lines = ["Sustained Load Test Results"]
    if target_url:
        lines.append(f"{NODE_URL_KEY}: {target_url}")
    lines += [
        f"Duration: {result.elapsed_seconds:.1f} seconds",
        f"Total Requests: {result.request_count}",
        f"Errors: {result.error_count}",
        f"Requests per Second: {result.requests_per_second:.2f}",
        f"Error Rate: {error_rate}",
    ]
    return "\n".join(lines) + "\n"


def write_summary(fs: FileSystemPort, result: SustainedResult, target_url: str = "") -> None:
    fs.write_file(SUSTAINED_FILE, format_summary(result, target_url))
