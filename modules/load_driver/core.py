"""Load driver module -- concurrency sweep with an external load generator.

For each configured level, runs one fixed-size burst, appends a row to
benchmark_summary.csv and stores the raw tool output in a per-level file.
The first failing level aborts the sweep.
"""

from __future__ import annotations

import csv
import io
import logging
from typing import TYPE_CHECKING

from domain.models import CSV_HEADER, SUMMARY_CSV, LoadTestResult, detail_file_name

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from domain.ports import ClockPort, FileSystemPort, LoadGeneratorPort

logger = logging.getLogger("linea_bench.load_driver")


def _csv_line(values: Sequence[object]) -> str:
    buf = io.StringIO()
    csv.writer(buf, lineterminator="\n").writerow(values)
    return buf.getvalue()


def init_summary(fs: FileSystemPort) -> None:
    """Write the CSV header, replacing any previous summary."""
    fs.write_file(SUMMARY_CSV, _csv_line(CSV_HEADER))


def format_row(result: LoadTestResult) -> str:
    """Render one LoadTestResult as a CSV line."""
    return _csv_line(
        [
            result.timestamp,
            result.concurrency,
            f"{result.requests_per_second:.2f}",
            f"{result.avg_response_time_ms:.3f}",
            result.failed_requests,
            f"{result.success_rate:.2f}",
        ]
    )


def run_level(
    generator: LoadGeneratorPort,
    fs: FileSystemPort,
    clock: ClockPort,
    concurrency: int,
    requests_per_client: int,
) -> LoadTestResult:
    """Run one burst at the given concurrency and persist its artifacts.

    Raises:
        LoadGeneratorError: If the tool fails; nothing is written for the level.
    """
    total = concurrency * requests_per_client
    logger.info("Load test: %d requests at concurrency %d", total, concurrency)

    raw_output, summary = generator.run(concurrency, total)

    result = LoadTestResult(
        timestamp=clock.timestamp(),
        concurrency=concurrency,
        requests_per_second=summary.requests_per_second,
        avg_response_time_ms=summary.mean_time_per_request_ms,
        failed_requests=summary.failed_requests,
        total_requests=summary.complete_requests,
    )
    fs.append_file(SUMMARY_CSV, format_row(result))
    fs.write_file(detail_file_name(concurrency), raw_output)

    logger.info(
        "Concurrency %d: %.2f req/s, %.3f ms avg, %.2f%% success",
        concurrency,
        result.requests_per_second,
        result.avg_response_time_ms,
        result.success_rate,
    )
    return result


def run_sweep(
    generator: LoadGeneratorPort,
    fs: FileSystemPort,
    clock: ClockPort,
    levels: Sequence[int],
    requests_per_client: int = 10,
    cooldown_seconds: float = 5.0,
    on_level: Callable[[LoadTestResult], None] | None = None,
) -> tuple[LoadTestResult, ...]:
    """Run every level in order, sleeping ``cooldown_seconds`` between levels.

    Args:
        generator: Load-generation tool.
        fs: Output directory.
        clock: Clock used for timestamps and cooldowns.
        levels: Concurrency levels, run in the given order.
        requests_per_client: Burst size multiplier (total = level x this).
        cooldown_seconds: Pause between consecutive levels.
        on_level: Optional callback invoked after each completed level.

    Returns:
        One LoadTestResult per level, in configured order.
    """
    results: list[LoadTestResult] = []
    for index, concurrency in enumerate(levels):
        if index > 0:
            clock.sleep(cooldown_seconds)
        result = run_level(generator, fs, clock, concurrency, requests_per_client)
        results.append(result)
        if on_level is not None:
            on_level(result)
    return tuple(results)
