"""
kernel/pipeline.py -- Fixed benchmark pipeline.

Stages run strictly in order and share state only through the output
directory:

  check dependencies, probe connectivity, prepare output,
  load-test sweep, sustained load, cache probe, report

Any BenchmarkError stops the pipeline; everything else is recorded as data.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING

from domain.errors import MissingToolError
from domain.models import SUMMARY_CSV, BenchmarkRun
from kernel.config import AB_PACKAGE
from kernel.console import console
from modules.cache_probe import core as cache_probe
from modules.load_driver import core as load_driver
from modules.prober import core as prober
from modules.report import core as report
from modules.sustained import core as sustained

if TYPE_CHECKING:
    from domain.models import BenchmarkConfig, LoadTestResult, ProbeResult
    from wiring import Adapters

logger = logging.getLogger("linea_bench")

TOTAL_STEPS = 7


def check_dependencies(config: BenchmarkConfig, adapters: Adapters) -> None:
    """Fail fast if the load-generation tool is missing."""
    if not adapters.generator.is_available():
        msg = f"{config.ab_path} is required but not installed (package: {AB_PACKAGE})"
        raise MissingToolError(msg)
    console.success("All dependencies are available")


def check_connectivity(adapters: Adapters) -> ProbeResult:
    """Run the connectivity probe and report it on the console.

    Raises:
        ConnectivityError: If the JSON-RPC check fails.
    """
    result = prober.probe(adapters.client)
    console.check(
        "Health check",
        passed=result.health_passed,
        detail="" if result.health_passed else "not available",
        fatal=False,
    )
    console.check(
        "JSON-RPC connectivity",
        passed=result.rpc_passed,
        detail=f"Block: {result.block_number}" if result.rpc_passed else "",
    )
    return prober.require_rpc(result)


def _show_level(result: LoadTestResult) -> None:
    console.step_detail(
        f"{result.concurrency} clients: {result.requests_per_second:.2f} req/s, "
        f"{result.avg_response_time_ms:.3f}ms avg, {result.success_rate:.2f}% success rate"
    )


def run_checks(config: BenchmarkConfig, adapters: Adapters) -> ProbeResult:
    """Run only the dependency check and the connectivity probe.

    Raises:
        BenchmarkError: If either check fails.
    """
    console.step(1, 2, "Checking dependencies...")
    check_dependencies(config, adapters)
    console.step(2, 2, "Testing basic connectivity...")
    return check_connectivity(adapters)


def run_benchmark(config: BenchmarkConfig, adapters: Adapters) -> BenchmarkRun:
    """Execute the full pipeline and return everything it measured.

    Raises:
        BenchmarkError: On any fatal condition. Artifacts of completed stages
            stay in the output directory.
    """
    client, fs, clock = adapters.client, adapters.fs, adapters.clock
    run = BenchmarkRun(started_at=clock.timestamp(), target_url=config.node_url)
    logger.info("Benchmark run started against %s", config.node_url)

    console.step(1, TOTAL_STEPS, "Checking dependencies...")
    check_dependencies(config, adapters)

    console.step(2, TOTAL_STEPS, "Testing basic connectivity...")
    run = dataclasses.replace(run, probe=check_connectivity(adapters))

    console.step(3, TOTAL_STEPS, f"Preparing output directory {config.output_dir}...")
    fs.clear()
    load_driver.init_summary(fs)

    levels = config.concurrency_levels
    console.step(4, TOTAL_STEPS, f"Running load tests at {len(levels)} levels...")
    load_tests = load_driver.run_sweep(
        adapters.generator,
        fs,
        clock,
        levels,
        requests_per_client=config.requests_per_client,
        cooldown_seconds=config.level_cooldown_seconds,
        on_level=_show_level,
    )
    run = dataclasses.replace(run, load_tests=load_tests)

    console.step(
        5, TOTAL_STEPS, f"Running sustained load test for {config.sustained_duration_seconds:g}s..."
    )
    sustained_result = sustained.run_sustained(
        client,
        clock,
        config.sustained_duration_seconds,
        delay_seconds=config.sustained_delay_seconds,
    )
    sustained.write_summary(fs, sustained_result, target_url=config.node_url)
    rate = sustained_result.error_rate
    console.step_detail(
        f"{sustained_result.requests_per_second:.2f} req/s over "
        f"{sustained_result.elapsed_seconds:.1f}s, "
        f"{'undefined' if rate is None else f'{rate:.2f}%'} error rate"
    )
    run = dataclasses.replace(run, sustained=sustained_result)

    console.step(6, TOTAL_STEPS, "Testing cache performance...")
    cache_result = cache_probe.run_cache_probe(client, clock, config.cache_request_count)
    cache_probe.write_summary(fs, cache_result)
    console.step_detail(
        f"{cache_result.requests_per_second:.2f} req/s, "
        f"{cache_result.average_seconds:.3f}s avg response time"
    )
    run = dataclasses.replace(run, cache=cache_result)

    console.step(7, TOTAL_STEPS, "Generating performance report...")
    rows = report.parse_summary_csv(fs.read_file(SUMMARY_CSV))
    html = report.render_report(
        rows,
        config.node_url,
        clock.timestamp(),
        sustained=sustained_result,
        cache=cache_result,
    )
    report_path = report.write_report(fs, html)
    run = dataclasses.replace(run, report_path=report_path)

    logger.info("Benchmark run finished: %d load level(s)", len(load_tests))
    return run
