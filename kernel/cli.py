#!/usr/bin/env python3
"""
linea-bench CLI -- entry point for the Linea node benchmark.

Usage:
  linea-bench [run] [--url URL] [--concurrency 10,50,100] [--duration N] ...
  linea-bench check [--url URL]
  linea-bench report [--output-dir DIR]

With no command, ``run`` is assumed. NODE_URL, WS_URL and BENCH_OUTPUT_DIR
override the defaults; command-line flags override the environment.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING, NoReturn

from domain.errors import BenchmarkError
from domain.models import REPORT_FILE, is_artifact
from kernel.config import ENV_NODE_URL, LOG_FILE, load_config, parse_levels
from kernel.console import configure, console

if TYPE_CHECKING:
    from domain.models import BenchmarkConfig

logger = logging.getLogger("linea_bench")

_COMMANDS = ("run", "check", "report")

# ---------------------------------------------------------------------------
# CLI commands
# ---------------------------------------------------------------------------


def cmd_run(args: argparse.Namespace) -> None:
    """Run the full benchmark pipeline."""
    from kernel import pipeline
    from wiring import open_adapters

    config = _config_from_args(args)
    console.banner("Linea Node Performance Benchmark Tool")
    console.kv(
        {
            "Node URL": config.node_url,
            "WebSocket URL": config.ws_url,
            "Concurrency": ", ".join(str(c) for c in config.concurrency_levels),
            "Output": config.output_dir,
        }
    )

    try:
        with open_adapters(config) as adapters:
            run = pipeline.run_benchmark(config, adapters)
            artifacts = [n for n in adapters.fs.list_files() if is_artifact(n)]
    except BenchmarkError as exc:
        _fail(exc)

    console.table(
        ["Clients", "Req/s", "Avg (ms)", "Errors", "Success %"],
        [
            [
                str(r.concurrency),
                f"{r.requests_per_second:.2f}",
                f"{r.avg_response_time_ms:.3f}",
                str(r.failed_requests),
                f"{r.success_rate:.2f}",
            ]
            for r in run.load_tests
        ],
        title="Load Test Results",
    )
    console.success(f"Benchmark complete! Results saved in {config.output_dir}/")
    for name in artifacts:
        console.step_detail(name)
    console.info(f"View the report: xdg-open {Path(config.output_dir) / run.report_path}")


def cmd_check(args: argparse.Namespace) -> None:
    """Check dependencies and node connectivity without generating load."""
    from kernel import pipeline
    from wiring import open_adapters

    config = _config_from_args(args)
    try:
        with open_adapters(config) as adapters:
            pipeline.run_checks(config, adapters)
    except BenchmarkError as exc:
        _fail(exc)
    console.success(f"{config.node_url} is ready for benchmarking")


def cmd_report(args: argparse.Namespace) -> None:
    """Regenerate the HTML report from an existing benchmark_summary.csv."""
    from modules.report.core import recorded_target_url, regenerate
    from wiring import open_adapters

    config = _config_from_args(args)
    explicit_url = args.url or os.environ.get(ENV_NODE_URL)
    with open_adapters(config) as adapters:
        # Without --url or NODE_URL, title the report with the node that was measured
        target_url = explicit_url or recorded_target_url(adapters.fs) or config.node_url
        try:
            regenerate(adapters.fs, target_url, adapters.clock.timestamp())
        except FileNotFoundError as exc:
            console.error(f"Cannot build report: {exc} in {config.output_dir}")
            logger.error("Report regeneration failed: %s", exc)
            sys.exit(1)
    console.success(f"Report generated: {Path(config.output_dir) / REPORT_FILE}")


def _fail(exc: BenchmarkError) -> NoReturn:
    console.error(str(exc))
    logger.error("Run aborted: %s", exc)
    sys.exit(1)


def _config_from_args(args: argparse.Namespace) -> BenchmarkConfig:
    try:
        return load_config(
            os.environ,
            node_url=args.url,
            ws_url=args.ws_url,
            output_dir=args.output_dir,
            concurrency_levels=args.concurrency,
            requests_per_client=args.requests_per_client,
            level_cooldown_seconds=args.cooldown,
            sustained_duration_seconds=args.duration,
            sustained_delay_seconds=args.delay,
            cache_request_count=args.cache_requests,
            request_timeout_seconds=args.timeout,
            ab_path=args.ab_path,
        )
    except ValueError as exc:
        console.error(f"Invalid configuration: {exc}")
        sys.exit(2)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def _levels(raw: str) -> tuple[int, ...]:
    try:
        return parse_levels(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _common_options() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--url", help="Node base URL (env NODE_URL, default http://localhost)")
    common.add_argument("--ws-url", help="WebSocket URL, reported only (env WS_URL)")
    common.add_argument(
        "--output-dir",
        help="Artifact directory (env BENCH_OUTPUT_DIR, default ./benchmark_results)",
    )
    common.add_argument("--timeout", type=float, help="Per-request timeout in seconds (default 10)")
    common.add_argument("--ab-path", help="Apache Bench executable (default ab)")
    common.add_argument("--plain", action="store_true", help="Plain-text console output")
    verbosity = common.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", "-v", action="store_true", help="Debug-level log file")
    verbosity.add_argument("--quiet", "-q", action="store_true", help="Warnings-only log file")
    return common


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linea-bench",
        description="linea-bench -- load, availability and cache benchmark for a Linea node",
    )
    sub = parser.add_subparsers(dest="command")
    common = _common_options()

    # linea-bench run
    run_p = sub.add_parser("run", parents=[common], help="Run the full benchmark (default)")
    run_p.add_argument(
        "--concurrency",
        type=_levels,
        help="Comma-separated levels (default 10,50,100,200,500,1000)",
    )
    run_p.add_argument(
        "--requests-per-client", type=int, help="Requests per client per level (default 10)"
    )
    run_p.add_argument("--cooldown", type=float, help="Pause between levels in seconds (default 5)")
    run_p.add_argument(
        "--duration", type=float, help="Sustained test duration in seconds (default 60)"
    )
    run_p.add_argument("--delay", type=float, help="Sustained inter-request delay (default 0.1)")
    run_p.add_argument("--cache-requests", type=int, help="Cache probe request count (default 100)")

    # linea-bench check / report
    sub.add_parser("check", parents=[common], help="Check dependencies and connectivity only")
    sub.add_parser(
        "report",
        parents=[common],
        help="Rebuild the HTML report from the CSV (--url defaults to the measured node)",
    )

    return parser


def _with_default_command(argv: list[str]) -> list[str]:
    if argv and (argv[0] in _COMMANDS or argv[0] in ("-h", "--help")):
        return argv
    return ["run", *argv]


def _setup_logging(args: argparse.Namespace) -> None:
    """Configure the file-based run log."""
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(LOG_FILE),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        level=level,
    )


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    raw = list(sys.argv[1:] if argv is None else argv)
    args = parser.parse_args(_with_default_command(raw))

    # Run-only options default to None for the other commands
    for name in (
        "concurrency",
        "requests_per_client",
        "cooldown",
        "duration",
        "delay",
        "cache_requests",
    ):
        if not hasattr(args, name):
            setattr(args, name, None)

    # -- Console configuration -----------------------------------------------
    configure(backend="plain" if args.plain else "auto")

    # -- Logging configuration (file-based run log) ---------------------------
    _setup_logging(args)

    if args.command == "run":
        cmd_run(args)
    elif args.command == "check":
        cmd_check(args)
    elif args.command == "report":
        cmd_report(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
