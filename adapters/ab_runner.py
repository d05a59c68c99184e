"""Adapter: ApacheBenchRunner implements LoadGeneratorPort.

Runs Apache Bench (``ab``) as a blocking subprocess per concurrency level and
extracts the summary metrics from its text report. ``ab`` has no
machine-readable summary mode, so all scraping is confined to
``parse_ab_output``.
"""

from __future__ import annotations

import json
import logging
import os
import re
import shutil
import subprocess
import tempfile

from domain.errors import LoadGeneratorError, MissingToolError
from domain.models import RPC_PAYLOAD, LoadGeneratorSummary

logger = logging.getLogger("linea_bench.adapters")

_RPS_RE = re.compile(r"^Requests per second:\s+([\d.]+)", re.MULTILINE)
# The first "Time per request" line is the per-client mean; the second is
# "across all concurrent requests".
_TIME_RE = re.compile(r"^Time per request:\s+([\d.]+)\s+\[ms\]\s+\(mean\)", re.MULTILINE)
_FAILED_RE = re.compile(r"^Failed requests:\s+(\d+)", re.MULTILINE)
_COMPLETE_RE = re.compile(r"^Complete requests:\s+(\d+)", re.MULTILINE)


def parse_ab_output(output: str) -> LoadGeneratorSummary:
    """Extract throughput, latency and failure counts from an ``ab`` report.

    Args:
        output: The full stdout of an ``ab`` run.

    Returns:
        The parsed LoadGeneratorSummary.

    Raises:
        LoadGeneratorError: If a required line is missing.
    """
    fields = {
        "Requests per second": _RPS_RE,
        "Time per request": _TIME_RE,
        "Failed requests": _FAILED_RE,
        "Complete requests": _COMPLETE_RE,
    }
    values: dict[str, str] = {}
    for name, pattern in fields.items():
        match = pattern.search(output)
        if match is None:
            msg = f"ab output has no '{name}' line"
            raise LoadGeneratorError(msg)
        values[name] = match.group(1)

    return LoadGeneratorSummary(
        requests_per_second=float(values["Requests per second"]),
        mean_time_per_request_ms=float(values["Time per request"]),
        failed_requests=int(values["Failed requests"]),
        complete_requests=int(values["Complete requests"]),
    )


class ApacheBenchRunner:
    """Concrete implementation of LoadGeneratorPort using Apache Bench."""

    def __init__(self, url: str, ab_path: str = "ab", timeout: float = 10.0) -> None:
        """Initialise the runner.

        Args:
            url: Target URL. ``ab`` requires an explicit path, so a trailing
                slash is added when missing.
            ab_path: Executable name or path of ``ab``.
            timeout: Per-response timeout passed to ``ab -s`` (seconds).
        """
        self._url = url if url.endswith("/") else f"{url}/"
        self._ab_path = ab_path
        self._timeout = max(1, round(timeout))

    def is_available(self) -> bool:
        """Return True if the ``ab`` executable resolves."""
        return shutil.which(self._ab_path) is not None

    def _command(self, concurrency: int, total_requests: int, payload_path: str) -> list[str]:
        return [
            self._ab_path,
            "-n",
            str(total_requests),
            "-c",
            str(concurrency),
            "-s",
            str(self._timeout),
            "-T",
            "application/json",
            "-p",
            payload_path,
            self._url,
        ]

    def run(self, concurrency: int, total_requests: int) -> tuple[str, LoadGeneratorSummary]:
        """Run one ``ab`` burst and return its raw output and parsed summary.

        Raises:
            MissingToolError: If ``ab`` cannot be executed.
            LoadGeneratorError: On non-zero exit or unparseable output.
        """
        fd, payload_path = tempfile.mkstemp(prefix="rpc_payload_", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(RPC_PAYLOAD, fh, separators=(",", ":"))

            cmd = self._command(concurrency, total_requests, payload_path)
            logger.debug("Running: %s", " ".join(cmd))
            try:
                result = subprocess.run(cmd, capture_output=True, text=True, check=False)
            except FileNotFoundError as exc:
                logger.warning("%s not found", self._ab_path)
                msg = f"{self._ab_path} not found (install apache2-utils)"
                raise MissingToolError(msg) from exc
        finally:
            os.unlink(payload_path)

        if result.returncode != 0:
            detail = (result.stderr or result.stdout or "").strip()[-500:]
            logger.error(
                "ab exited with %d at concurrency %d: %s", result.returncode, concurrency, detail
            )
            msg = f"ab exited with code {result.returncode} at concurrency {concurrency}: {detail}"
            raise LoadGeneratorError(msg)

        return result.stdout, parse_ab_output(result.stdout)
