"""Report module -- renders benchmark_summary.csv as a static HTML page.

``render_report`` is a pure function of its arguments; ``write_report`` is the
only part that touches the filesystem.
"""

from __future__ import annotations

import csv
import io
import logging
from html import escape
from typing import TYPE_CHECKING

from domain.models import (
    CACHE_FILE,
    CSV_HEADER,
    NODE_URL_KEY,
    REPORT_FILE,
    SUMMARY_CSV,
    SUSTAINED_FILE,
    Severity,
    SummaryRow,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from domain.models import CacheResult, SustainedResult
    from domain.ports import FileSystemPort

logger = logging.getLogger("linea_bench.report")

GOOD_THRESHOLD = 95.0
WARNING_THRESHOLD = 90.0

_STYLE = """\
        body { font-family: Arial, sans-serif; margin: 40px; }
        .header { background: #f0f0f0; padding: 20px; border-radius: 5px; }
        .metric { margin: 10px 0; padding: 10px; background: #f9f9f9;
                  border-left: 4px solid #007cba; }
        .good { border-left-color: #28a745; background-color: #eaf6ec; }
        .warning { border-left-color: #ffc107; background-color: #fff8e1; }
        .error { border-left-color: #dc3545; background-color: #fdecea; }
        table { border-collapse: collapse; width: 100%; margin: 20px 0; }
        th, td { border: 1px solid #ddd; padding: 8px; text-align: left; }
        th { background-color: #f2f2f2; }"""

_COLUMNS = (
    "Concurrent Clients",
    "Requests/Second",
    "Avg Response Time (ms)",
    "Errors",
    "Success Rate (%)",
)


def classify(success_rate: float) -> Severity:
    """Map a success rate to its report severity."""
    if success_rate >= GOOD_THRESHOLD:
        return Severity.GOOD
    if success_rate >= WARNING_THRESHOLD:
        return Severity.WARNING
    return Severity.ERROR


def parse_summary_csv(text: str) -> list[SummaryRow]:
    """Parse benchmark_summary.csv content into rows.

    The header line is skipped. Rows with the wrong number of fields or a
    non-numeric success rate are logged and skipped.
    """
    rows: list[SummaryRow] = []
    reader = csv.reader(io.StringIO(text))
    for line_no, record in enumerate(reader, start=1):
        if not record or tuple(record) == CSV_HEADER:
            continue
        if len(record) != len(CSV_HEADER):
            logger.warning("Skipping CSV line %d: expected %d fields", line_no, len(CSV_HEADER))
            continue
        timestamp, clients, rps, avg_time, errors, rate = record
        try:
            success_rate = float(rate)
        except ValueError:
            logger.warning("Skipping CSV line %d: bad success rate %r", line_no, rate)
            continue
        rows.append(
            SummaryRow(
                timestamp=timestamp,
                concurrency=clients,
                requests_per_second=rps,
                avg_response_time=avg_time,
                errors=errors,
                success_rate=success_rate,
            )
        )
    return rows


def _table_rows(rows: Sequence[SummaryRow]) -> list[str]:
    out: list[str] = []
    for row in rows:
        cells = (
            row.concurrency,
            row.requests_per_second,
            row.avg_response_time,
            row.errors,
            f"{row.success_rate:.2f}",
        )
        out.append(f'        <tr class="{classify(row.success_rate).value}">')
        out.extend(f"            <td>{escape(cell)}</td>" for cell in cells)
        out.append("        </tr>")
    return out


def _summary_block(title: str, data: dict[str, str]) -> list[str]:
    out = [f"    <h2>{escape(title)}</h2>", '    <div class="metric">']
    out.extend(f"        <strong>{escape(k)}:</strong> {escape(v)}<br>" for k, v in data.items())
    out.append("    </div>")
    return out


def render_report(
    rows: Sequence[SummaryRow],
    target_url: str,
    generated_at: str,
    sustained: SustainedResult | None = None,
    cache: CacheResult | None = None,
) -> str:
    """Render the full HTML report.

    Args:
        rows: Parsed CSV rows, rendered in order. May be empty.
        target_url: Node URL shown in the title block.
        generated_at: Generation timestamp shown in the title block.
        sustained: Optional sustained-load summary to include.
        cache: Optional cache-probe summary to include.

    Returns:
        The HTML document as a string.
    """
    lines = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '    <meta charset="utf-8">',
        "    <title>Linea Node Performance Report</title>",
        "    <style>",
        _STYLE,
        "    </style>",
        "</head>",
        "<body>",
        '    <div class="header">',
        "        <h1>Linea Node Performance Report</h1>",
        f"        <p>Generated on: {escape(generated_at)}</p>",
        f"        <p>Node URL: {escape(target_url)}</p>",
        "    </div>",
        "",
        "    <h2>Load Test Results</h2>",
        "    <table>",
        "        <tr>",
        *(f"            <th>{col}</th>" for col in _COLUMNS),
        "        </tr>",
        *_table_rows(rows),
        "    </table>",
    ]

    if sustained is not None:
        rate = sustained.error_rate
        lines.extend(
            _summary_block(
                "Sustained Load",
                {
                    "Duration": f"{sustained.elapsed_seconds:.1f} s",
                    "Requests": str(sustained.request_count),
                    "Errors": str(sustained.error_count),
                    "Requests per Second": f"{sustained.requests_per_second:.2f}",
                    "Error Rate": "undefined" if rate is None else f"{rate:.2f}%",
                },
            )
        )

    if cache is not None:
        lines.extend(
            _summary_block(
                "Cache Performance",
                {
                    "Requests": str(cache.request_count),
                    "Failed Requests": str(cache.failures),
                    "Total Time": f"{cache.total_seconds:.3f} s",
                    "Average Response Time": f"{cache.average_seconds:.3f} s",
                    "Requests per Second": f"{cache.requests_per_second:.2f}",
                },
            )
        )

    lines.extend(
        [
            "",
            "    <h2>Test Files</h2>",
            "    <ul>",
            f'        <li><a href="{SUMMARY_CSV}">Benchmark Summary (CSV)</a></li>',
            f'        <li><a href="{SUSTAINED_FILE}">Sustained Load Test Results</a></li>',
            f'        <li><a href="{CACHE_FILE}">Cache Performance Test</a></li>',
            "    </ul>",
            "",
            "    <h2>Recommendations</h2>",
            '    <div class="metric">',
            "        <strong>Performance Baseline:</strong><br>",
            "        &bull; Target: &gt;1000 req/s for high-performance setup<br>",
            "        &bull; Target: &gt;95% success rate under load<br>",
            "        &bull; Target: &lt;100ms average response time",
            "    </div>",
            "</body>",
            "</html>",
        ]
    )
    return "\n".join(lines) + "\n"


def write_report(fs: FileSystemPort, html: str) -> str:
    """Write the report into the output directory and return its file name."""
    fs.write_file(REPORT_FILE, html)
    return REPORT_FILE


def recorded_target_url(fs: FileSystemPort) -> str | None:
    """Return the node URL recorded in sustained_test.txt, if any."""
    if not fs.file_exists(SUSTAINED_FILE):
        return None
    prefix = f"{NODE_URL_KEY}: "
    for line in fs.read_file(SUSTAINED_FILE).splitlines():
        if line.startswith(prefix):
            return line[len(prefix) :].strip() or None
    return None


def regenerate(fs: FileSystemPort, target_url: str, generated_at: str) -> str:
    """Rebuild the report from the CSV already in the output directory.

    Raises:
        FileNotFoundError: If benchmark_summary.csv does not exist.
    """
    if not fs.file_exists(SUMMARY_CSV):
        msg = f"{SUMMARY_CSV} not found"
        raise FileNotFoundError(msg)
    rows = parse_summary_csv(fs.read_file(SUMMARY_CSV))
    return write_report(fs, render_report(rows, target_url, generated_at))
