"""
kernel/config.py -- Paths, environment variables and run configuration.

Defaults live on domain.models.BenchmarkConfig. This module layers the
environment and CLI overrides on top and validates the result.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from domain.models import BenchmarkConfig

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

STATE_DIR = Path(".linea-bench")
LOG_FILE = STATE_DIR / "bench.log"

# ---------------------------------------------------------------------------
# Environment overrides
# ---------------------------------------------------------------------------

ENV_NODE_URL = "NODE_URL"
ENV_WS_URL = "WS_URL"
ENV_OUTPUT_DIR = "BENCH_OUTPUT_DIR"

_ENV_FIELDS = {
    ENV_NODE_URL: "node_url",
    ENV_WS_URL: "ws_url",
    ENV_OUTPUT_DIR: "output_dir",
}

# Package that provides the ab binary on Debian/Ubuntu
AB_PACKAGE = "apache2-utils"


def parse_levels(raw: str) -> tuple[int, ...]:
    """Parse a comma-separated list of concurrency levels.

    Raises:
        ValueError: On a non-integer token or an empty list.
    """
    levels: list[int] = []
    for token in raw.split(","):
        token = token.strip()
        if not token:
            continue
        levels.append(int(token))
    if not levels:
        msg = "No concurrency levels given"
        raise ValueError(msg)
    return tuple(levels)


def _validate(config: BenchmarkConfig) -> None:
    if not config.node_url:
        msg = "node_url must not be empty"
        raise ValueError(msg)
    if any(level <= 0 for level in config.concurrency_levels):
        msg = f"Concurrency levels must be positive: {config.concurrency_levels}"
        raise ValueError(msg)
    if config.requests_per_client <= 0:
        msg = "requests_per_client must be positive"
        raise ValueError(msg)
    if config.cache_request_count <= 0:
        msg = "cache_request_count must be positive"
        raise ValueError(msg)
    if config.request_timeout_seconds <= 0:
        msg = "request_timeout_seconds must be positive"
        raise ValueError(msg)
    for name in ("level_cooldown_seconds", "sustained_duration_seconds", "sustained_delay_seconds"):
        if getattr(config, name) < 0:
            msg = f"{name} must not be negative"
            raise ValueError(msg)


def load_config(environ: Mapping[str, str] | None = None, **overrides: Any) -> BenchmarkConfig:
    """Build the run configuration.

    Precedence: explicit overrides, then environment, then defaults.
    Overrides whose value is None are ignored, so argparse namespaces can be
    passed through unfiltered.

    Raises:
        ValueError: If the resulting configuration is invalid.
    """
    values: dict[str, Any] = {}
    if environ:
        for env_name, field_name in _ENV_FIELDS.items():
            value = environ.get(env_name)
            if value:
                values[field_name] = value

    known = {f.name for f in dataclasses.fields(BenchmarkConfig)}
    for key, value in overrides.items():
        if key not in known:
            msg = f"Unknown config field: {key}"
            raise ValueError(msg)
        if value is not None:
            values[key] = value

    if "concurrency_levels" in values:
        values["concurrency_levels"] = tuple(values["concurrency_levels"])

    config = BenchmarkConfig(**values)
    _validate(config)
    return config
