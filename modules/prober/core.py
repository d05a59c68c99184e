"""Prober module -- startup connectivity check against the node.

A health GET whose failure is only a warning, followed by one eth_blockNumber
call whose failure aborts the run.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from domain.errors import ConnectivityError, TransportError
from domain.models import ProbeResult

if TYPE_CHECKING:
    from domain.ports import RpcClientPort

logger = logging.getLogger("linea_bench.prober")

HEALTHY_BODY = "healthy"


def check_health(client: RpcClientPort) -> tuple[bool, str]:
    """Return (passed, body) for the health endpoint. Never raises."""
    try:
        body = client.get_health()
    except TransportError as exc:
        logger.warning("Health check unreachable: %s", exc)
        return False, ""
    passed = body == HEALTHY_BODY
    if not passed:
        logger.warning("Health check returned %r", body[:80])
    return passed, body


def extract_block_number(body: str) -> str | None:
    """Return the JSON-RPC ``result`` as a string, or None if absent/null/invalid."""
    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None
    result = data.get("result")
    if result is None:
        return None
    return str(result)


def probe(client: RpcClientPort) -> ProbeResult:
    """Run both connectivity checks and return their outcome.

    Args:
        client: HTTP client for the target node.

    Returns:
        A ProbeResult. ``rpc_passed`` is False when the JSON-RPC check failed.
    """
    health_passed, health_body = check_health(client)

    try:
        response = client.post_rpc()
    except TransportError as exc:
        logger.error("JSON-RPC probe failed: %s", exc)
        return ProbeResult(
            health_passed=health_passed,
            health_body=health_body,
            block_number=None,
            error=str(exc),
        )

    block = extract_block_number(response.body)
    error = ""
    if block is None:
        error = f"HTTP {response.status_code}: no result in response {response.body[:200]!r}"
        logger.error("JSON-RPC probe failed: %s", error)
    else:
        logger.info("JSON-RPC probe passed, block %s", block)

    return ProbeResult(
        health_passed=health_passed,
        health_body=health_body,
        block_number=block,
        error=error,
    )


def require_rpc(result: ProbeResult) -> ProbeResult:
    """Return ``result`` unchanged, or raise ConnectivityError if its RPC check failed."""
    if not result.rpc_passed:
        msg = f"JSON-RPC connectivity failed: {result.error}"
        raise ConnectivityError(msg)
    return result
