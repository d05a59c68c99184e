"""Adapter: HttpxRpcClient implements RpcClientPort.

Talks to the node through a single synchronous httpx.Client with a bounded
per-request timeout. Network-level failures surface as TransportError.
"""

from __future__ import annotations

import logging

import httpx

from domain.errors import TransportError
from domain.models import RPC_PAYLOAD, RpcResponse

logger = logging.getLogger("linea_bench.adapters")

HEALTH_PATH = "/health"


class HttpxRpcClient:
    """Concrete implementation of RpcClientPort using httpx."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialise the client.

        Args:
            base_url: Node base URL, e.g. ``http://localhost``.
            timeout: Per-request timeout in seconds.
            transport: Optional transport override (tests use MockTransport).
        """
        self._base_url = base_url.rstrip("/")
        self._client = httpx.Client(timeout=httpx.Timeout(timeout), transport=transport)

    def get_health(self) -> str:
        """GET the health path and return the stripped response body."""
        url = f"{self._base_url}{HEALTH_PATH}"
        try:
            response = self._client.get(url)
        except httpx.HTTPError as exc:
            logger.debug("Health request to %s failed: %s", url, exc)
            raise TransportError(f"GET {url} failed: {exc}") from exc
        return response.text.strip()

    def post_rpc(self) -> RpcResponse:
        """POST the eth_blockNumber envelope to the node root."""
        url = f"{self._base_url}/"
        try:
            response = self._client.post(url, json=RPC_PAYLOAD)
        except httpx.HTTPError as exc:
            logger.debug("RPC request to %s failed: %s", url, exc)
            raise TransportError(f"POST {url} failed: {exc}") from exc
        return RpcResponse(status_code=response.status_code, body=response.text)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpxRpcClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
