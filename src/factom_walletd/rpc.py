"""
JSON-RPC transport for factom-walletd.

Posts JSON-RPC 2.0 requests with httpx and hands back the decoded
response envelope. Daemon-side errors come back inside the envelope;
HTTP and network failures propagate as httpx exceptions.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional, Protocol

import httpx

from .utils import next_request_id
from .wire.models import RpcResponse

logger = logging.getLogger("factom_walletd.rpc")

# Default walletd endpoint (factom-walletd listens on 8089)
DEFAULT_WALLETD_URL = "http://localhost:8089/v2"
DEFAULT_TIMEOUT = 30.0


def get_walletd_url() -> str:
    """Get the walletd URL from environment or default."""
    return os.environ.get("WALLETD_URL", DEFAULT_WALLETD_URL)


def get_timeout() -> float:
    """Get the request timeout in seconds from environment or default."""
    return float(os.environ.get("WALLETD_TIMEOUT", str(DEFAULT_TIMEOUT)))


def get_auth() -> Optional[httpx.BasicAuth]:
    """Basic auth credentials from WALLETD_USER / WALLETD_PASSWORD, if set."""
    user = os.environ.get("WALLETD_USER")
    if not user:
        return None
    return httpx.BasicAuth(user, os.environ.get("WALLETD_PASSWORD", ""))


def build_payload(method: str, params: dict[str, Any], request_id: int) -> dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "method": method,
        "params": params,
    }


class Transport(Protocol):
    async def call(self, method: str, params: dict[str, Any]) -> RpcResponse:
        ...


class WalletdClient:
    """
    Async walletd transport.

    Args:
        url: walletd endpoint (default: $WALLETD_URL or localhost:8089/v2)
        timeout: request timeout in seconds (default: $WALLETD_TIMEOUT or 30)
        auth: HTTP basic auth (default: $WALLETD_USER / $WALLETD_PASSWORD)
        client: pre-configured httpx.AsyncClient; left open on close()
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        auth: Optional[httpx.Auth] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.url = url or get_walletd_url()
        self._owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(
                timeout=timeout if timeout is not None else get_timeout(),
                auth=auth if auth is not None else get_auth(),
            )
        self.client = client

    async def call(self, method: str, params: dict[str, Any]) -> RpcResponse:
        """
        Make a JSON-RPC call.

        Returns:
            The decoded response envelope, error responses included

        Raises:
            httpx.HTTPError: If the request fails or walletd answers non-2xx
            ResponseFormatError: If the body is not a JSON-RPC 2.0 response
        """
        request_id = next_request_id()
        payload = build_payload(method, params, request_id)
        logger.debug("-> %s id=%s %s", self.url, request_id, method)

        response = await self.client.post(self.url, json=payload)
        response.raise_for_status()
        rpc_response = RpcResponse.from_dict(response.json())

        if rpc_response.error is not None:
            logger.warning(
                "walletd rejected %s (id=%s): %s %s",
                method,
                request_id,
                rpc_response.error.code,
                rpc_response.error.message,
            )
        return rpc_response

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "WalletdClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
