"""Base Solana RPC client for the Finternet SDK.

This module provides the core functionality for making JSON-RPC requests to
Solana nodes.
"""

# Standard library imports
import asyncio
from typing import Any, List, Optional

# Third-party library imports
import httpx

# Internal imports
from finternet_sdk.config import FinternetConfig, get_config
from finternet_sdk.logging_config import get_logger
from finternet_sdk.utils.errors import (
    ErrorCode,
    RpcError,
    map_transport_errors,
    rpc_error_from_response,
)

# Get logger
logger = get_logger(__name__)

RETRIABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})
RATE_LIMIT_RPC_CODE = -32005


class BaseLedgerClient:
    """Base client for interacting with the Solana JSON-RPC API."""

    initial_retry_delay = 1.0  # starting delay in seconds
    max_retry_delay = 10.0  # maximum delay in seconds

    def __init__(
        self,
        config: Optional[FinternetConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        """Initialize the client.

        Args:
            config: SDK configuration. Defaults to environment-based config.
            http_client: Optional pre-built HTTP client (the caller keeps ownership)
        """
        self.config = config or get_config()
        self.headers = {"Content-Type": "application/json"}

        # Set up auth if provided
        self.auth = None
        if self.config.has_auth:
            self.auth = (self.config.rpc_user, self.config.rpc_password)

        self._http_client = http_client
        self._owns_http_client = http_client is None

    def _get_http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self.config.timeout,
                auth=self.auth,
                limits=httpx.Limits(max_keepalive_connections=10, max_connections=20)
            )
            self._owns_http_client = True
        return self._http_client

    def _retry_delay(self, retry_count: int) -> float:
        return min(self.initial_retry_delay * (2 ** retry_count), self.max_retry_delay)

    @map_transport_errors
    async def _make_request(
        self,
        method: str,
        params: Optional[List[Any]] = None,
        retry: bool = True
    ) -> Any:
        """Make a JSON-RPC request to the Solana node.

        Args:
            method: The RPC method to call
            params: The parameters to pass to the method
            retry: Whether transient failures may be retried

        Returns:
            The ``result`` member of the JSON-RPC response

        Raises:
            RpcError: If the request fails or the node returns an error
        """
        payload = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": method,
            "params": params or []
        }
        max_retries = self.config.max_retries if retry else 0
        client = self._get_http_client()

        for retry_count in range(max_retries + 1):
            if retry_count > 0:
                logger.info(f"Retry attempt {retry_count}/{max_retries} for {method}")

            try:
                response = await client.post(
                    self.config.rpc_url,
                    headers=self.headers,
                    json=payload
                )
            except (httpx.ConnectError, httpx.ConnectTimeout, httpx.ReadTimeout,
                    httpx.NetworkError) as e:
                if retry_count < max_retries:
                    wait_time = self._retry_delay(retry_count)
                    logger.warning(f"Request failed, retrying in {wait_time}s: {str(e)}")
                    await asyncio.sleep(wait_time)
                    continue
                logger.error(f"Request failed after {retry_count + 1} attempts: {str(e)}")
                raise

            # Handle HTTP status errors
            if response.status_code in RETRIABLE_STATUS_CODES and retry_count < max_retries:
                wait_time = self._retry_delay(retry_count)
                logger.warning(f"HTTP status {response.status_code}, retrying in {wait_time}s: {method}")
                await asyncio.sleep(wait_time)
                continue

            response.raise_for_status()
            result = response.json()

            if "error" in result:
                error = result["error"]
                if error.get("code") == RATE_LIMIT_RPC_CODE and retry_count < max_retries:
                    wait_time = self._retry_delay(retry_count)
                    logger.warning(f"Rate limited, retrying in {wait_time}s: {method}")
                    await asyncio.sleep(wait_time)
                    continue
                raise rpc_error_from_response(error)

            logger.debug(f"RPC {method} succeeded")
            return result.get("result")

        # Every path through the loop either returns, continues or raises
        raise RpcError(f"{method} failed after {max_retries} retries", error_code=ErrorCode.RPC_ERROR)

    async def __aenter__(self):
        """Async context manager entry.

        Returns:
            Self
        """
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def close(self):
        """Close the client and release resources."""
        if self._http_client is not None and self._owns_http_client:
            await self._http_client.aclose()
        self._http_client = None
