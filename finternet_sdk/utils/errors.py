"""
Error handling utilities for the Finternet SDK.

This module provides standardized error handling mechanisms including:
- Custom exception classes
- A decorator that maps transport failures onto the SDK hierarchy
"""

import asyncio
import functools
import json
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar, cast

import httpx

# Get logger
logger = logging.getLogger(__name__)

AsyncF = TypeVar('AsyncF', bound=Callable[..., Awaitable[Any]])


class ErrorCode(Enum):
    """Error codes for the Finternet SDK."""
    # General errors
    UNKNOWN_ERROR = 1000
    CONFIGURATION_ERROR = 1001
    VALIDATION_ERROR = 1002

    # Network errors
    NETWORK_ERROR = 2000
    TIMEOUT_ERROR = 2002

    # RPC errors
    RPC_ERROR = 3000
    RPC_RATE_LIMIT_ERROR = 3001
    RPC_INVALID_PARAMETER_ERROR = 3002
    RPC_METHOD_NOT_FOUND_ERROR = 3003

    # Data errors
    DATA_ERROR = 4000
    DECODE_ERROR = 4001
    NOT_FOUND_ERROR = 4004

    # Transaction errors
    TRANSACTION_ERROR = 5000
    TRANSACTION_CONFIRMATION_ERROR = 5001


# JSON-RPC error codes mapped to more specific SDK codes
RPC_ERROR_CODES = {
    -32005: ErrorCode.RPC_RATE_LIMIT_ERROR,
    -32602: ErrorCode.RPC_INVALID_PARAMETER_ERROR,
    -32601: ErrorCode.RPC_METHOD_NOT_FOUND_ERROR,
}


class FinternetError(Exception):
    """Base exception class for all Finternet SDK errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        """Initialize a new FinternetError.

        Args:
            message: Error message
            error_code: Error code from ErrorCode enum
            details: Additional error details
        """
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        # Format the error message
        formatted_message = f"[{error_code.name}] {message}"
        if details:
            formatted_message += f" - Details: {details}"

        super().__init__(formatted_message)


class ConfigurationError(FinternetError):
    """Error related to configuration issues."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


class ValidationError(FinternetError):
    """Error related to invalid caller input."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.VALIDATION_ERROR, details)


class InvalidPublicKeyError(ValidationError):
    """Exception raised when an invalid public key is provided."""

    def __init__(self, pubkey: Any):
        super().__init__(f"Invalid public key: {pubkey}", details={"pubkey": str(pubkey)})
        self.pubkey = pubkey


class RpcError(FinternetError):
    """Exception raised when a query-layer call fails."""

    def __init__(
        self,
        message: str,
        error_data: Optional[Dict[str, Any]] = None,
        error_code: ErrorCode = ErrorCode.RPC_ERROR
    ):
        """Initialize the exception.

        Args:
            message: Error message
            error_data: Optional error data from the RPC response
            error_code: Error code from ErrorCode enum
        """
        self.error_data = error_data or {}
        super().__init__(message, error_code, self.error_data)


class RpcTimeoutError(RpcError):
    """Exception raised when the transport times out."""

    def __init__(self, message: str, error_data: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_data, ErrorCode.TIMEOUT_ERROR)


class AccountDecodeError(FinternetError):
    """Raised when a raw account record cannot be normalized."""

    def __init__(self, message: str, index: Optional[int] = None, encoding: Optional[str] = None):
        self.index = index
        self.encoding = encoding
        details: Dict[str, Any] = {}
        if index is not None:
            details["index"] = index
        if encoding is not None:
            details["encoding"] = encoding
        super().__init__(message, ErrorCode.DECODE_ERROR, details)


class NotFoundError(FinternetError):
    """Raised when a required ledger item does not exist."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.NOT_FOUND_ERROR, details)


class SubmissionError(FinternetError):
    """Raised when a transaction submission fails or is not confirmed."""

    def __init__(
        self,
        message: str,
        signature: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.signature = signature
        error_details = dict(details or {})
        if signature:
            error_details["signature"] = signature
        super().__init__(message, ErrorCode.TRANSACTION_ERROR, error_details)


def rpc_error_from_response(error: Dict[str, Any]) -> RpcError:
    """Build an RpcError from a JSON-RPC error object.

    Args:
        error: The ``error`` member of a JSON-RPC response

    Returns:
        RpcError with the most specific error code available
    """
    message = f"Solana RPC error: {error.get('message', 'Unknown error')}"
    if "data" in error:
        message += f" - {json.dumps(error['data'])}"
    code = RPC_ERROR_CODES.get(error.get("code"), ErrorCode.RPC_ERROR)
    return RpcError(message, error, code)


def map_transport_errors(func: AsyncF) -> AsyncF:
    """Decorator to map transport exceptions to RpcError.

    SDK errors raised inside the wrapped coroutine pass through untouched.

    Args:
        func: Async function to decorate

    Returns:
        Decorated async function
    """
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except FinternetError:
            raise
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            raise RpcTimeoutError(
                f"Request timed out: {str(e) or type(e).__name__}",
                {"original_exception": type(e).__name__}
            ) from e
        except httpx.HTTPStatusError as e:
            raise RpcError(
                f"HTTP error {e.response.status_code}: {str(e)}",
                {"status_code": e.response.status_code},
                ErrorCode.NETWORK_ERROR
            ) from e
        except httpx.HTTPError as e:
            raise RpcError(
                f"Network error: {str(e)}",
                {"original_exception": type(e).__name__},
                ErrorCode.NETWORK_ERROR
            ) from e
        except json.JSONDecodeError as e:
            raise RpcError(
                f"Malformed RPC response: {str(e)}",
                {"original_exception": type(e).__name__}
            ) from e

    return cast(AsyncF, wrapper)
