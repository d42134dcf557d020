"""Validation utilities for the Finternet SDK.

This module provides utilities for validating Solana-specific data.
"""

import re
from typing import Any

import base58

from finternet_sdk.utils.errors import InvalidPublicKeyError, ValidationError

# Solana public key validation pattern (base58 format)
PUBKEY_PATTERN = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")
SIGNATURE_PATTERN = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{43,128}$")


def validate_public_key(pubkey: Any) -> bool:
    """Validate a Solana public key.

    The string must be base58 and decode to exactly 32 bytes.

    Args:
        pubkey: The public key to validate

    Returns:
        True if the public key is valid, False otherwise
    """
    if not pubkey or not isinstance(pubkey, str):
        return False
    if not PUBKEY_PATTERN.match(pubkey):
        return False
    try:
        return len(base58.b58decode(pubkey)) == 32
    except ValueError:
        return False


def require_public_key(pubkey: Any) -> str:
    """Return the public key unchanged, or raise if it is invalid.

    Args:
        pubkey: The public key to check

    Returns:
        The validated public key

    Raises:
        InvalidPublicKeyError: If the key is not a valid base58 public key
    """
    if not validate_public_key(pubkey):
        raise InvalidPublicKeyError(pubkey)
    return pubkey


def validate_transaction_signature(signature: Any) -> bool:
    """Validate a Solana transaction signature.

    Args:
        signature: The transaction signature to validate

    Returns:
        True if the signature is valid, False otherwise
    """
    if not signature or not isinstance(signature, str):
        return False

    # Transaction signatures are also base58 encoded but longer than public keys
    return bool(SIGNATURE_PATTERN.match(signature))


def require_signature(signature: Any) -> str:
    """Return the signature unchanged, or raise if it is malformed."""
    if not validate_transaction_signature(signature):
        raise ValidationError(f"Invalid transaction signature: {signature}",
                              details={"signature": str(signature)})
    return signature


def validate_limit(limit: Any, maximum: int) -> int:
    """Validate a scan limit.

    Args:
        limit: Requested number of items
        maximum: Largest accepted value

    Returns:
        The validated limit

    Raises:
        ValidationError: If limit is not an integer in ``1..maximum``
    """
    if isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= maximum:
        raise ValidationError(f"Limit must be an integer between 1 and {maximum}, got {limit!r}")
    return limit
