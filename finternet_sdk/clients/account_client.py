"""Account-related Solana RPC client operations.

This module provides specialized client functionality for Solana account operations.
"""

from typing import Any, Dict, List, Optional

from finternet_sdk.clients.base_client import BaseLedgerClient
from finternet_sdk.constants import MAX_SIGNATURES_LIMIT
from finternet_sdk.utils.validation import require_public_key, validate_limit


class AccountClient(BaseLedgerClient):
    """Client for Solana account operations."""

    async def get_account(self, pubkey: str, encoding: str = "base64") -> Optional[Dict[str, Any]]:
        """Get a raw account record.

        Args:
            pubkey: The account public key
            encoding: The encoding for the account data

        Returns:
            The account record (``data``, ``owner``, ``lamports``...), or None
            when the account does not exist

        Raises:
            InvalidPublicKeyError: If the account is not a valid Solana public key
            RpcError: If the query fails
        """
        require_public_key(pubkey)

        response = await self._make_request(
            "getAccountInfo",
            [pubkey, {"encoding": encoding, "commitment": self.config.commitment}]
        )
        if not response:
            return None
        return response.get("value")

    async def get_balance(self, pubkey: str) -> int:
        """Get account balance.

        Args:
            pubkey: The account public key

        Returns:
            Account balance in lamports

        Raises:
            InvalidPublicKeyError: If the account is not a valid Solana public key
        """
        require_public_key(pubkey)

        response = await self._make_request(
            "getBalance",
            [pubkey, {"commitment": self.config.commitment}]
        )
        if isinstance(response, dict):
            return int(response.get("value") or 0)
        return int(response or 0)

    async def get_signatures_for_address(
        self,
        address: str,
        before: Optional[str] = None,
        until: Optional[str] = None,
        limit: int = 10
    ) -> List[Dict[str, Any]]:
        """Get transaction signatures for an address, most recent first.

        Args:
            address: The account address
            before: Signature to start searching backwards from
            until: Signature to search until
            limit: Maximum number of signatures to return

        Returns:
            List of ``{signature, slot, blockTime, err, memo}`` entries

        Raises:
            InvalidPublicKeyError: If the address is not a valid Solana public key
        """
        require_public_key(address)
        validate_limit(limit, MAX_SIGNATURES_LIMIT)

        options: Dict[str, Any] = {"limit": limit, "commitment": self.config.commitment}
        if before:
            options["before"] = before
        if until:
            options["until"] = until

        return await self._make_request(
            "getSignaturesForAddress",
            [address, options]
        ) or []

    async def get_slot(self) -> int:
        """Get the current slot."""
        return await self._make_request("getSlot", [{"commitment": self.config.commitment}])

    async def get_block_time(self, slot: int) -> Optional[int]:
        """Get the estimated production time of a block, or None if unavailable."""
        return await self._make_request("getBlockTime", [slot])

    async def get_minimum_balance_for_rent_exemption(self, size: int) -> int:
        """Get the minimum balance required for rent exemption.

        Args:
            size: The data size

        Returns:
            Minimum balance in lamports
        """
        return await self._make_request("getMinimumBalanceForRentExemption", [size])
