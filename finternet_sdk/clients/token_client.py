"""Token-related Solana RPC client operations.

This module provides specialized client functionality for SPL token operations.
"""

from typing import Any, Dict, List, Optional

from finternet_sdk.clients.base_client import BaseLedgerClient
from finternet_sdk.constants import TOKEN_PROGRAM_ID
from finternet_sdk.logging_config import get_logger
from finternet_sdk.utils.validation import require_public_key

# Get logger
logger = get_logger(__name__)


class TokenClient(BaseLedgerClient):
    """Client for SPL token operations."""

    async def get_token_accounts_by_owner(
        self,
        owner: str,
        program_id: Optional[str] = TOKEN_PROGRAM_ID,
        mint: Optional[str] = None,
        encoding: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Get token accounts by owner.

        Args:
            owner: The owner public key
            program_id: Filter by token program ID. Defaults to the SPL Token program.
            mint: Filter by mint instead of program. Defaults to None.
            encoding: Account data encoding. Defaults to the configured encoding.

        Returns:
            List of ``{pubkey, account}`` entries

        Raises:
            InvalidPublicKeyError: If the owner, mint, or program_id is not a valid Solana public key
        """
        require_public_key(owner)

        if mint:
            require_public_key(mint)
            account_filter = {"mint": mint}
        else:
            account_filter = {"programId": require_public_key(program_id or TOKEN_PROGRAM_ID)}

        options = {
            "encoding": encoding or self.config.account_encoding,
            "commitment": self.config.commitment,
        }
        response = await self._make_request("getTokenAccountsByOwner", [owner, account_filter, options])
        if isinstance(response, dict):
            return response.get("value") or []
        return response or []

    async def get_token_account_balance(self, account: str) -> Dict[str, Any]:
        """Get the balance of one token account.

        Args:
            account: The token account address

        Returns:
            ``{amount, decimals, uiAmount, uiAmountString}``

        Raises:
            InvalidPublicKeyError: If the account is not a valid Solana public key
            RpcError: If the account does not exist or the query fails
        """
        require_public_key(account)

        response = await self._make_request(
            "getTokenAccountBalance",
            [account, {"commitment": self.config.commitment}]
        )
        return (response or {}).get("value") or {}
