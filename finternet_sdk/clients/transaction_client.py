"""Transaction-related Solana RPC client operations."""

import base64
from typing import Any, Dict, List, Optional

from finternet_sdk.clients.base_client import BaseLedgerClient
from finternet_sdk.utils.validation import require_signature


class TransactionClient(BaseLedgerClient):
    """Client for transaction lookup and submission."""

    async def get_transaction(self, signature: str, encoding: str = "json") -> Optional[Dict[str, Any]]:
        """Get a confirmed transaction.

        Args:
            signature: The transaction signature
            encoding: ``json`` or ``jsonParsed``

        Returns:
            Transaction with ``meta``, ``transaction`` and ``blockTime``, or
            None if the node does not know it (e.g. pruned)

        Raises:
            ValidationError: If the signature is malformed
            RpcError: If the query fails
        """
        require_signature(signature)

        return await self._make_request(
            "getTransaction",
            [
                signature,
                {
                    "encoding": encoding,
                    "commitment": self.config.commitment,
                    "maxSupportedTransactionVersion": 0,
                }
            ]
        )

    async def get_signature_statuses(
        self,
        signatures: List[str],
        search_transaction_history: bool = False
    ) -> List[Optional[Dict[str, Any]]]:
        """Get the statuses of a list of signatures.

        Args:
            signatures: Transaction signatures
            search_transaction_history: Whether to search beyond the recent status cache

        Returns:
            One status entry (or None when unknown) per signature
        """
        for signature in signatures:
            require_signature(signature)

        response = await self._make_request(
            "getSignatureStatuses",
            [signatures, {"searchTransactionHistory": search_transaction_history}]
        )
        return (response or {}).get("value") or [None] * len(signatures)

    async def get_latest_blockhash(self) -> str:
        """Get a recent blockhash.

        Returns:
            The blockhash, base58 encoded
        """
        response = await self._make_request(
            "getLatestBlockhash",
            [{"commitment": self.config.commitment}]
        )
        return response["value"]["blockhash"]

    async def send_raw_transaction(self, transaction: bytes, skip_preflight: bool = False) -> str:
        """Send a signed, serialized transaction.

        The request is never retried.

        Args:
            transaction: Wire-format transaction bytes
            skip_preflight: Whether to skip the preflight simulation

        Returns:
            The transaction signature
        """
        encoded = base64.b64encode(transaction).decode("ascii")
        return await self._make_request(
            "sendTransaction",
            [
                encoded,
                {
                    "encoding": "base64",
                    "skipPreflight": skip_preflight,
                    "preflightCommitment": self.config.commitment,
                }
            ],
            retry=False
        )
