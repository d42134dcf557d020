"""Transaction history scanning.

Walks an address's signature history and turns each transaction into at
most one transfer record.
"""

from typing import List, Optional, Tuple

from finternet_sdk.clients.ledger_client import LedgerClient
from finternet_sdk.constants import DEFAULT_PUBKEY, MAX_SIGNATURES_LIMIT
from finternet_sdk.core.transfers import TransferReconstructor
from finternet_sdk.logging_config import get_logger, log_with_context
from finternet_sdk.models.transaction import TransferRecord
from finternet_sdk.utils.errors import FinternetError, NotFoundError
from finternet_sdk.utils.validation import require_public_key, require_signature, validate_limit

# Get logger
logger = get_logger(__name__)


class HistoryScanner:
    """Builds activity lists from an address's transaction history."""

    def __init__(
        self,
        ledger: LedgerClient,
        reconstructor: Optional[TransferReconstructor] = None,
        default_limit: int = 10
    ):
        self.ledger = ledger
        self.reconstructor = reconstructor or TransferReconstructor()
        self.default_limit = default_limit

    async def get_history(
        self,
        address: str,
        limit: Optional[int] = None,
        before: Optional[str] = None,
        until: Optional[str] = None
    ) -> List[TransferRecord]:
        """Get the transfer history of an address, most recent first.

        A transaction that cannot be fetched is skipped; the scan continues
        with the next signature.

        Args:
            address: The wallet address
            limit: Maximum number of signatures to scan and records to return
            before: Start searching backwards from this signature
            until: Stop at this signature

        Returns:
            At most ``limit`` TransferRecords

        Raises:
            InvalidPublicKeyError: If the address is invalid
            ValidationError: If limit is out of range
            RpcError: If the signature listing itself fails
        """
        require_public_key(address)
        limit = validate_limit(self.default_limit if limit is None else limit, MAX_SIGNATURES_LIMIT)
        logger.info(f"Fetching transaction history for: {address} (limit: {limit})")

        signatures = await self.ledger.get_signatures_for_address(
            address, before=before, until=until, limit=limit
        )

        records: List[TransferRecord] = []
        for sig_info in signatures[:limit]:
            signature = sig_info.get("signature") if isinstance(sig_info, dict) else None
            if not isinstance(signature, str) or not signature:
                continue

            try:
                transaction = await self.ledger.get_transaction(signature)
            except FinternetError as e:
                log_with_context(logger, "warning", "Skipping transaction that could not be fetched",
                                 signature=signature, error=e.message)
                continue

            if not isinstance(transaction, dict):
                log_with_context(logger, "warning", "Skipping transaction unknown to the node",
                                 signature=signature)
                continue

            timestamp = sig_info.get("blockTime")
            if not isinstance(timestamp, int):
                timestamp = None
            records.extend(self.reconstructor.reconstruct(
                transaction, address=address, signature=signature, timestamp=timestamp
            ))

            if len(records) >= limit:
                break

        logger.info(f"Found {len(records)} transaction records")
        return records[:limit]

    async def get_transaction_details(self, signature: str) -> Optional[TransferRecord]:
        """Get the transfer record of a single transaction.

        No address is known here, so ``from`` and ``to`` hold the all-zero
        default key.

        Args:
            signature: The transaction signature

        Returns:
            TransferRecord, or None when the transaction is unknown or
            changed no token balance

        Raises:
            ValidationError: If the signature is malformed
            RpcError: If the transaction cannot be fetched
        """
        require_signature(signature)
        logger.info(f"Fetching transaction details for: {signature}")

        transaction = await self.ledger.get_transaction(signature)
        if transaction is None:
            return None

        records = self.reconstructor.reconstruct(
            transaction, address=DEFAULT_PUBKEY, signature=signature
        )
        return records[0] if records else None

    async def get_transaction_status(self, signature: str) -> str:
        """Check the status of a transaction.

        Returns:
            ``"Confirmed"``, ``"Failed: <error>"`` or ``"Pending"``
        """
        statuses = await self.ledger.get_signature_statuses([signature], search_transaction_history=True)
        status = statuses[0] if statuses else None
        if status is None:
            return "Pending"
        if status.get("err") is not None:
            return f"Failed: {status['err']}"
        return "Confirmed"

    async def get_current_slot_and_time(self) -> Tuple[int, int]:
        """Get the current slot and its block time, for timestamping.

        Raises:
            NotFoundError: If the node has no block time for the slot
        """
        slot = await self.ledger.get_slot()
        block_time = await self.ledger.get_block_time(slot)
        if block_time is None:
            raise NotFoundError(f"No block time available for slot {slot}", details={"slot": slot})
        return slot, int(block_time)
