"""Transfer reconstruction from token-balance snapshots.

The query layer reports, for each transaction, the token balances of the
touched accounts before and after execution. It does not say which transfer
caused a change; this module infers it.

Known limitations:
- Direction is not derivable from a single account's snapshot, so both
  ``from`` and ``to`` hold the queried address unless the caller supplies a
  known source.
- Only the first balance-changing pair of a transaction is reported.
- When the snapshots differ in length only the overlapping prefix is paired.
"""

from typing import Any, Dict, Iterable, List, Optional

import base58

from finternet_sdk.constants import MEMO_PROGRAM_IDS
from finternet_sdk.logging_config import get_logger
from finternet_sdk.models.transaction import TokenBalance, TransferRecord
from finternet_sdk.utils.validation import validate_public_key

# Get logger
logger = get_logger(__name__)


def _parse_snapshot(entries: Optional[Iterable[Dict[str, Any]]]) -> Optional[List[Optional[TokenBalance]]]:
    if not isinstance(entries, list):
        return None
    balances: List[Optional[TokenBalance]] = []
    for entry in entries:
        try:
            balances.append(TokenBalance.from_rpc(entry))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.debug(f"Skipping malformed token balance entry {entry!r}: {e}")
            # Keep positions aligned with the other snapshot
            balances.append(None)
    return balances


def _message(transaction: Dict[str, Any]) -> Dict[str, Any]:
    body = transaction.get("transaction")
    message = body.get("message") if isinstance(body, dict) else None
    return message if isinstance(message, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _account_keys(transaction: Dict[str, Any]) -> List[str]:
    """Static account keys followed by keys loaded from lookup tables."""
    keys = []
    for key in _as_list(_message(transaction).get("accountKeys")):
        # jsonParsed renders keys as {"pubkey": ..., "signer": ...}
        keys.append(key.get("pubkey") if isinstance(key, dict) else key)

    meta = transaction.get("meta")
    loaded = meta.get("loadedAddresses") if isinstance(meta, dict) else None
    if isinstance(loaded, dict):
        keys.extend(_as_list(loaded.get("writable")))
        keys.extend(_as_list(loaded.get("readonly")))
    return keys


def _decode_memo_data(data: Any) -> Optional[str]:
    if not isinstance(data, str):
        return None
    try:
        return base58.b58decode(data).decode("utf-8")
    except (ValueError, UnicodeDecodeError):
        return None


def extract_memo(transaction: Dict[str, Any]) -> Optional[str]:
    """Find the first memo instruction of a transaction and return its text.

    Handles both ``json`` (base58 instruction data, program referenced by
    index) and ``jsonParsed`` (memo text already decoded) encodings.

    Args:
        transaction: A ``getTransaction`` result

    Returns:
        The memo text, or None when there is no readable memo
    """
    if not isinstance(transaction, dict):
        return None

    keys = _account_keys(transaction)

    for instruction in _as_list(_message(transaction).get("instructions")):
        if not isinstance(instruction, dict):
            continue
        program_id = instruction.get("programId")
        if program_id is None:
            index = instruction.get("programIdIndex")
            if isinstance(index, int) and 0 <= index < len(keys):
                program_id = keys[index]
        if not isinstance(program_id, str) or program_id not in MEMO_PROGRAM_IDS:
            continue

        if "parsed" in instruction and isinstance(instruction["parsed"], str):
            return instruction["parsed"]
        memo = _decode_memo_data(instruction.get("data"))
        if memo is not None:
            return memo

    return None


class TransferReconstructor:
    """Infers transfer records from pre/post token-balance snapshots."""

    def reconstruct(
        self,
        transaction: Optional[Dict[str, Any]],
        address: str,
        signature: str,
        timestamp: Optional[int] = None,
        source: Optional[str] = None
    ) -> List[TransferRecord]:
        """Reconstruct the transfer records of one transaction.

        Args:
            transaction: A ``getTransaction`` result
            address: The address the records are reported for
            signature: The transaction signature
            timestamp: Block time to report; defaults to the transaction's blockTime
            source: Sending address, when the caller knows it

        Returns:
            Zero or one TransferRecord
        """
        if not isinstance(transaction, dict):
            return []
        meta = transaction.get("meta")
        if not isinstance(meta, dict):
            return []

        pre = _parse_snapshot(meta.get("preTokenBalances"))
        post = _parse_snapshot(meta.get("postTokenBalances"))
        if pre is None or post is None:
            return []

        if len(pre) != len(post):
            logger.debug(
                f"Snapshot lengths differ for {signature} ({len(pre)} vs {len(post)}), "
                f"pairing the first {min(len(pre), len(post))}"
            )

        for pre_balance, post_balance in zip(pre, post):
            if pre_balance is None or post_balance is None:
                continue
            if pre_balance.account_index != post_balance.account_index:
                continue

            pre_amount = pre_balance.base_units
            post_amount = post_balance.base_units
            if pre_amount == post_amount:
                continue

            if not validate_public_key(pre_balance.mint):
                logger.warning(f"Skipping balance change with invalid mint {pre_balance.mint!r} in {signature}")
                continue

            if timestamp is None:
                block_time = transaction.get("blockTime")
                timestamp = block_time if isinstance(block_time, int) else 0

            record = TransferRecord(
                signature=signature,
                from_address=source or address,
                to_address=address,
                amount=abs(post_amount - pre_amount),
                mint=pre_balance.mint,
                timestamp=int(timestamp or 0),
                memo=extract_memo(transaction),
            )
            # One transfer per transaction
            return [record]

        return []
