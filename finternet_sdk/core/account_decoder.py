"""Account decoding for SPL token accounts.

The query layer can return the same token account in several wire
encodings. ``RawAccount`` tags a record with its encoding and
``decode_account`` dispatches to one decoder per encoding, all of which
produce a ``TokenAccountView``.
"""

import base64
import binascii
import struct
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

import base58
from pydantic import ValidationError as PydanticValidationError

from finternet_sdk.constants import TOKEN_ACCOUNT_SIZE
from finternet_sdk.models.token import TokenAccountView
from finternet_sdk.utils.errors import AccountDecodeError
from finternet_sdk.utils.validation import validate_public_key

# SPL token account layout
MINT_OFFSET = 0
OWNER_OFFSET = 32
AMOUNT_OFFSET = 64
PUBKEY_LENGTH = 32
AMOUNT_FORMAT = "<Q"


class AccountEncoding(str, Enum):
    """Encodings the decoder understands."""
    BASE64 = "base64"
    BASE58 = "base58"
    JSON_PARSED = "jsonParsed"


@dataclass(frozen=True)
class RawAccount:
    """An account record as returned by the query layer.

    ``encoding`` is the tag reported by the node. It is kept verbatim so
    that unsupported encodings can be reported rather than guessed at.
    """
    encoding: str
    payload: Any
    pubkey: Optional[str] = None

    @classmethod
    def from_rpc(cls, entry: Dict[str, Any]) -> "RawAccount":
        """Classify a ``getTokenAccountsByOwner`` / ``getAccountInfo`` entry.

        Accepts either a ``{pubkey, account}`` wrapper or a bare account.

        Args:
            entry: Raw RPC entry

        Returns:
            RawAccount tagged with the detected encoding
        """
        pubkey = entry.get("pubkey") if isinstance(entry, dict) else None
        if not isinstance(pubkey, str):
            pubkey = None
        account = entry.get("account", entry) if isinstance(entry, dict) else entry
        data = account.get("data") if isinstance(account, dict) else None

        if isinstance(data, list) and len(data) == 2 and isinstance(data[1], str):
            return cls(encoding=data[1], payload=data[0], pubkey=pubkey)
        if isinstance(data, str):
            # Legacy "binary" encoding: a bare base58 string
            return cls(encoding=AccountEncoding.BASE58.value, payload=data, pubkey=pubkey)
        if isinstance(data, dict) and "parsed" in data:
            return cls(encoding=AccountEncoding.JSON_PARSED.value, payload=data, pubkey=pubkey)
        return cls(encoding="unknown", payload=data, pubkey=pubkey)


def unpack_token_account(data: bytes) -> TokenAccountView:
    """Parse the fixed-layout SPL token account structure.

    Args:
        data: Raw account bytes

    Returns:
        TokenAccountView with base-unit amount

    Raises:
        AccountDecodeError: If the buffer is not a token account
    """
    if len(data) != TOKEN_ACCOUNT_SIZE:
        raise AccountDecodeError(
            f"Token account must be {TOKEN_ACCOUNT_SIZE} bytes, got {len(data)}"
        )

    mint = base58.b58encode(data[MINT_OFFSET:MINT_OFFSET + PUBKEY_LENGTH]).decode("ascii")
    owner = base58.b58encode(data[OWNER_OFFSET:OWNER_OFFSET + PUBKEY_LENGTH]).decode("ascii")
    (amount,) = struct.unpack_from(AMOUNT_FORMAT, data, AMOUNT_OFFSET)
    return TokenAccountView(owner=owner, mint=mint, amount=amount)


def _decode_base64(raw: RawAccount, default_owner: Optional[str]) -> TokenAccountView:
    if not isinstance(raw.payload, str):
        raise AccountDecodeError("base64 payload is not a string")
    try:
        data = base64.b64decode(raw.payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise AccountDecodeError(f"Invalid base64 payload: {e}")
    return unpack_token_account(data)


def _decode_base58(raw: RawAccount, default_owner: Optional[str]) -> TokenAccountView:
    if not isinstance(raw.payload, str):
        raise AccountDecodeError("base58 payload is not a string")
    try:
        data = base58.b58decode(raw.payload)
    except ValueError as e:
        raise AccountDecodeError(f"Invalid base58 payload: {e}")
    return unpack_token_account(data)


def _decode_json_parsed(raw: RawAccount, default_owner: Optional[str]) -> TokenAccountView:
    parsed = raw.payload.get("parsed") if isinstance(raw.payload, dict) else None
    info = parsed.get("info") if isinstance(parsed, dict) else None
    if not isinstance(info, dict):
        raise AccountDecodeError("Parsed account has no info object")

    mint = info.get("mint")
    if not isinstance(mint, str) or not validate_public_key(mint):
        raise AccountDecodeError(f"Parsed account has no valid mint: {mint!r}")

    token_amount = info.get("tokenAmount")
    amount_str = token_amount.get("amount") if isinstance(token_amount, dict) else None
    if not isinstance(amount_str, str):
        raise AccountDecodeError("Parsed account has no base-unit amount string")
    try:
        amount = int(amount_str)
    except ValueError:
        raise AccountDecodeError(f"Amount is not an integer: {amount_str!r}")
    if not 0 <= amount < 2 ** 64:
        raise AccountDecodeError(f"Amount out of range: {amount_str}")

    owner = info.get("owner") or default_owner
    if not owner:
        raise AccountDecodeError("Parsed account has no owner")
    if not isinstance(owner, str) or not validate_public_key(owner):
        raise AccountDecodeError(f"Parsed account has no valid owner: {owner!r}")

    return TokenAccountView(owner=owner, mint=mint, amount=amount)


_DECODERS: Dict[AccountEncoding, Callable[[RawAccount, Optional[str]], TokenAccountView]] = {
    AccountEncoding.BASE64: _decode_base64,
    AccountEncoding.BASE58: _decode_base58,
    AccountEncoding.JSON_PARSED: _decode_json_parsed,
}


def decode_account(
    raw: RawAccount,
    index: Optional[int] = None,
    default_owner: Optional[str] = None
) -> TokenAccountView:
    """Normalize a raw account record into a TokenAccountView.

    Args:
        raw: The tagged account record
        index: Position of the record in its batch, reported on failure
        default_owner: Owner to assume when a parsed record omits it

    Returns:
        TokenAccountView

    Raises:
        AccountDecodeError: If the encoding is unsupported or the payload is malformed
    """
    try:
        encoding = AccountEncoding(raw.encoding)
    except ValueError:
        raise AccountDecodeError(
            f"Unsupported account encoding: {raw.encoding!r}",
            index=index,
            encoding=str(raw.encoding)
        )

    try:
        return _DECODERS[encoding](raw, default_owner)
    except AccountDecodeError as e:
        raise AccountDecodeError(e.message, index=index, encoding=encoding.value) from e
    except PydanticValidationError as e:
        raise AccountDecodeError(
            f"Decoded fields are invalid: {e.error_count()} error(s)",
            index=index,
            encoding=encoding.value
        ) from e
