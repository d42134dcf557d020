"""Instruction builders.

SPL token and system instructions come from ``spl.token`` and
``solders.system_program``; the metadata instruction is serialized here
because no maintained Python client ships it.
"""

import struct
from typing import List, Optional, Sequence

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from solders.system_program import CreateAccountParams, create_account
from spl.memo.instructions import MemoParams, create_memo
from spl.token.instructions import (
    InitializeMintParams,
    MintToParams,
    TransferParams,
    create_associated_token_account,
    get_associated_token_address,
    initialize_mint,
    mint_to,
    transfer,
)

from finternet_sdk.constants import (
    MEMO_PROGRAM_ID,
    METADATA_PROGRAM_ID,
    MINT_ACCOUNT_SIZE,
    SYSTEM_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)
from finternet_sdk.core.metadata import get_metadata_account_address

CREATE_METADATA_ACCOUNT_V3 = 33

TOKEN_PROGRAM = Pubkey.from_string(TOKEN_PROGRAM_ID)
METADATA_PROGRAM = Pubkey.from_string(METADATA_PROGRAM_ID)
MEMO_PROGRAM = Pubkey.from_string(MEMO_PROGRAM_ID)
SYSTEM_PROGRAM = Pubkey.from_string(SYSTEM_PROGRAM_ID)


def associated_token_address(owner: Pubkey, mint: Pubkey) -> Pubkey:
    """Derive the associated token account of (owner, mint)."""
    return get_associated_token_address(owner, mint)


def build_memo(memo: str, signer: Pubkey) -> Instruction:
    """Build a memo instruction signed by ``signer``."""
    return create_memo(MemoParams(program_id=MEMO_PROGRAM, signer=signer, message=memo.encode("utf-8")))


def build_create_mint_account(payer: Pubkey, mint: Pubkey, lamports: int) -> Instruction:
    """Allocate a rent-exempt mint account owned by the token program."""
    return create_account(CreateAccountParams(
        from_pubkey=payer,
        to_pubkey=mint,
        lamports=lamports,
        space=MINT_ACCOUNT_SIZE,
        owner=TOKEN_PROGRAM,
    ))


def build_initialize_mint(mint: Pubkey, authority: Pubkey, decimals: int = 0) -> Instruction:
    """Initialize a mint whose mint and freeze authority is ``authority``."""
    return initialize_mint(InitializeMintParams(
        decimals=decimals,
        program_id=TOKEN_PROGRAM,
        mint=mint,
        mint_authority=authority,
        freeze_authority=authority,
    ))


def build_create_associated_account(payer: Pubkey, owner: Pubkey, mint: Pubkey) -> Instruction:
    return create_associated_token_account(payer, owner, mint)


def build_mint_to(mint: Pubkey, destination: Pubkey, authority: Pubkey, amount: int) -> Instruction:
    return mint_to(MintToParams(
        program_id=TOKEN_PROGRAM,
        mint=mint,
        dest=destination,
        mint_authority=authority,
        amount=amount,
        signers=[],
    ))


def build_transfer(source: Pubkey, destination: Pubkey, owner: Pubkey, amount: int) -> Instruction:
    return transfer(TransferParams(
        program_id=TOKEN_PROGRAM,
        source=source,
        dest=destination,
        owner=owner,
        amount=amount,
        signers=[],
    ))


def _borsh_string(value: str) -> bytes:
    encoded = value.encode("utf-8")
    return struct.pack("<I", len(encoded)) + encoded


def encode_create_metadata_v3(
    name: str,
    symbol: str,
    uri: str,
    creators: Optional[Sequence[tuple]] = None,
    seller_fee_basis_points: int = 0,
    is_mutable: bool = True,
) -> bytes:
    """Serialize CreateMetadataAccountV3 instruction data.

    Args:
        name: Asset name
        symbol: Asset symbol
        uri: Off-chain metadata URI
        creators: ``(address, verified, share)`` tuples
        seller_fee_basis_points: Royalty in basis points
        is_mutable: Whether the metadata may be updated later

    Returns:
        Instruction data bytes
    """
    data = bytearray([CREATE_METADATA_ACCOUNT_V3])
    data += _borsh_string(name)
    data += _borsh_string(symbol)
    data += _borsh_string(uri)
    data += struct.pack("<H", seller_fee_basis_points)
    if creators:
        data += b"\x01" + struct.pack("<I", len(creators))
        for address, verified, share in creators:
            data += bytes(address) + bytes([1 if verified else 0, share])
    else:
        data += b"\x00"
    data += b"\x00"  # collection
    data += b"\x00"  # uses
    data += bytes([1 if is_mutable else 0])
    data += b"\x00"  # collection details
    return bytes(data)


def build_create_metadata_v3(
    mint: Pubkey,
    authority: Pubkey,
    payer: Pubkey,
    name: str,
    symbol: str,
    uri: str,
) -> Instruction:
    """Create the metadata account of a mint with ``authority`` as sole verified creator."""
    metadata_account = Pubkey.from_string(get_metadata_account_address(str(mint)))
    accounts: List[AccountMeta] = [
        AccountMeta(pubkey=metadata_account, is_signer=False, is_writable=True),
        AccountMeta(pubkey=mint, is_signer=False, is_writable=False),
        AccountMeta(pubkey=authority, is_signer=True, is_writable=False),
        AccountMeta(pubkey=payer, is_signer=True, is_writable=True),
        AccountMeta(pubkey=authority, is_signer=True, is_writable=False),
        AccountMeta(pubkey=SYSTEM_PROGRAM, is_signer=False, is_writable=False),
        # Optional rent sysvar, omitted by passing the program id
        AccountMeta(pubkey=METADATA_PROGRAM, is_signer=False, is_writable=False),
    ]
    data = encode_create_metadata_v3(name, symbol, uri, creators=[(authority, True, 100)])
    return Instruction(program_id=METADATA_PROGRAM, data=data, accounts=accounts)
