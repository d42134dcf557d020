"""Constants used throughout the Finternet SDK.

This module defines program ids, well-known mints and account layout sizes.
"""

# Solana program IDs
SYSTEM_PROGRAM_ID = "11111111111111111111111111111111"
TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
ASSOCIATED_TOKEN_PROGRAM_ID = "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL"
METADATA_PROGRAM_ID = "metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s"
MEMO_PROGRAM_ID = "MemoSq4gqABAXKb96qnH8TysNcWxMyWCqXgDLGmfcHr"
MEMO_V1_PROGRAM_ID = "Memo1UhkJRfHyvLMcVucJwxXeuD728EqVDDwQDxFMNo"

MEMO_PROGRAM_IDS = frozenset({MEMO_PROGRAM_ID, MEMO_V1_PROGRAM_ID})

# The all-zero public key, rendered in base58
DEFAULT_PUBKEY = "11111111111111111111111111111111"

# USDC mints
USDC_DEVNET_MINT = "4zMMC9srt5Ri5X14GAgXhaHii3GnPAEERYPJgZJDncDU"
USDC_MAINNET_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
USDC_DECIMALS = 6

# Account layout sizes in bytes
MINT_ACCOUNT_SIZE = 82
TOKEN_ACCOUNT_SIZE = 165

LAMPORTS_PER_SOL = 1_000_000_000

# Asset tokenization defaults
ASSET_SYMBOL = "FINT"
ASSET_METADATA_URI = "https://api.finternet.com/metadata/{mint}"
MAX_NAME_LENGTH = 32
MAX_SYMBOL_LENGTH = 10
MAX_URI_LENGTH = 200

# Upper bound accepted by getSignaturesForAddress
MAX_SIGNATURES_LIMIT = 1000

# Mapping of program IDs to human-readable names
PROGRAM_NAMES = {
    SYSTEM_PROGRAM_ID: "System Program",
    TOKEN_PROGRAM_ID: "SPL Token Program",
    ASSOCIATED_TOKEN_PROGRAM_ID: "Associated Token Account Program",
    METADATA_PROGRAM_ID: "Metaplex Token Metadata",
    MEMO_PROGRAM_ID: "Memo Program",
    MEMO_V1_PROGRAM_ID: "Memo Program (v1)",
}
