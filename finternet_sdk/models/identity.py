"""
Identity and wallet models for the Finternet SDK.
"""

from typing import Dict, Optional

from pydantic import BaseModel, Field

from finternet_sdk.constants import LAMPORTS_PER_SOL


class Identity(BaseModel):
    """
    Identity information for a public key.
    """
    pubkey: str
    display_name: Optional[str] = None
    metadata: Dict[str, str] = Field(default_factory=dict)

    def with_display_name(self, name: str) -> "Identity":
        """Return a copy with the display name set."""
        return self.model_copy(update={"display_name": name})

    def with_metadata(self, key: str, value: str) -> "Identity":
        """Return a copy with one metadata entry added."""
        return self.model_copy(update={"metadata": {**self.metadata, key: value}})


class WalletInfo(BaseModel):
    """
    SOL balance and token holdings of a wallet.
    """
    pubkey: str
    sol_balance: int = 0
    token_balances: Dict[str, int] = Field(default_factory=dict)

    @property
    def sol_balance_as_sol(self) -> float:
        """Convert lamports to SOL."""
        return self.sol_balance / LAMPORTS_PER_SOL

    @property
    def has_tokens(self) -> bool:
        return bool(self.token_balances)

    @property
    def total_token_types(self) -> int:
        return len(self.token_balances)
