"""
Token data models for the Finternet SDK.

This module defines Pydantic models for token-account projections: decoded
token accounts, holdings scans and discovered tokens. Amounts are always in
the mint's base unit.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TokenAccountView(BaseModel):
    """
    A decoded token account: one owner's balance of one mint.
    """
    model_config = ConfigDict(frozen=True)

    owner: str
    mint: str
    amount: int = Field(ge=0, lt=2 ** 64)


class DecodeFailure(BaseModel):
    """
    A token account that could not be decoded during a holdings scan.
    """
    model_config = ConfigDict(frozen=True)

    index: int
    pubkey: Optional[str] = None
    encoding: Optional[str] = None
    reason: str


class HoldingsScan(BaseModel):
    """
    Result of scanning every token account of an owner.

    ``holdings`` maps mint to base-unit amount; ``failures`` records the
    accounts that were skipped because they could not be decoded.
    """
    owner: str
    holdings: Dict[str, int] = Field(default_factory=dict)
    failures: List[DecodeFailure] = Field(default_factory=list)
    account_count: int = 0

    @property
    def decoded_count(self) -> int:
        """Number of accounts that decoded successfully."""
        return self.account_count - len(self.failures)

    @property
    def has_failures(self) -> bool:
        """Whether any account was skipped."""
        return bool(self.failures)


class DiscoveredToken(BaseModel):
    """
    A positive holding enriched with a best-effort display name.

    A missing ``display_name`` means no metadata was found; it is not an error.
    """
    model_config = ConfigDict(frozen=True)

    mint: str
    balance: int = Field(ge=0)
    display_name: Optional[str] = None

    @property
    def label(self) -> str:
        """Get a label for the token, falling back to a shortened mint."""
        if self.display_name:
            return self.display_name

        return f"Unknown Token ({self.mint[:8]}...)"
