"""
Transaction data models for the Finternet SDK.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class TokenBalance(BaseModel):
    """
    One entry of a transaction's pre or post token-balance snapshot.

    ``amount`` is kept as the raw base-unit string reported by the node.
    """
    model_config = ConfigDict(frozen=True)

    account_index: int
    mint: str
    amount: Optional[str] = None
    decimals: Optional[int] = None
    owner: Optional[str] = None

    @classmethod
    def from_rpc(cls, entry: Dict[str, Any]) -> "TokenBalance":
        """Build a balance entry from a ``preTokenBalances`` item.

        Args:
            entry: Raw balance entry from ``getTransaction``

        Returns:
            TokenBalance instance
        """
        ui_amount = entry.get("uiTokenAmount")
        if not isinstance(ui_amount, dict):
            ui_amount = {}
        amount = ui_amount.get("amount")
        return cls(
            account_index=entry["accountIndex"],
            mint=entry.get("mint", ""),
            amount=None if amount is None else str(amount),
            decimals=ui_amount.get("decimals"),
            owner=entry.get("owner"),
        )

    @property
    def base_units(self) -> int:
        """Amount as an integer; missing or malformed amounts count as zero."""
        try:
            value = int(self.amount)
        except (TypeError, ValueError):
            return 0
        return value if value >= 0 else 0


class TransferRecord(BaseModel):
    """
    One balance-changing event inferred from a transaction.

    ``amount`` is the absolute balance delta. ``from_address`` and
    ``to_address`` are best-effort: when the counterparties cannot be told
    apart from the balance snapshots both hold the queried address.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    signature: str
    from_address: str = Field(alias="from")
    to_address: str = Field(alias="to")
    amount: int = Field(ge=0)
    mint: str
    timestamp: int = 0
    memo: Optional[str] = None

    @property
    def is_self_referential(self) -> bool:
        """Whether the direction could not be resolved."""
        return self.from_address == self.to_address
