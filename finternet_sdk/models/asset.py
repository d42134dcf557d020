"""
Asset data models for the Finternet SDK.
"""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class AssetMetadata(BaseModel):
    """
    Model for a tokenized asset.

    Assets created through ``tokenize_asset`` carry real values in every
    field. Assets read back from the ledger only recover ``name`` and
    ``issuer``; the fields listed in ``placeholder_fields`` hold fixed
    placeholder values and must not be treated as authoritative.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    value: int = Field(ge=0)
    issuer: str
    asset_type: str
    created_at: int = 0
    token_mint: Optional[str] = None
    symbol: Optional[str] = None
    uri: Optional[str] = None
    placeholder_fields: Tuple[str, ...] = ()

    @property
    def is_authoritative(self) -> bool:
        """Whether every field holds real data."""
        return not self.placeholder_fields
