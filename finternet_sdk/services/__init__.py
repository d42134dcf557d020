"""Services that build and submit transactions on top of the core engine."""

from finternet_sdk.services.base_service import BaseService
from finternet_sdk.services.submission import LedgerSubmitter
from finternet_sdk.services.asset_service import AssetService
from finternet_sdk.services.payment_service import PaymentService, usdc_to_base_units
from finternet_sdk.services.identity_service import IdentityService

__all__ = [
    'BaseService',
    'LedgerSubmitter',
    'AssetService',
    'PaymentService',
    'usdc_to_base_units',
    'IdentityService',
]
