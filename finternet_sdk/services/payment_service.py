"""Token payment service.

Moves SPL token balances between wallets through associated token accounts.
"""

import time
from decimal import Decimal, InvalidOperation, ROUND_DOWN
from typing import Optional, Union

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from finternet_sdk.clients.ledger_client import LedgerClient
from finternet_sdk.constants import USDC_DECIMALS, USDC_DEVNET_MINT
from finternet_sdk.models.transaction import TransferRecord
from finternet_sdk.programs.instructions import (
    associated_token_address,
    build_create_associated_account,
    build_memo,
    build_transfer,
)
from finternet_sdk.services.base_service import BaseService
from finternet_sdk.services.submission import LedgerSubmitter
from finternet_sdk.utils.errors import FinternetError, ValidationError
from finternet_sdk.utils.validation import require_public_key

USDC_UNIT = Decimal(10) ** USDC_DECIMALS


def usdc_to_base_units(amount_usdc: Union[float, str, Decimal]) -> int:
    """Convert a USDC amount (e.g. ``10.50``) to base units, truncating.

    Raises:
        ValidationError: If the amount is not a non-negative number
    """
    try:
        amount = Decimal(str(amount_usdc))
    except InvalidOperation:
        raise ValidationError(f"Invalid USDC amount: {amount_usdc!r}")
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"Invalid USDC amount: {amount_usdc!r}")
    return int((amount * USDC_UNIT).to_integral_value(rounding=ROUND_DOWN))


class PaymentService(BaseService):
    """Service for token payments and balance checks."""

    def __init__(self, ledger: LedgerClient, submitter: LedgerSubmitter, usdc_mint: str = USDC_DEVNET_MINT):
        super().__init__()
        self.ledger = ledger
        self.submitter = submitter
        self.usdc_mint = usdc_mint

    async def send_payment(
        self,
        from_wallet: Keypair,
        to_pubkey: str,
        amount: int,
        token_mint: str,
        memo: Optional[str] = None
    ) -> str:
        """Send SPL tokens between wallets.

        Creates the recipient's associated token account when it does not
        exist yet, and attaches ``memo`` when given.

        Args:
            from_wallet: Sender keypair; pays fees and signs
            to_pubkey: Recipient wallet address
            amount: Amount in base units
            token_mint: Mint of the token to send
            memo: Optional memo text

        Returns:
            The confirmed transaction signature

        Raises:
            ValidationError: If an address or the amount is invalid
            RpcError: If the recipient account lookup fails
            SubmissionError: If the transaction fails
        """
        require_public_key(to_pubkey)
        require_public_key(token_mint)
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValidationError(f"Payment amount must be a positive integer, got {amount!r}")

        sender = from_wallet.pubkey()
        recipient = Pubkey.from_string(to_pubkey)
        mint = Pubkey.from_string(token_mint)
        self.logger.info(
            f"Sending payment: {amount} tokens from {sender} to {recipient} (mint: {token_mint})"
        )

        from_ata = associated_token_address(sender, mint)
        to_ata = associated_token_address(recipient, mint)

        instructions = []
        if await self.ledger.get_account(str(to_ata)) is None:
            self.logger.info("Creating associated token account for recipient")
            instructions.append(build_create_associated_account(sender, recipient, mint))

        instructions.append(build_transfer(from_ata, to_ata, sender, amount))

        if memo:
            instructions.append(build_memo(memo, sender))

        signature = await self.submitter.submit(instructions, fee_payer=from_wallet)
        self.logger.info(f"Payment sent successfully! Signature: {signature}")
        return signature

    async def send_usdc_payment(
        self,
        from_wallet: Keypair,
        to_pubkey: str,
        amount_usdc: Union[float, str, Decimal],
        memo: Optional[str] = None
    ) -> str:
        """Send a USDC payment; ``amount_usdc`` is in whole USDC (6 decimals)."""
        return await self.send_payment(
            from_wallet,
            to_pubkey,
            usdc_to_base_units(amount_usdc),
            self.usdc_mint,
            memo,
        )

    async def get_token_balance(self, wallet_pubkey: str, token_mint: str) -> int:
        """Get a wallet's base-unit balance of a mint.

        A wallet without an associated token account holds 0.
        """
        require_public_key(wallet_pubkey)
        require_public_key(token_mint)
        ata = associated_token_address(Pubkey.from_string(wallet_pubkey), Pubkey.from_string(token_mint))

        try:
            balance = await self.ledger.get_token_account_balance(str(ata))
        except FinternetError:
            self.logger.warning(f"No token account found for {wallet_pubkey} with mint {token_mint}")
            return 0

        try:
            amount = int(balance.get("amount", "0"))
        except (TypeError, ValueError):
            amount = 0
        self.logger.info(f"Token balance for {wallet_pubkey} (mint: {token_mint}): {amount}")
        return amount

    async def get_usdc_balance(self, wallet_pubkey: str) -> Decimal:
        """Get a wallet's USDC balance in whole USDC."""
        base_units = await self.get_token_balance(wallet_pubkey, self.usdc_mint)
        return Decimal(base_units) / USDC_UNIT

    async def can_afford_payment(self, wallet_pubkey: str, amount: int, token_mint: str) -> bool:
        """Check if a wallet has sufficient balance for a payment."""
        return await self.get_token_balance(wallet_pubkey, token_mint) >= amount

    def create_transaction_record(
        self,
        signature: str,
        from_pubkey: str,
        to_pubkey: str,
        amount: int,
        token_mint: str,
        memo: Optional[str] = None
    ) -> TransferRecord:
        """Create a transfer record for a payment this client sent, stamped now."""
        return TransferRecord(
            signature=signature,
            from_address=from_pubkey,
            to_address=to_pubkey,
            amount=amount,
            mint=token_mint,
            timestamp=int(time.time()),
            memo=memo,
        )

    async def request_devnet_usdc(self, wallet_pubkey: str) -> str:
        """Report whether the wallet's devnet USDC account exists and how to fund it."""
        require_public_key(wallet_pubkey)
        ata = associated_token_address(Pubkey.from_string(wallet_pubkey), Pubkey.from_string(self.usdc_mint))
        self.logger.info(f"USDC associated token account for {wallet_pubkey}: {ata}")

        try:
            balance = await self.ledger.get_token_account_balance(str(ata))
        except FinternetError:
            return (
                f"USDC ATA needs to be created: {ata}. Use `spl-token create-account {self.usdc_mint}` "
                f"or fund it via a faucet service."
            )
        return f"USDC ATA exists with balance: {balance.get('uiAmountString', '0')}"
