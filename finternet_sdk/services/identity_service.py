"""Identity service.

Resolves identity information for public keys, records identity data as
memo entries on the ledger and proves wallet ownership with signatures.
"""

import json
import time
from typing import Dict, Optional

from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature

from finternet_sdk.clients.ledger_client import LedgerClient
from finternet_sdk.constants import LAMPORTS_PER_SOL, PROGRAM_NAMES
from finternet_sdk.models.identity import Identity
from finternet_sdk.programs.instructions import build_memo
from finternet_sdk.services.base_service import BaseService
from finternet_sdk.services.submission import LedgerSubmitter
from finternet_sdk.utils.errors import FinternetError, ValidationError
from finternet_sdk.utils.validation import require_public_key, validate_public_key


class IdentityService(BaseService):
    """Service for identity lookup, registration and ownership proofs."""

    def __init__(self, ledger: LedgerClient, submitter: LedgerSubmitter):
        super().__init__()
        self.ledger = ledger
        self.submitter = submitter

    async def get_identity(self, pubkey: str) -> Identity:
        """Get identity information for a public key.

        The ``account_status`` metadata entry is ``active`` when the account
        holds lamports, ``inactive`` when it holds none and ``not_found``
        when the balance could not be read.

        Raises:
            InvalidPublicKeyError: If ``pubkey`` is not a valid address
        """
        require_public_key(pubkey)
        self.logger.info(f"Getting identity for: {pubkey}")

        identity = Identity(pubkey=pubkey)
        try:
            lamports = await self.ledger.get_balance(pubkey)
        except FinternetError as e:
            self.logger.warning(f"Could not read balance for {pubkey}: {e.message}")
            identity = identity.with_metadata("account_status", "not_found")
        else:
            identity = identity.with_metadata("sol_balance", str(lamports / LAMPORTS_PER_SOL))
            identity = identity.with_metadata("account_status", "active" if lamports > 0 else "inactive")

        if pubkey in PROGRAM_NAMES:
            identity = identity.with_display_name(PROGRAM_NAMES[pubkey])
        return identity

    async def write_ledger_entry(self, wallet: Keypair, data: str) -> str:
        """Write a memo entry signed by ``wallet``.

        Returns:
            The confirmed transaction signature

        Raises:
            ValidationError: If ``data`` is empty
            SubmissionError: If the transaction fails
        """
        if not data:
            raise ValidationError("Ledger entry data must not be empty")
        self.logger.info(f"Writing ledger entry: {data}")

        instruction = build_memo(data, wallet.pubkey())
        signature = await self.submitter.submit([instruction], fee_payer=wallet)
        self.logger.info(f"Ledger entry written successfully! Signature: {signature}")
        return signature

    async def register_identity(
        self,
        wallet: Keypair,
        display_name: str,
        metadata: Optional[Dict[str, str]] = None
    ) -> str:
        """Register identity information as a JSON memo entry."""
        entry = {
            "action": "register_identity",
            "pubkey": str(wallet.pubkey()),
            "display_name": display_name,
            "metadata": metadata or {},
            "timestamp": int(time.time()),
        }
        return await self.write_ledger_entry(wallet, json.dumps(entry))

    def verify_wallet_ownership(self, wallet: Keypair, challenge: str) -> str:
        """Sign ``challenge`` with the wallet and return the signature string."""
        signature = wallet.sign_message(challenge.encode("utf-8"))
        self.logger.info(f"Wallet ownership verified for: {wallet.pubkey()}")
        return str(signature)

    def verify_signature(self, pubkey: str, challenge: str, signature: str) -> bool:
        """Check that ``signature`` over ``challenge`` was made by ``pubkey``.

        Malformed keys or signatures verify as False.
        """
        if not validate_public_key(pubkey):
            return False
        try:
            sig = Signature.from_string(signature)
        except ValueError:
            self.logger.warning(f"Malformed signature: {signature!r}")
            return False
        return sig.verify(Pubkey.from_string(pubkey), challenge.encode("utf-8"))

    @staticmethod
    def create_readable_address(pubkey: str) -> str:
        """Shorten an address to ``<first 8>...<last 8>``."""
        if len(pubkey) <= 16:
            return pubkey
        return f"{pubkey[:8]}...{pubkey[-8:]}"

    async def is_account_active(self, pubkey: str) -> bool:
        """Check whether an account holds lamports; unreadable accounts are inactive."""
        require_public_key(pubkey)
        try:
            return await self.ledger.get_balance(pubkey) > 0
        except FinternetError:
            return False
