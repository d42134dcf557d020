"""Transaction submission.

Signs an instruction list, sends it once and waits for confirmation. The
submitter never retries a send.
"""

import asyncio
import time
from typing import Optional, Sequence

from solders.errors import SignerError
from solders.hash import Hash
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import Message
from solders.transaction import Transaction

from finternet_sdk.clients.ledger_client import LedgerClient
from finternet_sdk.logging_config import get_logger
from finternet_sdk.utils.errors import FinternetError, SubmissionError

# Get logger
logger = get_logger(__name__)

COMMITMENT_RANK = {"processed": 0, "confirmed": 1, "finalized": 2}


class LedgerSubmitter:
    """Submits signed transactions and waits for confirmation."""

    def __init__(
        self,
        ledger: LedgerClient,
        confirm_timeout: Optional[float] = None,
        poll_interval: float = 0.5
    ):
        """Initialize the submitter.

        Args:
            ledger: Query client used for blockhashes, sending and status polling
            confirm_timeout: Seconds to wait for confirmation; defaults to config
            poll_interval: Seconds between status polls
        """
        self.ledger = ledger
        self.confirm_timeout = confirm_timeout if confirm_timeout is not None else ledger.config.confirm_timeout
        self.poll_interval = poll_interval

    def _reached_commitment(self, status: dict) -> bool:
        wanted = COMMITMENT_RANK.get(self.ledger.config.commitment, 1)
        reached = COMMITMENT_RANK.get(status.get("confirmationStatus") or "", -1)
        if status.get("confirmationStatus") is None and status.get("confirmations") is None:
            # Rooted transactions report neither field
            return True
        return reached >= wanted

    async def submit(
        self,
        instructions: Sequence[Instruction],
        fee_payer: Keypair,
        signers: Sequence[Keypair] = ()
    ) -> str:
        """Sign, send and confirm a transaction.

        Args:
            instructions: Ordered instruction list
            fee_payer: Keypair paying the fee; always signs
            signers: Additional signers

        Returns:
            The confirmed transaction signature

        Raises:
            SubmissionError: If sending fails, the transaction errors, or
                confirmation times out
        """
        if not instructions:
            raise SubmissionError("Cannot submit an empty instruction list")

        all_signers = [fee_payer] + [s for s in signers if s.pubkey() != fee_payer.pubkey()]

        try:
            blockhash = Hash.from_string(await self.ledger.get_latest_blockhash())
            message = Message.new_with_blockhash(list(instructions), fee_payer.pubkey(), blockhash)
            transaction = Transaction.new_unsigned(message)
            transaction.sign(all_signers, blockhash)
        except FinternetError as e:
            raise SubmissionError(f"Could not prepare transaction: {e.message}") from e
        except (SignerError, ValueError, TypeError) as e:
            raise SubmissionError(f"Could not sign transaction: {e}") from e

        signature = str(transaction.signatures[0])
        try:
            await self.ledger.send_raw_transaction(bytes(transaction))
        except FinternetError as e:
            raise SubmissionError(f"Transaction submission failed: {e.message}", signature=signature) from e

        logger.info(f"Transaction sent: {signature}")
        await self._confirm(signature)
        return signature

    async def _confirm(self, signature: str) -> None:
        deadline = time.monotonic() + self.confirm_timeout
        while True:
            try:
                statuses = await self.ledger.get_signature_statuses([signature])
            except FinternetError as e:
                raise SubmissionError(f"Could not confirm transaction: {e.message}", signature=signature) from e

            status = statuses[0] if statuses else None
            if status is not None:
                if status.get("err") is not None:
                    raise SubmissionError(
                        f"Transaction failed: {status['err']}",
                        signature=signature,
                        details={"err": status["err"]}
                    )
                if self._reached_commitment(status):
                    logger.info(f"Transaction confirmed: {signature}")
                    return

            if time.monotonic() >= deadline:
                raise SubmissionError(
                    f"Transaction not confirmed within {self.confirm_timeout}s", signature=signature
                )
            await asyncio.sleep(self.poll_interval)
