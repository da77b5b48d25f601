"""
Signing boundary.

The wallet is an externally supplied signing agent. Whatever it raises or
returns is turned into a SigningResult here, once. The rest of the
application only looks at SigningResult.outcome.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from loguru import logger
from solana.rpc.async_api import AsyncClient
from solana.rpc.types import TxOpts
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.transaction import Transaction


class SigningOutcome(StrEnum):
    """Result kinds reported by a signing agent."""

    SIGNED = "signed"
    REJECTED = "rejected"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    FAILED = "failed"


# Wallet error texts meaning the user declined
_REJECTION_MARKERS = ("user rejected", "user cancelled", "user canceled", "user denied")

# Network/wallet error texts meaning the payer cannot cover the transfer
_INSUFFICIENT_FUNDS_MARKERS = (
    "insufficient funds",
    "insufficient lamports",
    "attempt to debit an account but found no record of a prior credit",
)


@dataclass(frozen=True)
class SigningResult:
    """Tagged result of a sign-and-send request."""

    outcome: SigningOutcome
    signature: str | None = None
    error: str | None = None

    @classmethod
    def signed(cls, signature: str) -> "SigningResult":
        return cls(SigningOutcome.SIGNED, signature=signature)

    @classmethod
    def from_error(cls, error: BaseException | str) -> "SigningResult":
        """Classify a wallet or network error."""
        message = str(error) or error.__class__.__name__
        return cls(classify_signing_error(message), error=message)


def classify_signing_error(message: str) -> SigningOutcome:
    """
    Classify a wallet error message.

    Rejection is checked first: a rejection mentioning funds is still a
    rejection.

    Examples:
        >>> classify_signing_error("User rejected the request.")
        <SigningOutcome.REJECTED: 'rejected'>
        >>> classify_signing_error("Insufficient funds for fee")
        <SigningOutcome.INSUFFICIENT_FUNDS: 'insufficient_funds'>
    """
    text = message.lower()
    if any(marker in text for marker in _REJECTION_MARKERS):
        return SigningOutcome.REJECTED
    if any(marker in text for marker in _INSUFFICIENT_FUNDS_MARKERS):
        return SigningOutcome.INSUFFICIENT_FUNDS
    return SigningOutcome.FAILED


class SigningAgent(Protocol):
    """Wallet able to sign and relay a transaction."""

    @property
    def public_key(self) -> Pubkey | None:
        """Connected account, or None when no wallet is connected."""
        ...

    async def sign_and_send(self, transaction: Transaction) -> SigningResult: ...


class KeypairSigningAgent:
    """
    Signing agent backed by a local keypair.

    Used by the command-line client; browser wallets implement the same
    protocol on their side.
    """

    def __init__(self, keypair: Keypair, client: AsyncClient, skip_preflight: bool = False) -> None:
        self.keypair = keypair
        self.client = client
        self.skip_preflight = skip_preflight

    @property
    def public_key(self) -> Pubkey:
        return self.keypair.pubkey()

    async def sign_and_send(self, transaction: Transaction) -> SigningResult:
        """Sign with the keypair and submit the raw transaction."""
        try:
            transaction.sign([self.keypair], transaction.message.recent_blockhash)
            response = await self.client.send_raw_transaction(
                bytes(transaction),
                opts=TxOpts(skip_preflight=self.skip_preflight),
            )
        except Exception as e:
            logger.warning(f"Keypair signing agent failed: {e}")
            return SigningResult.from_error(e)
        return SigningResult.signed(str(response.value))
