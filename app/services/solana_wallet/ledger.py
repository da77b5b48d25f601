"""
Ledger access for payments.

The Balance Oracle side of the payment flow: spendable balance, recent
blockhash and (optionally) signature confirmation, read from a Solana RPC
node.
"""

from typing import Protocol

from loguru import logger
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solders.hash import Hash
from solders.pubkey import Pubkey
from solders.signature import Signature

from app.utils.security import mask_address


class Ledger(Protocol):
    """Read access to the ledger used by the payment workflow."""

    async def get_balance_lamports(self, owner: Pubkey) -> int: ...

    async def get_latest_blockhash(self) -> Hash: ...

    async def confirm(self, signature: str) -> None: ...


class SolanaRpcLedger:
    """
    Ledger backed by a Solana JSON-RPC node.

    Errors from the RPC client propagate; the workflow maps them to
    WalletError.
    """

    def __init__(self, client: AsyncClient, commitment: Commitment) -> None:
        """
        Initialize RPC ledger.

        Args:
            client: Solana async RPC client
            commitment: Commitment level for reads and confirmation
        """
        self.client = client
        self.commitment = commitment

    async def get_balance_lamports(self, owner: Pubkey) -> int:
        """
        Get spendable balance.

        Args:
            owner: Account public key

        Returns:
            Balance in lamports
        """
        response = await self.client.get_balance(owner, commitment=self.commitment)
        lamports = response.value
        logger.debug(f"Balance of {mask_address(str(owner))}: {lamports} lamports")
        return lamports

    async def get_latest_blockhash(self) -> Hash:
        """Recent blockhash for a new transaction."""
        response = await self.client.get_latest_blockhash(commitment=self.commitment)
        return response.value.blockhash

    async def confirm(self, signature: str) -> None:
        """
        Wait until a signature reaches the configured commitment.

        Raises:
            Exception: RPC error or transaction not confirmed in time
        """
        await self.client.confirm_transaction(
            Signature.from_string(signature), commitment=self.commitment
        )
        logger.info(f"Transaction confirmed: {mask_address(signature)}")
