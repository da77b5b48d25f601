"""
Solana payment context.

Created once at startup by init_solana_context() and passed to the payment
workflow. Nothing is initialized at import time.
"""

from dataclasses import dataclass
from decimal import Decimal

from loguru import logger
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solders.pubkey import Pubkey

from app.config.constants import SOLANA_RPC_TIMEOUT
from app.config.settings import Settings
from app.services.solana_wallet.ledger import Ledger, SolanaRpcLedger
from app.utils.formatters import sol_to_lamports


@dataclass
class SolanaContext:
    """Handle holding everything a payment needs."""

    ledger: Ledger
    recipient: Pubkey
    amount_sol: Decimal
    fee_buffer_sol: Decimal
    signing_timeout: float
    require_confirmation: bool = False
    client: AsyncClient | None = None

    @property
    def required_sol(self) -> Decimal:
        """Balance needed before a payment is attempted."""
        return self.amount_sol + self.fee_buffer_sol

    @property
    def amount_lamports(self) -> int:
        return sol_to_lamports(self.amount_sol)

    async def close(self) -> None:
        """Close the RPC client, if this context owns one."""
        if self.client is not None:
            await self.client.close()
            logger.info("Solana RPC client closed")


def init_solana_context(settings: Settings, client: AsyncClient | None = None) -> SolanaContext:
    """
    Initialize the Solana payment context.

    Args:
        settings: Application settings
        client: Existing RPC client (a new one is created when omitted)

    Returns:
        SolanaContext

    Raises:
        ValueError: Invalid recipient address
    """
    commitment = Commitment(settings.solana_commitment)
    if client is None:
        client = AsyncClient(settings.solana_rpc_url, commitment=commitment, timeout=SOLANA_RPC_TIMEOUT)

    recipient = Pubkey.from_string(settings.payment_recipient_address)
    context = SolanaContext(
        ledger=SolanaRpcLedger(client, commitment),
        recipient=recipient,
        amount_sol=settings.payment_amount_sol,
        fee_buffer_sol=settings.payment_fee_buffer_sol,
        signing_timeout=settings.payment_signing_timeout,
        require_confirmation=settings.payment_require_confirmation,
        client=client,
    )
    logger.info(
        f"Solana context initialized: rpc={settings.solana_rpc_url}, "
        f"fee={context.amount_sol} SOL, required={context.required_sol} SOL"
    )
    return context
