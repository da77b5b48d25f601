"""
Solana wallet services.

Balance oracle, transfer builder and signing boundary used by the payment
workflow.
"""

from .context import SolanaContext, init_solana_context
from .ledger import Ledger, SolanaRpcLedger
from .signing import (
    KeypairSigningAgent,
    SigningAgent,
    SigningOutcome,
    SigningResult,
    classify_signing_error,
)
from .transfer_builder import build_transfer_instruction, build_transfer_transaction


__all__ = [
    "KeypairSigningAgent",
    "Ledger",
    "SigningAgent",
    "SigningOutcome",
    "SigningResult",
    "SolanaContext",
    "SolanaRpcLedger",
    "build_transfer_instruction",
    "build_transfer_transaction",
    "classify_signing_error",
    "init_solana_context",
]
