"""
Transfer builder.

Builds the single native SOL transfer a token page payment consists of.
"""

from solders.hash import Hash
from solders.instruction import Instruction
from solders.message import Message
from solders.pubkey import Pubkey
from solders.system_program import TransferParams, transfer
from solders.transaction import Transaction


def build_transfer_instruction(sender: Pubkey, recipient: Pubkey, lamports: int) -> Instruction:
    """
    Build a SystemProgram transfer instruction.

    Args:
        sender: Paying account
        recipient: Receiving account
        lamports: Amount in lamports

    Returns:
        Transfer instruction

    Raises:
        ValueError: Non-positive amount
    """
    if lamports <= 0:
        raise ValueError(f"Transfer amount must be positive, got {lamports} lamports")
    return transfer(TransferParams(from_pubkey=sender, to_pubkey=recipient, lamports=lamports))


def build_transfer_transaction(
    sender: Pubkey,
    recipient: Pubkey,
    lamports: int,
    recent_blockhash: Hash,
) -> Transaction:
    """
    Build an unsigned transaction holding one transfer, paid for by sender.

    The signing agent signs it; nothing here touches key material.
    """
    instruction = build_transfer_instruction(sender, recipient, lamports)
    message = Message.new_with_blockhash([instruction], sender, recent_blockhash)
    return Transaction.new_unsigned(message)
