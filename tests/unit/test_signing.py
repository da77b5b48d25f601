"""
Tests for the signing boundary and transfer builder.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.system_program import ID as SYSTEM_PROGRAM_ID
from solders.system_program import decode_transfer

from app.services.solana_wallet.signing import (
    KeypairSigningAgent,
    SigningOutcome,
    SigningResult,
    classify_signing_error,
)
from app.services.solana_wallet.transfer_builder import (
    build_transfer_instruction,
    build_transfer_transaction,
)


class TestClassifySigningError:
    """Wallet error classification."""

    @pytest.mark.parametrize(
        "message",
        [
            "User rejected the request.",
            "WalletSignTransactionError: User cancelled",
            "user canceled signing",
            "User denied transaction signature",
        ],
    )
    def test_rejections(self, message):
        assert classify_signing_error(message) is SigningOutcome.REJECTED

    @pytest.mark.parametrize(
        "message",
        [
            "Transaction simulation failed: Insufficient funds for fee",
            "insufficient lamports 100, need 110000000",
            "Attempt to debit an account but found no record of a prior credit.",
        ],
    )
    def test_insufficient_funds(self, message):
        assert classify_signing_error(message) is SigningOutcome.INSUFFICIENT_FUNDS

    def test_rejection_wins_over_funds(self):
        """A rejection that mentions funds is still a rejection."""
        message = "User rejected: insufficient funds warning shown"
        assert classify_signing_error(message) is SigningOutcome.REJECTED

    def test_other_errors_fail(self):
        assert classify_signing_error("Blockhash not found") is SigningOutcome.FAILED


class TestSigningResult:
    """SigningResult constructors."""

    def test_signed(self):
        result = SigningResult.signed("sig")
        assert result.outcome is SigningOutcome.SIGNED
        assert result.signature == "sig"
        assert result.error is None

    def test_from_exception_without_message_uses_class_name(self):
        result = SigningResult.from_error(TimeoutError())
        assert result.outcome is SigningOutcome.FAILED
        assert result.error == "TimeoutError"


class TestTransferBuilder:
    """SystemProgram transfer construction."""

    def test_instruction_carries_amount(self):
        sender, recipient = Pubkey.new_unique(), Pubkey.new_unique()

        instruction = build_transfer_instruction(sender, recipient, 110_000_000)

        assert instruction.program_id == SYSTEM_PROGRAM_ID
        params = decode_transfer(instruction)
        assert params.from_pubkey == sender
        assert params.to_pubkey == recipient
        assert params.lamports == 110_000_000

    @pytest.mark.parametrize("lamports", [0, -1])
    def test_non_positive_amount_rejected(self, lamports):
        with pytest.raises(ValueError):
            build_transfer_instruction(Pubkey.new_unique(), Pubkey.new_unique(), lamports)

    def test_transaction_paid_by_sender(self):
        sender, recipient = Pubkey.new_unique(), Pubkey.new_unique()
        blockhash = Hash.new_unique()

        transaction = build_transfer_transaction(sender, recipient, 1_000, blockhash)

        assert transaction.message.account_keys[0] == sender
        assert transaction.message.recent_blockhash == blockhash
        assert len(transaction.message.instructions) == 1


class TestKeypairSigningAgent:
    """Local keypair signing agent."""

    @pytest.mark.asyncio
    async def test_signs_and_sends(self):
        keypair = Keypair()
        signature = Signature.new_unique()
        client = AsyncMock()
        client.send_raw_transaction.return_value = MagicMock(value=signature)
        agent = KeypairSigningAgent(keypair, client)
        transaction = build_transfer_transaction(
            keypair.pubkey(), Pubkey.new_unique(), 1_000, Hash.new_unique()
        )

        result = await agent.sign_and_send(transaction)

        assert result.outcome is SigningOutcome.SIGNED
        assert result.signature == str(signature)
        client.send_raw_transaction.assert_awaited_once()
        assert agent.public_key == keypair.pubkey()

    @pytest.mark.asyncio
    async def test_rpc_error_is_classified(self):
        keypair = Keypair()
        client = AsyncMock()
        client.send_raw_transaction.side_effect = RuntimeError(
            "Transaction simulation failed: Attempt to debit an account but found no record of a prior credit."
        )
        agent = KeypairSigningAgent(keypair, client)
        transaction = build_transfer_transaction(
            keypair.pubkey(), Pubkey.new_unique(), 1_000, Hash.new_unique()
        )

        result = await agent.sign_and_send(transaction)

        assert result.outcome is SigningOutcome.INSUFFICIENT_FUNDS
        assert result.signature is None
