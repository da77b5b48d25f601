"""
Tests for the two-step creation wizard.
"""

from unittest.mock import AsyncMock

import pytest

from app.services.creation_wizard import CreationWizard, TokenDetailsStep
from app.services.payment_workflow import PaymentReceipt, PaymentWorkflow
from app.services.solana_wallet.signing import SigningResult
from app.utils.exceptions import InsufficientFundsError, PaymentInProgressError, UserCancelledError


TOKEN_ADDRESS = "So11111111111111111111111111111111111111112"


@pytest.fixture
def api_client():
    client = AsyncMock()
    client.create_token.side_effect = lambda fields, logo=None, creation_key=None: {
        "id": 1,
        **fields,
        "viewCount": 0,
    }
    return client


class TestCreationWizard:
    """Payment gates token details."""

    @pytest.mark.asyncio
    async def test_paid_wizard_creates_page(self, solana_context, fake_agent, api_client):
        wizard = CreationWizard(PaymentWorkflow(solana_context, fake_agent), api_client)

        details = await wizard.pay(TOKEN_ADDRESS)
        created = await details.create("TestCoin", theme="matrix")

        assert created.page_path == "/coin/testcoin"
        assert created.is_pending is False
        assert created.payment_signature == fake_agent.result.signature
        fields = api_client.create_token.await_args.args[0]
        assert fields["tokenAddress"] == TOKEN_ADDRESS
        assert fields["chain"] == "solana"
        assert fields["theme"] == "matrix"
        assert api_client.create_token.await_args.kwargs["creation_key"] == fake_agent.result.signature

    @pytest.mark.asyncio
    async def test_failed_payment_gives_no_details_step(self, solana_context, fake_agent, api_client):
        fake_agent.result = SigningResult.from_error("User rejected the request.")
        wizard = CreationWizard(PaymentWorkflow(solana_context, fake_agent), api_client)

        with pytest.raises(UserCancelledError):
            await wizard.pay(TOKEN_ADDRESS)

        api_client.create_token.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_insufficient_balance_gives_no_details_step(
        self, solana_context, fake_agent, fake_ledger, api_client
    ):
        fake_ledger.balance_lamports = 50_000_000
        wizard = CreationWizard(PaymentWorkflow(solana_context, fake_agent), api_client)

        with pytest.raises(InsufficientFundsError):
            await wizard.pay(TOKEN_ADDRESS)

        assert fake_agent.transactions == []

    def test_details_step_requires_succeeded_workflow(self, solana_context, fake_agent, api_client):
        workflow = PaymentWorkflow(solana_context, fake_agent)
        receipt = PaymentReceipt(
            signature="forged", token_address=TOKEN_ADDRESS, sender="x", amount_sol=solana_context.amount_sol
        )

        with pytest.raises(PaymentInProgressError):
            TokenDetailsStep(workflow, receipt, api_client, "solana")

    @pytest.mark.asyncio
    async def test_details_step_rejects_foreign_receipt(self, solana_context, fake_agent, api_client):
        workflow = PaymentWorkflow(solana_context, fake_agent)
        await workflow.submit(TOKEN_ADDRESS)
        forged = PaymentReceipt(
            signature="forged", token_address=TOKEN_ADDRESS, sender="x", amount_sol=solana_context.amount_sol
        )

        with pytest.raises(PaymentInProgressError):
            TokenDetailsStep(workflow, forged, api_client, "solana")

    @pytest.mark.asyncio
    async def test_second_create_returns_first_result(self, solana_context, fake_agent, api_client):
        wizard = CreationWizard(PaymentWorkflow(solana_context, fake_agent), api_client)
        details = await wizard.pay(TOKEN_ADDRESS)

        first = await details.create("TestCoin")
        second = await details.create("OtherCoin")

        assert second is first
        api_client.create_token.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_pending_record_reported(self, solana_context, fake_agent, api_client):
        api_client.create_token.side_effect = None
        api_client.create_token.return_value = {
            "id": None,
            "tokenName": "TestCoin",
            "pending": True,
            "status": "pending",
        }
        wizard = CreationWizard(PaymentWorkflow(solana_context, fake_agent), api_client)
        details = await wizard.pay(TOKEN_ADDRESS)

        created = await details.create("TestCoin")

        assert created.is_pending is True
        assert created.page_path == "/coin/testcoin"
