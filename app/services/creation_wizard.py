"""
Token page creation wizard.

Step 1 takes the token address and runs the payment. Step 2 (name, logo,
theme) is a TokenDetailsStep, which can only be obtained from a succeeded
payment. The payment signature is sent as the creation idempotency key, so
one payment yields at most one token page even if step 2 is retried.
"""

from dataclasses import dataclass
from typing import Any

from loguru import logger

from app.clients.token_api_client import TokenApiClient
from app.config.business_constants import (
    DEFAULT_BUTTON_STYLE,
    DEFAULT_FONT_STYLE,
    DEFAULT_THEME,
)
from app.services.image_storage_service import UploadedImage
from app.services.page_renderer import page_path
from app.services.payment_workflow import PaymentReceipt, PaymentState, PaymentWorkflow
from app.utils.exceptions import PaymentInProgressError


@dataclass
class CreatedTokenPage:
    """Result of step 2."""

    record: dict[str, Any]
    page_path: str
    payment_signature: str

    @property
    def is_pending(self) -> bool:
        """True when the server accepted the token but has not stored it yet."""
        return bool(self.record.get("pending"))


class TokenDetailsStep:
    """
    Step 2 of the wizard.

    Created by CreationWizard.pay() from a succeeded payment only.
    """

    def __init__(
        self,
        workflow: PaymentWorkflow,
        receipt: PaymentReceipt,
        api_client: TokenApiClient,
        chain: str,
    ) -> None:
        if workflow.state is not PaymentState.SUCCEEDED or workflow.receipt is not receipt:
            raise PaymentInProgressError("Token details require a completed payment")
        self.workflow = workflow
        self.receipt = receipt
        self.api_client = api_client
        self.chain = chain
        self.result: CreatedTokenPage | None = None

    @property
    def token_address(self) -> str:
        return self.receipt.token_address

    async def create(
        self,
        token_name: str,
        logo: UploadedImage | None = None,
        theme: str = DEFAULT_THEME,
        button_style: str = DEFAULT_BUTTON_STYLE,
        font_style: str = DEFAULT_FONT_STYLE,
    ) -> CreatedTokenPage:
        """
        Create the token page paid for by this step's receipt.

        A repeated call after success returns the first result.

        Raises:
            ValidationError: Server rejected the fields
            PersistenceUnavailableError: Server unavailable
        """
        if self.result is not None:
            return self.result

        fields = {
            "tokenName": token_name,
            "tokenAddress": self.receipt.token_address,
            "chain": self.chain,
            "theme": theme,
            "buttonStyle": button_style,
            "fontStyle": font_style,
        }
        record = await self.api_client.create_token(
            fields, logo=logo, creation_key=self.receipt.signature
        )

        self.result = CreatedTokenPage(
            record=record,
            page_path=page_path(record.get("tokenName") or token_name),
            payment_signature=self.receipt.signature,
        )
        logger.info(
            f"Token page {'pending' if self.result.is_pending else 'created'}: "
            f"{self.result.page_path}"
        )
        return self.result


class CreationWizard:
    """Two-step token page creation flow."""

    def __init__(
        self,
        workflow: PaymentWorkflow,
        api_client: TokenApiClient,
        chain: str = "solana",
    ) -> None:
        """
        Initialize wizard.

        Args:
            workflow: Payment workflow for this page
            api_client: Token API client
            chain: Chain the token lives on
        """
        self.workflow = workflow
        self.api_client = api_client
        self.chain = chain

    async def pay(self, token_address: str) -> TokenDetailsStep:
        """
        Step 1: pay for the page.

        Returns:
            Step 2, available only after the payment succeeded

        Raises:
            AppError: Any payment failure (see PaymentWorkflow.submit)
        """
        receipt = await self.workflow.submit(token_address)
        return TokenDetailsStep(self.workflow, receipt, self.api_client, self.chain)
