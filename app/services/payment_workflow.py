"""
Payment workflow controller.

Drives a single SOL payment from the connected wallet to the platform
recipient:

    idle -> checking_balance -> awaiting_signature -> confirming -> succeeded
                  |                     |                  |
                failed           cancelled/failed        failed

succeeded is terminal and unlocks token creation (see creation_wizard).
failed and cancelled are terminal but retryable: reset() or a new submit()
starts over. Pre-flight failures (no wallet, unreachable ledger, balance
below fee + buffer) never build a transaction. Post-flight failures are
never retried automatically.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from enum import StrEnum

from loguru import logger
from solders.pubkey import Pubkey
from solders.transaction import Transaction

from app.services.solana_wallet.context import SolanaContext
from app.services.solana_wallet.signing import SigningAgent, SigningOutcome, SigningResult
from app.services.solana_wallet.transfer_builder import build_transfer_transaction
from app.utils.exceptions import (
    AppError,
    InsufficientFundsError,
    PaymentInProgressError,
    TransactionFailedError,
    UserCancelledError,
    ValidationError,
    WalletError,
)
from app.utils.formatters import format_sol, lamports_to_sol
from app.utils.security import mask_address, mask_signature


class PaymentState(StrEnum):
    """Payment workflow states."""

    IDLE = "idle"
    CHECKING_BALANCE = "checking_balance"
    AWAITING_SIGNATURE = "awaiting_signature"
    CONFIRMING = "confirming"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


IN_FLIGHT_STATES = frozenset(
    {
        PaymentState.CHECKING_BALANCE,
        PaymentState.AWAITING_SIGNATURE,
        PaymentState.CONFIRMING,
    }
)
RETRYABLE_STATES = frozenset({PaymentState.FAILED, PaymentState.CANCELLED})

WALLET_NOT_CONNECTED = "Wallet not connected"
WALLET_UNAVAILABLE = "Wallet connection unavailable"
SIGNING_TIMED_OUT = "Timed out waiting for wallet"
SIGNING_ABORTED = "Payment aborted while waiting for wallet"


@dataclass
class PaymentAttempt:
    """Transient record of one payment attempt."""

    token_address: str
    sender: str
    recipient: str
    amount_sol: Decimal
    lamports: int
    signature: str | None = None
    outcome: PaymentState | None = None


@dataclass(frozen=True)
class PaymentReceipt:
    """Proof of a succeeded payment."""

    signature: str
    token_address: str
    sender: str
    amount_sol: Decimal
    paid_at: datetime = field(default_factory=lambda: datetime.now(UTC))


StateListener = Callable[[PaymentState, PaymentState], None]


class PaymentWorkflow:
    """
    Payment workflow controller.

    One instance drives the payment for one token page.
    """

    def __init__(
        self,
        context: SolanaContext,
        signing_agent: SigningAgent | None,
        on_state_change: StateListener | None = None,
    ) -> None:
        """
        Initialize workflow.

        Args:
            context: Solana payment context (ledger, recipient, amounts)
            signing_agent: Connected wallet, or None when not connected
            on_state_change: Called with (old, new) on every transition
        """
        self.context = context
        self.signing_agent = signing_agent
        self.on_state_change = on_state_change

        self._state = PaymentState.IDLE
        self._abort_event = asyncio.Event()
        self.attempt: PaymentAttempt | None = None
        self.receipt: PaymentReceipt | None = None
        self.error: AppError | None = None

    @property
    def state(self) -> PaymentState:
        return self._state

    @property
    def is_in_flight(self) -> bool:
        """True while the submit action must stay disabled."""
        return self._state in IN_FLIGHT_STATES

    @property
    def succeeded(self) -> bool:
        return self._state is PaymentState.SUCCEEDED

    def _transition(self, new_state: PaymentState) -> None:
        old_state = self._state
        self._state = new_state
        logger.info(f"Payment state: {old_state} -> {new_state}")
        if self.on_state_change is not None:
            self.on_state_change(old_state, new_state)

    def _fail(self, error: AppError, state: PaymentState = PaymentState.FAILED) -> AppError:
        """Move to a terminal failure state and return the error to raise."""
        self.error = error
        if self.attempt is not None:
            self.attempt.outcome = state
        logger.warning(f"Payment {state}: {error.message}")
        self._transition(state)
        return error

    def reset(self) -> None:
        """
        Return to idle after a failed or cancelled attempt.

        Raises:
            PaymentInProgressError: Payment in flight or already succeeded
        """
        if self.is_in_flight:
            raise PaymentInProgressError("A payment is already in progress")
        if self.succeeded:
            raise PaymentInProgressError("Payment already completed for this token page")

        self.attempt = None
        self.error = None
        self._abort_event.clear()
        if self._state is not PaymentState.IDLE:
            self._transition(PaymentState.IDLE)

    def abort(self) -> bool:
        """
        Abort the payment in flight.

        A payment waiting for the wallet fails with a WalletError.

        Returns:
            True if a payment in flight was signalled
        """
        if not self.is_in_flight:
            return False
        logger.info("Payment abort requested")
        self._abort_event.set()
        return True

    async def submit(self, token_address: str) -> PaymentReceipt:
        """
        Run the payment for a token page.

        Args:
            token_address: Token the page is created for (step 1 input)

        Returns:
            PaymentReceipt

        Raises:
            PaymentInProgressError: Called while in flight or after success
            ValidationError: Empty token address (state stays idle)
            WalletError: No wallet, ledger unreachable, timeout or abort
            InsufficientFundsError: Balance below fee + buffer, or network
                reported insufficient funds
            UserCancelledError: Signing rejected in the wallet
            TransactionFailedError: Any other signing or submission error
        """
        if self.is_in_flight:
            raise PaymentInProgressError("A payment is already in progress")
        if self.succeeded:
            raise PaymentInProgressError("Payment already completed for this token page")
        if self._state in RETRYABLE_STATES:
            self.reset()

        token_address = (token_address or "").strip()
        if not token_address:
            raise ValidationError("Token address is required")

        self._abort_event.clear()
        self._transition(PaymentState.CHECKING_BALANCE)
        try:
            return await self._run(token_address)
        except asyncio.CancelledError:
            if self.is_in_flight:
                self._fail(WalletError(SIGNING_ABORTED))
            raise

    async def _run(self, token_address: str) -> PaymentReceipt:
        sender = self.signing_agent.public_key if self.signing_agent is not None else None
        if sender is None:
            raise self._fail(WalletError(WALLET_NOT_CONNECTED))

        self.attempt = PaymentAttempt(
            token_address=token_address,
            sender=str(sender),
            recipient=str(self.context.recipient),
            amount_sol=self.context.amount_sol,
            lamports=self.context.amount_lamports,
        )

        await self._check_balance(sender)

        if self._abort_event.is_set():
            raise self._fail(WalletError(SIGNING_ABORTED))

        try:
            blockhash = await self.context.ledger.get_latest_blockhash()
        except Exception as e:
            logger.error(f"Failed to fetch recent blockhash: {e}")
            raise self._fail(WalletError(WALLET_UNAVAILABLE)) from e

        transaction = build_transfer_transaction(
            sender, self.context.recipient, self.attempt.lamports, blockhash
        )

        self._transition(PaymentState.AWAITING_SIGNATURE)
        result = await self._await_signature(transaction)
        signature = self._raise_for_result(result)
        self.attempt.signature = signature

        self._transition(PaymentState.CONFIRMING)
        if self.context.require_confirmation:
            try:
                await self.context.ledger.confirm(signature)
            except Exception as e:
                logger.error(f"Confirmation failed for {mask_signature(signature)}: {e}")
                raise self._fail(
                    TransactionFailedError("Transaction was not confirmed by the network")
                ) from e

        self.receipt = PaymentReceipt(
            signature=signature,
            token_address=token_address,
            sender=self.attempt.sender,
            amount_sol=self.attempt.amount_sol,
        )
        self.attempt.outcome = PaymentState.SUCCEEDED
        self._transition(PaymentState.SUCCEEDED)
        logger.info(
            f"Payment succeeded: {self.attempt.amount_sol} SOL from "
            f"{mask_address(self.attempt.sender)}, tx {mask_signature(signature)}"
        )
        return self.receipt

    async def _check_balance(self, sender: Pubkey) -> None:
        """Pre-flight: fail unless balance covers fee + buffer."""
        try:
            lamports = await self.context.ledger.get_balance_lamports(sender)
        except Exception as e:
            logger.error(f"Balance query failed for {mask_address(str(sender))}: {e}")
            raise self._fail(WalletError(WALLET_UNAVAILABLE)) from e

        balance = lamports_to_sol(lamports)
        required = self.context.required_sol
        if balance < required:
            raise self._fail(
                InsufficientFundsError(
                    f"You need at least {format_sol(required, 3)} SOL (including fees). "
                    f"Current balance: {format_sol(balance, 4)} SOL",
                    required=required,
                    current=balance,
                )
            )

    async def _await_signature(self, transaction: Transaction) -> SigningResult:
        """Wait for the wallet, bounded by the signing timeout and abort()."""
        sign_task = asyncio.ensure_future(self.signing_agent.sign_and_send(transaction))
        abort_task = asyncio.ensure_future(self._abort_event.wait())

        done, _ = await asyncio.wait(
            {sign_task, abort_task},
            timeout=self.context.signing_timeout,
            return_when=asyncio.FIRST_COMPLETED,
        )
        abort_task.cancel()

        if sign_task in done:
            try:
                return sign_task.result()
            except Exception as e:
                return SigningResult.from_error(e)

        sign_task.cancel()
        if self._abort_event.is_set():
            raise self._fail(WalletError(SIGNING_ABORTED))
        raise self._fail(WalletError(SIGNING_TIMED_OUT))

    def _raise_for_result(self, result: SigningResult) -> str:
        """Map a tagged signing result onto the error taxonomy."""
        if result.outcome is SigningOutcome.SIGNED and result.signature:
            return result.signature

        if result.outcome is SigningOutcome.REJECTED:
            raise self._fail(
                UserCancelledError("Transaction cancelled in wallet"),
                state=PaymentState.CANCELLED,
            )
        if result.outcome is SigningOutcome.INSUFFICIENT_FUNDS:
            raise self._fail(
                InsufficientFundsError(
                    f"Insufficient funds reported by the network: {result.error}",
                    required=self.context.required_sol,
                )
            )
        raise self._fail(
            TransactionFailedError(f"Transaction failed: {result.error or 'no signature returned'}")
        )
