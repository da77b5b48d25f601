"""
Tests for BaseService, the transaction decorator and the error taxonomy.
"""

import pytest
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError

from app.services.base_service import BaseService, transaction
from app.utils.exceptions import (
    InsufficientFundsError,
    NotFoundError,
    PersistenceUnavailableError,
    UserCancelledError,
    ValidationError,
    WalletError,
    is_persistence_failure,
)


class ExampleService(BaseService):
    """Service exercising the decorator."""

    def __init__(self, session, error=None):
        super().__init__(session)
        self.error = error

    @transaction
    async def run(self):
        if self.error is not None:
            raise self.error
        return "done"


class TestTransactionDecorator:
    """Commit/rollback behavior."""

    @pytest.mark.asyncio
    async def test_commits_on_success(self, mock_session):
        assert await ExampleService(mock_session).run() == "done"

        mock_session.commit.assert_awaited_once()
        mock_session.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_app_error_rolled_back_and_reraised(self, mock_session):
        with pytest.raises(NotFoundError):
            await ExampleService(mock_session, NotFoundError("Token not found")).run()

        mock_session.rollback.assert_awaited_once()
        mock_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_connection_failure_translated(self, mock_session):
        error = OperationalError("SELECT 1", {}, ConnectionRefusedError("refused"))

        with pytest.raises(PersistenceUnavailableError) as exc_info:
            await ExampleService(mock_session, error).run()

        assert exc_info.value.http_status == 503
        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self, mock_session):
        error = IntegrityError("INSERT", {}, Exception("duplicate"))

        with pytest.raises(IntegrityError):
            await ExampleService(mock_session, error).run()

        mock_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_rollback_does_not_mask_error(self, mock_session):
        mock_session.rollback.side_effect = ConnectionError("gone")

        with pytest.raises(PersistenceUnavailableError):
            await ExampleService(mock_session, ConnectionError("gone")).run()


class TestErrorTaxonomy:
    """Statuses, actions and classification."""

    def test_http_statuses(self):
        assert ValidationError("x").http_status == 400
        assert NotFoundError("x").http_status == 404
        assert PersistenceUnavailableError("x").http_status == 503

    def test_wallet_errors_share_base(self):
        assert issubclass(InsufficientFundsError, WalletError)
        assert issubclass(UserCancelledError, WalletError)

    def test_to_dict_includes_field_errors(self):
        error = ValidationError("Invalid token data", errors=[{"field": "tokenName", "message": "short"}])

        assert error.to_dict() == {
            "message": "Invalid token data",
            "action": "Fix the highlighted fields",
            "errors": [{"field": "tokenName", "message": "short"}],
        }

    def test_to_dict_without_errors(self):
        assert InsufficientFundsError("low").to_dict() == {
            "message": "low",
            "action": "Top up balance",
        }

    def test_persistence_failure_classification(self):
        assert is_persistence_failure(TimeoutError())
        assert is_persistence_failure(OperationalError("x", {}, Exception("down")))
        assert not is_persistence_failure(ValueError("bad"))

    def test_invalidated_connection_is_persistence_failure(self):
        error = DBAPIError("x", {}, Exception("closed"), connection_invalidated=True)
        assert is_persistence_failure(error)
