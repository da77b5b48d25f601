"""
Tests for TokenService with a mocked repository.

Covers:
- Normal creation with MemeDrop enrollment
- Degraded mode (pending records, reconciliation scheduling)
- Idempotent replay
- Not-found handling
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from app.models.token import Token
from app.services.image_storage_service import UploadedImage
from app.services.token_service import PendingTokenRecord, TokenService
from app.utils.exceptions import NotFoundError, PersistenceUnavailableError
from app.validators.token import ThemeUpdate, TokenCreate


@pytest.fixture
def description(sample_solana_address):
    return TokenCreate(token_name="TestCoin", token_address=sample_solana_address, chain="solana")


@pytest.fixture
def stored_token(sample_solana_address):
    return Token(
        id=7,
        token_name="TestCoin",
        token_address=sample_solana_address,
        chain="solana",
        theme="dark",
        button_style="rounded",
        font_style="sans",
        view_count=0,
    )


@pytest.fixture
def service(mock_session, stored_token):
    service = TokenService(mock_session)
    service.repository = AsyncMock()
    service.repository.get_by_creation_key.return_value = None
    service.repository.create.return_value = stored_token
    service.memedrop = AsyncMock()
    return service


class TestCreateToken:
    """Normal creation path."""

    @pytest.mark.asyncio
    async def test_creates_and_enrolls(self, service, description, stored_token, mock_session):
        result = await service.create_token(description, creation_key="key-1")

        assert result.token is stored_token
        assert result.is_pending is False
        assert result.replayed is False
        create_kwargs = service.repository.create.await_args.kwargs
        assert create_kwargs["view_count"] == 0
        assert create_kwargs["creation_key"] == "key-1"
        assert create_kwargs["token_name"] == "TestCoin"
        mock_session.commit.assert_awaited()
        service.memedrop.enroll_creator.assert_awaited_once_with(stored_token)

    @pytest.mark.asyncio
    async def test_generates_creation_key(self, service, description):
        await service.create_token(description)

        key = service.repository.create.await_args.kwargs["creation_key"]
        assert len(key) == 32

    @pytest.mark.asyncio
    async def test_replay_returns_existing_without_enrollment(self, service, description, stored_token):
        service.repository.get_by_creation_key.return_value = stored_token

        result = await service.create_token(description, creation_key="key-1")

        assert result.token is stored_token
        assert result.replayed is True
        service.repository.create.assert_not_awaited()
        service.memedrop.enroll_creator.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_logo_stored_before_insert(self, service, description, png_bytes):
        image_store = AsyncMock()
        image_store.store.return_value = "/uploads/1-logo.png"
        service.image_store = image_store

        await service.create_token(description, logo=UploadedImage(png_bytes, "image/png", "logo.png"))

        image_store.store.assert_awaited_once()
        assert service.repository.create.await_args.kwargs["logo_url"] == "/uploads/1-logo.png"
        image_store.discard.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_replay_discards_new_logo(self, service, description, stored_token, png_bytes):
        image_store = AsyncMock()
        image_store.store.return_value = "/uploads/2-logo.png"
        service.image_store = image_store
        service.repository.get_by_creation_key.return_value = stored_token

        result = await service.create_token(
            description, logo=UploadedImage(png_bytes, "image/png", "logo.png"), creation_key="key-1"
        )

        assert result.replayed is True
        image_store.discard.assert_awaited_once_with("/uploads/2-logo.png")

    @pytest.mark.asyncio
    async def test_duplicate_key_conflict_replays(self, service, description, stored_token, mock_session):
        service.repository.get_by_creation_key.side_effect = [None, stored_token]
        service.repository.create.side_effect = IntegrityError(
            "INSERT", {}, Exception("UNIQUE constraint failed: tokens.creation_key")
        )

        result = await service.create_token(description, creation_key="key-1")

        assert result.token is stored_token
        assert result.replayed is True
        mock_session.rollback.assert_awaited()
        service.memedrop.enroll_creator.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_integrity_error_without_existing_record_raises(self, service, description):
        service.repository.create.side_effect = IntegrityError("INSERT", {}, Exception("CHECK failed"))

        with pytest.raises(IntegrityError):
            await service.create_token(description, creation_key="key-1")


class TestDegradedMode:
    """Database unavailable during creation."""

    @pytest.mark.asyncio
    async def test_connection_failure_returns_pending(self, service, description, mock_session):
        service.repository.get_by_creation_key.side_effect = OperationalError(
            "SELECT", {}, ConnectionRefusedError("refused")
        )
        scheduled = []
        service.schedule_reconciliation = scheduled.append

        result = await service.create_token(description, creation_key="key-1")

        assert result.is_pending
        assert result.token is None
        assert result.pending.creation_key == "key-1"
        assert result.pending.reconciliation_scheduled is True
        assert scheduled == [result.pending.to_payload()]
        mock_session.rollback.assert_awaited()
        service.memedrop.enroll_creator.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_timeout_returns_pending(self, service, description):
        async def slow_lookup(key):
            await asyncio.sleep(1)

        service.repository.get_by_creation_key.side_effect = slow_lookup
        service.db_timeout = 0.01
        service.schedule_reconciliation = MagicMock()

        result = await service.create_token(description, creation_key="key-1")

        assert result.is_pending
        service.schedule_reconciliation.assert_called_once()

    @pytest.mark.asyncio
    async def test_scheduler_failure_still_returns_pending(self, service, description):
        service.repository.get_by_creation_key.side_effect = OperationalError(
            "SELECT", {}, ConnectionRefusedError("refused")
        )
        service.schedule_reconciliation = MagicMock(side_effect=ConnectionError("redis down"))

        result = await service.create_token(description, creation_key="key-1")

        assert result.is_pending
        assert result.pending.reconciliation_scheduled is False

    @pytest.mark.asyncio
    async def test_pending_record_is_flagged(self, description):
        pending = PendingTokenRecord(creation_key="key-1", description=description)

        data = pending.to_dict()

        assert data["pending"] is True
        assert data["status"] == "pending"
        assert data["id"] is None
        assert data["tokenName"] == "TestCoin"
        assert data["viewCount"] == 0

    @pytest.mark.asyncio
    async def test_persist_pending_enrolls_once(self, service, description, stored_token):
        payload = PendingTokenRecord(creation_key="key-1", description=description).to_payload()

        token = await service.persist_pending(payload)
        assert token is stored_token
        service.memedrop.enroll_creator.assert_awaited_once_with(stored_token)

        service.repository.get_by_creation_key.return_value = stored_token
        await service.persist_pending(payload)
        service.memedrop.enroll_creator.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_persist_pending_raises_while_unavailable(self, service, description):
        service.repository.get_by_creation_key.side_effect = OperationalError(
            "SELECT", {}, ConnectionRefusedError("refused")
        )
        payload = PendingTokenRecord(creation_key="key-1", description=description).to_payload()

        with pytest.raises(PersistenceUnavailableError):
            await service.persist_pending(payload)


class TestLookups:
    """Name-based reads and updates."""

    @pytest.mark.asyncio
    async def test_get_token_not_found(self, service):
        service.repository.get_by_name.return_value = None

        with pytest.raises(NotFoundError, match="Token not found"):
            await service.get_token("missing")

    @pytest.mark.asyncio
    async def test_increment_view_returns_count(self, service):
        service.repository.increment_view_count.return_value = 4

        assert await service.increment_view("TestCoin") == 4
        service.repository.increment_view_count.assert_awaited_once_with("TestCoin", None)

    @pytest.mark.asyncio
    async def test_increment_view_not_found(self, service):
        service.repository.increment_view_count.return_value = None

        with pytest.raises(NotFoundError):
            await service.increment_view("missing")

    @pytest.mark.asyncio
    async def test_empty_theme_update_returns_current(self, service, stored_token):
        service.repository.get_by_name.return_value = stored_token

        token = await service.update_theme("testcoin", ThemeUpdate())

        assert token is stored_token
        service.repository.update_theme.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_theme_update_passes_changes(self, service, stored_token):
        service.repository.update_theme.return_value = stored_token

        await service.update_theme("testcoin", ThemeUpdate(theme="light"), chain="solana")

        service.repository.update_theme.assert_awaited_once_with("testcoin", "solana", theme="light")
