"""
Token record service.

Creates token pages and serves name-based lookups, view counting and theme
updates.

Creation flow:
1. Validate description and store the optional logo
2. Insert the record (bounded by db_operation_timeout)
3. Enroll the creator into MemeDrop in a separate transaction (best-effort)

When the database is unreachable the service does not fabricate a record.
It returns a PendingTokenRecord tagged as such and schedules the
reconciliation job, which inserts the record later under the same
creation key.
"""

import asyncio
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.constants import DB_OPERATION_TIMEOUT
from app.models.token import Token
from app.repositories.token_repository import TokenRepository
from app.services.base_service import BaseService, _safe_rollback, transaction
from app.services.image_storage_service import ImageStore, UploadedImage
from app.services.memedrop_service import MemeDropService
from app.utils.exceptions import NotFoundError, PersistenceUnavailableError
from app.utils.security import mask_address
from app.validators.token import ThemeUpdate, TokenCreate


# Receives the reconciliation payload; normally a dramatiq actor's .send
ReconciliationScheduler = Callable[[dict[str, Any]], Any]


@dataclass
class PendingTokenRecord:
    """
    Token accepted while the database was unavailable.

    Not persisted and not retrievable by name until reconciliation succeeds.
    """

    creation_key: str
    description: TokenCreate
    received_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    reconciliation_scheduled: bool = False

    def to_payload(self) -> dict[str, Any]:
        """Job payload for the reconciliation actor."""
        return {
            "creation_key": self.creation_key,
            "description": self.description.model_dump(),
            "received_at": self.received_at.isoformat(),
        }

    def to_dict(self) -> dict[str, Any]:
        """Client representation, clearly flagged as pending."""
        data = self.description.model_dump(by_alias=True)
        data.update(
            {
                "id": None,
                "viewCount": 0,
                "createdAt": self.received_at.isoformat(),
                "creationKey": self.creation_key,
                "pending": True,
                "status": "pending",
                "reconciliationScheduled": self.reconciliation_scheduled,
            }
        )
        return data


@dataclass
class TokenCreationResult:
    """Outcome of a create call: a persisted token or a pending record."""

    token: Token | None = None
    pending: PendingTokenRecord | None = None
    replayed: bool = False

    @property
    def is_pending(self) -> bool:
        return self.pending is not None


class TokenService(BaseService):
    """Token record operations."""

    def __init__(
        self,
        session: AsyncSession,
        image_store: ImageStore | None = None,
        schedule_reconciliation: ReconciliationScheduler | None = None,
        db_timeout: float = DB_OPERATION_TIMEOUT,
    ) -> None:
        """
        Initialize token service.

        Args:
            session: Async database session
            image_store: Logo storage (required only when logos are uploaded)
            schedule_reconciliation: Enqueues pending records for retry
            db_timeout: Insert timeout in seconds
        """
        super().__init__(session)
        self.repository = TokenRepository(session)
        self.memedrop = MemeDropService(session)
        self.image_store = image_store
        self.schedule_reconciliation = schedule_reconciliation
        self.db_timeout = db_timeout

    async def create_token(
        self,
        description: TokenCreate,
        logo: UploadedImage | None = None,
        creation_key: str | None = None,
    ) -> TokenCreationResult:
        """
        Create a token page record.

        Args:
            description: Validated token description
            logo: Optional logo upload
            creation_key: Idempotency key; a repeat call with the same key
                returns the record created by the first call

        Returns:
            TokenCreationResult with either token or pending set

        Raises:
            UploadError: Invalid logo
        """
        logo_url = None
        if logo is not None:
            if self.image_store is None:
                raise RuntimeError("Logo upload requires an image store")
            logo_url = await self.image_store.store(logo)
            description = description.model_copy(update={"logo_url": logo_url})

        key = creation_key or uuid.uuid4().hex

        self.logger.info(
            f"Creating token {description.token_name!r} on {description.chain} "
            f"({mask_address(description.token_address)})"
        )

        try:
            token, replayed = await asyncio.wait_for(
                self._insert_token(description, key), timeout=self.db_timeout
            )
        except TimeoutError:
            self.logger.error(
                f"Token insert timed out after {self.db_timeout}s, accepting as pending"
            )
            await _safe_rollback(self)
            return TokenCreationResult(pending=self._accept_pending(description, key))
        except PersistenceUnavailableError:
            self.logger.error("Database unavailable, accepting token as pending")
            return TokenCreationResult(pending=self._accept_pending(description, key))

        if replayed:
            self.logger.info(f"Idempotent replay of creation key {key}, token id={token.id}")
            if logo_url is not None:
                await self.image_store.discard(logo_url)
            return TokenCreationResult(token=token, replayed=True)

        self.logger.info(f"Token created: id={token.id}, name={token.token_name!r}")
        await self._enroll(token)
        return TokenCreationResult(token=token)

    @transaction
    async def _insert_token(
        self, description: TokenCreate, creation_key: str
    ) -> tuple[Token, bool]:
        """Insert unless a record with this creation key exists."""
        existing = await self.repository.get_by_creation_key(creation_key)
        if existing is not None:
            return existing, True

        try:
            token = await self.repository.create(
                **description.model_dump(),
                view_count=0,
                creation_key=creation_key,
            )
        except IntegrityError:
            # Same key inserted by a concurrent request
            await self.rollback()
            existing = await self.repository.get_by_creation_key(creation_key)
            if existing is None:
                raise
            return existing, True
        return token, False

    async def _enroll(self, token: Token) -> None:
        """Enroll the creator of a committed token, detached so an enrollment rollback leaves it loaded."""
        self.session.expunge(token)
        await self.memedrop.enroll_creator(token)

    def _accept_pending(self, description: TokenCreate, creation_key: str) -> PendingTokenRecord:
        pending = PendingTokenRecord(creation_key=creation_key, description=description)

        if self.schedule_reconciliation is None:
            self.logger.warning(
                f"No reconciliation scheduler configured, pending token {creation_key} will not be retried"
            )
            return pending

        try:
            self.schedule_reconciliation(pending.to_payload())
            pending.reconciliation_scheduled = True
            self.logger.info(f"Scheduled reconciliation for pending token {creation_key}")
        except Exception as e:
            self.logger.error(f"Failed to schedule reconciliation for {creation_key}: {e}")
        return pending

    async def persist_pending(self, payload: dict[str, Any]) -> Token:
        """
        Persist a pending record (reconciliation job entry point).

        Idempotent: a record already stored under the creation key is
        returned untouched and MemeDrop is not enrolled twice.

        Raises:
            PersistenceUnavailableError: Database still unavailable
        """
        description = TokenCreate.model_validate(payload["description"])
        creation_key = payload["creation_key"]

        token, replayed = await self._insert_token(description, creation_key)
        if not replayed:
            self.logger.info(f"Reconciled pending token {creation_key} as id={token.id}")
            await self._enroll(token)
        return token

    @transaction
    async def get_token(self, name: str, chain: str | None = None) -> Token:
        """
        Fetch token by case-insensitive name.

        Raises:
            NotFoundError: No token with this name
        """
        token = await self.repository.get_by_name(name, chain)
        if token is None:
            raise NotFoundError("Token not found", name=name)
        return token

    @transaction
    async def list_tokens(self) -> list[Token]:
        """All tokens, newest first."""
        return await self.repository.find_all()

    @transaction
    async def increment_view(self, name: str, chain: str | None = None) -> int:
        """
        Increment view count atomically.

        Returns:
            New view count

        Raises:
            NotFoundError: No token with this name
        """
        view_count = await self.repository.increment_view_count(name, chain)
        if view_count is None:
            raise NotFoundError("Token not found", name=name)
        return view_count

    @transaction
    async def update_theme(
        self, name: str, update: ThemeUpdate, chain: str | None = None
    ) -> Token:
        """
        Update theme fields; fields not provided keep their value.

        Raises:
            NotFoundError: No token with this name
        """
        changes = update.changes()
        if changes:
            token = await self.repository.update_theme(name, chain, **changes)
        else:
            token = await self.repository.get_by_name(name, chain)

        if token is None:
            raise NotFoundError("Token not found", name=name)

        self.logger.info(f"Theme updated for {token.token_name!r}: {changes}")
        return token
