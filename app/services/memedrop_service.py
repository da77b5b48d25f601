"""
MemeDrop service.

Weekly prize drawing entries: automatic enrollment of token creators and
manual entries.
"""

from app.models.memedrop_entry import MemeDropEntry
from app.models.token import Token
from app.repositories.memedrop_repository import MemeDropRepository
from app.services.base_service import BaseService, transaction
from app.utils.security import mask_address
from app.validators.token import MemeDropEntryCreate


class MemeDropService(BaseService):
    """MemeDrop entry operations."""

    def __init__(self, session) -> None:
        super().__init__(session)
        self.repository = MemeDropRepository(session)

    async def enroll_creator(self, token: Token) -> MemeDropEntry | None:
        """
        Enter a token creator into the drawing.

        Best-effort: runs in its own transaction after the token is
        committed. Any failure is logged and swallowed so token creation
        never depends on it.

        Args:
            token: Committed token

        Returns:
            Created entry or None on failure
        """
        try:
            entry = await self._create(
                wallet_address=mask_address(token.token_address),
                token_name=token.token_name,
                chain=token.chain,
            )
        except Exception as e:
            self.logger.error(
                f"MemeDrop enrollment failed for token {token.token_name!r}: {e}"
            )
            return None

        self.logger.info(f"MemeDrop entry created for token {token.token_name!r}")
        return entry

    @transaction
    async def _create(self, **data) -> MemeDropEntry:
        return await self.repository.create(**data)

    async def create_entry(self, payload: MemeDropEntryCreate) -> MemeDropEntry:
        """Create a manual entry."""
        entry = await self._create(**payload.model_dump())
        self.logger.info(f"Manual MemeDrop entry for {payload.token_name!r}")
        return entry

    @transaction
    async def count_entries(self) -> int:
        """Number of entries in the drawing."""
        return await self.repository.count()

    @transaction
    async def list_entries(self) -> list[MemeDropEntry]:
        """All entries, newest first."""
        return await self.repository.find_all()
