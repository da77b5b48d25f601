"""
Token API client.

aiohttp client for the token page HTTP API, used by the creation wizard.
Error responses are raised as the matching AppError subclass; a 503 that
carries a pending record is returned, not raised.
"""

from typing import Any
from urllib.parse import quote

import aiohttp
from loguru import logger

from app.services.image_storage_service import UploadedImage
from app.utils.exceptions import (
    AppError,
    NotFoundError,
    PersistenceUnavailableError,
    UploadError,
    ValidationError,
)


API_TIMEOUT_SECONDS = 30

_STATUS_ERRORS: dict[int, type[AppError]] = {
    400: ValidationError,
    404: NotFoundError,
    413: UploadError,
    503: PersistenceUnavailableError,
}


class TokenApiClient:
    """Client for /api/tokens and /api/memedrop."""

    def __init__(
        self,
        base_url: str,
        session: aiohttp.ClientSession | None = None,
        timeout: float = API_TIMEOUT_SECONDS,
    ) -> None:
        """
        Initialize API client.

        Args:
            base_url: Server origin, e.g. http://localhost:5000
            session: Shared aiohttp session (created lazily when omitted)
            timeout: Total request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self._session = session
        self._owns_session = session is None
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the session if this client created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "TokenApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _request(self, method: str, path: str, **kwargs: Any) -> tuple[int, Any]:
        session = await self._get_session()
        url = f"{self.base_url}{path}"
        try:
            async with session.request(method, url, **kwargs) as response:
                if response.content_type == "application/json":
                    body = await response.json()
                else:
                    body = {"message": await response.text()}
                return response.status, body
        except aiohttp.ClientError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise PersistenceUnavailableError("Token service unreachable") from e

    @staticmethod
    def _raise_for_status(status: int, body: Any) -> None:
        if status < 400:
            return
        payload = body if isinstance(body, dict) else {}
        message = payload.get("message") or f"Request failed with HTTP {status}"
        error_cls = _STATUS_ERRORS.get(status, AppError)
        raise error_cls(message, errors=payload.get("errors"), status=status)

    @staticmethod
    def _token_path(name: str) -> str:
        return f"/api/tokens/{quote(name, safe='')}"

    async def create_token(
        self,
        fields: dict[str, Any],
        logo: UploadedImage | None = None,
        creation_key: str | None = None,
    ) -> dict[str, Any]:
        """
        Create a token record (multipart form).

        Args:
            fields: camelCase form fields (tokenName, tokenAddress, chain, ...)
            logo: Optional logo file
            creation_key: Sent as Idempotency-Key

        Returns:
            Created record, or the pending record when the server accepted
            the token while its database was unavailable

        Raises:
            ValidationError: Invalid fields
            PersistenceUnavailableError: Server unavailable without a pending record
        """
        form = aiohttp.FormData()
        for key, value in fields.items():
            if value is not None:
                form.add_field(key, str(value))
        if logo is not None:
            form.add_field(
                "logo",
                logo.data,
                filename=logo.filename or "logo",
                content_type=logo.content_type or "application/octet-stream",
            )

        headers = {"Idempotency-Key": creation_key} if creation_key else None
        status, body = await self._request("POST", "/api/tokens", data=form, headers=headers)

        if status == 503 and isinstance(body, dict) and body.get("pending"):
            logger.warning(f"Token {fields.get('tokenName')!r} accepted as pending")
            return body
        self._raise_for_status(status, body)
        return body

    async def get_token(self, name: str, chain: str | None = None) -> dict[str, Any]:
        """Fetch a token by case-insensitive name."""
        params = {"chain": chain} if chain else None
        status, body = await self._request("GET", self._token_path(name), params=params)
        self._raise_for_status(status, body)
        return body

    async def list_tokens(self) -> list[dict[str, Any]]:
        status, body = await self._request("GET", "/api/tokens")
        self._raise_for_status(status, body)
        return body

    async def update_theme(self, name: str, **theme: str) -> dict[str, Any]:
        """Update theme fields (theme, buttonStyle, fontStyle)."""
        status, body = await self._request("PATCH", f"{self._token_path(name)}/theme", json=theme)
        self._raise_for_status(status, body)
        return body

    async def increment_view(self, name: str) -> int:
        """Increment and return the view count."""
        status, body = await self._request("POST", f"{self._token_path(name)}/view")
        self._raise_for_status(status, body)
        return body["viewCount"]

    async def memedrop_count(self) -> int:
        status, body = await self._request("GET", "/api/memedrop/entries")
        self._raise_for_status(status, body)
        return body

    async def create_memedrop_entry(self, **entry: str) -> dict[str, Any]:
        """Create a manual MemeDrop entry (camelCase keys)."""
        status, body = await self._request("POST", "/api/memedrop/entries", json=entry)
        self._raise_for_status(status, body)
        return body
