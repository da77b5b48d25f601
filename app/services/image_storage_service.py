"""
Image storage service.

Stores token logos and returns the URL they are served from. The web layer
only depends on the ImageStore protocol; LocalImageStore writes to disk and
is served under /uploads.
"""

import asyncio
import re
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from loguru import logger

from app.config.constants import (
    ALLOWED_IMAGE_TYPES,
    IMAGE_EXTENSIONS,
    MAX_LOGO_SIZE_BYTES,
    UPLOADS_URL_PREFIX,
)
from app.utils.exceptions import UploadError


@dataclass
class UploadedImage:
    """Logo payload received from a client."""

    data: bytes
    content_type: str | None = None
    filename: str | None = None

    @property
    def size(self) -> int:
        return len(self.data)


class ImageStore(Protocol):
    """Store an image and return the URL it is served from."""

    async def store(self, image: UploadedImage) -> str: ...

    async def discard(self, url: str) -> None: ...


def sniff_image_type(data: bytes) -> str | None:
    """Detect image content type from file signature."""
    for content_type, signatures in ALLOWED_IMAGE_TYPES.items():
        if any(data.startswith(signature) for signature in signatures):
            return content_type
    return None


def validate_image(image: UploadedImage, max_size: int = MAX_LOGO_SIZE_BYTES) -> str:
    """
    Validate logo type and size.

    Args:
        image: Uploaded image
        max_size: Maximum size in bytes

    Returns:
        Detected content type

    Raises:
        UploadError: Empty, too large, or not JPEG/PNG/GIF
    """
    if image.size == 0:
        raise UploadError("Logo file is empty")

    if image.size > max_size:
        raise UploadError(
            f"Logo is too large ({image.size} bytes). Maximum size is {max_size // (1024 * 1024)}MB."
        )

    declared = (image.content_type or "").split(";")[0].strip().lower()
    if declared and declared not in ALLOWED_IMAGE_TYPES:
        raise UploadError("Invalid file type. Only JPEG, PNG, and GIF are allowed.")

    detected = sniff_image_type(image.data)
    if detected is None:
        raise UploadError("Invalid file type. Only JPEG, PNG, and GIF are allowed.")

    if declared and declared != detected:
        raise UploadError(f"File content is {detected} but was sent as {declared}")

    return detected


class LocalImageStore:
    """Stores logos on local disk."""

    def __init__(
        self,
        directory: Path,
        url_prefix: str = UPLOADS_URL_PREFIX,
        max_size: int = MAX_LOGO_SIZE_BYTES,
    ) -> None:
        """
        Initialize local store.

        Args:
            directory: Directory for stored files (created if missing)
            url_prefix: URL path the directory is served under
            max_size: Maximum logo size in bytes
        """
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip("/")
        self.max_size = max_size
        self.directory.mkdir(parents=True, exist_ok=True)

    def _file_name(self, image: UploadedImage, content_type: str) -> str:
        stem = Path(image.filename or "logo").stem
        stem = re.sub(r"[^A-Za-z0-9_-]", "", stem)[:40] or "logo"
        unique = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}"
        return f"{unique}-{stem}{IMAGE_EXTENSIONS[content_type]}"

    async def store(self, image: UploadedImage) -> str:
        """Validate and write the logo, returning its URL path."""
        content_type = validate_image(image, self.max_size)
        name = self._file_name(image, content_type)
        path = self.directory / name

        try:
            await asyncio.to_thread(path.write_bytes, image.data)
        except OSError as e:
            logger.error(f"Failed to write logo {name}: {e}")
            raise UploadError("Could not store logo, please try again") from e

        logger.info(f"Stored logo {name} ({image.size} bytes)")
        return f"{self.url_prefix}/{name}"

    async def discard(self, url: str) -> None:
        """Remove a logo stored by this store; unknown URLs are ignored."""
        prefix = f"{self.url_prefix}/"
        if not url.startswith(prefix):
            return

        path = self.directory / Path(url[len(prefix):]).name
        await asyncio.to_thread(path.unlink, missing_ok=True)
        logger.info(f"Discarded logo {path.name}")
