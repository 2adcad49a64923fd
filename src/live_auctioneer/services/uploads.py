"""Avatar image ingestion into the publicly served directory."""

from __future__ import annotations

import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from src.live_auctioneer.errors import InvalidInput

if TYPE_CHECKING:
    from src.live_auctioneer.config import Settings

logger = structlog.get_logger()

ALLOWED_IMAGE_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/webp"})


@dataclass(frozen=True)
class StoredImage:
    filename: str
    url: str
    path: Path
    size: int


class AvatarImageStore:
    """Writes uploaded avatar images under ``<public_dir>/avatars``.

    Only the declared MIME type and size are checked; the bytes are not sniffed.
    """

    def __init__(self, settings: Settings) -> None:
        self.public_dir = Path(settings.public_dir)
        self.url_prefix = "/" + settings.avatars_url_prefix.strip("/") + "/"
        self.directory = self.public_dir / settings.avatars_url_prefix.strip("/")
        self.max_bytes = settings.max_upload_bytes

        self.directory.mkdir(parents=True, exist_ok=True)

        logger.info(
            "AvatarImageStore initialized",
            directory=str(self.directory),
            max_bytes=self.max_bytes,
        )

    def validate(self, content_type: str | None, size: int) -> None:
        if (content_type or "").lower() not in ALLOWED_IMAGE_TYPES:
            raise InvalidInput("Invalid file type. Please upload JPG, PNG, or WebP images.")
        if size > self.max_bytes:
            raise InvalidInput(
                f"File too large. Maximum size is {self.max_bytes // (1024 * 1024)}MB."
            )

    @staticmethod
    def _make_filename(original_filename: str) -> str:
        extension = Path(original_filename or "").suffix.lower()
        return f"avatar-{int(time.time() * 1000)}-{secrets.token_hex(3)}{extension}"

    def ingest(
        self,
        data: bytes,
        content_type: str | None,
        declared_size: int | None = None,
        original_filename: str = "",
    ) -> StoredImage:
        """Validate and persist an image, returning its public reference."""
        size = max(declared_size or 0, len(data))
        self.validate(content_type, size)

        while True:
            filename = self._make_filename(original_filename)
            path = self.directory / filename
            try:
                with open(path, "xb") as f:
                    f.write(data)
                break
            except FileExistsError:
                continue

        url = f"{self.url_prefix}{filename}"
        logger.info("Avatar uploaded", filename=filename, url=url, size=len(data))
        return StoredImage(filename=filename, url=url, path=path, size=len(data))
