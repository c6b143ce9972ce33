"""Local blob store for avatar images; files are served back under UPLOAD_URL_PREFIX."""

import logging
import secrets
from functools import lru_cache
from pathlib import Path

from newcloud_auth.core.config import get_settings
from newcloud_auth.core.errors import ValidationFailed

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".gif", ".webp"})


class AvatarStore:
    """Writes uploaded avatars to a directory and returns the public URL for each."""

    def __init__(self, directory: str | Path, url_prefix: str, max_bytes: int) -> None:
        self.directory = Path(directory).resolve()
        self.url_prefix = url_prefix.rstrip("/")
        self.max_bytes = max_bytes

    def save(self, user_id: int, filename: str | None, content_type: str | None, data: bytes) -> str:
        """Validate and persist one image; return its URL (e.g. /uploads/avatar-3-ab12.png)."""
        ext = Path(filename or "").suffix.lower()
        if ext not in ALLOWED_IMAGE_EXTENSIONS:
            raise ValidationFailed(
                "Avatar must be an image file (" + ", ".join(sorted(ALLOWED_IMAGE_EXTENSIONS)) + ")"
            )
        if content_type and not content_type.lower().startswith("image/"):
            raise ValidationFailed("Avatar must be an image file")
        if not data:
            raise ValidationFailed("No file uploaded")
        if len(data) > self.max_bytes:
            raise ValidationFailed(f"Avatar must be at most {self.max_bytes} bytes")

        self.directory.mkdir(parents=True, exist_ok=True)
        name = f"avatar-{user_id}-{secrets.token_hex(8)}{ext}"
        (self.directory / name).write_bytes(data)
        logger.info("Avatar stored: user_id=%s file=%s bytes=%s", user_id, name, len(data))
        return f"{self.url_prefix}/{name}"

    def delete(self, url: str | None) -> None:
        """Remove a file this store produced. URLs outside the store are ignored."""
        if not url or not url.startswith(self.url_prefix + "/"):
            return
        path = (self.directory / url[len(self.url_prefix) + 1 :]).resolve()
        if path.parent != self.directory:
            return
        path.unlink(missing_ok=True)
        logger.info("Avatar removed: file=%s", path.name)


@lru_cache
def get_avatar_store() -> AvatarStore:
    settings = get_settings()
    return AvatarStore(
        directory=settings.UPLOAD_DIR,
        url_prefix=settings.UPLOAD_URL_PREFIX,
        max_bytes=settings.MAX_AVATAR_BYTES,
    )
