"""Scratch storage for uploaded originals and downloaded archival copies."""

import re
from pathlib import Path
from typing import Optional

import aiofiles

from .config import Settings, get_settings
from .errors import StorageError
from .logging import get_logger

logger = get_logger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_file_stem(identifier: str) -> str:
    """Reduce an identifier to something usable as a file name."""
    stem = _UNSAFE_CHARS.sub("_", identifier).strip("._")
    if not stem:
        raise StorageError(f"Identifier {identifier!r} cannot be used as a file name")
    return stem


class ScratchStorage:
    """Manages the two staging areas.

    Originals are keyed by the caller's external id, archival copies by the
    Paperless document id. Files are written once and never removed here;
    concurrent writers to the same path race and the last one wins.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.originals_dir = self.settings.originals_path
        self.archive_dir = self.settings.archive_path

    def original_path(self, external_id: str) -> Path:
        return self.originals_dir / f"{safe_file_stem(external_id)}.pdf"

    def archive_path(self, document_id: int) -> Path:
        return self.archive_dir / f"{document_id}.pdf"

    def staged_path(self, external_id: str) -> Path:
        original = self.original_path(external_id)
        return original.with_name(original.name + ".part")

    def has_original(self, external_id: str) -> bool:
        """Check whether an original was already handed to Paperless for this id."""
        return self.original_path(external_id).exists()

    async def save_original(self, content: bytes, external_id: str) -> Path:
        """Stage the source PDF under a temporary name before it is uploaded.

        The file only counts as an original once ``promote_original`` moves
        it into place, so a failed upload leaves nothing for ``has_original``
        to find.
        """
        return await self._write(self.staged_path(external_id), content)

    def promote_original(self, external_id: str) -> Path:
        """Move a staged original to its final name after a successful upload."""
        staged = self.staged_path(external_id)
        target = self.original_path(external_id)
        try:
            staged.replace(target)
        except OSError as e:
            logger.error(
                "Failed to promote staged original",
                file_path=str(staged),
                error=str(e)
            )
            raise StorageError(f"Could not move {staged} to {target}: {e}") from e

        logger.info("Promoted original", file_path=str(target))
        return target

    async def save_archive(self, content: bytes, document_id: int) -> Path:
        """Save the archival PDF downloaded from Paperless."""
        return await self._write(self.archive_path(document_id), content)

    async def _write(self, file_path: Path, content: bytes) -> Path:
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(file_path, 'wb') as f:
                await f.write(content)
        except OSError as e:
            logger.error(
                "Failed to save file",
                file_path=str(file_path),
                error=str(e)
            )
            raise StorageError(f"Could not write {file_path}: {e}") from e

        logger.info(
            "Saved file",
            file_path=str(file_path),
            file_size=len(content)
        )

        return file_path
