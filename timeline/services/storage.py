"""
Local disk storage for uploaded photo files.
"""
import asyncio
import logging
from pathlib import Path
from typing import Optional

from timeline.config import get_settings
from timeline.exceptions import InvalidFilenameError
from timeline.utils.security import generate_unique_filename

logger = logging.getLogger("timeline.storage")


class LocalFileStorage:
    """
    Stores uploaded image bytes as flat files in a single directory.

    Blocking file I/O runs in a worker thread so request handlers stay async.
    """

    def __init__(self, root: str):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def resolve(self, filename: str) -> Path:
        """
        Map a stored file name to its path.

        Raises:
            InvalidFilenameError: If the name is empty or is not a bare file name
        """
        if (
            not filename
            or filename in (".", "..")
            or any(c in filename for c in ("/", "\\", "\x00"))
        ):
            raise InvalidFilenameError(filename)
        return self.root / filename

    async def save(self, content: bytes, original_filename: str) -> str:
        """
        Write content under a freshly generated name.

        Args:
            content: File bytes
            original_filename: Client-supplied name, only its extension is kept

        Returns:
            The stored file name
        """
        filename = generate_unique_filename(original_filename)
        path = self.resolve(filename)
        await asyncio.to_thread(path.write_bytes, content)
        logger.debug("File stored", extra={"event": "storage", "stored_file": filename, "size": len(content)})
        return filename

    async def read(self, filename: str) -> bytes:
        """Read a stored file. Raises FileNotFoundError if it does not exist."""
        return await asyncio.to_thread(self.resolve(filename).read_bytes)

    async def exists(self, filename: str) -> bool:
        try:
            path = self.resolve(filename)
        except InvalidFilenameError:
            return False
        return await asyncio.to_thread(path.is_file)

    async def delete(self, filename: str) -> bool:
        """
        Remove a stored file.

        Returns:
            True if a file was removed, False if there was nothing to remove
        """
        path = self.resolve(filename)
        try:
            await asyncio.to_thread(path.unlink)
        except FileNotFoundError:
            return False
        return True


# Singleton instance
_storage_service: Optional[LocalFileStorage] = None


def get_storage_service() -> LocalFileStorage:
    """Get the singleton storage service instance."""
    global _storage_service
    if _storage_service is None:
        _storage_service = LocalFileStorage(get_settings().upload_dir)
    return _storage_service
