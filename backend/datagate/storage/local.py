"""
Local Disk Storage

Stores files below a root directory using anyio async file IO.
"""

import logging
from typing import Optional

import anyio

from datagate.common.errors import StorageError
from datagate.storage.base import Storage

logger = logging.getLogger(__name__)


class LocalDiskStorage(Storage):
    """
    Local Disk Storage Implementation

    Keys are relative paths; a key resolving outside the root is rejected.
    """

    def __init__(self, name: str, root: str):
        """
        Initialize Storage

        Args:
            name: Disk name
            root: Root directory, created on first write
        """
        super().__init__(name)
        self.root = anyio.Path(root)

    async def _resolve(self, key: str) -> anyio.Path:
        root = await self.root.resolve()
        path = await (root / key.lstrip("/\\")).resolve()
        if path != root and root not in path.parents:
            raise StorageError(
                message=f"Key '{key}' escapes disk '{self.name}'",
                code="invalid_key",
            )
        return path

    async def put(self, key: str, content: bytes) -> None:
        path = await self._resolve(key)
        try:
            await path.parent.mkdir(parents=True, exist_ok=True)
            await path.write_bytes(content)
        except OSError as e:
            logger.error("Failed to write %s on disk %s: %s", key, self.name, e)
            raise StorageError(message=f"Failed to write '{key}'") from e
        logger.debug("Stored %d bytes at %s on disk %s", len(content), key, self.name)

    async def get(self, key: str) -> Optional[bytes]:
        path = await self._resolve(key)
        if not await path.is_file():
            return None
        return await path.read_bytes()

    async def exists(self, key: str) -> bool:
        path = await self._resolve(key)
        return await path.is_file()

    async def delete(self, key: str) -> bool:
        path = await self._resolve(key)
        if not await path.is_file():
            return False
        await path.unlink()
        return True
