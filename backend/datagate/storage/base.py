"""
Storage Interface

Defines a disk-backed key -> bytes store.
"""

from abc import ABC, abstractmethod
from typing import Optional


class Storage(ABC):
    """Storage Disk Interface"""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    async def put(self, key: str, content: bytes) -> None:
        """
        Write content under key

        Existing content is overwritten.

        Args:
            key: Relative file path on the disk
            content: Raw bytes
        """
        pass

    @abstractmethod
    async def get(self, key: str) -> Optional[bytes]:
        """
        Read content of key

        Returns:
            bytes if the key exists, None otherwise
        """
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check whether key exists"""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Delete key

        Returns:
            True if deleted, False if key didn't exist
        """
        pass
