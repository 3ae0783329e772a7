"""
Storage Module Initialization
"""

from functools import lru_cache

from datagate.config import get_settings
from datagate.storage.base import Storage
from datagate.storage.local import LocalDiskStorage


@lru_cache()
def get_disk(name: str = "upload") -> Storage:
    """
    Get a configured disk (Singleton per name)

    Raises:
        KeyError: Unknown disk name
    """
    settings = get_settings()
    if name == settings.UPLOAD_DISK_NAME:
        return LocalDiskStorage(name, settings.UPLOAD_DISK_ROOT)
    raise KeyError(f"Disk '{name}' is not configured")


__all__ = [
    "Storage",
    "LocalDiskStorage",
    "get_disk",
]
