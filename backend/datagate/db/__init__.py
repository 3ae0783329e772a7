"""
Database Module Initialization
"""

from datagate.db.session import get_db, init_db, AsyncSessionLocal
from datagate.db.models import Base, ApiClient

__all__ = [
    "get_db",
    "init_db",
    "AsyncSessionLocal",
    "Base",
    "ApiClient",
]
