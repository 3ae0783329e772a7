"""
API Router Module Initialization
"""

from datagate.api.clients import router as clients_router
from datagate.api.deps import get_db, get_responder

__all__ = [
    "clients_router",
    "get_db",
    "get_responder",
]
