"""
Domain Model Module Initialization
"""

from datagate.domain.api_client import (
    ApiClientCreate,
    ApiClientUpdate,
    ApiClientSearch,
    ApiClientResponse,
    LogoUpload,
)

__all__ = [
    "ApiClientCreate",
    "ApiClientUpdate",
    "ApiClientSearch",
    "ApiClientResponse",
    "LogoUpload",
]
