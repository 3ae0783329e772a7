"""
Service Layer Module Initialization
"""

from datagate.services.api_client_service import ApiClientService

__all__ = [
    "ApiClientService",
]
