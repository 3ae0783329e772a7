"""
Data Access Layer Module Initialization
"""

from datagate.repositories.base import OPERATORS, Page, Repository
from datagate.repositories.api_client_repo import ApiClientRepository

__all__ = [
    "OPERATORS",
    "Page",
    "Repository",
    "ApiClientRepository",
]
