"""
API Client Repository

Data access for API client credentials.
"""

from typing import Optional

from datagate.db.models import ApiClient
from datagate.domain.api_client import ApiClientSearch
from datagate.repositories.base import Repository


class ApiClientRepository(Repository[ApiClient]):
    """API Client Repository"""

    model = ApiClient

    async def find_by_app_id(self, app_id: str) -> Optional[ApiClient]:
        """Get Client by App ID"""
        return await self.find_by("app_id", app_id)

    def apply_search(self, search: ApiClientSearch) -> "ApiClientRepository":
        """Add decoded list filters to the scope"""
        if search.name:
            self.where("name", f"%{search.name}%", "like")
        if search.app_id:
            self.where("app_id", search.app_id)
        if search.is_active is not None:
            self.where("is_active", search.is_active)
        return self
