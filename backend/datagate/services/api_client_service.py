"""
API Client Management Service Module

Provides business logic processing for API clients.
"""

import logging
from typing import Any, Optional

from fastapi import status

from datagate.common.errors import ConflictError, ErrorException, ValidationError
from datagate.common.utils import (
    build_app_id,
    build_app_secret,
    create_unique_no,
    normalize_params,
    str_asterisk,
)
from datagate.config import get_settings
from datagate.db.models import ApiClient
from datagate.domain.api_client import (
    ApiClientCreate,
    ApiClientResponse,
    ApiClientSearch,
    ApiClientUpdate,
)
from datagate.repositories.api_client_repo import ApiClientRepository

logger = logging.getLogger(__name__)

# Length of the numeric part of client_no
CLIENT_NO_LENGTH = 8
CLIENT_NO_PREFIX = "C"
# Retries when a generated app_id collides
APP_ID_ATTEMPTS = 3
# Attributes the client list may be ordered by
SORTABLE_ATTRIBUTES = ("id", "name", "created_at", "updated_at")


class ApiClientService:
    """
    API Client Management Service

    Issues and rotates credentials, and handles client CRUD.
    """

    def __init__(self, repo: ApiClientRepository):
        """
        Initialize Service

        Args:
            repo: API Client Repository
        """
        self.repo = repo
        self.settings = get_settings()

    def _to_response(self, entity: ApiClient, reveal_secret: bool = False) -> ApiClientResponse:
        response = ApiClientResponse.model_validate(entity)
        if not reveal_secret:
            response.app_secret = str_asterisk(entity.app_secret, 4, 4)
        return response

    def _new_secret(self) -> str:
        return build_app_secret(
            self.settings.APP_SECRET_LENGTH, self.settings.APP_SECRET_PREFIX
        )

    async def _new_app_id(self) -> str:
        for _ in range(APP_ID_ATTEMPTS):
            app_id = build_app_id(self.settings.APP_ID_PREFIX, self.settings.APP_ID_LENGTH)
            if not await self.repo.check_exists("app_id", app_id):
                return app_id
        raise ConflictError(
            message="Could not generate a unique app_id",
            code="app_id_exhausted",
        )

    async def create(self, data: ApiClientCreate) -> ApiClientResponse:
        """
        Create API Client

        Returns:
            ApiClientResponse: Created client with the plain secret

        Raises:
            ConflictError: Name already exists
        """
        if await self.repo.check_exists("name", data.name):
            raise ConflictError(
                message=f"Client with name '{data.name}' already exists",
                code="duplicate_name",
            )

        app_id = await self._new_app_id()

        # Insert and client_no assignment commit together
        writer = ApiClientRepository(self.repo.session, auto_commit=False)
        try:
            entity = await writer.create({
                "name": data.name,
                "is_active": data.is_active,
                "app_id": app_id,
                "app_secret": self._new_secret(),
            })
            client_no = create_unique_no(entity.id, CLIENT_NO_LENGTH, CLIENT_NO_PREFIX)
            await writer.update({"client_no": client_no}, entity.id)
            await self.repo.session.commit()
        except Exception:
            await self.repo.session.rollback()
            raise
        entity = await self.repo.find(entity.id)

        logger.info("Issued client %s (%s)", entity.app_id, entity.name)
        return self._to_response(entity, reveal_secret=True)

    async def get_by_id(self, id: int) -> Optional[ApiClientResponse]:
        """Get Client by ID (Secret masked)"""
        entity = await self.repo.find(id)
        return self._to_response(entity) if entity else None

    async def get_by_app_id(self, app_id: str) -> Optional[ApiClient]:
        """Get Client entity by App ID"""
        return await self.repo.find_by_app_id(app_id)

    async def get_all(
        self,
        search: ApiClientSearch,
        page: int = 1,
        per_page: Optional[int] = None,
        order_by: str = "id",
        order: str = "desc",
    ) -> dict[str, Any]:
        """
        Get Client List

        Returns:
            dict: Page dictionary with masked clients under "data"

        Raises:
            ValidationError: order_by is not one of SORTABLE_ATTRIBUTES
        """
        if order_by not in SORTABLE_ATTRIBUTES:
            raise ValidationError(
                message=f"Cannot order clients by '{order_by}'",
                code="unsortable_attribute",
                details={"allowed": list(SORTABLE_ATTRIBUTES)},
            )
        result = await (
            self.repo.apply_search(search)
            .set_order_by(order_by, order)
            .paginate(per_page or self.settings.PAGE_SIZE, page=page)
        )
        payload = result.to_dict()
        payload["data"] = [
            self._to_response(entity).model_dump(mode="json") for entity in result.items
        ]
        return payload

    async def update(self, id: int, data: ApiClientUpdate) -> Optional[ApiClientResponse]:
        """
        Update Client

        Raises:
            ConflictError: Name already used by another client
        """
        values = normalize_params(
            ["name", "is_active"], data.model_dump(exclude_none=True)
        )
        if "name" in values and await self.repo.check_exists("name", values["name"], id):
            raise ConflictError(
                message=f"Client with name '{values['name']}' already exists",
                code="duplicate_name",
            )
        if values and not await self.repo.update(values, id):
            return None
        return await self.get_by_id(id)

    async def delete(self, id: int) -> bool:
        """Delete Client"""
        return await self.repo.delete(id) > 0

    async def rotate_secret(self, id: int) -> Optional[ApiClientResponse]:
        """
        Issue a new secret

        The row is read under an exclusive lock; concurrent rotations of the
        same client wait for each other until the update commits.

        Raises:
            ErrorException: Client is disabled (403)
        """
        entity = await self.repo.find_add_lock(id, shared=False)
        if entity is None:
            return None
        if not entity.is_active:
            raise ErrorException(
                f"Client {entity.app_id} is disabled", status.HTTP_403_FORBIDDEN
            )

        secret = self._new_secret()
        await self.repo.update({"app_secret": secret}, id)
        entity = await self.repo.find(id)
        logger.info("Rotated secret of client %s", entity.app_id)
        return self._to_response(entity, reveal_secret=True)

    async def set_logo(self, id: int, path: str) -> Optional[ApiClientResponse]:
        """Store the uploaded logo path"""
        if not await self.repo.update({"logo": path}, id):
            return None
        return await self.get_by_id(id)
