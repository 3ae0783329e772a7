"""
API 依赖注入模块

提供 FastAPI 路由所需的依赖项。
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from datagate.common.responses import ApiResponder
from datagate.config import get_settings
from datagate.db.session import get_db as _get_db
from datagate.repositories import ApiClientRepository
from datagate.services import ApiClientService
from datagate.storage import Storage, get_disk


async def get_db():
    """
    获取数据库会话依赖

    Yields:
        AsyncSession: 异步数据库会话
    """
    async for session in _get_db():
        yield session


# 数据库会话依赖类型
DbSession = Annotated[AsyncSession, Depends(get_db)]


# ============ Repository 依赖 ============

def get_api_client_repo(db: DbSession) -> ApiClientRepository:
    """获取客户端 Repository"""
    return ApiClientRepository(db)


# ============ Service 依赖 ============

def get_api_client_service(
    repo: Annotated[ApiClientRepository, Depends(get_api_client_repo)],
) -> ApiClientService:
    """获取客户端服务"""
    return ApiClientService(repo)


# ============ 响应依赖 ============

def get_responder() -> ApiResponder:
    """每个请求一个 Responder，状态码不跨请求共享"""
    return ApiResponder()


# ============ 存储依赖 ============

def get_upload_disk() -> Storage:
    """获取上传磁盘"""
    return get_disk(get_settings().UPLOAD_DISK_NAME)


# 依赖类型别名
ApiClientServiceDep = Annotated[ApiClientService, Depends(get_api_client_service)]
ResponderDep = Annotated[ApiResponder, Depends(get_responder)]
UploadDiskDep = Annotated[Storage, Depends(get_upload_disk)]
