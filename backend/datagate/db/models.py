"""
SQLAlchemy ORM Model Definitions

Defines the database table structures, including:
- api_clients: API Client Credentials Table
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import Boolean, DateTime, Integer, String, inspect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from datagate.common.time import utc_now_naive


class Base(DeclarativeBase):
    """SQLAlchemy ORM Base Class"""

    # Column attributes never rendered by to_dict
    __hidden__ = ()

    def to_dict(self) -> dict[str, Any]:
        """
        Convert loaded column attributes to a dictionary

        Attributes that were not loaded (e.g. excluded by load_only) and
        attributes listed in __hidden__ are skipped.
        """
        state = inspect(self)
        return {
            attr.key: getattr(self, attr.key)
            for attr in state.mapper.column_attrs
            if attr.key not in state.unloaded and attr.key not in self.__hidden__
        }


class ApiClient(Base):
    """
    API Client Credentials Table

    Stores issued app_id / app_secret pairs for API consumers.
    """
    __tablename__ = "api_clients"
    __hidden__ = ("app_secret",)

    # Primary Key ID
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Client Name, unique
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    # Public App ID, unique
    app_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    # App Secret
    app_secret: Mapped[str] = mapped_column(String(128), nullable=False)
    # Serial number derived from id, filled after insert
    client_no: Mapped[Optional[str]] = mapped_column(String(32), nullable=True, unique=True)
    # Logo path on the upload disk
    logo: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    # Is Active
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    # Creation Time
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now_naive, nullable=False
    )
    # Update Time
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now_naive, onupdate=utc_now_naive, nullable=False
    )
