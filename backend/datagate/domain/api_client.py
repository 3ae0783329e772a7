"""
API Client Domain Model

Defines API Client related Data Transfer Objects (DTOs).
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ApiClientCreate(BaseModel):
    """Create API Client Request Model"""

    # Client Name
    name: str = Field(..., min_length=1, max_length=100, description="Client Name")
    # Is Active
    is_active: bool = Field(True, description="Is Active")


class ApiClientUpdate(BaseModel):
    """Update API Client Request Model (All fields optional)"""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    is_active: Optional[bool] = None


class ApiClientSearch(BaseModel):
    """Decoded `condition` filters for the client list"""

    # Fuzzy match on name
    name: Optional[str] = Field(None, max_length=100)
    app_id: Optional[str] = Field(None, max_length=64)
    is_active: Optional[bool] = None

    model_config = ConfigDict(extra="forbid")


# Longest accepted data URI, about 1.5 MB of decoded image
LOGO_MAX_LENGTH = 2 * 1024 * 1024


class LogoUpload(BaseModel):
    """Logo Upload Request Model"""

    # Data URI, e.g. data:image/png;base64,...
    image: str = Field(
        ..., min_length=1, max_length=LOGO_MAX_LENGTH, description="Base64 data URI"
    )


class ApiClientResponse(BaseModel):
    """API Client Response Model (Secret Masked)"""

    id: int = Field(..., description="Client ID")
    name: str = Field(..., description="Client Name")
    app_id: str = Field(..., description="App ID")
    # Masked unless returned right after issuing
    app_secret: str = Field(..., description="App Secret")
    client_no: Optional[str] = Field(None, description="Client Serial Number")
    logo: Optional[str] = Field(None, description="Logo Path")
    is_active: bool = Field(True, description="Is Active")
    created_at: datetime = Field(..., description="Creation Time")
    updated_at: datetime = Field(..., description="Update Time")

    model_config = ConfigDict(from_attributes=True)
