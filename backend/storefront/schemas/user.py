"""User Schemas — registration and profile responses."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from storefront.core.domain_types import UserRole


class UserCreate(BaseModel):
    email: str = Field(
        min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
    )
    name: str = Field(min_length=1, max_length=100)
    role: UserRole = UserRole.CONSUMER


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: str
    role: UserRole
    created_at: datetime
