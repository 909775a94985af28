"""Product Schemas — creation, edits, restock, and product responses.

Invariants:
    - price is integer minor units (>= 0); stock >= 0; restock quantity >= 1
    - ProductUpdate carries no stock field; stock moves only through the ledger
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.schemas.common import PageMeta


def _strip_name(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("name cannot be empty or whitespace")
    return v


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    price: int = Field(ge=0)
    stock: int = Field(0, ge=0)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_name(v)


class ProductUpdate(BaseModel):
    """Partial edit; omitted fields stay as they are."""
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    price: int | None = Field(None, ge=0)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return _strip_name(v)


class RestockRequest(BaseModel):
    quantity: int = Field(ge=1)


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    provider_id: UUID
    name: str
    description: str | None
    price: int
    stock: int
    created_at: datetime


class ProductListResponse(PageMeta):
    products: list[ProductResponse]
