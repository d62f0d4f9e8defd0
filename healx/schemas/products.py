"""Product schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from healx.schemas.common import Money


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    price: Money = Field(..., ge=0)
    description: str = Field(..., min_length=1)
    image_url: str = Field(..., min_length=1, alias="imageUrl")

    model_config = {"populate_by_name": True}


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    price: Money | None = Field(None, ge=0)
    description: str | None = Field(None, min_length=1)
    image_url: str | None = Field(None, min_length=1, alias="imageUrl")

    model_config = {"populate_by_name": True}


class ProductResponse(ProductBase):
    id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True, "populate_by_name": True}
