from datetime import datetime
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.db.base import MAX_DB_INT


ImageExtension = Literal["png", "jpg", "jpeg", "gif", "webp"]

MAX_PER_PAGE = 100


class ItemQuery(BaseModel):
    """Filters and paging accepted by GET /api/items (in serialization order)."""
    model_config = ConfigDict(extra="ignore")

    name_like: str | None = None
    price_gte: int | None = Field(None, ge=0, le=MAX_DB_INT)
    price_lte: int | None = Field(None, ge=0, le=MAX_DB_INT)
    price_gt: int | None = Field(None, ge=0, le=MAX_DB_INT)
    price_lt: int | None = Field(None, ge=0, le=MAX_DB_INT)
    limit: int | None = Field(None, ge=1, le=MAX_PER_PAGE)
    page: int | None = Field(None, ge=1, le=MAX_DB_INT)


class ItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, json_schema_extra={"example": "Widget"})
    price: int = Field(..., ge=0, le=MAX_DB_INT, json_schema_extra={"example": 100})
    content: str = Field(..., min_length=1, json_schema_extra={"example": "A very useful widget"})
    base64: str = Field(..., min_length=1, description="Base64 image payload, optionally a data URL")
    extension: ImageExtension

    @field_validator("extension", mode="before")
    @classmethod
    def normalize_extension(cls, v):
        if isinstance(v, str):
            return v.lower().lstrip(".")
        return v


class ItemUpdate(BaseModel):
    # Every field optional; only the ones sent are changed
    name: str | None = Field(None, min_length=1, max_length=255)
    price: int | None = Field(None, ge=0, le=MAX_DB_INT)
    content: str | None = Field(None, min_length=1)
    base64: str | None = None
    extension: ImageExtension | None = None

    @field_validator("extension", mode="before")
    @classmethod
    def normalize_extension(cls, v):
        if isinstance(v, str):
            return v.lower().lstrip(".")
        return v


class ItemRead(BaseModel):
    id: int
    name: str
    content: str
    price: int
    image: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class PaginatedItemsResponse(BaseModel):
    """Pagination envelope; serialized with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total: int = Field(..., json_schema_extra={"example": 100})
    per_page: int = Field(..., json_schema_extra={"example": 10})
    current_page: int = Field(..., json_schema_extra={"example": 1})
    last_page: int = Field(..., json_schema_extra={"example": 10})
    from_: int = Field(..., alias="from", json_schema_extra={"example": 1})
    to: int = Field(..., json_schema_extra={"example": 10})
    next_page_url: str | None = Field(None, json_schema_extra={"example": "/api/items?page=2&limit=10"})
    prev_page_url: str | None = None
    path: str = Field(..., json_schema_extra={"example": "/api/items"})
    data: List[ItemRead]
