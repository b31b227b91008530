from pydantic import BaseModel, ConfigDict, Field

from app.db.base import MAX_DB_INT
from app.schemas.item import ItemRead


class CartItemIn(BaseModel):
    """One entry of the POST /api/carts body."""
    item_id: int = Field(..., gt=0, le=MAX_DB_INT, strict=True, description="Item ID must be a positive integer")
    quantity: int = Field(..., ge=0, le=MAX_DB_INT, strict=True, description="0 removes the item from the cart")


class CartIntent(BaseModel):
    """A requested target quantity of one item for one user."""
    item_id: int
    user_id: int
    quantity: int = Field(..., ge=0)


class CartRead(BaseModel):
    id: int
    user_id: int
    item_id: int
    quantity: int
    item: ItemRead | None = None

    model_config = ConfigDict(from_attributes=True)
