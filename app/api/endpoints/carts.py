import logging
from typing import List

from fastapi import APIRouter, Depends, Path
from starlette import status

from app.core.deps import get_cart_service, get_current_user
from app.db.base import MAX_DB_INT
from app.models.user import User
from app.schemas.cart import CartIntent, CartItemIn, CartRead
from app.services.cart_service import CartService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/carts", tags=["Carts"])


@router.get("", response_model=List[CartRead])
async def get_all_carts(
    service: CartService = Depends(get_cart_service),
    current_user: User = Depends(get_current_user),
):
    return await service.find_all()


@router.get("/{cart_id}", response_model=CartRead)
async def get_cart_by_id(
    cart_id: int = Path(..., ge=1, le=MAX_DB_INT),
    service: CartService = Depends(get_cart_service),
    current_user: User = Depends(get_current_user),
):
    return await service.find_by_id(cart_id)


@router.post("", response_model=List[CartRead], status_code=status.HTTP_200_OK)
async def upsert_cart(
    cart_in: List[CartItemIn],
    service: CartService = Depends(get_cart_service),
    current_user: User = Depends(get_current_user),
):
    """
    Set target quantities for the current user's cart.

    quantity 0 removes the item, any other value replaces the stored
    quantity. Responds with the full current cart state.
    """
    intents = [
        CartIntent(item_id=entry.item_id, user_id=current_user.id, quantity=entry.quantity)
        for entry in cart_in
    ]
    return await service.create(intents)
