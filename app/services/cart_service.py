import logging
from typing import Sequence

from app.core.exceptions import BadRequestError, NotFoundError, ValidationError
from app.crud.cart import CartRepository
from app.crud.exceptions import ForeignKeyViolation
from app.models.cart import CartItem
from app.schemas.cart import CartIntent

logger = logging.getLogger(__name__)


class CartService:

    def __init__(self, cart_repository: CartRepository):
        self.cart_repository = cart_repository

    async def find_all(self) -> list[CartItem]:
        return await self.cart_repository.find_all()

    async def find_by_id(self, cart_id: int) -> CartItem:
        cart = await self.cart_repository.find_by_id(cart_id)
        if not cart:
            raise NotFoundError("Cart not found")
        return cart

    async def create(self, cart_items: Sequence[CartIntent] | None) -> list[CartItem]:
        """
        Reconcile the cart with a list of target quantities.

        For each intent: quantity 0 removes the row (no-op when absent),
        otherwise the row's quantity is replaced or a new row is created.
        Intents are applied one after another, each committed on its own.
        Returns every cart row afterwards. An entry that names an unknown item
        stops the batch with a BadRequestError; earlier entries stay applied.
        """
        if cart_items is None:
            raise ValidationError("Cart items are required")

        for intent in cart_items:
            existing = await self.cart_repository.find_by_user_and_item(
                intent.user_id, intent.item_id
            )

            if intent.quantity == 0:
                if existing:
                    await self.cart_repository.delete(existing.id)
                    logger.debug(f"Cart row {existing.id} removed")
            elif existing:
                await self.cart_repository.update(existing.id, quantity=intent.quantity)
            else:
                try:
                    await self.cart_repository.create(
                        user_id=intent.user_id,
                        item_id=intent.item_id,
                        quantity=intent.quantity,
                    )
                except ForeignKeyViolation:
                    logger.warning(f"Cart entry refused: item {intent.item_id} does not exist")
                    raise BadRequestError(f"Item {intent.item_id} does not exist")

        logger.info(f"Cart reconciled: {len(cart_items)} intent(s) applied")
        return await self.cart_repository.find_all()
