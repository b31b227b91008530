from abc import ABC, abstractmethod

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.crud.exceptions import ForeignKeyViolation, RecordNotFound
from app.models.cart import CartItem


class CartRepository(ABC):

    @abstractmethod
    async def find_all(self) -> list[CartItem]:
        pass

    @abstractmethod
    async def find_by_id(self, cart_id: int) -> CartItem | None:
        pass

    @abstractmethod
    async def find_by_user_and_item(self, user_id: int, item_id: int) -> CartItem | None:
        pass

    @abstractmethod
    async def create(self, *, user_id: int, item_id: int, quantity: int) -> CartItem:
        pass

    @abstractmethod
    async def update(self, cart_id: int, *, quantity: int) -> CartItem:
        pass

    @abstractmethod
    async def delete(self, cart_id: int) -> None:
        pass


class CartCRUD(CartRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_all(self) -> list[CartItem]:
        result = await self.session.execute(
            select(CartItem)
            .options(selectinload(CartItem.item))
            .order_by(CartItem.id.asc())
        )
        return list(result.scalars().all())

    async def find_by_id(self, cart_id: int) -> CartItem | None:
        result = await self.session.execute(
            select(CartItem)
            .options(selectinload(CartItem.item))
            .where(CartItem.id == cart_id)
        )
        return result.scalar_one_or_none()

    async def find_by_user_and_item(self, user_id: int, item_id: int) -> CartItem | None:
        result = await self.session.execute(
            select(CartItem)
            .options(selectinload(CartItem.item))
            .where(CartItem.user_id == user_id, CartItem.item_id == item_id)
        )
        return result.scalar_one_or_none()

    async def create(self, *, user_id: int, item_id: int, quantity: int) -> CartItem:
        db_obj = CartItem(user_id=user_id, item_id=item_id, quantity=quantity)
        self.session.add(db_obj)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ForeignKeyViolation(
                f"Cart row for user {user_id} / item {item_id} violates a constraint"
            ) from e
        return await self.find_by_id(db_obj.id)

    async def update(self, cart_id: int, *, quantity: int) -> CartItem:
        db_obj = await self.find_by_id(cart_id)
        if db_obj is None:
            raise RecordNotFound(f"Cart row {cart_id} does not exist")

        db_obj.quantity = quantity
        await self.session.commit()
        return db_obj

    async def delete(self, cart_id: int) -> None:
        db_obj = await self.session.get(CartItem, cart_id)
        if db_obj is None:
            raise RecordNotFound(f"Cart row {cart_id} does not exist")

        await self.session.delete(db_obj)
        await self.session.commit()
