import logging
from abc import ABC, abstractmethod

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.exceptions import ForeignKeyViolation, RecordNotFound
from app.models.item import Item
from app.schemas.item import ItemQuery
from app.services.pagination import DEFAULT_PER_PAGE

logger = logging.getLogger(__name__)


class ItemRepository(ABC):

    @abstractmethod
    async def find_all(self) -> list[Item]:
        pass

    @abstractmethod
    async def find_by_id(self, item_id: int) -> Item | None:
        pass

    @abstractmethod
    async def create(self, data: dict) -> Item:
        pass

    @abstractmethod
    async def update(self, item_id: int, data: dict) -> Item:
        pass

    @abstractmethod
    async def delete(self, item_id: int) -> None:
        pass

    @abstractmethod
    async def find_all_with_filters(self, filters: ItemQuery) -> tuple[list[Item], int]:
        """Return the requested page of matching items and the total match count."""
        pass


class ItemCRUD(ItemRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_all(self) -> list[Item]:
        result = await self.session.execute(select(Item).order_by(Item.id.asc()))
        return list(result.scalars().all())

    async def find_by_id(self, item_id: int) -> Item | None:
        return await self.session.get(Item, item_id)

    async def create(self, data: dict) -> Item:
        db_obj = Item(**data)
        self.session.add(db_obj)
        await self.session.commit()
        # Load server-side timestamps
        await self.session.refresh(db_obj)
        return db_obj

    async def update(self, item_id: int, data: dict) -> Item:
        db_obj = await self.session.get(Item, item_id)
        if db_obj is None:
            raise RecordNotFound(f"Item {item_id} does not exist")

        for field, value in data.items():
            setattr(db_obj, field, value)

        await self.session.commit()
        # updated_at is set by the database and expired after the flush
        await self.session.refresh(db_obj)
        return db_obj

    async def delete(self, item_id: int) -> None:
        db_obj = await self.session.get(Item, item_id)
        if db_obj is None:
            raise RecordNotFound(f"Item {item_id} does not exist")

        await self.session.delete(db_obj)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning(f"Delete of item {item_id} refused: {e.orig}")
            raise ForeignKeyViolation(f"Item {item_id} is still referenced") from e

    def _filter_conditions(self, filters: ItemQuery) -> list:
        conditions = []
        if filters.name_like:
            conditions.append(Item.name.ilike(f"%{filters.name_like}%"))
        if filters.price_gte is not None:
            conditions.append(Item.price >= filters.price_gte)
        if filters.price_lte is not None:
            conditions.append(Item.price <= filters.price_lte)
        if filters.price_gt is not None:
            conditions.append(Item.price > filters.price_gt)
        if filters.price_lt is not None:
            conditions.append(Item.price < filters.price_lt)
        return conditions

    async def find_all_with_filters(self, filters: ItemQuery) -> tuple[list[Item], int]:
        conditions = self._filter_conditions(filters)
        limit = filters.limit or DEFAULT_PER_PAGE
        page = filters.page or 1

        stmt = (
            select(Item)
            .where(*conditions)
            .order_by(Item.id.asc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        items = list(result.scalars().all())

        total = await self.session.scalar(
            select(func.count()).select_from(Item).where(*conditions)
        )

        return items, total or 0
