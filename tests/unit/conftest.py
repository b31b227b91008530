import pytest

from app.crud.cart import CartRepository
from app.crud.exceptions import ForeignKeyViolation, RecordNotFound
from app.crud.item import ItemRepository
from app.models.cart import CartItem
from app.models.item import Item
from app.schemas.item import ItemQuery
from app.services.pagination import DEFAULT_PER_PAGE
from app.storage.base import ImageStorage


class InMemoryItemRepository(ItemRepository):
    """Dict-backed stand-in for ItemCRUD."""

    def __init__(self):
        self.rows: dict[int, Item] = {}
        self.referenced: set[int] = set()
        self._next_id = 1

    async def find_all(self):
        return [self.rows[i] for i in sorted(self.rows)]

    async def find_by_id(self, item_id):
        return self.rows.get(item_id)

    async def create(self, data):
        item = Item(id=self._next_id, **data)
        self.rows[item.id] = item
        self._next_id += 1
        return item

    async def update(self, item_id, data):
        item = self.rows.get(item_id)
        if item is None:
            raise RecordNotFound(item_id)
        for field, value in data.items():
            setattr(item, field, value)
        return item

    async def delete(self, item_id):
        if item_id not in self.rows:
            raise RecordNotFound(item_id)
        if item_id in self.referenced:
            raise ForeignKeyViolation(item_id)
        del self.rows[item_id]

    async def find_all_with_filters(self, filters: ItemQuery):
        matches = [
            item for item in await self.find_all()
            if (not filters.name_like or filters.name_like.lower() in item.name.lower())
            and (filters.price_gte is None or item.price >= filters.price_gte)
            and (filters.price_lte is None or item.price <= filters.price_lte)
            and (filters.price_gt is None or item.price > filters.price_gt)
            and (filters.price_lt is None or item.price < filters.price_lt)
        ]
        limit = filters.limit or DEFAULT_PER_PAGE
        page = filters.page or 1
        start = (page - 1) * limit
        return matches[start:start + limit], len(matches)


class InMemoryCartRepository(CartRepository):
    """Dict-backed stand-in for CartCRUD that counts writes."""

    def __init__(self, fail_on_item: int | None = None):
        self.rows: dict[int, CartItem] = {}
        self.calls: list[str] = []
        self.fail_on_item = fail_on_item
        self._next_id = 1

    async def find_all(self):
        return [self.rows[i] for i in sorted(self.rows)]

    async def find_by_id(self, cart_id):
        return self.rows.get(cart_id)

    async def find_by_user_and_item(self, user_id, item_id):
        return next(
            (r for r in self.rows.values() if r.user_id == user_id and r.item_id == item_id),
            None,
        )

    async def create(self, *, user_id, item_id, quantity):
        if item_id == self.fail_on_item:
            raise ForeignKeyViolation(item_id)
        self.calls.append("create")
        row = CartItem(id=self._next_id, user_id=user_id, item_id=item_id, quantity=quantity)
        self.rows[row.id] = row
        self._next_id += 1
        return row

    async def update(self, cart_id, *, quantity):
        self.calls.append("update")
        row = self.rows[cart_id]
        row.quantity = quantity
        return row

    async def delete(self, cart_id):
        self.calls.append("delete")
        del self.rows[cart_id]


class RecordingImageStorage(ImageStorage):
    def __init__(self):
        self.saved: list[tuple[int, str, str]] = []

    async def save_for_item(self, item_id, base64_data, extension):
        self.saved.append((item_id, base64_data, extension))
        return f"/storage/items/{item_id}.{extension}"


@pytest.fixture
def item_repository():
    return InMemoryItemRepository()


@pytest.fixture
def cart_repository():
    return InMemoryCartRepository()


@pytest.fixture
def image_storage():
    return RecordingImageStorage()


@pytest.fixture
def failing_cart_repository():
    """Refuses to create a cart row for item 99."""
    return InMemoryCartRepository(fail_on_item=99)
