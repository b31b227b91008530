import logging
import time

from app.core.exceptions import BadRequestError, NotFoundError
from app.crud.exceptions import ForeignKeyViolation, RecordNotFound
from app.crud.item import ItemRepository
from app.models.item import Item
from app.schemas.item import ItemCreate, ItemQuery, ItemUpdate
from app.services.pagination import paginate
from app.storage.base import ImageStorage

logger = logging.getLogger(__name__)

ITEMS_PATH = "/api/items"


class ItemService:

    def __init__(self, item_repository: ItemRepository, image_storage: ImageStorage):
        self.item_repository = item_repository
        self.image_storage = image_storage

    async def find_all(self, filters: ItemQuery | None = None) -> dict:
        """Filtered, paginated catalog listing."""
        filters = filters or ItemQuery()

        items, total = await self.item_repository.find_all_with_filters(filters)

        return paginate(
            filters.model_dump(exclude_none=True),
            items,
            total,
            base_path=ITEMS_PATH,
        )

    async def find_by_id(self, item_id: int) -> Item:
        item = await self.item_repository.find_by_id(item_id)
        if not item:
            raise NotFoundError("Item not found")
        return item

    async def create(self, item_in: ItemCreate) -> Item:
        """
        Store the image first, then the item that points at it.

        The item id is only known after the insert, so the image is keyed
        by the current timestamp in milliseconds.
        """
        placeholder_id = int(time.time() * 1000)
        image_url = await self.image_storage.save_for_item(
            placeholder_id, item_in.base64, item_in.extension
        )

        item = await self.item_repository.create(
            {
                "name": item_in.name,
                "price": item_in.price,
                "content": item_in.content,
                "image": image_url,
            }
        )
        logger.info(f"Item created: {item.id} ({item.name})")
        return item

    async def update(self, item_id: int, item_in: ItemUpdate) -> Item:
        update_data = {
            field: value
            for field, value in item_in.model_dump(
                include={"name", "content", "price"}, exclude_unset=True
            ).items()
            if value is not None
        }

        # The image changes only when both the payload and its extension are sent
        if item_in.base64 and item_in.extension:
            update_data["image"] = await self.image_storage.save_for_item(
                item_id, item_in.base64, item_in.extension
            )

        try:
            item = await self.item_repository.update(item_id, update_data)
        except RecordNotFound:
            raise NotFoundError("Item does not exist")

        logger.info(f"Item updated: {item_id} fields={sorted(update_data)}")
        return item

    async def delete(self, item_id: int) -> None:
        try:
            await self.item_repository.delete(item_id)
        except RecordNotFound:
            raise NotFoundError("Item does not exist")
        except ForeignKeyViolation:
            logger.warning(f"Item {item_id} delete refused: still referenced by a cart")
            raise BadRequestError(
                "This item cannot be deleted because it is referenced elsewhere (e.g. in a cart)."
            )

        logger.info(f"Item deleted: {item_id}")
