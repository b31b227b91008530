import logging

from fastapi import APIRouter, Depends, Response
from starlette import status

from app.core.deps import get_current_admin, get_item_service
from app.core.exceptions import BadRequestError
from app.core.validation import require_json_object, validate_query
from app.db.base import MAX_DB_INT
from app.models.user import User
from app.schemas.item import ItemCreate, ItemQuery, ItemRead, ItemUpdate, PaginatedItemsResponse
from app.services.item_service import ItemService

# Initialize logger for audit events
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/items", tags=["Items"])


def parse_item_id(raw_id: str) -> int:
    """Path ids must be plain integers that fit the id column."""
    try:
        item_id = int(raw_id, 10)
    except ValueError:
        raise BadRequestError("Invalid item ID")

    if abs(item_id) > MAX_DB_INT:
        raise BadRequestError("Invalid item ID")
    return item_id


@router.get("", response_model=PaginatedItemsResponse)
async def get_all_items(
    filters: ItemQuery = Depends(validate_query(ItemQuery)),
    service: ItemService = Depends(get_item_service),
):
    """Public catalog: filtered by name/price and paginated."""
    return await service.find_all(filters)


@router.get("/{item_id}", response_model=ItemRead)
async def get_item_by_id(
    item_id: str,
    service: ItemService = Depends(get_item_service),
):
    return await service.find_by_id(parse_item_id(item_id))


@router.post(
    "",
    response_model=ItemRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_json_object)],
)
async def create_item(
    body: ItemCreate,
    service: ItemService = Depends(get_item_service),
    current_admin: User = Depends(get_current_admin),
):
    """Admin only: add an item with its image to the catalog."""
    item = await service.create(body)
    logger.info(f"AUDIT: Item {item.id} created by admin {current_admin.email}")
    return item


@router.put(
    "/{item_id}",
    response_model=ItemRead,
    dependencies=[Depends(require_json_object)],
)
async def update_item(
    item_id: str,
    body: ItemUpdate,
    service: ItemService = Depends(get_item_service),
    current_admin: User = Depends(get_current_admin),
):
    """Admin only: change the fields that are sent, leave the rest as is."""
    return await service.update(parse_item_id(item_id), body)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: str,
    service: ItemService = Depends(get_item_service),
    current_admin: User = Depends(get_current_admin),
):
    """Admin only: remove an item that is not in anybody's cart."""
    await service.delete(parse_item_id(item_id))

    logger.warning(f"AUDIT: Item {item_id} deleted by admin {current_admin.email}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
