import pytest

from app.core.exceptions import BadRequestError, NotFoundError
from app.schemas.item import ItemCreate, ItemUpdate
from app.services.item_service import ItemService


@pytest.fixture
def service(item_repository, image_storage):
    return ItemService(item_repository, image_storage)


@pytest.fixture
async def stored_item(item_repository):
    return await item_repository.create(
        {"name": "Widget", "content": "desc", "price": 100, "image": "/storage/items/1.png"}
    )


async def test_create_stores_image_before_item(service, image_storage):
    item = await service.create(
        ItemCreate(name="Widget", price=100, content="desc", base64="aGVsbG8=", extension="PNG")
    )

    placeholder_id, payload, extension = image_storage.saved[0]
    assert payload == "aGVsbG8="
    assert extension == "png"
    assert placeholder_id > 1_000_000_000_000  # milliseconds timestamp
    assert item.image == f"/storage/items/{placeholder_id}.png"


async def test_update_price_only_keeps_other_fields(service, stored_item, image_storage):
    updated = await service.update(stored_item.id, ItemUpdate(price=999))

    assert updated.price == 999
    assert updated.name == "Widget"
    assert updated.content == "desc"
    assert updated.image == "/storage/items/1.png"
    assert image_storage.saved == []


async def test_update_image_needs_payload_and_extension(service, stored_item, image_storage):
    await service.update(stored_item.id, ItemUpdate(base64="aGVsbG8="))
    assert image_storage.saved == []

    updated = await service.update(stored_item.id, ItemUpdate(base64="aGVsbG8=", extension="jpg"))
    assert image_storage.saved == [(stored_item.id, "aGVsbG8=", "jpg")]
    assert updated.image == f"/storage/items/{stored_item.id}.jpg"


async def test_update_missing_item_is_not_found(service):
    with pytest.raises(NotFoundError):
        await service.update(404, ItemUpdate(name="Ghost"))


async def test_find_by_id_missing_is_not_found(service):
    with pytest.raises(NotFoundError):
        await service.find_by_id(999999)


async def test_delete_referenced_item_is_bad_request(service, stored_item, item_repository):
    item_repository.referenced.add(stored_item.id)

    with pytest.raises(BadRequestError):
        await service.delete(stored_item.id)

    assert stored_item.id in item_repository.rows


async def test_delete_missing_item_is_not_found(service):
    with pytest.raises(NotFoundError):
        await service.delete(12345)


async def test_delete_removes_item(service, stored_item, item_repository):
    await service.delete(stored_item.id)

    assert item_repository.rows == {}
