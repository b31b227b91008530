import base64
import binascii
from abc import ABC, abstractmethod

from app.core.exceptions import BadRequestError

CONTENT_TYPES = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
}


def decode_image(payload: str) -> bytes:
    """Decode a base64 image, accepting an optional ``data:...;base64,`` prefix."""
    if payload.startswith("data:") and "," in payload:
        payload = payload.split(",", 1)[1]

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise BadRequestError("Image payload is not valid base64")

    if not data:
        raise BadRequestError("Image payload is empty")
    return data


def image_file_name(item_id: int, extension: str) -> str:
    return f"{item_id}.{extension.lower()}"


class ImageStorage(ABC):

    @abstractmethod
    async def save_for_item(self, item_id: int, base64_data: str, extension: str) -> str:
        """Persist an item image and return the URL it is served from."""
        pass
