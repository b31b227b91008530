import logging
from io import BytesIO

import boto3
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.storage.base import CONTENT_TYPES, ImageStorage, decode_image, image_file_name

logger = logging.getLogger(__name__)


class S3ImageStorage(ImageStorage):
    """Stores item images in an S3-compatible bucket (AWS, R2, MinIO)."""

    prefix = "items"

    def __init__(self):
        self.client = boto3.client(
            "s3",
            endpoint_url=settings.s3_endpoint,
            aws_access_key_id=settings.s3_access_key,
            aws_secret_access_key=settings.s3_secret_key,
            region_name=settings.s3_region,
        )
        self.bucket = settings.s3_bucket
        self.public_url = (settings.s3_public_url or "").rstrip("/")

    def _put(self, key: str, data: bytes, content_type: str) -> None:
        self.client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=BytesIO(data),
            ContentType=content_type,
        )

    async def save_for_item(self, item_id: int, base64_data: str, extension: str) -> str:
        data = decode_image(base64_data)
        key = f"{self.prefix}/{image_file_name(item_id, extension)}"
        content_type = CONTENT_TYPES.get(extension.lower(), "application/octet-stream")

        try:
            await run_in_threadpool(self._put, key, data, content_type)
            logger.info(f"S3 uploaded: {key}")
        except Exception as e:
            logger.error(f"S3 upload failed: {str(e)}")
            raise

        return f"{self.public_url}/{key}"
