import logging
from pathlib import Path

from starlette.concurrency import run_in_threadpool

from app.storage.base import ImageStorage, decode_image, image_file_name

logger = logging.getLogger(__name__)


class LocalImageStorage(ImageStorage):
    """Writes images below ``base_dir``; they are served under ``public_path``."""

    def __init__(self, base_dir: str | Path, public_path: str):
        self.base_dir = Path(base_dir)
        self.public_path = public_path.rstrip("/")

    def _write(self, file_name: str, data: bytes) -> None:
        self.base_dir.mkdir(parents=True, exist_ok=True)
        (self.base_dir / file_name).write_bytes(data)

    async def save_for_item(self, item_id: int, base64_data: str, extension: str) -> str:
        data = decode_image(base64_data)
        file_name = image_file_name(item_id, extension)

        try:
            await run_in_threadpool(self._write, file_name, data)
        except OSError as e:
            logger.error(f"Local image write failed: {str(e)}")
            raise

        logger.info(f"Image stored: {self.base_dir / file_name} ({len(data)} bytes)")
        return f"{self.public_path}/{file_name}"
