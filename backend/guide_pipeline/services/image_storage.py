"""
Object storage for generated step images (Django storage API).
"""
import logging
import time
from typing import Callable, Optional

from django.core.files.base import ContentFile
from django.core.files.storage import Storage, default_storage

from guide_pipeline.errors import StorageError

logger = logging.getLogger(__name__)


MIME_EXTENSIONS = {
    'image/png': 'png',
    'image/jpeg': 'jpg',
    'image/jpg': 'jpg',
    'image/webp': 'webp',
}


class ImageStorage:
    """Uploads image bytes under a project/step/timestamp key"""

    def __init__(
        self,
        prefix: str = "guide-images",
        storage: Optional[Storage] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.prefix = prefix.strip('/')
        self.storage = storage or default_storage
        self.clock = clock

    def build_path(self, project_id: str, step_index: int, mime_type: str = 'image/png') -> str:
        extension = MIME_EXTENSIONS.get(mime_type, 'png')
        timestamp = int(self.clock() * 1000)
        return f"{self.prefix}/{project_id}/step-{step_index}-{timestamp}.{extension}"

    def upload(self, project_id: str, step_index: int, image_bytes: bytes, mime_type: str = 'image/png') -> str:
        """
        Save image bytes and return their public URL.

        Raises:
            StorageError: if the storage backend rejects the upload
        """
        path = self.build_path(project_id, step_index, mime_type)
        try:
            saved_name = self.storage.save(path, ContentFile(image_bytes))
            url = self.storage.url(saved_name)
        except Exception as e:
            raise StorageError("Failed to upload step image", details=f"{path}: {e}") from e

        logger.info(f"Uploaded step {step_index} image for project {project_id}: {saved_name}")
        return url
