import io
import logging
import os
import uuid
from minio import Minio
from minio.error import MinioException
from starlette.concurrency import run_in_threadpool
from .config import settings
from .exceptions import StorageError

logger = logging.getLogger(__name__)

MEDIA_FOLDER = "kguardian"

class MediaStorage:
    """Evidence uploads to an S3-compatible bucket (MinIO)."""

    def __init__(self, client: Minio, bucket: str, public_base_url: str):
        self.client = client
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")

    @classmethod
    def from_settings(cls):
        client = Minio(
            settings.MINIO_ENDPOINT,
            access_key=settings.MINIO_ACCESS_KEY,
            secret_key=settings.MINIO_SECRET_KEY,
            secure=settings.MINIO_SECURE,
        )
        scheme = "https" if settings.MINIO_SECURE else "http"
        public_base_url = settings.MINIO_PUBLIC_URL or f"{scheme}://{settings.MINIO_ENDPOINT}/{settings.MINIO_BUCKET}"
        return cls(client, settings.MINIO_BUCKET, public_base_url)

    def object_name_for(self, filename: str) -> str:
        extension = os.path.splitext(filename or "")[1].lower()
        return f"{MEDIA_FOLDER}/{uuid.uuid4().hex}{extension}"

    def public_url(self, object_name: str) -> str:
        return f"{self.public_base_url}/{object_name}"

    def _put(self, object_name: str, data: bytes, content_type: str):
        self.client.put_object(
            self.bucket,
            object_name,
            io.BytesIO(data),
            length=len(data),
            content_type=content_type,
        )

    async def upload(self, filename: str, data: bytes, content_type: str) -> str:
        """Store one file and return its public URL."""
        object_name = self.object_name_for(filename)
        try:
            await run_in_threadpool(self._put, object_name, data, content_type)
        except (MinioException, OSError) as e:
            logger.error("Upload of %s to bucket %s failed: %s", object_name, self.bucket, e)
            raise StorageError("Image upload failed. Please try again.") from e
        logger.info("Stored evidence %s (%d bytes)", object_name, len(data))
        return self.public_url(object_name)

_storage = None

def get_media_storage() -> MediaStorage:
    global _storage
    if _storage is None:
        _storage = MediaStorage.from_settings()
    return _storage
