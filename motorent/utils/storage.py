"""
Bucket-style object storage kept on the local filesystem.

Layout: {STORAGE_ROOT}/{bucket}/{path}. Public buckets are served at
/storage/v1/object/public/{bucket}/{path}; every bucket can be read through
a signed URL /storage/v1/object/sign/{bucket}/{path}?token=<jwt>.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path

from motorent.config import settings
from motorent.utils.exceptions import (
    DuplicateEntryException, FileValidationException, NotFoundException, StorageException,
)
from motorent.utils.security import create_storage_token

logger = logging.getLogger(__name__)

MOTORCYCLE_IMAGES_BUCKET = "motorcycle-images"
DOCUMENTS_BUCKET         = "documents"
PUBLIC_BUCKETS           = {MOTORCYCLE_IMAGES_BUCKET}


class BucketStorage:

    @property
    def root(self) -> Path:
        return Path(settings.STORAGE_ROOT).resolve()

    def _resolve(self, bucket: str, path: str) -> Path:
        bucket_dir = (self.root / bucket).resolve()
        target = (bucket_dir / path.lstrip("/")).resolve()
        if bucket_dir not in target.parents:
            raise FileValidationException("Invalid storage path")
        return target

    # ─── Write ────────────────────────────────────────────────────────────────
    def upload(self, bucket: str, path: str, content: bytes, upsert: bool = False) -> str:
        target = self._resolve(bucket, path)
        if target.exists() and not upsert:
            raise DuplicateEntryException("The resource already exists", field="path")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as e:
            logger.error(f"Storage upload failed for {bucket}/{path}: {e}")
            raise StorageException(f"Failed to upload file: {e.strerror or e}")
        logger.info(f"Stored {len(content)} bytes at {bucket}/{path}")
        return path

    def remove(self, bucket: str, paths: list[str]) -> list[str]:
        removed = []
        for path in paths:
            target = self._resolve(bucket, path)
            if not target.exists():
                continue
            try:
                target.unlink()
            except OSError as e:
                logger.error(f"Storage delete failed for {bucket}/{path}: {e}")
                raise StorageException(f"Failed to delete file: {e.strerror or e}")
            removed.append(path)
        return removed

    # ─── Read ─────────────────────────────────────────────────────────────────
    def open_path(self, bucket: str, path: str) -> Path:
        target = self._resolve(bucket, path)
        if not target.is_file():
            raise NotFoundException("Object")
        return target

    def list(self, bucket: str, prefix: str = "") -> list[dict]:
        bucket_dir = self.root / bucket
        base = self._resolve(bucket, prefix) if prefix else bucket_dir.resolve()
        if not base.is_dir():
            return []
        items = []
        for entry in sorted(base.iterdir()):
            if not entry.is_file():
                continue
            stat = entry.stat()
            items.append({
                "name":      entry.name,
                "size":      stat.st_size,
                "updatedAt": datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat(),
            })
        return items

    # ─── URLs ─────────────────────────────────────────────────────────────────
    def get_public_url(self, bucket: str, path: str) -> str:
        base = settings.PUBLIC_BASE_URL.rstrip("/")
        return f"{base}/storage/v1/object/public/{bucket}/{path}"

    def create_signed_url(self, bucket: str, path: str, expires_in: int | None = None) -> str:
        self.open_path(bucket, path)
        token = create_storage_token(bucket, path, expires_in or settings.SIGNED_URL_EXPIRE_SECONDS)
        base = settings.PUBLIC_BASE_URL.rstrip("/")
        return f"{base}/storage/v1/object/sign/{bucket}/{path}?token={token}"


storage = BucketStorage()
