import logging
import secrets
import string
import time

from motorent.utils.exceptions import FileValidationException
from motorent.utils.storage import MOTORCYCLE_IMAGES_BUCKET, storage

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/webp", "image/gif"}
MAX_IMAGE_SIZE      = 5 * 1024 * 1024  # 5MB


def _extension(filename: str | None, content_type: str) -> str:
    if filename and "." in filename:
        return filename.rsplit(".", 1)[-1].lower()
    return content_type.split("/")[-1]


def validate_image_file(content_type: str | None, size: int) -> None:
    """Raise FileValidationException for a wrong type or an oversized image."""
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise FileValidationException("Invalid file type. Please upload JPG, PNG, WEBP, or GIF images.")
    if size > MAX_IMAGE_SIZE:
        raise FileValidationException("File size too large. Maximum size is 5MB.")


def upload_motorcycle_image(
    content: bytes, filename: str | None, content_type: str | None, file_name: str | None = None,
) -> str:
    """Store one image in the public bucket and return its public URL."""
    validate_image_file(content_type, len(content))

    if not file_name:
        suffix = "".join(secrets.choice(string.ascii_lowercase + string.digits) for _ in range(7))
        file_name = f"motorcycle_{int(time.time() * 1000)}_{suffix}.{_extension(filename, content_type)}"

    path = storage.upload(MOTORCYCLE_IMAGES_BUCKET, file_name, content)
    return storage.get_public_url(MOTORCYCLE_IMAGES_BUCKET, path)


def upload_multiple_images(files: list[tuple[bytes, str | None, str | None]]) -> list[str]:
    """Validate every file first so a bad one aborts the batch before any write."""
    for content, _, content_type in files:
        validate_image_file(content_type, len(content))
    return [upload_motorcycle_image(content, filename, content_type) for content, filename, content_type in files]


def delete_motorcycle_image(image_url: str) -> bool:
    marker = f"/{MOTORCYCLE_IMAGES_BUCKET}/"
    if marker not in image_url:
        logger.warning(f"Invalid image URL format: {image_url}")
        return False
    path = image_url.split(marker, 1)[1]
    return bool(storage.remove(MOTORCYCLE_IMAGES_BUCKET, [path]))


def get_public_url(path: str) -> str:
    return storage.get_public_url(MOTORCYCLE_IMAGES_BUCKET, path)


def list_motorcycle_images() -> list[dict]:
    return [
        {**item, "url": storage.get_public_url(MOTORCYCLE_IMAGES_BUCKET, item["name"])}
        for item in storage.list(MOTORCYCLE_IMAGES_BUCKET)
    ]
