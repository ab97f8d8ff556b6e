from unittest.mock import patch
from urllib.parse import urlsplit

import pytest

from motorent.services import storage_service
from motorent.utils.exceptions import DuplicateEntryException, FileValidationException
from motorent.utils.storage import DOCUMENTS_BUCKET, MOTORCYCLE_IMAGES_BUCKET, storage

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _path_of(url: str) -> str:
    parts = urlsplit(url)
    return f"{parts.path}?{parts.query}" if parts.query else parts.path


class TestValidation:

    def test_oversized_image_rejected_before_upload(self):
        with patch("motorent.services.storage_service.storage.upload") as mock_upload:
            with pytest.raises(FileValidationException) as exc:
                storage_service.upload_motorcycle_image(b"\x00" * (11 * 1024 * 1024), "big.png", "image/png")
        assert exc.value.message == "File size too large. Maximum size is 5MB."
        mock_upload.assert_not_called()

    def test_wrong_type_rejected(self):
        with pytest.raises(FileValidationException) as exc:
            storage_service.upload_motorcycle_image(b"%PDF-1.4", "brochure.pdf", "application/pdf")
        assert "JPG, PNG, WEBP, or GIF" in exc.value.message

    def test_batch_aborts_before_any_write(self, storage_root):
        files = [(PNG, "front.png", "image/png"), (b"GIF89a", "bad.txt", "text/plain")]

        with pytest.raises(FileValidationException):
            storage_service.upload_multiple_images(files)

        assert storage.list(MOTORCYCLE_IMAGES_BUCKET) == []


class TestMotorcycleImages:

    def test_upload_returns_public_url(self, storage_root):
        url = storage_service.upload_motorcycle_image(PNG, "Front View.PNG", "image/png")

        assert "/storage/v1/object/public/motorcycle-images/motorcycle_" in url
        assert url.endswith(".png")
        name = url.rsplit("/", 1)[1]
        assert (storage_root / MOTORCYCLE_IMAGES_BUCKET / name).read_bytes() == PNG

    def test_explicit_name_collision(self):
        storage_service.upload_motorcycle_image(PNG, "a.png", "image/png", file_name="click.png")
        with pytest.raises(DuplicateEntryException):
            storage_service.upload_motorcycle_image(PNG, "a.png", "image/png", file_name="click.png")

    def test_list_includes_urls(self):
        storage_service.upload_motorcycle_image(PNG, "a.png", "image/png", file_name="aerox.png")

        items = storage_service.list_motorcycle_images()

        assert [i["name"] for i in items] == ["aerox.png"]
        assert items[0]["size"] == len(PNG)
        assert items[0]["url"] == storage_service.get_public_url("aerox.png")

    def test_delete_by_url(self, storage_root):
        url = storage_service.upload_motorcycle_image(PNG, "a.png", "image/png")

        assert storage_service.delete_motorcycle_image(url) is True
        assert storage_service.list_motorcycle_images() == []

    def test_delete_invalid_url(self):
        assert storage_service.delete_motorcycle_image("https://cdn.example.com/elsewhere/x.png") is False

    def test_path_traversal_refused(self):
        with pytest.raises(FileValidationException):
            storage.upload(MOTORCYCLE_IMAGES_BUCKET, "../documents/owned.png", PNG)


class TestServing:

    def test_public_bucket_served(self, client):
        url = storage_service.upload_motorcycle_image(PNG, "a.png", "image/png")

        response = client.get(_path_of(url))

        assert response.status_code == 200
        assert response.content == PNG

    def test_private_bucket_not_public(self, client):
        storage.upload(DOCUMENTS_BUCKET, "u1/driver-license-1-l.png", PNG)

        response = client.get("/storage/v1/object/public/documents/u1/driver-license-1-l.png")

        assert response.status_code == 404

    def test_signed_url_served(self, client):
        storage.upload(DOCUMENTS_BUCKET, "u1/valid-id-1-id.png", PNG)
        url = storage.create_signed_url(DOCUMENTS_BUCKET, "u1/valid-id-1-id.png")

        response = client.get(_path_of(url))

        assert response.status_code == 200
        assert response.content == PNG

    def test_signed_url_bound_to_path(self, client):
        storage.upload(DOCUMENTS_BUCKET, "u1/a.png", PNG)
        storage.upload(DOCUMENTS_BUCKET, "u2/b.png", PNG)
        token = urlsplit(storage.create_signed_url(DOCUMENTS_BUCKET, "u1/a.png")).query

        response = client.get(f"/storage/v1/object/sign/documents/u2/b.png?{token}")

        assert response.status_code == 401
