"""Tests for the image upload endpoint."""
import os

from eventify.config import settings
from tests.conftest import register_user


class TestUpload:

    def test_upload_image(self, client):
        alice = register_user(client, "alice@example.com")
        resp = client.post(
            "/api/upload/",
            files={"image": ("poster.PNG", b"\x89PNG fake bytes", "image/png")},
            headers=alice["headers"],
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["original_name"] == "poster.PNG"
        assert data["mime_type"] == "image/png"
        assert data["size"] == len(b"\x89PNG fake bytes")
        assert data["filename"].endswith(".png")
        assert data["image_url"].endswith(f"/uploads/{data['filename']}")
        assert os.path.exists(os.path.join(settings.UPLOAD_DIR, data["filename"]))

        served = client.get(f"/uploads/{data['filename']}")
        assert served.status_code == 200
        assert served.content == b"\x89PNG fake bytes"

    def test_upload_rejects_non_image(self, client):
        alice = register_user(client, "alice@example.com")
        resp = client.post(
            "/api/upload/",
            files={"image": ("notes.txt", b"hello", "text/plain")},
            headers=alice["headers"],
        )
        assert resp.status_code == 400

    def test_upload_without_file(self, client):
        alice = register_user(client, "alice@example.com")
        resp = client.post("/api/upload/", headers=alice["headers"])
        assert resp.status_code == 400

    def test_upload_requires_auth(self, client):
        resp = client.post("/api/upload/", files={"image": ("a.png", b"x", "image/png")})
        assert resp.status_code == 401
