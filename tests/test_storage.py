import io
from unittest.mock import MagicMock, patch

import pytest
import requests

from tourism_api.storage import (
    StorageError,
    UploadResult,
    delete_from_cloudinary,
    upload_to_cloudinary,
    upload_to_nextcloud,
)


@pytest.fixture
def cloudinary_env(monkeypatch):
    monkeypatch.setenv("CLOUDINARY_CLOUD_NAME", "demo")
    monkeypatch.setenv("CLOUDINARY_API_KEY", "placeholder")
    monkeypatch.setenv("CLOUDINARY_API_SECRET", "secret")


@pytest.fixture
def nextcloud_env(monkeypatch):
    monkeypatch.setenv("NEXTCLOUD_WEBDAV_URL", "https://cloud.example.com/dav/")
    monkeypatch.setenv("NEXTCLOUD_USERNAME", "user")
    monkeypatch.setenv("NEXTCLOUD_PASSWORD", "password")
    monkeypatch.setenv("NEXTCLOUD_PUBLIC_URL", "https://cloud.example.com/s/share")


def _json_response(body, status=200):
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    resp.json.return_value = body
    return resp


def test_upload_requires_configuration(monkeypatch):
    monkeypatch.delenv("CLOUDINARY_CLOUD_NAME", raising=False)
    monkeypatch.setenv("CLOUDINARY_API_KEY", "placeholder")
    monkeypatch.setenv("CLOUDINARY_API_SECRET", "secret")
    with pytest.raises(StorageError, match="CLOUDINARY_CLOUD_NAME"):
        upload_to_cloudinary(b"data", "abc")


def test_upload_to_cloudinary_returns_result(cloudinary_env):
    answer = {"secure_url": "https://res.example.com/profile/abc.png", "public_id": "profile/abc"}
    with patch("tourism_api.storage.requests.post", return_value=_json_response(answer)) as post:
        result = upload_to_cloudinary(b"data", "abc")
    assert result == UploadResult(answer["secure_url"], answer["public_id"])
    url = post.call_args.args[0]
    data = post.call_args.kwargs["data"]
    assert url.endswith("/demo/auto/upload")
    assert data["folder"] == "profile"
    assert data["public_id"] == "abc"
    assert data["api_key"] == "placeholder"
    assert len(data["signature"]) == 40
    assert all(ch in "0123456789abcdef" for ch in data["signature"])
    assert data["timestamp"].isdigit()


def test_upload_to_cloudinary_error(cloudinary_env):
    answer = {"error": {"message": "Invalid API key"}}
    with patch("tourism_api.storage.requests.post", return_value=_json_response(answer, 401)):
        with pytest.raises(StorageError, match="Invalid API key"):
            upload_to_cloudinary(b"data", "abc")


def test_delete_from_cloudinary_posts_public_id(cloudinary_env):
    with patch("tourism_api.storage.requests.post", return_value=_json_response({"result": "ok"})) as post:
        assert delete_from_cloudinary("profile/abc") is None
    assert post.call_args.args[0].endswith("/demo/image/destroy")
    assert post.call_args.kwargs["data"]["public_id"] == "profile/abc"


def test_delete_network_failure(cloudinary_env):
    with patch("tourism_api.storage.requests.post", side_effect=requests.ConnectionError("down")):
        with pytest.raises(StorageError, match="destroy request failed"):
            delete_from_cloudinary("profile/abc")


def test_upload_to_nextcloud_success(nextcloud_env):
    resp = MagicMock(status_code=201, text="")
    with patch("tourism_api.storage.requests.put", return_value=resp) as put:
        link = upload_to_nextcloud(io.BytesIO(b"data"), "dir/photo.png")
    assert link == "https://cloud.example.com/s/share/photo.png"
    assert put.call_args.args[0] == "https://cloud.example.com/dav/photo.png"
    assert put.call_args.kwargs["data"] == b"data"
    assert put.call_args.kwargs["auth"] == ("user", "password")
    assert put.call_args.kwargs["headers"]["Content-Type"] == "application/octet-stream"


def test_upload_to_nextcloud_bad_status(nextcloud_env):
    resp = MagicMock(status_code=500, text="boom")
    with patch("tourism_api.storage.requests.put", return_value=resp):
        with pytest.raises(StorageError, match="status 500: boom"):
            upload_to_nextcloud(io.BytesIO(b"data"), "photo.png")


def test_upload_to_nextcloud_network_failure(nextcloud_env):
    with patch("tourism_api.storage.requests.put", side_effect=requests.ConnectionError("down")):
        with pytest.raises(StorageError, match="upload request failed"):
            upload_to_nextcloud(io.BytesIO(b"data"), "photo.png")