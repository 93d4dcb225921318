"""Uploading and deleting files on Cloudinary and Nextcloud."""

import hashlib
import os
import time
from dataclasses import dataclass
from typing import Any, BinaryIO, Union

import requests

_API_HOST = "api.cloudinary.com"
_TIMEOUT = 60
PROFILE_FOLDER = "profile"


class StorageError(Exception):
    """A remote storage operation failed."""


@dataclass(frozen=True)
class UploadResult:
    """Where an uploaded file can be reached and how to delete it."""

    secure_url: str
    public_id: str


def _cloudinary_credentials() -> tuple:
    values = {
        "CLOUDINARY_CLOUD_NAME": os.environ.get("CLOUDINARY_CLOUD_NAME", ""),
        "CLOUDINARY_API_KEY": os.environ.get("CLOUDINARY_API_KEY", ""),
        "CLOUDINARY_API_SECRET": os.environ.get("CLOUDINARY_API_SECRET", ""),
    }
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise StorageError(f"missing Cloudinary configuration: {', '.join(missing)}")
    return tuple(values.values())


def _sign(params: dict, api_secret: str) -> str:
    payload = "&".join(f"{key}={params[key]}" for key in sorted(params))
    return hashlib.sha1((payload + api_secret).encode("utf-8")).hexdigest()


def _cloudinary_call(resource_type: str, action: str, params: dict, files=None) -> dict:
    cloud_name, api_key, api_secret = _cloudinary_credentials()
    signed = {**params, "timestamp": str(int(time.time()))}
    signed["signature"] = _sign(signed, api_secret)
    signed["api_key"] = api_key
    url = f"https://{_API_HOST}/v1_1/{cloud_name}/{resource_type}/{action}"
    try:
        resp = requests.post(url, data=signed, files=files, timeout=_TIMEOUT)
    except requests.RequestException as exc:
        raise StorageError(f"{action} request failed: {exc}") from exc
    try:
        body = resp.json()
    except ValueError as exc:
        raise StorageError(f"{action} failed with status {resp.status_code}") from exc
    if not isinstance(body, dict):
        raise StorageError(f"{action} returned an unexpected answer")
    error = body.get("error")
    if error:
        message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
        raise StorageError(message)
    if not resp.ok:
        raise StorageError(f"{action} failed with status {resp.status_code}")
    return body


def upload_to_cloudinary(file: Union[BinaryIO, bytes], file_name: str) -> UploadResult:
    """Upload a file into the profile folder under the given public id."""
    body = _cloudinary_call(
        "auto",
        "upload",
        {"public_id": file_name, "folder": PROFILE_FOLDER},
        files={"file": (file_name, file)},
    )
    return UploadResult(
        secure_url=body.get("secure_url", ""),
        public_id=body.get("public_id", ""),
    )


def delete_from_cloudinary(public_id: str) -> None:
    """Delete a previously uploaded image."""
    _cloudinary_call("image", "destroy", {"public_id": public_id})


def _base_name(path: str) -> str:
    if not path:
        return "."
    stripped = path.rstrip("/")
    if not stripped:
        return "/"
    return stripped.rsplit("/", 1)[-1]


def _read_all(stream: Any) -> bytes:
    try:
        if hasattr(stream, "read"):
            return stream.read()
        return bytes(stream)
    except (OSError, TypeError) as exc:
        raise StorageError(f"failed to copy file data: {exc}") from exc


def upload_to_nextcloud(stream: Any, filename: str) -> str:
    """Upload a file through WebDAV and return its public link."""
    webdav_url = os.environ.get("NEXTCLOUD_WEBDAV_URL", "")
    username = os.environ.get("NEXTCLOUD_USERNAME", "")
    password = os.environ.get("NEXTCLOUD_PASSWORD", "")
    public_url_base = os.environ.get("NEXTCLOUD_PUBLIC_URL", "")

    payload = _read_all(stream)
    name = _base_name(filename)
    try:
        resp = requests.put(
            webdav_url + name,
            data=payload,
            auth=(username, password),
            headers={"Content-Type": "application/octet-stream"},
            timeout=_TIMEOUT,
        )
    except requests.RequestException as exc:
        raise StorageError(f"upload request failed: {exc}") from exc
    if resp.status_code not in (201, 204):
        raise StorageError(f"upload failed with status {resp.status_code}: {resp.text}")
    return f"{public_url_base}/{name}"