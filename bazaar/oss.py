"""Uploading objects to Qiniu object storage and measuring unpacked sizes."""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import logging
import os
import stat
import time
from dataclasses import dataclass
from pathlib import Path

import requests

from bazaar.web import WebError, http_get

logger = logging.getLogger(__name__)

RS_HOST = "https://rs.qiniuapi.com"
UP_HOST = "https://upload.qiniup.com"
TOKEN_LIFETIME = 3600
UPLOAD_TIMEOUT = 30.0
DIRECTORY_SIZE = 4096


class OssError(Exception):
    """Raised when an object cannot be uploaded."""


@dataclass(frozen=True)
class QiniuCredentials:
    """Bucket name and key pair for the object store."""

    bucket: str
    access_key: str
    secret_key: str

    @classmethod
    def from_env(cls) -> "QiniuCredentials":
        """Read QINIU_BUCKET, QINIU_AK and QINIU_SK from the environment."""
        return cls(
            bucket=os.environ.get("QINIU_BUCKET", ""),
            access_key=os.environ.get("QINIU_AK", ""),
            secret_key=os.environ.get("QINIU_SK", ""),
        )


def _b64(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii")


def _sign(secret_key: str, data: bytes) -> str:
    return _b64(hmac.new(secret_key.encode("utf-8"), data, hashlib.sha1).digest())


def encoded_entry(bucket: str, key: str) -> str:
    """URL-safe base64 of ``bucket:key``, as the storage API addresses objects."""
    return _b64(f"{bucket}:{key}".encode("utf-8"))


def make_upload_token(access_key: str, secret_key: str, bucket: str, key: str) -> str:
    """Build an upload token whose policy allows overwriting ``bucket:key``."""
    policy = {"scope": f"{bucket}:{key}", "deadline": int(time.time()) + TOKEN_LIFETIME}
    encoded_policy = _b64(json.dumps(policy, separators=(",", ":")).encode("utf-8"))
    signature = _sign(secret_key, encoded_policy.encode("ascii"))
    return f"{access_key}:{signature}:{encoded_policy}"


def _management_authorization(credentials: QiniuCredentials, path: str) -> str:
    signature = _sign(credentials.secret_key, f"{path}\n".encode("utf-8"))
    return f"QBox {credentials.access_key}:{signature}"


def _stored_hash(credentials: QiniuCredentials, key: str) -> str:
    path = "/stat/" + encoded_entry(credentials.bucket, key)
    try:
        response = http_get(
            RS_HOST + path,
            retries=0,
            headers={"Authorization": _management_authorization(credentials, path)},
        )
    except WebError as exc:
        logger.warning("stat [%s] failed: %s", key, exc)
        return ""
    if response.status_code != 200:
        if "no such file or directory" not in response.text:
            logger.warning("stat [%s] failed: %d", key, response.status_code)
        return ""
    try:
        return str(response.json().get("hash", ""))
    except ValueError:
        return ""


def _put(credentials: QiniuCredentials, key: str, content_type: str, data: bytes) -> None:
    token = make_upload_token(credentials.access_key, credentials.secret_key, credentials.bucket, key)
    try:
        response = requests.post(
            UP_HOST,
            data={"token": token, "key": key},
            files={"file": (os.path.basename(key) or "file", data, content_type)},
            timeout=UPLOAD_TIMEOUT,
        )
    except requests.RequestException as exc:
        raise OssError(str(exc)) from exc
    if response.status_code != 200:
        raise OssError(f"status {response.status_code}: {response.text}")


def upload_oss(
    key: str,
    content_type: str,
    data: bytes,
    credentials: QiniuCredentials | None = None,
) -> bool:
    """Upload ``data`` under ``key`` unless it is already stored.

    Returns True when an upload happened, False when the object existed.
    A failed upload is retried once before :class:`OssError` is raised.
    """
    credentials = credentials or QiniuCredentials.from_env()
    if _stored_hash(credentials, key):
        return False

    try:
        _put(credentials, key, content_type, data)
    except OssError as exc:
        logger.warning("upload [%s] failed: %s, retry it", key, exc)
        try:
            _put(credentials, key, content_type, data)
        except OssError as retry_exc:
            logger.error("retry upload [%s] failed: %s", key, retry_exc)
            raise
        logger.info("retry upload [%s] success", key)
    return True


def size_of_directory(path: str | os.PathLike[str]) -> int:
    """Sum of file sizes below ``path``, counting each directory as 4096 bytes."""

    def visit(entry: Path) -> int:
        info = entry.lstat()
        if not stat.S_ISDIR(info.st_mode):
            return info.st_size
        return DIRECTORY_SIZE + sum(visit(child) for child in entry.iterdir())

    try:
        return visit(Path(path))
    except OSError as exc:
        logger.error("size of dir [%s] failed: %s", path, exc)
        raise