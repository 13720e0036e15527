"""Copy the staged bazaar indexes of the current commit to object storage."""

from __future__ import annotations

import argparse
import logging
import os
import sys

from bazaar.hash import HashError, git_head_hash
from bazaar.oss import OssError, QiniuCredentials, upload_oss
from bazaar.web import WebError, http_get

logger = logging.getLogger(__name__)

REPOSITORY_ENV = "GITHUB_REPOSITORY"
INDEXES = ("themes", "templates", "icons", "widgets", "plugins")
TIMEOUT = 30.0


class StageIndexError(Exception):
    """Raised when a staged index cannot be fetched or stored."""


def stage_index(hash: str, index: str, credentials: QiniuCredentials | None = None) -> str:
    """Fetch ``stage/<index>.json`` at ``hash`` and upload it; return the storage key."""
    repository = os.environ.get(REPOSITORY_ENV, "")
    if not repository:
        raise StageIndexError(f"{REPOSITORY_ENV} is not set")
    url = f"https://raw.githubusercontent.com/{repository}/{hash}/stage/{index}.json"
    try:
        response = http_get(url, retries=1, timeout=TIMEOUT)
    except WebError as exc:
        raise StageIndexError(f"get [{url}] failed: {exc}") from exc
    if response.status_code != 200:
        raise StageIndexError(f"get [{url}] failed: {response.status_code}")

    key = f"bazaar@{hash}/stage/{index}.json"
    try:
        upload_oss(key, "application/json", response.content, credentials)
    except OssError as exc:
        raise StageIndexError(f"upload bazaar stage index [{key}] failed: {exc}") from exc
    return key


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="bazaar-index", description="Upload the staged bazaar indexes.")
    parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, stream=sys.stdout)

    logger.info("bazaar is indexing...")
    try:
        hash = git_head_hash()
        logger.info("bazaar [%s]", hash)
        credentials = QiniuCredentials.from_env()
        for index in INDEXES:
            stage_index(hash, index, credentials)
    except (HashError, StageIndexError) as exc:
        logger.critical("%s", exc)
        return 1
    logger.info("indexed bazaar")
    return 0


if __name__ == "__main__":
    sys.exit(main())