"""Queries against the GitHub REST API for release and repository data."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any

import requests

from bazaar.web import WebError, http_get

logger = logging.getLogger(__name__)

API_ROOT = "https://api.github.com"
TOKEN_ENV = "PAT"
TIMEOUT = 30.0


class GitHubError(Exception):
    """Raised when GitHub cannot be queried for required data."""


@dataclass(frozen=True)
class ReleaseInfo:
    """Commit hash, publication time and package.zip URL of a latest release."""

    hash: str = ""
    published: str = ""
    package_zip: str = ""


def _headers(token: str | None) -> dict[str, str]:
    if token is None:
        token = os.environ.get(TOKEN_ENV, "")
    return {"Authorization": f"Token {token}"}


def _json(response: requests.Response, url: str) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError as exc:
        raise GitHubError(f"decode [{url}] failed: {exc}") from exc
    if not isinstance(data, dict):
        raise GitHubError(f"decode [{url}] failed: not an object")
    return data


def _object_field(data: dict[str, Any], key: str, url: str) -> str:
    try:
        return str(data["object"][key])
    except (KeyError, TypeError) as exc:
        raise GitHubError(f"unexpected answer from [{url}]") from exc


def get_repo_latest_release(repo_url: str, token: str | None = None) -> ReleaseInfo:
    """Find the latest release of ``owner/repo`` and the commit it points to.

    Returns an empty :class:`ReleaseInfo` when there is no usable release or no
    package.zip asset; the hash is empty when the tag reference cannot be read.
    """
    headers = _headers(token)
    url = f"{API_ROOT}/repos/{repo_url}/releases/latest"
    try:
        response = http_get(url, retries=3, timeout=TIMEOUT, headers=headers)
    except WebError as exc:
        raise GitHubError(f"get release hash [{url}] failed: {exc}") from exc
    if response.status_code != 200:
        logger.warning("get release hash [%s] failed: %d", url, response.status_code)
        return ReleaseInfo()

    release = _json(response, url)
    package_zip = ""
    for asset in release.get("assets") or []:
        if isinstance(asset, dict) and asset.get("name") == "package.zip":
            package_zip = str(asset.get("browser_download_url") or "")
    if not package_zip:
        return ReleaseInfo()

    published = str(release.get("published_at") or "")
    tag_name = str(release.get("tag_name") or "")
    without_hash = ReleaseInfo(published=published, package_zip=package_zip)

    url = f"{API_ROOT}/repos/{repo_url}/git/ref/tags/{tag_name}"
    try:
        response = http_get(url, retries=1, timeout=TIMEOUT, headers=headers)
    except WebError as exc:
        logger.warning("get release hash [%s] failed: %s", url, exc)
        return without_hash
    if response.status_code != 200:
        logger.warning("get release hash [%s] failed: %d", url, response.status_code)
        return without_hash

    ref = _json(response, url)
    commit = _object_field(ref, "sha", url)
    if _object_field(ref, "type", url) == "tag":
        url = f"{API_ROOT}/repos/{repo_url}/git/tags/{commit}"
        try:
            response = http_get(url, retries=1, timeout=TIMEOUT, headers=headers)
        except WebError as exc:
            raise GitHubError(f"get release hash [{url}] failed: {exc}") from exc
        if response.status_code != 200:
            raise GitHubError(f"get release hash [{url}] failed: {response.status_code}")
        commit = _object_field(_json(response, url), "sha", url)

    return ReleaseInfo(hash=commit, published=published, package_zip=package_zip)


def repo_stats(repo_url: str, token: str | None = None) -> tuple[int, int]:
    """Return the star count and open issue count of ``owner/repo``."""
    url = f"{API_ROOT}/repos/{repo_url}"
    try:
        response = http_get(url, retries=1, timeout=TIMEOUT, headers=_headers(token))
    except WebError as exc:
        raise GitHubError(f"get [{url}] failed: {exc}") from exc
    if response.status_code != 200:
        raise GitHubError(f"get [{url}] failed: {response.status_code}")
    data = _json(response, url)
    try:
        return int(data["stargazers_count"]), int(data["open_issues_count"])
    except (KeyError, TypeError, ValueError) as exc:
        raise GitHubError(f"unexpected answer from [{url}]") from exc