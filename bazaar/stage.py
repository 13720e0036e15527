"""Stage bazaar packages: mirror their release files and write the stage indexes."""

from __future__ import annotations

import argparse
import io
import json
import logging
import sys
import tempfile
import zipfile
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from bazaar.github import GitHubError, get_repo_latest_release, repo_stats
from bazaar.oss import OssError, QiniuCredentials, size_of_directory, upload_oss
from bazaar.package import Package, StageRepo, sanitize_package
from bazaar.web import WebError, http_get

logger = logging.getLogger(__name__)

RAW_ROOT = "https://raw.githubusercontent.com"
TYPES = ("themes", "templates", "icons", "widgets", "plugins")
POOL_SIZE = 8
TIMEOUT = 30.0
INDEXED_FILES = ("/README.md", "/README_zh_CN.md", "/README_en_US.md", "/preview.png", "/icon.png")


class StageError(Exception):
    """Raised when staging cannot continue."""


def _manifest_name(typ: str) -> str:
    return typ[:-1] if typ.endswith("s") else typ


def get_package(owner_repo: str, hash: str, typ: str) -> Package | None:
    """Fetch and sanitise the ``<type>.json`` manifest at ``hash``; None if unavailable."""
    url = f"{RAW_ROOT}/{owner_repo}/{hash}/{_manifest_name(typ)}.json"
    try:
        response = http_get(url, retries=1, timeout=TIMEOUT)
    except WebError as exc:
        logger.error("get [%s] failed: %s", url, exc)
        return None
    if response.status_code != 200:
        return None
    try:
        pkg = Package.from_dict(json.loads(response.content))
    except ValueError as exc:
        logger.error("unmarshal [%s] failed: %s", url, exc)
        return None
    return sanitize_package(pkg)


def index_package_file(
    owner_repo: str,
    hash: str,
    file_path: str,
    size: int = 0,
    install_size: int = 0,
    credentials: QiniuCredentials | None = None,
) -> bool:
    """Mirror one file of a package to object storage; return whether it was stored.

    JSON manifests are stored with ``size`` and ``installSize`` added.
    """
    url = f"{RAW_ROOT}/{owner_repo}/{hash}{file_path}"
    try:
        response = http_get(url, retries=1, timeout=TIMEOUT)
    except WebError as exc:
        logger.error("get [%s] failed: %s", url, exc)
        return False
    if response.status_code != 200:
        return False

    data = response.content
    content_type = ""
    if file_path.endswith(".md"):
        content_type = "text/markdown"
    elif file_path.endswith(".json"):
        content_type = "application/json"
        try:
            meta = json.loads(data)
        except ValueError as exc:
            logger.error("stat package [%s] size failed: %s", url, exc)
            return False
        if not isinstance(meta, dict):
            logger.error("stat package [%s] size failed: not an object", url)
            return False
        meta["size"] = size
        meta["installSize"] = install_size
        data = json.dumps(meta, indent=2, sort_keys=True, ensure_ascii=False).encode("utf-8")

    key = f"package/{owner_repo}@{hash}{file_path}"
    try:
        upload_oss(key, content_type, data, credentials)
    except OssError as exc:
        logger.error("upload package file [%s] failed: %s", key, exc)
        return False
    return True


def _install_size(repo_url: str, data: bytes, fallback: int) -> int:
    with tempfile.TemporaryDirectory(prefix="bazaar-") as tmp:
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as archive:
                archive.extractall(tmp)
        except (zipfile.BadZipFile, OSError, ValueError) as exc:
            logger.error("unzip package.zip failed: %s", exc)
            return fallback
        try:
            return size_of_directory(tmp)
        except OSError as exc:
            logger.error("stat package [%s] size failed: %s", repo_url, exc)
            return fallback


def index_package(
    repo_url: str,
    typ: str,
    token: str | None = None,
    credentials: QiniuCredentials | None = None,
) -> StageRepo | None:
    """Mirror the latest release of ``owner/repo`` and describe it as a stage entry.

    Returns None when the repository has no usable release. Stars and open
    issues of the returned entry are left at zero.
    """
    release = get_repo_latest_release(repo_url, token)
    if not release.hash:
        logger.warning("get [%s] latest release failed", repo_url)
        return None
    if not release.package_zip:
        logger.warning("get [%s] package.zip failed", repo_url)
        return None

    try:
        response = http_get(release.package_zip, retries=1, timeout=TIMEOUT)
    except WebError as exc:
        logger.error("get [%s] failed: %s", release.package_zip, exc)
        return None
    if response.status_code != 200:
        logger.error("get [%s] failed: %d", release.package_zip, response.status_code)
        return None
    data = response.content

    key = f"package/{repo_url}@{release.hash}"
    try:
        upload_oss(key, "application/zip", data, credentials)
    except OssError as exc:
        raise StageError(f"upload package [{repo_url}] failed: {exc}") from exc

    size = len(data)
    install_size = _install_size(repo_url, data, size)

    manifest_path = f"/{_manifest_name(typ)}.json"
    with ThreadPoolExecutor(max_workers=len(INDEXED_FILES) + 2) as pool:
        package_future = pool.submit(get_package, repo_url, release.hash, typ)
        file_futures = [
            pool.submit(index_package_file, repo_url, release.hash, path, 0, 0, credentials)
            for path in INDEXED_FILES
        ]
        file_futures.append(
            pool.submit(index_package_file, repo_url, release.hash, manifest_path, size, install_size, credentials)
        )
        for future in file_futures:
            future.result()
        pkg = package_future.result()

    return StageRepo(
        url=f"{repo_url}@{release.hash}",
        updated=release.published,
        size=size,
        install_size=install_size,
        package=pkg,
    )


def perform_stage(
    typ: str,
    base_dir: str | Path = ".",
    token: str | None = None,
    credentials: QiniuCredentials | None = None,
) -> list[StageRepo]:
    """Stage every repository listed in ``<typ>.json`` into ``stage/<typ>.json``.

    Entries are ordered by release time, newest first.
    """
    logger.info("staging [%s]", typ)
    base = Path(base_dir)
    source = base / f"{typ}.json"
    try:
        original = json.loads(source.read_bytes())
    except OSError as exc:
        raise StageError(f"read [{typ}.json] failed: {exc}") from exc
    except ValueError as exc:
        raise StageError(f"unmarshal [{typ}.json] failed: {exc}") from exc

    repos = original.get("repos") if isinstance(original, dict) else None
    if not isinstance(repos, list) or not all(isinstance(repo, str) for repo in repos):
        raise StageError(f"unmarshal [{typ}.json] failed: repos must be a list of strings")

    def stage_repo(repo: str) -> StageRepo | None:
        entry = index_package(repo, typ, token, credentials)
        if entry is None:
            return None
        entry.stars, entry.open_issues = repo_stats(repo, token)
        logger.info("updated repo [%s]", repo)
        return entry

    with ThreadPoolExecutor(max_workers=POOL_SIZE) as pool:
        staged = [entry for entry in pool.map(stage_repo, repos) if entry is not None]
    staged.sort(key=lambda entry: entry.updated, reverse=True)

    document = {"repos": [entry.to_dict() for entry in staged] or None}
    target = base / "stage" / f"{typ}.json"
    try:
        target.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")
    except OSError as exc:
        raise StageError(f"write stage [{typ}.json] failed: {exc}") from exc

    logger.info("staged [%s]", typ)
    return staged


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="bazaar-stage", description="Stage the bazaar packages.")
    parser.add_argument("--dir", default=".", help="directory holding the <type>.json lists")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, stream=sys.stdout)

    logger.info("bazaar is staging...")
    credentials = QiniuCredentials.from_env()
    try:
        for typ in TYPES:
            perform_stage(typ, args.dir, None, credentials)
    except (StageError, GitHubError) as exc:
        logger.critical("%s", exc)
        return 1
    logger.info("bazaar staged")
    return 0


if __name__ == "__main__":
    sys.exit(main())