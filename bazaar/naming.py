"""Validation of resource names and construction of repository URLs."""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

RESERVED_WORDS = frozenset(
    ["CON", "PRN", "AUX", "NUL"]
    + [f"COM{i}" for i in range(10)]
    + [f"LPT{i}" for i in range(10)]
)

_PRINTABLE_ASCII = re.compile(r"[\x20-\x7E]+")
_VALID_CHARACTERS = re.compile(r'[^\\/:*?"<>|. ][^\\/:*?"<>|]*[^\\/:*?"<>|. ]')


def is_valid_name(name: str) -> bool:
    """Whether ``name`` is usable as a directory name on every platform."""
    if not name:
        logger.warning("name is empty")
        return False
    if not _PRINTABLE_ASCII.fullmatch(name):
        logger.warning("name <%s> contains characters other than printable ASCII characters", name)
        return False
    if not _VALID_CHARACTERS.fullmatch(name):
        logger.warning("name <%s> contains invalid characters", name)
        return False
    if name.upper() in RESERVED_WORDS:
        logger.warning("name <%s> is a reserved word", name)
        return False
    return True


def build_file_raw_url(repo_owner: str, repo_name: str, hash: str, file_path: str) -> str:
    """URL of a file's raw content at a commit."""
    return f"https://raw.githubusercontent.com/{repo_owner}/{repo_name}/{hash}/{file_path}"


def build_file_preview_url(repo_owner: str, repo_name: str, hash: str, file_path: str) -> str:
    """URL of a file's web preview at a commit."""
    return f"https://github.com/{repo_owner}/{repo_name}/blob/{hash}/{file_path}"


def build_repo_home_url(repo_owner: str, repo_name: str) -> str:
    """URL of a repository's home page."""
    return f"https://github.com/{repo_owner}/{repo_name}"