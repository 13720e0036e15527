"""Small HTTP helpers with retries and a fixed User-Agent."""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping

import requests

logger = logging.getLogger(__name__)

USER_AGENT = "bazaar/1.0.0"
RETRY_DELAY = 3.0
DEFAULT_TIMEOUT = 30.0


class WebError(Exception):
    """Raised when a request cannot be completed at the transport level."""


def _request(
    method: str,
    url: str,
    retries: int,
    timeout: float,
    headers: Mapping[str, str] | None,
    **kwargs: Any,
) -> requests.Response:
    merged = {"User-Agent": USER_AGENT, **(headers or {})}
    attempt = 0
    while True:
        try:
            response = requests.request(method, url, headers=merged, timeout=timeout, **kwargs)
        except requests.RequestException as exc:
            if attempt >= retries:
                raise WebError(f"{method} [{url}] failed: {exc}") from exc
            logger.warning("%s [%s] failed: %s, retrying", method, url, exc)
        else:
            if response.status_code < 500 or attempt >= retries:
                return response
            logger.warning("%s [%s] answered %d, retrying", method, url, response.status_code)
        attempt += 1
        time.sleep(RETRY_DELAY)


def http_get(
    url: str,
    retries: int = 1,
    timeout: float = DEFAULT_TIMEOUT,
    headers: Mapping[str, str] | None = None,
) -> requests.Response:
    """GET ``url``, retrying transport errors and server errors ``retries`` times."""
    return _request("GET", url, retries, timeout, headers)


def http_post_json(
    url: str,
    payload: Any,
    retries: int = 1,
    timeout: float = DEFAULT_TIMEOUT,
    headers: Mapping[str, str] | None = None,
) -> requests.Response:
    """POST ``payload`` as JSON to ``url`` with the same retry rules as :func:`http_get`."""
    return _request("POST", url, retries, timeout, headers, json=payload)