"""Shared GET helper for provider requests."""
import logging

import requests

from albumlog.config import HTTP_TIMEOUT_SEC, USER_AGENT
from albumlog.core.errors import ProviderError

logger = logging.getLogger(__name__)


def http_get(url: str, **kwargs) -> requests.Response:
    """GET with our User-Agent and timeout. Transport failures raise ProviderError.

    Non-success statuses are returned as-is; callers decide what they mean.
    """
    headers = kwargs.pop("headers", {})
    headers.setdefault("User-Agent", USER_AGENT)
    headers.setdefault("Accept", "application/json")
    kwargs.setdefault("timeout", HTTP_TIMEOUT_SEC)
    try:
        return requests.get(url, headers=headers, **kwargs)
    except requests.RequestException as e:
        logger.error("GET %s failed: %s", url, e)
        raise ProviderError(f"Request to {url} failed: {e}") from e


def json_or_none(resp: requests.Response):
    """Decoded JSON body, or None if the body is not JSON."""
    try:
        return resp.json()
    except ValueError:
        logger.warning("Non-JSON response from %s", resp.url)
        return None
