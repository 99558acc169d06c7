"""Shared HTTP GET helper for the upstream clients."""

import logging

import httpx

from airsounds.errors import FetchError

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "airsounds/0.1.0"


def fetch_bytes(
    url: str,
    params: dict | None = None,
    headers: dict[str, str] | None = None,
    timeout: float = 30.0,
) -> bytes:
    """GET url and return the raw body.

    Any status other than 200 raises FetchError without touching the body.
    """
    try:
        resp = httpx.get(url, params=params, headers=headers, timeout=timeout)
    except httpx.RequestError as e:
        logger.error("Request to %s failed: %s", url, e)
        raise FetchError(f"fetching {url}: {e}", url=url) from e
    logger.info("Fetched %s (%d)", resp.url, resp.status_code)
    if resp.status_code != httpx.codes.OK:
        raise FetchError(
            f"bad status: {resp.status_code}",
            status_code=resp.status_code,
            url=str(resp.url),
        )
    return resp.content
