"""HTTP plumbing shared by the resolvers."""

import json
import logging
from http.cookiejar import CookieJar, DefaultCookiePolicy
from typing import Any, Mapping, Optional

import httpx

from titlebot.policy import TRUSTED_READ_LIMIT

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 15.0
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/98.0.4758.81 Safari/537.36"
)


def create_client(**kwargs) -> httpx.AsyncClient:
    """Return the client used for every outbound request.

    Redirects are followed and cookies are never stored.
    """
    kwargs.setdefault("timeout", REQUEST_TIMEOUT)
    kwargs.setdefault("follow_redirects", True)
    kwargs.setdefault("cookies", CookieJar(policy=DefaultCookiePolicy(allowed_domains=[])))
    return httpx.AsyncClient(**kwargs)


async def read_limited(response: httpx.Response, limit: int) -> bytes:
    """Read at most *limit* bytes of a streamed response body.

    A body longer than *limit* is cut short; the caller gets what fits.
    """
    buf = bytearray()
    async for chunk in response.aiter_bytes():
        buf += chunk
        if len(buf) >= limit:
            break
    return bytes(buf[:limit])


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    what: str,
    params: Optional[Mapping[str, str]] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> Optional[Any]:
    """GET a JSON document from a trusted API.

    Returns None (after logging) on a non-200 status. Transport errors
    propagate as ``httpx.HTTPError`` and malformed JSON as ``ValueError``.
    """
    async with client.stream("GET", url, params=params, headers=headers) as resp:
        if resp.status_code != 200:
            logger.info("bad http code in %s: %d", what, resp.status_code)
            return None
        body = await read_limited(resp, TRUSTED_READ_LIMIT)
    return json.loads(body)
