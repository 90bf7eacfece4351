"""Title scraping for ordinary web pages."""

import html
import logging
import re
from typing import Optional

import httpx

from titlebot.activitypub import find_activity_pub_link, title_activity_pub
from titlebot.fetch import DEFAULT_USER_AGENT, read_limited
from titlebot.html_meta import find_meta_title
from titlebot.policy import FetchPolicy, TitleSelector, analyze_url
from titlebot.text_helpers import sanitize_text

logger = logging.getLogger(__name__)

# <title>bar</title>, <title data-react-helmet="true">qux</title>
GENERIC_TITLE_REGEX = re.compile(rb"<\s*title\b[^>]*>(.*?)<", re.IGNORECASE | re.DOTALL)


def extract_title(body: bytes, selector: TitleSelector = TitleSelector.GENERIC) -> Optional[str]:
    """Pull a displayable title out of a (possibly truncated) page body."""
    if selector is TitleSelector.META:
        raw = find_meta_title(body)
        if raw is None:
            return None
    else:
        match = GENERIC_TITLE_REGEX.search(body)
        if not match:
            return None
        raw = html.unescape(match.group(1).decode("utf-8", errors="replace"))
    title = sanitize_text(raw.strip())
    return title or None


async def fetch_title(
    client: httpx.AsyncClient,
    url: str,
    policy: FetchPolicy,
    *,
    user_agent: str = DEFAULT_USER_AGENT,
) -> Optional[str]:
    async with client.stream("GET", url, headers={"User-Agent": user_agent}) as resp:
        if resp.status_code != 200:
            logger.debug("bad http code %d for %s", resp.status_code, url)
            return None
        body = await read_limited(resp, policy.byte_limit)
        base_url = str(resp.url)
    if policy.selector is TitleSelector.GENERIC:
        object_url = find_activity_pub_link(body, base_url)
        if object_url:
            post = await title_activity_pub(client, object_url)
            if post:
                return post
    return extract_title(body, policy.selector)


async def title_generic(
    client: httpx.AsyncClient,
    url: str,
    *,
    user_agent: str = DEFAULT_USER_AGENT,
) -> Optional[str]:
    """Resolve the title of *url*, or None if there isn't a usable one."""
    try:
        policy = analyze_url(url)
    except ValueError as e:
        logger.info("invalid URL %s: %s", url, e)
        return None
    try:
        return await fetch_title(client, url, policy, user_agent=user_agent)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.info("http error in title_generic for %s: %r", url, e)
        return None
