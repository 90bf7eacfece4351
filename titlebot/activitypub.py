"""Render fediverse posts linked as ordinary web pages.

Mastodon and friends serve a normal HTML page for a status, with a
``<link rel="alternate" type="application/activity+json">`` pointing at the
ActivityPub object. When that link is present, the object is fetched and
rendered like any other social post.
"""

import html
import logging
import re
from typing import Optional
from urllib.parse import urljoin, urlsplit

import httpx
from bs4 import BeautifulSoup

from titlebot.fetch import fetch_json
from titlebot.posts import PostRecord, render_post
from titlebot.text_helpers import parse_published

logger = logging.getLogger(__name__)

ACTIVITY_JSON = "application/activity+json"

ACTIVITY_PUB_REGEX = re.compile(
    rb"<link\b[^>]*\btype\s*=\s*[\"']application/activity\+json[\"'][^>]*>",
    re.IGNORECASE,
)
_REL_ALTERNATE_REGEX = re.compile(rb"\brel\s*=\s*[\"']alternate[\"']", re.IGNORECASE)
_HREF_REGEX = re.compile(rb"\bhref\s*=\s*[\"']([^\"']+)[\"']", re.IGNORECASE)


def find_activity_pub_link(body: bytes, base_url: str) -> Optional[str]:
    """Absolute URL of the page's ActivityPub alternate, if it has one."""
    for match in ACTIVITY_PUB_REGEX.finditer(body):
        tag = match.group(0)
        if not _REL_ALTERNATE_REGEX.search(tag):
            continue
        href = _HREF_REGEX.search(tag)
        if not href:
            continue
        url = urljoin(base_url, html.unescape(href.group(1).decode("utf-8", errors="replace")))
        if urlsplit(url).scheme in ("http", "https"):
            return url
    return None


def _actor_handle(actor: str) -> str:
    """``https://host/users/name`` -> ``name@host``"""
    parsed = urlsplit(actor)
    name = parsed.path.rstrip("/").rpartition("/")[2].lstrip("@")
    if not name or not parsed.hostname:
        raise ValueError(f"bad actor: {actor!r}")
    return f"{name}@{parsed.hostname}"


def parse_note(data: dict) -> PostRecord:
    actor = data["attributedTo"]
    if isinstance(actor, list):
        actor = actor[0]
    if isinstance(actor, dict):
        actor = actor["id"]
    content = data["content"]
    if not isinstance(content, str):
        raise ValueError(f"bad content: {content!r}")
    text = " ".join(BeautifulSoup(content, "html.parser").get_text(" ").split())
    return PostRecord(
        text=text,
        created_at=parse_published(data["published"]),
        handle=_actor_handle(actor),
    )


async def title_activity_pub(client: httpx.AsyncClient, url: str) -> Optional[str]:
    try:
        data = await fetch_json(
            client, url, what="activitypub object", headers={"Accept": ACTIVITY_JSON}
        )
        if data is None:
            return None
        record = parse_note(data)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.info("http error reading activitypub object %s: %r", url, e)
        return None
    except (ValueError, KeyError, TypeError, IndexError, AttributeError) as e:
        logger.info("couldn't decode activitypub object %s: %r", url, e)
        return None
    return render_post(record)
