"""Render Bluesky posts from the public XRPC API.

Two calls are needed: the handle in the URL is resolved to the author's DID,
then the post record is read out of the author's repo.
"""

import logging
from typing import Optional

import httpx

from titlebot.fetch import fetch_json
from titlebot.platforms import SocialPost
from titlebot.posts import PostRecord, render_post
from titlebot.text_helpers import parse_timestamp

logger = logging.getLogger(__name__)

XRPC_BASE = "https://bsky.social/xrpc"
RESOLVE_HANDLE_URL = f"{XRPC_BASE}/com.atproto.identity.resolveHandle"
GET_RECORD_URL = f"{XRPC_BASE}/com.atproto.repo.getRecord"
POST_COLLECTION = "app.bsky.feed.post"


async def resolve_did(client: httpx.AsyncClient, handle: str) -> Optional[str]:
    if handle.startswith("did:"):
        return handle
    data = await fetch_json(
        client, RESOLVE_HANDLE_URL, what="bluesky resolveHandle", params={"handle": handle}
    )
    if data is None:
        return None
    did = data["did"]
    if not isinstance(did, str) or not did:
        raise ValueError(f"bad did for {handle}: {did!r}")
    return did


async def fetch_post(client: httpx.AsyncClient, post: SocialPost) -> Optional[PostRecord]:
    did = await resolve_did(client, post.handle)
    if did is None:
        return None
    data = await fetch_json(
        client,
        GET_RECORD_URL,
        what="bluesky getRecord",
        params={"repo": did, "collection": POST_COLLECTION, "rkey": post.post_id},
    )
    if data is None:
        return None
    value = data["value"]
    text = value["text"]
    if not isinstance(text, str):
        raise ValueError(f"bad post text: {text!r}")
    return PostRecord(
        text=text,
        created_at=parse_timestamp(value["createdAt"]),
        handle=post.handle,
    )


async def title_bluesky(client: httpx.AsyncClient, post: SocialPost) -> Optional[str]:
    try:
        record = await fetch_post(client, post)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.info("http error reading bluesky post %s/%s: %r", post.handle, post.post_id, e)
        return None
    except (ValueError, KeyError, TypeError) as e:
        logger.info("couldn't decode bluesky post %s/%s: %r", post.handle, post.post_id, e)
        return None
    if record is None:
        return None
    return render_post(record)
