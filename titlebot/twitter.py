import html
import logging
from typing import Optional

import httpx

from titlebot.fetch import fetch_json
from titlebot.platforms import SocialPost
from titlebot.posts import PostRecord, render_post
from titlebot.text_helpers import parse_timestamp

logger = logging.getLogger(__name__)

TWEET_URL = "https://api.twitter.com/2/tweets/{}"
TWEET_PARAMS = {
    "tweet.fields": "created_at",
    "expansions": "author_id",
    "user.fields": "verified",
}


def parse_tweet(data: dict) -> PostRecord:
    tweet = data["data"]
    author_id = tweet["author_id"]
    author, verified = "", False
    for user in data.get("includes", {}).get("users", []):
        if user.get("id") == author_id:
            author = user["username"]
            verified = bool(user.get("verified"))
            break
    return PostRecord(
        # the API escapes &, < and > but nothing else
        text=html.unescape(tweet["text"]),
        created_at=parse_timestamp(tweet["created_at"]),
        handle=author,
        verified=verified,
    )


async def title_twitter(
    client: httpx.AsyncClient, post: SocialPost, bearer_token: Optional[str]
) -> Optional[str]:
    if not bearer_token:
        logger.info("set TITLEBOT_TWITTER_BEARER_TOKEN to read tweets")
        return None
    try:
        data = await fetch_json(
            client,
            TWEET_URL.format(post.post_id),
            what="twitter tweets lookup",
            params=TWEET_PARAMS,
            headers={"Authorization": f"Bearer {bearer_token}"},
        )
        if data is None:
            return None
        record = parse_tweet(data)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.info("http error reading tweet %s: %r", post.post_id, e)
        return None
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        logger.info("couldn't decode tweet %s: %r", post.post_id, e)
        return None
    return render_post(record)
