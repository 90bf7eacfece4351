"""Turn the URLs of one chat message into notices.

Every URL gets its own detached task. A task first takes a slot from the
admission controller, then picks a resolver from the URL's shape, and sends
at most one notice. Failures stay inside the task that hit them.
"""

import asyncio
import logging
import time
from typing import Iterable, Optional

import httpx

from titlebot.admission import AdmissionController
from titlebot.bluesky import title_bluesky
from titlebot.events import SendNotice
from titlebot.fetch import DEFAULT_USER_AGENT, create_client
from titlebot.generic import title_generic
from titlebot.logging_config import logging_context
from titlebot.platforms import Platform, SocialPost, classify
from titlebot.scanner import MAX_URLS_PER_MESSAGE
from titlebot.tasks import create_task
from titlebot.twitter import title_twitter

logger = logging.getLogger(__name__)


class TitleDispatcher:
    def __init__(
        self,
        send_notice: SendNotice,
        *,
        client: Optional[httpx.AsyncClient] = None,
        admission: Optional[AdmissionController] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        twitter_bearer_token: Optional[str] = None,
        debug: bool = False,
    ):
        self.send_notice = send_notice
        self.client = client or create_client()
        self.admission = admission or AdmissionController()
        self.user_agent = user_agent
        self.twitter_bearer_token = twitter_bearer_token
        self.debug = debug

    async def aclose(self) -> None:
        await self.client.aclose()

    def title_all(self, target: str, msgid: Optional[str], urls: Iterable[str]) -> list[asyncio.Task]:
        """Start titling up to MAX_URLS_PER_MESSAGE urls without waiting for them."""
        urls = list(urls)[:MAX_URLS_PER_MESSAGE]
        return [
            create_task(self.title(target, msgid, url), name=f"title {url}", logger=logger)
            for url in urls
        ]

    async def title(self, target: str, msgid: Optional[str], url: str) -> None:
        post = classify(url)
        with logging_context(target=target, url=url), self.admission.admit() as admitted:
            if not admitted:
                logger.warning("concurrency limit exceeded, not titling %s", url)
                return
            start = time.monotonic()
            try:
                text = await self.resolve(url, post)
                if text:
                    await self.send_notice(target, msgid, text)
            except Exception:
                logger.exception("Caught exception while titling %s", url)
            finally:
                if self.debug:
                    logger.debug("Titled %s in %.3fs", url, time.monotonic() - start)

    async def resolve(self, url: str, post: Optional[SocialPost]) -> Optional[str]:
        if post is None:
            return await title_generic(self.client, url, user_agent=self.user_agent)
        if post.platform is Platform.BLUESKY:
            return await title_bluesky(self.client, post)
        if post.platform is Platform.TWITTER:
            return await title_twitter(self.client, post, self.twitter_bearer_token)
        raise AssertionError(f"unhandled platform {post.platform}")
