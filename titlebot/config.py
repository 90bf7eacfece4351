import os
import logging
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from titlebot.fetch import DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    telegram_token: str
    nick: str = ""
    channels: frozenset = field(default_factory=frozenset)
    owner: str = ""
    twitter_bearer_token: Optional[str] = None
    user_agent: str = DEFAULT_USER_AGENT
    debug: bool = False


def _split_list(value: str) -> frozenset:
    return frozenset(item.strip() for item in value.split(",") if item.strip())


def load_settings(dotenv: bool = True) -> Settings:
    """Read settings from the environment (and a ``.env`` file, if present)."""
    if dotenv:
        load_dotenv()

    token = os.getenv("TITLEBOT_TELEGRAM_TOKEN")
    if not token:
        logger.error("TITLEBOT_TELEGRAM_TOKEN not set")
        raise SystemExit("Missing TITLEBOT_TELEGRAM_TOKEN")

    return Settings(
        telegram_token=token,
        nick=os.getenv("TITLEBOT_NICK", "").lstrip("@").lower(),
        channels=_split_list(os.getenv("TITLEBOT_CHANNELS", "")),
        owner=os.getenv("TITLEBOT_OWNER_ACCOUNT", "").lstrip("@").lower(),
        twitter_bearer_token=os.getenv("TITLEBOT_TWITTER_BEARER_TOKEN") or None,
        user_agent=os.getenv("TITLEBOT_USER_AGENT") or DEFAULT_USER_AGENT,
        debug=bool(os.getenv("TITLEBOT_DEBUG")),
    )
