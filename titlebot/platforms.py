import enum
import re
from dataclasses import dataclass
from typing import Optional


class Platform(enum.Enum):
    BLUESKY = "bluesky"
    TWITTER = "twitter"


@dataclass(frozen=True)
class SocialPost:
    """A linked post, addressed the way its platform's API expects."""

    platform: Platform
    handle: str
    post_id: str


BLUESKY_POST_REGEX = re.compile(
    r"^https://(?:www\.)?bsky\.app/profile/([^/?#\s]+)/post/([^/?#\s]+)",
    re.IGNORECASE,
)
TWEET_REGEX = re.compile(
    r"^https://(?:mobile\.)?(?:twitter|x)\.com/([^/?#\s]+)/status/([0-9]+)",
    re.IGNORECASE,
)

_PATTERNS = (
    (Platform.BLUESKY, BLUESKY_POST_REGEX),
    (Platform.TWITTER, TWEET_REGEX),
)


def classify(url: str) -> Optional[SocialPost]:
    """Return the social post *url* links to, or None for an ordinary page."""
    for platform, pattern in _PATTERNS:
        match = pattern.match(url)
        if match:
            return SocialPost(platform, match.group(1), match.group(2))
    return None
