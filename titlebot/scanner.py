"""Find candidate URLs in chat messages."""

import re

URL_REGEX = re.compile(r"https?://\S+", re.IGNORECASE)
MAX_URLS_PER_MESSAGE = 4


def find_urls(text: str) -> list[str]:
    """Return every http(s) URL in *text*, in order of appearance.

    A URL runs from its scheme to the next whitespace character or the end
    of the string. Nothing is validated here.
    """
    return URL_REGEX.findall(text)


__all__ = ["find_urls", "MAX_URLS_PER_MESSAGE"]
