"""Choose how much of a page to read and where its title lives."""

import enum
from dataclasses import dataclass
from urllib.parse import urlsplit

GENERIC_TITLE_READ_LIMIT = 32 * 1024
TRUSTED_READ_LIMIT = 1024 * 1024

# These domains send a lot of script ahead of the <title> tag,
# so the read limit is extended for them.
GARBAGE_JS_DOMAINS = (
    "amazon.com",
    "amazon.ca",
    "amzn.to",
    "imdb.com",
    "google.com",
    "goo.gl",
    "github.com",
)
# YouTube's <title> is generic; the video title is in <meta name="title">.
META_TITLE_DOMAINS = ("youtube.com", "youtu.be")


class TitleSelector(enum.Enum):
    GENERIC = "generic"
    META = "meta"


@dataclass(frozen=True)
class FetchPolicy:
    byte_limit: int
    selector: TitleSelector


def domain_match(host: str, domain: str) -> bool:
    """True if *host* is *domain* or one of its subdomains.

    Both arguments must already be lower-case.
    """
    return host == domain or host.endswith("." + domain)


def _normalize_host(netloc: str) -> str:
    host = netloc.rpartition("@")[2]
    if host.startswith("["):
        host = host[1:].partition("]")[0]
    else:
        host = host.partition(":")[0]
    return host.lower()


def analyze_url(url: str) -> FetchPolicy:
    """Return the fetch policy for *url*.

    Raises ValueError if the URL can't be fetched at all.
    """
    parsed = urlsplit(url)
    if parsed.scheme.lower() not in ("http", "https"):
        raise ValueError(f"unsupported URL scheme in {url!r}")
    # raises ValueError for a non-numeric or out-of-range port
    parsed.port
    host = _normalize_host(parsed.netloc)
    if not host:
        raise ValueError(f"no host in {url!r}")

    if any(domain_match(host, d) for d in META_TITLE_DOMAINS):
        return FetchPolicy(TRUSTED_READ_LIMIT, TitleSelector.META)
    if any(domain_match(host, d) for d in GARBAGE_JS_DOMAINS):
        return FetchPolicy(TRUSTED_READ_LIMIT, TitleSelector.GENERIC)
    return FetchPolicy(GENERIC_TITLE_READ_LIMIT, TitleSelector.GENERIC)
