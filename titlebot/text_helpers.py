import re
import unicodedata
from datetime import datetime, timedelta, timezone
from typing import Optional

TITLE_CHAR_LIMIT = 400
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"
TIMESTAMP_REGEX = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z")
# ActivityPub servers may leave out the milliseconds
PUBLISHED_REGEX = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d{3})?Z")
ABSOLUTE_DATE_FORMAT = "%Y-%m-%d"
RELATIVE_TIME_WINDOW = timedelta(days=7)

HUMAN_DURATIONS = (
    (timedelta(days=365), "y"),
    (timedelta(days=1), "d"),
    (timedelta(hours=1), "h"),
    (timedelta(minutes=1), "m"),
    (timedelta(seconds=1), "s"),
    (timedelta(milliseconds=1), "ms"),
)


def sanitize_text(text: str, limit: int = TITLE_CHAR_LIMIT) -> str:
    """Make *text* safe to send as a single chat line of at most *limit* chars.

    Line feeds become two spaces, other whitespace a single space, and
    remaining control characters are dropped.
    """
    out = []
    length = 0
    for ch in text:
        if ch == "\r":
            continue
        if ch == "\n":
            piece = "  "
        elif ch.isspace():
            piece = " "
        elif unicodedata.category(ch) == "Cc":
            continue
        else:
            piece = ch
        if length + len(piece) > limit:
            break
        out.append(piece)
        length += len(piece)
    return "".join(out)


def parse_timestamp(value: str) -> datetime:
    """Parse ``2006-01-02T15:04:05.000Z`` into an aware UTC datetime.

    Exactly three fractional digits are accepted. Raises ValueError otherwise.
    """
    if not isinstance(value, str) or not TIMESTAMP_REGEX.fullmatch(value):
        raise ValueError(f"invalid timestamp: {value!r}")
    return datetime.strptime(value, TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)


def parse_published(value: str) -> datetime:
    """Like parse_timestamp, but the milliseconds are optional."""
    if not isinstance(value, str) or not PUBLISHED_REGEX.fullmatch(value):
        raise ValueError(f"invalid timestamp: {value!r}")
    if "." not in value:
        value = value[:-1] + ".000Z"
    return datetime.strptime(value, TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)


def human_duration(elapsed: timedelta) -> str:
    """Render *elapsed* using its two largest non-zero units, e.g. ``1d3h``."""
    remaining = max(elapsed, timedelta(0))
    parts = []
    for unit, name in HUMAN_DURATIONS:
        count, remaining = divmod(remaining, unit)
        if count:
            parts.append(f"{count}{name}")
            if len(parts) == 2:
                break
    return "".join(parts) or "0ms"


def display_time(then: datetime, now: Optional[datetime] = None) -> str:
    """Relative age of a post for the last week, its date before that."""
    if now is None:
        now = datetime.now(timezone.utc)
    elapsed = now - then
    if elapsed > RELATIVE_TIME_WINDOW:
        return then.strftime(ABSOLUTE_DATE_FORMAT)
    return human_duration(elapsed) + " ago"
