from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from titlebot.text_helpers import display_time, sanitize_text

CHECK_MARK = " ✓"


@dataclass(frozen=True)
class PostRecord:
    text: str
    created_at: datetime
    handle: str
    verified: bool = False


def render_post(record: PostRecord, now: Optional[datetime] = None) -> str:
    """``(@handle[ ✓], <when>) <text>``"""
    mark = CHECK_MARK if record.verified else ""
    when = display_time(record.created_at, now)
    return f"(@{record.handle}{mark}, {when}) {sanitize_text(record.text)}"
