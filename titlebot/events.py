from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

# send_notice(target, msgid, text); msgid, when set, is the message replied to
SendNotice = Callable[[str, Optional[str], str], Awaitable[None]]


@dataclass(frozen=True)
class MessageEvent:
    """A chat message as seen by the bot."""

    target: str
    text: str
    msgid: Optional[str] = None
    account: Optional[str] = None
    is_channel: bool = True
