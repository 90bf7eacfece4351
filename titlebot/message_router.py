import logging
from typing import Awaitable, Callable, Optional

from titlebot.dispatcher import TitleDispatcher
from titlebot.events import MessageEvent, SendNotice
from titlebot.scanner import find_urls

logger = logging.getLogger(__name__)

QuitFunc = Callable[[], Awaitable[None]]

MENTION_REPLY = "don't @ me, mortal"


def _is_owner(event: MessageEvent, owner: str) -> bool:
    if not owner or not event.account:
        return False
    return event.account.lstrip("@").lower() == owner


def _strip_nick(text: str, nick: str) -> Optional[str]:
    """Return *text* minus a leading ``nick`` or ``@nick``, or None if absent."""
    if not nick:
        return None
    lowered = text.lower()
    for prefix in (f"@{nick}", nick):
        if lowered.startswith(prefix):
            return text[len(prefix):]
    return None


async def handle_owner_command(
    event: MessageEvent,
    *,
    send_notice: SendNotice,
    nick: str,
    on_quit: Optional[QuitFunc] = None,
) -> None:
    command = _strip_nick(event.text, nick)
    if command is None:
        return
    fields = command.removeprefix(":").split()
    if not fields:
        return
    verb = fields[0].lower()
    if verb == "abuse":
        if len(fields) > 1:
            await send_notice(event.target, None, f"{fields[1]} isn't a real programmer")
    elif verb == "quit":
        logger.info("quit requested by owner")
        if on_quit is not None:
            await on_quit()


async def route_message(
    event: MessageEvent,
    *,
    dispatcher: TitleDispatcher,
    send_notice: SendNotice,
    nick: str,
    owner: str = "",
    on_quit: Optional[QuitFunc] = None,
) -> None:
    """Handle one inbound chat message.

    URLs are handed to the dispatcher and titled in the background; this
    coroutine never waits for them.
    """
    from_owner = _is_owner(event, owner)
    if not event.is_channel and not from_owner:
        return

    urls = find_urls(event.text)
    if urls:
        # detached: nothing awaits these tasks, create_task logs their failures
        dispatcher.title_all(event.target, event.msgid, urls)

    if from_owner:
        await handle_owner_command(event, send_notice=send_notice, nick=nick, on_quit=on_quit)
    elif _strip_nick(event.text, nick) is not None:
        await send_notice(event.target, event.msgid, MENTION_REPLY)
