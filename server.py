import asyncio
import logging

from aiogram import Bot, Dispatcher, types
from aiogram.types import ReplyParameters

from titlebot.config import Settings, load_settings
from titlebot.dispatcher import TitleDispatcher
from titlebot.events import MessageEvent, SendNotice
from titlebot.logging_config import setup_logging
from titlebot.message_router import route_message

logger = logging.getLogger(__name__)

GROUP_CHAT_TYPES = {"group", "supergroup"}


def to_event(message: types.Message) -> MessageEvent:
    user = message.from_user
    return MessageEvent(
        target=str(message.chat.id),
        text=message.text or message.caption or "",
        msgid=str(message.message_id),
        account=user.username if user else None,
        is_channel=message.chat.type in GROUP_CHAT_TYPES,
    )


def make_sender(bot: Bot) -> SendNotice:
    async def send_notice(target: str, msgid, text: str) -> None:
        # notices are silent replies, sent as plain text
        reply = None
        if msgid:
            reply = ReplyParameters(message_id=int(msgid), allow_sending_without_reply=True)
        await bot.send_message(
            int(target),
            text,
            disable_notification=True,
            reply_parameters=reply,
        )
    return send_notice


def build_dispatcher(settings: Settings, bot: Bot, nick: str) -> Dispatcher:
    dp = Dispatcher()
    send_notice = make_sender(bot)
    titler = TitleDispatcher(
        send_notice,
        user_agent=settings.user_agent,
        twitter_bearer_token=settings.twitter_bearer_token,
        debug=settings.debug,
    )

    async def on_quit() -> None:
        await dp.stop_polling()

    @dp.message()
    async def on_message(message: types.Message) -> None:
        if settings.channels and str(message.chat.id) not in settings.channels:
            return
        event = to_event(message)
        if not event.text:
            return
        await route_message(
            event,
            dispatcher=titler,
            send_notice=send_notice,
            nick=nick,
            owner=settings.owner,
            on_quit=on_quit,
        )

    dp.shutdown.register(titler.aclose)
    return dp


async def main() -> None:
    settings = load_settings()
    setup_logging(settings.debug)
    bot = Bot(token=settings.telegram_token)
    nick = settings.nick
    if not nick:
        me = await bot.get_me()
        nick = (me.username or "").lower()
    dp = build_dispatcher(settings, bot, nick)
    logger.info("titlebot started as @%s", nick)
    try:
        await dp.start_polling(bot)
    finally:
        await bot.session.close()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
