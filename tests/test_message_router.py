import asyncio

import pytest

from titlebot.events import MessageEvent
from titlebot.message_router import MENTION_REPLY, route_message
from titlebot.tasks import create_task


class DummyDispatcher:
    def __init__(self):
        self.calls = []

    def title_all(self, target, msgid, urls):
        self.calls.append((target, msgid, list(urls)))
        return []


class Recorder:
    def __init__(self):
        self.sent = []
        self.quit = False

    async def send(self, target, msgid, text):
        self.sent.append((target, msgid, text))

    async def on_quit(self):
        self.quit = True


async def _route(event, dispatcher, recorder, owner="boss"):
    await route_message(
        event,
        dispatcher=dispatcher,
        send_notice=recorder.send,
        nick="titlebot",
        owner=owner,
        on_quit=recorder.on_quit,
    )


@pytest.mark.asyncio
async def test_group_message_with_urls():
    dispatcher, rec = DummyDispatcher(), Recorder()
    event = MessageEvent("-100", "see https://a.example and https://b.example", "7", "alice")
    await _route(event, dispatcher, rec)
    assert dispatcher.calls == [("-100", "7", ["https://a.example", "https://b.example"])]
    assert rec.sent == []


@pytest.mark.asyncio
async def test_group_message_without_urls():
    dispatcher, rec = DummyDispatcher(), Recorder()
    await _route(MessageEvent("-100", "just chatting", "7", "alice"), dispatcher, rec)
    assert dispatcher.calls == []
    assert rec.sent == []


@pytest.mark.asyncio
async def test_direct_message_from_stranger_ignored():
    dispatcher, rec = DummyDispatcher(), Recorder()
    event = MessageEvent("5", "https://a.example", "7", "alice", is_channel=False)
    await _route(event, dispatcher, rec)
    assert dispatcher.calls == []
    assert rec.sent == []


@pytest.mark.asyncio
async def test_direct_message_from_owner_titled():
    dispatcher, rec = DummyDispatcher(), Recorder()
    event = MessageEvent("5", "https://a.example", "7", "Boss", is_channel=False)
    await _route(event, dispatcher, rec)
    assert dispatcher.calls == [("5", "7", ["https://a.example"])]


@pytest.mark.asyncio
async def test_mention_gets_reply():
    dispatcher, rec = DummyDispatcher(), Recorder()
    await _route(MessageEvent("-100", "@TitleBot hello", "7", "alice"), dispatcher, rec)
    assert rec.sent == [("-100", "7", MENTION_REPLY)]


@pytest.mark.asyncio
async def test_owner_abuse_command():
    dispatcher, rec = DummyDispatcher(), Recorder()
    await _route(MessageEvent("-100", "titlebot: abuse carol", "7", "boss"), dispatcher, rec)
    assert rec.sent == [("-100", None, "carol isn't a real programmer")]
    assert not rec.quit


@pytest.mark.asyncio
async def test_owner_quit_command():
    dispatcher, rec = DummyDispatcher(), Recorder()
    await _route(MessageEvent("-100", "@titlebot quit", "7", "boss"), dispatcher, rec)
    assert rec.quit


@pytest.mark.asyncio
async def test_quit_from_non_owner_is_just_a_mention():
    dispatcher, rec = DummyDispatcher(), Recorder()
    await _route(MessageEvent("-100", "titlebot quit", "7", "mallory"), dispatcher, rec)
    assert not rec.quit
    assert rec.sent == [("-100", "7", MENTION_REPLY)]


@pytest.mark.asyncio
async def test_no_owner_configured():
    dispatcher, rec = DummyDispatcher(), Recorder()
    await _route(MessageEvent("-100", "titlebot quit", "7", "boss"), dispatcher, rec, owner="")
    assert not rec.quit


class SlowDispatcher:
    def __init__(self):
        self.release = asyncio.Event()
        self.done = []
        self.tasks = []

    async def _title(self, url):
        await self.release.wait()
        self.done.append(url)

    def title_all(self, target, msgid, urls):
        self.tasks = [create_task(self._title(url)) for url in urls]
        return self.tasks


@pytest.mark.asyncio
async def test_routing_does_not_wait_for_titles():
    dispatcher, rec = SlowDispatcher(), Recorder()
    await _route(MessageEvent("-100", "https://a.example", "7", "alice"), dispatcher, rec)
    assert dispatcher.done == []
    assert not any(t.done() for t in dispatcher.tasks)

    dispatcher.release.set()
    await asyncio.gather(*dispatcher.tasks)
    assert dispatcher.done == ["https://a.example"]
