import logging

import httpx
import pytest

from titlebot.bluesky import GET_RECORD_URL, POST_COLLECTION, RESOLVE_HANDLE_URL, title_bluesky
from titlebot.platforms import Platform, SocialPost

POST = SocialPost(Platform.BLUESKY, "alice.bsky.social", "3kabc")
DID = "did:plc:abc123"


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def bluesky_api(record_value, calls=None):
    def handler(request):
        if calls is not None:
            calls.append(request)
        url = str(request.url).split("?")[0]
        if url == RESOLVE_HANDLE_URL:
            assert request.url.params["handle"] == "alice.bsky.social"
            return httpx.Response(200, json={"did": DID})
        if url == GET_RECORD_URL:
            assert request.url.params["repo"] == DID
            assert request.url.params["collection"] == POST_COLLECTION
            assert request.url.params["rkey"] == "3kabc"
            return httpx.Response(200, json={"uri": "at://x", "value": record_value})
        return httpx.Response(500)

    return handler


@pytest.mark.asyncio
async def test_title_bluesky_renders_post():
    calls = []
    value = {
        "$type": "app.bsky.feed.post",
        "text": "hello\nworld & friends",
        "createdAt": "2023-01-02T03:04:05.678Z",
    }
    async with _client(bluesky_api(value, calls)) as client:
        line = await title_bluesky(client, POST)

    assert line == "(@alice.bsky.social, 2023-01-02) hello  world & friends"
    # identity first, then the record
    assert [str(c.url).split("?")[0] for c in calls] == [RESOLVE_HANDLE_URL, GET_RECORD_URL]


@pytest.mark.asyncio
async def test_title_bluesky_skips_resolution_for_did():
    calls = []
    value = {"text": "hi", "createdAt": "2023-01-02T03:04:05.678Z"}

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"value": value})

    post = SocialPost(Platform.BLUESKY, DID, "3kabc")
    async with _client(handler) as client:
        line = await title_bluesky(client, post)

    assert line == f"(@{DID}, 2023-01-02) hi"
    assert len(calls) == 1
    assert str(calls[0].url).split("?")[0] == GET_RECORD_URL


@pytest.mark.asyncio
async def test_title_bluesky_resolve_404(caplog):
    caplog.set_level(logging.INFO)

    def handler(request):
        return httpx.Response(404, json={"error": "NotFound"})

    async with _client(handler) as client:
        assert await title_bluesky(client, POST) is None

    ours = [r for r in caplog.records if r.name.startswith("titlebot")]
    assert len(ours) == 1
    assert "resolveHandle" in ours[0].getMessage()
    assert "404" in ours[0].getMessage()


@pytest.mark.asyncio
async def test_title_bluesky_bad_timestamp(caplog):
    caplog.set_level(logging.INFO, logger="titlebot.bluesky")
    value = {"text": "hi", "createdAt": "2023-01-02T03:04:05Z"}
    async with _client(bluesky_api(value)) as client:
        assert await title_bluesky(client, POST) is None
    assert any("couldn't decode" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_title_bluesky_malformed_json(caplog):
    caplog.set_level(logging.INFO, logger="titlebot.bluesky")

    def handler(request):
        return httpx.Response(200, content=b"{not json")

    async with _client(handler) as client:
        assert await title_bluesky(client, POST) is None
    assert any("couldn't decode" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_title_bluesky_missing_value(caplog):
    caplog.set_level(logging.INFO, logger="titlebot.bluesky")
    async with _client(bluesky_api(None)) as client:
        assert await title_bluesky(client, POST) is None
    assert any("couldn't decode" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_title_bluesky_timeout(caplog):
    caplog.set_level(logging.INFO, logger="titlebot.bluesky")

    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    async with _client(handler) as client:
        assert await title_bluesky(client, POST) is None
    assert any("http error" in r.getMessage() for r in caplog.records)
