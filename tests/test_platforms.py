import pytest

from titlebot.platforms import Platform, SocialPost, classify


@pytest.mark.parametrize(
    "url, expected",
    [
        (
            "https://bsky.app/profile/alice.bsky.social/post/3kabc123",
            SocialPost(Platform.BLUESKY, "alice.bsky.social", "3kabc123"),
        ),
        (
            "https://BSKY.app/profile/did:plc:xyz/post/3kabc123?ref=1",
            SocialPost(Platform.BLUESKY, "did:plc:xyz", "3kabc123"),
        ),
        (
            "https://twitter.com/jack/status/20",
            SocialPost(Platform.TWITTER, "jack", "20"),
        ),
        (
            "https://mobile.twitter.com/jack/status/20",
            SocialPost(Platform.TWITTER, "jack", "20"),
        ),
        (
            "https://x.com/jack/status/20?s=46",
            SocialPost(Platform.TWITTER, "jack", "20"),
        ),
    ],
)
def test_classify_social(url, expected):
    assert classify(url) == expected


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com/",
        "https://bsky.app/profile/alice.bsky.social",
        "https://bsky.app/profile/alice.bsky.social/post/",
        "https://twitter.com/jack",
        "https://twitter.com/jack/status/notanumber",
        "https://evilbsky.app/profile/a/post/b",
        "http://bsky.app/profile/a/post/b",
    ],
)
def test_classify_generic(url):
    assert classify(url) is None
