from wmt_scraper.urls import (
    build_search_links,
    detect_platform,
    encode_component,
    hostname,
    is_creator_host,
    is_embedded_image,
    lens_search_url,
    registrable_host,
    yandex_search_url,
)


def test_detect_platform_first_match_by_host():
    assert detect_platform("https://x.com/alice/status/123") == "twitter"
    assert detect_platform("https://mobile.twitter.com/alice") == "twitter"
    assert detect_platform("https://www.pixiv.net/en/artworks/1") == "pixiv"
    assert detect_platform("https://bsky.app/profile/alice.bsky.social/post/1") == "bluesky"
    assert detect_platform("https://artist.tumblr.com/post/1") == "tumblr"
    assert detect_platform("https://www.pinterest.co.uk/pin/123/") == "pinterest"


def test_detect_platform_returns_none_for_unknown_or_lookalike_hosts():
    assert detect_platform("https://box.com/files") is None
    assert detect_platform("https://example.com/x.com/alice") is None
    assert detect_platform("") is None
    assert detect_platform(None) is None


def test_hostname_strips_www_and_handles_garbage():
    assert hostname("https://www.ArtStation.com/bob") == "artstation.com"
    assert hostname("not a url") == ""
    assert hostname(None) == ""
    assert registrable_host("en.wikipedia.org") == "wikipedia.org"
    assert registrable_host("unknown.example") == "unknown.example"


def test_is_creator_host_matches_subdomains_only():
    assert is_creator_host("artstation.com")
    assert is_creator_host("foo.tumblr.com")
    assert not is_creator_host("notx.com")


def test_is_embedded_image():
    assert is_embedded_image("data:image/png;base64,AAAA")
    assert is_embedded_image("blob:https://example.com/1234")
    assert is_embedded_image("")
    assert not is_embedded_image("https://example.com/a.png")


def test_build_search_links_always_five_encoded_links():
    links = build_search_links("https://img.example.com/a b.png?x=1&y=2")
    assert [link.label for link in links] == ["Google Lens", "TinEye", "Yandex", "SauceNAO", "IQDB"]
    encoded = "https%3A%2F%2Fimg.example.com%2Fa%20b.png%3Fx%3D1%26y%3D2"
    assert links[0].url == f"https://lens.google.com/uploadbyurl?url={encoded}"
    assert links[2].url.endswith("&rpt=imageview")
    assert all(link.color.startswith("#") for link in links)


def test_engine_urls_match_fallback_links():
    image = "https://img.example.com/a.png"
    links = {link.label: link.url for link in build_search_links(image)}
    assert lens_search_url(image) == links["Google Lens"]
    assert yandex_search_url(image) == links["Yandex"]
    assert encode_component("a(b)!") == "a(b)!"
