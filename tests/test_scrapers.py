from wmt_scraper.models import PageData, Social
from wmt_scraper.scrapers import context_scrape, page_data_from_html, platform_scrape


def test_twitter_status_page_yields_name_and_handle():
    data = PageData(meta_tags={"og:title": "Alice Doe on X: \"new piece\""}, page_title="Alice Doe on X")
    rec = platform_scrape(data, "twitter", "https://x.com/alice/status/123")
    assert rec is not None
    assert rec.author == "Alice Doe"
    assert rec.display_handle == "@alice"
    assert rec.confidence == 97
    assert rec.method == "platform"
    assert rec.author_url == "https://x.com/alice"
    assert rec.socials == [Social("Twitter/X", "https://x.com/alice", "@alice")]


def test_twitter_falls_back_to_handle_and_returns_none_without_signal():
    rec = platform_scrape(PageData(page_title="X"), "twitter", "https://x.com/bob/status/9")
    assert rec is not None and rec.author == "@bob"
    assert platform_scrape(PageData(page_title="X"), "twitter", "https://x.com/home") is None


def test_instagram_title_parsing():
    data = PageData(page_title="Mika Tan (@mika.draws) • Instagram photos and videos")
    rec = platform_scrape(data, "instagram", "https://www.instagram.com/p/abc/")
    assert rec.author == "Mika Tan"
    assert rec.display_handle == "@mika.draws"
    assert rec.socials[0].url == "https://instagram.com/mika.draws"


def test_pixiv_uses_structured_data_author_and_user_id():
    data = PageData(
        json_ld=[{"@type": "WebPage"}, {"@type": "ImageObject", "author": {"name": "Rin"}}],
        canonical="https://www.pixiv.net/en/users/4242/artworks",
    )
    rec = platform_scrape(data, "pixiv", "https://www.pixiv.net/en/artworks/1")
    assert rec.author == "Rin"
    assert rec.url == "https://www.pixiv.net/en/users/4242/artworks"
    assert rec.socials == [Social("Pixiv", "https://www.pixiv.net/en/users/4242")]


def test_pixiv_without_author_never_guesses():
    assert platform_scrape(PageData(page_title="pixiv"), "pixiv", "https://www.pixiv.net/en/artworks/1") is None


def test_handle_platforms_fall_back_to_url_handle():
    rec = platform_scrape(PageData(), "tumblr", "https://inkyfox.tumblr.com/post/1")
    assert rec.author == "inkyfox"
    assert rec.socials[0].url == "https://inkyfox.tumblr.com"
    rec = platform_scrape(PageData(meta_tags={"author": "Jo Park"}), "behance", "https://www.behance.net/jopark/gallery")
    assert rec.author == "Jo Park"
    assert rec.socials[0].url == "https://behance.net/jopark"


def test_bluesky_reddit_and_pinterest_text_rules():
    rec = platform_scrape(PageData(page_title="Alice | Bluesky"), "bluesky", "https://bsky.app/profile/alice.bsky.social")
    assert rec.author == "Alice"
    rec = platform_scrape(PageData(page_title="Sunset over the bay [OC] art by u/paintpal"), "reddit", "https://www.reddit.com/r/Art/comments/1")
    assert rec.author == "u/paintpal"
    assert rec.confidence == 97
    assert platform_scrape(PageData(page_title="Just a photo"), "reddit", "https://www.reddit.com/r/pics/1") is None
    rec = platform_scrape(PageData(meta_tags={"description": "Lovely fox sketch by Nora Lee"}), "pinterest", "https://pinterest.com/pin/1")
    assert rec.author == "Nora Lee"


def test_unknown_platform_returns_none():
    assert platform_scrape(PageData(meta_tags={"author": "x"}), None, "https://example.com") is None
    assert platform_scrape(PageData(meta_tags={"author": "x"}), "myspace", "https://example.com") is None


def test_context_scrape_prefers_structured_data_and_filters_links():
    data = PageData(
        meta_tags={"author": "Meta Name"},
        json_ld=[{"author": {"name": "Ada Lin", "url": "https://www.artstation.com/adalin"}}],
        nearby_links=[
            "https://www.artstation.com/adalin",
            "https://news.example.com/story",
            "https://twitter.com/adalin",
        ],
    )
    rec = context_scrape(data, "https://blog.example.com/post")
    assert rec.author == "Ada Lin"
    assert rec.method == "context"
    assert rec.confidence == 72
    assert rec.url == "https://blog.example.com/post"
    assert [s.url for s in rec.socials] == ["https://www.artstation.com/adalin", "https://twitter.com/adalin"]


def test_context_scrape_meta_fallbacks_and_none():
    assert context_scrape(PageData(meta_tags={"article:author": "Sam Poe"}), "https://e.com").author == "Sam Poe"
    assert context_scrape(PageData(json_ld=[{"author": "Plain Name"}]), "https://e.com").author == "Plain Name"
    assert context_scrape(PageData(page_title="Nothing here"), "https://e.com") is None


def test_page_data_from_html_snapshot():
    html = """
    <html><head>
      <title> My Gallery </title>
      <meta property="og:title" content="Fox by Ada">
      <meta name="author" content="Ada Lin">
      <link rel="canonical" href="/post/1">
      <script type="application/ld+json">[{"author": {"name": "Ada Lin"}}, 3]</script>
      <script type="application/ld+json">{not json</script>
    </head><body>
      <a href="https://www.artstation.com/adalin">ArtStation</a>
      <a href="/about">About</a>
    </body></html>
    """
    data = page_data_from_html(html, "https://blog.example.com/post/1?ref=x")
    assert data.page_title == "My Gallery"
    assert data.meta_tags["og:title"] == "Fox by Ada"
    assert data.meta_tags["author"] == "Ada Lin"
    assert data.canonical == "https://blog.example.com/post/1"
    assert data.json_ld == ({"author": {"name": "Ada Lin"}},)
    assert data.nearby_links == ("https://www.artstation.com/adalin",)


def test_page_data_from_dict_round_trips_wire_keys():
    wire = {"metaTags": {"author": "A"}, "jsonLd": [{"author": "A"}], "nearbyLinks": [], "pageTitle": "T", "canonical": None}
    data = PageData.from_dict(wire)
    assert data.to_dict() == wire
    assert PageData.from_dict(None) is None
