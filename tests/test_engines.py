from wmt_scraper.engines import LensParser, YandexParser, extract_identity
from wmt_scraper.engines.base import best_title, by_name, load_document

LENS_PAGE = """
<html><body>
  <a href="https://www.google.com/search?q=starry">Google</a>
  <a href="https://encrypted-tbn0.gstatic.com/images?q=tbn:1"><img src="t.jpg"></a>
  <a href="https://a.io/x">tiny</a>
  <div data-ved="2ahUKE">
    <h3>Caravaggio - Wikipedia</h3>
    <a href="https://en.wikipedia.org/wiki/Caravaggio"><img src="c.jpg"></a>
  </div>
  <a href="https://x.com/alice/status/123" aria-label="Alice Doe on X: new piece"></a>
  <a href="https://www.artstation.com/bobart/artwork/xyz"><h3>Bob Artist - Sunset</h3></a>
  <a href="https://example.com/gallery/1" title="Sunflowers by Vincent van Gogh | Gallery"></a>
  <a href="https://randomblog.net/post">Some random post about paintings</a>
  <a href="https://x.com/alice">Alice profile</a>
</body></html>
"""

YANDEX_PAGE = """
<html><body>
  <div class="CbirObject"><div class="CbirObject-Title">Vincent van Gogh</div></div>
  <ul class="CbirSites">
    <li class="CbirSites-Item">
      <a href="https://en.wikipedia.org/wiki/The_Starry_Night"><div class="CbirSites-ItemTitle">The Starry Night - Wikipedia</div></a>
    </li>
    <li class="CbirSites-Item">
      <a href="https://shop.example.com/print/1"><div class="CbirSites-ItemTitle">Canvas print by Anna Berg, framed</div></a>
    </li>
    <li class="CbirSites-Item">
      <a href="https://blog.example.org/p/2"><div class="CbirSites-ItemTitle">Wallpaper collection</div></a>
    </li>
    <li class="CbirSites-Item">
      <a href="https://decor.example.net/p/3"><div class="CbirSites-ItemTitle">Poster by Anna Berg</div></a>
    </li>
    <li class="CbirSites-Item"><a href="https://yandex.com/images/search?text=more">More</a></li>
  </ul>
</body></html>
"""


def test_lens_parser_extracts_ranks_and_dedupes():
    records = LensParser().parse(LENS_PAGE, "https://lens.google.com/search?p=1")
    summary = [(r.author, r.confidence) for r in records]
    assert summary == [
        ("Alice Doe", 82),
        ("Bob Artist", 82),
        ("Caravaggio", 78),
        ("Vincent van Gogh", 65),
        (None, 50),
    ]
    alice = records[0]
    assert alice.display_handle == "@alice"
    assert alice.author_url == "https://x.com/alice"
    assert alice.method == "lens" and alice.source == "Google Lens"
    assert alice.socials[0].label == "Twitter/X"
    assert records[1].author_url == "https://www.artstation.com/bobart"
    assert records[2].socials[0].label == "Wikipedia"
    untitled = records[-1]
    assert untitled.title == "Some random post about paintings"
    assert untitled.url == "https://randomblog.net/post"


def test_lens_parser_caps_results():
    anchors = "".join(f'<a href="https://artist{i}.example.com/p" title="Study by Painter {chr(65 + i)}"></a>' for i in range(10))
    records = LensParser().parse(f"<html><body>{anchors}</body></html>", "https://lens.google.com/")
    assert len(records) == 6


def test_lens_readiness_needs_four_offsite_links():
    parser = LensParser()
    assert parser.is_ready(LENS_PAGE, "https://lens.google.com/")
    google_only = '<a href="https://www.google.com/a">a</a>' * 6 + '<a href="https://example.com/1">b</a>'
    assert not parser.is_ready(google_only, "https://lens.google.com/")


def test_reference_titles_reject_list_and_category_pages():
    identity = extract_identity("Category:Baroque painters - Wikipedia", "https://en.wikipedia.org/wiki/Category:Baroque")
    assert identity.author is None
    identity = extract_identity("List of works by Caravaggio - Wikipedia", "https://en.wikipedia.org/wiki/List")
    assert identity.author == "Caravaggio"


def test_social_rules_skip_reserved_paths():
    assert extract_identity("Search results", "https://x.com/search?q=art").author is None
    assert extract_identity("Photo", "https://www.instagram.com/p/abc123/").author is None
    identity = extract_identity("Post by Kai Moon on X", "https://twitter.com/kaimoon/status/5")
    assert (identity.author, identity.display_handle, identity.author_url) == ("Kai Moon", "@kaimoon", "https://x.com/kaimoon")
    identity = extract_identity("Fox - pixiv", "https://www.pixiv.net/en/users/777")
    assert (identity.author, identity.author_url) == ("Fox", "https://www.pixiv.net/en/users/777")
    identity = extract_identity("whatever", "https://www.deviantart.com/inkfox/art/1")
    assert identity.author == "inkfox"


def test_by_name_pattern():
    assert by_name("Water Lilies by Claude Monet") == "Claude Monet"
    assert by_name("Portrait by Jean-Paul Laurens, 1890") == "Jean-Paul Laurens"
    assert by_name("Sunset by Ana Ruiz - DeviantArt") == "Ana Ruiz"
    assert by_name("made by hand") is None


def test_best_title_precedence():
    doc = load_document(
        '<div jsaction="x"><h3>Container heading</h3><a id="a1" href="https://e.com" aria-label="label">text</a></div>'
        '<a id="a2" href="https://e.com" title="attr title">text</a>'
        f'<a id="a3" href="https://e.com">{"long " * 60}</a>'
    )
    assert best_title(doc.select_one("#a1")) == "Container heading"
    assert best_title(doc.select_one("#a2")) == "attr title"
    assert best_title(doc.select_one("#a3")) == ""


def test_yandex_parser_entity_and_sites():
    records = YandexParser().parse(YANDEX_PAGE, "https://yandex.com/images/search?rpt=imageview")
    summary = [(r.source, r.author, r.confidence) for r in records]
    assert summary == [
        ("Yandex Vision", "Vincent van Gogh", 70),
        ("Yandex Images", "The Starry Night", 68),
        ("Yandex Images", "Anna Berg", 68),
        ("Yandex Images", None, 52),
    ]
    assert records[-1].title == "Wallpaper collection"
    assert all(r.method == "yandex" for r in records)
    assert records[0].url is None


def test_yandex_readiness_selector():
    parser = YandexParser()
    assert parser.is_ready(YANDEX_PAGE)
    assert not parser.is_ready("<html><body><div class='loading'></div></body></html>")
