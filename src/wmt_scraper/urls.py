"""URL helpers: hosts, platform detection and reverse-search links."""

from __future__ import annotations

import re
import urllib.parse

from .models import SearchLink

# Ordered; first match wins. Patterns are matched against the page hostname.
PLATFORM_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"(?:^|\.)(?:twitter|x)\.com$"), "twitter"),
    (re.compile(r"(?:^|\.)instagram\.com$"), "instagram"),
    (re.compile(r"(?:^|\.)pixiv\.net$"), "pixiv"),
    (re.compile(r"(?:^|\.)artstation\.com$"), "artstation"),
    (re.compile(r"(?:^|\.)deviantart\.com$"), "deviantart"),
    (re.compile(r"(?:^|\.)behance\.net$"), "behance"),
    (re.compile(r"(?:^|\.)bsky\.app$"), "bluesky"),
    (re.compile(r"(?:^|\.)cara\.app$"), "cara"),
    (re.compile(r"(?:^|\.)tumblr\.com$"), "tumblr"),
    (re.compile(r"(?:^|\.)reddit\.com$"), "reddit"),
    (re.compile(r"(?:^|\.)pinterest\.[a-z.]+$"), "pinterest"),
]

HOST_LABELS = {
    "x.com": "Twitter/X",
    "twitter.com": "Twitter/X",
    "instagram.com": "Instagram",
    "pixiv.net": "Pixiv",
    "artstation.com": "ArtStation",
    "deviantart.com": "DeviantArt",
    "pinterest.com": "Pinterest",
    "reddit.com": "Reddit",
    "tumblr.com": "Tumblr",
    "behance.net": "Behance",
    "flickr.com": "Flickr",
    "500px.com": "500px",
    "wikipedia.org": "Wikipedia",
    "britannica.com": "Britannica",
    "wikiart.org": "WikiArt",
    "metmuseum.org": "The Met",
    "louvre.fr": "Louvre",
    "uffizi.it": "Uffizi",
    "nationalgallery.org.uk": "National Gallery",
    "rijksmuseum.nl": "Rijksmuseum",
    "moma.org": "MoMA",
    "tate.org.uk": "Tate",
    "nga.gov": "NGA",
}

# Hosts where a resolved author is very likely the creator.
ARTIST_HOSTS = frozenset(
    ["x.com", "twitter.com", "instagram.com", "pixiv.net", "artstation.com", "deviantart.com", "behance.net", "flickr.com"]
)

# Encyclopedic and museum hosts: authoritative, but the page subject may be the artwork.
REFERENCE_HOSTS = frozenset(
    [
        "wikipedia.org",
        "britannica.com",
        "wikiart.org",
        "metmuseum.org",
        "louvre.fr",
        "moma.org",
        "tate.org.uk",
        "uffizi.it",
        "nationalgallery.org.uk",
        "rijksmuseum.nl",
        "nga.gov",
    ]
)

# Links to these hosts near an image are treated as creator profiles.
CREATOR_HOSTS = (
    "twitter.com",
    "x.com",
    "instagram.com",
    "artstation.com",
    "deviantart.com",
    "pixiv.net",
    "behance.net",
    "tumblr.com",
    "cara.app",
    "bsky.app",
)

LENS_SEARCH_URL = "https://lens.google.com/uploadbyurl?url={}"
YANDEX_SEARCH_URL = "https://yandex.com/images/search?url={}&rpt=imageview"

_FALLBACK_ENGINES = [
    ("Google Lens", LENS_SEARCH_URL, "#4285f4"),
    ("TinEye", "https://tineye.com/search?url={}", "#a855f7"),
    ("Yandex", YANDEX_SEARCH_URL, "#ef4444"),
    ("SauceNAO", "https://saucenao.com/search.php?url={}", "#f59e0b"),
    ("IQDB", "https://iqdb.org/?url={}", "#22c55e"),
]


def encode_component(value: str) -> str:
    """Percent-encode a URL component the way browsers' ``encodeURIComponent`` does."""

    return urllib.parse.quote(value or "", safe="-_.!~*'()")


def hostname(url: str | None) -> str:
    """Return the lowercase hostname without a leading ``www.``; empty on failure."""

    if not url:
        return ""
    try:
        host = (urllib.parse.urlparse(url).hostname or "").lower()
    except ValueError:
        return ""
    return host[4:] if host.startswith("www.") else host


def registrable_host(host: str) -> str:
    """Collapse subdomains of known hosts (``en.wikipedia.org`` -> ``wikipedia.org``)."""

    for known in HOST_LABELS:
        if host == known or host.endswith("." + known):
            return known
    return host


def host_label(host: str) -> str:
    return HOST_LABELS.get(host, host)


def is_creator_host(host: str) -> bool:
    return any(host == d or host.endswith("." + d) for d in CREATOR_HOSTS)


def path_segments(url: str) -> list[str]:
    try:
        path = urllib.parse.urlparse(url).path
    except ValueError:
        return []
    return [seg for seg in path.split("/") if seg]


def detect_platform(page_url: str | None) -> str | None:
    host = hostname(page_url)
    if not host:
        return None
    for pattern, name in PLATFORM_PATTERNS:
        if pattern.search(host):
            return name
    return None


def is_embedded_image(image_url: str | None) -> bool:
    """True when remote engines cannot fetch the image (``data:``/``blob:`` and friends)."""

    if not image_url:
        return True
    scheme = urllib.parse.urlparse(image_url).scheme.lower()
    return scheme not in ("http", "https")


def lens_search_url(image_url: str) -> str:
    return LENS_SEARCH_URL.format(encode_component(image_url))


def yandex_search_url(image_url: str) -> str:
    return YANDEX_SEARCH_URL.format(encode_component(image_url))


def build_search_links(image_url: str | None) -> list[SearchLink]:
    encoded = encode_component(image_url or "")
    return [SearchLink(label=label, url=template.format(encoded), color=color) for label, template, color in _FALLBACK_ENGINES]


__all__ = [
    "ARTIST_HOSTS",
    "CREATOR_HOSTS",
    "HOST_LABELS",
    "PLATFORM_PATTERNS",
    "REFERENCE_HOSTS",
    "build_search_links",
    "detect_platform",
    "encode_component",
    "host_label",
    "hostname",
    "is_creator_host",
    "is_embedded_image",
    "lens_search_url",
    "path_segments",
    "registrable_host",
    "yandex_search_url",
]
