"""Build a :class:`PageData` snapshot from a page's HTML."""

from __future__ import annotations

import json
import urllib.parse

from bs4 import BeautifulSoup

from ..models import PageData
from ..urls import hostname

NEARBY_LINK_LIMIT = 20
_NEARBY_HOST_HINTS = (
    "pixiv",
    "artstation",
    "deviantart",
    "twitter",
    "x.com",
    "instagram",
    "tumblr",
    "cara.app",
    "bsky.app",
    "behance",
    "flickr",
    "500px",
)


def _json_ld(soup: BeautifulSoup) -> list[dict]:
    out: list[dict] = []
    for script in soup.select('script[type="application/ld+json"]'):
        try:
            parsed = json.loads(script.string or script.get_text() or "")
        except ValueError:
            continue
        items = parsed if isinstance(parsed, list) else [parsed]
        out.extend(item for item in items if isinstance(item, dict))
    return out


def page_data_from_html(html: str, page_url: str | None = None) -> PageData:
    soup = BeautifulSoup(html or "", "html.parser")

    meta_tags: dict[str, str] = {}
    for el in soup.select("meta[name], meta[property]"):
        key = el.get("name") or el.get("property")
        if key:
            meta_tags[key] = el.get("content") or ""

    nearby: list[str] = []
    for a in soup.select("a[href]"):
        href = urllib.parse.urljoin(page_url or "", a["href"])
        host = hostname(href)
        if host and any(hint in host for hint in _NEARBY_HOST_HINTS):
            nearby.append(href)
        if len(nearby) >= NEARBY_LINK_LIMIT:
            break

    canonical_el = soup.select_one('link[rel="canonical"][href]')
    canonical = urllib.parse.urljoin(page_url or "", canonical_el["href"]) if canonical_el else None
    title = soup.title.get_text().strip() if soup.title else ""

    return PageData(
        meta_tags=meta_tags,
        json_ld=_json_ld(soup),
        nearby_links=nearby,
        page_title=title,
        canonical=canonical,
    )


__all__ = ["page_data_from_html"]
