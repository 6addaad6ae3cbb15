"""Yandex Images result-page parser.

Besides the "sites with this image" list, Yandex sometimes names the
recognized subject of the image (``CbirObject`` block); that name is reported
as its own candidate.
"""

from __future__ import annotations

import urllib.parse

from bs4 import BeautifulSoup

from .. import config
from ..models import METHOD_YANDEX, CandidateRecord
from .base import EngineParser, extract_identity, load_document

READY_SELECTOR = ".CbirSites-Item, .cbir-section, [class*='cbir'], .CbirObject"
ENTITY_SELECTOR = ".CbirObject-Title, [class*='CbirObject'] [class*='Title'], .CbirObjectResponse-Title"
SITE_ITEM_SELECTOR = ".CbirSites-Item, [class*='SiteItem'], .cbir-section__sites .site"
ITEM_TITLE_SELECTOR = "[class*='Title'], [class*='title'], h3"


def is_yandex_host(host: str) -> bool:
    return "yandex" in host or host.endswith("yastatic.net")


class YandexParser(EngineParser):
    name = "yandex"
    source = "Yandex Images"
    method = METHOD_YANDEX
    max_results = config.YANDEX_MAX_RESULTS
    settle_buffer = config.YANDEX_SETTLE_BUFFER_SECONDS

    def is_ready(self, html: str, page_url: str = "") -> bool:
        return load_document(html).select_one(READY_SELECTOR) is not None

    def record_key(self, record: CandidateRecord) -> str | None:
        return (record.author or record.title or "").lower()[:60]

    def collect(self, soup: BeautifulSoup, page_url: str) -> list[CandidateRecord]:
        out: list[CandidateRecord] = []

        entity = soup.select_one(ENTITY_SELECTOR)
        name = " ".join(entity.get_text(" ").split()) if entity is not None else ""
        if name:
            out.append(
                CandidateRecord(
                    source="Yandex Vision",
                    method=self.method,
                    confidence=config.YANDEX_ENTITY,
                    author=name,
                )
            )

        for item in soup.select(SITE_ITEM_SELECTOR):
            a = item.select_one("a[href]")
            if a is None:
                continue
            href = urllib.parse.urljoin(page_url or "", a.get("href") or "")
            host = (urllib.parse.urlparse(href).hostname or "").lower()
            if not href.startswith("http") or is_yandex_host(host):
                continue
            title_el = item.select_one(ITEM_TITLE_SELECTOR)
            title = " ".join((title_el or a).get_text(" ").split())
            identity = extract_identity(title, href)
            confidence = config.YANDEX_AUTHOR if identity.author else config.YANDEX_NO_AUTHOR
            out.append(self.record(title=title, href=href, identity=identity, confidence=confidence))
        return out


__all__ = ["YandexParser", "is_yandex_host"]
