"""Google Lens result-page parser."""

from __future__ import annotations

from bs4 import BeautifulSoup

from .. import config
from ..models import METHOD_LENS, CandidateRecord
from ..urls import ARTIST_HOSTS, REFERENCE_HOSTS, hostname, registrable_host
from .base import EngineParser, best_title, extract_identity, iter_offsite_anchors, load_document


def is_google_host(host: str) -> bool:
    return "google" in host or "gstatic" in host


def lens_confidence(host: str, has_author: bool) -> int:
    if has_author:
        if host in ARTIST_HOSTS:
            return config.LENS_ARTIST_AUTHOR
        if host in REFERENCE_HOSTS:
            return config.LENS_REFERENCE_AUTHOR
        return config.LENS_OTHER_AUTHOR
    return config.LENS_REFERENCE_NO_AUTHOR if host in REFERENCE_HOSTS else config.LENS_OTHER_NO_AUTHOR


class LensParser(EngineParser):
    name = "lens"
    source = "Google Lens"
    method = METHOD_LENS
    max_results = config.LENS_MAX_RESULTS
    settle_buffer = config.LENS_SETTLE_BUFFER_SECONDS

    def is_ready(self, html: str, page_url: str = "") -> bool:
        count = 0
        for _ in iter_offsite_anchors(load_document(html), page_url, is_google_host):
            count += 1
            if count >= config.LENS_MIN_OFFSITE_LINKS:
                return True
        return False

    def collect(self, soup: BeautifulSoup, page_url: str) -> list[CandidateRecord]:
        out: list[CandidateRecord] = []
        for a, href in iter_offsite_anchors(soup, page_url, is_google_host):
            title = best_title(a)
            identity = extract_identity(title, href)
            host = registrable_host(hostname(href))
            out.append(self.record(title=title, href=href, identity=identity, confidence=lens_confidence(host, bool(identity.author))))
        return out


__all__ = ["LensParser", "is_google_host", "lens_confidence"]
