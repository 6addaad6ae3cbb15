"""Shared machinery for reverse-image-search result parsers.

A parser works on the rendered HTML of one engine's result page and nothing
else: it holds no reference to pipeline state, so every parser can be
exercised against a static HTML fixture. Host-specific identity extraction is
a declarative table (:data:`IDENTITY_RULES`) keyed by registrable host.
"""

from __future__ import annotations

import re
import urllib.parse
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag

from ..config import PARSER_POLL_SECONDS, TITLE_CHARS
from ..models import CandidateRecord, Method, Social
from ..normalize import dedupe_by, sort_authored_first
from ..urls import host_label, hostname, path_segments, registrable_host

HEADINGS = "h1, h2, h3, h4, h5, h6"
MAX_VISIBLE_TEXT = 200

BY_NAME_RE = re.compile(r"\bby\s+([A-Z][a-zA-ZÀ-ÖØ-öø-ÿ\s\-'.]{1,35})(?:\s*[,|–—·]|\s*$)")
SUBJECT_SPLIT_RE = re.compile(r"\s[-–—|]\s")
NON_PERSON_SUBJECT_RE = re.compile(r"^(list|category|talk|file|help|disambiguation)\b", re.I)
TITLE_PREFIX_RE = re.compile(r"^(.+?)\s*[-–|·]")


@dataclass(frozen=True)
class Identity:
    author: str | None = None
    author_url: str | None = None
    display_handle: str | None = None


IdentityRule = Callable[[str, str, list[str]], Identity]

IDENTITY_RULES: dict[str, IdentityRule] = {}


def identity_rule(*hosts: str) -> Callable[[IdentityRule], IdentityRule]:
    def register(fn: IdentityRule) -> IdentityRule:
        for host in hosts:
            IDENTITY_RULES[host] = fn
        return fn

    return register


@identity_rule("x.com", "twitter.com")
def _twitter(title: str, href: str, segs: list[str]) -> Identity:
    handle = segs[0] if segs else None
    if not handle or handle.lower() in {"i", "search", "home", "explore", "hashtag"}:
        return Identity()
    m = re.match(r"^Post by (.+?) on (?:X|Twitter)", title, re.I) or re.match(r"^(.+?)\s+on (?:X|Twitter)", title, re.I)
    author = m.group(1).strip() if m else None
    return Identity(author or f"@{handle}", f"https://x.com/{handle}", f"@{handle}")


@identity_rule("instagram.com")
def _instagram(title: str, href: str, segs: list[str]) -> Identity:
    slug = segs[0] if segs else None
    if not slug or slug.lower() in {"p", "reel", "stories", "explore", "accounts"}:
        return Identity()
    m = re.match(r"^([^•(@|\n]{2,40})", title)
    author = m.group(1).strip() if m else None
    return Identity(author or f"@{slug}", f"https://instagram.com/{slug}", f"@{slug}")


@identity_rule("pixiv.net")
def _pixiv(title: str, href: str, segs: list[str]) -> Identity:
    uid = re.search(r"users/(\d+)", urllib.parse.urlparse(href).path)
    m = TITLE_PREFIX_RE.match(title)
    return Identity(
        m.group(1).strip() if m else None,
        f"https://www.pixiv.net/en/users/{uid.group(1)}" if uid else href,
    )


@identity_rule("artstation.com")
def _artstation(title: str, href: str, segs: list[str]) -> Identity:
    slug = segs[0] if segs else None
    if not slug or slug == "artwork":
        return Identity(author_url=href)
    m = TITLE_PREFIX_RE.match(title)
    return Identity((m.group(1).strip() if m else None) or slug, f"https://www.artstation.com/{slug}", slug)


@identity_rule("deviantart.com")
def _deviantart(title: str, href: str, segs: list[str]) -> Identity:
    slug = segs[0] if segs else None
    if not slug or slug == "tag":
        return Identity(author_url=href)
    return Identity(slug, f"https://deviantart.com/{slug}", slug)


@identity_rule("wikipedia.org", "britannica.com", "wikiart.org")
def _reference_subject(title: str, href: str, segs: list[str]) -> Identity:
    # "Caravaggio - Wikipedia" -> "Caravaggio"
    subject = SUBJECT_SPLIT_RE.split(title, maxsplit=1)[0].strip() if title else ""
    if 1 < len(subject) < 60 and not NON_PERSON_SUBJECT_RE.match(subject):
        return Identity(subject, href)
    return Identity(author_url=href)


def by_name(title: str) -> str | None:
    m = BY_NAME_RE.search(title or "")
    if not m:
        return None
    # the name class allows hyphens, so "by X - Site" needs the site suffix cut
    name = SUBJECT_SPLIT_RE.split(m.group(1), maxsplit=1)[0].strip()
    return name or None


def extract_identity(title: str, href: str) -> Identity:
    """Run the host rule for ``href``, then fall back to a ``by <Name>`` match."""

    host = registrable_host(hostname(href))
    found = Identity(author_url=href)
    rule = IDENTITY_RULES.get(host)
    if rule is not None:
        found = rule(title, href, path_segments(href))
    if not found.author:
        found = Identity(by_name(title), found.author_url or href, found.display_handle)
    return found


def load_document(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def iter_offsite_anchors(soup: BeautifulSoup, page_url: str, is_own_host: Callable[[str], bool]) -> Iterator[tuple[Tag, str]]:
    """Yield ``(anchor, absolute href)`` once per href, skipping the engine's chrome."""

    seen: set[str] = set()
    for a in soup.select("a[href]"):
        href = urllib.parse.urljoin(page_url or "", a.get("href") or "")
        if not href or href in seen:
            continue
        try:
            parsed = urllib.parse.urlparse(href)
        except ValueError:
            continue
        host = (parsed.hostname or "").lower()
        if parsed.scheme not in ("http", "https") or len(host) < 5 or is_own_host(host):
            continue
        seen.add(href)
        yield a, href


def _text(el: Tag | None) -> str:
    return " ".join(el.get_text(" ").split()) if el is not None else ""


def best_title(a: Tag) -> str:
    """Nested heading > container heading > aria-label > title attribute > short visible text."""

    heading = a.select_one(HEADINGS)
    if heading is None:
        container = a.find_parent(attrs={"data-action-url": True}) or a.find_parent(attrs={"jsaction": True}) or a.find_parent(attrs={"data-ved": True})
        if container is not None:
            heading = container.select_one(HEADINGS)
    text = _text(heading)
    if text:
        return text
    for attr in ("aria-label", "title"):
        value = a.get(attr)
        if isinstance(value, str) and value.strip():
            return value.strip()
    visible = _text(a)
    return visible if len(visible) < MAX_VISIBLE_TEXT else ""


class EngineParser:
    """Base class for one engine's result-page parser."""

    name = "engine"
    source = "Engine"
    method: Method = "lens"
    max_results = 5
    settle_buffer = 1.0
    poll_seconds = PARSER_POLL_SECONDS

    def is_ready(self, html: str, page_url: str = "") -> bool:
        raise NotImplementedError

    def collect(self, soup: BeautifulSoup, page_url: str) -> list[CandidateRecord]:
        raise NotImplementedError

    def record_key(self, record: CandidateRecord) -> str | None:
        return record.author_url or record.url

    def parse(self, html: str, page_url: str = "") -> list[CandidateRecord]:
        """Extract, rank, dedupe and cap the candidates on a rendered result page."""

        records = [r for r in self.collect(load_document(html), page_url) if not r.is_empty()]
        ranked = sort_authored_first(records)
        return dedupe_by(ranked, self.record_key)[: self.max_results]

    def record(self, *, title: str, href: str, identity: Identity, confidence: int) -> CandidateRecord:
        social_url = identity.author_url or href
        return CandidateRecord(
            source=self.source,
            method=self.method,
            confidence=confidence,
            author=identity.author,
            display_handle=identity.display_handle,
            title=None if identity.author else (title[:TITLE_CHARS] or None),
            url=href,
            author_url=identity.author_url or href,
            socials=[Social(host_label(registrable_host(hostname(social_url))), social_url, identity.display_handle)],
        )


__all__ = [
    "BY_NAME_RE",
    "EngineParser",
    "IDENTITY_RULES",
    "Identity",
    "best_title",
    "by_name",
    "extract_identity",
    "identity_rule",
    "iter_offsite_anchors",
    "load_document",
]
