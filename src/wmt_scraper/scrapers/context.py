"""Platform-agnostic author extraction from structured data and generic meta tags."""

from __future__ import annotations

from typing import Any

from ..config import CONTEXT_CONFIDENCE
from ..models import METHOD_CONTEXT, CandidateRecord, PageData, Social
from ..normalize import dedupe_socials
from ..urls import hostname, is_creator_host

CONTEXT_SOURCE = "Page metadata"


def _ld_author(json_ld: tuple[Any, ...]) -> tuple[str | None, str | None]:
    """Return ``(name, url)`` of the first structured-data author."""

    for item in json_ld:
        if not isinstance(item, dict):
            continue
        author = item.get("author")
        if isinstance(author, list):
            author = author[0] if author else None
        if isinstance(author, dict) and isinstance(author.get("name"), str) and author["name"].strip():
            url = author.get("url")
            return author["name"].strip(), url if isinstance(url, str) else None
        if isinstance(author, str) and author.strip():
            return author.strip(), None
    return None, None


def _meta_author(meta_tags) -> str | None:
    for key in ("author", "og:author", "article:author"):
        value = meta_tags.get(key)
        if value and value.strip():
            return value.strip()
    return None


def context_scrape(data: PageData, page_url: str | None) -> CandidateRecord | None:
    name, profile_url = _ld_author(data.json_ld)
    author = name or _meta_author(data.meta_tags)
    if not author:
        return None

    socials: list[Social] = []
    if profile_url and hostname(profile_url):
        socials.append(Social(hostname(profile_url), profile_url))
    for href in data.nearby_links:
        host = hostname(href)
        if host and is_creator_host(host):
            socials.append(Social(host, href))

    socials = dedupe_socials(socials)
    return CandidateRecord(
        source=CONTEXT_SOURCE,
        method=METHOD_CONTEXT,
        confidence=CONTEXT_CONFIDENCE,
        author=author,
        url=page_url or None,
        author_url=profile_url,
        socials=socials,
    )


__all__ = ["CONTEXT_SOURCE", "context_scrape"]
