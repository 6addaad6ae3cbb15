"""Platform-specific author extraction from a page snapshot.

Each rule receives a :class:`PageView` and returns a record or ``None``. Rules
never guess: without an author-identifying signal they return ``None``.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from ..config import PLATFORM_CONFIDENCE
from ..models import METHOD_PLATFORM, CandidateRecord, PageData, Social

PlatformRule = Callable[["PageView"], "CandidateRecord | None"]

PLATFORM_RULES: dict[str, PlatformRule] = {}


class PageView:
    """Read helpers over a :class:`PageData` snapshot."""

    def __init__(self, data: PageData, page_url: str | None) -> None:
        self.data = data
        self.url = data.canonical or page_url or ""

    def meta(self, *keys: str) -> str | None:
        tags = self.data.meta_tags
        for key in keys:
            for name in (key, f"og:{key}", f"twitter:{key}"):
                value = tags.get(name)
                if value:
                    return value
        return None

    @property
    def title(self) -> str:
        return self.meta("title") or self.data.page_title or ""

    def ld_author(self) -> str | None:
        for item in self.data.json_ld:
            author = item.get("author") if isinstance(item, dict) else None
            if not author:
                continue
            return _author_name(author)
        return None

    def url_match(self, pattern: str) -> str | None:
        m = re.search(pattern, self.url)
        return m.group(1) if m else None


def _author_name(author: Any) -> str | None:
    if isinstance(author, list):
        author = author[0] if author else None
    if isinstance(author, dict):
        name = author.get("name")
        return name.strip() if isinstance(name, str) and name.strip() else None
    if isinstance(author, str) and author.strip():
        return author.strip()
    return None


def rule(*platforms: str) -> Callable[[PlatformRule], PlatformRule]:
    def register(fn: PlatformRule) -> PlatformRule:
        for name in platforms:
            PLATFORM_RULES[name] = fn
        return fn

    return register


def _record(page: PageView, source: str, author: str, socials: list[Social], handle: str | None = None) -> CandidateRecord:
    return CandidateRecord(
        source=source,
        method=METHOD_PLATFORM,
        confidence=PLATFORM_CONFIDENCE,
        author=author,
        display_handle=handle,
        url=page.url or None,
        author_url=socials[0].url if socials else None,
        socials=socials,
    )


@rule("twitter")
def _twitter(page: PageView) -> CandidateRecord | None:
    name_m = re.match(r"^(.+?)\s+on\s+(?:X|Twitter)", page.title, re.I)
    handle = page.url_match(r"(?:twitter|x)\.com/([^/?#]+)/status")
    name = name_m.group(1).strip() if name_m else None
    if not name and not handle:
        return None
    socials = [Social("Twitter/X", f"https://x.com/{handle}", f"@{handle}")] if handle else []
    return _record(page, "Twitter/X", name or f"@{handle}", socials, f"@{handle}" if handle else None)


@rule("instagram")
def _instagram(page: PageView) -> CandidateRecord | None:
    title = page.title
    handle_m = re.search(r"@([\w.]+)", title)
    name_m = re.match(r"^([^•(@\n]+)", title)
    handle = handle_m.group(1) if handle_m else None
    name = name_m.group(1).strip() if name_m else None
    if not name and not handle:
        return None
    socials = [Social("Instagram", f"https://instagram.com/{handle}")] if handle else []
    return _record(page, "Instagram", name or f"@{handle}", socials, f"@{handle}" if handle else None)


@rule("pixiv")
def _pixiv(page: PageView) -> CandidateRecord | None:
    author = page.ld_author() or page.meta("author")
    if not author:
        return None
    uid = page.url_match(r"pixiv\.net/(?:en/)?users/(\d+)")
    socials = [Social("Pixiv", f"https://www.pixiv.net/en/users/{uid}")] if uid else []
    return _record(page, "Pixiv", author, socials)


def _slug_rule(platform: str, label: str, pattern: str, profile: str) -> PlatformRule:
    def extract(page: PageView) -> CandidateRecord | None:
        author = page.ld_author() or page.meta("author")
        if not author:
            return None
        slug = page.url_match(pattern)
        socials = [Social(label, profile.format(slug))] if slug else []
        return _record(page, label, author, socials)

    extract.__name__ = f"_{platform}"
    return extract


PLATFORM_RULES["artstation"] = _slug_rule("artstation", "ArtStation", r"artstation\.com/([^/?#]+)", "https://www.artstation.com/{}")
PLATFORM_RULES["deviantart"] = _slug_rule("deviantart", "DeviantArt", r"deviantart\.com/([^/?#]+)", "https://www.deviantart.com/{}")


def _handle_rule(platform: str, label: str, pattern: str, profile: str) -> PlatformRule:
    """Author meta tag, falling back to the handle in the URL."""

    def extract(page: PageView) -> CandidateRecord | None:
        handle = page.url_match(pattern)
        author = page.meta("author") or handle
        if not author:
            return None
        socials = [Social(label, profile.format(handle))] if handle else []
        return _record(page, label, author, socials)

    extract.__name__ = f"_{platform}"
    return extract


PLATFORM_RULES["behance"] = _handle_rule("behance", "Behance", r"behance\.net/([^/?#]+)", "https://behance.net/{}")
PLATFORM_RULES["cara"] = _handle_rule("cara", "Cara", r"cara\.app/([^/?#]+)", "https://cara.app/{}")
PLATFORM_RULES["tumblr"] = _handle_rule("tumblr", "Tumblr", r"//(?!www\.)([^./]+)\.tumblr\.com", "https://{}.tumblr.com")


@rule("bluesky")
def _bluesky(page: PageView) -> CandidateRecord | None:
    handle = page.url_match(r"bsky\.app/profile/([^/?#]+)")
    name_m = re.match(r"^([^|:–—\n]+)", page.title)
    author = (name_m.group(1).strip() if name_m else None) or handle
    if not author:
        return None
    socials = [Social("Bluesky", f"https://bsky.app/profile/{handle}")] if handle else []
    return _record(page, "Bluesky", author, socials)


@rule("reddit")
def _reddit(page: PageView) -> CandidateRecord | None:
    m = re.search(r"\b(?:art by|artist:|drawn by|OC by|photo by|by)\s*(?:/?u/)?([\w-]+)", page.title, re.I)
    if not m:
        return None
    user = m.group(1)
    return _record(page, "Reddit title", f"u/{user}", [Social("Reddit", f"https://reddit.com/user/{user}")])


@rule("pinterest")
def _pinterest(page: PageView) -> CandidateRecord | None:
    m = re.search(r"(?:by|from|via|artist)\s+([A-Za-z0-9_\-.@ ]{2,40})", page.meta("description") or "", re.I)
    if not m or not m.group(1).strip():
        return None
    return _record(page, "Pinterest", m.group(1).strip(), [])


def platform_scrape(data: PageData, platform: str | None, page_url: str | None) -> CandidateRecord | None:
    """Apply the rule registered for ``platform``; ``None`` when absent or no signal."""

    extract = PLATFORM_RULES.get(platform or "")
    if extract is None:
        return None
    record = extract(PageView(data, page_url))
    if record is None or record.is_empty():
        return None
    return record


__all__ = ["PLATFORM_RULES", "PageView", "platform_scrape"]
