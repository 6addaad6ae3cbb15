"""Record types exchanged between strategies, the orchestrator and callers."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal, Mapping

Method = Literal["platform", "context", "lens", "yandex", "saucenao"]

METHOD_PLATFORM: Method = "platform"
METHOD_CONTEXT: Method = "context"
METHOD_LENS: Method = "lens"
METHOD_YANDEX: Method = "yandex"
METHOD_SAUCENAO: Method = "saucenao"


@dataclass(frozen=True)
class Social:
    label: str
    url: str
    handle: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"label": self.label, "url": self.url}
        if self.handle:
            out["handle"] = self.handle
        return out


@dataclass
class CandidateRecord:
    """One strategy's proposed identification of an image's creator."""

    source: str
    method: Method
    confidence: int = 0
    author: str | None = None
    display_handle: str | None = None
    title: str | None = None
    url: str | None = None
    author_url: str | None = None
    socials: list[Social] = field(default_factory=list)
    index_name: str | None = None

    def __post_init__(self) -> None:
        self.confidence = max(0, min(100, int(self.confidence)))

    def is_empty(self) -> bool:
        return not (self.author or self.title or self.url)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "author": self.author,
            "displayHandle": self.display_handle,
            "title": self.title,
            "url": self.url,
            "authorUrl": self.author_url,
            "confidence": self.confidence,
            "socials": [s.to_dict() for s in self.socials],
            "source": self.source,
            "method": self.method,
        }
        if self.index_name:
            out["indexName"] = self.index_name
        return out


@dataclass(frozen=True)
class SearchLink:
    label: str
    url: str
    color: str

    def to_dict(self) -> dict[str, str]:
        return {"label": self.label, "url": self.url, "color": self.color}


@dataclass(frozen=True)
class PageData:
    """Snapshot of the structured data on the page hosting the image.

    Taken once per analysis request; the mapping is exposed read-only.
    """

    meta_tags: Mapping[str, str] = field(default_factory=dict)
    json_ld: tuple[Any, ...] = ()
    nearby_links: tuple[str, ...] = ()
    page_title: str = ""
    canonical: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "meta_tags", MappingProxyType(dict(self.meta_tags or {})))
        object.__setattr__(self, "json_ld", tuple(self.json_ld or ()))
        object.__setattr__(self, "nearby_links", tuple(self.nearby_links or ()))
        object.__setattr__(self, "page_title", self.page_title or "")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> PageData | None:
        """Build from the camelCase wire form; ``None`` passes through."""

        if data is None:
            return None
        meta = data.get("metaTags") or {}
        return cls(
            meta_tags={str(k): str(v) for k, v in meta.items() if v is not None},
            json_ld=[j for j in (data.get("jsonLd") or []) if isinstance(j, dict)],
            nearby_links=[str(h) for h in (data.get("nearbyLinks") or []) if h],
            page_title=str(data.get("pageTitle") or ""),
            canonical=data.get("canonical") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "metaTags": dict(self.meta_tags),
            "jsonLd": list(self.json_ld),
            "nearbyLinks": list(self.nearby_links),
            "pageTitle": self.page_title,
            "canonical": self.canonical,
        }


@dataclass
class AnalysisResult:
    platform: str | None
    results: list[CandidateRecord]
    search_links: list[SearchLink]

    def to_dict(self) -> dict[str, Any]:
        return {
            "platform": self.platform,
            "results": [r.to_dict() for r in self.results],
            "searchLinks": [link.to_dict() for link in self.search_links],
        }


__all__ = [
    "AnalysisResult",
    "CandidateRecord",
    "METHOD_CONTEXT",
    "METHOD_LENS",
    "METHOD_PLATFORM",
    "METHOD_SAUCENAO",
    "METHOD_YANDEX",
    "Method",
    "PageData",
    "SearchLink",
    "Social",
]
