"""Result normalization: dedupe keys, dedupe passes and final ranking."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from .config import DEDUPE_KEY_CHARS, MAX_RESULTS
from .models import CandidateRecord, Social


def dedupe_key(record: CandidateRecord, limit: int = DEDUPE_KEY_CHARS) -> str:
    """Case-insensitive identity key from author, else title, else url."""

    return (record.author or record.title or record.url or "").lower()[:limit]


def dedupe_by(records: Iterable[CandidateRecord], key: Callable[[CandidateRecord], str | None]) -> list[CandidateRecord]:
    """Keep the first record per non-empty key; records with an empty key are dropped."""

    seen: set[str] = set()
    out: list[CandidateRecord] = []
    for record in records:
        k = key(record)
        if not k or k in seen:
            continue
        seen.add(k)
        out.append(record)
    return out


def dedupe_results(records: Iterable[CandidateRecord]) -> list[CandidateRecord]:
    return dedupe_by(records, dedupe_key)


def dedupe_socials(socials: Iterable[Social | None]) -> list[Social]:
    seen: set[str] = set()
    out: list[Social] = []
    for social in socials:
        if not social or not social.url or social.url in seen:
            continue
        seen.add(social.url)
        out.append(social)
    return out


def sort_by_confidence(records: Iterable[CandidateRecord]) -> list[CandidateRecord]:
    # sorted() is stable, so ties keep strategy order
    return sorted(records, key=lambda r: r.confidence, reverse=True)


def sort_authored_first(records: Iterable[CandidateRecord]) -> list[CandidateRecord]:
    return sorted(records, key=lambda r: (0 if r.author else 1, -r.confidence))


def best_confidence(records: Iterable[CandidateRecord]) -> int | None:
    return max((r.confidence for r in records), default=None)


def rank(records: Iterable[CandidateRecord], limit: int = MAX_RESULTS) -> list[CandidateRecord]:
    """Final ordering: confidence-descending, deduplicated, truncated."""

    return dedupe_results(sort_by_confidence(r for r in records if not r.is_empty()))[:limit]


__all__ = [
    "best_confidence",
    "dedupe_by",
    "dedupe_key",
    "dedupe_results",
    "dedupe_socials",
    "rank",
    "sort_authored_first",
    "sort_by_confidence",
]
