"""SauceNAO similarity-search client."""

from __future__ import annotations

import math
import re
from typing import Any

import requests

from . import config
from .models import METHOD_SAUCENAO, CandidateRecord, Social
from .normalize import dedupe_socials
from .urls import hostname

_INDEX_PREFIX_RE = re.compile(r"^Index #\d+:\s*")
_AUTHOR_FIELDS = ("member_name", "creator", "author_name", "author", "twitter_user_handle")


class SauceNaoError(RuntimeError):
    """The API was unreachable or answered with a non-success status."""


def make_session(user_agent: str = config.DEFAULT_USER_AGENT) -> requests.Session:
    s = requests.Session()
    s.headers.update({"User-Agent": user_agent, "Accept": "application/json"})
    return s


def build_params(image_url: str, api_key: str | None = None) -> dict[str, str]:
    params = {"output_type": "2", "numres": str(config.SAUCENAO_NUMRES), "url": image_url}
    if api_key:
        params["api_key"] = api_key
    return params


def _similarity(header: dict[str, Any]) -> float:
    try:
        return float(header.get("similarity") or 0)
    except (TypeError, ValueError):
        return 0.0


def _percent(similarity: float) -> int:
    # half-up: "60.50" scores 61
    return int(math.floor(similarity + 0.5))


def _text(value: Any) -> str | None:
    # creator is a list on some indexes (e.g. danbooru)
    if isinstance(value, list):
        value = ", ".join(str(v) for v in value if v)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _author(data: dict[str, Any]) -> str | None:
    for key in _AUTHOR_FIELDS:
        value = _text(data.get(key))
        if value:
            return value
    return None


def to_record(entry: dict[str, Any]) -> CandidateRecord:
    header = entry.get("header") or {}
    data = entry.get("data") or {}
    index_name = _INDEX_PREFIX_RE.sub("", str(header.get("index_name") or ""))
    ext_urls = [u for u in (data.get("ext_urls") or []) if isinstance(u, str) and u]
    handle = _text(data.get("twitter_user_handle"))

    socials = [Social(hostname(u), u) for u in ext_urls if hostname(u)]
    member_id = data.get("member_id")
    if member_id and re.search(r"pixiv", index_name, re.I):
        socials.append(Social("Pixiv", f"https://www.pixiv.net/en/users/{member_id}"))
    if handle:
        socials.append(Social("Twitter/X", f"https://x.com/{handle}", f"@{handle}"))

    return CandidateRecord(
        source="SauceNAO",
        method=METHOD_SAUCENAO,
        confidence=_percent(_similarity(header)),
        author=_author(data),
        display_handle=f"@{handle}" if handle else None,
        title=_text(data.get("title")) or _text(data.get("eng_name")),
        url=ext_urls[0] if ext_urls else None,
        author_url=ext_urls[0] if ext_urls else None,
        socials=dedupe_socials(socials),
        index_name=index_name or None,
    )


def parse_response(payload: Any, min_similarity: float = config.SAUCENAO_MIN_SIMILARITY) -> list[CandidateRecord]:
    results = payload.get("results") if isinstance(payload, dict) else None
    if not isinstance(results, list):
        return []
    out: list[CandidateRecord] = []
    for entry in results:
        if not isinstance(entry, dict) or _similarity(entry.get("header") or {}) < min_similarity:
            continue
        record = to_record(entry)
        if not record.is_empty():
            out.append(record)
    return out


def search(
    image_url: str,
    *,
    api_key: str | None = None,
    session: requests.Session | None = None,
    endpoint: str = config.SAUCENAO_ENDPOINT,
    timeout: float = config.SAUCENAO_TIMEOUT_SECONDS,
) -> list[CandidateRecord]:
    """Query SauceNAO for ``image_url``; raises :class:`SauceNaoError` on transport or HTTP failure."""

    http = session or make_session()
    try:
        resp = http.get(endpoint, params=build_params(image_url, api_key), timeout=timeout)
        resp.raise_for_status()
        payload = resp.json()
    except requests.RequestException as exc:
        raise SauceNaoError(f"SauceNAO request failed: {exc}") from exc
    except ValueError as exc:
        raise SauceNaoError(f"SauceNAO returned invalid JSON: {exc}") from exc
    return parse_response(payload)


__all__ = ["SauceNaoError", "build_params", "make_session", "parse_response", "search", "to_record"]
