"""Request/response dispatcher for the inbound control messages.

Every message gets exactly one reply dict:

* ``{"action": "analyze", "imageUrl", "pageUrl", "pageData"}`` -> ``{"ok": True, "data": {...}}``
* ``{"action": "getSettings"}`` -> ``{"sauceNaoKey": "..."}``
* ``{"action": "saveSettings", "sauceNaoKey"}`` -> ``{"ok": True}``
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from .logging import jlog
from .models import AnalysisResult, PageData
from .pipeline import analyze
from .settings import SAUCENAO_KEY, SettingsStore

Analyzer = Callable[..., Awaitable[AnalysisResult]]


async def handle_message(
    msg: Mapping[str, Any],
    *,
    settings: SettingsStore | None = None,
    analyzer: Analyzer = analyze,
    **analyze_kwargs: Any,
) -> dict[str, Any]:
    store = settings or SettingsStore()
    action = msg.get("action") if isinstance(msg, Mapping) else None
    try:
        if action == "analyze":
            image_url = msg.get("imageUrl")
            if not image_url:
                return {"ok": False, "error": "imageUrl is required"}
            result = await analyzer(
                image_url,
                msg.get("pageUrl"),
                PageData.from_dict(msg.get("pageData")),
                settings=store,
                **analyze_kwargs,
            )
            return {"ok": True, "data": result.to_dict()}
        if action == "getSettings":
            return {SAUCENAO_KEY: store.sauce_nao_key()}
        if action == "saveSettings":
            store.save_sauce_nao_key(msg.get(SAUCENAO_KEY))
            return {"ok": True}
    except Exception as exc:
        jlog("error", event="message_error", action=action, error=str(exc))
        return {"ok": False, "error": str(exc)}
    return {"ok": False, "error": f"unknown action: {action}"}


__all__ = ["handle_message"]
