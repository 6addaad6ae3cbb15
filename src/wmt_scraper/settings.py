"""Persistent user settings (currently only the SauceNAO API key)."""

from __future__ import annotations

import json
import os
from typing import Any

from .config import DEFAULT_SETTINGS_PATH
from .logging import jlog

SAUCENAO_KEY = "sauceNaoKey"


class SettingsError(RuntimeError):
    """Settings could not be written."""


class SettingsStore:
    """JSON file store; a missing or unreadable file reads as empty settings."""

    def __init__(self, path: str = DEFAULT_SETTINGS_PATH) -> None:
        self.path = path

    def load(self) -> dict[str, Any]:
        try:
            with open(self.path, encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            jlog("warning", event="settings_read_error", path=self.path, error=str(exc))
            return {}
        return data if isinstance(data, dict) else {}

    def sauce_nao_key(self) -> str:
        return str(self.load().get(SAUCENAO_KEY) or "")

    def save_sauce_nao_key(self, key: str | None) -> None:
        data = self.load()
        data[SAUCENAO_KEY] = (key or "").strip()
        try:
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, sort_keys=True)
        except OSError as exc:
            raise SettingsError(f"could not write settings to {self.path}: {exc}") from exc


__all__ = ["SAUCENAO_KEY", "SettingsError", "SettingsStore"]
