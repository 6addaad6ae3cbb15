"""Reverse-image-search result parsers, one per engine."""

from .base import IDENTITY_RULES, EngineParser, extract_identity
from .lens import LensParser
from .yandex import YandexParser

__all__ = ["EngineParser", "IDENTITY_RULES", "LensParser", "YandexParser", "extract_identity"]
