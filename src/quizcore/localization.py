"""
Localized field lookup.

Every user-facing string has parallel fields: text, text_sl, text_hr, ...
The bare field is canonical (English) and is the only one scoring and
validation look at; the others are display variants.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from config import get_settings

CANONICAL_LANGUAGE = "en"


def _variant(source: Any, name: str) -> str | None:
    value = getattr(source, name, None)
    if value is None and isinstance(source, BaseModel):
        value = (source.model_extra or {}).get(name)
    if value is None and isinstance(source, dict):
        value = source.get(name)
    return value if isinstance(value, str) else None


def localized(source: Any, field: str, language: str | None = None) -> str | None:
    """
    Get field in the requested language, falling back to the canonical text.

    Works on models and plain record dicts. Returns None when neither the
    translation nor the canonical field has content.
    """
    language = language or get_settings().default_language
    canonical = _variant(source, field)
    if language == CANONICAL_LANGUAGE:
        return canonical or None
    return _variant(source, f"{field}_{language}") or canonical or None


def missing_translations(
    source: Any,
    field: str,
    languages: list[str] | None = None,
) -> list[str]:
    """Languages whose variant of field is empty while the canonical text is set."""
    if not (_variant(source, field) or "").strip():
        return []
    languages = languages or get_settings().supported_languages
    return [
        lang for lang in languages
        if lang != CANONICAL_LANGUAGE and not (_variant(source, f"{field}_{lang}") or "").strip()
    ]
