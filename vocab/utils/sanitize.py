"""Text cleanup for names and labels."""

from __future__ import annotations

import re

from unidecode import unidecode

_WHITESPACE = re.compile(r"\s+")


def sanitize(text: str) -> str:
    """Transliterate ambiguous Unicode (Cyrillic, accented Latin, ...) into approximate ASCII."""
    return unidecode(text)


def clean_text(value: str | None, transliterate: bool = False) -> str:
    """Collapse whitespace and optionally transliterate; None becomes ""."""
    if value is None:
        return ""
    text = _WHITESPACE.sub(" ", value).strip()
    if transliterate:
        text = sanitize(text)
    return text


__all__ = ["sanitize", "clean_text"]
