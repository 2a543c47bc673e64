"""Multilingual label normalization."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from vocab.errors import MissingLabelError
from vocab.utils.sanitize import clean_text

# Accepted entry shapes, checked in this order:
#   "text"                         -> default language
#   {"iso639": .., "label": ..}    -> ROR v1 label
#   {"lang": .., "value": ..}      -> canonical / ROR v2 name
LEGACY_LABEL_KEYS = ("iso639", "label")


def _decode_entry(entry: Any, default_language: str) -> tuple[str, Any] | None:
    """Decode one raw label entry into (language, value); None for shapes we cannot read."""
    if isinstance(entry, str):
        return default_language, entry
    if isinstance(entry, Mapping):
        if any(key in entry for key in LEGACY_LABEL_KEYS):
            return entry.get("iso639") or default_language, entry.get("label")
        if "value" in entry:
            return entry.get("lang") or default_language, entry.get("value")
    return None


def _iter_entries(raw: Any, default_language: str, warnings: list[str]) -> Iterable[tuple[str, Any]]:
    if raw is None:
        return
    if isinstance(raw, str):
        yield default_language, raw
        return
    if isinstance(raw, Mapping):
        if "value" in raw or any(key in raw for key in LEGACY_LABEL_KEYS):
            decoded = _decode_entry(raw, default_language)
            if decoded:
                yield decoded
            return
        # Already a {lang: value} mapping.
        for lang, value in raw.items():
            yield lang, value
        return
    if isinstance(raw, (list, tuple)):
        for entry in raw:
            decoded = _decode_entry(entry, default_language)
            if decoded is None:
                warnings.append(f"Skipped unreadable label entry: {entry!r}")
                continue
            yield decoded
        return
    warnings.append(f"Ignored labels of unsupported type {type(raw).__name__}")


def normalize_labels(
    raw: Any,
    default_language: str = "en",
    fallback: str | None = None,
    transliterate: bool = False,
) -> tuple[dict[str, str], list[str]]:
    """
    Collapse raw label data into a {language: text} mapping.

    The first value seen for a language wins; entries with an empty language or
    text are skipped. Re-normalizing the result returns the same mapping.

    Raises:
        MissingLabelError: If nothing usable remains and no fallback is given.
    """
    warnings: list[str] = []
    labels: dict[str, str] = {}
    for lang, value in _iter_entries(raw, default_language, warnings):
        if not isinstance(lang, str) or not isinstance(value, str):
            continue
        lang = lang.strip().lower()
        text = clean_text(value, transliterate)
        if not lang or not text:
            continue
        labels.setdefault(lang, text)

    if not labels:
        if fallback:
            labels[default_language] = clean_text(fallback, transliterate)
            warnings.append(f"No labels present; used fallback label {fallback!r}")
        else:
            raise MissingLabelError("Record has no usable label", field="labels")
    return labels, warnings


__all__ = ["normalize_labels"]
