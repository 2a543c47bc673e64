"""Helpers shared by the vocabulary mappers."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Sequence
from urllib.parse import urlparse

from vocab.errors import MappingError
from vocab.models import ExternalIdentifier, MappingConfig, RelationType, Relationship, SourceRecord
from vocab.utils import clean_text, normalize_identifiers, normalize_status, select_canonical

# ROR v2 name types that count as display labels; "acronym" entries are kept apart.
LABEL_NAME_TYPES = ("ror_display", "label", "alias")


@contextmanager
def record_context(record_id: str) -> Iterator[None]:
    """Attach the canonical id to mapping errors raised after it is known."""
    try:
        yield
    except MappingError as exc:
        if exc.record_id is None:
            exc.record_id = record_id
        raise


def collect_identifiers(
    record: SourceRecord,
    fields: Sequence[str],
    config: MappingConfig,
    scheme_fields: Mapping[str, str] | None = None,
) -> tuple[list[ExternalIdentifier], list[str]]:
    """Gather identifiers from several record fields; `scheme_fields` pins a field to one scheme."""
    raw: list[Any] = [record.get(field) for field in fields if record.get(field) is not None]
    for field, scheme in (scheme_fields or {}).items():
        value = record.get(field)
        if isinstance(value, str) and value.strip():
            raw.append({"scheme": scheme, "value": value})
    return normalize_identifiers(raw, config.custom_schemes)


def format_id(value: str, config: MappingConfig) -> str:
    """Reduce URL identifiers to their path when strip_id_prefix is on."""
    if not config.strip_id_prefix:
        return value
    parsed = urlparse(value)
    if parsed.scheme in ("http", "https") and parsed.path.strip("/"):
        return parsed.path.strip("/")
    return value


def derive_id(
    identifiers: Sequence[ExternalIdentifier], preference: Sequence[str], config: MappingConfig
) -> str:
    """Canonical id for a record; raises MissingIdentifierError when there is none."""
    chosen = select_canonical(identifiers, preference, config.identifier_tie_break)
    return format_id(chosen.value, config)


def peek_record_id(record: Any) -> str | None:
    """Best-effort id of a raw record, for failure reports."""
    if not isinstance(record, Mapping):
        return None
    raw = record.get("id")
    if isinstance(raw, Mapping):
        raw = raw.get("value", raw.get("identifier"))
    if isinstance(raw, (str, int)) and str(raw).strip():
        return str(raw).strip()
    for key in ("orcid", "number", "notation"):
        value = record.get(key)
        if isinstance(value, (str, int)) and str(value).strip():
            return str(value).strip()
    return None


def text_field(record: SourceRecord, *keys: str, transliterate: bool = False) -> str | None:
    """First non-empty string among `keys`, cleaned."""
    for key in keys:
        value = record.get(key)
        if isinstance(value, (str, int)) and not isinstance(value, bool):
            text = clean_text(str(value), transliterate)
            if text:
                return text
    return None


def record_status(record: SourceRecord) -> tuple[bool, list[str]]:
    """Active flag from a boolean `active`, else from `status`."""
    active = record.get("active")
    if isinstance(active, bool):
        return active, []
    return normalize_status(record.get("status"))


def _name_types(entry: Mapping) -> list[str]:
    types = entry.get("types") or []
    if isinstance(types, str):
        types = [types]
    return [str(t).lower() for t in types]


def organization_names(record: SourceRecord, config: MappingConfig) -> tuple[list[Any], list[str]]:
    """
    Split an organization's name data into label entries and acronyms.

    Handles ROR v2 `names` (display name first) as well as the ROR v1
    `name` + `labels` + `acronyms` layout.
    """
    entries: list[Any] = []
    acronyms: list[str] = []

    name = record.get("name")
    if isinstance(name, str) and name.strip():
        entries.append({"lang": config.default_language, "value": name})

    names = record.get("names")
    if isinstance(names, (list, tuple)):
        display: list[Any] = []
        others: list[Any] = []
        for entry in names:
            if not isinstance(entry, Mapping):
                others.append(entry)
                continue
            types = _name_types(entry)
            if types and not any(t in LABEL_NAME_TYPES for t in types):
                if "acronym" in types and isinstance(entry.get("value"), str):
                    acronyms.append(entry["value"])
                continue
            (display if "ror_display" in types else others).append(entry)
        entries.extend(display + others)

    labels = record.get("labels")
    if isinstance(labels, Mapping):
        entries.extend({"lang": lang, "value": value} for lang, value in labels.items())
    elif isinstance(labels, (list, tuple)):
        entries.extend(labels)

    raw_acronyms = record.get("acronyms")
    if isinstance(raw_acronyms, str):
        raw_acronyms = [raw_acronyms]
    if isinstance(raw_acronyms, (list, tuple)):
        acronyms.extend(a for a in raw_acronyms if isinstance(a, str))
    return entries, acronyms


def first_acronym(acronyms: Sequence[str], config: MappingConfig) -> str | None:
    for acronym in acronyms:
        text = clean_text(acronym, config.transliterate)
        if text:
            return text
    return None


def primary_name(labels: Mapping[str, str], entries: Sequence[Any], config: MappingConfig) -> str:
    """The first label entry's text, else the default-language label, else any label."""
    for entry in entries:
        value = entry.get("value") if isinstance(entry, Mapping) else entry
        if isinstance(value, str):
            text = clean_text(value, config.transliterate)
            if text:
                return text
    if config.default_language in labels:
        return labels[config.default_language]
    return next(iter(labels.values()))


def link_relationships(target_ids: Sequence[str], relation_type: RelationType) -> list[Relationship]:
    return [Relationship(type=relation_type, target_id=target) for target in target_ids]


def merge_relationships(*groups: Sequence[Relationship]) -> tuple[Relationship, ...]:
    """Concatenate relationship lists, dropping repeated (type, target) pairs."""
    seen: set[tuple[str, str]] = set()
    merged: list[Relationship] = []
    for group in groups:
        for relationship in group:
            key = (relationship.type.value, relationship.target_id)
            if key in seen:
                continue
            seen.add(key)
            merged.append(relationship)
    return tuple(merged)


__all__ = [
    "record_context",
    "collect_identifiers",
    "format_id",
    "derive_id",
    "peek_record_id",
    "text_field",
    "record_status",
    "organization_names",
    "first_acronym",
    "primary_name",
    "link_relationships",
    "merge_relationships",
]
