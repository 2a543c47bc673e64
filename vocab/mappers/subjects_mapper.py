"""Subject terms (classification schemes, thesauri) -> subjects vocabulary."""

from __future__ import annotations

from typing import Any, Mapping

from vocab.errors import MissingIdentifierError
from vocab.mappers.common import (
    link_relationships,
    merge_relationships,
    record_context,
    record_status,
    text_field,
)
from vocab.models import MappingConfig, RelationType, SourceRecord, SubjectRecord
from vocab.utils import normalize_identifiers, normalize_labels, normalize_relationships

TRANSLATION_FIELDS = ("labels", "translations", "prefLabel")


def _ids(raw: Any) -> list[str]:
    if raw is None:
        return []
    entries = raw if isinstance(raw, (list, tuple)) else [raw]
    ids = []
    for entry in entries:
        value = entry.get("id") if isinstance(entry, Mapping) else entry
        if isinstance(value, (str, int)) and str(value).strip():
            ids.append(str(value).strip())
    return ids


def subject_label_entries(record: SourceRecord, config: MappingConfig) -> list[Any]:
    """The subject term first, then every translation field in turn."""
    entries: list[Any] = []
    term = record.get("subject")
    if isinstance(term, str):
        entries.append({"lang": config.default_language, "value": term})
    for field in TRANSLATION_FIELDS:
        value = record.get(field)
        if isinstance(value, Mapping):
            entries.extend({"lang": lang, "value": text} for lang, text in value.items())
        elif isinstance(value, (list, tuple)):
            entries.extend(value)
        elif isinstance(value, str):
            entries.append(value)
    return entries


def map_subject(record: SourceRecord, config: MappingConfig) -> tuple[SubjectRecord, list[str]]:
    """Map one subject term; its id comes from scheme and notation."""
    scheme = text_field(record, "scheme")
    notation = text_field(record, "notation")
    if not scheme or not notation:
        raise MissingIdentifierError("Subject needs both scheme and notation", field="notation")
    record_id = config.subject_id_template.format(scheme=scheme, notation=notation)

    with record_context(record_id):
        identifiers, warnings = normalize_identifiers(
            [value for value in (record.get("id"), record.get("uri"), record.get("identifiers")) if value],
            config.custom_schemes,
        )
        labels, label_warnings = normalize_labels(
            subject_label_entries(record, config),
            config.default_language,
            config.fallback_label,
            config.transliterate,
        )
        relationships, relation_warnings = normalize_relationships(
            record.get("relationships"), config.relation_passthrough
        )
        active, status_warnings = record_status(record)

    warnings += label_warnings + relation_warnings + status_warnings
    name = text_field(record, "subject", transliterate=config.transliterate)
    entry = SubjectRecord(
        id=record_id,
        name=name or labels.get(config.default_language) or next(iter(labels.values())),
        labels=labels,
        active=active,
        scheme=scheme,
        notation=notation,
        identifiers=tuple(identifiers),
        relationships=merge_relationships(
            link_relationships(_ids(record.get("broader")), RelationType.PARENT),
            link_relationships(_ids(record.get("narrower")), RelationType.CHILD),
            relationships,
        ),
    )
    return entry, warnings


__all__ = ["map_subject", "subject_label_entries"]
