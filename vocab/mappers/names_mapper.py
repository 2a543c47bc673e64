"""
Names (people and organizations as creators) -> names vocabulary.

Affiliations are emitted as `related` relationships pointing at affiliation ids;
affiliation entries that carry only a name are skipped with a warning.
"""

from __future__ import annotations

from typing import Any, Mapping

from vocab.mappers.common import (
    collect_identifiers,
    derive_id,
    link_relationships,
    merge_relationships,
    record_context,
    record_status,
    text_field,
)
from vocab.models import IdentifierScheme, MappingConfig, NameRecord, RelationType, SourceRecord
from vocab.utils import normalize_labels, normalize_relationships

IDENTIFIER_FIELDS = ("id", "identifiers")
SCHEME_FIELDS = {"orcid": IdentifierScheme.ORCID.value, "isni": IdentifierScheme.ISNI.value}
ID_PREFERENCE = (IdentifierScheme.ORCID, IdentifierScheme.ISNI)
NAME_TYPES = ("personal", "organizational")


def affiliation_ids(raw: Any) -> tuple[list[str], list[str]]:
    """Affiliation ids from a list of strings or {"id": ..} entries."""
    ids: list[str] = []
    warnings: list[str] = []
    if raw is None:
        return ids, warnings
    for entry in raw if isinstance(raw, (list, tuple)) else [raw]:
        value = entry.get("id") if isinstance(entry, Mapping) else entry
        if isinstance(value, str) and value.strip():
            ids.append(value.strip())
        else:
            warnings.append(f"Skipped affiliation without id: {entry!r}")
    return ids, warnings


def display_name(given: str | None, family: str | None) -> str | None:
    if given and family:
        return f"{family}, {given}"
    return family or given


def map_name(record: SourceRecord, config: MappingConfig) -> tuple[NameRecord, list[str]]:
    """Map one person/organization name record."""
    identifiers, warnings = collect_identifiers(record, IDENTIFIER_FIELDS, config, SCHEME_FIELDS)
    record_id = derive_id(identifiers, ID_PREFERENCE, config)

    with record_context(record_id):
        given = text_field(record, "given_name", "given", transliterate=config.transliterate)
        family = text_field(record, "family_name", "family", transliterate=config.transliterate)
        full_name = display_name(given, family) or text_field(
            record, "name", "full_name", transliterate=config.transliterate
        )
        labels, label_warnings = normalize_labels(
            full_name, config.default_language, config.fallback_label, config.transliterate
        )

        name_type = str(record.get("type") or "personal").strip().lower()
        if name_type not in NAME_TYPES:
            warnings.append(f"Unknown name type {record.get('type')!r}; using 'personal'")
            name_type = "personal"

        affiliations, affiliation_warnings = affiliation_ids(record.get("affiliations"))
        relationships, relation_warnings = normalize_relationships(
            record.get("relationships"), config.relation_passthrough
        )
        active, status_warnings = record_status(record)

    warnings += label_warnings + affiliation_warnings + relation_warnings + status_warnings
    entry = NameRecord(
        id=record_id,
        name=full_name or labels[config.default_language],
        labels=labels,
        active=active,
        given_name=given,
        family_name=family,
        type=name_type,
        identifiers=tuple(identifiers),
        relationships=merge_relationships(
            link_relationships(affiliations, RelationType.RELATED), relationships
        ),
    )
    return entry, warnings


__all__ = ["map_name", "affiliation_ids", "display_name", "ID_PREFERENCE"]
