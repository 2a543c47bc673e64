"""
Affiliations (research organizations, e.g. a ROR dump) -> affiliations vocabulary.

Output entry:
{
  "id": "https://ror.org/05gq02987",
  "name": "Example University",
  "labels": {"en": "Example University", "fr": "Université Exemple"},
  "active": true,
  "acronym": "EU",
  "identifiers": [{"scheme": "ror", "identifier": "https://ror.org/05gq02987"}],
  "relationships": [{"type": "parent", "target_id": "https://ror.org/..."}]
}
"""

from __future__ import annotations

from vocab.mappers.common import (
    collect_identifiers,
    derive_id,
    first_acronym,
    organization_names,
    primary_name,
    record_context,
    record_status,
)
from vocab.models import AffiliationRecord, IdentifierScheme, MappingConfig, SourceRecord
from vocab.utils import normalize_labels, normalize_relationships

IDENTIFIER_FIELDS = ("id", "identifiers", "external_ids")
ID_PREFERENCE = (IdentifierScheme.ROR,)


def map_affiliation(record: SourceRecord, config: MappingConfig) -> tuple[AffiliationRecord, list[str]]:
    """Map one organization record; returns the entry and any soft warnings."""
    identifiers, warnings = collect_identifiers(record, IDENTIFIER_FIELDS, config)
    record_id = derive_id(identifiers, ID_PREFERENCE, config)

    with record_context(record_id):
        entries, acronyms = organization_names(record, config)
        labels, label_warnings = normalize_labels(
            entries, config.default_language, config.fallback_label, config.transliterate
        )
        relationships, relation_warnings = normalize_relationships(
            record.get("relationships"), config.relation_passthrough
        )
        active, status_warnings = record_status(record)

    warnings += label_warnings + relation_warnings + status_warnings
    entry = AffiliationRecord(
        id=record_id,
        name=primary_name(labels, entries, config),
        labels=labels,
        active=active,
        acronym=first_acronym(acronyms, config),
        identifiers=tuple(identifiers),
        relationships=tuple(relationships),
    )
    return entry, warnings


__all__ = ["map_affiliation", "IDENTIFIER_FIELDS", "ID_PREFERENCE"]
