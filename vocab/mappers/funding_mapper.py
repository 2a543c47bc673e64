"""Funding bodies (funders) -> funders vocabulary, adding country and funder type."""

from __future__ import annotations

from typing import Any, Mapping

from vocab.mappers.common import (
    collect_identifiers,
    derive_id,
    first_acronym,
    organization_names,
    primary_name,
    record_context,
    record_status,
)
from vocab.models import FundingRecord, IdentifierScheme, MappingConfig, SourceRecord
from vocab.utils import normalize_labels, normalize_relationships

IDENTIFIER_FIELDS = ("id", "identifiers", "external_ids")
ID_PREFERENCE = (IdentifierScheme.ROR, IdentifierScheme.DOI)


def funder_country(record: SourceRecord) -> str | None:
    """Country code from `country` (code or ROR v1 object) or the first ROR v2 location."""
    country: Any = record.get("country")
    if isinstance(country, Mapping):
        country = country.get("country_code")
    if country is None:
        locations = record.get("locations")
        if isinstance(locations, (list, tuple)) and locations and isinstance(locations[0], Mapping):
            details = locations[0].get("geonames_details")
            if isinstance(details, Mapping):
                country = details.get("country_code")
    if isinstance(country, str) and country.strip():
        return country.strip().upper()
    return None


def funder_type(record: SourceRecord) -> str | None:
    """Funder type from `funder_type`, `type`, or the first of ROR `types`."""
    for key in ("funder_type", "type"):
        value = record.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip().lower()
    types = record.get("types")
    if isinstance(types, (list, tuple)):
        for value in types:
            if isinstance(value, str) and value.strip():
                return value.strip().lower()
    return None


def map_funder(record: SourceRecord, config: MappingConfig) -> tuple[FundingRecord, list[str]]:
    """Map one funding-body record."""
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
    entry = FundingRecord(
        id=record_id,
        name=primary_name(labels, entries, config),
        labels=labels,
        active=active,
        country=funder_country(record),
        funder_type=funder_type(record),
        acronym=first_acronym(acronyms, config),
        identifiers=tuple(identifiers),
        relationships=tuple(relationships),
    )
    return entry, warnings


__all__ = ["map_funder", "funder_country", "funder_type", "ID_PREFERENCE"]
