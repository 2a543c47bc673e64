"""
Awards (grants) -> awards vocabulary.

Every award must reference its funder. When the dump carries no award
identifier, the id is built from funder and award number as
"<funder_id>::<number>".
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from vocab.errors import MissingFunderError, MissingIdentifierError
from vocab.mappers.common import (
    collect_identifiers,
    derive_id,
    format_id,
    record_context,
    record_status,
    text_field,
)
from vocab.models import AwardRecord, FunderReference, IdentifierScheme, MappingConfig, SourceRecord
from vocab.utils import normalize_labels, normalize_relationships

IDENTIFIER_FIELDS = ("id", "identifiers")
ID_PREFERENCE = (IdentifierScheme.DOI,)
FUNDER_FIELDS = ("funder", "funder_id")

_NUMBER = re.compile(r"-?\d+(?:[.,]\d+)*")


def funder_reference(record: SourceRecord) -> str | None:
    """Funder id from `funder`/`funder_id`, given either as a string or as {"id": ..}."""
    for key in FUNDER_FIELDS:
        value = record.get(key)
        if isinstance(value, Mapping):
            value = value.get("id")
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def parse_amount(raw: Any) -> tuple[Decimal | None, list[str]]:
    """Parse an award amount; unreadable amounts are dropped with a warning."""
    if raw is None or raw == "":
        return None, []
    if isinstance(raw, bool):
        return None, [f"Ignored non-numeric amount {raw!r}"]
    if isinstance(raw, (int, float, Decimal)):
        amount = Decimal(raw) if isinstance(raw, (int, Decimal)) else Decimal(str(raw))
        if not amount.is_finite():
            return None, [f"Ignored non-finite amount {raw!r}"]
        return amount, []
    if isinstance(raw, str):
        match = _NUMBER.search(raw)
        if match:
            number = match.group(0)
            if "," in number and "." in number:
                # Commas are thousands separators here
                number = number.replace(",", "")
            elif "," in number:
                parts = number.split(",")
                number = number.replace(",", "") if len(parts[-1]) == 3 else number.replace(",", ".")
            try:
                return Decimal(number), []
            except InvalidOperation:
                pass
    return None, [f"Ignored unreadable amount {raw!r}"]


def map_award(record: SourceRecord, config: MappingConfig) -> tuple[AwardRecord, list[str]]:
    """Map one award record."""
    identifiers, warnings = collect_identifiers(record, IDENTIFIER_FIELDS, config)
    number = text_field(record, "number")
    funder_id = funder_reference(record)

    if identifiers:
        record_id = derive_id(identifiers, ID_PREFERENCE, config)
    elif number and funder_id:
        record_id = f"{format_id(funder_id, config)}::{number}"
    elif number:
        raise MissingFunderError("Award has no funder reference", record_id=number, field="funder")
    else:
        raise MissingIdentifierError("Award has no identifier and no funder/number pair", field="id")

    with record_context(record_id):
        if funder_id is None:
            raise MissingFunderError("Award has no funder reference", field="funder")
        labels, label_warnings = normalize_labels(
            record.get("title"),
            config.default_language,
            config.fallback_label or number,
            config.transliterate,
        )
        amount, amount_warnings = parse_amount(record.get("amount"))
        relationships, relation_warnings = normalize_relationships(
            record.get("relationships"), config.relation_passthrough
        )
        active, status_warnings = record_status(record)

    currency = text_field(record, "currency")
    if currency:
        currency = currency.upper()
    elif amount is not None:
        currency = config.default_currency.upper()

    warnings += label_warnings + amount_warnings + relation_warnings + status_warnings
    entry = AwardRecord(
        id=record_id,
        name=labels.get(config.default_language) or next(iter(labels.values())),
        labels=labels,
        active=active,
        number=number,
        acronym=text_field(record, "acronym", transliterate=config.transliterate),
        funder=FunderReference(id=format_id(funder_id, config)),
        amount=amount,
        currency=currency,
        identifiers=tuple(identifiers),
        relationships=tuple(relationships),
    )
    return entry, warnings


__all__ = ["map_award", "funder_reference", "parse_amount", "ID_PREFERENCE"]
