"""Relationship list normalization."""

from __future__ import annotations

from typing import Any, Mapping

from vocab.errors import UnknownRelationTypeError
from vocab.models import Relationship, RelationType

# Raw relationship entries come as {"type", "target_id"}, ROR {"type", "id", "label"}
# or legacy {"relation", "target"}.
RELATION_SHAPES: list[tuple[str, str]] = [
    ("type", "target_id"),
    ("type", "id"),
    ("relation", "target"),
]


def _decode_entry(entry: Any) -> tuple[Any, Any] | None:
    if not isinstance(entry, Mapping):
        return None
    for type_key, target_key in RELATION_SHAPES:
        if type_key in entry and target_key in entry:
            return entry.get(type_key), entry.get(target_key)
    return None


def parse_relation_type(raw: Any) -> RelationType | None:
    """Match a raw relation type case-insensitively; None if it is not one of the known types."""
    if not isinstance(raw, str):
        return None
    try:
        return RelationType(raw.strip().lower())
    except ValueError:
        return None


def normalize_relationships(raw: Any, passthrough: bool = False) -> tuple[list[Relationship], list[str]]:
    """
    Decode raw relationship entries into Relationships, preserving order.

    With passthrough enabled an unknown type is kept as `related` and reported
    as a warning.

    Raises:
        UnknownRelationTypeError: On an unknown type when passthrough is off.
    """
    warnings: list[str] = []
    relationships: list[Relationship] = []
    if raw is None:
        return relationships, warnings
    entries = raw if isinstance(raw, (list, tuple)) else [raw]

    for entry in entries:
        decoded = _decode_entry(entry)
        if decoded is None:
            warnings.append(f"Skipped unreadable relationship entry: {entry!r}")
            continue
        raw_type, target = decoded
        target_id = str(target).strip() if target is not None else ""
        if not target_id:
            warnings.append(f"Skipped relationship without target: {entry!r}")
            continue

        relation_type = parse_relation_type(raw_type)
        if relation_type is None:
            if not passthrough:
                raise UnknownRelationTypeError(
                    f"Unknown relationship type {raw_type!r}",
                    relation_type=str(raw_type),
                    field="relationships",
                )
            warnings.append(f"Unknown relationship type {raw_type!r} to {target_id}; kept as 'related'")
            relation_type = RelationType.RELATED
        relationships.append(Relationship(type=relation_type, target_id=target_id))
    return relationships, warnings


__all__ = ["normalize_relationships", "parse_relation_type"]
