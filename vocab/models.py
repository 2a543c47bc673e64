"""Record model for vocabulary conversion: source records, normalized values, output records."""

from __future__ import annotations

from decimal import Decimal
from enum import StrEnum
from typing import Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

# One parsed JSON object from the input dump. Mappers only read from it.
SourceRecord = Mapping[str, Any]


class IdentifierScheme(StrEnum):
    ROR = "ror"
    GRID = "grid"
    ISNI = "isni"
    WIKIDATA = "wikidata"
    ORCID = "orcid"
    DOI = "doi"
    OTHER = "other"


class RelationType(StrEnum):
    PARENT = "parent"
    CHILD = "child"
    RELATED = "related"
    SUCCESSOR = "successor"
    PREDECESSOR = "predecessor"


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class ExternalIdentifier(FrozenModel):
    """One identifier of a record; scheme is an IdentifierScheme value or a configured custom name."""

    scheme: str
    value: str
    preferred: bool = False

    def to_output(self) -> dict[str, str]:
        return {"scheme": self.scheme, "identifier": self.value}


class Relationship(FrozenModel):
    """Directed edge to another record, referenced by canonical id and never resolved here."""

    type: RelationType
    target_id: str


class FunderReference(FrozenModel):
    id: str


class MappingConfig(FrozenModel):
    """Static rules shared by every mapper in a run (built from the `mapping` config section)."""

    default_language: str = "en"
    fallback_label: str | None = None
    default_currency: str = "EUR"
    identifier_tie_break: Literal["first", "last"] = "first"
    relation_passthrough: bool = False
    transliterate: bool = False
    strip_id_prefix: bool = False
    custom_schemes: tuple[str, ...] = ()
    subject_id_template: str = "{scheme}:{notation}"

    @field_validator("subject_id_template")
    @classmethod
    def _check_subject_id_template(cls, value: str) -> str:
        try:
            value.format(scheme="scheme", notation="notation")
        except (AttributeError, KeyError, IndexError, ValueError) as exc:
            raise ValueError(
                f"subject_id_template may only use {{scheme}} and {{notation}}: {value!r} ({exc!r})"
            ) from exc
        return value

    @classmethod
    def from_config(cls, section: Mapping[str, Any] | None) -> "MappingConfig":
        """Build from a config section, ignoring keys this model does not know."""
        section = dict(section or {})
        known = {key: value for key, value in section.items() if key in cls.model_fields}
        if known.get("custom_schemes") is not None:
            known["custom_schemes"] = tuple(str(s).lower() for s in known["custom_schemes"])
        else:
            known.pop("custom_schemes", None)
        return cls(**known)


class OutputRecord(FrozenModel):
    """
    Target vocabulary entry. Subclasses add the vocabulary-specific fields.

    Field order here is the key order of the emitted YAML; identifiers and
    relationships are always written last.
    """

    id: str = Field(min_length=1)
    name: str
    labels: dict[str, str]
    active: bool = True
    identifiers: tuple[ExternalIdentifier, ...] = ()
    relationships: tuple[Relationship, ...] = ()

    def to_yaml_dict(self) -> dict[str, Any]:
        data = self.model_dump(mode="json", exclude_none=True, exclude={"identifiers", "relationships"})
        data["identifiers"] = [identifier.to_output() for identifier in self.identifiers]
        data["relationships"] = [relationship.model_dump(mode="json") for relationship in self.relationships]
        return data


class AffiliationRecord(OutputRecord):
    acronym: str | None = None


class NameRecord(OutputRecord):
    given_name: str | None = None
    family_name: str | None = None
    type: Literal["personal", "organizational"] = "personal"


class FundingRecord(OutputRecord):
    country: str | None = None
    funder_type: str | None = None
    acronym: str | None = None


class AwardRecord(OutputRecord):
    number: str | None = None
    acronym: str | None = None
    funder: FunderReference
    amount: Decimal | None = None
    currency: str | None = None


class SubjectRecord(OutputRecord):
    scheme: str
    notation: str


__all__ = [
    "SourceRecord",
    "IdentifierScheme",
    "RelationType",
    "ExternalIdentifier",
    "Relationship",
    "FunderReference",
    "MappingConfig",
    "OutputRecord",
    "AffiliationRecord",
    "NameRecord",
    "FundingRecord",
    "AwardRecord",
    "SubjectRecord",
]
