"""
Exception hierarchy for vocabulary conversion.

Per-record problems derive from MappingError and are collected by the batch
converter; UnknownVocabularyTypeError and a run-level MalformedInputError abort
the whole conversion. Every exception carries the record id (when known) and
the offending field for logging.
"""

from __future__ import annotations


class VocabError(Exception):
    """Base exception for all conversion errors."""

    def __init__(
        self,
        message: str,
        *,
        record_id: str | None = None,
        field: str | None = None,
        details: dict | None = None,
    ) -> None:
        self.record_id = record_id
        self.field = field
        self.details = details or {}
        super().__init__(message)


class MappingError(VocabError):
    """A single record could not be mapped."""
    pass


class MissingIdentifierError(MappingError):
    """No canonical identifier could be derived for a record."""
    pass


class MissingLabelError(MappingError):
    """A record has no usable label and no fallback is configured."""
    pass


class UnknownRelationTypeError(MappingError):
    """A relationship type is outside the known set and passthrough is off."""

    def __init__(self, message: str, *, relation_type: str | None = None, **kwargs) -> None:
        self.relation_type = relation_type
        super().__init__(message, **kwargs)


class MissingFunderError(MappingError):
    """An award record has no funding-body reference."""
    pass


class MalformedInputError(MappingError):
    """A record or the input collection is structurally unreadable."""
    pass


class UnknownVocabularyTypeError(VocabError):
    """The vocabulary-type selector does not name a supported vocabulary."""

    def __init__(self, selector: object, supported: list[str]) -> None:
        self.selector = selector
        self.supported = supported
        super().__init__(
            f"Unknown vocabulary type: {selector!r} (expected one of: {', '.join(supported)})",
            details={"selector": selector},
        )


__all__ = [
    "VocabError",
    "MappingError",
    "MissingIdentifierError",
    "MissingLabelError",
    "UnknownRelationTypeError",
    "MissingFunderError",
    "MalformedInputError",
    "UnknownVocabularyTypeError",
]
