"""Vocabulary-type selection: one mapper per supported vocabulary."""

from __future__ import annotations

from enum import StrEnum
from typing import Callable

from vocab.errors import UnknownVocabularyTypeError
from vocab.mappers.affiliations_mapper import map_affiliation
from vocab.mappers.awards_mapper import map_award
from vocab.mappers.funding_mapper import map_funder
from vocab.mappers.names_mapper import map_name
from vocab.mappers.subjects_mapper import map_subject
from vocab.models import MappingConfig, OutputRecord, SourceRecord

Mapper = Callable[[SourceRecord, MappingConfig], tuple[OutputRecord, list[str]]]


class VocabularyType(StrEnum):
    AFFILIATIONS = "affiliations"
    NAMES = "names"
    FUNDING = "funding"
    AWARDS = "awards"
    SUBJECTS = "subjects"


MAPPERS: dict[VocabularyType, Mapper] = {
    VocabularyType.AFFILIATIONS: map_affiliation,
    VocabularyType.NAMES: map_name,
    VocabularyType.FUNDING: map_funder,
    VocabularyType.AWARDS: map_award,
    VocabularyType.SUBJECTS: map_subject,
}


def parse_vocabulary_type(selector: object) -> VocabularyType:
    """Resolve a selector such as "Affiliations " to its VocabularyType."""
    if isinstance(selector, VocabularyType):
        return selector
    if isinstance(selector, str):
        try:
            return VocabularyType(selector.strip().lower())
        except ValueError:
            pass
    raise UnknownVocabularyTypeError(selector, [v.value for v in VocabularyType])


def get_mapper(selector: object) -> Mapper:
    return MAPPERS[parse_vocabulary_type(selector)]


__all__ = ["VocabularyType", "MAPPERS", "Mapper", "parse_vocabulary_type", "get_mapper"]
