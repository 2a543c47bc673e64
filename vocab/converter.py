"""
Batch conversion of a full dump for one vocabulary type.

Record failures are isolated: each failing record is reported with its index
and the batch carries on. Only an unknown vocabulary type or an input that is
not a list of records aborts the run.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Sequence

from vocab.dispatcher import Mapper, VocabularyType, get_mapper, parse_vocabulary_type
from vocab.errors import MalformedInputError, MappingError
from vocab.mappers.common import peek_record_id
from vocab.models import MappingConfig, OutputRecord

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordFailure:
    index: int
    record_id: str | None
    error: MappingError

    def describe(self) -> str:
        label = self.record_id or "<no id>"
        return f"record {self.index} ({label}): {type(self.error).__name__}: {self.error}"


@dataclass(frozen=True)
class RecordWarning:
    index: int
    record_id: str | None
    message: str


@dataclass
class BatchResult:
    vocab_type: VocabularyType
    total: int
    records: list[OutputRecord] = field(default_factory=list)
    failures: list[RecordFailure] = field(default_factory=list)
    warnings: list[RecordWarning] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_yaml_dicts(self) -> list[dict[str, Any]]:
        return [record.to_yaml_dict() for record in self.records]


@dataclass(frozen=True)
class _Outcome:
    index: int
    record: OutputRecord | None = None
    failure: RecordFailure | None = None
    warnings: tuple[RecordWarning, ...] = ()


def _convert_one(index: int, raw: Any, mapper: Mapper, config: MappingConfig) -> _Outcome:
    if not isinstance(raw, Mapping):
        error = MalformedInputError(f"Expected a JSON object, got {type(raw).__name__}")
        return _Outcome(index, failure=RecordFailure(index, None, error))
    try:
        record, messages = mapper(MappingProxyType(dict(raw)), config)
    except MappingError as exc:
        return _Outcome(index, failure=RecordFailure(index, exc.record_id or peek_record_id(raw), exc))
    except (TypeError, ValueError) as exc:
        LOGGER.debug("Record %d could not be read", index, exc_info=True)
        record_id = peek_record_id(raw)
        error = MalformedInputError(f"Unreadable record: {exc}", record_id=record_id)
        return _Outcome(index, failure=RecordFailure(index, record_id, error))
    warnings = tuple(RecordWarning(index, record.id, message) for message in messages)
    return _Outcome(index, record=record, warnings=warnings)


def convert_records(
    vocab_type: object,
    records: Any,
    config: MappingConfig | None = None,
    max_workers: int | None = None,
) -> BatchResult:
    """
    Map every record of a dump and collect outputs, failures and warnings by index.

    Args:
        vocab_type: One of the VocabularyType names.
        records: The parsed dump, a sequence of JSON objects.
        config: Mapping rules; defaults apply when omitted.
        max_workers: Map records on this many threads; output order is unaffected.

    Raises:
        UnknownVocabularyTypeError: If vocab_type names no vocabulary.
        MalformedInputError: If records is not a sequence.
    """
    selected = parse_vocabulary_type(vocab_type)
    mapper = get_mapper(selected)
    if isinstance(records, (str, bytes, Mapping)) or not isinstance(records, Sequence):
        raise MalformedInputError(f"Expected a list of records, got {type(records).__name__}")
    config = config or MappingConfig()
    workers = max(1, max_workers or 1)

    LOGGER.info("Converting %d %s records (workers=%d)", len(records), selected.value, workers)
    if workers > 1 and len(records) > 1:
        outcomes: list[_Outcome | None] = [None] * len(records)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(_convert_one, index, raw, mapper, config): index
                for index, raw in enumerate(records)
            }
            for future in as_completed(futures):
                outcomes[futures[future]] = future.result()
    else:
        outcomes = [_convert_one(index, raw, mapper, config) for index, raw in enumerate(records)]

    result = BatchResult(vocab_type=selected, total=len(records))
    for outcome in outcomes:
        if outcome.record is not None:
            result.records.append(outcome.record)
        if outcome.failure is not None:
            result.failures.append(outcome.failure)
        result.warnings.extend(outcome.warnings)

    LOGGER.info(
        "Converted %s: records=%d, failed=%d, warnings=%d",
        selected.value,
        len(result.records),
        len(result.failures),
        len(result.warnings),
    )
    return result


__all__ = ["convert_records", "BatchResult", "RecordFailure", "RecordWarning"]
