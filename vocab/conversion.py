"""
Brief: Convert a JSON dump into a YAML controlled vocabulary.

Inputs:
- vocab_type: affiliations | names | funding | awards | subjects
- input_path: JSON file holding a list of records (e.g. a ROR data dump)
- output_path: YAML file to write
- --config: alternative vocab_config.yml (or Env: VOCAB_CONFIG)
- --max-workers, --transliterate, --dry-run

Outputs:
- YAML vocabulary at output_path (UTF-8, BOM unless conversion.write_bom is false)
- Per-record failures and a summary on stderr

Usage (from project root):
- python -m vocab.scripts.convert affiliations ror-data.json vocabularies/affiliations.yaml
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from dotenv import load_dotenv
from pydantic import ValidationError

from utils import load_vocab_config, setup_logger
from vocab.converter import BatchResult, convert_records
from vocab.dispatcher import VocabularyType, parse_vocabulary_type
from vocab.errors import MalformedInputError, UnknownVocabularyTypeError
from vocab.models import MappingConfig
from vocab.utils import load_json_list, write_yaml

LOGGER = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Convert a JSON data dump into a YAML controlled vocabulary.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m vocab.scripts.convert affiliations ./input.json ./output.yaml
  python -m vocab.scripts.convert awards ./awards.json ./awards.yaml --max-workers 4
  python -m vocab.scripts.convert names ./names.json ./names.yaml --dry-run
        """,
    )
    parser.add_argument(
        "vocab_type",
        help=f"Vocabulary to produce: {', '.join(v.value for v in VocabularyType)}",
    )
    parser.add_argument("input_path", type=Path, help="JSON file with a list of records.")
    parser.add_argument("output_path", type=Path, help="YAML file to write.")
    parser.add_argument("--config", type=Path, default=None, help="Path to a vocab_config.yml.")
    parser.add_argument(
        "--max-workers",
        type=int,
        default=None,
        help="Map records on this many threads (default: conversion.max_workers).",
    )
    parser.add_argument(
        "--transliterate",
        action="store_true",
        help="Transliterate names and labels to ASCII (overrides mapping.transliterate).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Convert and report without writing the output file.",
    )
    return parser.parse_args(argv)


def report_result(result: BatchResult) -> None:
    """Log per-record failures and warnings, then a summary line."""
    for warning in result.warnings:
        LOGGER.warning("record %d (%s): %s", warning.index, warning.record_id, warning.message)
    for failure in result.failures:
        LOGGER.warning("Skipped %s", failure.describe())
    LOGGER.info(
        "%s: input=%d, converted=%d, failed=%d, warnings=%d",
        result.vocab_type.value,
        result.total,
        len(result.records),
        len(result.failures),
        len(result.warnings),
    )


def main(argv: Sequence[str] | None = None) -> int:
    load_dotenv()
    args = parse_args(argv)

    config = load_vocab_config(args.config)
    mapping_section = dict(config.get("mapping", {}))
    if args.transliterate:
        mapping_section["transliterate"] = True
    conversion_section = config.get("conversion", {})

    try:
        mapping_config = MappingConfig.from_config(mapping_section)
    except ValidationError as exc:
        LOGGER.error("Invalid mapping configuration: %s", exc)
        return 1

    LOGGER.info("Input: %s", args.input_path)
    LOGGER.info("Output: %s", args.output_path)

    try:
        vocab_type = parse_vocabulary_type(args.vocab_type)
        records = load_json_list(args.input_path)
        result = convert_records(
            vocab_type,
            records,
            mapping_config,
            max_workers=args.max_workers or conversion_section.get("max_workers"),
        )
    except UnknownVocabularyTypeError as exc:
        LOGGER.error("%s", exc)
        return 1
    except MalformedInputError as exc:
        LOGGER.error("Input is not a readable record list: %s", exc)
        return 1
    except OSError as exc:
        LOGGER.error("Cannot read input %s: %s", args.input_path, exc)
        return 1

    report_result(result)

    if args.dry_run:
        LOGGER.info("Dry run (no file written). Drop --dry-run to write %s.", args.output_path)
        return 0

    try:
        write_yaml(args.output_path, result.to_yaml_dicts(), bom=bool(conversion_section.get("write_bom", True)))
    except OSError as exc:
        LOGGER.error("Cannot write output %s: %s", args.output_path, exc)
        return 1
    LOGGER.info("Vocabulary written to: %s", args.output_path)
    return 0


def run() -> None:
    """Console-script entry point."""
    setup_logger()
    raise SystemExit(main())


if __name__ == "__main__":
    run()
