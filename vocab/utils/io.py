"""Reading JSON dumps and writing YAML vocabularies."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable

import yaml

from vocab.errors import MalformedInputError

LOGGER = logging.getLogger(__name__)

UTF8_BOM = b"\xef\xbb\xbf"


def load_json_list(path: Path) -> list[Any]:
    """
    Load a JSON dump that holds a list of records.

    A top-level object carrying an `items` list (paged API dumps) is unwrapped.
    A leading UTF-8 BOM is tolerated.

    Raises:
        FileNotFoundError: If the path does not exist.
        MalformedInputError: If the file is not valid JSON or holds no record list.
    """
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    try:
        payload = json.loads(path.read_text(encoding="utf-8-sig"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        LOGGER.error("JSON parsing failed for %s: %s", path, exc)
        raise MalformedInputError(f"Invalid JSON in {path}: {exc}") from exc
    if isinstance(payload, dict) and isinstance(payload.get("items"), list):
        LOGGER.debug("Unwrapped 'items' list from %s", path.name)
        payload = payload["items"]
    if not isinstance(payload, list):
        raise MalformedInputError(f"Expected top-level JSON list in {path}, got {type(payload).__name__}")
    return payload


def dump_yaml(records: Iterable[dict[str, Any]]) -> str:
    """Render vocabulary entries as YAML, keeping each entry's key order."""
    return yaml.safe_dump(list(records), allow_unicode=True, sort_keys=False, default_flow_style=False)


def write_yaml(path: Path, records: Iterable[dict[str, Any]], bom: bool = True) -> None:
    """Persist vocabulary entries, optionally prefixed with a UTF-8 BOM for encoding detection."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data = dump_yaml(records).encode("utf-8")
    path.write_bytes((UTF8_BOM if bom else b"") + data)


__all__ = ["load_json_list", "dump_yaml", "write_yaml", "UTF8_BOM"]
