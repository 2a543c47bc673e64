"""Central conversion config loader."""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict

import yaml

LOGGER = logging.getLogger(__name__)

VOCAB_CONFIG_PATH = Path(__file__).resolve().parent.parent / "vocab_config.yml"
VOCAB_CONFIG_ENV = "VOCAB_CONFIG"

DEFAULT_VOCAB_CONFIG: Dict[str, Dict[str, Any]] = {
    "mapping": {
        "default_language": "en",
        "fallback_label": None,
        "default_currency": "EUR",
        "identifier_tie_break": "first",
        "relation_passthrough": False,
        "transliterate": False,
        "strip_id_prefix": False,
        "custom_schemes": [],
        "subject_id_template": "{scheme}:{notation}",
    },
    "conversion": {
        "max_workers": 1,
        "write_bom": True,
    },
}


def resolve_config_path(path: Path | None = None) -> Path:
    """Explicit path wins, then VOCAB_CONFIG, then vocab_config.yml at the project root."""
    if path is not None:
        return Path(path)
    env_path = os.getenv(VOCAB_CONFIG_ENV)
    if env_path:
        return Path(env_path)
    return VOCAB_CONFIG_PATH


def load_vocab_config(path: Path | None = None) -> Dict[str, Dict[str, Any]]:
    """Load vocab_config.yml, falling back to defaults if missing or invalid."""
    config_path = resolve_config_path(path)
    merged = copy.deepcopy(DEFAULT_VOCAB_CONFIG)
    if not config_path.exists():
        if config_path == VOCAB_CONFIG_PATH:
            LOGGER.debug("Config file not found, using defaults: %s", config_path)
        else:
            LOGGER.warning("Config file %s not found; using defaults.", config_path)
        return merged
    try:
        payload = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        LOGGER.warning("Failed to read config %s (%s); using defaults.", config_path, exc)
        return merged
    if not isinstance(payload, dict):
        LOGGER.warning("Config %s is not a mapping; using defaults.", config_path)
        return merged
    for section, cfg in payload.items():
        if isinstance(cfg, dict):
            merged[section] = {**merged.get(section, {}), **cfg}
    return merged


__all__ = ["load_vocab_config", "resolve_config_path", "VOCAB_CONFIG_PATH", "VOCAB_CONFIG_ENV", "DEFAULT_VOCAB_CONFIG"]
