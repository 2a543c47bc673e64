"""Top-level shared utilities (logging, config)."""

from utils.logging_config import setup_logger
from utils.config import load_vocab_config, VOCAB_CONFIG_PATH, DEFAULT_VOCAB_CONFIG

__all__ = ["setup_logger", "load_vocab_config", "VOCAB_CONFIG_PATH", "DEFAULT_VOCAB_CONFIG"]
