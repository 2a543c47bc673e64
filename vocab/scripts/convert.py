"""
Brief: Convert a JSON dump into a YAML controlled vocabulary.

Inputs:
- vocab_type input_path output_path [--config] [--max-workers] [--transliterate] [--dry-run]

Outputs:
- YAML vocabulary file
- Logs to stderr

Usage (from project root):
- python -m vocab.scripts.convert affiliations ./input.json ./output.yaml
"""

from vocab.conversion import main
from utils import setup_logger


if __name__ == "__main__":
    setup_logger()
    raise SystemExit(main())
