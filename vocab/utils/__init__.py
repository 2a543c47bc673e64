"""Field normalizers and I/O helpers shared by the vocabulary mappers."""

from vocab.utils.identifiers import infer_scheme, normalize_identifiers, select_canonical
from vocab.utils.io import dump_yaml, load_json_list, write_yaml
from vocab.utils.labels import normalize_labels
from vocab.utils.relationships import normalize_relationships
from vocab.utils.sanitize import clean_text, sanitize
from vocab.utils.status import normalize_status

__all__ = [
    "infer_scheme",
    "normalize_identifiers",
    "select_canonical",
    "dump_yaml",
    "load_json_list",
    "write_yaml",
    "normalize_labels",
    "normalize_relationships",
    "clean_text",
    "sanitize",
    "normalize_status",
]
