"""
Falkor Schema Services

Loading, normalization and validation of JSON schemas used by the
add_json_schema and validate_json evaluators.
"""

from .loader import read_schema_file, read_schema_list
from .normalize import normalize_schema
from .validation import Violation, build_registry, validate_instance

__all__ = [
    "read_schema_file",
    "read_schema_list",
    "normalize_schema",
    "Violation",
    "build_registry",
    "validate_instance",
]
