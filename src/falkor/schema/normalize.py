"""
Schema Normalization

Rewrites a parsed schema in place before validation: `pattern` strings are
compiled to regular expressions and the legacy boolean `required` gains its
`optional` counterpart. Names inside a `properties` map are property names,
not keywords, and are left alone.
"""

import re
from typing import Any

from ..core.exceptions import SchemaError


def normalize_schema(schema: Any, ignore_special_keys: bool = False) -> Any:
    """
    Normalize a schema in place.

    Args:
        schema: Parsed schema (dict, list or scalar)
        ignore_special_keys: True when the keys of `schema` are property names

    Returns:
        The same schema object

    Raises:
        SchemaError: If a pattern is not a valid regular expression
    """
    if isinstance(schema, list):
        for item in schema:
            normalize_schema(item, False)
        return schema

    if not isinstance(schema, dict):
        return schema

    for key in list(schema.keys()):
        value = schema[key]
        if not ignore_special_keys and key == "pattern" and isinstance(value, str):
            try:
                schema[key] = re.compile(value)
            except re.error as e:
                raise SchemaError(
                    f"Unable to create a regular expression for pattern {value}",
                    details={"error": str(e)},
                )
        elif not ignore_special_keys and key == "required" and isinstance(value, bool):
            schema["optional"] = not value
        elif isinstance(value, (dict, list)):
            normalize_schema(value, not ignore_special_keys and key == "properties")

    return schema
