"""
Schema Loading

Reads JSON schema files from disk. Failures are raised as SchemaError so the
calling evaluator can turn them into a single assertion failure.
"""

import json
from pathlib import Path
from typing import Any, List, Union

from ..core.exceptions import SchemaError


def read_schema_file(schema_path: Union[str, Path], label: str = "JSON Schema") -> Any:
    """
    Read and parse a schema file.

    Args:
        schema_path: Path to the schema file
        label: Prefix used in error messages

    Returns:
        The parsed JSON document

    Raises:
        SchemaError: If the file cannot be read or is not valid JSON
    """
    try:
        with open(schema_path, "r", encoding="utf-8") as f:
            contents = f.read()
    except OSError as e:
        raise SchemaError(
            f"Invalid {label}. Unable to open file: {schema_path}",
            details={"error": str(e)},
        )

    try:
        return json.loads(contents)
    except ValueError as e:
        raise SchemaError(f"Invalid {label}. JSON parsing failed.  {e}")


def read_schema_list(schema_path: Union[str, Path]) -> List[Any]:
    """
    Read a file holding one schema or an array of schemas.

    Returns:
        The schemas as a list
    """
    schemata = read_schema_file(schema_path, label="JSON File")
    return schemata if isinstance(schemata, list) else [schemata]
