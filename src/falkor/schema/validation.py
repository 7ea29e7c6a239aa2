"""
Schema Validation

Thin wrapper over the jsonschema library that returns violations instead of
raising. Schemas without `$schema` are treated as draft 3, the dialect that
uses `id` and boolean `required`. A bare `$ref` names a schema registered
with add_json_schema by its id, also when the referencing schema has an
absolute id.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

from jsonschema import Draft3Validator, ValidationError
from jsonschema.validators import validator_for
from referencing import Registry, Resource
from referencing.exceptions import Unresolvable
from referencing.jsonschema import DRAFT3

from ..core.exceptions import SchemaError


@dataclass
class Violation:
    """A single schema violation."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"Error @ /{self.path}: {self.message}"


def _schema_id(schema: Dict[str, Any]) -> str:
    schema_id = schema.get("$id", schema.get("id"))
    return schema_id if isinstance(schema_id, str) else ""


def build_registry(
    named_schemas: Optional[Dict[str, Any]] = None, base_uri: str = ""
) -> Registry:
    """
    Build a reference registry from schemas keyed by their id.

    Args:
        named_schemas: Mapping of id to schema
        base_uri: Id of the schema doing the referencing. A bare `$ref` is
            resolved against it, so each schema is also registered under its
            id joined to this base.

    Returns:
        Registry usable for `$ref` resolution
    """
    resources = []
    for schema_id, schema in (named_schemas or {}).items():
        resource = Resource.from_contents(schema, default_specification=DRAFT3)
        resources.append((schema_id, resource))
        joined = urljoin(base_uri, schema_id) if base_uri else schema_id
        if joined != schema_id:
            resources.append((joined, resource))
    return Registry().with_resources(resources)


def _describe(error: ValidationError) -> str:
    # Compiled patterns would otherwise show up as re.compile(...).
    if error.validator == "pattern" and isinstance(error.validator_value, re.Pattern):
        return f"{error.instance!r} does not match {error.validator_value.pattern!r}"
    return error.message


def validate_instance(
    instance: Any, schema: Dict[str, Any], named_schemas: Optional[Dict[str, Any]] = None
) -> List[Violation]:
    """
    Validate a JSON document against a schema.

    Args:
        instance: Parsed JSON document
        schema: Normalized schema
        named_schemas: Previously registered schemas for `$ref` resolution

    Returns:
        Violations in the order the validator reports them

    Raises:
        SchemaError: If a `$ref` cannot be resolved
    """
    validator_cls = validator_for(schema, default=Draft3Validator)
    registry = build_registry(named_schemas, base_uri=_schema_id(schema))
    validator = validator_cls(schema, registry=registry)

    try:
        return [
            Violation(
                path="/".join(str(part) for part in error.absolute_path),
                message=_describe(error),
            )
            for error in validator.iter_errors(instance)
        ]
    except Unresolvable as e:
        raise SchemaError(f"Invalid JSON Schema. Unable to resolve reference: {e}")
