"""
Built-in Evaluators

Factories for the response checks behind the expect_* and schema builder
methods. Each factory returns a function that records its outcome on the
asserter it is given and never raises for an unexpected response.
"""

import json
import re
from typing import Any, Callable, Optional, Pattern, Union

from ..core.exceptions import SchemaError
from ..core.models import HTTPResponse
from ..schema import normalize_schema, read_schema_file, read_schema_list, validate_instance

PatternLike = Union[str, Pattern[str]]


def _compile(pattern: PatternLike) -> Pattern[str]:
    return pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)


def status_code(code: int) -> Callable[[Any, HTTPResponse], None]:
    def expect_status_code(test: Any, res: HTTPResponse) -> None:
        test.equal(res.status_code, code, f'Expected response code to be "{code}"')

    return expect_status_code


def header(name: str, value: Any) -> Callable[[Any, HTTPResponse], None]:
    """
    Equality check on a response header; the name is matched ignoring case.
    Header values are strings, so a non-string expected value is compared as
    its string form, the same way with_header sends it.
    """
    name = name.lower()
    if value is not None:
        value = str(value)

    def expect_header(test: Any, res: HTTPResponse) -> None:
        actual = res.get_header(name)
        if actual:
            message = actual
        else:
            all_headers = [f'{key}: "{val}"' for key, val in res.headers.items()]
            message = "only headers:\n  " + "\n  ".join(all_headers)
        test.equal(
            actual,
            value,
            f'Expected "{name}" header to be "{value}", but saw {message}',
        )

    return expect_header


def body_matches(pattern: PatternLike) -> Callable[[Any, HTTPResponse], None]:
    regex = _compile(pattern)

    def expect_body_matches(test: Any, res: HTTPResponse) -> None:
        test.ok(
            regex.search(res.text) is not None,
            f"Expected response body to match {regex.pattern}",
        )

    return expect_body_matches


def body_does_not_match(pattern: PatternLike) -> Callable[[Any, HTTPResponse], None]:
    regex = _compile(pattern)

    def expect_body_does_not_match(test: Any, res: HTTPResponse) -> None:
        test.ok(
            regex.search(res.text) is None,
            f"Expected response body not to match {regex.pattern}",
        )

    return expect_body_does_not_match


def xssi_prefix(prefix: str) -> Callable[[Any, HTTPResponse], None]:
    def expect_xssi_prefix(test: Any, res: HTTPResponse) -> None:
        if res.body:
            test.equal(
                res.text[: len(prefix)],
                prefix,
                "Expected XSSI prefix at beginning of response body.",
            )
        else:
            test.fail("Expected XSSI prefix but response was empty.")

    return expect_xssi_prefix


def add_json_schema(schema_path: str) -> Callable[[Any, HTTPResponse, Any], None]:
    """
    Registers the schemas found in a file so that later validate_json
    evaluators can reference them by id.
    """

    def register_json_schema(test: Any, res: HTTPResponse, case: Any) -> None:
        path = case.config.resolve_schema_path(schema_path)

        try:
            schemata = read_schema_list(path)
        except SchemaError as e:
            test.fail(e.message)
            return

        for schema in schemata:
            if not isinstance(schema, dict) or not schema.get("id"):
                test.fail(
                    f"JSON schema must have an id before calling add_json_schema: {schema}"
                )
                return
            try:
                normalize_schema(schema)
            except SchemaError as e:
                test.fail(e.message)
                return
            case.options.named_schemas[schema["id"]] = schema

    return register_json_schema


def validate_json(schema_path: str) -> Callable[[Any, HTTPResponse, Any], None]:
    """
    Validates the response body against the schema in a file. Every problem,
    including a body that is not JSON, ends up as a single failure.
    """

    def validate_json_body(test: Any, res: HTTPResponse, case: Any) -> None:
        path = case.config.resolve_schema_path(schema_path)

        try:
            schema = read_schema_file(path)
            if not isinstance(schema, dict):
                raise SchemaError("Invalid JSON Schema. Expected a schema object.")
            normalize_schema(schema)
        except SchemaError as e:
            test.fail(e.message)
            return

        if not res.body:
            test.fail("Expected response body for JSON validation.")
            return

        body = res.text
        xssi_prefix = case.options.xssi_prefix
        if xssi_prefix:
            body = body[len(xssi_prefix) :]

        try:
            instance = json.loads(body)
        except ValueError as e:
            test.fail(f"Invalid response body. JSON parsing failed.  {e}")
            return

        try:
            violations = validate_instance(instance, schema, case.options.named_schemas)
        except SchemaError as e:
            test.fail(e.message)
            return

        if violations:
            lines = ["Invalid response body. JSON Schema validation failed."]
            lines.extend(f"  {violation}" for violation in violations)
            test.fail("\n".join(lines))

    return validate_json_body


def content_type(content_type: str, charset: Optional[str] = None) -> str:
    """Builds the Content-Type value expected by expect_content_type."""
    if charset:
        return f"{content_type}; charset={charset}"
    return content_type
