"""
Options Builder

The chainable configuration surface shared by test templates and test cases.
Every method mutates ``self.options`` and returns the instance.
"""

import json
from typing import Any, Callable, Mapping, Optional, Union
from urllib.parse import quote, urlencode

from . import evaluators
from .evaluators import PatternLike
from .options import Evaluator, OptionSet

# Characters encodeURIComponent leaves alone on top of quote()'s defaults.
_URI_COMPONENT_SAFE = "!*'()"


class OptionsBuilder:
    """Mixin for classes owning an OptionSet as ``self.options``."""

    options: OptionSet

    def with_method(self, method: str):
        """Sets the HTTP method, any verb is accepted."""
        self.options.method = method.upper()
        return self

    def with_header(self, name: str, value: Any):
        self.options.headers[name] = str(value)
        return self

    def with_content_type(self, content_type: str):
        self.options.headers["Content-Type"] = content_type
        return self

    def with_cookie(self, name: str, value: Any):
        """
        Sets a cookie on the request.

        The name and value are sent as given and must already be valid cookie
        tokens (no '=' or ';').
        """
        self.options.cookies[name] = value
        return self

    def with_payload(self, payload: Union[str, bytes]):
        """
        Sets the request payload.

        Args:
            payload: A UTF-8 string or raw bytes
        """
        if isinstance(payload, str):
            payload = payload.encode("utf-8")
        self.options.payload = bytes(payload)
        self.with_header("Content-Length", len(payload))
        return self

    def with_form_encoded_payload(self, payload: Mapping[str, Any]):
        """
        Sets a form encoded payload built from the key/value pairs, in mapping
        order, and the matching Content-Type.
        """
        self.with_payload(urlencode(payload, safe=_URI_COMPONENT_SAFE, quote_via=quote))
        self.with_content_type("application/x-www-form-urlencoded")
        return self

    def with_json_payload(self, payload: Any):
        self.with_payload(json.dumps(payload, separators=(",", ":"), allow_nan=False))
        self.with_content_type("application/json")
        return self

    def evaluate(self, fn: Callable[[Any, Any], Any]):
        """
        Adds an evaluator called with the asserter and the response once the
        response body has been read. Evaluators run in the order they were
        added.
        """
        self.options.evaluators.append(Evaluator(fn))
        return self

    def _evaluate_in_context(self, fn: Callable[[Any, Any, Any], Any]):
        self.options.evaluators.append(Evaluator(fn, wants_context=True))
        return self

    def expect_status_code(self, status_code: int):
        return self.evaluate(evaluators.status_code(status_code))

    def expect_header(self, name: str, value: Any):
        return self.evaluate(evaluators.header(name, value))

    def expect_content_type(self, content_type: str, charset: Optional[str] = None):
        """Expects a Content-Type header, with a charset only when one is given."""
        return self.expect_header(
            "Content-Type", evaluators.content_type(content_type, charset)
        )

    def expect_plain_text(self):
        return self.expect_content_type("text/plain")

    def expect_html(self):
        return self.expect_content_type("text/html")

    def expect_html_with_charset(self, charset: str = "utf-8"):
        return self.expect_content_type("text/html", charset or "utf-8")

    def expect_json(self):
        return self.expect_content_type("application/json")

    def expect_json_with_charset(self, charset: str = "utf-8"):
        return self.expect_content_type("application/json", charset or "utf-8")

    def expect_body_matches(self, pattern: PatternLike):
        return self.evaluate(evaluators.body_matches(pattern))

    def expect_body_does_not_match(self, pattern: PatternLike):
        return self.evaluate(evaluators.body_does_not_match(pattern))

    def expect_xssi_prefix(self, prefix: str):
        """
        Checks that the response body starts with the XSSI prefix, and strips
        the prefix before validate_json parses the body.

        Args:
            prefix: The XSSI prefix, e.g. ])}while(1);</x>
        """
        self.options.xssi_prefix = prefix
        return self.evaluate(evaluators.xssi_prefix(prefix))

    def add_json_schema(self, schema_path: str):
        """
        Reads a file holding one JSON schema or an array of them and makes
        them available to `$ref` in later validate_json calls. Every schema
        must have an id.
        """
        return self._evaluate_in_context(evaluators.add_json_schema(schema_path))

    def validate_json(self, schema_path: str):
        """Validates the response body against the JSON schema in the file."""
        return self._evaluate_in_context(evaluators.validate_json(schema_path))

    def get_headers(self):
        return self.options.get_headers()
