"""
Falkor - declarative HTTP functional testing.

Build a request with chained calls, list the expectations on the response and
hand the resulting test function an asserter:

    import falkor

    test_home = (
        falkor.fetch("http://localhost:8080/")
        .expect_status_code(200)
        .expect_html_with_charset()
    )

    await test_home(falkor.Asserter())
"""

from typing import Optional

from .asserter import Asserter, AsserterProtocol
from .core.config import FalkorConfig, get_config, set_base_url, set_root_schema_path
from .core.exceptions import (
    FalkorException,
    ConfigurationError,
    NetworkError,
    SchemaError,
)
from .core.models import HTTPRequest, HTTPResponse, TestState
from .engine import OptionSet, TestCase, TestFunction, TestTemplate

__version__ = "0.1.0"


def fetch(url: str, config: Optional[FalkorConfig] = None) -> TestFunction:
    """
    Returns a test function requesting ``url``. The builder methods can be
    chained directly on the returned function.
    """
    return TestCase(url, config=config).to_test_function()


def new_test_template(config: Optional[FalkorConfig] = None) -> TestTemplate:
    """Returns an empty template for building test cases with common options."""
    return TestTemplate(config=config)


__all__ = [
    "fetch",
    "new_test_template",
    "set_base_url",
    "set_root_schema_path",
    "get_config",
    "Asserter",
    "AsserterProtocol",
    "FalkorConfig",
    "FalkorException",
    "ConfigurationError",
    "NetworkError",
    "SchemaError",
    "HTTPRequest",
    "HTTPResponse",
    "TestState",
    "OptionSet",
    "TestCase",
    "TestFunction",
    "TestTemplate",
    "__version__",
]
