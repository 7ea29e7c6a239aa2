"""
Test Template

Holds common configuration and expectations and stamps out test cases that
start from a copy of it.
"""

from typing import Optional

from ..core.config import FalkorConfig
from .adapter import TestFunction
from .builder import OptionsBuilder
from .options import OptionSet
from .testcase import TestCase


class TestTemplate(OptionsBuilder):
    """
    Reusable option set for building test cases.

    Example:
        api = TestTemplate().with_header("Accept", "application/json").expect_json()
        test_users = api.fetch("/users").expect_status_code(200)
    """

    __test__ = False

    def __init__(self, config: Optional[FalkorConfig] = None):
        self.options = OptionSet()
        self._config = config

    def new_test_case(self, url: str) -> TestCase:
        """
        Creates a test case starting from a copy of this template's options.
        Later changes to the template do not affect it.
        """
        test_case = TestCase(url, config=self._config)
        test_case.options = self.options.copy()
        return test_case

    def fetch(self, url: str) -> TestFunction:
        """Returns the callable form of new_test_case(url)."""
        return self.new_test_case(url).to_test_function()

    def clone(self) -> "TestTemplate":
        """Creates a new template using this one as a base."""
        template = TestTemplate(config=self._config)
        template.options = self.options.copy()
        return template

    def __repr__(self) -> str:
        return f"TestTemplate({self.options!r})"
