"""
Test Function Adapter

Wraps a test case as a callable taking an asserter, the shape most test
runners expect. The builder methods are mirrored onto the wrapper so that
configuration can keep chaining on the callable itself.
"""

from typing import TYPE_CHECKING, Any, Callable, Coroutine

if TYPE_CHECKING:
    from .testcase import TestCase


def _chainable(name: str) -> Callable[..., "TestFunction"]:
    def method(self: "TestFunction", *args: Any, **kwargs: Any) -> "TestFunction":
        getattr(self._test_case, name)(*args, **kwargs)
        return self

    method.__name__ = name
    method.__qualname__ = f"TestFunction.{name}"
    method.__doc__ = f"Calls TestCase.{name} on the wrapped test case and returns the test function."
    return method


class TestFunction:
    """
    Callable form of a TestCase.

    Example:
        test_home = falkor.fetch("/").expect_status_code(200)
        await test_home(asserter)
    """

    __test__ = False

    # Builder surface, kept in step with OptionsBuilder and TestCase.
    with_method = _chainable("with_method")
    with_header = _chainable("with_header")
    with_content_type = _chainable("with_content_type")
    with_cookie = _chainable("with_cookie")
    with_payload = _chainable("with_payload")
    with_form_encoded_payload = _chainable("with_form_encoded_payload")
    with_json_payload = _chainable("with_json_payload")
    evaluate = _chainable("evaluate")
    expect_status_code = _chainable("expect_status_code")
    expect_header = _chainable("expect_header")
    expect_content_type = _chainable("expect_content_type")
    expect_plain_text = _chainable("expect_plain_text")
    expect_html = _chainable("expect_html")
    expect_html_with_charset = _chainable("expect_html_with_charset")
    expect_json = _chainable("expect_json")
    expect_json_with_charset = _chainable("expect_json_with_charset")
    expect_body_matches = _chainable("expect_body_matches")
    expect_body_does_not_match = _chainable("expect_body_does_not_match")
    expect_xssi_prefix = _chainable("expect_xssi_prefix")
    add_json_schema = _chainable("add_json_schema")
    validate_json = _chainable("validate_json")
    set_asserter = _chainable("set_asserter")
    dump = _chainable("dump")
    with_timeout = _chainable("with_timeout")
    then = _chainable("then")

    def __init__(self, test_case: "TestCase"):
        self._test_case = test_case

    @property
    def test_case(self) -> "TestCase":
        return self._test_case

    def get_headers(self):
        return self._test_case.get_headers()

    def run(self) -> Coroutine[Any, Any, None]:
        return self._test_case.run()

    def __call__(self, asserter: Any) -> Coroutine[Any, Any, None]:
        """
        Binds the asserter and starts the test.

        Returns:
            A coroutine that finishes once the asserter has been told done()
        """
        return self._test_case.set_asserter(asserter).run()

    def __repr__(self) -> str:
        return f"TestFunction({self._test_case!r})"
