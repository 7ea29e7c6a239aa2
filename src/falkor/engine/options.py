"""
Option Set

The mutable bag of request configuration and response evaluators shared by
test templates and test cases.
"""

from typing import Any, Callable, Dict, List, NamedTuple, Optional


class Evaluator(NamedTuple):
    """
    A registered response check.

    Plain evaluators are called as ``fn(asserter, response)``. Evaluators with
    ``wants_context`` set are also handed the executing test case, e.g. to
    read its XSSI prefix or its configuration.
    """

    fn: Callable[..., Any]
    wants_context: bool = False

    def __call__(self, asserter: Any, response: Any, context: Any) -> Any:
        if self.wants_context:
            return self.fn(asserter, response, context)
        return self.fn(asserter, response)

    @property
    def name(self) -> str:
        return getattr(self.fn, "__name__", repr(self.fn))


class OptionSet:
    """Request configuration and response expectations."""

    # NOTE: When adding options make sure to add a corresponding step in copy().

    def __init__(self) -> None:
        self.method: str = "GET"
        self.headers: Dict[str, str] = {}
        self.cookies: Dict[str, Any] = {}
        self.payload: Optional[bytes] = None
        self.xssi_prefix: str = ""
        self.evaluators: List[Evaluator] = []
        self.named_schemas: Dict[str, Any] = {}

    def get_headers(self) -> Dict[str, str]:
        """
        Returns a new dict holding the headers to send.

        A Cookie header is synthesized from the cookies unless one was set
        explicitly.
        """
        headers = dict(self.headers)

        if "Cookie" not in headers:
            cookies = [f"{name}={value}" for name, value in self.cookies.items()]
            if cookies:
                headers["Cookie"] = "; ".join(cookies)

        return headers

    def copy(self) -> "OptionSet":
        """Returns an independent option set with the same settings."""
        options = OptionSet()
        options.method = self.method
        options.headers = self.get_headers()
        options.cookies = dict(self.cookies)
        options.payload = self.payload
        options.xssi_prefix = self.xssi_prefix
        options.evaluators = list(self.evaluators)
        options.named_schemas = dict(self.named_schemas)
        return options

    def __repr__(self) -> str:
        return (
            f"OptionSet(method={self.method!r}, headers={self.headers!r}, "
            f"evaluators={len(self.evaluators)})"
        )
