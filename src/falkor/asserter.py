"""
Asserter

The interface test cases report to, and a collecting implementation used by
the falkor runner.

    done() - Called by the test case once, when it has finished.
    fail(message) - Records a failure.

    ok(value, message) - value is truthy.
    equal(actual, expected, message) / equals - actual == expected.
    not_equal(actual, expected, message) - actual != expected.
    deep_equal(actual, expected, message) - structural equality.
    not_deep_equal(actual, expected, message) - structural inequality.
    strict_equal(actual, expected, message) - equal and of the same type.
    not_strict_equal(actual, expected, message) - not strict_equal.
    raises(block, error, message) - block() raises error.
    does_not_raise(block, message) - block() does not raise.
    if_error(value) - value is falsy, e.g. no error object.
    log(*args) - Optional, collects dump output.
"""

from typing import Any, Callable, List, Optional, Protocol, Tuple, Type, runtime_checkable

FinishedCallback = Callable[[List[AssertionError], List[Tuple[Any, ...]]], None]


@runtime_checkable
class AsserterProtocol(Protocol):
    """What a test case needs from the object it reports to."""

    def fail(self, message: str) -> None: ...

    def done(self) -> None: ...

    def ok(self, value: Any, message: Optional[str] = None) -> None: ...

    def equal(self, actual: Any, expected: Any, message: Optional[str] = None) -> None: ...


class Asserter:
    """
    Collects failures and log lines for one test case.

    Failing assertions do not stop the test; the outcome is decided when
    done() is called. Everything after done() is ignored.
    """

    def __init__(self, callback: Optional[FinishedCallback] = None):
        """
        Args:
            callback: Called with the errors and log lines when the test is done
        """
        self._callback = callback
        self._finished = False
        self.errors: List[AssertionError] = []
        self.logs: List[Tuple[Any, ...]] = []

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def passed(self) -> bool:
        return not self.errors

    def fail(self, message: Optional[str] = None) -> None:
        self._record(False, message or "Test failed", "")

    def done(self) -> None:
        if self._finished:
            return
        self._finished = True
        if self._callback is not None:
            self._callback(self.errors, self.logs)

    def log(self, *args: Any) -> None:
        self.logs.append(args)

    def ok(self, value: Any, message: Optional[str] = None) -> None:
        self._record(bool(value), message, f"{value!r} is not truthy")

    def equal(self, actual: Any, expected: Any, message: Optional[str] = None) -> None:
        self._record(actual == expected, message, f"{actual!r} == {expected!r}")

    equals = equal

    def not_equal(self, actual: Any, expected: Any, message: Optional[str] = None) -> None:
        self._record(actual != expected, message, f"{actual!r} != {expected!r}")

    def deep_equal(self, actual: Any, expected: Any, message: Optional[str] = None) -> None:
        self._record(actual == expected, message, f"{actual!r} deep equals {expected!r}")

    def not_deep_equal(
        self, actual: Any, expected: Any, message: Optional[str] = None
    ) -> None:
        self._record(
            actual != expected, message, f"{actual!r} does not deep equal {expected!r}"
        )

    def strict_equal(self, actual: Any, expected: Any, message: Optional[str] = None) -> None:
        self._record(
            type(actual) is type(expected) and actual == expected,
            message,
            f"{actual!r} strictly equals {expected!r}",
        )

    def not_strict_equal(
        self, actual: Any, expected: Any, message: Optional[str] = None
    ) -> None:
        self._record(
            not (type(actual) is type(expected) and actual == expected),
            message,
            f"{actual!r} does not strictly equal {expected!r}",
        )

    def raises(
        self,
        block: Callable[[], Any],
        error: Type[BaseException] = Exception,
        message: Optional[str] = None,
    ) -> None:
        try:
            block()
        except error:
            self._record(True, message, "")
        except Exception as e:
            self._record(False, message, f"Got unwanted exception {e!r}")
        else:
            self._record(False, message, f"Missing expected exception {error.__name__}")

    def does_not_raise(self, block: Callable[[], Any], message: Optional[str] = None) -> None:
        try:
            block()
        except Exception as e:
            self._record(False, message, f"Got unwanted exception {e!r}")
        else:
            self._record(True, message, "")

    def if_error(self, value: Any) -> None:
        self._record(not value, None, str(value))

    def _record(self, passed: bool, message: Optional[str], detail: str) -> None:
        if self._finished or passed:
            return
        if message and detail:
            text = f"{message} ({detail})"
        else:
            text = message or detail
        self.errors.append(AssertionError(text))

    def __repr__(self) -> str:
        state = "finished" if self._finished else "running"
        return f"Asserter({state}, errors={len(self.errors)})"
