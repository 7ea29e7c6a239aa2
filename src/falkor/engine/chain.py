"""
Chain Resolution

A continuation registered with ``then()`` may return another test case to
run, something to await, or a plain value. The return value is classified
once and then resolved according to its kind.
"""

import inspect
from enum import Enum
from typing import Any, Callable, NamedTuple

Continuation = Callable[[Any], Any]


class StepKind(str, Enum):
    """What a continuation handed back."""

    TEST_CASE = "test_case"
    AWAITABLE = "awaitable"
    VALUE = "value"


class ChainStep(NamedTuple):
    kind: StepKind
    value: Any


def classify(result: Any) -> ChainStep:
    """
    Classify the return value of a continuation.

    Test functions are unwrapped to the test case they wrap.
    """
    # Imported here, testcase imports this module.
    from .adapter import TestFunction
    from .testcase import TestCase

    if isinstance(result, TestFunction):
        return ChainStep(StepKind.TEST_CASE, result.test_case)
    if isinstance(result, TestCase):
        return ChainStep(StepKind.TEST_CASE, result)
    if inspect.isawaitable(result):
        return ChainStep(StepKind.AWAITABLE, result)
    return ChainStep(StepKind.VALUE, result)


async def resolve(step: ChainStep, asserter: Any) -> Any:
    """
    Resolve a classified step to the value passed to the next continuation.

    Nested test cases record their assertions on ``asserter`` and are fully
    finished, including their own chain, before this returns.
    """
    if step.kind is StepKind.TEST_CASE:
        return await step.value.execute_nested(asserter)
    if step.kind is StepKind.AWAITABLE:
        return await step.value
    return step.value
