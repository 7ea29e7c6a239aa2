"""
Test Case

One HTTP exchange: builds the request from the option set, sends it, reads
the whole body, runs the evaluators in order and then the chained
continuations. The asserter is told the test is done exactly once.
"""

import asyncio
import logging
from datetime import datetime, UTC
from typing import Any, Coroutine, Dict, List, Optional
from urllib.parse import urljoin

import aiohttp

from ..core.config import FalkorConfig, get_config
from ..core.exceptions import ChainAbortedError, ConfigurationError, NetworkError
from ..core.logging import get_logger, log_structured
from ..core.models import HTTPRequest, HTTPResponse, TestState
from . import chain
from .adapter import TestFunction
from .builder import OptionsBuilder
from .options import OptionSet

logger = get_logger(__name__)

_IN_FLIGHT = (TestState.SENT, TestState.BUFFERING, TestState.EVALUATING)


def _describe(error: BaseException) -> str:
    return str(error) or error.__class__.__name__


class TestCase(OptionsBuilder):
    """
    A single request with its expectations.

    Example:
        case = TestCase("http://example.com/").expect_status_code(200)
        await case.set_asserter(asserter).run()
    """

    __test__ = False

    def __init__(self, url: str, config: Optional[FalkorConfig] = None):
        """
        Args:
            url: URL to request, relative URLs are resolved against the base
                URL when the request is sent
            config: Configuration to use instead of the process-wide one
        """
        self.url = url
        self.options = OptionSet()
        self.state = TestState.IDLE
        self.request: Optional[HTTPRequest] = None
        self.response: Optional[HTTPResponse] = None

        self._config = config
        self._asserter: Any = None
        self._continuations: List[chain.Continuation] = []
        self._timeout: Optional[float] = None
        self._dump = False
        self._dump_body = False

    @property
    def config(self) -> FalkorConfig:
        return self._config if self._config is not None else get_config()

    def set_asserter(self, asserter: Any) -> "TestCase":
        """
        Sets the object receiving assertions, failures and the final done().
        See falkor.asserter.AsserterProtocol for the expected interface.
        """
        self._asserter = asserter
        return self

    def dump(self, dump_body: bool = False) -> "TestCase":
        """Logs the request and response, and optionally the response body."""
        self._dump = True
        self._dump_body = bool(dump_body)
        return self

    def with_timeout(self, seconds: float) -> "TestCase":
        """Bounds everything from sending the request to the end of the chain."""
        if seconds <= 0:
            raise ConfigurationError(f"Timeout must be positive, got {seconds}")
        self._timeout = seconds
        return self

    def then(self, fn: chain.Continuation) -> "TestCase":
        """
        Adds a continuation run after the evaluators.

        The first continuation receives the response, each later one the value
        the previous produced. A continuation may return another test case (it
        is run with this test's asserter), an awaitable (it is awaited) or a
        plain value.
        """
        self._continuations.append(fn)
        return self

    def to_test_function(self) -> TestFunction:
        """Returns the callable form that takes an asserter."""
        return TestFunction(self)

    def resolve_url(self) -> str:
        base_url = self.config.base_url
        return urljoin(base_url, self.url) if base_url else self.url

    def run(self) -> Coroutine[Any, Any, None]:
        """
        Starts the test.

        Returns:
            A coroutine that finishes once done() has been called on the asserter

        Raises:
            ConfigurationError: If no asserter is set or the test is already running
        """
        if self._asserter is None:
            raise ConfigurationError("No asserter object has been configured")
        self._check_startable()
        # Claimed before the coroutine starts so a second run() is refused.
        self.state = TestState.SENT
        return self._run(self._asserter)

    async def execute_nested(self, asserter: Any) -> Any:
        """
        Runs this test as a step of another test's chain. Assertions go to the
        outer asserter, done() is left to the outer test.

        Returns:
            The value produced by the end of this test's own chain
        """
        self._check_startable()
        self.state = TestState.SENT
        self._asserter = asserter
        try:
            return await self._execute_bounded(asserter)
        finally:
            self.state = TestState.DONE

    def _check_startable(self) -> None:
        if self.state in _IN_FLIGHT:
            raise ConfigurationError(f"Test case for {self.url} is already running")

    async def _run(self, asserter: Any) -> None:
        try:
            await self._execute_bounded(asserter)
        except ChainAbortedError:
            # The failure is already on the asserter.
            logger.debug("Test case for %s stopped early", self.url)
        except Exception as e:
            logger.exception("Unexpected error while running %s", self.url)
            asserter.fail(f"Test case for {self.url} raised an unexpected error. {_describe(e)}")
        finally:
            self.state = TestState.DONE
            asserter.done()

    async def _execute_bounded(self, asserter: Any) -> Any:
        if self._timeout is None:
            return await self._execute(asserter)

        task = asyncio.ensure_future(self._execute(asserter))
        try:
            finished, _ = await asyncio.wait({task}, timeout=self._timeout)
        except asyncio.CancelledError:
            task.cancel()
            raise

        if task in finished:
            return task.result()

        # Cancelled but not awaited, the underlying I/O may still linger.
        task.cancel()
        asserter.fail(
            f"Test case for {self.url} timed out after {self._timeout} seconds."
        )
        raise ChainAbortedError(f"Timed out after {self._timeout} seconds")

    async def _execute(self, asserter: Any) -> Any:
        request = HTTPRequest(
            method=self.options.method,
            url=self.resolve_url(),
            headers=self._request_headers(),
            body=self.options.payload,
        )
        self.request = request

        try:
            response = await self._send(request)
        except NetworkError as e:
            logger.warning("Request for %s failed: %s", request.url, e.message)
            asserter.fail(f"Request for {request.url} failed. {e.message}")
            raise ChainAbortedError(e.message) from e

        self.response = response
        self.state = TestState.EVALUATING

        if self._dump:
            self._dump_info(asserter, request, response)

        self._run_evaluators(asserter, response)
        return await self._run_chain(asserter, response)

    def _request_headers(self) -> Dict[str, str]:
        headers = self.options.get_headers()
        # Body-less requests still declare their length.
        if "Content-Length" not in headers and not self.options.payload:
            headers["Content-Length"] = "0"
        return headers

    async def _send(self, request: HTTPRequest) -> HTTPResponse:
        """
        Send the request and read the whole response body.

        Raises:
            NetworkError: If the request could not be completed
        """
        self.state = TestState.SENT
        start_time = datetime.now(UTC)
        log_structured(
            logger, logging.DEBUG, "Sending request", method=request.method, url=request.url
        )

        try:
            timeout = aiohttp.ClientTimeout(total=self.config.request_timeout)

            async with aiohttp.ClientSession(
                timeout=timeout, cookie_jar=aiohttp.DummyCookieJar()
            ) as session:
                async with session.request(
                    method=request.method,
                    url=request.url,
                    headers=request.headers,
                    data=request.body,
                    allow_redirects=False,
                ) as response:
                    self.state = TestState.BUFFERING
                    body = await response.read()

                    end_time = datetime.now(UTC)
                    duration_ms = int((end_time - start_time).total_seconds() * 1000)

                    response_headers: Dict[str, str] = {}
                    for name, value in response.headers.items():
                        name = str(name)
                        if name in response_headers:
                            response_headers[name] += f", {value}"
                        else:
                            response_headers[name] = value

                    log_structured(
                        logger,
                        logging.DEBUG,
                        "Received response",
                        url=request.url,
                        status=response.status,
                        duration_ms=duration_ms,
                    )

                    return HTTPResponse(
                        url=request.url,
                        status_code=response.status,
                        headers=response_headers,
                        body=body if body else None,
                        timestamp=end_time,
                        duration_ms=duration_ms,
                    )

        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise NetworkError(_describe(e), details={"url": request.url})

    def _run_evaluators(self, asserter: Any, response: HTTPResponse) -> None:
        for evaluator in self.options.evaluators:
            try:
                evaluator(asserter, response, self)
            except Exception as e:
                logger.debug("Evaluator %s raised", evaluator.name, exc_info=True)
                asserter.fail(
                    f"Evaluator {evaluator.name} raised {e.__class__.__name__}. {_describe(e)}"
                )

    async def _run_chain(self, asserter: Any, response: HTTPResponse) -> Any:
        value: Any = response
        for continuation in self._continuations:
            try:
                value = await chain.resolve(chain.classify(continuation(value)), asserter)
            except ChainAbortedError:
                raise
            except Exception as e:
                asserter.fail(f"Chained step after {self.url} failed. {_describe(e)}")
                raise ChainAbortedError(_describe(e)) from e
        return value

    def _log(self, asserter: Any, *args: Any) -> None:
        """Uses the asserter's log() when it has one, else the falkor logger."""
        log = getattr(asserter, "log", None)
        if callable(log):
            log(*args)
        else:
            logger.info(" ".join(str(arg) for arg in args))

    def _dump_info(self, asserter: Any, request: HTTPRequest, response: HTTPResponse) -> None:
        self._log(asserter, "  Request URL:", request.url)
        self._log(asserter, "  Request Method:", request.method)
        self._log(asserter, "  Status Code:", response.status_code)

        if request.body:
            self._log(asserter, "  Request Payload:")
            payload = request.body.decode("utf-8", errors="replace")
            self._log(asserter, "    ", payload.replace("\n", "\n     "))

        self._log(asserter, "  Request Headers:")
        for name, value in request.headers.items():
            self._log(asserter, "    ", f"{name}:", value)

        self._log(asserter, "  Response Headers:")
        for name, value in response.headers.items():
            self._log(asserter, "    ", f"{name}:", value)

        if self._dump_body and response.body:
            self._log(asserter, "  Response Body:")
            self._log(asserter, "    ", response.text.replace("\n", "\n     "))

    def __repr__(self) -> str:
        return f"TestCase({self.url!r}, method={self.options.method!r}, state={self.state.value})"
