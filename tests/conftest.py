"""
Pytest configuration and shared fixtures for Falkor tests.
"""

import asyncio
import logging
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, AsyncGenerator, Dict, Generator, List, Optional, Tuple, Union

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from falkor.core.config import set_base_url, set_root_schema_path


FIXTURES_DIR = Path(__file__).parent / "fixtures"


@dataclass
class RecordedRequest:
    """A request received by the fake server."""

    method: str
    path: str
    headers: Any
    body: bytes


@dataclass
class Reply:
    """Canned response for a method and path."""

    status: int = 200
    body: Union[str, bytes] = b""
    headers: Dict[str, str] = field(default_factory=dict)
    delay: float = 0.0


class FakeServer:
    """In-process HTTP server that records requests and replays canned responses."""

    def __init__(self) -> None:
        self.replies: Dict[Tuple[str, str], Reply] = {}
        self.requests: List[RecordedRequest] = []
        self.app = web.Application()
        self.app.router.add_route("*", "/{tail:.*}", self._handle)
        self.server = TestServer(self.app)

    def reply(
        self,
        method: str,
        path: str,
        status: int = 200,
        body: Union[str, bytes] = b"",
        headers: Optional[Dict[str, str]] = None,
        delay: float = 0.0,
    ) -> "FakeServer":
        self.replies[(method.upper(), path)] = Reply(status, body, headers or {}, delay)
        return self

    def url(self, path: str = "/") -> str:
        return str(self.server.make_url(path))

    @property
    def base_url(self) -> str:
        return self.url("/")

    def requests_to(self, path: str) -> List[RecordedRequest]:
        return [request for request in self.requests if request.path == path]

    async def _handle(self, request: web.Request) -> web.Response:
        body = await request.read()
        self.requests.append(
            RecordedRequest(request.method, request.path, request.headers, body)
        )

        reply = self.replies.get((request.method, request.path))
        if reply is None:
            return web.Response(status=404, text="no reply configured")

        if reply.delay:
            await asyncio.sleep(reply.delay)

        body = reply.body.encode("utf-8") if isinstance(reply.body, str) else reply.body
        return web.Response(status=reply.status, body=body, headers=reply.headers)


class RecordingAsserter:
    """
    Asserter double that records every assertion made on it, in order.

    Assertions are kept as dicts with the assertion type, a compact value
    ("403=401" for equal, "True"/"False" for ok) and the message.
    """

    def __init__(self) -> None:
        self.assertions: List[Dict[str, Any]] = []
        self.logs: List[Tuple[Any, ...]] = []
        self.done_count = 0

    def ok(self, value: Any, message: Optional[str] = None) -> None:
        self.assertions.append({"type": "ok", "value": str(bool(value)), "msg": message})

    def equal(self, actual: Any, expected: Any, message: Optional[str] = None) -> None:
        self.assertions.append(
            {"type": "equal", "value": f"{actual}={expected}", "msg": message}
        )

    equals = equal

    def fail(self, message: str) -> None:
        self.assertions.append({"type": "fail", "value": None, "msg": message})

    def done(self) -> None:
        self.done_count += 1

    def log(self, *args: Any) -> None:
        self.logs.append(args)

    @property
    def failures(self) -> List[Dict[str, Any]]:
        return [a for a in self.assertions if a["type"] == "fail"]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding the JSON schema fixtures."""
    return FIXTURES_DIR


@pytest.fixture
def asserter() -> RecordingAsserter:
    """Provide a fresh recording asserter."""
    return RecordingAsserter()


@pytest.fixture
def make_asserter():
    """Factory for additional recording asserters."""
    return RecordingAsserter


@pytest_asyncio.fixture
async def fake_server() -> AsyncGenerator[FakeServer, None]:
    """Provide a running fake HTTP server."""
    server = FakeServer()
    await server.server.start_server()
    yield server
    await server.server.close()


@pytest.fixture(autouse=True)
def reset_global_config() -> Generator[None, None, None]:
    """Tear down process-wide settings after every test."""
    yield
    set_base_url("")
    set_root_schema_path("")


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Drop handlers installed by setup_logging so later tests log normally."""
    yield
    for name in ("falkor", "aiohttp"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)
