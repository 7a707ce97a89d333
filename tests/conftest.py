"""
Shared fixtures for the SS12000 client test suite.

HTTP never leaves the process: every client is built on an
`httpx.MockTransport` whose handler records the outgoing requests and
replays queued responses.
"""

from typing import Any, Callable, Union

import httpx
import pytest
import pytest_asyncio

from ss12000 import SS12000Client

BASE_URL = "https://api.example.se/v2.0"
TOKEN = "test-token-not-real"

Reply = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class Recorder:
    """Captures requests and answers them from a FIFO of canned replies."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.replies: list[Reply] = []

    def queue(self, *replies: Reply) -> None:
        self.replies.extend(replies)

    def handler(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        if not self.replies:
            return httpx.Response(200, json={"data": []})
        reply = self.replies.pop(0)
        if isinstance(reply, httpx.Response):
            return reply
        return reply(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


class ListDiagnostics:
    """Diagnostics sink that keeps events in memory."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str, str, dict[str, Any]]] = []

    def warning(self, event: str, message: str, **context: Any) -> None:
        self.events.append(("warning", event, message, context))

    def error(self, event: str, message: str, **context: Any) -> None:
        self.events.append(("error", event, message, context))

    def names(self, level: str | None = None) -> list[str]:
        return [event for lvl, event, _, _ in self.events if level is None or lvl == level]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def diagnostics() -> ListDiagnostics:
    return ListDiagnostics()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep real SS12000_* variables and the user's .env out of the tests."""

    for key in ("SS12000_BASE_URL", "SS12000_AUTH_TOKEN", "SS12000_TIMEOUT_SECONDS", "SS12000_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest_asyncio.fixture
async def client(recorder, diagnostics):
    """SS12000Client wired to the recorder transport."""

    async with SS12000Client(
        BASE_URL,
        TOKEN,
        transport=httpx.MockTransport(recorder.handler),
        diagnostics=diagnostics,
    ) as instance:
        yield instance
