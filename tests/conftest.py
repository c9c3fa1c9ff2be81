"""Shared test fixtures for all test modules."""

import itertools
from collections.abc import Callable, Iterable
from datetime import datetime, timezone

import pytest

from metricwire.core.models import Record
from metricwire.core.parsers.statsd import StatsdToRecordParser

try:
    import httpx
except ImportError:
    httpx = None


FIXED_TIME = datetime(2023, 12, 11, 13, 6, 40, tzinfo=timezone.utc)


class CollectingSink:
    """Record sink that keeps everything written to it."""

    def __init__(self) -> None:
        self.records: list[Record] = []

    async def write(self, record: Record) -> None:
        self.records.append(record)


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock that always returns FIXED_TIME."""
    return lambda: FIXED_TIME


@pytest.fixture
def sequential_ids() -> Callable[[], str]:
    """Id generator returning record-1, record-2, ..."""
    counter = itertools.count(1)
    return lambda: f"record-{next(counter)}"


@pytest.fixture
def make_parser(
    fixed_clock: Callable[[], datetime], sequential_ids: Callable[[], str]
) -> Callable[..., StatsdToRecordParser]:
    """Factory fixture for deterministic parsers.

    Usage:
        def test_something(make_parser):
            parser = make_parser(rolls=[0.05])
    """

    def _parser(rolls: Iterable[float] = (), **kwargs) -> StatsdToRecordParser:
        values = iter(rolls)
        return StatsdToRecordParser(
            clock=kwargs.pop("clock", fixed_clock),
            random_source=lambda: next(values),
            id_generator=kwargs.pop("id_generator", sequential_ids),
            **kwargs,
        )

    return _parser


@pytest.fixture
def parser(make_parser: Callable[..., StatsdToRecordParser]) -> StatsdToRecordParser:
    """Deterministic parser that fails if it ever rolls for sampling."""
    return make_parser()


@pytest.fixture
def sink() -> CollectingSink:
    """Fixture providing an empty record sink."""
    return CollectingSink()


# === ASGI Test Fixtures ===


@pytest.fixture
def asgi_send_capture():
    """Fixture that returns a send callable and a responses list for capture.

    Returns a tuple of (send_func, responses_list) for recording ASGI messages.
    """

    responses: list[dict[str, object]] = []

    async def send(message: dict[str, object]) -> None:
        """Capture ASGI messages."""
        responses.append(message)

    return send, responses


@pytest.fixture
def asgi_test_client():
    """Factory fixture that creates an httpx.AsyncClient for ASGI testing.

    Returns a callable that accepts an ASGI app and yields a client
    with ASGITransport configured.

    Usage:
        async def test_something(asgi_test_client):
            app = create_asgi_app(parser, sink)
            async with asgi_test_client(app) as client:
                response = await client.post("/statsd", content=b"a:1|c")
    """
    if httpx is None:
        pytest.skip("httpx not installed")

    def _get_client(app):
        """Return an AsyncClient context manager for the given app."""
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        )

    return _get_client
