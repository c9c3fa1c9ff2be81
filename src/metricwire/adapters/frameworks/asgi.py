"""ASGI generic adapter for statsd datagram ingestion.

This adapter provides a framework-agnostic ASGI application that can be used
with any ASGI server (uvicorn, hypercorn, daphne) without requiring FastAPI
as a dependency. Each POST body is treated as one datagram.
"""

import json
from collections.abc import Callable, Coroutine
from typing import Any

from metricwire.adapters.logging import log_exception
from metricwire.config import IngestConfig
from metricwire.core.encoding.ndjson import encode_records
from metricwire.core.exceptions import ParsingError
from metricwire.core.ports import RecordParserPort, RecordSinkPort

# ASGI type aliases
Scope = dict[str, Any]
Receive = Callable[[], Coroutine[Any, Any, dict[str, Any]]]
Send = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]
ASGIApp = Callable[[Scope, Receive, Send], Coroutine[Any, Any, None]]


class _BodyTooLarge(Exception):
    pass


class _ClientDisconnected(Exception):
    pass


async def _send_response(send: Send, status: int, content_type: str, body: str) -> None:
    """Send an HTTP response with headers and body.

    Args:
        send: ASGI send callable for writing response.
        status: HTTP status code.
        content_type: Content-Type header value.
        body: Response body as string (will be encoded to bytes).
    """
    # @tra: Adapter.ASGI.SendResponse.Headers
    headers = [(b"content-type", content_type.encode())]
    await send({"type": "http.response.start", "status": status, "headers": headers})
    # @tra: Adapter.ASGI.SendResponse.Body
    await send({"type": "http.response.body", "body": body.encode()})


async def _send_json(send: Send, status: int, payload: dict[str, Any]) -> None:
    await _send_response(send, status, "application/json", json.dumps(payload))


async def _read_body(receive: Receive, limit: int) -> bytes:
    """Read the full request body.

    Args:
        receive: ASGI receive callable.
        limit: Maximum number of bytes accepted.

    Returns:
        The concatenated body.

    Raises:
        _BodyTooLarge: If the body exceeds limit.
        _ClientDisconnected: If the client goes away before the last chunk.
    """
    chunks: list[bytes] = []
    size = 0
    while True:
        message = await receive()
        if message["type"] == "http.disconnect":
            raise _ClientDisconnected
        chunk = message.get("body", b"")
        size += len(chunk)
        if size > limit:
            raise _BodyTooLarge
        chunks.append(chunk)
        if not message.get("more_body", False):
            break
    return b"".join(chunks)


def create_asgi_app(
    parser: RecordParserPort,
    sink: RecordSinkPort | None = None,
    config: IngestConfig | None = None,
) -> ASGIApp:
    """Create an ASGI app accepting datagrams on a single POST endpoint.

    Args:
        parser: Parser turning request bodies into records.
        sink: Consumer of decoded records (optional).
        config: Endpoint path and body size limit.

    Returns:
        ASGI application callable. Successful requests answer with the
        decoded records as NDJSON.
    """
    config = config or IngestConfig()

    async def ingest(receive: Receive, send: Send) -> None:
        try:
            body = await _read_body(receive, config.max_datagram_bytes)
        except _BodyTooLarge:
            await _send_json(send, 413, {"error": "Datagram too large"})
            return
        except _ClientDisconnected:
            # Nobody is left to answer
            return

        # @tra: Adapter.ASGI.Ingest.ParsingError
        try:
            records = parser.parse(body)
        except ParsingError as e:
            await _send_json(
                send,
                400,
                {"error": e.message, "data": e.data.decode("utf-8", errors="replace")},
            )
            return

        if sink is not None:
            for record in records:
                await sink.write(record)
        await _send_response(send, 200, "application/x-ndjson", encode_records(records))

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return

        # @tra: Adapter.ASGI.RoutingUnknownPath
        if scope["path"] != config.path:
            await _send_response(send, 404, "text/plain", "Not Found")
            return
        # @tra: Adapter.ASGI.Ingest.MethodNotAllowed
        if scope["method"] != "POST":
            await _send_response(send, 405, "text/plain", "Method Not Allowed")
            return

        try:
            await ingest(receive, send)
        except Exception:
            log_exception("Error ingesting datagram", path=scope["path"])
            await _send_json(send, 500, {"error": "Internal Server Error"})

    return app
