"""FastAPI adapter for statsd datagram ingestion."""

from fastapi import APIRouter, HTTPException, Request, Response

from metricwire.core.encoding.ndjson import encode_records
from metricwire.core.exceptions import ParsingError
from metricwire.core.ports import RecordParserPort, RecordSinkPort


def create_ingest_router(
    parser: RecordParserPort,
    sink: RecordSinkPort | None = None,
    path: str = "/statsd",
) -> APIRouter:
    """Create a FastAPI router with a datagram ingest endpoint.

    Args:
        parser: Parser turning request bodies into records.
        sink: Consumer of decoded records (optional).
        path: Path of the POST endpoint.

    Returns:
        APIRouter with the ingest endpoint configured.
    """
    router = APIRouter()

    @router.post(path)
    async def ingest(request: Request) -> Response:
        """Decode the request body as one datagram and return NDJSON records."""
        body = await request.body()
        try:
            records = parser.parse(body)
        except ParsingError as e:
            raise HTTPException(status_code=400, detail=e.message) from e
        if sink is not None:
            for record in records:
                await sink.write(record)
        return Response(
            content=encode_records(records),
            media_type="application/x-ndjson",
        )

    return router
