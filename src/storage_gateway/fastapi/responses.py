"""Mapping of gateway outcomes and errors to HTTP responses."""

from collections.abc import Iterator
from typing import Any, BinaryIO

from fastapi import Response
from fastapi.responses import JSONResponse, StreamingResponse

from storage_gateway.core.outcomes import Outcome, OutcomeKind, RejectionCause
from storage_gateway.core.streaming import DEFAULT_CHUNK_SIZE, StreamingResultWriter

JSON_MEDIA_TYPE = "application/json"
OCTET_STREAM_MEDIA_TYPE = "application/octet-stream"

_REJECTION_STATUS = {
    RejectionCause.BAD_INPUT: 400,
    RejectionCause.TIMEOUT: 408,
    RejectionCause.ENGINE: 500,
}


def error_response(status_code: int, message: str, **details: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message, **details})


def json_stream_response(value: Any, chunk_size: int = DEFAULT_CHUNK_SIZE) -> StreamingResponse:
    """Stream ``value`` as JSON without building the whole body up front."""
    writer = StreamingResultWriter(chunk_size=chunk_size)
    return StreamingResponse(writer.iter_chunks(value), media_type=JSON_MEDIA_TYPE)


def content_stream_response(
    stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> StreamingResponse:
    return StreamingResponse(_iter_content(stream, chunk_size), media_type=OCTET_STREAM_MEDIA_TYPE)


def _iter_content(stream: BinaryIO, chunk_size: int) -> Iterator[bytes]:
    try:
        while chunk := stream.read(chunk_size):
            yield chunk
    finally:
        stream.close()


def outcome_response(outcome: Outcome, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Response:
    """Translate a gateway outcome into the response sent to the client.

    ACCEPTED/REMOVED -> 200 empty, FOUND/LISTED -> 200 with body,
    NOT_FOUND -> 404, REJECTED -> 400/408/500 by cause, ERROR -> 500.
    """
    match outcome.kind:
        case OutcomeKind.ACCEPTED | OutcomeKind.REMOVED:
            return Response(status_code=200)
        case OutcomeKind.FOUND if hasattr(outcome.value, "read"):
            return content_stream_response(outcome.value, chunk_size)
        case OutcomeKind.FOUND | OutcomeKind.LISTED:
            return json_stream_response(outcome.value, chunk_size)
        case OutcomeKind.NOT_FOUND:
            return Response(status_code=404)
        case OutcomeKind.REJECTED:
            cause = outcome.cause or RejectionCause.ENGINE
            return error_response(_REJECTION_STATUS[cause], outcome.reason or "Rejected")
        case _:
            return error_response(500, outcome.reason or "Internal storage error")
