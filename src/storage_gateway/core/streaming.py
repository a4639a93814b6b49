"""Incremental JSON serialization of results.

Results are encoded piece by piece with ``json.JSONEncoder.iterencode`` and
flushed in bounded chunks, so a large listing never exists as one encoded
buffer. The writer counts every byte it hands to the sink.

Partial failure: if encoding fails midway, bytes already delivered cannot be
taken back. The error propagates to the caller; for an HTTP response the
status line and headers are committed by then, so the client sees a
truncated body.
"""

import json
import logging
from collections.abc import Iterator
from typing import Any, BinaryIO

from fastapi.encoders import jsonable_encoder

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


class StreamingResultWriter:
    """Serialize one result as JSON into a sink, counting bytes written.

    A writer belongs to a single response; ``bytes_written`` accumulates
    across calls.

    Attributes:
        chunk_size: Encoded bytes buffered before each flush.
        bytes_written: Total bytes delivered so far.
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self.chunk_size = chunk_size
        self.bytes_written = 0
        self._encoder = json.JSONEncoder(ensure_ascii=False, separators=(",", ":"))

    def iter_chunks(self, value: Any) -> Iterator[bytes]:
        """Yield the JSON encoding of ``value`` in chunks of about chunk_size bytes.

        A chunk is counted once the consumer asks for the next one, i.e.
        after it has been taken.
        """
        try:
            pending: list[bytes] = []
            pending_size = 0
            for piece in self._encoder.iterencode(jsonable_encoder(value)):
                data = piece.encode("utf-8")
                pending.append(data)
                pending_size += len(data)
                if pending_size >= self.chunk_size:
                    chunk = b"".join(pending)
                    pending, pending_size = [], 0
                    yield chunk
                    self.bytes_written += len(chunk)
            if pending:
                chunk = b"".join(pending)
                yield chunk
                self.bytes_written += len(chunk)
        finally:
            logger.debug("Wrote result", extra={"bytes_written": self.bytes_written})

    def write(self, sink: BinaryIO, value: Any) -> int:
        """Encode ``value`` into ``sink``.

        Returns:
            Number of bytes written by this call.
        """
        before = self.bytes_written
        for chunk in self.iter_chunks(value):
            sink.write(chunk)
        return self.bytes_written - before
