"""Endpoint functions of the storage and maintenance APIs.

Handlers stay thin: pull the gateway from app state, call it, and map the
result to a response. Blocking gateway calls run in FastAPI's threadpool
(plain ``def`` handlers) or via run_in_threadpool.
"""

import logging
import tempfile

from fastapi import Body, Depends, Request, Response
from starlette.concurrency import run_in_threadpool
from starlette.requests import ClientDisconnect

from storage_gateway.config import GatewaySettings
from storage_gateway.core.outcomes import Outcome, RejectionCause
from storage_gateway.exceptions import BadInputError
from storage_gateway.fastapi.responses import json_stream_response, outcome_response
from storage_gateway.gateway import StorageGateway
from storage_gateway.models import BatchCleanupRequest

logger = logging.getLogger(__name__)


def get_gateway(request: Request) -> StorageGateway:
    return request.app.state.gateway


def get_gateway_settings(request: Request) -> GatewaySettings:
    return request.app.state.settings


async def put_content(
    filesystem: str,
    path: str,
    request: Request,
    timeout: str | None = None,
    gateway: StorageGateway = Depends(get_gateway),
    settings: GatewaySettings = Depends(get_gateway_settings),
) -> Response:
    """Write the request body to the file at [filesystem]/path."""
    spool = tempfile.SpooledTemporaryFile(max_size=settings.spool_max_size)
    try:
        async for chunk in request.stream():
            spool.write(chunk)
    except ClientDisconnect:
        spool.close()
        logger.warning(
            "Client disconnected during write",
            extra={"filesystem": filesystem, "path": path},
        )
        return outcome_response(
            Outcome.rejected("Client disconnected while sending content", RejectionCause.BAD_INPUT)
        )
    except BaseException:
        spool.close()
        raise

    # The gateway closes the spool once the engine is done with it.
    spool.seek(0)
    outcome = await run_in_threadpool(gateway.write, filesystem, path, spool, timeout)
    return outcome_response(outcome)


def get_content(
    filesystem: str,
    path: str,
    gateway: StorageGateway = Depends(get_gateway),
    settings: GatewaySettings = Depends(get_gateway_settings),
) -> Response:
    """Retrieve a file."""
    return outcome_response(gateway.read(filesystem, path), settings.stream_chunk_size)


def delete_content(
    filesystem: str,
    path: str,
    gateway: StorageGateway = Depends(get_gateway),
) -> Response:
    """Delete a file. Deleting a missing file succeeds."""
    return outcome_response(gateway.delete(filesystem, path))


def browse_filesystems(
    gateway: StorageGateway = Depends(get_gateway),
    settings: GatewaySettings = Depends(get_gateway_settings),
) -> Response:
    """List every filesystem, each suffixed with "/"."""
    return outcome_response(gateway.list_directory(""), settings.stream_chunk_size)


def browse(
    path: str,
    recursive: bool = False,
    filetype: str | None = None,
    limit: int = 0,
    gateway: StorageGateway = Depends(get_gateway),
    settings: GatewaySettings = Depends(get_gateway_settings),
) -> Response:
    """List a directory given as filesystem[/subpath], or every filesystem when empty."""
    outcome = gateway.list_directory(path, recursive=recursive, filetype=filetype, limit=limit)
    return outcome_response(outcome, settings.stream_chunk_size)


def get_file_info(
    filesystem: str,
    path: str,
    gateway: StorageGateway = Depends(get_gateway),
    settings: GatewaySettings = Depends(get_gateway_settings),
) -> Response:
    """Get the metadata of a file."""
    return outcome_response(gateway.info(filesystem, path), settings.stream_chunk_size)


def filesystems_containing(
    path: str,
    candidates: list[str] = Body(...),
    gateway: StorageGateway = Depends(get_gateway),
    settings: GatewaySettings = Depends(get_gateway_settings),
) -> Response:
    """Get the candidate filesystems that contain the path, in candidate order."""
    if not path:
        raise BadInputError("Path must not be empty")
    result = gateway.filesystems_containing(path, candidates)
    return json_stream_response(result, settings.stream_chunk_size)


def cleanup(
    body: BatchCleanupRequest,
    gateway: StorageGateway = Depends(get_gateway),
    settings: GatewaySettings = Depends(get_gateway_settings),
) -> Response:
    """Delete the path from every listed filesystem and report per filesystem."""
    return json_stream_response(gateway.cleanup(body), settings.stream_chunk_size)


def list_filesystems(
    gateway: StorageGateway = Depends(get_gateway),
    settings: GatewaySettings = Depends(get_gateway_settings),
) -> Response:
    """Get all filesystems."""
    return json_stream_response(gateway.filesystems(), settings.stream_chunk_size)


def list_empty_filesystems(
    gateway: StorageGateway = Depends(get_gateway),
    settings: GatewaySettings = Depends(get_gateway_settings),
) -> Response:
    """Get empty filesystems."""
    return json_stream_response(gateway.empty_filesystems(), settings.stream_chunk_size)


def purge_empty_filesystems(gateway: StorageGateway = Depends(get_gateway)) -> Response:
    """Purge empty filesystems."""
    gateway.purge_empty_filesystems()
    return Response(status_code=200)
