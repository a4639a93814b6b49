"""Gateway facade over a storage engine.

Composes route parsing, containment resolution, batch cleanup and the
engine primitives, and turns engine results into terminal Outcomes. No
engine exception leaves this module unconverted: per-file operations return
ERROR/REJECTED outcomes, the remaining operations raise gateway exceptions.
"""

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from functools import partial
from typing import Any, BinaryIO, TypeVar

from storage_gateway.core.cleanup import cleanup_filesystems
from storage_gateway.core.containment import resolve_containment
from storage_gateway.core.fanout import describe_error
from storage_gateway.core.outcomes import Outcome, RejectionCause
from storage_gateway.core.parser import parse_route
from storage_gateway.core.timeouts import parse_timeout
from storage_gateway.engine import StorageEngine
from storage_gateway.exceptions import (
    BadInputError,
    EngineError,
    NotFoundError,
    StorageGatewayError,
)
from storage_gateway.models import BatchCleanupRequest, BatchCleanupResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StorageGateway:
    """Request-facing operations of the storage service.

    Holds no per-request state; one instance serves all concurrent requests.

    Args:
        engine: The storage engine doing the actual work.
        max_workers: Fan-out bound for cleanup and containment.
        default_write_timeout: Seconds applied to writes that don't carry
            their own timeout. None means unbounded.
    """

    def __init__(
        self,
        engine: StorageEngine,
        *,
        max_workers: int = 8,
        default_write_timeout: float | None = None,
    ) -> None:
        self.engine = engine
        self.max_workers = max_workers
        self.default_write_timeout = default_write_timeout

    def write(
        self,
        filesystem: str,
        path: str,
        stream: BinaryIO,
        timeout: str | None = None,
    ) -> Outcome:
        """Store ``stream`` at [filesystem]/path.

        The gateway owns ``stream`` from here on and closes it once the engine
        is done reading. After a timeout that is when the abandoned engine
        call returns, not when this method does.

        Returns:
            ACCEPTED, or REJECTED with a BAD_INPUT, TIMEOUT or ENGINE cause.
        """
        logger.info(
            "Write",
            extra={"filesystem": filesystem, "path": path, "timeout": timeout},
        )
        try:
            seconds = parse_timeout(timeout)
        except BadInputError as exc:
            stream.close()
            return Outcome.rejected(str(exc), RejectionCause.BAD_INPUT)

        if seconds is None:
            seconds = self.default_write_timeout

        try:
            if seconds is None:
                with stream:
                    self.engine.write_file(filesystem, path, stream, None)
            else:
                self._write_bounded(filesystem, path, stream, seconds)
        except (TimeoutError, FutureTimeoutError):
            reason = f"Write of [{filesystem}]/{path} timed out after {seconds}s"
            logger.warning(reason, extra={"filesystem": filesystem, "path": path})
            return Outcome.rejected(reason, RejectionCause.TIMEOUT)
        except ValueError as exc:
            return Outcome.rejected(str(exc), RejectionCause.BAD_INPUT)
        except Exception as exc:
            logger.error(
                "Write failed",
                extra={"filesystem": filesystem, "path": path},
                exc_info=True,
            )
            return Outcome.rejected(describe_error(exc), RejectionCause.ENGINE)
        return Outcome.accepted()

    def _write_bounded(
        self, filesystem: str, path: str, stream: BinaryIO, seconds: float
    ) -> None:
        # The engine call keeps running in the background after a timeout;
        # only the wait is bounded.
        pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="write")
        try:
            future = pool.submit(self.engine.write_file, filesystem, path, stream, seconds)
            future.add_done_callback(lambda _: stream.close())
            try:
                future.result(timeout=seconds)
            except FutureTimeoutError:
                future.add_done_callback(partial(_log_late_write, filesystem, path))
                raise
        finally:
            pool.shutdown(wait=False)

    def read(self, filesystem: str, path: str) -> Outcome:
        """Open [filesystem]/path for reading.

        Returns:
            FOUND with a binary stream the caller must close, NOT_FOUND, or ERROR.
        """
        logger.info("Get", extra={"filesystem": filesystem, "path": path})
        try:
            stream = self.engine.open_input_stream(filesystem, path)
        except FileNotFoundError:
            return Outcome.not_found()
        except Exception as exc:
            logger.error(
                "Read failed",
                extra={"filesystem": filesystem, "path": path},
                exc_info=True,
            )
            return Outcome.error(describe_error(exc))
        return Outcome.found(stream)

    def delete(self, filesystem: str, path: str) -> Outcome:
        """Delete [filesystem]/path. A missing file counts as removed."""
        logger.info("Delete", extra={"filesystem": filesystem, "path": path})
        try:
            removed = self.engine.delete(filesystem, path)
        except FileNotFoundError:
            removed = False
        except Exception as exc:
            logger.error(
                "Delete failed",
                extra={"filesystem": filesystem, "path": path},
                exc_info=True,
            )
            return Outcome.error(describe_error(exc))
        logger.debug(
            "Delete done",
            extra={"filesystem": filesystem, "path": path, "existed": removed},
        )
        return Outcome.removed()

    def list_directory(
        self,
        raw_path: str,
        *,
        recursive: bool = False,
        filetype: str | None = None,
        limit: int = 0,
    ) -> Outcome:
        """List a browse route.

        A blank route lists every filesystem, each suffixed with "/".
        Otherwise the route is split into filesystem and path and the
        engine lists that directory.

        Returns:
            LISTED with a list of entry names, NOT_FOUND, or ERROR.
        """
        logger.info("List", extra={"raw_path": raw_path})
        route = parse_route(raw_path)
        try:
            if route.is_root_listing:
                return Outcome.listed([f"{name}/" for name in self.filesystems()])

            filesystem, path = route.components()
            logger.debug("List directory", extra={"filesystem": filesystem, "path": path})
            entries = self.engine.list(filesystem, path, recursive, filetype, limit)
        except Exception as exc:
            logger.error("List failed", extra={"raw_path": raw_path}, exc_info=True)
            return Outcome.error(describe_error(exc))

        if entries is None:
            return Outcome.not_found()
        return Outcome.listed(list(entries))

    def info(self, filesystem: str, path: str) -> Outcome:
        """Fetch metadata of [filesystem]/path.

        Returns:
            FOUND with the engine's FileInfo, or NOT_FOUND.

        Raises:
            EngineError: If the engine fails.
        """
        try:
            result = self._call(
                f"get info of [{filesystem}]/{path}",
                self.engine.get_file_info,
                filesystem,
                path,
            )
        except NotFoundError:
            return Outcome.not_found()
        logger.info("File info", extra={"filesystem": filesystem, "path": path})
        if result is None:
            return Outcome.not_found()
        return Outcome.found(result)

    def filesystems_containing(self, path: str, candidates: Sequence[str]) -> list[str]:
        """Return the candidates holding ``path``, in candidate order.

        Raises:
            ContainmentError: If the check failed for any candidate.
        """
        logger.info(
            "Get filesystems containing path",
            extra={"path": path, "candidates": list(candidates)},
        )
        return resolve_containment(
            self.engine, path, candidates, max_workers=self.max_workers
        )

    def cleanup(self, request: BatchCleanupRequest) -> BatchCleanupResult:
        """Delete one path from every requested filesystem.

        Never raises for a single filesystem's failure; see BatchCleanupResult.
        """
        logger.info(
            "Batch cleanup",
            extra={"path": request.path, "filesystems": sorted(request.filesystems)},
        )
        result = cleanup_filesystems(
            self.engine,
            request.path,
            request.filesystems,
            max_workers=self.max_workers,
        )
        logger.debug("Batch cleanup result", extra={"result": result.model_dump()})
        return result

    def filesystems(self) -> list[str]:
        return sorted(self._call("list filesystems", self.engine.get_filesystems))

    def empty_filesystems(self) -> list[str]:
        return sorted(self._call("list empty filesystems", self.engine.get_empty_filesystems))

    def purge_empty_filesystems(self) -> None:
        logger.info("Purge empty filesystems")
        self._call("purge empty filesystems", self.engine.purge_empty_filesystems)

    def _call(self, action: str, func: Callable[..., T], *args: Any) -> T:
        try:
            return func(*args)
        except StorageGatewayError:
            raise
        except FileNotFoundError as exc:
            raise NotFoundError(f"Failed to {action}: {describe_error(exc)}") from exc
        except Exception as exc:
            logger.error("Engine call failed", extra={"action": action}, exc_info=True)
            raise EngineError(f"Failed to {action}: {describe_error(exc)}") from exc




def _log_late_write(filesystem: str, path: str, future: Future) -> None:
    error = future.exception()
    extra = {"filesystem": filesystem, "path": path}
    if error is not None:
        logger.warning("Timed-out write failed", extra=extra, exc_info=error)
    else:
        logger.warning("Timed-out write completed after the client was answered", extra=extra)
