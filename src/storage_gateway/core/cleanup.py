"""Delete one path from many filesystems with per-filesystem reporting."""

import logging
from collections.abc import Iterable

from storage_gateway.core.fanout import describe_error, fan_out
from storage_gateway.engine import StorageEngine
from storage_gateway.models import BatchCleanupResult

logger = logging.getLogger(__name__)


def cleanup_filesystems(
    engine: StorageEngine,
    path: str,
    filesystems: Iterable[str],
    *,
    max_workers: int = 8,
) -> BatchCleanupResult:
    """Delete ``path`` from every filesystem and aggregate the outcomes.

    A filesystem succeeds when the engine removed the file or the file was
    already absent (False or FileNotFoundError), so repeating a cleanup is
    harmless. Anything else the engine raises marks that filesystem failed
    with the exception message; the remaining filesystems are still processed.

    Args:
        engine: Storage engine to delete from.
        path: Path to delete.
        filesystems: Target filesystems. Duplicates collapse.
        max_workers: Upper bound on concurrent deletions.

    Returns:
        A BatchCleanupResult whose succeeded and failed sets partition the
        deduplicated filesystems.
    """
    targets = sorted(set(filesystems))

    def _delete(filesystem: str) -> bool:
        try:
            return engine.delete(filesystem, path)
        except FileNotFoundError:
            return False

    results = fan_out(
        _delete,
        targets,
        max_workers=max_workers,
        name="cleanup",
    )

    result = BatchCleanupResult()
    for task in results:
        if not task.failed:
            result.succeeded.add(task.target)
            continue
        reason = describe_error(task.error)
        result.failed[task.target] = reason
        logger.warning(
            "Cleanup failed for filesystem",
            extra={"filesystem": task.target, "path": path, "reason": reason},
        )

    logger.debug(
        "Batch cleanup done",
        extra={
            "path": path,
            "succeeded": len(result.succeeded),
            "failed": len(result.failed),
        },
    )
    return result
