"""Find which candidate filesystems contain a path."""

import logging
from collections.abc import Sequence

from storage_gateway.core.fanout import describe_error, fan_out
from storage_gateway.engine import StorageEngine
from storage_gateway.exceptions import ContainmentError

logger = logging.getLogger(__name__)


def resolve_containment(
    engine: StorageEngine,
    path: str,
    candidates: Sequence[str],
    *,
    max_workers: int = 8,
) -> list[str]:
    """Return the candidates that contain ``path``, in candidate order.

    Each candidate is checked independently with ``engine.exists``. A
    candidate that doesn't hold the path is simply left out; a candidate
    whose check raises makes the whole query fail.

    Args:
        engine: Storage engine to query.
        path: Path to look for.
        candidates: Ordered filesystem names to check.
        max_workers: Upper bound on concurrent existence checks.

    Returns:
        The sub-sequence of ``candidates`` containing the path.

    Raises:
        ContainmentError: If any existence check failed. Its ``failures``
            attribute names every failed candidate.

    Example:
        resolve_containment(engine, "/x.jar", ["r1", "r2", "r3"]) -> ["r2"]
    """
    candidates = list(candidates)
    results = fan_out(
        lambda filesystem: engine.exists(filesystem, path),
        candidates,
        max_workers=max_workers,
        name="containment",
    )

    failures = {r.target: describe_error(r.error) for r in results if r.failed}
    if failures:
        logger.error(
            "Containment check failed",
            extra={"path": path, "failures": failures},
        )
        raise ContainmentError(failures)

    return [r.target for r in results if r.value]
