"""Exception hierarchy for storage gateway errors."""


class StorageGatewayError(Exception):
    """Base exception for all storage gateway errors.

    Catching this exception will catch every error raised by the
    storage_gateway package itself. Failures raised by a storage engine
    are wrapped in EngineError before they leave the gateway.

    Example:
        try:
            gateway.cleanup(path, filesystems)
        except StorageGatewayError as e:
            logger.error(f"Cleanup failed: {e}")
    """


class BadInputError(StorageGatewayError):
    """Raised when a request carries malformed input.

    Examples of bad input:
        - A write timeout that isn't a positive duration: "abc", "-5", "0s"
        - A cleanup request without a path

    Example:
        BadInputError("Invalid timeout 'abc': expected seconds or <n>ms|s|m|h")
    """


class NotFoundError(StorageGatewayError):
    """Raised when the requested file or directory doesn't exist.

    Example:
        NotFoundError("No such file: [maven:hosted:central]/org/foo/1.0/foo.pom")
    """


class EngineError(StorageGatewayError):
    """Raised when the storage engine fails for a reason other than absence.

    The original engine exception is kept as ``__cause__``.

    Example:
        EngineError("Failed to open [fs1]/a/b.txt: disk quota exceeded")
    """


class ContainmentError(EngineError):
    """Raised when one or more candidates of a containment query fail.

    A candidate that simply doesn't hold the path is not a failure; only
    engine errors end up here. ``failures`` maps every failed candidate to
    the reason reported by the engine.

    Example:
        ContainmentError({"r3": "connection reset"})
    """

    def __init__(self, failures: dict[str, str]) -> None:
        self.failures = dict(failures)
        names = ", ".join(sorted(self.failures))
        super().__init__(f"Failed to resolve containment for filesystems: {names}")
