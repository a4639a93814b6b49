"""Storage engine contract consumed by the gateway.

The gateway never touches physical storage itself. Any object satisfying
StorageEngine can be injected into create_app(); MemoryStorageEngine is the
in-process implementation used by default and in tests.
"""

from typing import BinaryIO, Protocol, runtime_checkable

from storage_gateway.engine.memory import MemoryStorageEngine
from storage_gateway.models import FileInfo


@runtime_checkable
class StorageEngine(Protocol):
    """Primitive operations of a path-mapped storage engine.

    Absence is signalled explicitly (FileNotFoundError, False or None as
    documented per method); any other exception is an engine failure.
    """

    def write_file(
        self, filesystem: str, path: str, stream: BinaryIO, timeout: float | None = None
    ) -> None: ...

    def open_input_stream(self, filesystem: str, path: str) -> BinaryIO:
        """Raises FileNotFoundError when the file doesn't exist."""
        ...

    def exists(self, filesystem: str, path: str) -> bool: ...

    def delete(self, filesystem: str, path: str) -> bool:
        """Return True if removed, False if it was already absent."""
        ...

    def list(
        self,
        filesystem: str,
        path: str,
        recursive: bool = False,
        filetype: str | None = None,
        limit: int = 0,
    ) -> list[str] | None:
        """Return None when the directory doesn't exist."""
        ...

    def get_file_info(self, filesystem: str, path: str) -> FileInfo | None: ...

    def get_filesystems(self) -> set[str]: ...

    def get_empty_filesystems(self) -> set[str]: ...

    def purge_empty_filesystems(self) -> None: ...


__all__ = ["MemoryStorageEngine", "StorageEngine"]
