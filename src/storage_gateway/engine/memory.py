"""In-memory storage engine.

Keeps every file as bytes in a per-filesystem dict. Directories are implied
by file paths. A filesystem appears on its first write and stays registered,
possibly empty, until purge_empty_filesystems() drops it.
"""

import hashlib
import io
import logging
import threading
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import BinaryIO

from storage_gateway.models import FileInfo

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

FILETYPE_FILE = "file"
FILETYPE_DIR = "dir"
FILETYPE_ALL = "all"


@dataclass(frozen=True)
class _StoredFile:
    data: bytes
    info: FileInfo


def normalize_path(path: str) -> str:
    """Normalize a path relative to a filesystem root.

    Empty and "." segments are dropped, so "/", "" and "./" all name the
    root (returned as ""). ".." is refused rather than resolved.

    Raises:
        ValueError: If the path contains a ".." segment.
    """
    parts = [p for p in path.split("/") if p and p != "."]
    if ".." in parts:
        raise ValueError(f"Path traversal is not allowed: {path!r}")
    return "/".join(parts)


class MemoryStorageEngine:
    """Thread-safe StorageEngine keeping all content in process memory."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._filesystems: dict[str, dict[str, _StoredFile]] = {}

    def write_file(
        self, filesystem: str, path: str, stream: BinaryIO, timeout: float | None = None
    ) -> None:
        key = normalize_path(path)
        if not filesystem:
            raise ValueError("Filesystem name must not be empty")
        if not key:
            raise IsADirectoryError(f"Cannot write to the root of [{filesystem}]")

        deadline = time.monotonic() + timeout if timeout is not None else None
        buffer = io.BytesIO()
        digest = hashlib.sha256()
        while chunk := stream.read(CHUNK_SIZE):
            buffer.write(chunk)
            digest.update(chunk)
            if deadline is not None and time.monotonic() > deadline:
                raise TimeoutError(f"Write of [{filesystem}]/{key} exceeded {timeout}s")

        data = buffer.getvalue()
        info = FileInfo(
            filesystem=filesystem,
            path=key,
            file_id=uuid.uuid4().hex,
            size=len(data),
            checksum=digest.hexdigest(),
            created=datetime.now(timezone.utc),
        )
        with self._lock:
            files = self._filesystems.setdefault(filesystem, {})
            if self._is_directory(files, key):
                raise IsADirectoryError(f"[{filesystem}]/{key} is a directory")
            files[key] = _StoredFile(data=data, info=info)

        logger.debug(
            "Stored file",
            extra={"filesystem": filesystem, "path": key, "size": len(data)},
        )

    def open_input_stream(self, filesystem: str, path: str) -> BinaryIO:
        stored = self._get(filesystem, path)
        if stored is None:
            raise FileNotFoundError(f"No such file: [{filesystem}]/{path}")
        return io.BytesIO(stored.data)

    def exists(self, filesystem: str, path: str) -> bool:
        key = normalize_path(path)
        with self._lock:
            files = self._filesystems.get(filesystem)
            if files is None:
                return False
            return key in files or self._is_directory(files, key)

    def delete(self, filesystem: str, path: str) -> bool:
        key = normalize_path(path)
        with self._lock:
            files = self._filesystems.get(filesystem)
            if files is None:
                return False
            if key not in files:
                if self._is_directory(files, key):
                    raise IsADirectoryError(f"[{filesystem}]/{key} is a directory")
                return False
            del files[key]
        return True

    def list(
        self,
        filesystem: str,
        path: str,
        recursive: bool = False,
        filetype: str | None = None,
        limit: int = 0,
    ) -> list[str] | None:
        key = normalize_path(path)
        prefix = f"{key}/" if key else ""
        with self._lock:
            files = self._filesystems.get(filesystem)
            if files is None:
                return None
            relative = [name[len(prefix) :] for name in files if name.startswith(prefix)]

        if not relative:
            return None

        entries: set[str] = set()
        for rel in relative:
            segments = rel.split("/")
            if recursive:
                for depth in range(1, len(segments)):
                    entries.add("/".join(segments[:depth]) + "/")
                entries.add(rel)
            elif len(segments) > 1:
                entries.add(segments[0] + "/")
            else:
                entries.add(rel)

        if filetype == FILETYPE_FILE:
            entries = {e for e in entries if not e.endswith("/")}
        elif filetype == FILETYPE_DIR:
            entries = {e for e in entries if e.endswith("/")}

        result = sorted(entries)
        if limit > 0:
            result = result[:limit]
        return result

    def get_file_info(self, filesystem: str, path: str) -> FileInfo | None:
        stored = self._get(filesystem, path)
        return stored.info if stored is not None else None

    def get_filesystems(self) -> set[str]:
        with self._lock:
            return set(self._filesystems)

    def get_empty_filesystems(self) -> set[str]:
        with self._lock:
            return {name for name, files in self._filesystems.items() if not files}

    def purge_empty_filesystems(self) -> None:
        with self._lock:
            empty = [name for name, files in self._filesystems.items() if not files]
            for name in empty:
                del self._filesystems[name]
        logger.info("Purged empty filesystems", extra={"count": len(empty)})

    def _get(self, filesystem: str, path: str) -> _StoredFile | None:
        key = normalize_path(path)
        with self._lock:
            return self._filesystems.get(filesystem, {}).get(key)

    @staticmethod
    def _is_directory(files: dict[str, _StoredFile], key: str) -> bool:
        prefix = f"{key}/" if key else ""
        return any(name.startswith(prefix) for name in files) if files else False
