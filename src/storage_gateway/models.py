"""Wire models exchanged over the storage API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class FileInfo(BaseModel):
    """Metadata of one stored file, as reported by the storage engine."""

    model_config = ConfigDict(frozen=True)

    filesystem: str
    path: str
    file_id: str
    size: int
    checksum: str
    created: datetime


class BatchCleanupRequest(BaseModel):
    """Delete one path from many filesystems.

    Duplicate filesystem names collapse; order is irrelevant.
    """

    path: str = Field(min_length=1)
    filesystems: set[str] = Field(default_factory=set)


class BatchCleanupResult(BaseModel):
    """Per-filesystem outcome of a batch cleanup.

    ``succeeded`` and ``failed`` are disjoint and together cover every
    requested filesystem.
    """

    succeeded: set[str] = Field(default_factory=set)
    failed: dict[str, str] = Field(default_factory=dict)

    @property
    def filesystems(self) -> set[str]:
        return self.succeeded | set(self.failed)

    @field_serializer("succeeded")
    def _serialize_succeeded(self, succeeded: set[str]) -> list[str]:
        return sorted(succeeded)

    @field_serializer("failed")
    def _serialize_failed(self, failed: dict[str, str]) -> dict[str, str]:
        return dict(sorted(failed.items()))
