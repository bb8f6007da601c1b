"""File collection data models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Literal, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

CommandType = Literal["create", "update", "delete", "rename"]


def new_file_id() -> str:
    """Return an opaque identifier for a file record."""
    return f"file-{uuid4().hex[:12]}"


def file_name_from_path(path: str) -> str:
    """Return the final segment of a slash-separated path."""
    return path.rstrip("/").split("/")[-1]


class FileRecord(BaseModel):
    """One logical file in an in-memory collection.

    Attributes:
        id: Opaque handle; stable across updates and renames.
        name: Final path segment.
        path: Identity of the record within a collection.
        content: Full text content.
        language: Language label (``typescript``, ``css``...), if known.
        timestamp: Creation time of the record.
        is_new: Whether the record was produced during the current session.
    """

    id: str = Field(default_factory=new_file_id)
    name: str
    path: str
    content: str = ""
    language: Optional[str] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    is_new: bool = False


class FileSystemCommand(BaseModel):
    """Instruction to create, update, delete, or rename a record.

    Attributes:
        type: Kind of operation.
        path: Path of the targeted record.
        content: New content for create/update commands.
        new_path: Destination path for rename commands.
        language: Language label for newly created records.
    """

    type: CommandType
    path: str
    content: Optional[str] = None
    new_path: Optional[str] = None
    language: Optional[str] = None


class SyncStats(BaseModel):
    """Counts of applied commands partitioned by type."""

    files_added: int = 0
    files_modified: int = 0
    files_deleted: int = 0
    files_renamed: int = 0
    total_changes: int = 0


class SyncResult(BaseModel):
    """Outcome of applying a batch of commands."""

    files: List[FileRecord] = Field(default_factory=list)
    stats: SyncStats = Field(default_factory=SyncStats)


__all__ = [
    "CommandType",
    "FileRecord",
    "FileSystemCommand",
    "SyncResult",
    "SyncStats",
    "file_name_from_path",
    "new_file_id",
]
