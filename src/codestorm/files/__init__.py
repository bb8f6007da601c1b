"""In-memory file collection and synchronization."""

from .commands import describe_commands, language_from_path, parse_terminal_command
from .models import (
    FileRecord,
    FileSystemCommand,
    SyncResult,
    SyncStats,
    file_name_from_path,
    new_file_id,
)
from .synchronizer import DEFAULT_LANGUAGE, FileSynchronizer, create_commands

__all__ = [
    "DEFAULT_LANGUAGE",
    "FileRecord",
    "FileSynchronizer",
    "FileSystemCommand",
    "SyncResult",
    "SyncStats",
    "create_commands",
    "describe_commands",
    "file_name_from_path",
    "language_from_path",
    "new_file_id",
    "parse_terminal_command",
]
