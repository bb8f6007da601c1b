"""Apply file-system commands to an in-memory file collection."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from .models import (
    FileRecord,
    FileSystemCommand,
    SyncResult,
    SyncStats,
    file_name_from_path,
    new_file_id,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "text"


class FileSynchronizer:
    """Merge create/update/delete/rename commands into a file collection.

    Commands are applied in order and independently of each other. Missing
    targets are ignored so every command is safe to replay.
    """

    def apply(
        self,
        files: Iterable[FileRecord],
        commands: Sequence[FileSystemCommand],
    ) -> SyncResult:
        """Return the collection produced by applying ``commands`` to ``files``.

        Args:
            files: Current collection. Records are copied, never mutated.
            commands: Commands to apply, in order.

        Returns:
            SyncResult: Updated records (unique by path) and per-type counts.
        """

        updated = [record.model_copy() for record in files]

        for command in commands:
            if command.type in ("create", "update"):
                self._upsert(updated, command)
            elif command.type == "delete":
                self._delete(updated, command)
            elif command.type == "rename":
                self._rename(updated, command)

        stats = self.compute_stats(commands)
        LOGGER.debug(
            "Applied %d command(s); collection now holds %d file(s).",
            stats.total_changes,
            len(updated),
        )
        return SyncResult(files=updated, stats=stats)

    @staticmethod
    def compute_stats(commands: Sequence[FileSystemCommand]) -> SyncStats:
        """Count commands by type."""

        counts = {"create": 0, "update": 0, "delete": 0, "rename": 0}
        for command in commands:
            counts[command.type] += 1
        return SyncStats(
            files_added=counts["create"],
            files_modified=counts["update"],
            files_deleted=counts["delete"],
            files_renamed=counts["rename"],
            total_changes=sum(counts.values()),
        )

    # ------------------------------------------------------------------ #
    # Helpers                                                            #
    # ------------------------------------------------------------------ #

    def _upsert(self, files: list[FileRecord], command: FileSystemCommand) -> None:
        index = _index_of(files, command.path)
        if index is not None:
            existing = files[index]
            changes: dict[str, object] = {}
            if command.content is not None:
                changes["content"] = command.content
            if command.language:
                changes["language"] = command.language
            files[index] = existing.model_copy(update=changes)
            return

        files.append(
            FileRecord(
                id=new_file_id(),
                name=file_name_from_path(command.path),
                path=command.path,
                content=command.content or "",
                language=command.language or DEFAULT_LANGUAGE,
                is_new=True,
            )
        )

    def _delete(self, files: list[FileRecord], command: FileSystemCommand) -> None:
        index = _index_of(files, command.path)
        if index is None:
            LOGGER.debug("Delete skipped; %s is not in the collection.", command.path)
            return
        del files[index]

    def _rename(self, files: list[FileRecord], command: FileSystemCommand) -> None:
        if not command.new_path:
            LOGGER.debug("Rename of %s skipped; no destination given.", command.path)
            return
        index = _index_of(files, command.path)
        if index is None:
            LOGGER.debug("Rename skipped; %s is not in the collection.", command.path)
            return

        record = files.pop(index)
        occupant = _index_of(files, command.new_path)
        if occupant is not None:
            LOGGER.info("Rename of %s replaces existing %s.", command.path, command.new_path)
            del files[occupant]
        files.append(
            record.model_copy(
                update={"path": command.new_path, "name": file_name_from_path(command.new_path)}
            )
        )


def create_commands(files: Iterable[FileRecord]) -> list[FileSystemCommand]:
    """Translate records into ``create`` commands carrying their content and language."""

    return [
        FileSystemCommand(
            type="create",
            path=record.path,
            content=record.content,
            language=record.language,
        )
        for record in files
    ]


def _index_of(files: Sequence[FileRecord], path: str) -> int | None:
    for index, record in enumerate(files):
        if record.path == path:
            return index
    return None


__all__ = ["DEFAULT_LANGUAGE", "FileSynchronizer", "create_commands"]
