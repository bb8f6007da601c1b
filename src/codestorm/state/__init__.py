"""Workspace persistence helpers for the Codestorm CLI."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from pydantic import ValidationError

from codestorm.files.models import FileRecord

from .errors import MissingStateError, StateError
from .models import WorkspaceState

LOGGER = logging.getLogger(__name__)

DEFAULT_STATE_DIRNAME = ".codestorm"
STATE_FILENAME = "state.json"
LOG_FILENAME = "codestorm.log"


class WorkspaceRepository:
    """Manage the persistence of workspace state."""

    def __init__(self, base_dirname: str = DEFAULT_STATE_DIRNAME) -> None:
        """Initialize the repository with an optional base directory name.

        Args:
            base_dirname: Name of the directory that stores workspace state.
        """
        self._base_dirname = base_dirname

    @property
    def base_dirname(self) -> str:
        """Return the directory name used for workspace metadata."""
        return self._base_dirname

    def exists(self, root: Path) -> bool:
        """Return True when ``root`` holds saved state."""
        return (self.state_dir(root) / STATE_FILENAME).exists()

    def load(self, root: Path) -> WorkspaceState:
        """Load workspace state for the given root.

        Args:
            root: Root path of the workspace.

        Returns:
            WorkspaceState: Deserialized state model for the workspace.

        Raises:
            MissingStateError: If no state file is present.
            StateError: If stored data cannot be parsed.
        """
        state_path = self.state_dir(root) / STATE_FILENAME
        if not state_path.exists():
            raise MissingStateError(f"No workspace state found at {state_path}")

        try:
            data = json.loads(state_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise StateError(f"Invalid workspace state data: {exc}") from exc

        try:
            return WorkspaceState.model_validate(data)
        except ValidationError as exc:
            raise StateError(f"Workspace state does not match the expected schema: {exc}") from exc

    def save(self, root: Path, state: WorkspaceState) -> Path:
        """Persist workspace state for the given root.

        Args:
            root: Root path of the workspace.
            state: State model to serialize to disk.

        Returns:
            Path: Location of the written state file.
        """
        directory = self.initialize(root)
        now = datetime.now(timezone.utc)
        state.updated_at = now
        if state.created_at.tzinfo is None:
            state.created_at = state.created_at.replace(tzinfo=timezone.utc)
        payload = state.model_dump(mode="json")
        state_path = directory / STATE_FILENAME
        state_path.write_text(json.dumps(payload, indent=2, sort_keys=False), encoding="utf-8")
        LOGGER.debug("Saved workspace state with %d file(s) to %s.", len(state.files), state_path)
        return state_path

    def initialize(self, root: Path) -> Path:
        """Prepare the metadata directory for a workspace.

        Args:
            root: Root path of the workspace.

        Returns:
            Path: Directory containing the state artifacts.
        """
        directory = self.state_dir(root)
        directory.mkdir(parents=True, exist_ok=True)
        (directory / LOG_FILENAME).touch(exist_ok=True)
        return directory

    def export_files(self, root: Path, files: Iterable[FileRecord]) -> list[Path]:
        """Write every record under ``root``.

        Args:
            root: Destination directory.
            files: Records to write; their paths are relative to ``root``.

        Returns:
            list[Path]: Paths written, in input order.

        Raises:
            StateError: If a record path resolves outside ``root``.
        """
        base = root.resolve()
        targets: list[tuple[Path, FileRecord]] = []
        for record in files:
            target = (base / record.path.lstrip("/")).resolve()
            if base not in target.parents:
                raise StateError(f"Refusing to export {record.path}: it escapes {root}.")
            targets.append((target, record))

        written: list[Path] = []
        for target, record in targets:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(record.content, encoding="utf-8")
            written.append(target)
        LOGGER.info("Exported %d file(s) to %s.", len(written), base)
        return written

    def state_dir(self, root: Path) -> Path:
        """Return the path to the state directory for a workspace."""
        return root / self._base_dirname


__all__ = [
    "DEFAULT_STATE_DIRNAME",
    "LOG_FILENAME",
    "MissingStateError",
    "STATE_FILENAME",
    "StateError",
    "WorkspaceRepository",
    "WorkspaceState",
]
